"""kube-wizard: interactive kubectl command wizard."""

__version__ = "0.1.0"
