"""kube-wizard TUI — interactive terminal interface for kubectl."""

from __future__ import annotations

from ..config import WizardConfig


def launch_tui(config: WizardConfig) -> int:
    """Launch the kube-wizard TUI application."""
    from .app import KubeWizardApp

    app = KubeWizardApp(config)
    app.run()
    return 0
