"""Exception types shared by the stores, the kubectl client and the wizard."""

from __future__ import annotations


class KubeWizardError(Exception):
    """Base class for recoverable kube-wizard errors."""


class KubectlNotFoundError(KubeWizardError):
    """kubectl is not on PATH."""


class ClusterContextError(KubeWizardError):
    """No cluster context resolves, so kubectl commands cannot run."""


class StoreUnavailableError(KubeWizardError):
    """An optional JSON store could not be loaded at startup."""

    def __init__(self, store: str) -> None:
        super().__init__(f"{store} store not available")
        self.store = store


class InvalidNameError(KubeWizardError, ValueError):
    """A user supplied name is empty or unsafe."""


class SavedOutputError(KubeWizardError):
    """Base class for saved output archive failures."""


class SavedOutputNotFoundError(SavedOutputError):
    def __init__(self, name: str) -> None:
        super().__init__(f"saved output '{name}' not found")
        self.name = name


class SavedOutputExistsError(SavedOutputError):
    def __init__(self, name: str) -> None:
        super().__init__(f"saved output '{name}' already exists")
        self.name = name
