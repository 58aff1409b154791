"""KubeWizardApp — main Textual application."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from textual.app import App
from textual.binding import Binding

from ..config import WizardConfig
from ..favourites import FavouritesStore
from ..history import HistoryStore
from ..hotkeys import HotkeysStore
from ..kubectl import KubectlClient
from ..outputs import SavedOutputStore
from ..wizard.machine import initial_state
from ..wizard.runner import TaskRunner

logger = logging.getLogger(__name__)

S = TypeVar("S")


def open_store(name: str, factory: Callable[[], S]) -> S | None:
    """Build a store (which loads its file); None when the file cannot be read."""
    try:
        store = factory()
    except (OSError, ValueError) as exc:
        logger.error("Failed to load %s: %s", name, exc)
        return None
    return store


def build_runner(config: WizardConfig) -> TaskRunner:
    return TaskRunner(
        client=KubectlClient(config.kubectl),
        outputs=SavedOutputStore(config.saved_outputs_dir),
        favourites=open_store("favourites", lambda: FavouritesStore(config.favourites_path)),
        history=open_store("history", lambda: HistoryStore(config.history_path, config.history_limit)),
        hotkeys=open_store("hotkeys", lambda: HotkeysStore(config.hotkeys_path)),
        config_path=config.path,
    )


class KubeWizardApp(App):
    """Interactive kubectl command wizard."""

    CSS_PATH = "theme.tcss"
    TITLE = "KUBE WIZARD"
    SUB_TITLE = "kubectl made friendly"

    BINDINGS = [
        Binding("ctrl+c", "quit_app", "Quit", show=False, priority=True),
        Binding("ctrl+q", "quit_app", "Quit", show=True),
    ]

    def __init__(self, config: WizardConfig, runner: TaskRunner | None = None) -> None:
        super().__init__()
        self.config = config
        self.runner = runner or build_runner(config)

    def on_mount(self) -> None:
        from .screens.wizard import WizardScreen

        self.push_screen(WizardScreen(self.runner, initial_state(self.config.default_namespace)))

    def action_quit_app(self) -> None:
        self.exit()
