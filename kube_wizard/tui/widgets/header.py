"""WizardHeader — top bar with the screen title, context and namespace."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Static


_LOGO = r" KUBE WIZARD "


class WizardHeader(Widget):
    """Three-line header: logo, screen title, context/namespace badge."""

    DEFAULT_CSS = """
    WizardHeader {
        dock: top;
        height: 3;
        background: #111827;
        border-bottom: solid #1a3a4a;
        layout: horizontal;
        padding: 0 2;
    }
    WizardHeader .logo {
        color: #00ffcc;
        text-style: bold;
        width: auto;
        content-align: left middle;
        padding-right: 2;
    }
    WizardHeader .separator {
        color: #1a3a4a;
        width: 1;
        content-align: center middle;
    }
    WizardHeader .title {
        color: #ff00aa;
        text-style: bold;
        width: 1fr;
        content-align: left middle;
        padding-left: 2;
    }
    WizardHeader .cluster {
        color: #00ffcc;
        width: auto;
        content-align: right middle;
    }
    """

    screen_title: reactive[str] = reactive("")
    context_name: reactive[str] = reactive("")
    namespace: reactive[str] = reactive("")

    def compose(self) -> ComposeResult:
        yield Static(_LOGO, classes="logo")
        yield Static("|", classes="separator")
        yield Static("", classes="title", id="header-title")
        yield Static("", classes="cluster", id="header-cluster")

    def watch_screen_title(self, value: str) -> None:
        try:
            self.query_one("#header-title", Static).update(escape(value))
        except Exception:
            pass

    def watch_context_name(self, value: str) -> None:
        self._update_badge()

    def watch_namespace(self, value: str) -> None:
        self._update_badge()

    def _update_badge(self) -> None:
        parts = [p for p in (self.context_name, self.namespace and f"ns:{self.namespace}") if p]
        try:
            label = escape(f"[{' '.join(parts)}]") if parts else ""
            self.query_one("#header-cluster", Static).update(label)
        except Exception:
            pass
