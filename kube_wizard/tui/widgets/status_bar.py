"""StatusBar — bottom bar showing key hints and the last status line."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Static

_LEVEL_COLORS = {
    "info": "#8892a4",
    "success": "#39ff14",
    "error": "#ff3366",
}


class StatusBar(Widget):
    """Single-line status bar at the bottom of the screen."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: #111827;
        layout: horizontal;
        padding: 0 2;
    }
    StatusBar .hint-label {
        color: #555e6e;
        width: auto;
        padding-right: 2;
    }
    StatusBar .message-label {
        width: 1fr;
    }
    StatusBar .op-label {
        color: #ffaa00;
        width: auto;
    }
    """

    hint: reactive[str] = reactive("")
    message: reactive[str] = reactive("")
    level: reactive[str] = reactive("info")
    operation: reactive[str] = reactive("")

    def compose(self) -> ComposeResult:
        yield Static("", classes="hint-label", id="sb-hint")
        yield Static("", classes="message-label", id="sb-message")
        yield Static("", classes="op-label", id="sb-op")

    def watch_hint(self, value: str) -> None:
        try:
            self.query_one("#sb-hint", Static).update(escape(value))
        except Exception:
            pass

    def watch_message(self, value: str) -> None:
        self._update_message()

    def watch_level(self, value: str) -> None:
        self._update_message()

    def watch_operation(self, value: str) -> None:
        try:
            self.query_one("#sb-op", Static).update(escape(value))
        except Exception:
            pass

    def _update_message(self) -> None:
        color = _LEVEL_COLORS.get(self.level, _LEVEL_COLORS["info"])
        text = f"[{color}]{escape(self.message)}[/]" if self.message else ""
        try:
            self.query_one("#sb-message", Static).update(text)
        except Exception:
            pass
