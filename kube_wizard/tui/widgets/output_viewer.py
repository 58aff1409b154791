"""OutputViewer — scrollable plain-text display for command output."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widget import Widget
from textual.widgets import Static


class OutputViewer(Widget):
    """Shows kubectl output, help text and saved outputs verbatim."""

    DEFAULT_CSS = """
    OutputViewer {
        background: #0a0e17;
        border: solid #1a3a4a;
        height: 1fr;
    }
    OutputViewer:focus-within {
        border: solid #00ffcc;
    }
    OutputViewer VerticalScroll {
        padding: 0 1;
    }
    OutputViewer #ov-content {
        color: #e0e6f0;
    }
    """

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="ov-scroll"):
            yield Static("", id="ov-content")

    def display_text(self, content: str) -> None:
        try:
            self.query_one("#ov-content", Static).update(Text(content))
            self.query_one("#ov-scroll", VerticalScroll).scroll_home(animate=False)
        except Exception:
            pass

    def focus_content(self) -> None:
        try:
            self.query_one("#ov-scroll", VerticalScroll).focus()
        except Exception:
            pass
