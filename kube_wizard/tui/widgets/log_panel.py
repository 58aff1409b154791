"""LogPanel — timestamped history of wizard status lines."""

from __future__ import annotations

from datetime import datetime

from rich.markup import escape
from textual.widgets import RichLog

from ...wizard.state import StatusLevel, StatusLine

_LEVEL_COLORS = {
    StatusLevel.INFO: "#8892a4",
    StatusLevel.SUCCESS: "#39ff14",
    StatusLevel.ERROR: "#ff3366",
}


def format_entry(status: StatusLine, screen: str, when: datetime) -> str:
    """Markup for one line: ``HH:MM:SS <screen> <text>``."""
    parts = [f"[#4a5568]{when:%H:%M:%S}[/]"]
    if screen:
        parts.append(f"[#00ffcc]{escape(screen)}[/]")
    parts.append(f"[{_LEVEL_COLORS[status.level]}]{escape(status.text)}[/]")
    return " ".join(parts)


class LogPanel(RichLog):
    """Every status line the wizard raised, tagged with the screen it came from."""

    DEFAULT_CSS = """
    LogPanel {
        background: #0a0e17;
        border: solid #1a3a4a;
        padding: 0 1;
        height: 6;
    }
    LogPanel:focus {
        border: solid #00ffcc;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(highlight=False, markup=True, wrap=True, **kwargs)

    def record(self, status: StatusLine, screen: str = "", when: datetime | None = None) -> None:
        self.write(format_entry(status, screen, when or datetime.now()))
