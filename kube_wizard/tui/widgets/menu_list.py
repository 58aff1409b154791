"""MenuList — arrow-key navigable list of wizard menu entries."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import OptionList
from textual.widgets.option_list import Option

from ...wizard.menus import MenuEntry, MenuId

_INERT = frozenset({MenuId.PLACEHOLDER, MenuId.SEPARATOR})


def _prompt(entry: MenuEntry) -> Text:
    # Text, not markup: checkbox labels contain "[x]".
    if entry.id in _INERT:
        return Text(entry.label, style="#555e6e")
    prompt = Text(entry.label, style="#e0e6f0")
    if entry.description:
        prompt.append(f"  {entry.description}", style="#8892a4")
    return prompt


class MenuList(Widget):
    """Wraps an OptionList; fires Selected with the entry index on Enter."""

    DEFAULT_CSS = """
    MenuList {
        height: 1fr;
        background: #111827;
    }
    MenuList OptionList {
        height: 1fr;
        background: #111827;
        border: solid #1a3a4a;
    }
    MenuList OptionList:focus {
        border: solid #00ffcc;
    }
    """

    class Selected(Message):
        """Fired when an entry is activated."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._entries: tuple[MenuEntry, ...] = ()

    def compose(self) -> ComposeResult:
        yield OptionList(id="menu-options")

    @property
    def entries(self) -> tuple[MenuEntry, ...]:
        return self._entries

    @property
    def highlighted(self) -> int:
        try:
            value = self.query_one("#menu-options", OptionList).highlighted
        except Exception:
            return 0
        return value if value is not None else 0

    def show(self, entries: tuple[MenuEntry, ...], highlighted: int = 0) -> None:
        """Replace the entries, keeping the cursor on ``highlighted``."""
        options = self.query_one("#menu-options", OptionList)
        if entries != self._entries:
            self._entries = entries
            options.clear_options()
            options.add_options([Option(_prompt(e)) for e in entries])
        if entries:
            options.highlighted = min(max(highlighted, 0), len(entries) - 1)

    def focus_list(self) -> None:
        try:
            self.query_one("#menu-options", OptionList).focus()
        except Exception:
            pass

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.post_message(self.Selected(event.option_index))
