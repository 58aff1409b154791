"""Events fed to dispatch(): user input and task completions."""

from __future__ import annotations

from dataclasses import dataclass

from ..favourites import Favourite
from ..history import HistoryEntry
from ..hotkeys import Binding
from ..kubectl import CommandResult
from ..outputs import SavedOutputGroup


class Event:
    """Base class for everything dispatch() accepts."""


class UserEvent(Event):
    """Input from the user; ignored while a task is pending."""


class CompletionEvent(Event):
    """Result of exactly one task."""


# ── User input ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Started(UserEvent):
    pass


@dataclass(frozen=True)
class Confirm(UserEvent):
    """Enter on the highlighted entry, or submit of a text field."""

    index: int = 0
    text: str = ""


@dataclass(frozen=True)
class Back(UserEvent):
    pass


@dataclass(frozen=True)
class Toggle(UserEvent):
    index: int = 0


@dataclass(frozen=True)
class Navigate(UserEvent):
    """Left/right paging; -1 or +1."""

    step: int


@dataclass(frozen=True)
class KeyPressed(UserEvent):
    """Shortcut keys (q, d, r, s, h, F1-F12) with the highlighted index."""

    key: str
    index: int = 0


# ── Task completions ─────────────────────────────────────────────


@dataclass(frozen=True)
class NamesLoaded(CompletionEvent):
    names: tuple[str, ...] = ()
    error: str = ""


@dataclass(frozen=True)
class SecretKeysLoaded(CompletionEvent):
    keys: tuple[str, ...] = ()
    error: str = ""


@dataclass(frozen=True)
class CommandExecuted(CompletionEvent):
    result: CommandResult | None = None
    error: str = ""


@dataclass(frozen=True)
class HelpLoaded(CompletionEvent):
    result: CommandResult | None = None
    error: str = ""


@dataclass(frozen=True)
class ConnectivityChecked(CompletionEvent):
    result: CommandResult | None = None
    error: str = ""


@dataclass(frozen=True)
class FavouritesLoaded(CompletionEvent):
    """Snapshot after a load, delete or rename; None when the store is missing."""

    favourites: tuple[Favourite, ...] | None = None
    error: str = ""


@dataclass(frozen=True)
class FavouriteSaved(CompletionEvent):
    favourites: tuple[Favourite, ...] | None = None
    error: str = ""


@dataclass(frozen=True)
class HistoryLoaded(CompletionEvent):
    entries: tuple[HistoryEntry, ...] | None = None
    error: str = ""


@dataclass(frozen=True)
class HotkeysLoaded(CompletionEvent):
    bindings: tuple[Binding, ...] | None = None
    error: str = ""
    show: bool = True


@dataclass(frozen=True)
class HotkeyBound(CompletionEvent):
    key: str = ""
    name: str = ""
    bindings: tuple[Binding, ...] | None = None
    error: str = ""


@dataclass(frozen=True)
class HotkeyUnbound(CompletionEvent):
    key: str = ""
    bindings: tuple[Binding, ...] | None = None
    error: str = ""


@dataclass(frozen=True)
class SavedOutputsLoaded(CompletionEvent):
    """Groups after a load or mutation; groups is None when listing failed."""

    groups: tuple[SavedOutputGroup, ...] | None = None
    error: str = ""


@dataclass(frozen=True)
class SavedOutputRead(CompletionEvent):
    name: str = ""
    content: str = ""
    error: str = ""


@dataclass(frozen=True)
class OutputSaved(CompletionEvent):
    filename: str = ""
    error: str = ""


@dataclass(frozen=True)
class OutputNameRequired(CompletionEvent):
    """No archive is known for the command; ask the user for a name."""


@dataclass(frozen=True)
class ContextsLoaded(CompletionEvent):
    contexts: tuple[str, ...] = ()
    current: str = ""
    error: str = ""


@dataclass(frozen=True)
class ContextSwitched(CompletionEvent):
    name: str = ""
    error: str = ""


@dataclass(frozen=True)
class NamespacesLoaded(CompletionEvent):
    namespaces: tuple[str, ...] = ()
    error: str = ""


@dataclass(frozen=True)
class DefaultNamespaceSet(CompletionEvent):
    namespace: str = ""
    error: str = ""
