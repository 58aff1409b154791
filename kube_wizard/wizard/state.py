"""Immutable wizard state threaded through dispatch()."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from ..favourites import Favourite
from ..history import HistoryEntry
from ..hotkeys import Binding
from ..outputs import SavedOutputGroup
from .builder import Action, ResourceKind


class Screen(Enum):
    MAIN_MENU = auto()
    RESOURCE_SELECTION = auto()
    ACTION_SELECTION = auto()
    RESOURCE_NAME_SELECTION = auto()
    FLAGS_SELECTION = auto()
    NAMESPACE_INPUT = auto()
    COMMAND_PREVIEW = auto()
    COMMAND_OUTPUT = auto()
    COMMAND_HELP = auto()
    CLUSTER_CONNECTIVITY = auto()
    CUSTOM_COMMAND = auto()
    SECRET_FIELD_SELECTION = auto()
    DELETE_CONFIRMATION = auto()
    FAVOURITES_LIST = auto()
    SAVE_FAVOURITE = auto()
    RENAME_FAVOURITE = auto()
    COMMAND_HISTORY = auto()
    HOTKEYS_LIST = auto()
    HOTKEY_BIND = auto()
    SAVED_OUTPUTS_LIST = auto()
    SAVED_OUTPUT_VERSIONS = auto()
    SAVED_OUTPUT_VIEW = auto()
    SAVE_OUTPUT_NAME = auto()
    RENAME_SAVED_OUTPUT = auto()
    CONTEXTS_NAMESPACES_MENU = auto()
    CONTEXTS_LIST = auto()
    NAMESPACES_LIST = auto()


INPUT_SCREENS = frozenset({
    Screen.NAMESPACE_INPUT,
    Screen.CUSTOM_COMMAND,
    Screen.SAVE_FAVOURITE,
    Screen.RENAME_FAVOURITE,
    Screen.SAVE_OUTPUT_NAME,
    Screen.RENAME_SAVED_OUTPUT,
})

TEXT_SCREENS = frozenset({
    Screen.COMMAND_OUTPUT,
    Screen.COMMAND_HELP,
    Screen.CLUSTER_CONNECTIVITY,
    Screen.SAVED_OUTPUT_VIEW,
    Screen.HOTKEY_BIND,
})


class StatusLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusLine:
    text: str
    level: StatusLevel = StatusLevel.INFO


@dataclass(frozen=True)
class Selections:
    """Choices made so far in the current wizard flow."""

    resource: ResourceKind | None = None
    action: Action | None = None
    target: str = ""
    flags: tuple[str, ...] = ()
    custom_namespace: str = ""
    namespace_required: bool = False
    command: str = ""


@dataclass(frozen=True)
class WizardState:
    screen: Screen = Screen.MAIN_MENU
    previous: Screen = Screen.MAIN_MENU
    selections: Selections = field(default_factory=Selections)
    status: StatusLine | None = None

    # Text shown on output/help/connectivity/view screens.
    output: str = ""

    names: tuple[str, ...] = ()
    secret_keys: tuple[str, ...] = ()

    # None means the store could not be opened.
    favourites: tuple[Favourite, ...] | None = ()
    history: tuple[HistoryEntry, ...] | None = ()
    hotkeys: tuple[Binding, ...] | None = ()

    saved_groups: tuple[SavedOutputGroup, ...] = ()
    saved_loading: bool = False
    selected_base: str = ""
    version_index: int = 0
    selected_output: str = ""
    return_base: str = ""
    return_version_index: int = 0

    rename_target: str = ""
    rename_is_group: bool = False
    rename_favourite_index: int = -1
    hotkey_favourite: Favourite | None = None

    contexts: tuple[str, ...] = ()
    current_context: str = ""
    contexts_error: str = ""
    namespaces: tuple[str, ...] = ()
    namespaces_error: str = ""
    default_namespace: str = ""

    input_value: str = ""
    pending: bool = False
    quit: bool = False

    def group(self, base: str) -> SavedOutputGroup | None:
        for g in self.saved_groups:
            if g.base == base:
                return g
        return None

    @property
    def versions(self) -> tuple[str, ...]:
        group = self.group(self.selected_base)
        return group.versions if group else ()
