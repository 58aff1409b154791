"""Menu entries derived from WizardState.

Handlers in the machine switch on ``MenuEntry.id``; labels are display only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from ..constants import HOTKEY_KEYS
from ..outputs import split_version
from .builder import ACTIONS_BY_KIND, ResourceKind, action_description
from .flags import DONE_LABEL, SEPARATOR_LABEL, checkbox_label, checklist_for
from .state import Screen, WizardState


class MenuId(Enum):
    MAIN_RUN = auto()
    MAIN_CUSTOM = auto()
    MAIN_FAVOURITES = auto()
    MAIN_HISTORY = auto()
    MAIN_SAVED_OUTPUTS = auto()
    MAIN_HOTKEYS = auto()
    MAIN_CONTEXTS = auto()
    MAIN_CONNECTIVITY = auto()
    MAIN_EXIT = auto()
    RESOURCE = auto()
    ACTION = auto()
    TARGET = auto()
    FLAGS_DONE = auto()
    SEPARATOR = auto()
    FLAG = auto()
    PREVIEW_EXECUTE = auto()
    PREVIEW_HELP = auto()
    PREVIEW_SAVE_FAVOURITE = auto()
    PREVIEW_BACK = auto()
    DELETE_CONFIRM = auto()
    DELETE_CANCEL = auto()
    SECRET_FIELD = auto()
    SECRET_CUSTOM = auto()
    FAVOURITE = auto()
    HISTORY_ENTRY = auto()
    HOTKEY = auto()
    SAVED_GROUP = auto()
    SAVED_VERSION = auto()
    CONTEXTS_SWITCH = auto()
    CONTEXTS_SET_NAMESPACE = auto()
    CONTEXTS_BACK = auto()
    CONTEXT = auto()
    NAMESPACE = auto()
    PLACEHOLDER = auto()


@dataclass(frozen=True)
class MenuEntry:
    id: MenuId
    label: str
    description: str = ""
    value: Any = None


def _placeholder(label: str, description: str = "") -> tuple[MenuEntry, ...]:
    return (MenuEntry(MenuId.PLACEHOLDER, label, description),)


MAIN_MENU: tuple[MenuEntry, ...] = (
    MenuEntry(MenuId.MAIN_RUN, "Run Command", "Execute kubectl commands"),
    MenuEntry(MenuId.MAIN_CUSTOM, "Custom Command", "Build an advanced kubectl command"),
    MenuEntry(MenuId.MAIN_FAVOURITES, "Favourites", "View and run saved commands"),
    MenuEntry(MenuId.MAIN_HISTORY, "Command History", "View and re-run previous commands"),
    MenuEntry(MenuId.MAIN_SAVED_OUTPUTS, "Saved Outputs", "View previously saved outputs"),
    MenuEntry(MenuId.MAIN_HOTKEYS, "Hotkeys", "Manage hotkey bindings"),
    MenuEntry(MenuId.MAIN_CONTEXTS, "Contexts & Namespaces", "Manage kube contexts and default namespace"),
    MenuEntry(MenuId.MAIN_CONNECTIVITY, "Check Cluster Connectivity", "Verify connection to Kubernetes cluster"),
    MenuEntry(MenuId.MAIN_EXIT, "Exit", "Quit the application"),
)

PREVIEW_MENU: tuple[MenuEntry, ...] = (
    MenuEntry(MenuId.PREVIEW_EXECUTE, "Execute", "Run the command"),
    MenuEntry(MenuId.PREVIEW_HELP, "Help", "Show --help output"),
    MenuEntry(MenuId.PREVIEW_SAVE_FAVOURITE, "Save as Favourite", "Save for later use"),
    MenuEntry(MenuId.PREVIEW_BACK, "Back", "Return to previous screen"),
)

DELETE_MENU: tuple[MenuEntry, ...] = (
    MenuEntry(MenuId.DELETE_CONFIRM, "Confirm Delete", "Run the delete command now"),
    MenuEntry(MenuId.DELETE_CANCEL, "Cancel", "Pick another object"),
)

CONTEXTS_MENU: tuple[MenuEntry, ...] = (
    MenuEntry(MenuId.CONTEXTS_SWITCH, "Switch Context", "Switch the current kube context"),
    MenuEntry(MenuId.CONTEXTS_SET_NAMESPACE, "Set Default Namespace", "Choose a default namespace for commands"),
    MenuEntry(MenuId.CONTEXTS_BACK, "Back to Main Menu", "Return to the main menu"),
)

SECRET_METADATA_FIELDS = ("metadata.name", "metadata.namespace", "metadata.type")


def _resource_menu() -> tuple[MenuEntry, ...]:
    return tuple(MenuEntry(MenuId.RESOURCE, k.label, k.description, k) for k in ResourceKind)


def _action_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    kind = state.selections.resource
    if kind is None:
        return ()
    return tuple(
        MenuEntry(MenuId.ACTION, a.label, action_description(kind, a), a)
        for a in ACTIONS_BY_KIND[kind]
    )


def _names_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if not state.names:
        kind = state.selections.resource
        noun = kind.label.lower() if kind else "objects"
        return _placeholder(f"No {noun} found")
    return tuple(MenuEntry(MenuId.TARGET, name, value=name) for name in state.names)


def _flags_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    entries = [
        MenuEntry(MenuId.FLAGS_DONE, DONE_LABEL, "Proceed with selected flags"),
        MenuEntry(MenuId.SEPARATOR, SEPARATOR_LABEL),
    ]
    for flag, description in checklist_for(state.selections.action):
        entries.append(
            MenuEntry(MenuId.FLAG, checkbox_label(state.selections, flag), description, flag)
        )
    return tuple(entries)


def _secret_fields_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    entries = [
        MenuEntry(MenuId.SECRET_FIELD, f"data.{key}", "Decoded value", f"data.{key}")
        for key in state.secret_keys
    ]
    entries.append(MenuEntry(MenuId.SEPARATOR, SEPARATOR_LABEL))
    entries.extend(MenuEntry(MenuId.SECRET_FIELD, f, "", f) for f in SECRET_METADATA_FIELDS)
    entries.append(MenuEntry(MenuId.SECRET_CUSTOM, "Custom JSONPath", "Write the query yourself"))
    return tuple(entries)


def _favourites_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if not state.favourites:
        return _placeholder(
            "No favourites saved", "Save a command from the preview screen or history to see it here",
        )
    return tuple(
        MenuEntry(MenuId.FAVOURITE, fav.name, fav.command, i)
        for i, fav in enumerate(state.favourites)
    )


def _history_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if state.history is None:
        return _placeholder("History unavailable", "Command history could not be loaded")
    if not state.history:
        return _placeholder("No command history", "Run some commands to see them here")
    return tuple(
        MenuEntry(
            MenuId.HISTORY_ENTRY,
            entry.command,
            entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            i,
        )
        for i, entry in enumerate(state.history)
    )


def _hotkeys_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if state.hotkeys is None:
        return _placeholder("Hotkeys unavailable")
    bound = {b.key: b for b in state.hotkeys}
    return tuple(
        MenuEntry(MenuId.HOTKEY, key, bound[key].name if key in bound else "(unbound)", key)
        for key in HOTKEY_KEYS
    )


def _saved_groups_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if state.saved_loading:
        return _placeholder("Loading...")
    if not state.saved_groups:
        return _placeholder(
            "No saved outputs", "Save command output from the Command Output screen to see it here",
        )
    entries = []
    for group in state.saved_groups:
        count = len(group.versions)
        entries.append(
            MenuEntry(MenuId.SAVED_GROUP, group.base, f"{count} version{'s' if count != 1 else ''}", group.base)
        )
    return tuple(entries)


def _versions_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if not state.versions:
        return _placeholder("No versions")
    return tuple(
        MenuEntry(MenuId.SAVED_VERSION, name, f"v{split_version(name)[1]}", name)
        for name in state.versions
    )


def _contexts_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if state.contexts_error:
        return _placeholder("Unable to load contexts", state.contexts_error)
    if not state.contexts:
        return _placeholder("No contexts found", "Configure kubeconfig to add contexts")
    return tuple(
        MenuEntry(MenuId.CONTEXT, name, "(current)" if name == state.current_context else "", name)
        for name in state.contexts
    )


def _namespaces_menu(state: WizardState) -> tuple[MenuEntry, ...]:
    if state.namespaces_error:
        return _placeholder("Unable to load namespaces", state.namespaces_error)
    if not state.namespaces:
        return _placeholder("No namespaces found", "Create namespaces to select a default")
    return tuple(
        MenuEntry(
            MenuId.NAMESPACE,
            ns,
            "(current default)" if ns == state.default_namespace else "",
            ns,
        )
        for ns in state.namespaces
    )


def menu_for(state: WizardState) -> tuple[MenuEntry, ...]:
    """Entries of the list shown on the current screen; () for non-list screens."""
    screen = state.screen
    if screen is Screen.MAIN_MENU:
        return MAIN_MENU
    if screen is Screen.RESOURCE_SELECTION:
        return _resource_menu()
    if screen is Screen.ACTION_SELECTION:
        return _action_menu(state)
    if screen is Screen.RESOURCE_NAME_SELECTION:
        return _names_menu(state)
    if screen is Screen.FLAGS_SELECTION:
        return _flags_menu(state)
    if screen is Screen.COMMAND_PREVIEW:
        return PREVIEW_MENU
    if screen is Screen.DELETE_CONFIRMATION:
        return DELETE_MENU
    if screen is Screen.SECRET_FIELD_SELECTION:
        return _secret_fields_menu(state)
    if screen is Screen.FAVOURITES_LIST:
        return _favourites_menu(state)
    if screen is Screen.COMMAND_HISTORY:
        return _history_menu(state)
    if screen is Screen.HOTKEYS_LIST:
        return _hotkeys_menu(state)
    if screen is Screen.SAVED_OUTPUTS_LIST:
        return _saved_groups_menu(state)
    if screen is Screen.SAVED_OUTPUT_VERSIONS:
        return _versions_menu(state)
    if screen is Screen.CONTEXTS_NAMESPACES_MENU:
        return CONTEXTS_MENU
    if screen is Screen.CONTEXTS_LIST:
        return _contexts_menu(state)
    if screen is Screen.NAMESPACES_LIST:
        return _namespaces_menu(state)
    return ()


def entry_at(state: WizardState, index: int) -> MenuEntry | None:
    entries = menu_for(state)
    if 0 <= index < len(entries):
        return entries[index]
    return None


# ── Titles & hints ───────────────────────────────────────────────


_TITLES: dict[Screen, str] = {
    Screen.MAIN_MENU: "Kubernetes Wizard",
    Screen.RESOURCE_SELECTION: "Select Resource Type",
    Screen.ACTION_SELECTION: "Select Action",
    Screen.FLAGS_SELECTION: "Select Flags",
    Screen.NAMESPACE_INPUT: "Enter Namespace",
    Screen.COMMAND_PREVIEW: "Command Preview",
    Screen.COMMAND_OUTPUT: "Command Output",
    Screen.COMMAND_HELP: "Command Help",
    Screen.CLUSTER_CONNECTIVITY: "Cluster Connectivity",
    Screen.CUSTOM_COMMAND: "Custom Command",
    Screen.SECRET_FIELD_SELECTION: "Select Secret Field",
    Screen.DELETE_CONFIRMATION: "Confirm Delete",
    Screen.FAVOURITES_LIST: "Favourites",
    Screen.SAVE_FAVOURITE: "Save as Favourite",
    Screen.RENAME_FAVOURITE: "Rename Favourite",
    Screen.COMMAND_HISTORY: "Command History",
    Screen.HOTKEYS_LIST: "Hotkeys",
    Screen.HOTKEY_BIND: "Bind Hotkey",
    Screen.SAVED_OUTPUTS_LIST: "Saved Outputs",
    Screen.SAVE_OUTPUT_NAME: "Save Output",
    Screen.RENAME_SAVED_OUTPUT: "Rename Saved Output",
    Screen.CONTEXTS_NAMESPACES_MENU: "Contexts & Namespaces",
    Screen.CONTEXTS_LIST: "Kube Contexts",
    Screen.NAMESPACES_LIST: "Namespaces",
}

_HINTS: dict[Screen, str] = {
    Screen.FLAGS_SELECTION: "Space=toggle  Enter=select  Esc=back",
    Screen.COMMAND_OUTPUT: "s=save output  Esc=back  q=main menu",
    Screen.FAVOURITES_LIST: "Enter=run  d=delete  r=rename  h=bind hotkey  Esc=back",
    Screen.COMMAND_HISTORY: "Enter=run  s=save as favourite  Esc=back",
    Screen.HOTKEYS_LIST: "d=unbind  Esc=back",
    Screen.HOTKEY_BIND: "Press F1-F12 to bind  Esc=cancel",
    Screen.SAVED_OUTPUTS_LIST: "Enter=versions  d=delete  r=rename  Esc=back",
    Screen.SAVED_OUTPUT_VERSIONS: "Enter=view  ←/→=version  d=delete  r=rename  Esc=back",
    Screen.SAVED_OUTPUT_VIEW: "d=delete  r=rename  Esc=back",
    Screen.CONTEXTS_LIST: "Enter=switch  Esc=back",
    Screen.NAMESPACES_LIST: "Enter=set default  Esc=back",
}

_PLACEHOLDERS: dict[Screen, str] = {
    Screen.NAMESPACE_INPUT: "Enter namespace name",
    Screen.CUSTOM_COMMAND: "e.g. get pods -n default",
    Screen.SAVE_FAVOURITE: "Enter favourite name",
    Screen.RENAME_FAVOURITE: "Enter new name",
    Screen.SAVE_OUTPUT_NAME: "Enter name (e.g. pods-output)",
    Screen.RENAME_SAVED_OUTPUT: "Enter new name",
}


def screen_title(state: WizardState) -> str:
    screen = state.screen
    if screen is Screen.RESOURCE_NAME_SELECTION and state.selections.resource is not None:
        return f"Select {state.selections.resource.singular}"
    if screen is Screen.SAVED_OUTPUT_VERSIONS:
        return f"Saved Outputs: {state.selected_base}"
    if screen is Screen.SAVED_OUTPUT_VIEW:
        return f"Saved Output: {state.selected_output}"
    return _TITLES.get(screen, "")


def key_hint(state: WizardState) -> str:
    return _HINTS.get(state.screen, "Enter=select  Esc=back  q=main menu")


def input_placeholder(state: WizardState) -> str:
    return _PLACEHOLDERS.get(state.screen, "")
