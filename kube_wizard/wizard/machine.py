"""Screen state machine.

``dispatch(state, event)`` is pure: it returns the next ``WizardState`` and the
tasks to run. Nothing here touches the filesystem or spawns processes.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from ..constants import HOTKEY_KEYS
from ..errors import InvalidNameError
from ..kubectl import CommandResult
from ..outputs import clean_name, split_version
from ..validation import is_valid_resource_name, require_safe_name
from . import events as ev
from . import tasks as tk
from .builder import (
    Action,
    build_command,
    extract_field_command,
    normalize_custom_command,
    with_default_namespace,
)
from .flags import checklist_for, toggle_flag
from .menus import MenuEntry, MenuId, entry_at
from .state import INPUT_SCREENS, Screen, Selections, StatusLevel, StatusLine, WizardState

logger = logging.getLogger(__name__)

Tasks = tuple[tk.Task, ...]
Result = tuple[WizardState, Tasks]

_NOOP_IDS = frozenset({MenuId.PLACEHOLDER, MenuId.SEPARATOR})


def initial_state(default_namespace: str = "") -> WizardState:
    return WizardState(default_namespace=default_namespace)


def dispatch(state: WizardState, event: ev.Event) -> Result:
    """Apply one event. User events are dropped while a task is in flight."""
    if isinstance(event, ev.UserEvent) and state.pending:
        logger.debug("Ignoring %s while a task is pending", type(event).__name__)
        return state, ()
    if isinstance(event, ev.CompletionEvent):
        state = replace(state, pending=False)

    handler = _HANDLERS.get(type(event))
    if handler is None:
        logger.warning("No handler for %s", type(event).__name__)
        return state, ()
    new_state, tasks = handler(state, event)
    if tasks:
        new_state = replace(new_state, pending=True)
    return new_state, tasks


# ── Output rendering ─────────────────────────────────────────────


def format_output(result: CommandResult, heading: str = "Output") -> str:
    if result.error:
        return f"Error:\n{result.error}\n\n{heading}:\n{result.output}"
    return f"{heading}:\n{result.output}"


def format_connectivity(result: CommandResult | None, error: str = "") -> str:
    if error or result is None:
        return f"Error:\n{error}\n\nCluster Connectivity:\n"
    if result.error:
        return format_output(result, "Cluster Connectivity")
    if "Unable to connect to the server" in result.output:
        return "Cluster Connectivity:\n\n❌ Cannot connect to the Kubernetes cluster.\n\n" + result.output
    summary = [
        line.strip()
        for line in result.output.splitlines()
        if line.strip()
        and not line.strip().startswith("Further debugging")
        and not line.strip().startswith("To further debug")
    ]
    return "Cluster Connectivity:\n\n✅ Connected to the Kubernetes cluster.\n\n" + "\n".join(summary)


# ── Navigation helpers ───────────────────────────────────────────


def _status(state: WizardState, text: str, level: StatusLevel = StatusLevel.INFO) -> WizardState:
    return replace(state, status=StatusLine(text, level))


def _error(state: WizardState, text: str) -> WizardState:
    return _status(state, text, StatusLevel.ERROR)


def _success(state: WizardState, text: str) -> WizardState:
    return _status(state, text, StatusLevel.SUCCESS)


def _go(state: WizardState, screen: Screen, **changes) -> WizardState:
    return replace(state, previous=state.screen, screen=screen, **changes)


def to_main_menu(state: WizardState) -> WizardState:
    """Fresh selections and no status line."""
    return _go(state, Screen.MAIN_MENU, selections=Selections(), status=None, input_value="")


def to_resource_selection(state: WizardState) -> WizardState:
    return _go(state, Screen.RESOURCE_SELECTION, selections=Selections())


def to_action_selection(state: WizardState) -> WizardState:
    return _go(state, Screen.ACTION_SELECTION)


def to_flags(state: WizardState) -> WizardState:
    selections = replace(state.selections, flags=(), custom_namespace="", namespace_required=False)
    return _go(state, Screen.FLAGS_SELECTION, selections=selections)


def to_preview(state: WizardState, command: str) -> WizardState:
    return _go(state, Screen.COMMAND_PREVIEW, selections=replace(state.selections, command=command))


def _with_command(state: WizardState, command: str) -> WizardState:
    return replace(state, selections=replace(state.selections, command=command))


def to_favourites(state: WizardState) -> WizardState:
    if state.favourites is None:
        return _error(to_main_menu(state), "favourites store not available")
    return _go(state, Screen.FAVOURITES_LIST)


def to_versions(state: WizardState, base: str, index: int = 0) -> WizardState:
    count = len(state.group(base).versions) if state.group(base) else 0
    index = min(max(index, 0), max(count - 1, 0))
    return _go(state, Screen.SAVED_OUTPUT_VERSIONS, selected_base=base, version_index=index)


def _reload_saved_outputs(state: WizardState, return_base: str = "", return_index: int = 0) -> Result:
    state = _go(
        state,
        Screen.SAVED_OUTPUTS_LIST,
        saved_loading=True,
        return_base=return_base,
        return_version_index=return_index,
    )
    return state, (tk.LoadSavedOutputs(),)


def _execute(state: WizardState, command: str) -> Result:
    return _with_command(state, command), (tk.ExecuteCommand(command),)


def _effective_namespace(state: WizardState) -> str:
    return state.selections.custom_namespace or state.default_namespace


# ── Back ─────────────────────────────────────────────────────────


def _back_from_preview(state: WizardState) -> Result:
    action = state.selections.action
    if action is not None and checklist_for(action):
        return to_flags(state), ()
    if action is Action.EXTRACT_FIELD:
        return _go(state, Screen.SECRET_FIELD_SELECTION), ()
    return to_main_menu(state), ()


def _back_from_view(state: WizardState) -> Result:
    if state.previous is Screen.SAVED_OUTPUT_VERSIONS and state.selected_base:
        return to_versions(state, state.selected_base, state.version_index), ()
    return _go(state, Screen.SAVED_OUTPUTS_LIST), ()


def _back_from_rename_output(state: WizardState) -> Result:
    if state.rename_is_group:
        return _reload_saved_outputs(state, state.rename_target, state.version_index)
    return _reload_saved_outputs(state)


_BACK_TARGETS: dict[Screen, Callable[[WizardState], Result]] = {
    Screen.RESOURCE_SELECTION: lambda s: (to_main_menu(s), ()),
    Screen.ACTION_SELECTION: lambda s: (to_resource_selection(s), ()),
    Screen.RESOURCE_NAME_SELECTION: lambda s: (to_action_selection(s), ()),
    Screen.FLAGS_SELECTION: lambda s: (to_action_selection(s), ()),
    Screen.COMMAND_PREVIEW: _back_from_preview,
    Screen.COMMAND_HELP: lambda s: (_go(s, Screen.COMMAND_PREVIEW), ()),
    Screen.NAMESPACE_INPUT: lambda s: (to_flags(s), ()),
    Screen.SAVE_FAVOURITE: lambda s: (_go(s, Screen.COMMAND_PREVIEW), ()),
    Screen.RENAME_FAVOURITE: lambda s: (to_favourites(s), ()),
    Screen.HOTKEY_BIND: lambda s: (to_favourites(replace(s, hotkey_favourite=None)), ()),
    Screen.SECRET_FIELD_SELECTION: lambda s: (to_action_selection(s), ()),
    Screen.DELETE_CONFIRMATION: lambda s: (to_action_selection(s), ()),
    Screen.SAVED_OUTPUT_VERSIONS: lambda s: (_go(s, Screen.SAVED_OUTPUTS_LIST), ()),
    Screen.SAVED_OUTPUT_VIEW: _back_from_view,
    Screen.RENAME_SAVED_OUTPUT: _back_from_rename_output,
    Screen.SAVE_OUTPUT_NAME: lambda s: (_go(s, Screen.COMMAND_OUTPUT), ()),
    Screen.CONTEXTS_LIST: lambda s: (_go(s, Screen.CONTEXTS_NAMESPACES_MENU), ()),
    Screen.NAMESPACES_LIST: lambda s: (_go(s, Screen.CONTEXTS_NAMESPACES_MENU), ()),
}


def _on_back(state: WizardState, event: ev.Back) -> Result:
    target = _BACK_TARGETS.get(state.screen)
    if target is None:
        return to_main_menu(state), ()
    return target(state)


# ── Confirm: text screens ────────────────────────────────────────


def _submit_namespace(state: WizardState, text: str) -> Result:
    namespace = text.strip()
    if not is_valid_resource_name(namespace):
        return _error(state, f"Invalid namespace '{namespace}': use lowercase letters, digits and '-'"), ()
    sel = state.selections
    sel = replace(sel, custom_namespace=namespace, flags=sel.flags + (f"-n {namespace}",))
    command = build_command(sel.resource, sel.action, sel.target, sel.flags)
    return to_preview(replace(state, selections=sel), command), ()


def _submit_custom_command(state: WizardState, text: str) -> Result:
    return to_preview(state, normalize_custom_command(text)), ()


def _submit_favourite(state: WizardState, text: str) -> Result:
    if state.favourites is None:
        return _error(to_main_menu(state), "favourites store not available"), ()
    try:
        name = require_safe_name(text, "favourite name")
    except InvalidNameError as exc:
        return _error(state, str(exc)), ()
    return state, (tk.SaveFavourite(name, state.selections.command),)


def _submit_favourite_rename(state: WizardState, text: str) -> Result:
    if state.favourites is None:
        return _error(to_main_menu(state), "favourites store not available"), ()
    try:
        name = require_safe_name(text, "favourite name")
    except InvalidNameError as exc:
        return _error(state, str(exc)), ()
    return state, (tk.RenameFavourite(state.rename_favourite_index, name),)


def _submit_output_name(state: WizardState, text: str) -> Result:
    try:
        name = require_safe_name(clean_name(text), "output name")
    except InvalidNameError as exc:
        return _error(state, str(exc)), ()
    return state, (tk.SaveOutput(name, state.output, state.selections.command),)


def _submit_output_rename(state: WizardState, text: str) -> Result:
    try:
        new = require_safe_name(clean_name(text), "output name")
    except InvalidNameError as exc:
        return _error(state, str(exc)), ()
    old = state.rename_target
    if state.rename_is_group:
        state = replace(state, return_base=split_version(new)[0], return_version_index=state.version_index)
    else:
        state = replace(state, return_base=split_version(new)[0], return_version_index=0)
    return state, (tk.RenameSavedOutput(old, new, group=state.rename_is_group),)


_TEXT_SUBMIT: dict[Screen, Callable[[WizardState, str], Result]] = {
    Screen.NAMESPACE_INPUT: _submit_namespace,
    Screen.CUSTOM_COMMAND: _submit_custom_command,
    Screen.SAVE_FAVOURITE: _submit_favourite,
    Screen.RENAME_FAVOURITE: _submit_favourite_rename,
    Screen.SAVE_OUTPUT_NAME: _submit_output_name,
    Screen.RENAME_SAVED_OUTPUT: _submit_output_rename,
}


# ── Confirm: list screens ────────────────────────────────────────


def _select_main(state: WizardState, entry: MenuEntry, index: int) -> Result:
    if entry.id is MenuId.MAIN_RUN:
        return to_resource_selection(state), ()
    if entry.id is MenuId.MAIN_CUSTOM:
        return _go(state, Screen.CUSTOM_COMMAND, input_value="", selections=replace(state.selections, command="")), ()
    if entry.id is MenuId.MAIN_FAVOURITES:
        return state, (tk.LoadFavourites(),)
    if entry.id is MenuId.MAIN_HISTORY:
        return state, (tk.LoadHistory(),)
    if entry.id is MenuId.MAIN_SAVED_OUTPUTS:
        return _reload_saved_outputs(state)
    if entry.id is MenuId.MAIN_HOTKEYS:
        return state, (tk.LoadHotkeys(show=True),)
    if entry.id is MenuId.MAIN_CONTEXTS:
        return _go(state, Screen.CONTEXTS_NAMESPACES_MENU), ()
    if entry.id is MenuId.MAIN_CONNECTIVITY:
        return state, (tk.CheckConnectivity(),)
    if entry.id is MenuId.MAIN_EXIT:
        return replace(state, quit=True), ()
    return state, ()


def _select_resource(state: WizardState, entry: MenuEntry, index: int) -> Result:
    return to_action_selection(replace(state, selections=replace(state.selections, resource=entry.value))), ()


def _select_action(state: WizardState, entry: MenuEntry, index: int) -> Result:
    action: Action = entry.value
    state = replace(state, selections=replace(state.selections, action=action))
    if not action.needs_target:
        return to_flags(state), ()
    return state, (tk.FetchNames(state.selections.resource.plural),)


def _select_target(state: WizardState, entry: MenuEntry, index: int) -> Result:
    state = replace(state, selections=replace(state.selections, target=entry.value))
    action = state.selections.action
    if action is Action.EXTRACT_FIELD:
        return state, (tk.FetchSecretKeys(entry.value, _effective_namespace(state)),)
    if action is Action.DELETE:
        return _go(state, Screen.DELETE_CONFIRMATION), ()
    return to_flags(state), ()


def _select_flag(state: WizardState, entry: MenuEntry, index: int) -> Result:
    if entry.id is MenuId.FLAG:
        return replace(state, selections=toggle_flag(state.selections, entry.value)), ()
    if entry.id is not MenuId.FLAGS_DONE:
        return state, ()
    sel = state.selections
    if sel.namespace_required:
        return _go(state, Screen.NAMESPACE_INPUT, input_value=""), ()
    sel = replace(sel, flags=with_default_namespace(sel.flags, state.default_namespace))
    command = build_command(sel.resource, sel.action, sel.target, sel.flags)
    return to_preview(replace(state, selections=sel), command), ()


def _select_preview(state: WizardState, entry: MenuEntry, index: int) -> Result:
    command = state.selections.command
    if entry.id is MenuId.PREVIEW_EXECUTE:
        return state, (tk.ExecuteCommand(command),)
    if entry.id is MenuId.PREVIEW_HELP:
        return state, (tk.LoadHelp(command),)
    if entry.id is MenuId.PREVIEW_SAVE_FAVOURITE:
        return _go(state, Screen.SAVE_FAVOURITE, input_value=""), ()
    if entry.id is MenuId.PREVIEW_BACK:
        return _on_back(state, ev.Back())
    return state, ()


def _select_delete(state: WizardState, entry: MenuEntry, index: int) -> Result:
    sel = state.selections
    if entry.id is MenuId.DELETE_CONFIRM:
        sel = replace(sel, flags=with_default_namespace(sel.flags, state.default_namespace))
        command = build_command(sel.resource, sel.action, sel.target, sel.flags)
        return _execute(replace(state, selections=sel), command)
    return state, (tk.FetchNames(sel.resource.plural),)


def _select_secret_field(state: WizardState, entry: MenuEntry, index: int) -> Result:
    target = state.selections.target
    if entry.id is MenuId.SECRET_CUSTOM:
        seed = f"get secret {target} -o jsonpath="
        return _go(state, Screen.CUSTOM_COMMAND, input_value=seed), ()
    command = extract_field_command(target, entry.value, _effective_namespace(state))
    return to_preview(state, command), ()


def _select_favourite(state: WizardState, entry: MenuEntry, index: int) -> Result:
    if state.favourites is None or not 0 <= entry.value < len(state.favourites):
        return state, ()
    return _execute(state, state.favourites[entry.value].command)


def _select_history(state: WizardState, entry: MenuEntry, index: int) -> Result:
    if not state.history or not 0 <= entry.value < len(state.history):
        return state, ()
    return _execute(state, state.history[entry.value].command)


def _select_saved_group(state: WizardState, entry: MenuEntry, index: int) -> Result:
    return to_versions(state, entry.value, 0), ()


def _select_version(state: WizardState, entry: MenuEntry, index: int) -> Result:
    return replace(state, version_index=index), (tk.ReadSavedOutput(entry.value),)


def _select_contexts_menu(state: WizardState, entry: MenuEntry, index: int) -> Result:
    if entry.id is MenuId.CONTEXTS_SWITCH:
        return state, (tk.LoadContexts(),)
    if entry.id is MenuId.CONTEXTS_SET_NAMESPACE:
        return state, (tk.LoadNamespaces(),)
    return to_main_menu(state), ()


def _select_context(state: WizardState, entry: MenuEntry, index: int) -> Result:
    return state, (tk.SwitchContext(entry.value),)


def _select_namespace(state: WizardState, entry: MenuEntry, index: int) -> Result:
    return state, (tk.SetDefaultNamespace(entry.value),)


_LIST_SELECT: dict[Screen, Callable[[WizardState, MenuEntry, int], Result]] = {
    Screen.MAIN_MENU: _select_main,
    Screen.RESOURCE_SELECTION: _select_resource,
    Screen.ACTION_SELECTION: _select_action,
    Screen.RESOURCE_NAME_SELECTION: _select_target,
    Screen.FLAGS_SELECTION: _select_flag,
    Screen.COMMAND_PREVIEW: _select_preview,
    Screen.DELETE_CONFIRMATION: _select_delete,
    Screen.SECRET_FIELD_SELECTION: _select_secret_field,
    Screen.FAVOURITES_LIST: _select_favourite,
    Screen.COMMAND_HISTORY: _select_history,
    Screen.SAVED_OUTPUTS_LIST: _select_saved_group,
    Screen.SAVED_OUTPUT_VERSIONS: _select_version,
    Screen.CONTEXTS_NAMESPACES_MENU: _select_contexts_menu,
    Screen.CONTEXTS_LIST: _select_context,
    Screen.NAMESPACES_LIST: _select_namespace,
}


def _on_confirm(state: WizardState, event: ev.Confirm) -> Result:
    if state.screen in INPUT_SCREENS:
        if not event.text.strip():
            return state, ()
        return _TEXT_SUBMIT[state.screen](state, event.text)

    handler = _LIST_SELECT.get(state.screen)
    entry = entry_at(state, event.index)
    if handler is None or entry is None or entry.id in _NOOP_IDS:
        return state, ()
    return handler(state, entry, event.index)


def _on_toggle(state: WizardState, event: ev.Toggle) -> Result:
    if state.screen is not Screen.FLAGS_SELECTION:
        return state, ()
    entry = entry_at(state, event.index)
    if entry is None or entry.id is not MenuId.FLAG:
        return state, ()
    return replace(state, selections=toggle_flag(state.selections, entry.value)), ()


def _on_navigate(state: WizardState, event: ev.Navigate) -> Result:
    if state.screen is not Screen.SAVED_OUTPUT_VERSIONS:
        return state, ()
    count = len(state.versions)
    if not count:
        return state, ()
    return replace(state, version_index=(state.version_index + event.step) % count), ()


# ── Shortcut keys ────────────────────────────────────────────────


def _on_hotkey(state: WizardState, key: str) -> Result:
    if state.screen in INPUT_SCREENS:
        return state, ()
    if state.screen is Screen.HOTKEY_BIND and state.hotkey_favourite is not None:
        fav = state.hotkey_favourite
        return state, (tk.BindHotkey(key, fav.name, fav.command),)
    if state.hotkeys is None:
        return _error(state, "hotkeys store not available"), ()
    for binding in state.hotkeys:
        if binding.key == key:
            return _execute(state, binding.command)
    return state, ()


def _key_delete(state: WizardState, entry: MenuEntry | None, index: int) -> Result:
    screen = state.screen
    if screen is Screen.FAVOURITES_LIST and entry is not None and entry.id is MenuId.FAVOURITE:
        return state, (tk.DeleteFavourite(entry.value),)
    if screen is Screen.HOTKEYS_LIST and entry is not None and entry.id is MenuId.HOTKEY:
        return state, (tk.UnbindHotkey(entry.value),)
    if screen is Screen.SAVED_OUTPUTS_LIST and entry is not None and entry.id is MenuId.SAVED_GROUP:
        return state, (tk.DeleteSavedOutputGroup(entry.value),)
    if screen is Screen.SAVED_OUTPUT_VERSIONS and state.versions:
        idx = min(max(index, 0), len(state.versions) - 1)
        state = replace(state, return_base=state.selected_base, return_version_index=idx)
        return state, (tk.DeleteSavedOutput(state.versions[idx]),)
    if screen is Screen.SAVED_OUTPUT_VIEW and state.selected_output.strip():
        base = state.selected_base or split_version(state.selected_output)[0]
        state = replace(state, return_base=base, return_version_index=state.version_index)
        return state, (tk.DeleteSavedOutput(state.selected_output),)
    return state, ()


def _key_rename(state: WizardState, entry: MenuEntry | None, index: int) -> Result:
    screen = state.screen
    if screen is Screen.FAVOURITES_LIST and entry is not None and entry.id is MenuId.FAVOURITE:
        return _go(
            state,
            Screen.RENAME_FAVOURITE,
            rename_favourite_index=entry.value,
            input_value=entry.label,
        ), ()
    base = ""
    if screen is Screen.SAVED_OUTPUTS_LIST and entry is not None and entry.id is MenuId.SAVED_GROUP:
        base = entry.value
    elif screen is Screen.SAVED_OUTPUT_VERSIONS:
        base = state.selected_base
    if base:
        return _go(
            state,
            Screen.RENAME_SAVED_OUTPUT,
            rename_target=base,
            rename_is_group=True,
            input_value=base,
        ), ()
    if screen is Screen.SAVED_OUTPUT_VIEW and state.selected_output:
        return _go(
            state,
            Screen.RENAME_SAVED_OUTPUT,
            rename_target=state.selected_output,
            rename_is_group=False,
            input_value=state.selected_output,
        ), ()
    return state, ()


def _key_save(state: WizardState, entry: MenuEntry | None, index: int) -> Result:
    if state.screen is Screen.COMMAND_OUTPUT:
        return state, (tk.AutoSaveOutput(state.output, state.selections.command),)
    if state.screen is Screen.COMMAND_HISTORY and entry is not None and entry.id is MenuId.HISTORY_ENTRY:
        if state.favourites is None:
            return _error(state, "favourites store not available"), ()
        command = state.history[entry.value].command
        return _go(_with_command(state, command), Screen.SAVE_FAVOURITE, input_value=""), ()
    return state, ()


def _key_bind(state: WizardState, entry: MenuEntry | None, index: int) -> Result:
    if state.screen is not Screen.FAVOURITES_LIST or entry is None or entry.id is not MenuId.FAVOURITE:
        return state, ()
    if state.hotkeys is None:
        return _error(state, "hotkeys store not available"), ()
    return _go(state, Screen.HOTKEY_BIND, hotkey_favourite=state.favourites[entry.value]), ()


_KEY_HANDLERS: dict[str, Callable[[WizardState, MenuEntry | None, int], Result]] = {
    "d": _key_delete,
    "r": _key_rename,
    "s": _key_save,
    "h": _key_bind,
}


def _on_key(state: WizardState, event: ev.KeyPressed) -> Result:
    key = event.key
    if key.upper() in HOTKEY_KEYS:
        return _on_hotkey(state, key.upper())
    if state.screen in INPUT_SCREENS:
        return state, ()
    if key == "q":
        if state.screen is Screen.MAIN_MENU:
            return replace(state, quit=True), ()
        return to_main_menu(state), ()
    handler = _KEY_HANDLERS.get(key)
    if handler is None:
        return state, ()
    return handler(state, entry_at(state, event.index), event.index)


def _on_started(state: WizardState, event: ev.Started) -> Result:
    return state, (tk.LoadHotkeys(show=False),)


# ── Completions ──────────────────────────────────────────────────


def _on_names(state: WizardState, event: ev.NamesLoaded) -> Result:
    if event.error:
        return _error(state, event.error), ()
    return _go(state, Screen.RESOURCE_NAME_SELECTION, names=event.names), ()


def _on_secret_keys(state: WizardState, event: ev.SecretKeysLoaded) -> Result:
    if event.error:
        return _error(state, event.error), ()
    return _go(state, Screen.SECRET_FIELD_SELECTION, secret_keys=event.keys), ()


def _on_executed(state: WizardState, event: ev.CommandExecuted) -> Result:
    if event.error or event.result is None:
        return _error(state, event.error or "command failed"), ()
    return _go(state, Screen.COMMAND_OUTPUT, output=format_output(event.result)), ()


def _on_help(state: WizardState, event: ev.HelpLoaded) -> Result:
    if event.error or event.result is None:
        return _error(state, event.error or "help unavailable"), ()
    return _go(state, Screen.COMMAND_HELP, output=format_output(event.result, "Help Output")), ()


def _on_connectivity(state: WizardState, event: ev.ConnectivityChecked) -> Result:
    output = format_connectivity(event.result, event.error)
    return _go(state, Screen.CLUSTER_CONNECTIVITY, output=output), ()


def _on_favourites(state: WizardState, event: ev.FavouritesLoaded) -> Result:
    if event.favourites is None:
        return _error(to_main_menu(state), event.error or "favourites store not available"), ()
    state = replace(state, favourites=event.favourites)
    if state.screen is not Screen.FAVOURITES_LIST:
        state = _go(state, Screen.FAVOURITES_LIST)
    if event.error:
        state = _error(state, event.error)
    return state, ()


def _on_favourite_saved(state: WizardState, event: ev.FavouriteSaved) -> Result:
    if event.favourites is not None:
        state = replace(state, favourites=event.favourites)
    state = to_main_menu(state)
    if event.error:
        return _error(state, event.error), ()
    return _success(state, "✓ Favourite saved"), ()


def _on_history(state: WizardState, event: ev.HistoryLoaded) -> Result:
    state = _go(state, Screen.COMMAND_HISTORY, history=event.entries)
    if event.error:
        state = _error(state, event.error)
    return state, ()


def _on_hotkeys(state: WizardState, event: ev.HotkeysLoaded) -> Result:
    state = replace(state, hotkeys=event.bindings)
    if event.error:
        logger.warning("Hotkeys unavailable: %s", event.error)
    if not event.show:
        return state, ()
    state = _go(state, Screen.HOTKEYS_LIST)
    if event.error:
        state = _error(state, event.error)
    return state, ()


def _on_hotkey_bound(state: WizardState, event: ev.HotkeyBound) -> Result:
    if event.bindings is not None:
        state = replace(state, hotkeys=event.bindings)
    state = to_favourites(replace(state, hotkey_favourite=None))
    if event.error:
        return _error(state, event.error), ()
    return _success(state, f"✓ Bound {event.key} to {event.name}"), ()


def _on_hotkey_unbound(state: WizardState, event: ev.HotkeyUnbound) -> Result:
    if event.bindings is not None:
        state = replace(state, hotkeys=event.bindings)
    if event.error:
        return _error(state, event.error), ()
    return _success(state, f"✓ Unbound {event.key}"), ()


def _on_saved_outputs(state: WizardState, event: ev.SavedOutputsLoaded) -> Result:
    base, index = state.return_base, state.return_version_index
    state = replace(state, saved_loading=False, return_base="", return_version_index=0)
    if event.groups is None:
        return _error(to_main_menu(state), event.error or "saved outputs unavailable"), ()
    state = replace(state, saved_groups=event.groups)
    if base and not event.error and state.group(base) is not None:
        state = to_versions(state, base, index)
    elif state.screen is not Screen.SAVED_OUTPUTS_LIST:
        state = _go(state, Screen.SAVED_OUTPUTS_LIST)
    if event.error:
        state = _error(state, event.error)
    return state, ()


def _on_saved_output_read(state: WizardState, event: ev.SavedOutputRead) -> Result:
    if event.error:
        return _error(state, event.error), ()
    return _go(state, Screen.SAVED_OUTPUT_VIEW, output=event.content, selected_output=event.name), ()


def _on_output_saved(state: WizardState, event: ev.OutputSaved) -> Result:
    if event.error:
        return _error(state, f"Failed to save output: {event.error}"), ()
    return _success(to_main_menu(state), f"✓ Output saved to: {event.filename}"), ()


def _on_output_name_required(state: WizardState, event: ev.OutputNameRequired) -> Result:
    return _go(state, Screen.SAVE_OUTPUT_NAME, input_value=""), ()


def _on_contexts(state: WizardState, event: ev.ContextsLoaded) -> Result:
    state = _go(
        state,
        Screen.CONTEXTS_LIST,
        contexts=event.contexts,
        current_context=event.current,
        contexts_error=event.error,
    )
    if event.error:
        state = _error(state, event.error)
    return state, ()


def _on_context_switched(state: WizardState, event: ev.ContextSwitched) -> Result:
    if event.error:
        return _error(state, event.error), ()
    return _success(to_main_menu(state), f"✓ Switched context to {event.name}"), ()


def _on_namespaces(state: WizardState, event: ev.NamespacesLoaded) -> Result:
    state = _go(state, Screen.NAMESPACES_LIST, namespaces=event.namespaces, namespaces_error=event.error)
    if event.error:
        state = _error(state, event.error)
    return state, ()


def _on_default_namespace(state: WizardState, event: ev.DefaultNamespaceSet) -> Result:
    state = _go(replace(state, default_namespace=event.namespace), Screen.CONTEXTS_NAMESPACES_MENU)
    if event.error:
        return _error(state, f"Default namespace set to {event.namespace} for this session only: {event.error}"), ()
    return _success(state, f"✓ Default namespace set to {event.namespace}"), ()


_HANDLERS: dict[type, Callable[[WizardState, ev.Event], Result]] = {
    ev.Started: _on_started,
    ev.Confirm: _on_confirm,
    ev.Back: _on_back,
    ev.Toggle: _on_toggle,
    ev.Navigate: _on_navigate,
    ev.KeyPressed: _on_key,
    ev.NamesLoaded: _on_names,
    ev.SecretKeysLoaded: _on_secret_keys,
    ev.CommandExecuted: _on_executed,
    ev.HelpLoaded: _on_help,
    ev.ConnectivityChecked: _on_connectivity,
    ev.FavouritesLoaded: _on_favourites,
    ev.FavouriteSaved: _on_favourite_saved,
    ev.HistoryLoaded: _on_history,
    ev.HotkeysLoaded: _on_hotkeys,
    ev.HotkeyBound: _on_hotkey_bound,
    ev.HotkeyUnbound: _on_hotkey_unbound,
    ev.SavedOutputsLoaded: _on_saved_outputs,
    ev.SavedOutputRead: _on_saved_output_read,
    ev.OutputSaved: _on_output_saved,
    ev.OutputNameRequired: _on_output_name_required,
    ev.ContextsLoaded: _on_contexts,
    ev.ContextSwitched: _on_context_switched,
    ev.NamespacesLoaded: _on_namespaces,
    ev.DefaultNamespaceSet: _on_default_namespace,
}
