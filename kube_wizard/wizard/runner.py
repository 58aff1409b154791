"""Executes wizard tasks and turns each into exactly one completion event."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from ..config import set_default_namespace
from ..errors import ClusterContextError, SavedOutputError, StoreUnavailableError
from ..favourites import FavouritesStore
from ..history import HistoryStore
from ..hotkeys import Binding, HotkeysStore
from ..kubectl import KubectlClient
from ..outputs import SavedOutputStore
from . import events as ev
from . import tasks as tk

logger = logging.getLogger(__name__)


def _failure_events() -> dict[type, Callable[[Any, str], ev.CompletionEvent]]:
    return {
        tk.FetchNames: lambda t, e: ev.NamesLoaded(error=e),
        tk.FetchSecretKeys: lambda t, e: ev.SecretKeysLoaded(error=e),
        tk.ExecuteCommand: lambda t, e: ev.CommandExecuted(error=e),
        tk.LoadHelp: lambda t, e: ev.HelpLoaded(error=e),
        tk.CheckConnectivity: lambda t, e: ev.ConnectivityChecked(error=e),
        tk.LoadFavourites: lambda t, e: ev.FavouritesLoaded(error=e),
        tk.SaveFavourite: lambda t, e: ev.FavouriteSaved(error=e),
        tk.DeleteFavourite: lambda t, e: ev.FavouritesLoaded(error=e),
        tk.RenameFavourite: lambda t, e: ev.FavouritesLoaded(error=e),
        tk.LoadHistory: lambda t, e: ev.HistoryLoaded(error=e),
        tk.LoadHotkeys: lambda t, e: ev.HotkeysLoaded(error=e, show=t.show),
        tk.BindHotkey: lambda t, e: ev.HotkeyBound(key=t.key, name=t.name, error=e),
        tk.UnbindHotkey: lambda t, e: ev.HotkeyUnbound(key=t.key, error=e),
        tk.LoadSavedOutputs: lambda t, e: ev.SavedOutputsLoaded(error=e),
        tk.ReadSavedOutput: lambda t, e: ev.SavedOutputRead(name=t.name, error=e),
        tk.SaveOutput: lambda t, e: ev.OutputSaved(error=e),
        tk.AutoSaveOutput: lambda t, e: ev.OutputSaved(error=e),
        tk.DeleteSavedOutput: lambda t, e: ev.SavedOutputsLoaded(error=e),
        tk.DeleteSavedOutputGroup: lambda t, e: ev.SavedOutputsLoaded(error=e),
        tk.RenameSavedOutput: lambda t, e: ev.SavedOutputsLoaded(error=e),
        tk.LoadContexts: lambda t, e: ev.ContextsLoaded(error=e),
        tk.SwitchContext: lambda t, e: ev.ContextSwitched(name=t.name, error=e),
        tk.LoadNamespaces: lambda t, e: ev.NamespacesLoaded(error=e),
        tk.SetDefaultNamespace: lambda t, e: ev.DefaultNamespaceSet(namespace=t.namespace, error=e),
    }


class TaskRunner:
    """Owns the collaborators. Any store may be None when it failed to open."""

    def __init__(
        self,
        client: KubectlClient,
        outputs: SavedOutputStore,
        favourites: FavouritesStore | None = None,
        history: HistoryStore | None = None,
        hotkeys: HotkeysStore | None = None,
        config_path: Path | None = None,
    ) -> None:
        self.client = client
        self.outputs = outputs
        self.favourites = favourites
        self.history = history
        self.hotkeys = hotkeys
        self.config_path = config_path
        self._failures = _failure_events()
        self._handlers: dict[type, Callable[[Any], ev.CompletionEvent]] = {
            tk.FetchNames: self._fetch_names,
            tk.FetchSecretKeys: self._fetch_secret_keys,
            tk.ExecuteCommand: self._execute,
            tk.LoadHelp: self._help,
            tk.CheckConnectivity: self._connectivity,
            tk.LoadFavourites: self._load_favourites,
            tk.SaveFavourite: self._save_favourite,
            tk.DeleteFavourite: self._delete_favourite,
            tk.RenameFavourite: self._rename_favourite,
            tk.LoadHistory: self._load_history,
            tk.LoadHotkeys: self._load_hotkeys,
            tk.BindHotkey: self._bind_hotkey,
            tk.UnbindHotkey: self._unbind_hotkey,
            tk.LoadSavedOutputs: self._load_saved_outputs,
            tk.ReadSavedOutput: self._read_saved_output,
            tk.SaveOutput: self._save_output,
            tk.AutoSaveOutput: self._auto_save_output,
            tk.DeleteSavedOutput: self._delete_saved_output,
            tk.DeleteSavedOutputGroup: self._delete_saved_output_group,
            tk.RenameSavedOutput: self._rename_saved_output,
            tk.LoadContexts: self._load_contexts,
            tk.SwitchContext: self._switch_context,
            tk.LoadNamespaces: self._load_namespaces,
            tk.SetDefaultNamespace: self._set_default_namespace,
        }

    def run(self, task: tk.Task) -> ev.CompletionEvent:
        """Perform task; failures come back as the event's error field."""
        handler = self._handlers[type(task)]
        logger.debug("Running task %s", task)
        try:
            return handler(task)
        except Exception as exc:
            if isinstance(exc, (ClusterContextError, StoreUnavailableError, SavedOutputError)):
                logger.warning("%s failed: %s", type(task).__name__, exc)
            else:
                logger.exception("%s failed", type(task).__name__)
            return self._failures[type(task)](task, str(exc))

    # ── Store access ─────────────────────────────────────────────

    def _favourites(self) -> FavouritesStore:
        if self.favourites is None:
            raise StoreUnavailableError("favourites")
        return self.favourites

    def _history(self) -> HistoryStore:
        if self.history is None:
            raise StoreUnavailableError("history")
        return self.history

    def _hotkeys(self) -> HotkeysStore:
        if self.hotkeys is None:
            raise StoreUnavailableError("hotkeys")
        return self.hotkeys

    # ── kubectl ──────────────────────────────────────────────────

    def _fetch_names(self, task: tk.FetchNames) -> ev.CompletionEvent:
        return ev.NamesLoaded(names=tuple(self.client.list_names(task.resource)))

    def _fetch_secret_keys(self, task: tk.FetchSecretKeys) -> ev.CompletionEvent:
        return ev.SecretKeysLoaded(keys=tuple(self.client.secret_keys(task.name, task.namespace)))

    def _execute(self, task: tk.ExecuteCommand) -> ev.CompletionEvent:
        result = self.client.execute_raw(task.command)
        self._record_history(task.command)
        return ev.CommandExecuted(result=result)

    def _record_history(self, command: str) -> None:
        if self.history is None or not command.strip():
            return
        try:
            self.history.add(command)
        except (OSError, ValueError) as exc:
            logger.warning("Could not record history: %s", exc)

    def _help(self, task: tk.LoadHelp) -> ev.CompletionEvent:
        command = task.command.strip() or "kubectl"
        if not command.endswith(" --help"):
            command += " --help"
        return ev.HelpLoaded(result=self.client.execute_raw(command))

    def _connectivity(self, task: tk.CheckConnectivity) -> ev.CompletionEvent:
        return ev.ConnectivityChecked(result=self.client.cluster_info())

    def _load_contexts(self, task: tk.LoadContexts) -> ev.CompletionEvent:
        contexts = tuple(self.client.list_contexts())
        try:
            current = self.client.current_context()
        except ClusterContextError:
            current = ""
        return ev.ContextsLoaded(contexts=contexts, current=current)

    def _switch_context(self, task: tk.SwitchContext) -> ev.CompletionEvent:
        self.client.use_context(task.name)
        return ev.ContextSwitched(name=task.name)

    def _load_namespaces(self, task: tk.LoadNamespaces) -> ev.CompletionEvent:
        return ev.NamespacesLoaded(namespaces=tuple(self.client.list_namespaces()))

    def _set_default_namespace(self, task: tk.SetDefaultNamespace) -> ev.CompletionEvent:
        set_default_namespace(task.namespace, self.config_path)
        return ev.DefaultNamespaceSet(namespace=task.namespace)

    # ── Favourites / history / hotkeys ───────────────────────────

    def _load_favourites(self, task: tk.LoadFavourites) -> ev.CompletionEvent:
        return ev.FavouritesLoaded(favourites=tuple(self._favourites().list()))

    def _save_favourite(self, task: tk.SaveFavourite) -> ev.CompletionEvent:
        store = self._favourites()
        store.add(task.name, task.command)
        return ev.FavouriteSaved(favourites=tuple(store.list()))

    def _delete_favourite(self, task: tk.DeleteFavourite) -> ev.CompletionEvent:
        store = self._favourites()
        store.delete(task.index)
        return ev.FavouritesLoaded(favourites=tuple(store.list()))

    def _rename_favourite(self, task: tk.RenameFavourite) -> ev.CompletionEvent:
        store = self._favourites()
        store.rename(task.index, task.name)
        return ev.FavouritesLoaded(favourites=tuple(store.list()))

    def _load_history(self, task: tk.LoadHistory) -> ev.CompletionEvent:
        return ev.HistoryLoaded(entries=tuple(self._history().list()))

    def _hotkey_snapshot(self) -> tuple[Binding, ...]:
        return tuple(self._hotkeys().list().values())

    def _load_hotkeys(self, task: tk.LoadHotkeys) -> ev.CompletionEvent:
        return ev.HotkeysLoaded(bindings=self._hotkey_snapshot(), show=task.show)

    def _bind_hotkey(self, task: tk.BindHotkey) -> ev.CompletionEvent:
        stored = self._hotkeys().set(Binding(key=task.key, name=task.name, command=task.command))
        if stored is None:
            return ev.HotkeyBound(key=task.key, name=task.name, error=f"{task.key} is not a bindable key")
        return ev.HotkeyBound(key=stored.key, name=stored.name, bindings=self._hotkey_snapshot())

    def _unbind_hotkey(self, task: tk.UnbindHotkey) -> ev.CompletionEvent:
        self._hotkeys().delete(task.key)
        return ev.HotkeyUnbound(key=task.key.upper(), bindings=self._hotkey_snapshot())

    # ── Saved outputs ────────────────────────────────────────────

    def _groups_event(self, error: str = "") -> ev.CompletionEvent:
        return ev.SavedOutputsLoaded(groups=tuple(self.outputs.groups()), error=error)

    def _load_saved_outputs(self, task: tk.LoadSavedOutputs) -> ev.CompletionEvent:
        self.outputs.directory.mkdir(parents=True, exist_ok=True)
        return self._groups_event()

    def _read_saved_output(self, task: tk.ReadSavedOutput) -> ev.CompletionEvent:
        return ev.SavedOutputRead(name=task.name, content=self.outputs.read(task.name))

    def _save_output(self, task: tk.SaveOutput) -> ev.CompletionEvent:
        return ev.OutputSaved(filename=self.outputs.save(task.name, task.content, task.command))

    def _auto_save_output(self, task: tk.AutoSaveOutput) -> ev.CompletionEvent:
        base = self.outputs.resolve_for_command(task.command)
        if base is None:
            return ev.OutputNameRequired()
        return ev.OutputSaved(filename=self.outputs.save(base, task.content, task.command))

    def _mutate_saved_outputs(self, mutate: Callable[[], None]) -> ev.CompletionEvent:
        """Run a mutation, then reload; a failed mutation still lists what is there."""
        try:
            mutate()
        except (SavedOutputError, OSError) as exc:
            logger.warning("Saved output change failed: %s", exc)
            return self._groups_event(str(exc))
        return self._groups_event()

    def _delete_saved_output(self, task: tk.DeleteSavedOutput) -> ev.CompletionEvent:
        return self._mutate_saved_outputs(lambda: self.outputs.delete(task.name))

    def _delete_saved_output_group(self, task: tk.DeleteSavedOutputGroup) -> ev.CompletionEvent:
        return self._mutate_saved_outputs(lambda: self.outputs.delete_group(task.base))

    def _rename_saved_output(self, task: tk.RenameSavedOutput) -> ev.CompletionEvent:
        if task.group:
            return self._mutate_saved_outputs(lambda: self.outputs.rename_group(task.old, task.new))
        return self._mutate_saved_outputs(lambda: self.outputs.rename(task.old, task.new))
