"""Deferred units of side-effecting work returned by dispatch().

Each task is plain data; TaskRunner performs it and answers with one event.
"""

from __future__ import annotations

from dataclasses import dataclass


class Task:
    pass


@dataclass(frozen=True)
class FetchNames(Task):
    resource: str


@dataclass(frozen=True)
class FetchSecretKeys(Task):
    name: str
    namespace: str = ""


@dataclass(frozen=True)
class ExecuteCommand(Task):
    command: str


@dataclass(frozen=True)
class LoadHelp(Task):
    command: str


@dataclass(frozen=True)
class CheckConnectivity(Task):
    pass


# ── Favourites / history / hotkeys ───────────────────────────────


@dataclass(frozen=True)
class LoadFavourites(Task):
    pass


@dataclass(frozen=True)
class SaveFavourite(Task):
    name: str
    command: str


@dataclass(frozen=True)
class DeleteFavourite(Task):
    index: int


@dataclass(frozen=True)
class RenameFavourite(Task):
    index: int
    name: str


@dataclass(frozen=True)
class LoadHistory(Task):
    pass


@dataclass(frozen=True)
class LoadHotkeys(Task):
    show: bool = True


@dataclass(frozen=True)
class BindHotkey(Task):
    key: str
    name: str
    command: str


@dataclass(frozen=True)
class UnbindHotkey(Task):
    key: str


# ── Saved outputs ────────────────────────────────────────────────


@dataclass(frozen=True)
class LoadSavedOutputs(Task):
    pass


@dataclass(frozen=True)
class ReadSavedOutput(Task):
    name: str


@dataclass(frozen=True)
class SaveOutput(Task):
    name: str
    content: str
    command: str


@dataclass(frozen=True)
class AutoSaveOutput(Task):
    """Save under the base index.json knows for command, if any."""

    content: str
    command: str


@dataclass(frozen=True)
class DeleteSavedOutput(Task):
    name: str


@dataclass(frozen=True)
class DeleteSavedOutputGroup(Task):
    base: str


@dataclass(frozen=True)
class RenameSavedOutput(Task):
    old: str
    new: str
    group: bool = True


# ── Contexts & namespaces ────────────────────────────────────────


@dataclass(frozen=True)
class LoadContexts(Task):
    pass


@dataclass(frozen=True)
class SwitchContext(Task):
    name: str


@dataclass(frozen=True)
class LoadNamespaces(Task):
    pass


@dataclass(frozen=True)
class SetDefaultNamespace(Task):
    namespace: str
