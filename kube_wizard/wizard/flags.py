"""Per-action flag checklists and the toggle rules behind them."""

from __future__ import annotations

from dataclasses import replace

from .builder import Action
from .state import Selections

NAMESPACE_FLAG = "-n <namespace>"
DONE_LABEL = "Done (Continue)"
SEPARATOR_LABEL = "---"

_NAMESPACE = (NAMESPACE_FLAG, "Specify custom namespace")

CHECKLISTS: dict[Action, tuple[tuple[str, str], ...]] = {
    Action.GET: (
        ("-o wide", "Show additional columns"),
        ("-o yaml", "Output in YAML format"),
        ("-o json", "Output in JSON format"),
        ("--show-labels", "Show labels"),
        ("-A", "All namespaces"),
        _NAMESPACE,
    ),
    Action.DESCRIBE: (
        ("--show-events=true", "Show events"),
        _NAMESPACE,
    ),
    Action.LOGS: (
        ("-f", "Follow log output"),
        ("--tail=100", "Show last 100 lines"),
        ("--tail=50", "Show last 50 lines"),
        ("--since=1h", "Show logs from last hour"),
        ("--since=5m", "Show logs from last 5 minutes"),
        ("--previous", "Show logs from previous container"),
        _NAMESPACE,
    ),
    Action.TOP: (
        ("--containers", "Include container metrics (pods)"),
        ("--sort-by=cpu", "Sort by CPU usage"),
        ("--sort-by=memory", "Sort by memory usage"),
        ("-A", "All namespaces"),
        _NAMESPACE,
    ),
}


def checklist_for(action: Action | None) -> tuple[tuple[str, str], ...]:
    if action is None:
        return ()
    return CHECKLISTS.get(action, ())


def is_checked(selections: Selections, flag: str) -> bool:
    if flag == NAMESPACE_FLAG:
        return selections.namespace_required
    return flag in selections.flags


def checkbox_label(selections: Selections, flag: str) -> str:
    marker = "[x]" if is_checked(selections, flag) else "[ ]"
    return f"{marker} {flag}"


def toggle_flag(selections: Selections, flag: str) -> Selections:
    """Add or remove a flag.

    The namespace entry only flips ``namespace_required``; turning it off also
    forgets the typed namespace and drops the first ``-n`` flag.
    """
    if flag in (DONE_LABEL, SEPARATOR_LABEL) or not flag:
        return selections

    if flag == NAMESPACE_FLAG:
        if not selections.namespace_required:
            return replace(selections, namespace_required=True)
        flags = list(selections.flags)
        for i, existing in enumerate(flags):
            if existing.startswith("-n"):
                del flags[i]
                break
        return replace(
            selections,
            namespace_required=False,
            custom_namespace="",
            flags=tuple(flags),
        )

    if flag in selections.flags:
        return replace(selections, flags=tuple(f for f in selections.flags if f != flag))
    return replace(selections, flags=selections.flags + (flag,))
