"""Turn wizard selections into a kubectl command line."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from ..constants import KUBECTL


class ResourceKind(Enum):
    PODS = ("Pods", "pods", "pod", "Manage pods")
    DEPLOYMENTS = ("Deployments", "deployments", "deployment", "Manage deployments")
    SERVICES = ("Services", "services", "service", "Inspect services")
    NODES = ("Nodes", "nodes", "node", "Inspect cluster nodes")
    CONFIGMAPS = ("ConfigMaps", "configmaps", "configmap", "Inspect configuration data")
    SECRETS = ("Secrets", "secrets", "secret", "Inspect secrets (careful: may show sensitive data)")
    INGRESS = ("Ingress", "ingress", "ingress", "Inspect ingress resources")

    def __init__(self, label: str, plural: str, singular: str, description: str) -> None:
        self.label = label
        self.plural = plural
        self.singular = singular
        self.description = description


class Action(Enum):
    GET = "Get"
    DESCRIBE = "Describe"
    LOGS = "Logs"
    EXTRACT_FIELD = "Extract Field"
    DELETE = "Delete"
    TOP = "Top (Metrics)"

    @property
    def label(self) -> str:
        return self.value

    @property
    def needs_target(self) -> bool:
        """Actions that fetch live names before going further."""
        return self not in (Action.GET, Action.TOP)


ACTIONS_BY_KIND: dict[ResourceKind, tuple[Action, ...]] = {
    ResourceKind.PODS: (Action.GET, Action.DESCRIBE, Action.LOGS, Action.DELETE, Action.TOP),
    ResourceKind.DEPLOYMENTS: (Action.GET, Action.DESCRIBE, Action.LOGS, Action.DELETE),
    ResourceKind.SERVICES: (Action.GET, Action.DESCRIBE, Action.DELETE),
    ResourceKind.NODES: (Action.GET, Action.DESCRIBE, Action.TOP),
    ResourceKind.CONFIGMAPS: (Action.GET, Action.DESCRIBE, Action.DELETE),
    ResourceKind.SECRETS: (Action.GET, Action.DESCRIBE, Action.EXTRACT_FIELD, Action.DELETE),
    ResourceKind.INGRESS: (Action.GET, Action.DESCRIBE, Action.DELETE),
}


def action_description(kind: ResourceKind, action: Action) -> str:
    noun = kind.label.lower()
    one = kind.singular
    return {
        Action.GET: f"List all {noun}",
        Action.DESCRIBE: f"Describe a specific {one}",
        Action.LOGS: f"View logs from a {one}",
        Action.EXTRACT_FIELD: f"Decode a single field of a {one}",
        Action.DELETE: f"Delete a {one}",
        Action.TOP: f"Show CPU/memory usage of {noun}",
    }[action]


def _base_command(kind: ResourceKind, action: Action, target: str) -> str:
    if action is Action.GET:
        return f"{KUBECTL} get {kind.plural}"
    if action is Action.TOP:
        return f"{KUBECTL} top {kind.plural}"
    if action is Action.DESCRIBE:
        return f"{KUBECTL} describe {kind.singular} {target}"
    if action is Action.LOGS:
        if kind is ResourceKind.PODS:
            return f"{KUBECTL} logs {target}"
        return f"{KUBECTL} logs {kind.singular}/{target}"
    if action is Action.DELETE:
        return f"{KUBECTL} delete {kind.singular} {target}"
    if action is Action.EXTRACT_FIELD:
        return f"{KUBECTL} get {kind.singular} {target}"
    raise ValueError(f"unsupported action: {action}")


def build_command(
    kind: ResourceKind,
    action: Action,
    target: str = "",
    flags: Iterable[str] = (),
) -> str:
    """Deterministic command text; flags are appended verbatim in order."""
    command = _base_command(kind, action, target)
    for flag in flags:
        if flag:
            command += " " + flag
    return command


def has_explicit_namespace(flags: Iterable[str]) -> bool:
    return any(f == "-A" or f.startswith("-n ") or f.startswith("-n=") for f in flags)


def with_default_namespace(flags: tuple[str, ...], default_namespace: str) -> tuple[str, ...]:
    """Append ``-n <default>`` unless a namespace is already chosen."""
    if default_namespace and not has_explicit_namespace(flags):
        return flags + (f"-n {default_namespace}",)
    return flags


# ── Secret field extraction ──────────────────────────────────────


def _quote_key(key: str) -> str:
    return key.replace("'", "'\\''")


def field_template(field: str) -> str:
    """go-template that prints one field of a secret."""
    prefixed = (
        ("data.", '{{{{index .data "{}" | base64decode}}}}'),
        ("stringData.", '{{{{index .stringData "{}"}}}}'),
        ("metadata.labels.", '{{{{index .metadata.labels "{}"}}}}'),
        ("metadata.annotations.", '{{{{index .metadata.annotations "{}"}}}}'),
    )
    for prefix, template in prefixed:
        if field.startswith(prefix):
            return template.format(_quote_key(field[len(prefix):]))
    if field == "metadata.name":
        return "{{.metadata.name}}"
    if field == "metadata.namespace":
        return "{{.metadata.namespace}}"
    if field == "metadata.type":
        return "{{.type}}"
    return '{{{{index .data "{}" | base64decode}}}}'.format(_quote_key(field))


def extract_field_command(name: str, field: str, namespace: str = "") -> str:
    command = f"{KUBECTL} get secret {name} -o go-template='{field_template(field)}'"
    if namespace:
        command += f" -n {namespace}"
    return command


def normalize_custom_command(text: str) -> str:
    """Prefix free-form input with ``kubectl `` unless it already has it."""
    text = text.strip()
    if text.startswith(f"{KUBECTL} "):
        return text
    return f"{KUBECTL} {text}"
