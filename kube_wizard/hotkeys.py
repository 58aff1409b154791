"""F1-F12 bindings to favourite commands."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

from .constants import HOTKEY_KEYS


@dataclass(frozen=True)
class Binding:
    key: str
    name: str
    command: str


def normalize_key(key: str) -> str:
    return key.strip().upper()


class HotkeysStore:
    """Key -> Binding map stored as a JSON array. Keys are upper case."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._bindings: dict[str, Binding] = {}
        self.load()

    def load(self) -> None:
        self._bindings = {}
        if not self.path.exists():
            return
        raw = json.loads(self.path.read_text() or "[]")
        if not isinstance(raw, list):
            raise ValueError(f"{self.path}: expected a JSON array")
        for d in raw:
            if not isinstance(d, dict):
                continue
            key = normalize_key(str(d.get("key", "")))
            if not key:
                continue
            self._bindings[key] = Binding(
                key=key, name=str(d.get("name", "")), command=str(d.get("command", "")),
            )

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [asdict(b) for b in self._sorted()]
        self.path.write_text(json.dumps(data, indent=2))

    def _sorted(self) -> list[Binding]:
        order = {k: i for i, k in enumerate(HOTKEY_KEYS)}
        return sorted(self._bindings.values(), key=lambda b: (order.get(b.key, len(order)), b.key))

    def set(self, binding: Binding) -> Binding | None:
        """Store a binding; only F1-F12 are accepted."""
        key = normalize_key(binding.key)
        if key not in HOTKEY_KEYS:
            return None
        stored = Binding(key=key, name=binding.name, command=binding.command)
        self._bindings[key] = stored
        self.save()
        return stored

    def delete(self, key: str) -> None:
        self._bindings.pop(normalize_key(key), None)
        self.save()

    def list(self) -> dict[str, Binding]:
        return {b.key: b for b in self._sorted()}
