"""Favourite commands, persisted as a JSON array of name/command objects."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Favourite:
    name: str
    command: str


def _dict_to_favourite(d: dict[str, Any]) -> Favourite:
    return Favourite(name=str(d.get("name", "")), command=str(d.get("command", "")))


class FavouritesStore:
    """Ordered list of favourites. Out-of-range indexes are ignored."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._favourites: list[Favourite] = []
        self.load()

    def load(self) -> None:
        """Read the file; a missing file means an empty list."""
        if not self.path.exists():
            self._favourites = []
            return
        raw = json.loads(self.path.read_text() or "[]")
        if not isinstance(raw, list):
            raise ValueError(f"{self.path}: expected a JSON array")
        self._favourites = [_dict_to_favourite(d) for d in raw if isinstance(d, dict)]

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [asdict(f) for f in self._favourites]
        self.path.write_text(json.dumps(data, indent=2))

    def add(self, name: str, command: str) -> Favourite:
        favourite = Favourite(name=name, command=command)
        self._favourites.append(favourite)
        self.save()
        return favourite

    def delete(self, index: int) -> None:
        if not 0 <= index < len(self._favourites):
            return
        del self._favourites[index]
        self.save()

    def rename(self, index: int, name: str) -> None:
        current = self.get(index)
        if current is None:
            return
        self._favourites[index] = Favourite(name=name, command=current.command)
        self.save()

    def get(self, index: int) -> Favourite | None:
        if not 0 <= index < len(self._favourites):
            return None
        return self._favourites[index]

    def list(self) -> list[Favourite]:
        return list(self._favourites)
