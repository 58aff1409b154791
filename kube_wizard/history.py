"""Command history: newest first, capped, written atomically with a .bak copy."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .constants import MAX_HISTORY_ENTRIES
from .storage import backup, write_atomic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    command: str
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.command, "timestamp": self.timestamp.isoformat()}


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return datetime.fromtimestamp(0, tz=timezone.utc)


def _dict_to_entry(d: dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(command=str(d.get("command", "")), timestamp=_parse_timestamp(d.get("timestamp")))


class HistoryStore:
    def __init__(self, path: Path, limit: int = MAX_HISTORY_ENTRIES) -> None:
        self.path = Path(path)
        self.limit = limit
        self._entries: list[HistoryEntry] = []
        self.load()

    def load(self) -> None:
        if not self.path.exists():
            self._entries = []
            return
        raw = json.loads(self.path.read_text() or "[]")
        if not isinstance(raw, list):
            raise ValueError(f"{self.path}: expected a JSON array")
        self._entries = [_dict_to_entry(d) for d in raw if isinstance(d, dict)][: self.limit]

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            backup(self.path)
        except OSError as exc:
            logger.warning("History backup failed: %s", exc)
        data = json.dumps([e.to_dict() for e in self._entries], indent=2)
        write_atomic(self.path, data.encode())

    def add(self, command: str, when: datetime | None = None) -> HistoryEntry:
        """Prepend a command and drop entries past the limit."""
        entry = HistoryEntry(command=command, timestamp=when or datetime.now(timezone.utc))
        self._entries.insert(0, entry)
        del self._entries[self.limit :]
        self.save()
        return entry

    def list(self) -> list[HistoryEntry]:
        """Entries sorted newest first."""
        return sorted(self._entries, key=lambda e: e.timestamp, reverse=True)
