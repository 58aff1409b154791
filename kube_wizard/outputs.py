"""Versioned archive of command outputs.

Layout of the archive directory::

    saved_cmd/
        pods-output.txt        # version 1
        pods-output_v2.txt
        pods-output_v3.txt
        index.json             # {"kubectl get pods": "pods-output"}

A *base* groups every version saved under one name. ``index.json`` maps the
exact command text to the base it was last saved under, so saving the output
of the same command again adds a version to that group without asking for a
name.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .constants import SAVED_OUTPUT_EXT, SAVED_OUTPUTS_DIR, SAVED_OUTPUTS_INDEX
from .errors import SavedOutputError, SavedOutputExistsError, SavedOutputNotFoundError
from .storage import write_atomic

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^(.*)_v(\d+)$")


def clean_name(name: str) -> str:
    """Trim whitespace and a trailing .txt."""
    name = name.strip()
    if name.endswith(SAVED_OUTPUT_EXT):
        name = name[: -len(SAVED_OUTPUT_EXT)]
    return name.strip()


def split_version(name: str) -> tuple[str, int]:
    """``pods_v3`` -> ("pods", 3); ``pods`` -> ("pods", 1)."""
    match = _VERSION_RE.match(name)
    if match and match.group(1):
        return match.group(1), int(match.group(2))
    return name, 1


def version_name(base: str, version: int) -> str:
    return base if version <= 1 else f"{base}_v{version}"


@dataclass(frozen=True)
class SavedOutputGroup:
    base: str
    versions: tuple[str, ...]


class SavedOutputStore:
    def __init__(self, directory: Path | str = SAVED_OUTPUTS_DIR) -> None:
        self.directory = Path(directory)

    # ── Paths ────────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{clean_name(name)}{SAVED_OUTPUT_EXT}"

    @property
    def index_path(self) -> Path:
        return self.directory / SAVED_OUTPUTS_INDEX

    def list_files(self) -> list[str]:
        """Every archived version name (no extension), unsorted."""
        if not self.directory.is_dir():
            return []
        return [
            p.name[: -len(SAVED_OUTPUT_EXT)]
            for p in self.directory.iterdir()
            if p.is_file() and p.name.endswith(SAVED_OUTPUT_EXT)
        ]

    def _files_for_base(self, base: str) -> list[str]:
        return [name for name in self.list_files() if split_version(name)[0] == base]

    # ── Index ────────────────────────────────────────────────────

    def load_index(self) -> dict[str, str]:
        """Read index.json. Missing, empty or malformed files read as empty."""
        if not self.index_path.exists():
            return {}
        try:
            text = self.index_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("Ignoring unreadable %s: %s", self.index_path, exc)
            return {}
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring malformed %s: %s", self.index_path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed %s: expected an object", self.index_path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def save_index(self, index: dict[str, str]) -> None:
        self._ensure_dir()
        write_atomic(self.index_path, json.dumps(index).encode("utf-8"))

    def set_base_for_command(self, command: str, base: str) -> None:
        command = command.strip()
        base = clean_name(base)
        if not command or not base:
            return
        index = self.load_index()
        index[command] = base
        self.save_index(index)

    def _purge_index_for_base(self, base: str) -> None:
        index = self.load_index()
        kept = {cmd: b for cmd, b in index.items() if b != base}
        if len(kept) != len(index):
            self.save_index(kept)

    def _relabel_index(self, old_base: str, new_base: str) -> None:
        index = self.load_index()
        changed = False
        for cmd, base in index.items():
            if base == old_base:
                index[cmd] = new_base
                changed = True
        if changed:
            self.save_index(index)

    # ── Queries ──────────────────────────────────────────────────

    def group_exists(self, base: str) -> bool:
        base = clean_name(base)
        if not base:
            return False
        return bool(self._files_for_base(base))

    def groups(self) -> list[SavedOutputGroup]:
        """Groups sorted by base; versions inside a group sorted by number."""
        grouped: dict[str, list[str]] = {}
        for name in self.list_files():
            grouped.setdefault(split_version(name)[0], []).append(name)
        return [
            SavedOutputGroup(base=base, versions=tuple(sorted(names, key=lambda n: split_version(n)[1])))
            for base, names in sorted(grouped.items())
        ]

    def read(self, name: str) -> str:
        path = self.path_for(name)
        if not path.exists():
            raise SavedOutputNotFoundError(clean_name(name))
        return path.read_text(encoding="utf-8")

    def resolve_for_command(self, command: str) -> str | None:
        """Base the command was last saved under, or None.

        An entry whose group has no files left is dropped from the index.
        """
        if not command.strip():
            return None
        base = self.load_index().get(command)
        if base is None:
            return None
        base = clean_name(base)
        if not base:
            return None
        if not self.group_exists(base):
            logger.info("Dropping stale index entry %r -> %r", command, base)
            self._purge_index_for_base(base)
            return None
        return base

    # ── Mutations ────────────────────────────────────────────────

    def save(self, name: str, content: str, command: str = "") -> str:
        """Write content as the next version under name; returns the file name."""
        trimmed = clean_name(name)
        if not trimmed:
            raise SavedOutputError("output name cannot be empty")
        base = split_version(trimmed)[0]

        self._ensure_dir()
        max_version = 0
        for existing in self._files_for_base(base):
            max_version = max(max_version, split_version(existing)[1])

        target = version_name(base, max_version + 1) if max_version else base
        filename = f"{target}{SAVED_OUTPUT_EXT}"
        (self.directory / filename).write_text(content, encoding="utf-8")
        self.set_base_for_command(command, base)
        logger.info("Saved output %s", filename)
        return filename

    def rename_group(self, old_base: str, new_base: str) -> None:
        """Relabel every version of old_base, keeping each version suffix.

        A ``_vN`` suffix on new_base is dropped, as in :meth:`save`. Nothing
        is renamed when new_base already has files or any destination exists.
        """
        old_base = clean_name(old_base)
        new_base = split_version(clean_name(new_base))[0]
        if not old_base or not new_base:
            raise SavedOutputError("invalid name")
        if old_base == new_base:
            return

        renames: list[tuple[Path, Path]] = []
        for name in self._files_for_base(old_base):
            version = split_version(name)[1]
            renames.append((self.path_for(name), self.path_for(version_name(new_base, version))))
        if not renames:
            raise SavedOutputNotFoundError(old_base)
        if self._files_for_base(new_base):
            raise SavedOutputExistsError(new_base)
        for _, target in renames:
            if target.exists():
                raise SavedOutputExistsError(new_base)

        for source, target in renames:
            source.rename(target)
        self._relabel_index(old_base, new_base)
        logger.info("Renamed saved output group %s -> %s (%d files)", old_base, new_base, len(renames))

    def rename(self, old_name: str, new_name: str) -> None:
        """Rename a single version file."""
        old_name = clean_name(old_name)
        new_name = clean_name(new_name)
        if not old_name or not new_name:
            raise SavedOutputError("invalid name")
        if old_name == new_name:
            return
        source = self.path_for(old_name)
        target = self.path_for(new_name)
        if not source.exists():
            raise SavedOutputNotFoundError(old_name)
        if target.exists():
            raise SavedOutputExistsError(new_name)
        source.rename(target)

        old_base = split_version(old_name)[0]
        if not self.group_exists(old_base):
            self._relabel_index(old_base, split_version(new_name)[0])

    def delete(self, name: str) -> None:
        """Remove one version; purge the index when its group is now empty."""
        name = clean_name(name)
        path = self.path_for(name)
        if not path.exists():
            raise SavedOutputNotFoundError(name)
        path.unlink()
        base = split_version(name)[0]
        if base and not self.group_exists(base):
            self._purge_index_for_base(base)
        logger.info("Deleted saved output %s", name)

    def delete_group(self, base: str) -> None:
        base = clean_name(base)
        if not base:
            raise SavedOutputError("invalid name")
        for name in self._files_for_base(base):
            self.path_for(name).unlink(missing_ok=True)
        if not self.group_exists(base):
            self._purge_index_for_base(base)
        logger.info("Deleted saved output group %s", base)
