"""Atomic file writes for the JSON stores."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path


def write_atomic(path: Path, data: bytes) -> None:
    """Write data next to path, fsync it, then rename it over path."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix="kube-wizard-temp-")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def backup(path: Path) -> Path | None:
    """Copy path to a .bak sidecar. Returns None when there is nothing to copy."""
    path = Path(path)
    if not path.exists():
        return None
    backup_path = path.with_name(path.name + ".bak")
    shutil.copyfile(path, backup_path)
    return backup_path
