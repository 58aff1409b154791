"""Wizard configuration, persisted at ~/.kube-wizard/config.toml."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

from .constants import (
    CONFIG_PATH,
    FAVOURITES_FILE,
    HISTORY_FILE,
    HOTKEYS_FILE,
    KUBECTL,
    MAX_HISTORY_ENTRIES,
    SAVED_OUTPUTS_DIR,
)

_DEFAULT_CONFIG: dict[str, Any] = {
    "wizard": {
        "version": 1,
        "kubectl": KUBECTL,
        "default_namespace": "",
        "saved_outputs_dir": SAVED_OUTPUTS_DIR,
        "data_dir": "",
        "history_limit": MAX_HISTORY_ENTRIES,
        "log_file": "",
    },
}


@dataclass(frozen=True)
class WizardConfig:
    """Resolved settings used to wire the client, the stores and the wizard."""

    kubectl: str
    default_namespace: str
    saved_outputs_dir: Path
    data_dir: Path
    history_limit: int
    log_file: Path | None
    path: Path

    @property
    def favourites_path(self) -> Path:
        return self.data_dir / FAVOURITES_FILE

    @property
    def history_path(self) -> Path:
        return self.data_dir / HISTORY_FILE

    @property
    def hotkeys_path(self) -> Path:
        return self.data_dir / HOTKEYS_FILE


def _fresh_default_config() -> dict[str, Any]:
    return {"wizard": dict(_DEFAULT_CONFIG["wizard"])}


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_config_data(path: Path | None = None) -> dict[str, Any]:
    """Load or create the raw config table."""
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        defaults = _fresh_default_config()
        save_config_data(defaults, config_path)
        return defaults
    return tomllib.loads(config_path.read_text())


def save_config_data(data: dict[str, Any], path: Path | None = None) -> None:
    """Write the raw config table to disk."""
    config_path = path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(tomli_w.dumps(data).encode())


def load_config(path: Path | None = None) -> WizardConfig:
    """Resolve a WizardConfig, falling back to defaults for missing keys."""
    config_path = path or CONFIG_PATH
    data = load_config_data(config_path)
    section = data.get("wizard", {}) if isinstance(data, dict) else {}

    limit = section.get("history_limit", MAX_HISTORY_ENTRIES)
    if not isinstance(limit, int) or limit <= 0:
        limit = MAX_HISTORY_ENTRIES

    data_dir = _clean(section.get("data_dir"))
    log_file = _clean(section.get("log_file"))

    return WizardConfig(
        kubectl=_clean(section.get("kubectl")) or KUBECTL,
        default_namespace=_clean(section.get("default_namespace")) or "",
        saved_outputs_dir=Path(_clean(section.get("saved_outputs_dir")) or SAVED_OUTPUTS_DIR).expanduser(),
        data_dir=Path(data_dir).expanduser() if data_dir else Path.home(),
        history_limit=limit,
        log_file=Path(log_file).expanduser() if log_file else None,
        path=config_path,
    )


def set_default_namespace(namespace: str, path: Path | None = None) -> None:
    """Persist the default namespace applied to built commands."""
    data = load_config_data(path)
    section = data.setdefault("wizard", {})
    section["default_namespace"] = namespace.strip()
    save_config_data(data, path)
