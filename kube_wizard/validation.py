"""Input checks for names typed into the wizard."""

from __future__ import annotations

import re

from .errors import InvalidNameError

# DNS-1123 label
_RESOURCE_NAME_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_SAFE_NAME_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9\s\-._]*[a-zA-Z0-9])?$")

MAX_RESOURCE_NAME = 63
MAX_SAFE_NAME = 100


def is_valid_resource_name(name: str) -> bool:
    if not name or len(name) > MAX_RESOURCE_NAME:
        return False
    return _RESOURCE_NAME_RE.match(name) is not None


def is_safe_name(name: str) -> bool:
    """Names used for favourites and saved outputs: alphanumerics, spaces, '-', '.', '_'."""
    name = name.strip()
    if not name or len(name) > MAX_SAFE_NAME:
        return False
    return _SAFE_NAME_RE.match(name) is not None


def require_safe_name(name: str, what: str = "name") -> str:
    """Return the stripped name or raise InvalidNameError."""
    stripped = name.strip()
    if not is_safe_name(stripped):
        raise InvalidNameError(
            f"Invalid {what} '{stripped}': use letters, digits, spaces, '-', '.' or '_' "
            f"(max {MAX_SAFE_NAME} characters)"
        )
    return stripped
