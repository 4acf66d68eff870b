"""Utilities for locating the runtime data directory."""

from __future__ import annotations

import os
from pathlib import Path

_ENV_VAR = "CONTEXT_DEMO_DATA_DIR"
_DEFAULT_DIRNAME = ".context_demo"
_REPO_ROOT = Path(__file__).resolve().parents[3]


def get_data_dir() -> Path:
    """Return the configured runtime data directory.

    Honors the CONTEXT_DEMO_DATA_DIR environment variable; otherwise defaults
    to ~/.context_demo on the current platform.
    """
    override = os.getenv(_ENV_VAR)
    if override is not None:
        cleaned = override.strip()
        if not cleaned:
            return (_REPO_ROOT / _DEFAULT_DIRNAME).resolve()
        candidate = Path(cleaned).expanduser()
        if not candidate.is_absolute():
            candidate = (_REPO_ROOT / candidate).resolve()
        else:
            candidate = candidate.resolve()
        return candidate
    return (Path.home() / _DEFAULT_DIRNAME).resolve()


def ensure_data_dir() -> Path:
    """Ensure the data directory exists on disk and return it."""
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def resolve_data_path(*relative: str, ensure_parent: bool = False) -> Path:
    """Resolve a path underneath the runtime data directory, creating the directory."""
    full_path = ensure_data_dir().joinpath(*relative)
    if ensure_parent:
        full_path.parent.mkdir(parents=True, exist_ok=True)
    return full_path


__all__ = [
    "get_data_dir",
    "ensure_data_dir",
    "resolve_data_path",
]
