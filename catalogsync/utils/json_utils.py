"""Centralized JSON file I/O with consistent error handling.

Provides load_json() and save_json() for settings, patches and
catalogs. Writes go through a temporary file and an atomic replace
so a catalog is never left half-written.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

__all__ = ["load_json", "save_json"]

logger = logging.getLogger("catalogsync.json_utils")


def load_json(path: Path, default: Any = None) -> Any:
    """Load and parse a JSON file with unified error handling.

    Args:
        path: Path to the JSON file.
        default: Value to return if file doesn't exist or fails to parse.
            Defaults to empty dict if None.

    Returns:
        Parsed JSON data, or default value on failure.
    """
    if default is None:
        default = {}
    if not path.exists():
        return default
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to load JSON from %s: %s", path, exc)
        return default


def save_json(path: Path, data: Any, indent: int = 2, ensure_parents: bool = True) -> bool:
    """Save data as JSON (UTF-8, trailing newline) via an atomic replace.

    Args:
        path: Target file path.
        data: Data to serialize as JSON.
        indent: Indentation width.
        ensure_parents: Create parent directories if needed.

    Returns:
        True on success, False on failure.
    """
    tmp_name: str | None = None
    try:
        if ensure_parents:
            path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
        return True
    except (OSError, TypeError, ValueError) as exc:
        logger.error("Failed to save JSON to %s: %s", path, exc)
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)
        return False
