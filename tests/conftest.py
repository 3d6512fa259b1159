# tests/conftest.py
import json
from pathlib import Path
from typing import Any

import pytest


def _write_catalog(directory: Path, locale: str, tree: dict[str, Any]) -> Path:
    path = directory / f"{locale}.json"
    path.write_text(json.dumps(tree, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def write_catalog():
    """Helper that writes <locale>.json into a directory."""
    return _write_catalog


@pytest.fixture
def reference_tree() -> dict[str, Any]:
    """English reference catalog."""
    return {
        "common": {"ok": "OK", "cancel": "Cancel", "save": "Save"},
        "club": {
            "chat": {"title": "Chat", "send": "Send"},
            "members": "Members",
        },
        "settings": {"language": "Language", "maxItems": 5, "beta": True},
    }


@pytest.fixture
def target_tree() -> dict[str, Any]:
    """French catalog seeded from the reference and partly translated."""
    return {
        "common": {"ok": "OK", "cancel": "Annuler", "save": "Save"},
        "club": {
            "chat": {"title": "Discussion"},
            "members": "Members",
        },
        "settings": {"language": "Langue", "maxItems": 5, "beta": True},
    }


@pytest.fixture
def locales_dir(tmp_path: Path, reference_tree: dict[str, Any], target_tree: dict[str, Any]) -> Path:
    """Temporary locales directory with en.json and fr.json."""
    directory = tmp_path / "locales"
    directory.mkdir()
    _write_catalog(directory, "en", reference_tree)
    _write_catalog(directory, "fr", target_tree)
    return directory
