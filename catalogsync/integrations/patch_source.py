"""Patch and glossary sources.

Reads translation patches from local JSON files or from an HTTP(S)
endpoint (for example the export URL of a translation provider) and
normalizes them into the flat ``{dotted_path: leaf}`` form.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import requests

from catalogsync.core.catalog_tree import DELIMITER, Leaf, is_branch, is_leaf
from catalogsync.core.exceptions import PatchSourceError, PathConflictError
from catalogsync.version import __app_name__, __version__

logger = logging.getLogger("catalogsync.patch_source")

__all__ = ["PatchSourceClient", "is_url", "load_glossary", "load_patch", "normalize_patch"]


def is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


class PatchSourceClient:
    """Fetches JSON patch documents over HTTP."""

    def __init__(self, timeout: float = 10.0) -> None:
        """Initializes the client with a configured session.

        Args:
            timeout: Seconds to wait for the server.
        """
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {"User-Agent": f"{__app_name__}/{__version__}", "Accept": "application/json"}
        )

    def fetch(self, url: str) -> Any:
        """Fetches and decodes a JSON document.

        Args:
            url: Address of the document.

        Returns:
            The decoded JSON value.

        Raises:
            PatchSourceError: On network errors, non-200 responses or invalid JSON.
        """
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Patch source: network error for %s: %s", url, exc)
            raise PatchSourceError(f"Cannot fetch {url}: {exc}") from exc

        if response.status_code != 200:
            logger.warning("Patch source: unexpected status %d for %s", response.status_code, url)
            raise PatchSourceError(f"Cannot fetch {url}: HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Patch source: parse error for %s: %s", url, exc)
            raise PatchSourceError(f"Invalid JSON from {url}: {exc}") from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> PatchSourceClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _read_document(source: str | Path, client: PatchSourceClient | None, timeout: float) -> Any:
    if is_url(source):
        if client is not None:
            return client.fetch(str(source))
        with PatchSourceClient(timeout=timeout) as own_client:
            return own_client.fetch(str(source))

    path = Path(source)
    if not path.exists():
        raise PatchSourceError(f"Patch file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        raise PatchSourceError(f"Cannot read {path}: {exc}") from exc


def _flatten_into(flat: dict[str, Any], prefix: str, node: Mapping[str, Any]) -> None:
    for key, value in node.items():
        if not isinstance(key, str):
            raise PatchSourceError(f"Patch keys must be strings, got {key!r}")
        path = f"{prefix}{DELIMITER}{key}" if prefix else key
        if is_branch(value):
            _flatten_into(flat, path, value)
        elif path in flat:
            raise PathConflictError(f"Patch sets '{path}' more than once")
        else:
            # malformed paths and non-scalar values are left for the applier to report
            flat[path] = value


def normalize_patch(data: Any) -> dict[str, Leaf]:
    """Flatten a flat, nested or mixed patch mapping.

    Keys may be dotted paths whose values are themselves nested mappings,
    e.g. ``{"club": {"chat.title": "Chat"}}``.

    Args:
        data: Decoded JSON document.

    Returns:
        ``{dotted_path: value}`` in document order.

    Raises:
        PatchSourceError: If the document is not an object or has non-string keys.
        PathConflictError: If the same path is given twice.
    """
    if not is_branch(data):
        raise PatchSourceError(f"Patch must be a JSON object, got {type(data).__name__}")
    flat: dict[str, Any] = {}
    _flatten_into(flat, "", data)
    return flat


def load_patch(
    source: str | Path,
    client: PatchSourceClient | None = None,
    timeout: float = 10.0,
) -> dict[str, Leaf]:
    """Load a patch from a JSON file or URL and return it in flat form.

    Raises:
        PatchSourceError: If the source cannot be read or is not a JSON object.
        PathConflictError: If the patch sets the same path twice.
    """
    patch = normalize_patch(_read_document(source, client, timeout))
    logger.info("Loaded %d patch entries from %s", len(patch), source)
    return patch


def load_glossary(
    source: str | Path,
    client: PatchSourceClient | None = None,
    timeout: float = 10.0,
) -> dict[str, Leaf]:
    """Load a flat ``{source_text: translation}`` glossary.

    Raises:
        PatchSourceError: If the source cannot be read, is not an object, or holds
            non-scalar translations.
    """
    data = _read_document(source, client, timeout)
    if not is_branch(data):
        raise PatchSourceError(f"Glossary must be a JSON object, got {type(data).__name__}")
    for text, translation in data.items():
        if not is_leaf(translation):
            raise PatchSourceError(f"Glossary entry {text!r} must map to a scalar")
    logger.info("Loaded %d glossary entries from %s", len(data), source)
    return dict(data)
