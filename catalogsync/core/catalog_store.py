# catalogsync/core/catalog_store.py

"""JSON-backed storage for locale catalogs.

One document per locale, ``<locales_dir>/<locale>.json``. Catalogs are
read and written whole; key order survives the round-trip.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from catalogsync.core.backup_manager import BackupManager
from catalogsync.core.catalog_tree import CatalogTree, count_leaves, validate_tree
from catalogsync.core.exceptions import CatalogIOError
from catalogsync.utils.json_utils import save_json

__all__ = ["CatalogStore"]

logger = logging.getLogger("catalogsync.catalog_store")


class CatalogStore:
    """Loads and saves locale catalogs from a directory of JSON files."""

    SUFFIX = ".json"

    def __init__(
        self,
        locales_dir: Path,
        indent: int = 2,
        backup_manager: BackupManager | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            locales_dir: Directory holding ``<locale>.json`` files.
            indent: JSON indentation used when saving.
            backup_manager: Takes a backup before each save when given.
        """
        self.locales_dir = Path(locales_dir)
        self.indent = indent
        self.backup_manager = backup_manager

    def path_for(self, locale: str) -> Path:
        """Return the document path for a locale tag."""
        if not locale or "/" in locale or "\\" in locale or locale.startswith("."):
            raise CatalogIOError(f"Invalid locale tag {locale!r}")
        return self.locales_dir / f"{locale}{self.SUFFIX}"

    def list_locales(self) -> list[str]:
        """Return the sorted locale tags present in the directory."""
        if not self.locales_dir.is_dir():
            return []
        return sorted(p.stem for p in self.locales_dir.glob(f"*{self.SUFFIX}") if not p.name.startswith("."))

    def exists(self, locale: str) -> bool:
        return self.path_for(locale).exists()

    def load_catalog(self, locale: str) -> CatalogTree:
        """Read and validate a locale catalog.

        Raises:
            CatalogIOError: If the document is missing or is not valid JSON.
            InvalidCatalogError: If the document is not a catalog tree.
            MalformedPathError: If a key is empty or contains the path delimiter.
        """
        path = self.path_for(locale)
        if not path.exists():
            raise CatalogIOError(f"No catalog for locale '{locale}' at {path}")
        try:
            with open(path, encoding="utf-8") as f:
                tree = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            raise CatalogIOError(f"Cannot read catalog {path}: {exc}") from exc
        validate_tree(tree)
        logger.debug("Loaded %s (%d leaves)", path.name, count_leaves(tree))
        return tree

    def save_catalog(self, locale: str, tree: CatalogTree) -> Path | None:
        """Validate and write a locale catalog.

        Args:
            locale: Locale tag.
            tree: The full catalog to write.

        Returns:
            Path of the backup taken before writing, if any.

        Raises:
            CatalogIOError: If the document cannot be written.
            InvalidCatalogError: If ``tree`` is not a catalog.
        """
        validate_tree(tree)
        path = self.path_for(locale)
        backup_path = None
        if self.backup_manager is not None and path.exists():
            backup_path = self.backup_manager.create_backup(path)
        if not save_json(path, tree, indent=self.indent):
            raise CatalogIOError(f"Cannot write catalog {path}")
        logger.info("Saved %s", path.name)
        return backup_path
