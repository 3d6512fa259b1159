"""Tests for the JSON catalog store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from catalogsync.core.backup_manager import BackupManager
from catalogsync.core.catalog_store import CatalogStore
from catalogsync.core.exceptions import CatalogIOError, InvalidCatalogError, MalformedPathError


class TestCatalogStoreLoad:
    """Tests for CatalogStore.load_catalog() and list_locales()."""

    def test_list_locales_sorted(self, locales_dir: Path) -> None:
        (locales_dir / "de.json").write_text("{}", encoding="utf-8")
        assert CatalogStore(locales_dir).list_locales() == ["de", "en", "fr"]

    def test_list_locales_missing_dir(self, tmp_path: Path) -> None:
        assert CatalogStore(tmp_path / "nope").list_locales() == []

    def test_list_locales_ignores_subdirectories(self, locales_dir: Path) -> None:
        backups = locales_dir / "backups"
        backups.mkdir()
        (backups / "fr_1700000000.json").write_text("{}", encoding="utf-8")
        assert CatalogStore(locales_dir).list_locales() == ["en", "fr"]

    def test_load_preserves_key_order(self, locales_dir: Path) -> None:
        tree = CatalogStore(locales_dir).load_catalog("en")
        assert list(tree) == ["common", "club", "settings"]
        assert list(tree["common"]) == ["ok", "cancel", "save"]

    def test_load_missing_locale(self, locales_dir: Path) -> None:
        with pytest.raises(CatalogIOError, match="xx"):
            CatalogStore(locales_dir).load_catalog("xx")

    def test_load_invalid_json(self, locales_dir: Path) -> None:
        (locales_dir / "it.json").write_text("{ not json", encoding="utf-8")
        with pytest.raises(CatalogIOError):
            CatalogStore(locales_dir).load_catalog("it")

    def test_load_rejects_array_values(self, locales_dir: Path, write_catalog) -> None:
        write_catalog(locales_dir, "pt", {"a": ["x"]})
        with pytest.raises(InvalidCatalogError):
            CatalogStore(locales_dir).load_catalog("pt")

    def test_load_rejects_dotted_keys(self, locales_dir: Path, write_catalog) -> None:
        write_catalog(locales_dir, "pt", {"a.b": "x"})
        with pytest.raises(MalformedPathError):
            CatalogStore(locales_dir).load_catalog("pt")

    @pytest.mark.parametrize("locale", ["", "../en", ".hidden"])
    def test_rejects_bad_locale_tags(self, locales_dir: Path, locale: str) -> None:
        with pytest.raises(CatalogIOError):
            CatalogStore(locales_dir).path_for(locale)


class TestCatalogStoreSave:
    """Tests for CatalogStore.save_catalog()."""

    def test_save_round_trip(self, tmp_path: Path) -> None:
        store = CatalogStore(tmp_path)
        tree = {"b": {"z": "Zed", "a": "Ä"}, "a": 1}
        store.save_catalog("de", tree)

        assert store.load_catalog("de") == tree
        assert list(store.load_catalog("de")) == ["b", "a"]

    def test_save_format(self, tmp_path: Path) -> None:
        store = CatalogStore(tmp_path, indent=4)
        store.save_catalog("de", {"a": "Ä"})

        text = (tmp_path / "de.json").read_text(encoding="utf-8")
        assert text == '{\n    "a": "Ä"\n}\n'

    def test_save_rejects_invalid_tree(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidCatalogError):
            CatalogStore(tmp_path).save_catalog("de", {"a": None})
        assert not (tmp_path / "de.json").exists()

    def test_save_without_backup_manager(self, locales_dir: Path) -> None:
        assert CatalogStore(locales_dir).save_catalog("fr", {"a": "b"}) is None

    def test_save_takes_backup_first(self, locales_dir: Path) -> None:
        backup_dir = locales_dir / "backups"
        store = CatalogStore(locales_dir, backup_manager=BackupManager(backup_dir))
        original = (locales_dir / "fr.json").read_text(encoding="utf-8")

        backup = store.save_catalog("fr", {"a": "b"})

        assert backup is not None
        assert backup.parent == backup_dir
        assert backup.read_text(encoding="utf-8") == original
        assert json.loads((locales_dir / "fr.json").read_text(encoding="utf-8")) == {"a": "b"}

    def test_save_new_locale_has_no_backup(self, tmp_path: Path) -> None:
        store = CatalogStore(tmp_path, backup_manager=BackupManager(tmp_path / "backups"))
        assert store.save_catalog("ja", {"a": "b"}) is None
