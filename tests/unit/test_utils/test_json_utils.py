"""Tests for load_json() / save_json()."""

from __future__ import annotations

from pathlib import Path

from catalogsync.utils.json_utils import load_json, save_json


class TestLoadJson:
    """Tests for load_json()."""

    def test_missing_file_returns_empty_dict(self, tmp_path: Path) -> None:
        assert load_json(tmp_path / "missing.json") == {}

    def test_missing_file_returns_given_default(self, tmp_path: Path) -> None:
        assert load_json(tmp_path / "missing.json", default=[]) == []

    def test_invalid_json_returns_default(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert load_json(path) == {}

    def test_reads_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "ok.json"
        path.write_text('{"a": "日本語"}', encoding="utf-8")
        assert load_json(path) == {"a": "日本語"}


class TestSaveJson:
    """Tests for save_json()."""

    def test_writes_unescaped_utf8_with_newline(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        assert save_json(path, {"a": "Ç"}) is True
        assert path.read_text(encoding="utf-8") == '{\n  "a": "Ç"\n}\n'

    def test_creates_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "out.json"
        assert save_json(path, {}) is True
        assert path.exists()

    def test_unserializable_data_returns_false(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        path.write_text('{"keep": true}\n', encoding="utf-8")

        assert save_json(path, {"a": object()}) is False
        assert path.read_text(encoding="utf-8") == '{"keep": true}\n'
        assert list(tmp_path.iterdir()) == [path]
