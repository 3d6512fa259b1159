"""Tests for patch and glossary sources."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from catalogsync.core.exceptions import PatchSourceError, PathConflictError
from catalogsync.integrations.patch_source import (
    PatchSourceClient,
    is_url,
    load_glossary,
    load_patch,
    normalize_patch,
)


class TestNormalizePatch:
    """Tests for normalize_patch()."""

    def test_flat_patch_unchanged(self) -> None:
        assert normalize_patch({"a.x": "G", "b": "C"}) == {"a.x": "G", "b": "C"}

    def test_nested_patch_flattened(self) -> None:
        data = {"services": {"matchService": {"createMatch": "Créer", "error": {"notFound": "Introuvable"}}}}
        assert normalize_patch(data) == {
            "services.matchService.createMatch": "Créer",
            "services.matchService.error.notFound": "Introuvable",
        }

    def test_mixed_patch(self) -> None:
        assert normalize_patch({"club": {"chat.title": "Discussion"}, "common.ok": "OK"}) == {
            "club.chat.title": "Discussion",
            "common.ok": "OK",
        }

    def test_duplicate_path_raises(self) -> None:
        with pytest.raises(PathConflictError):
            normalize_patch({"a.b": "x", "a": {"b": "y"}})

    def test_malformed_entries_pass_through(self) -> None:
        assert normalize_patch({"a..b": "x", "c": None}) == {"a..b": "x", "c": None}

    def test_non_object_raises(self) -> None:
        with pytest.raises(PatchSourceError):
            normalize_patch(["a", "b"])


class TestLoadFromFile:
    """Tests for load_patch() / load_glossary() with local files."""

    def test_load_patch_file(self, tmp_path: Path) -> None:
        path = tmp_path / "patch.json"
        path.write_text(json.dumps({"a": {"x": "Guardar"}}), encoding="utf-8")
        assert load_patch(path) == {"a.x": "Guardar"}

    def test_load_patch_string_path(self, tmp_path: Path) -> None:
        path = tmp_path / "patch.json"
        path.write_text('{"a.x": "Guardar"}', encoding="utf-8")
        assert load_patch(str(path)) == {"a.x": "Guardar"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(PatchSourceError, match="not found"):
            load_patch(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "patch.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(PatchSourceError):
            load_patch(path)

    def test_load_glossary(self, tmp_path: Path) -> None:
        path = tmp_path / "glossary.json"
        path.write_text(json.dumps({"Save": "Guardar"}), encoding="utf-8")
        assert load_glossary(path) == {"Save": "Guardar"}

    def test_glossary_rejects_nested_values(self, tmp_path: Path) -> None:
        path = tmp_path / "glossary.json"
        path.write_text(json.dumps({"Save": {"es": "Guardar"}}), encoding="utf-8")
        with pytest.raises(PatchSourceError):
            load_glossary(path)


class TestPatchSourceClient:
    """Tests for fetching patches over HTTP."""

    def test_is_url(self) -> None:
        assert is_url("https://example.org/fr.json")
        assert is_url("HTTP://example.org/fr.json")
        assert not is_url("patches/fr.json")
        assert not is_url(Path("https://example.org"))

    @patch("catalogsync.integrations.patch_source.requests.Session")
    def test_fetch_success(self, mock_session_cls: MagicMock) -> None:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"a": {"x": "Guardar"}}
        mock_session = MagicMock()
        mock_session.get.return_value = mock_response
        mock_session_cls.return_value = mock_session

        result = load_patch("https://example.org/es.json", timeout=3)

        assert result == {"a.x": "Guardar"}
        mock_session.get.assert_called_once_with("https://example.org/es.json", timeout=3)
        mock_session.close.assert_called_once()

    @patch("catalogsync.integrations.patch_source.requests.Session")
    def test_fetch_http_error(self, mock_session_cls: MagicMock) -> None:
        mock_response = MagicMock()
        mock_response.status_code = 404
        mock_session = MagicMock()
        mock_session.get.return_value = mock_response
        mock_session_cls.return_value = mock_session

        with pytest.raises(PatchSourceError, match="404"):
            PatchSourceClient().fetch("https://example.org/missing.json")

    @patch("catalogsync.integrations.patch_source.requests.Session")
    def test_fetch_network_error(self, mock_session_cls: MagicMock) -> None:
        mock_session = MagicMock()
        mock_session.get.side_effect = requests.ConnectionError("refused")
        mock_session_cls.return_value = mock_session

        with pytest.raises(PatchSourceError, match="refused"):
            PatchSourceClient().fetch("https://example.org/es.json")

    @patch("catalogsync.integrations.patch_source.requests.Session")
    def test_fetch_invalid_json(self, mock_session_cls: MagicMock) -> None:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_session = MagicMock()
        mock_session.get.return_value = mock_response
        mock_session_cls.return_value = mock_session

        with pytest.raises(PatchSourceError, match="Invalid JSON"):
            PatchSourceClient().fetch("https://example.org/es.json")

    def test_explicit_client_is_used(self) -> None:
        client = MagicMock(spec=PatchSourceClient)
        client.fetch.return_value = {"Save": "Guardar"}

        assert load_glossary("https://example.org/glossary.json", client=client) == {"Save": "Guardar"}
        client.fetch.assert_called_once_with("https://example.org/glossary.json")
        client.close.assert_not_called()

    @patch("catalogsync.integrations.patch_source.requests.Session")
    def test_session_closed_after_failed_fetch(self, mock_session_cls: MagicMock) -> None:
        mock_session = MagicMock()
        mock_session.get.side_effect = requests.Timeout("slow")
        mock_session_cls.return_value = mock_session

        with pytest.raises(PatchSourceError):
            load_patch("https://example.org/es.json")
        mock_session.close.assert_called_once()
