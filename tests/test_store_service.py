"""Tests for StoreService JSON persistence helper."""

import json
from pathlib import Path

import pytest

import services.store_service as store_service_module
from services.store_service import StoreService, get_store_service


@pytest.fixture(autouse=True)
def reset_store_service():
    """Ensure global store service state is reset between tests."""
    store_service_module._default_store_service = None  # type: ignore[attr-defined]
    yield
    store_service_module._default_store_service = None  # type: ignore[attr-defined]


def test_load_store_missing_file_returns_empty_dict(tmp_path: Path, store_service: StoreService):
    """Loading a non-existent store returns an empty dictionary."""
    result = store_service.load_store(tmp_path / "missing.json")

    assert result == {}


def test_load_store_reads_valid_json(tmp_path: Path, store_service: StoreService):
    path = tmp_path / "store.json"
    payload = {"cards": [{"id": "c1", "word": "huis", "definition": "house"}]}
    path.write_text(json.dumps(payload), encoding="utf-8")

    assert store_service.load_store(path) == payload


def test_load_store_returns_empty_on_invalid_json(tmp_path: Path, store_service: StoreService):
    """Invalid JSON is ignored and returns an empty dict."""
    path = tmp_path / "corrupt.json"
    path.write_text("{bad json", encoding="utf-8")

    assert store_service.load_store(path) == {}


def test_load_store_ignores_non_object_payload(tmp_path: Path, store_service: StoreService):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert store_service.load_store(path) == {}


def test_load_store_handles_oserror(monkeypatch, tmp_path: Path, store_service: StoreService):
    """OS errors while reading a store fallback to an empty dict."""
    path = tmp_path / "store.json"
    path.write_text("{}", encoding="utf-8")

    def fake_read_text(self, *args, **kwargs):  # pylint: disable=unused-argument
        raise OSError("boom")

    monkeypatch.setattr(type(path), "read_text", fake_read_text)

    assert store_service.load_store(path) == {}


def test_save_store_writes_json_payload(tmp_path: Path, store_service: StoreService):
    """save_store creates parent directories and writes JSON data."""
    target = tmp_path / "nested" / "store.json"
    data = {"decks": [{"id": "d1", "name": "Woordjes A1"}]}

    assert store_service.save_store(target, data) is True

    assert json.loads(target.read_text(encoding="utf-8")) == data
    assert not target.with_name("store.json.tmp").exists()


def test_save_store_keeps_non_ascii_text(tmp_path: Path, store_service: StoreService):
    target = tmp_path / "store.json"

    store_service.save_store(target, {"word": "één"})

    assert "één" in target.read_text(encoding="utf-8")


def test_save_store_reports_failure(monkeypatch, tmp_path: Path, store_service: StoreService):
    target = tmp_path / "store.json"
    target.write_text('{"old": true}', encoding="utf-8")

    def fake_replace(self, *args, **kwargs):  # pylint: disable=unused-argument
        raise OSError("disk full")

    monkeypatch.setattr(type(target), "replace", fake_replace)

    assert store_service.save_store(target, {"new": True}) is False
    assert json.loads(target.read_text(encoding="utf-8")) == {"old": True}


def test_get_store_service_returns_singleton():
    first = get_store_service()
    second = get_store_service()

    assert first is second
