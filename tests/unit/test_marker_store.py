from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from radarcard.core.broadcast import MARKERS_UPDATED, Broadcaster
from radarcard.core.marker_store import (
    STORAGE_KEY,
    JsonFileStorage,
    MarkerNotFoundError,
    MarkerStore,
    MemoryStorage,
)


def _store(storage: MemoryStorage | None = None) -> tuple[MarkerStore, list[dict]]:
    broadcaster = Broadcaster()
    seen: list[dict] = []
    broadcaster.subscribe(MARKERS_UPDATED, seen.append)
    return MarkerStore(storage or MemoryStorage(), broadcaster=broadcaster), seen


def test_absent_storage_is_empty() -> None:
    store, _ = _store()
    assert store.load() == []


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"id": "marker_1"}',
        '[{"id": "marker_1", "name": "Car"}]',
        '[{"id": "marker_1", "name": "Car", "latitude": 123, "longitude": 0}]',
    ],
)
def test_corrupt_storage_reads_as_empty(raw: str, caplog: pytest.LogCaptureFixture) -> None:
    store, _ = _store(MemoryStorage({STORAGE_KEY: raw}))
    with caplog.at_level(logging.WARNING):
        assert store.load() == []
    assert "marker storage" in caplog.text


def test_add_persists_and_broadcasts() -> None:
    storage = MemoryStorage()
    store, seen = _store(storage)
    marker = store.add(name="Car", latitude=52.52, longitude=13.4, color="#f00")
    assert marker.id.startswith("marker_")
    assert len(marker.id) == len("marker_") + 12
    stored = json.loads(storage.get_item(STORAGE_KEY))
    assert stored == [{"id": marker.id, "name": "Car", "latitude": 52.52, "longitude": 13.4, "color": "#f00"}]
    assert seen == [{"key": STORAGE_KEY}]


def test_color_is_optional_in_storage() -> None:
    storage = MemoryStorage()
    store, _ = _store(storage)
    store.add(name="Bike", latitude=1.0, longitude=2.0)
    assert "color" not in json.loads(storage.get_item(STORAGE_KEY))[0]


def test_update_changes_fields() -> None:
    store, _ = _store()
    marker = store.add(name="Car", latitude=52.52, longitude=13.4)
    updated = store.update(marker.id, name="Van", latitude=52.0, color="#0f0")
    assert updated.id == marker.id
    assert (updated.name, updated.latitude, updated.longitude, updated.color) == ("Van", 52.0, 13.4, "#0f0")
    assert store.get(marker.id) == updated


def test_update_unknown_marker_raises() -> None:
    store, _ = _store()
    with pytest.raises(MarkerNotFoundError):
        store.update("marker_missing", name="x")


def test_delete_and_clear() -> None:
    store, seen = _store()
    a = store.add(name="A", latitude=1.0, longitude=1.0)
    b = store.add(name="B", latitude=2.0, longitude=2.0)
    assert store.delete(a.id) is True
    assert store.delete(a.id) is False
    assert [m.id for m in store.load()] == [b.id]
    store.clear()
    assert store.load() == []
    assert len(seen) == 4


def test_json_file_storage_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileStorage(path)
    assert storage.get_item("k") is None
    storage.set_item("k", "v")
    assert JsonFileStorage(path).get_item("k") == "v"
    storage.remove_item("k")
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_json_file_storage_tolerates_garbage(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    assert JsonFileStorage(path).get_item(STORAGE_KEY) is None


def test_json_file_storage_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RADAR_CARD_STORAGE_PATH", str(tmp_path / "s.json"))
    assert JsonFileStorage.from_env().path == tmp_path / "s.json"


def test_two_stores_share_file_storage(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    first = MarkerStore(JsonFileStorage(path), broadcaster=Broadcaster())
    second = MarkerStore(JsonFileStorage(path), broadcaster=Broadcaster())
    marker = first.add(name="Shared", latitude=10.0, longitude=20.0)
    assert [m.id for m in second.load()] == [marker.id]
