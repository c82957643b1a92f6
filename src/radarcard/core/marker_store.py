"""Locally persisted user markers shared between card instances."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from radarcard.core.broadcast import MARKERS_UPDATED, Broadcaster, default_broadcaster
from radarcard.shared.models.marker import Marker, MarkerList

logger = logging.getLogger(__name__)

STORAGE_KEY = "radar-card-markers"


class MarkerNotFoundError(KeyError):
    pass


class LocalStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Key/value string storage held in memory."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


_default_storage = MemoryStorage()


def default_storage() -> MemoryStorage:
    """Page-wide storage used by cards that are not given one."""
    return _default_storage


def reset_for_tests() -> None:
    _default_storage.clear()


class JsonFileStorage:
    """Key/value string storage kept in one JSON object on disk.

    Every call re-reads the file so separate processes sharing the path see
    each other's writes (last writer wins).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def from_env(cls) -> "JsonFileStorage":
        raw = os.getenv("RADAR_CARD_STORAGE_PATH", "").strip()
        path = Path(raw) if raw else Path.home() / ".radarcard" / "storage.json"
        return cls(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("storage file %s is unreadable: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("storage file %s does not hold an object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class MarkerStore:
    """CRUD over the marker list stored under a fixed key.

    Every mutation re-reads storage, writes the full list back and dispatches
    `radar-card-markers-updated` so other live instances reload.
    """

    def __init__(
        self,
        storage: LocalStorage,
        *,
        broadcaster: Broadcaster | None = None,
        key: str = STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._broadcaster = broadcaster or default_broadcaster()
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Marker]:
        raw = self._storage.get_item(self._key)
        if raw is None or raw == "":
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("marker storage %r is not valid JSON: %s", self._key, exc)
            return []
        if not isinstance(data, list):
            logger.warning("marker storage %r does not hold a list", self._key)
            return []
        try:
            markers = MarkerList.validate_python(data)
        except ValidationError as exc:
            logger.warning("marker storage %r is malformed: %s", self._key, exc.error_count())
            return []
        return markers

    def get(self, marker_id: str) -> Marker | None:
        for marker in self.load():
            if marker.id == marker_id:
                return marker
        return None

    def add(self, *, name: str, latitude: float, longitude: float, color: str | None = None) -> Marker:
        marker = Marker(name=name, latitude=latitude, longitude=longitude, color=color)
        markers = self.load()
        markers.append(marker)
        self._save(markers)
        logger.info("marker added id=%s name=%s", marker.id, marker.name)
        return marker

    def update(self, marker_id: str, **changes: object) -> Marker:
        markers = self.load()
        for idx, marker in enumerate(markers):
            if marker.id != marker_id:
                continue
            allowed = {k: v for k, v in changes.items() if k in {"name", "latitude", "longitude", "color"}}
            updated = Marker.model_validate({**marker.model_dump(), **allowed})
            markers[idx] = updated
            self._save(markers)
            return updated
        raise MarkerNotFoundError(marker_id)

    def delete(self, marker_id: str) -> bool:
        markers = self.load()
        kept = [m for m in markers if m.id != marker_id]
        if len(kept) == len(markers):
            return False
        self._save(kept)
        return True

    def clear(self) -> None:
        self._storage.remove_item(self._key)
        self._notify()

    def _save(self, markers: list[Marker]) -> None:
        payload = json.dumps([m.to_storage() for m in markers], ensure_ascii=False)
        self._storage.set_item(self._key, payload)
        self._notify()

    def _notify(self) -> None:
        self._broadcaster.dispatch(MARKERS_UPDATED, {"key": self._key})
