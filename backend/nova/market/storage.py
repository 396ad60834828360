"""Key/value stores used to persist preferences and the watchlist."""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock

logger = logging.getLogger(__name__)

THEME_KEY = "nova_crypto_theme"
CURRENCY_KEY = "nova_crypto_currency"
WATCHLIST_KEY = "nova_crypto_watchlist"


class KeyValueStore(ABC):
    """String-to-string persistence.

    Values are opaque blobs to the store; callers own their encoding and must
    treat unparsable values as absent.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``. May raise OSError on write failure."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present. May raise OSError on write failure."""


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store. Nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data


class JsonFileKeyValueStore(KeyValueStore):
    """Store backed by a single JSON object on disk.

    The whole file is rewritten on every ``set`` through a temporary file and
    ``os.replace`` so a crash never leaves a half-written blob. An unreadable or
    malformed file is treated as empty.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self._path = Path(path)
        self._lock = Lock()
        self._data: dict[str, str] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            updated = dict(self._data)
            updated[key] = value
            self._write(updated)
            self._data = updated

    def delete(self, key: str) -> None:
        with self._lock:
            if key not in self._data:
                return
            updated = {k: v for k, v in self._data.items() if k != key}
            self._write(updated)
            self._data = updated

    def _read(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Could not read store %s: %s", self._path, e)
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Store %s is not valid JSON, starting empty", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store %s does not hold a JSON object, starting empty", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(data, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self._path)


def create_store(storage_path: str | None) -> KeyValueStore:
    """File-backed store when a path is configured, otherwise in-memory."""
    if storage_path:
        logger.info("Preferences stored in %s", storage_path)
        return JsonFileKeyValueStore(storage_path)
    return InMemoryKeyValueStore()
