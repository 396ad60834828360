"""Persisted set of watched asset ids."""

from __future__ import annotations

import json
import logging
from threading import Lock

from .errors import PersistenceCorrupt
from .storage import WATCHLIST_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def encode_watchlist(ids) -> str:
    """Serialize ids as a JSON array in the order given."""
    return json.dumps(list(ids))


def decode_watchlist(raw: str) -> list[str]:
    """Parse a stored JSON array of ids, keeping first occurrences in order.

    Raises PersistenceCorrupt.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise PersistenceCorrupt(f"watchlist is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise PersistenceCorrupt(f"watchlist must be a JSON array, got {type(data).__name__}")
    return list(dict.fromkeys(item for item in data if isinstance(item, str) and item))


class Watchlist:
    """Set of asset ids with toggle semantics, saved after every mutation.

    Ids keep the order they were first watched in. An id that is removed keeps
    its slot, so watching it again puts it back where it was and toggling any
    id twice leaves the saved value unchanged. Whenever the membership is back
    to what was loaded, the loaded value is restored as-is (or the key removed
    if there was none).

    A missing or corrupt stored value yields an empty watchlist. If saving
    fails the watchlist keeps working in memory for the rest of the session.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._lock = Lock()
        self._persistent = True
        self._loaded_raw: str | None = None
        self._order: list[str] = self._load()
        self._items: set[str] = set(self._order)
        self._loaded_items = frozenset(self._items)

    def contains(self, asset_id: str) -> bool:
        with self._lock:
            return asset_id in self._items

    def toggle(self, asset_id: str) -> None:
        """Add ``asset_id`` if absent, remove it if present, then save."""
        with self._lock:
            if asset_id in self._items:
                self._items.discard(asset_id)
                logger.debug("Watchlist: removed %s", asset_id)
            else:
                if asset_id not in self._order:
                    self._order.append(asset_id)
                self._items.add(asset_id)
                logger.debug("Watchlist: added %s", asset_id)
            self._save()

    def ids(self) -> list[str]:
        """Watched ids in the order they were first added."""
        with self._lock:
            return self._ordered()

    @property
    def persistent(self) -> bool:
        """False once a save has failed and changes live only in memory."""
        return self._persistent

    def __contains__(self, asset_id: str) -> bool:
        return self.contains(asset_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # --- Internal ---

    def _ordered(self) -> list[str]:
        return [asset_id for asset_id in self._order if asset_id in self._items]

    def _load(self) -> list[str]:
        raw = self._store.get(WATCHLIST_KEY)
        if raw is None:
            return []
        try:
            ids = decode_watchlist(raw) if raw else []
        except PersistenceCorrupt as e:
            logger.warning("Discarding stored watchlist: %s", e)
            return []
        self._loaded_raw = raw
        return ids

    def _save(self) -> None:
        if not self._persistent:
            return
        try:
            if self._items != self._loaded_items:
                self._store.set(WATCHLIST_KEY, encode_watchlist(self._ordered()))
            elif self._loaded_raw is None:
                self._store.delete(WATCHLIST_KEY)
            else:
                self._store.set(WATCHLIST_KEY, self._loaded_raw)
        except OSError as e:
            self._persistent = False
            logger.warning("Watchlist save failed, keeping changes in memory only: %s", e)
