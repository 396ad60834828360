"""Thread-safe tracker of per-asset price movement between refreshes."""

from __future__ import annotations

from collections.abc import Iterable
from threading import Lock

from .models import Direction, PriceDelta


class PriceDeltaTracker:
    """Remembers the last price seen for each asset and classifies new ones.

    ``classify`` is read-and-advance: it compares against the stored baseline
    and then always records the new price, so two identical refreshes in a row
    report ``unchanged``. Call it exactly once per asset per refresh cycle.
    """

    def __init__(self) -> None:
        self._last: dict[str, float] = {}
        self._deltas: dict[str, PriceDelta] = {}
        self._lock = Lock()
        self._version: int = 0  # Bumped on every classification

    def classify(self, asset_id: str, new_price: float) -> Direction:
        """Classify ``new_price`` against the previous one and advance the baseline."""
        with self._lock:
            previous = self._last.get(asset_id)
            if previous is None:
                direction = Direction.UNKNOWN
            elif new_price > previous:
                direction = Direction.UP
            elif new_price < previous:
                direction = Direction.DOWN
            else:
                direction = Direction.UNCHANGED

            self._last[asset_id] = new_price
            self._deltas[asset_id] = PriceDelta(previous_price=previous, direction=direction)
            self._version += 1
            return direction

    def get(self, asset_id: str) -> PriceDelta | None:
        """Latest classification for an asset, or None if never seen."""
        with self._lock:
            return self._deltas.get(asset_id)

    def last_price(self, asset_id: str) -> float | None:
        with self._lock:
            return self._last.get(asset_id)

    def prune(self, active_ids: Iterable[str]) -> int:
        """Forget every asset not in ``active_ids``. Returns how many were dropped."""
        keep = set(active_ids)
        with self._lock:
            stale = [asset_id for asset_id in self._last if asset_id not in keep]
            for asset_id in stale:
                del self._last[asset_id]
                self._deltas.pop(asset_id, None)
            return len(stale)

    def clear(self) -> None:
        """Drop all baselines, e.g. when prices switch to another currency."""
        with self._lock:
            self._last.clear()
            self._deltas.clear()

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._last)

    def __contains__(self, asset_id: str) -> bool:
        with self._lock:
            return asset_id in self._last
