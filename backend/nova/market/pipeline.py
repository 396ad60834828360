"""Market pipeline: refresh cycle, view state and visible-row derivation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from enum import Enum
from threading import Lock

from .config import PipelineConfig
from .delta import PriceDeltaTracker
from .errors import MarketDataError
from .interface import MarketDataSource
from .models import AssetDetail, AssetQuote, PriceDelta, Snapshot
from .preferences import Preferences, normalize_currency
from .storage import InMemoryKeyValueStore, KeyValueStore
from .view import ViewState, derive_rows
from .watchlist import Watchlist

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"


class MarketPipeline:
    """Owns the current snapshot and everything needed to derive visible rows.

    Refresh policy:
        - A refresh() while a fetch for the same currency is in flight joins
          that fetch instead of issuing another one (pass ``force=True`` to
          issue a new request anyway).
        - Every request carries a sequence number and the currency epoch it was
          issued under. A result is applied only if no newer request has been
          applied and the currency has not changed since, so a slow response
          can never overwrite fresher data.
        - On failure the last good snapshot is kept and the error propagates.
          There is no automatic retry.

    View-state setters only record state; call visible_rows() afterwards to
    re-derive. Nothing here re-fetches except refresh().

    Writers: the host (UI controller, RefreshScheduler), one event loop.
    Readers: renderers polling visible_rows() after each mutating call.
    """

    def __init__(
        self,
        source: MarketDataSource,
        store: KeyValueStore | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self._config = config or PipelineConfig()
        self._source = source
        store = store if store is not None else InMemoryKeyValueStore()
        self._preferences = Preferences(store, default_currency=self._config.default_currency)
        self._watchlist = Watchlist(store)
        self._tracker = PriceDeltaTracker()
        self._view = ViewState(quote_currency=self._preferences.currency)
        self._snapshot: Snapshot | None = None
        self._lock = Lock()

        self._issued: int = 0  # Sequence number of the latest request
        self._applied: int = 0  # Sequence number of the request behind _snapshot
        self._epoch: int = 0  # Bumped on every currency switch
        self._inflight: asyncio.Future | None = None
        self._inflight_epoch: int = -1

    # --- Refresh cycle ---

    async def refresh(self, force: bool = False) -> Snapshot | None:
        """Fetch a new snapshot for the current quote currency and apply it.

        Returns the applied snapshot. If this result was superseded while in
        flight, returns whatever snapshot is current instead (None if a
        currency switch is still waiting for its first refresh).

        Raises NetworkError / DecodeError; the previous snapshot is untouched.
        """
        with self._lock:
            inflight = self._inflight
            if (
                not force
                and inflight is not None
                and not inflight.done()
                and self._inflight_epoch == self._epoch
            ):
                logger.debug("Refresh already in flight, joining it")
                task = inflight
            else:
                self._issued += 1
                task = asyncio.ensure_future(
                    self._fetch(self._issued, self._epoch, self._view.quote_currency)
                )
                task.add_done_callback(self._on_fetch_done)
                self._inflight = task
                self._inflight_epoch = self._epoch
        return await asyncio.shield(task)

    @property
    def state(self) -> PipelineState:
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            return PipelineState.FETCHING
        return PipelineState.IDLE

    @property
    def snapshot(self) -> Snapshot | None:
        """The snapshot currently shown, or None before the first refresh."""
        return self._snapshot

    @property
    def last_updated(self) -> float | None:
        snapshot = self._snapshot
        return snapshot.fetched_at if snapshot else None

    # --- Derivation ---

    def visible_rows(self) -> list[AssetQuote]:
        """Rows to display for the current view, in display order."""
        with self._lock:
            snapshot = self._snapshot
            view = self._view
        if snapshot is None:
            return []
        return derive_rows(snapshot.quotes, self._watchlist.contains, view)

    def delta(self, asset_id: str) -> PriceDelta | None:
        return self._tracker.get(asset_id)

    # --- View state ---

    @property
    def view(self) -> ViewState:
        return self._view

    def set_tab(self, tab: str) -> None:
        with self._lock:
            self._view = self._view.with_tab(tab)

    def set_sort(self, sort_key: str, sort_direction: str | None = None) -> None:
        """Sort by ``sort_key``; without a direction the current one flips."""
        with self._lock:
            self._view = self._view.with_sort(sort_key, sort_direction)

    def set_search(self, search_text: str) -> None:
        with self._lock:
            self._view = self._view.with_search(search_text)

    def set_currency(self, currency: str) -> None:
        """Switch quote currency.

        Drops the current snapshot and price baselines: prices are
        currency-denominated, so rows from the old currency are never shown
        again. The next successful refresh() repopulates. Same currency is a
        no-op.
        """
        code = normalize_currency(currency)
        with self._lock:
            if code == self._view.quote_currency:
                return
            previous = self._view.quote_currency
            self._view = self._view.with_currency(code)
            self._snapshot = None
            self._tracker.clear()
            self._epoch += 1
        self._preferences.set_currency(code)
        logger.info("Quote currency switched %s -> %s", previous, code)

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    # --- Watchlist ---

    def toggle_watch(self, asset_id: str) -> None:
        """Flip watchlist membership. Never fetches or touches the snapshot."""
        with self._lock:
            self._watchlist.toggle(asset_id)

    def is_watched(self, asset_id: str) -> bool:
        return self._watchlist.contains(asset_id)

    def watched_ids(self) -> list[str]:
        return self._watchlist.ids()

    # --- Detail ---

    async def load_detail(self, asset_id: str) -> AssetDetail | None:
        """Load the price history shown when an asset is opened.

        Returns None if the asset is not in the current snapshot. A failed
        fetch yields an unavailable detail instead of raising; the snapshot
        and table rows are never affected. History that arrives after the
        quote currency has changed is dropped and also reported unavailable.
        """
        snapshot = self._snapshot
        quote = snapshot.get(asset_id) if snapshot else None
        if quote is None:
            return None

        unavailable = AssetDetail(
            asset_id=asset_id,
            name=quote.name,
            price=quote.price,
            currency=snapshot.currency,
            available=False,
        )
        try:
            points = await self._source.fetch_price_history(
                asset_id, snapshot.currency, self._config.chart_window_days
            )
        except MarketDataError as e:
            logger.warning("Detail for %s unavailable: %s", asset_id, e)
            return unavailable

        current = self._view.quote_currency
        if current != snapshot.currency:
            logger.info(
                "Discarding %s detail in %s: currency is now %s",
                asset_id,
                snapshot.currency,
                current,
            )
            return unavailable

        return AssetDetail(
            asset_id=asset_id,
            name=quote.name,
            price=quote.price,
            currency=snapshot.currency,
            points=tuple(points),
        )

    async def aclose(self) -> None:
        await self._source.aclose()

    # --- Internal ---

    async def _fetch(self, seq: int, epoch: int, currency: str) -> Snapshot | None:
        logger.debug("Refresh #%d started (%s)", seq, currency)
        try:
            snapshot = await self._source.fetch_snapshot(currency)
        except MarketDataError as e:
            logger.warning("Refresh #%d failed, keeping last snapshot: %s", seq, e)
            raise

        with self._lock:
            if seq <= self._applied or epoch != self._epoch:
                logger.info("Discarding stale refresh #%d (%s)", seq, currency)
                return self._snapshot
            applied = self._annotate(snapshot)
            self._snapshot = applied
            self._applied = seq
        logger.debug("Refresh #%d applied: %d assets", seq, len(applied))
        return applied

    def _annotate(self, snapshot: Snapshot) -> Snapshot:
        """Classify every quote against its last price. Called once per applied snapshot."""
        quotes = []
        for quote in snapshot.quotes:
            direction = self._tracker.classify(quote.id, quote.price)
            delta = self._tracker.get(quote.id)
            quotes.append(
                replace(quote, previous_price=delta.previous_price, direction=direction)
            )
        if self._config.prune_missing_deltas:
            dropped = self._tracker.prune(snapshot.ids())
            if dropped:
                logger.debug("Pruned %d price baselines", dropped)
        return replace(snapshot, quotes=tuple(quotes))

    def _on_fetch_done(self, task: asyncio.Future) -> None:
        # Mark the outcome as retrieved even if every waiter was cancelled
        if not task.cancelled():
            task.exception()
        with self._lock:
            if self._inflight is task:
                self._inflight = None
