"""Recurring background refresh of a MarketPipeline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .errors import MarketDataError
from .models import Snapshot
from .pipeline import MarketPipeline

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Calls pipeline.refresh() every ``interval`` seconds.

    A failed cycle is logged and the loop carries on; the pipeline keeps
    showing its last good snapshot until a later cycle succeeds. The optional
    ``on_refresh`` listener receives each snapshot a cycle returns.
    """

    def __init__(
        self,
        pipeline: MarketPipeline,
        interval: float = 20.0,
        on_refresh: Callable[[Snapshot], None] | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._interval = interval
        self._on_refresh = on_refresh
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        """Refresh immediately, then keep refreshing in the background.

        Must be called once; a second call while running is a no-op.
        """
        if self.running:
            return
        # Do an immediate first refresh so rows are available right away
        await self.refresh_once()
        self._task = asyncio.create_task(self._run_loop(), name="market-refresh")
        logger.info("Refresh scheduler started: %.1fs interval", self._interval)

    async def stop(self) -> None:
        """Cancel the background task. Safe to call multiple times."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Refresh scheduler stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> Snapshot | None:
        """Execute one refresh cycle. Never raises for fetch failures."""
        try:
            snapshot = await self._pipeline.refresh()
        except MarketDataError as e:
            logger.error("Scheduled refresh failed: %s", e)
            return None

        if snapshot is not None and self._on_refresh is not None:
            try:
                self._on_refresh(snapshot)
            except Exception:
                logger.exception("Refresh listener failed")
        return snapshot

    async def _run_loop(self) -> None:
        """Refresh on interval. First refresh already happened in start()."""
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.refresh_once()
            except Exception:
                logger.exception("Refresh cycle crashed")
