"""Abstract interface for market data sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import PricePoint, Snapshot


class MarketDataSource(ABC):
    """Contract for market data providers.

    Both fetches are idempotent reads with no side effects on the provider.
    Failures are raised as NetworkError or DecodeError, never swallowed; the
    caller decides how to recover.

    Lifecycle:
        source = create_market_data_source(config)
        snapshot = await source.fetch_snapshot("usd")
        history = await source.fetch_price_history("bitcoin", "usd", 7)
        # ... app shutting down ...
        await source.aclose()
    """

    @abstractmethod
    async def fetch_snapshot(self, quote_currency: str) -> Snapshot:
        """Fetch the ranked list of assets priced in ``quote_currency``."""

    @abstractmethod
    async def fetch_price_history(
        self,
        asset_id: str,
        quote_currency: str,
        window_days: int,
    ) -> list[PricePoint]:
        """Fetch the price series of one asset over the last ``window_days`` days.

        Points are ordered oldest first.
        """

    async def aclose(self) -> None:
        """Release transport resources. Safe to call multiple times."""
