"""Factory for creating market data sources."""

from __future__ import annotations

import logging
import os

from .config import PipelineConfig
from .interface import MarketDataSource

logger = logging.getLogger(__name__)


def create_market_data_source(config: PipelineConfig | None = None) -> MarketDataSource:
    """Create the appropriate market data source based on environment variables.

    - MARKET_DATA_SOURCE=coingecko, or COINGECKO_API_KEY set and non-empty
      → CoinGeckoDataSource (real market data)
    - Otherwise → SimulatorDataSource (GBM simulation)
    """
    config = config or PipelineConfig()
    api_key = os.environ.get("COINGECKO_API_KEY", "").strip()
    choice = os.environ.get("MARKET_DATA_SOURCE", "").strip().lower()

    if api_key or choice == "coingecko":
        from .coingecko_client import CoinGeckoDataSource

        logger.info("Market data source: CoinGecko API (real data)")
        return CoinGeckoDataSource(
            api_key=api_key or None,
            per_page=config.per_page,
            timeout=config.request_timeout,
        )
    else:
        from .simulator import SimulatorDataSource

        logger.info("Market data source: GBM Simulator")
        return SimulatorDataSource(
            step_seconds=config.refresh_interval,
            history_days=config.chart_window_days,
            per_page=config.per_page,
        )
