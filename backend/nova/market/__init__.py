"""Market data subsystem for Nova.

Public API:
    AssetQuote, Snapshot  - Immutable quote / snapshot dataclasses
    Direction, PriceDelta - Price movement classification
    MarketDataSource      - Abstract interface for data providers
    create_market_data_source - Factory that selects simulator or CoinGecko
    MarketPipeline        - Refresh cycle, view state and visible rows
    RefreshScheduler      - Recurring background refresh
    PipelineConfig        - Explicit runtime configuration
"""

from .config import PipelineConfig
from .errors import DecodeError, MarketDataError, NetworkError, PersistenceCorrupt
from .factory import create_market_data_source
from .interface import MarketDataSource
from .models import AssetDetail, AssetQuote, Direction, PriceDelta, PricePoint, Snapshot
from .pipeline import MarketPipeline, PipelineState
from .scheduler import RefreshScheduler
from .storage import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore, create_store

__all__ = [
    "AssetDetail",
    "AssetQuote",
    "DecodeError",
    "Direction",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MarketDataError",
    "MarketDataSource",
    "MarketPipeline",
    "NetworkError",
    "PersistenceCorrupt",
    "PipelineConfig",
    "PipelineState",
    "PriceDelta",
    "PricePoint",
    "RefreshScheduler",
    "Snapshot",
    "create_market_data_source",
    "create_store",
]
