"""Data models for market data."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class Direction(str, Enum):
    """Movement of a price relative to its previous observation."""

    UP = "up"
    DOWN = "down"
    UNCHANGED = "unchanged"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class PriceDelta:
    """Last classification recorded for an asset."""

    previous_price: float | None
    direction: Direction


@dataclass(frozen=True, slots=True)
class AssetQuote:
    """Immutable quote for one asset within a snapshot.

    Numeric quantities are expressed in the snapshot's quote currency.
    ``previous_price`` and ``direction`` are filled in by the pipeline when the
    snapshot is applied; a freshly fetched quote has no previous price.
    """

    id: str
    name: str
    symbol: str
    price: float
    rank: int | None = None
    market_cap: float | None = None
    volume_24h: float | None = None
    change_pct_24h: float | None = None
    sparkline: tuple[float, ...] = ()
    image: str | None = None
    previous_price: float | None = None
    direction: Direction = Direction.UNKNOWN

    def to_dict(self) -> dict:
        """Serialize for a renderer."""
        return {
            "id": self.id,
            "name": self.name,
            "symbol": self.symbol,
            "rank": self.rank,
            "price": self.price,
            "market_cap": self.market_cap,
            "volume_24h": self.volume_24h,
            "change_pct_24h": self.change_pct_24h,
            "sparkline": list(self.sparkline),
            "image": self.image,
            "previous_price": self.previous_price,
            "direction": self.direction.value,
        }


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One complete set of quotes fetched under a single quote currency."""

    quotes: tuple[AssetQuote, ...]
    currency: str
    fetched_at: float = field(default_factory=time.time)  # Unix seconds

    def get(self, asset_id: str) -> AssetQuote | None:
        for quote in self.quotes:
            if quote.id == asset_id:
                return quote
        return None

    def ids(self) -> list[str]:
        return [quote.id for quote in self.quotes]

    def __len__(self) -> int:
        return len(self.quotes)


@dataclass(frozen=True, slots=True)
class PricePoint:
    """A single (timestamp, price) sample of an asset's history."""

    timestamp: float  # Unix seconds
    price: float


@dataclass(frozen=True, slots=True)
class AssetDetail:
    """Trend detail for one asset, shown on demand.

    When the history could not be loaded ``available`` is False and ``points``
    is empty; the row data shown elsewhere is unaffected.
    """

    asset_id: str
    name: str
    price: float
    currency: str
    points: tuple[PricePoint, ...] = ()
    available: bool = True

    @property
    def prices(self) -> list[float]:
        return [point.price for point in self.points]
