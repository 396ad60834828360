"""CoinGecko API client for real market data."""

from __future__ import annotations

import logging
import math
import time
from typing import Any

import httpx

from .errors import DecodeError, NetworkError
from .interface import MarketDataSource
from .models import AssetQuote, PricePoint, Snapshot

logger = logging.getLogger(__name__)

BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoDataSource(MarketDataSource):
    """MarketDataSource backed by the public CoinGecko REST API.

    One call to GET /coins/markets returns the ranked snapshot with 7-day
    sparklines; GET /coins/{id}/market_chart returns the detail history.

    Rate limits:
      - Public tier: ~10-30 req/min, so the default 20s refresh is safe
      - Demo/paid keys: sent as ``x-cg-demo-api-key``
    """

    def __init__(
        self,
        api_key: str | None = None,
        per_page: int = 50,
        timeout: float = 10.0,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._per_page = per_page
        self._timeout = timeout
        self._base_url = base_url
        self._transport = transport  # Injected in tests
        self._client: httpx.AsyncClient | None = None

    async def fetch_snapshot(self, quote_currency: str) -> Snapshot:
        payload = await self._get_json(
            "/coins/markets",
            {
                "vs_currency": quote_currency,
                "order": "market_cap_desc",
                "per_page": self._per_page,
                "page": 1,
                "sparkline": "true",
                "price_change_percentage": "24h",
            },
        )
        quotes = parse_markets(payload)
        logger.debug("CoinGecko: %d assets in %s", len(quotes), quote_currency)
        return Snapshot(quotes=tuple(quotes), currency=quote_currency, fetched_at=time.time())

    async def fetch_price_history(
        self,
        asset_id: str,
        quote_currency: str,
        window_days: int,
    ) -> list[PricePoint]:
        payload = await self._get_json(
            f"/coins/{asset_id}/market_chart",
            {"vs_currency": quote_currency, "days": window_days},
        )
        return parse_market_chart(payload)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
        self._client = None

    # --- Internal ---

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"accept": "application/json"}
            if self._api_key:
                headers["x-cg-demo-api-key"] = self._api_key
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        client = self._get_client()
        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(f"GET {path} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            # Timeouts, refused connections, TLS failures
            raise NetworkError(f"GET {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"GET {path} did not return JSON") from e


def parse_markets(payload: Any) -> list[AssetQuote]:
    """Turn a /coins/markets payload into quotes, in the order received.

    Rows without an id or a usable price are skipped; a repeated id keeps its
    first occurrence.
    """
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a list of markets, got {type(payload).__name__}")

    quotes: list[AssetQuote] = []
    seen: set[str] = set()
    for row in payload:
        try:
            quote = _parse_market_row(row)
        except (KeyError, TypeError, ValueError) as e:
            asset_id = row.get("id", "???") if isinstance(row, dict) else "???"
            logger.warning("Skipping market row for %s: %s", asset_id, e)
            continue
        if quote.id in seen:
            logger.warning("Skipping duplicate market row for %s", quote.id)
            continue
        seen.add(quote.id)
        quotes.append(quote)
    return quotes


def parse_market_chart(payload: Any) -> list[PricePoint]:
    """Turn a /coins/{id}/market_chart payload into points, oldest first."""
    if not isinstance(payload, dict) or not isinstance(payload.get("prices"), list):
        raise DecodeError("Expected an object with a 'prices' list")

    points: list[PricePoint] = []
    for entry in payload["prices"]:
        try:
            timestamp_ms, price = entry
            # CoinGecko timestamps are Unix milliseconds -> convert to seconds
            points.append(PricePoint(timestamp=float(timestamp_ms) / 1000.0, price=float(price)))
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Malformed price entry {entry!r}") from e
    return points


def _parse_market_row(row: dict) -> AssetQuote:
    asset_id = row["id"]
    if not isinstance(asset_id, str) or not asset_id:
        raise ValueError("missing id")

    price = _non_negative(row.get("current_price"))
    if price is None:
        raise ValueError(f"unusable price {row.get('current_price')!r}")

    rank = row.get("market_cap_rank")
    sparkline_field = row.get("sparkline_in_7d")
    sparkline = sparkline_field.get("price") if isinstance(sparkline_field, dict) else None
    if not isinstance(sparkline, list):
        sparkline = []

    return AssetQuote(
        id=asset_id,
        name=str(row.get("name") or asset_id),
        symbol=str(row.get("symbol") or "").upper(),
        price=price,
        rank=int(rank) if rank is not None else None,
        market_cap=_non_negative(row.get("market_cap")),
        volume_24h=_non_negative(row.get("total_volume")),
        change_pct_24h=_finite(row.get("price_change_percentage_24h")),
        sparkline=tuple(float(p) for p in sparkline if p is not None),
        image=row.get("image"),
    )


def _finite(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _non_negative(value: Any) -> float | None:
    number = _finite(value)
    if number is None or number < 0:
        return None
    return number
