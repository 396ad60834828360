"""GBM-based crypto market simulator."""

from __future__ import annotations

import logging
import math
import random
import time
from collections import deque
from dataclasses import replace

import numpy as np

from .errors import NetworkError
from .interface import MarketDataSource
from .models import AssetQuote, PricePoint, Snapshot
from .seed_prices import (
    ASSET_PARAMS,
    CORRELATION_GROUPS,
    CROSS_GROUP_CORR,
    DEFAULT_CORR,
    DEFAULT_PARAMS,
    DOGE_CORR,
    FX_RATES,
    INTRA_ALTCOIN_CORR,
    INTRA_MAJORS_CORR,
    SEED_ASSETS,
    STABLECOIN_CORR,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 3600
SECONDS_PER_YEAR = 365 * SECONDS_PER_DAY  # Crypto trades around the clock


class GBMSimulator:
    """Geometric Brownian Motion simulator for correlated crypto prices.

    Math:
        S(t+dt) = S(t) * exp((mu - sigma^2/2) * dt + sigma * sqrt(dt) * Z)

    Where:
        S(t)   = current USD price
        mu     = annualized drift (expected return)
        sigma  = annualized volatility
        dt     = time step as fraction of a calendar year
        Z      = correlated standard normal random variable
    """

    DEFAULT_STEP_SECONDS = 20.0
    DEFAULT_DT = DEFAULT_STEP_SECONDS / SECONDS_PER_YEAR  # ~6.3e-7

    def __init__(
        self,
        asset_ids: list[str],
        dt: float = DEFAULT_DT,
        event_probability: float = 0.001,
    ) -> None:
        self._dt = dt
        self._event_prob = event_probability

        # Per-asset state
        self._asset_ids: list[str] = []
        self._prices: dict[str, float] = {}
        self._params: dict[str, dict[str, float]] = {}

        # Cholesky decomposition of the correlation matrix (for correlated moves)
        self._cholesky: np.ndarray | None = None

        for asset_id in asset_ids:
            self._add_asset_internal(asset_id)
        self._rebuild_cholesky()

    # --- Public API ---

    def step(self, dt: float | None = None) -> dict[str, float]:
        """Advance all assets by one time step. Returns {asset_id: new_usd_price}."""
        n = len(self._asset_ids)
        if n == 0:
            return {}
        dt = self._dt if dt is None else dt

        z_independent = np.random.standard_normal(n)
        if self._cholesky is not None:
            z_correlated = self._cholesky @ z_independent
        else:
            z_correlated = z_independent

        result: dict[str, float] = {}
        for i, asset_id in enumerate(self._asset_ids):
            params = self._params[asset_id]
            mu = params["mu"]
            sigma = params["sigma"]

            drift = (mu - 0.5 * sigma**2) * dt
            diffusion = sigma * math.sqrt(dt) * z_correlated[i]
            self._prices[asset_id] *= math.exp(drift + diffusion)

            # Random event: a sudden pump or dump, never on pegged assets
            if sigma > 0.05 and random.random() < self._event_prob:
                shock_magnitude = random.uniform(0.03, 0.08)
                shock_sign = random.choice([-1, 1])
                self._prices[asset_id] *= 1 + shock_magnitude * shock_sign
                logger.debug(
                    "Random event on %s: %.1f%% %s",
                    asset_id,
                    shock_magnitude * 100,
                    "up" if shock_sign > 0 else "down",
                )

            result[asset_id] = self._prices[asset_id]

        return result

    def get_price(self, asset_id: str) -> float | None:
        """Current USD price for an asset, or None if not simulated."""
        return self._prices.get(asset_id)

    @property
    def asset_ids(self) -> list[str]:
        return list(self._asset_ids)

    # --- Internals ---

    def _add_asset_internal(self, asset_id: str) -> None:
        if asset_id in self._prices:
            return
        seed = SEED_ASSETS.get(asset_id)
        self._asset_ids.append(asset_id)
        self._prices[asset_id] = seed["price"] if seed else random.uniform(1.0, 100.0)
        self._params[asset_id] = ASSET_PARAMS.get(asset_id, dict(DEFAULT_PARAMS))

    def _rebuild_cholesky(self) -> None:
        """Build the Cholesky decomposition of the asset correlation matrix. O(n^2), n < 50."""
        n = len(self._asset_ids)
        if n <= 1:
            self._cholesky = None
            return

        corr = np.eye(n)
        for i in range(n):
            for j in range(i + 1, n):
                rho = self._pairwise_correlation(self._asset_ids[i], self._asset_ids[j])
                corr[i, j] = rho
                corr[j, i] = rho

        self._cholesky = np.linalg.cholesky(corr)

    @staticmethod
    def _pairwise_correlation(a1: str, a2: str) -> float:
        """Correlation between two assets based on their group.

        Correlation structure:
          - Stablecoin with anything: 0.0
          - DOGE with anything:       0.4
          - Majors with majors:       0.8
          - Altcoins with altcoins:   0.7
          - Majors with altcoins:     0.6
          - Unknown assets:           0.5
        """
        majors = CORRELATION_GROUPS["majors"]
        altcoins = CORRELATION_GROUPS["altcoins"]
        stablecoins = CORRELATION_GROUPS["stablecoins"]

        if a1 in stablecoins or a2 in stablecoins:
            return STABLECOIN_CORR
        if a1 == "dogecoin" or a2 == "dogecoin":
            return DOGE_CORR

        if a1 in majors and a2 in majors:
            return INTRA_MAJORS_CORR
        if a1 in altcoins and a2 in altcoins:
            return INTRA_ALTCOIN_CORR
        if (a1 in majors or a1 in altcoins) and (a2 in majors or a2 in altcoins):
            return CROSS_GROUP_CORR

        return DEFAULT_CORR


class SimulatorDataSource(MarketDataSource):
    """MarketDataSource backed by the GBM simulator.

    Every fetch_snapshot() advances the simulation by ``step_seconds`` of
    market time. On construction the seeds are walked through
    ``history_days`` of hourly steps ending now, so sparklines, 24h change and
    the detail chart have data from the very first fetch.
    """

    SAMPLE_SECONDS = 3600  # One history sample per hour, like the real sparkline

    def __init__(
        self,
        asset_ids: list[str] | None = None,
        step_seconds: float = GBMSimulator.DEFAULT_STEP_SECONDS,
        event_probability: float = 0.001,
        history_days: int = 7,
        per_page: int = 50,
    ) -> None:
        self._step_seconds = step_seconds
        self._history_days = history_days
        self._per_page = per_page
        self._sim = GBMSimulator(
            asset_ids=list(asset_ids) if asset_ids is not None else list(SEED_ASSETS),
            dt=step_seconds / SECONDS_PER_YEAR,
            event_probability=event_probability,
        )
        self._clock = time.time()
        max_samples = history_days * SECONDS_PER_DAY // self.SAMPLE_SECONDS + 1
        self._history: dict[str, deque[PricePoint]] = {
            asset_id: deque(maxlen=max_samples) for asset_id in self._sim.asset_ids
        }
        self._backfill()
        logger.info("Simulator ready with %d assets", len(self._history))

    async def fetch_snapshot(self, quote_currency: str) -> Snapshot:
        rate = self._fx_rate(quote_currency)
        self._clock = max(self._clock + self._step_seconds, time.time())
        prices = self._sim.step()
        for asset_id, price in prices.items():
            self._record(asset_id, price)

        quotes = [self._quote(asset_id, price, rate) for asset_id, price in prices.items()]
        quotes.sort(key=lambda q: q.market_cap or 0.0, reverse=True)
        ranked = tuple(replace(q, rank=i + 1) for i, q in enumerate(quotes[: self._per_page]))
        return Snapshot(quotes=ranked, currency=quote_currency, fetched_at=self._clock)

    async def fetch_price_history(
        self,
        asset_id: str,
        quote_currency: str,
        window_days: int,
    ) -> list[PricePoint]:
        rate = self._fx_rate(quote_currency)
        history = self._history.get(asset_id)
        if history is None:
            raise NetworkError(f"Unknown asset: {asset_id}")
        cutoff = self._clock - window_days * SECONDS_PER_DAY
        points = [
            PricePoint(timestamp=p.timestamp, price=round(p.price * rate, 8))
            for p in history
            if p.timestamp >= cutoff
        ]
        current = self._sim.get_price(asset_id)
        if current is not None and (not points or points[-1].timestamp < self._clock):
            points.append(PricePoint(timestamp=self._clock, price=round(current * rate, 8)))
        return points

    # --- Internal ---

    def _fx_rate(self, quote_currency: str) -> float:
        rate = FX_RATES.get(quote_currency)
        if rate is None:
            # The real API answers 400 for an unsupported vs_currency
            raise NetworkError(f"Unsupported quote currency: {quote_currency}")
        return rate

    def _backfill(self) -> None:
        """Walk the seeds forward over the history window, one sample per hour."""
        samples = self._history_days * SECONDS_PER_DAY // self.SAMPLE_SECONDS
        start = self._clock - samples * self.SAMPLE_SECONDS
        hour_dt = self.SAMPLE_SECONDS / SECONDS_PER_YEAR
        for asset_id in self._sim.asset_ids:
            self._history[asset_id].append(
                PricePoint(timestamp=start, price=self._sim.get_price(asset_id))
            )
        for i in range(1, samples + 1):
            for asset_id, price in self._sim.step(dt=hour_dt).items():
                self._history[asset_id].append(
                    PricePoint(timestamp=start + i * self.SAMPLE_SECONDS, price=price)
                )

    def _record(self, asset_id: str, price: float) -> None:
        history = self._history[asset_id]
        if not history or self._clock - history[-1].timestamp >= self.SAMPLE_SECONDS:
            history.append(PricePoint(timestamp=self._clock, price=price))

    def _price_day_ago(self, asset_id: str) -> float | None:
        cutoff = self._clock - SECONDS_PER_DAY
        for point in self._history[asset_id]:
            if point.timestamp >= cutoff:
                return point.price
        return None

    def _quote(self, asset_id: str, usd_price: float, rate: float) -> AssetQuote:
        seed = SEED_ASSETS.get(asset_id, {})
        params = ASSET_PARAMS.get(asset_id, DEFAULT_PARAMS)
        supply = seed.get("supply", 1.0e9)

        price = usd_price * rate
        market_cap = price * supply
        # Lognormal noise around the asset's typical daily turnover
        volume = market_cap * params["turnover"] * float(np.random.lognormal(0.0, 0.15))

        day_ago = self._price_day_ago(asset_id)
        change = (usd_price - day_ago) / day_ago * 100 if day_ago else None

        return AssetQuote(
            id=asset_id,
            name=seed.get("name", asset_id.replace("-", " ").title()),
            symbol=seed.get("symbol", asset_id[:4]).upper(),
            price=round(price, 8 if price < 1 else 2),
            market_cap=round(market_cap, 0),
            volume_24h=round(volume, 0),
            change_pct_24h=round(change, 4) if change is not None else None,
            sparkline=tuple(round(p.price * rate, 8) for p in self._history[asset_id]),
        )
