"""Integration tests for SimulatorDataSource."""

import pytest

from nova.market.errors import NetworkError
from nova.market.seed_prices import FX_RATES, SEED_ASSETS
from nova.market.simulator import SECONDS_PER_DAY, SimulatorDataSource


@pytest.mark.asyncio
class TestSimulatorDataSource:
    """Integration tests for the SimulatorDataSource."""

    async def test_snapshot_has_every_asset(self):
        """Test that a snapshot covers the whole seeded universe."""
        source = SimulatorDataSource()
        snapshot = await source.fetch_snapshot("usd")
        assert set(snapshot.ids()) == set(SEED_ASSETS)
        assert snapshot.currency == "usd"

    async def test_snapshot_ranked_by_market_cap(self):
        """Quotes come back in market-cap order with ranks 1..n."""
        source = SimulatorDataSource()
        snapshot = await source.fetch_snapshot("usd")
        caps = [q.market_cap for q in snapshot.quotes]
        assert caps == sorted(caps, reverse=True)
        assert [q.rank for q in snapshot.quotes] == list(range(1, len(snapshot) + 1))

    async def test_quotes_are_well_formed(self):
        """Numeric fields are non-negative and display identity is filled in."""
        source = SimulatorDataSource()
        snapshot = await source.fetch_snapshot("usd")
        for quote in snapshot.quotes:
            assert quote.price > 0
            assert quote.market_cap >= 0
            assert quote.volume_24h >= 0
            assert quote.change_pct_24h is not None
            assert quote.symbol == quote.symbol.upper()
            assert len(quote.sparkline) > 0
        assert snapshot.get("bitcoin").name == "Bitcoin"
        assert snapshot.get("bitcoin").symbol == "BTC"

    async def test_per_page_limits_snapshot(self):
        """Test that per_page caps the number of quotes."""
        source = SimulatorDataSource(per_page=3)
        snapshot = await source.fetch_snapshot("usd")
        assert len(snapshot) == 3
        assert snapshot.quotes[0].rank == 1

    async def test_custom_universe(self):
        """Test simulating a chosen subset of assets."""
        source = SimulatorDataSource(asset_ids=["bitcoin", "solana"])
        snapshot = await source.fetch_snapshot("usd")
        assert set(snapshot.ids()) == {"bitcoin", "solana"}

    async def test_currency_conversion(self):
        """Prices in another currency follow the FX table."""
        source = SimulatorDataSource(asset_ids=["tether"], event_probability=0.0)
        snapshot = await source.fetch_snapshot("jpy")
        assert snapshot.currency == "jpy"
        assert snapshot.get("tether").price == pytest.approx(FX_RATES["jpy"], rel=0.02)

    async def test_unsupported_currency(self):
        """Unknown quote currencies fail like the real API."""
        source = SimulatorDataSource()
        with pytest.raises(NetworkError):
            await source.fetch_snapshot("xyz")

    async def test_prices_move_between_snapshots(self):
        """Every fetch advances the simulation."""
        source = SimulatorDataSource(asset_ids=["bitcoin"])
        first = await source.fetch_snapshot("usd")
        second = await source.fetch_snapshot("usd")
        assert second.fetched_at > first.fetched_at
        assert second.get("bitcoin").price != first.get("bitcoin").price

    async def test_price_history_covers_window(self):
        """History spans the requested window, oldest first."""
        source = SimulatorDataSource(asset_ids=["bitcoin"])
        await source.fetch_snapshot("usd")
        points = await source.fetch_price_history("bitcoin", "usd", 7)

        assert len(points) >= 7 * 24
        timestamps = [p.timestamp for p in points]
        assert timestamps == sorted(timestamps)
        assert timestamps[-1] - timestamps[0] <= 7 * SECONDS_PER_DAY
        assert all(p.price > 0 for p in points)

    async def test_price_history_shorter_window(self):
        """A one-day window returns roughly a day of hourly samples."""
        source = SimulatorDataSource(asset_ids=["bitcoin"])
        points = await source.fetch_price_history("bitcoin", "usd", 1)
        assert 24 <= len(points) <= 26

    async def test_price_history_ends_at_current_price(self):
        """The last history point is the latest simulated price."""
        source = SimulatorDataSource(asset_ids=["ethereum"])
        snapshot = await source.fetch_snapshot("usd")
        points = await source.fetch_price_history("ethereum", "usd", 7)
        assert points[-1].price == pytest.approx(snapshot.get("ethereum").price, rel=1e-5)

    async def test_price_history_unknown_asset(self):
        """Test that unknown assets raise NetworkError."""
        source = SimulatorDataSource(asset_ids=["bitcoin"])
        with pytest.raises(NetworkError):
            await source.fetch_price_history("nope", "usd", 7)

    async def test_aclose_is_noop(self):
        """Test that aclose() can be called multiple times."""
        source = SimulatorDataSource(asset_ids=["bitcoin"])
        await source.aclose()
        await source.aclose()
