"""Tests for market data models."""

import pytest

from nova.market.models import AssetDetail, AssetQuote, Direction, PricePoint, Snapshot


class TestAssetQuote:
    """Unit tests for the AssetQuote model."""

    def test_quote_creation(self):
        """Test basic AssetQuote creation and defaults."""
        quote = AssetQuote(id="bitcoin", name="Bitcoin", symbol="BTC", price=67000.0)
        assert quote.id == "bitcoin"
        assert quote.rank is None
        assert quote.change_pct_24h is None
        assert quote.sparkline == ()
        assert quote.previous_price is None
        assert quote.direction is Direction.UNKNOWN

    def test_to_dict(self):
        """Test serialization to dictionary."""
        quote = AssetQuote(
            id="bitcoin",
            name="Bitcoin",
            symbol="BTC",
            price=67000.0,
            rank=1,
            market_cap=1.3e12,
            volume_24h=2.5e10,
            change_pct_24h=-1.5,
            sparkline=(66000.0, 67000.0),
            previous_price=66900.0,
            direction=Direction.UP,
        )
        result = quote.to_dict()

        assert result["id"] == "bitcoin"
        assert result["rank"] == 1
        assert result["sparkline"] == [66000.0, 67000.0]
        assert result["previous_price"] == 66900.0
        assert result["direction"] == "up"

    def test_immutability(self):
        """Test that AssetQuote is immutable."""
        quote = AssetQuote(id="bitcoin", name="Bitcoin", symbol="BTC", price=67000.0)

        with pytest.raises(AttributeError):
            quote.price = 1.0  # Should raise error


class TestSnapshot:
    """Unit tests for the Snapshot model."""

    def _snapshot(self):
        return Snapshot(
            quotes=(
                AssetQuote(id="bitcoin", name="Bitcoin", symbol="BTC", price=67000.0),
                AssetQuote(id="ethereum", name="Ethereum", symbol="ETH", price=3500.0),
            ),
            currency="usd",
            fetched_at=1700000000.0,
        )

    def test_get(self):
        """Test looking up a quote by id."""
        snapshot = self._snapshot()
        assert snapshot.get("ethereum").price == 3500.0
        assert snapshot.get("dogecoin") is None

    def test_ids_keep_order(self):
        """Test that ids() follows quote order."""
        assert self._snapshot().ids() == ["bitcoin", "ethereum"]

    def test_len(self):
        """Test __len__ method."""
        assert len(self._snapshot()) == 2

    def test_immutability(self):
        """Test that Snapshot is immutable."""
        snapshot = self._snapshot()

        with pytest.raises(AttributeError):
            snapshot.currency = "eur"


class TestAssetDetail:
    """Unit tests for the AssetDetail model."""

    def test_prices(self):
        """Test the prices convenience property."""
        detail = AssetDetail(
            asset_id="bitcoin",
            name="Bitcoin",
            price=67000.0,
            currency="usd",
            points=(PricePoint(1.0, 66000.0), PricePoint(2.0, 67000.0)),
        )
        assert detail.prices == [66000.0, 67000.0]
        assert detail.available is True

    def test_unavailable_has_no_points(self):
        """Test the default unavailable detail."""
        detail = AssetDetail(
            asset_id="bitcoin", name="Bitcoin", price=67000.0, currency="usd", available=False
        )
        assert detail.points == ()
        assert detail.prices == []


class TestDirection:
    """Unit tests for the Direction enum."""

    def test_values_are_strings(self):
        """Test that directions compare equal to their wire values."""
        assert Direction.UP == "up"
        assert Direction.DOWN == "down"
        assert Direction.UNCHANGED == "unchanged"
        assert Direction.UNKNOWN == "unknown"
