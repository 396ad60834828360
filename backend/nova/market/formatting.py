"""Display helpers a renderer can use on pipeline rows."""

from __future__ import annotations

from collections.abc import Sequence

CURRENCY_SYMBOLS: dict[str, str] = {
    "usd": "$",
    "eur": "€",
    "gbp": "£",
    "jpy": "¥",
    "inr": "₹",
    "aud": "A$",
    "cad": "CA$",
}

SPARKLINE_WIDTH = 120
SPARKLINE_HEIGHT = 30


def format_currency(value: float | None, currency: str) -> str:
    """Format an amount like ``$67,012`` or ``€0.45``.

    Amounts above 100 are shown without decimals, smaller ones with two.
    Currencies without a known symbol are prefixed with their code.
    """
    if value is None:
        return "-"
    code = currency.lower()
    digits = 0 if value > 100 else 2
    amount = f"{abs(value):,.{digits}f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    text = f"{symbol}{amount}" if symbol else f"{code.upper()} {amount}"
    return f"-{text}" if value < 0 else text


def format_change(change_pct: float | None) -> str:
    """Signed 24h change with two decimals, e.g. ``+1.25%``."""
    if change_pct is None:
        return "-"
    sign = "+" if change_pct >= 0 else ""
    return f"{sign}{change_pct:.2f}%"


def change_class(change_pct: float | None) -> str:
    """'positive' for gains (and flat), 'negative' for losses."""
    return "negative" if change_pct is not None and change_pct < 0 else "positive"


def sparkline_points(
    prices: Sequence[float],
    width: float = SPARKLINE_WIDTH,
    height: float = SPARKLINE_HEIGHT,
) -> list[tuple[float, float]]:
    """Scale a price series into polyline coordinates inside a width x height box.

    x runs left to right across the box; y is inverted so higher prices sit
    nearer the top, with a 1-unit margin at the bottom. A flat series is drawn
    along the bottom.
    """
    if not prices:
        return []
    if len(prices) == 1:
        return [(0.0, height)]
    low = min(prices)
    span = (max(prices) - low) or 1
    last = len(prices) - 1
    return [
        (
            round(index / last * width, 2),
            round(height - (price - low) / span * (height - 2), 2),
        )
        for index, price in enumerate(prices)
    ]
