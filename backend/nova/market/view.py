"""View state and the filter -> search -> sort derivation of visible rows."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from .models import AssetQuote

TABS = ("all", "watchlist")
SORT_DIRECTIONS = ("asc", "desc")

# Logical sort key -> AssetQuote attribute. Unknown keys sort by market cap.
SORT_FIELDS: dict[str, str] = {
    "price": "price",
    "market": "market_cap",
    "change": "change_pct_24h",
}
DEFAULT_SORT_FIELD = "market_cap"


@dataclass(frozen=True, slots=True)
class ViewState:
    """What the user currently asked to see. Pure data, no I/O."""

    tab: str = "all"
    sort_key: str = "market"
    sort_direction: str = "desc"
    search_text: str = ""
    quote_currency: str = "usd"

    def with_tab(self, tab: str) -> ViewState:
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab!r}")
        return replace(self, tab=tab)

    def with_sort(self, sort_key: str, sort_direction: str | None = None) -> ViewState:
        """Record a sort request.

        Without an explicit direction the current one is flipped, which is how
        clicking a column header behaves.
        """
        if sort_direction is None:
            sort_direction = "asc" if self.sort_direction == "desc" else "desc"
        if sort_direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {sort_direction!r}")
        return replace(self, sort_key=sort_key, sort_direction=sort_direction)

    def with_search(self, search_text: str) -> ViewState:
        return replace(self, search_text=search_text or "")

    def with_currency(self, quote_currency: str) -> ViewState:
        return replace(self, quote_currency=quote_currency)


def sort_field(sort_key: str) -> str:
    return SORT_FIELDS.get(sort_key, DEFAULT_SORT_FIELD)


def derive_rows(
    quotes: Iterable[AssetQuote],
    is_watched: Callable[[str], bool],
    view: ViewState,
) -> list[AssetQuote]:
    """Compute the ordered rows to display.

    1. Tab: on "watchlist" keep only watched assets.
    2. Search: keep assets whose name or symbol contains the search text,
       case-insensitively. Surrounding whitespace is ignored, so text that is
       blank or only whitespace keeps everything.
    3. Sort on the field behind ``view.sort_key``. Missing values compare as 0
       and equal values keep their input order.

    Nothing is cached; the same inputs always give the same list.
    """
    rows = list(quotes)

    if view.tab == "watchlist":
        rows = [quote for quote in rows if is_watched(quote.id)]

    needle = view.search_text.strip().lower()
    if needle:
        rows = [
            quote
            for quote in rows
            if needle in quote.name.lower() or needle in quote.symbol.lower()
        ]

    field = sort_field(view.sort_key)

    def key(quote: AssetQuote) -> float:
        value = getattr(quote, field)
        return 0.0 if value is None else value

    # sorted() is stable in both directions, reverse=True included.
    return sorted(rows, key=key, reverse=view.sort_direction == "desc")
