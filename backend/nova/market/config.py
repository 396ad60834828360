"""Runtime configuration for the market data pipeline."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 20.0  # seconds between scheduled refreshes
DEFAULT_CHART_WINDOW_DAYS = 7
DEFAULT_PER_PAGE = 50
DEFAULT_CURRENCY = "usd"
DEFAULT_REQUEST_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Explicit configuration handed to the pipeline and its collaborators.

    ``storage_path`` of None keeps preferences and the watchlist in memory only.
    """

    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    chart_window_days: int = DEFAULT_CHART_WINDOW_DAYS
    per_page: int = DEFAULT_PER_PAGE
    default_currency: str = DEFAULT_CURRENCY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    prune_missing_deltas: bool = False
    storage_path: str | None = None

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """Build a config from ``NOVA_*`` environment variables.

        - NOVA_REFRESH_INTERVAL   seconds between scheduled refreshes
        - NOVA_CHART_WINDOW_DAYS  days of history for the detail chart
        - NOVA_PER_PAGE           number of ranked assets per snapshot
        - NOVA_DEFAULT_CURRENCY   quote currency when none is persisted
        - NOVA_REQUEST_TIMEOUT    transport timeout in seconds
        - NOVA_PRUNE_DELTAS       "1"/"true" to forget assets that drop out
        - NOVA_STORAGE_PATH       JSON file for persisted preferences

        Unparsable numbers fall back to the defaults with a warning.
        """
        storage_path = os.environ.get("NOVA_STORAGE_PATH", "").strip() or None
        currency = os.environ.get("NOVA_DEFAULT_CURRENCY", "").strip().lower()
        return cls(
            refresh_interval=_env_number("NOVA_REFRESH_INTERVAL", DEFAULT_REFRESH_INTERVAL, float),
            chart_window_days=_env_number("NOVA_CHART_WINDOW_DAYS", DEFAULT_CHART_WINDOW_DAYS, int),
            per_page=_env_number("NOVA_PER_PAGE", DEFAULT_PER_PAGE, int),
            default_currency=currency or DEFAULT_CURRENCY,
            request_timeout=_env_number("NOVA_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float),
            prune_missing_deltas=os.environ.get("NOVA_PRUNE_DELTAS", "").strip().lower()
            in ("1", "true", "yes"),
            storage_path=storage_path,
        )


def _env_number(name: str, default, cast):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %s", name, raw, default)
        return default
    return value
