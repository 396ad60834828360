"""Exceptions raised by the market data subsystem."""


class MarketDataError(Exception):
    """Base class for market data failures."""


class NetworkError(MarketDataError):
    """The fetch failed, timed out, or returned a non-success status."""


class DecodeError(MarketDataError):
    """The response could not be parsed into the expected shape."""


class PersistenceCorrupt(MarketDataError):
    """A persisted value could not be parsed.

    Always recovered locally by falling back to the documented default.
    """
