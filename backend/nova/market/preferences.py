"""Persisted user preferences: theme and quote currency."""

from __future__ import annotations

import logging

from .storage import CURRENCY_KEY, THEME_KEY, KeyValueStore

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
DEFAULT_THEME = "light"


def normalize_currency(currency: str) -> str:
    """Lower-case and strip a currency code. Raises ValueError if blank."""
    code = (currency or "").strip().lower()
    if not code or not code.isalnum():
        raise ValueError(f"Invalid quote currency: {currency!r}")
    return code


class Preferences:
    """Theme and quote currency, loaded once and saved on every change.

    Absent or unusable stored values fall back to the defaults. Write failures
    are logged and the new value is kept for the session.
    """

    def __init__(self, store: KeyValueStore, default_currency: str = "usd") -> None:
        self._store = store
        self._theme = self._load_theme()
        self._currency = self._load_currency(normalize_currency(default_currency))

    @property
    def theme(self) -> str:
        return self._theme

    @property
    def currency(self) -> str:
        return self._currency

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._theme = theme
        self._save(THEME_KEY, theme)

    def toggle_theme(self) -> str:
        self.set_theme("light" if self._theme == "dark" else "dark")
        return self._theme

    def set_currency(self, currency: str) -> None:
        self._currency = normalize_currency(currency)
        self._save(CURRENCY_KEY, self._currency)

    def _load_theme(self) -> str:
        stored = self._store.get(THEME_KEY)
        if stored in THEMES:
            return stored
        if stored:
            logger.warning("Ignoring stored theme %r", stored)
        return DEFAULT_THEME

    def _load_currency(self, default: str) -> str:
        stored = self._store.get(CURRENCY_KEY)
        if not stored:
            return default
        try:
            return normalize_currency(stored)
        except ValueError:
            logger.warning("Ignoring stored currency %r", stored)
            return default

    def _save(self, key: str, value: str) -> None:
        try:
            self._store.set(key, value)
        except OSError as e:
            logger.warning("Could not persist %s: %s", key, e)
