"""Pytest configuration and fixtures."""

import pytest

from nova.market.storage import InMemoryKeyValueStore


@pytest.fixture
def store():
    """Fresh in-memory key/value store for each test."""
    return InMemoryKeyValueStore()
