"""Fixtures for market data tests."""

import pytest
from fakes import ScriptedSource


@pytest.fixture
def source():
    return ScriptedSource()


@pytest.fixture
def gated_source():
    return ScriptedSource(gated=True)
