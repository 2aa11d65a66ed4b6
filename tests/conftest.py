"""
Pytest configuration and fixtures for the wallet validation tests.
"""

import pytest

from validator.core import ValidationEngine
from validator.settings import ValidationSettings


@pytest.fixture
def settings():
    """Default validation settings."""
    return ValidationSettings()


@pytest.fixture
def engine():
    """Validation engine with default settings."""
    return ValidationEngine()


@pytest.fixture
def testnet_engine():
    """Validation engine that only accepts testnet destinations."""
    return ValidationEngine(config={"network": {"expected": "testnet"}})


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()
