"""Pytest configuration and shared fixtures."""

import pytest

from app.rates.models import RateSnapshot


@pytest.fixture
def make_snapshot():
    """Factory for RateSnapshot with a fixed currency and timestamp."""

    def _make(rates: dict, currency: str = "EUR", timestamp: float = 1700000000.0) -> RateSnapshot:
        return RateSnapshot(currency=currency, rates=rates, timestamp=timestamp)

    return _make
