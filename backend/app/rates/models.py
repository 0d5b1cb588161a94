"""Data models for exchange-rate snapshots and their diffs."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .errors import FetchError
from .history import RollingHistory


class Direction(str, Enum):
    """Price movement of a ticker between two consecutive polls."""

    UP = "up"
    DOWN = "down"
    SAME = "same"


@dataclass(frozen=True, slots=True)
class RateSnapshot:
    """Immutable result of one poll: ticker -> raw price string.

    Prices are kept exactly as the provider sent them. Parsing happens in the
    differ so that a malformed value is reported against its ticker.
    """

    currency: str
    rates: Mapping[str, str]
    timestamp: float = field(default_factory=time.time)  # Unix seconds

    def __post_init__(self) -> None:
        # Freeze a private copy so callers can't mutate the snapshot afterwards
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    @classmethod
    def from_payload(cls, payload: Any, timestamp: float | None = None) -> RateSnapshot:
        """Build a snapshot from ``{"data": {"currency": ..., "rates": {...}}}``.

        Raises FetchError if the payload does not have that shape.
        """
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise FetchError("Unexpected payload: missing 'data' object")

        currency = data.get("currency")
        rates = data.get("rates")
        if not isinstance(currency, str) or not isinstance(rates, dict):
            raise FetchError("Unexpected payload: 'currency' or 'rates' missing")

        return cls(
            currency=currency,
            rates={str(ticker): value for ticker, value in rates.items()},
            timestamp=time.time() if timestamp is None else timestamp,
        )

    def get(self, ticker: str) -> str | None:
        return self.rates.get(ticker)

    def __len__(self) -> int:
        return len(self.rates)

    def __contains__(self, ticker: object) -> bool:
        return ticker in self.rates


@dataclass(frozen=True, slots=True)
class TopGainer:
    """The ticker with the largest percentage rise in one diff cycle."""

    ticker: str
    change: float
    change_percent: float

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "change": round(self.change, 8),
            "change_percent": round(self.change_percent, 4),
        }


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Output of one differ run."""

    direction: Mapping[str, Direction]
    top_gainer: TopGainer | None
    history: RollingHistory

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "direction": {ticker: d.value for ticker, d in self.direction.items()},
            "top_gainer": self.top_gainer.to_dict() if self.top_gainer else None,
            "history": self.history.to_dict(),
        }
