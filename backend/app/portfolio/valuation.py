"""Naive portfolio valuation: held quantity times the latest rate."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from ..rates.differ import parse_price
from ..rates.models import RateSnapshot


@dataclass(frozen=True, slots=True)
class Position:
    ticker: str
    quantity: float
    price: float

    @property
    def value(self) -> float:
        return self.quantity * self.price

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "quantity": self.quantity,
            "price": self.price,
            "value": round(self.value, 2),
        }


@dataclass(frozen=True, slots=True)
class PortfolioValuation:
    currency: str | None
    positions: list[Position] = field(default_factory=list)
    unpriced: list[str] = field(default_factory=list)  # Held but absent from the snapshot

    @property
    def total(self) -> float:
        return sum(p.value for p in self.positions)

    def to_dict(self) -> dict:
        return {
            "currency": self.currency,
            "total": round(self.total, 2),
            "positions": [p.to_dict() for p in self.positions],
            "unpriced": list(self.unpriced),
        }


def value_portfolio(holdings: Mapping[str, float], snapshot: RateSnapshot | None) -> PortfolioValuation:
    """Value ``holdings`` at the prices in ``snapshot``.

    Tickers the snapshot doesn't quote are reported in ``unpriced``. With no
    snapshot yet, every holding is unpriced.
    """
    if snapshot is None:
        return PortfolioValuation(currency=None, unpriced=sorted(holdings))

    positions: list[Position] = []
    unpriced: list[str] = []
    for ticker in sorted(holdings):
        raw = snapshot.get(ticker)
        if raw is None:
            unpriced.append(ticker)
            continue
        positions.append(Position(ticker=ticker, quantity=holdings[ticker], price=parse_price(ticker, raw)))

    return PortfolioValuation(currency=snapshot.currency, positions=positions, unpriced=unpriced)
