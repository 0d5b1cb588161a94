"""Diff two consecutive rate snapshots into direction, top gainer and history."""

from __future__ import annotations

import math

from .errors import ParseError
from .history import RollingHistory
from .models import DiffResult, Direction, RateSnapshot, TopGainer

# Prices at or below this (in the reference currency) can't be top gainer
DUST_THRESHOLD = 0.01


def parse_price(ticker: str, value: object) -> float:
    """Parse a raw provider price. Raises ParseError instead of coercing to 0."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ParseError(ticker, value)
    try:
        price = float(value)
    except ValueError as e:
        raise ParseError(ticker, value) from e
    if not math.isfinite(price):
        raise ParseError(ticker, value)
    return price


def parse_prices(snapshot: RateSnapshot) -> dict[str, float]:
    """Parse every price of a snapshot, preserving the snapshot's ticker order."""
    return {ticker: parse_price(ticker, raw) for ticker, raw in snapshot.rates.items()}


def diff_snapshots(
    previous: RateSnapshot | None,
    current: RateSnapshot,
    history: RollingHistory | None = None,
) -> DiffResult:
    """Compare ``current`` against ``previous`` and extend ``history``.

    Pure function: inputs are never modified and the same arguments always
    give an equal result.

    - ``previous`` is None (first poll): no directions and no top gainer, but
      history is still seeded with the current prices.
    - A ticker missing from ``previous`` is compared against a price of 0.
      Its percent change is 0, so it never ranks above a real rise.
    - Top gainer is the ticker with the strictly greatest percent change among
      those priced above DUST_THRESHOLD. Ties keep the first in snapshot order.
    - An empty ``current`` returns the history unchanged.

    Raises ParseError if any price in ``current`` can't be parsed.
    """
    if history is None:
        history = RollingHistory()

    current_prices = parse_prices(current)
    if not current_prices:
        return DiffResult(direction={}, top_gainer=None, history=history)

    updated_history = history.push(current_prices)
    if previous is None:
        return DiffResult(direction={}, top_gainer=None, history=updated_history)

    previous_prices = parse_prices(previous)
    direction: dict[str, Direction] = {}
    top_gainer: TopGainer | None = None

    for ticker, price in current_prices.items():
        previous_price = previous_prices.get(ticker, 0.0)
        change = price - previous_price
        change_percent = change / previous_price * 100 if previous_price != 0 else 0.0

        if price > previous_price:
            direction[ticker] = Direction.UP
        elif price < previous_price:
            direction[ticker] = Direction.DOWN
        else:
            direction[ticker] = Direction.SAME

        if price > DUST_THRESHOLD and (top_gainer is None or change_percent > top_gainer.change_percent):
            top_gainer = TopGainer(ticker=ticker, change=change, change_percent=change_percent)

    return DiffResult(direction=direction, top_gainer=top_gainer, history=updated_history)
