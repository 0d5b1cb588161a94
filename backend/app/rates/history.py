"""Bounded per-ticker price history used for sparkline charts."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping
from types import MappingProxyType

import numpy as np

DEFAULT_WINDOW_SIZE = 20


class RollingHistory(Mapping[str, tuple[float, ...]]):
    """Immutable mapping of ticker -> most recent prices, oldest first.

    Each ticker holds at most ``window_size`` points. ``push`` never modifies
    the instance it is called on; it returns a new history with one point
    appended per ticker and the oldest points evicted (FIFO).
    """

    __slots__ = ("_points", "_window_size")

    def __init__(
        self,
        points: Mapping[str, tuple[float, ...]] | None = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self._window_size = window_size
        self._points = MappingProxyType(
            {ticker: tuple(values)[-window_size:] for ticker, values in (points or {}).items()}
        )

    @property
    def window_size(self) -> int:
        return self._window_size

    def push(self, prices: Mapping[str, float]) -> RollingHistory:
        """Return a new history with ``prices`` appended.

        Tickers not in ``prices`` keep their existing points unchanged.
        """
        if not prices:
            return self

        updated = dict(self._points)
        for ticker, price in prices.items():
            window = deque(updated.get(ticker, ()), maxlen=self._window_size)
            window.append(price)
            updated[ticker] = tuple(window)
        return RollingHistory(updated, window_size=self._window_size)

    def sparkline(self, ticker: str) -> list[float]:
        """Points for ``ticker`` scaled into [0, 1] for charting.

        A flat series maps to 0.5 everywhere. Unknown tickers give [].
        """
        points = np.asarray(self._points.get(ticker, ()), dtype=float)
        if points.size == 0:
            return []
        low, high = points.min(), points.max()
        if high == low:
            return [0.5] * int(points.size)
        return np.round((points - low) / (high - low), 4).tolist()

    def to_dict(self) -> dict[str, list[float]]:
        return {ticker: list(values) for ticker, values in self._points.items()}

    def __getitem__(self, ticker: str) -> tuple[float, ...]:
        return self._points[ticker]

    def __iter__(self) -> Iterator[str]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RollingHistory):
            return self._window_size == other._window_size and dict(self._points) == dict(other._points)
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RollingHistory({dict(self._points)!r}, window_size={self._window_size})"
