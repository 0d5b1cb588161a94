"""Thread-safe holder of the latest snapshot and its diff."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from threading import Lock

from .differ import diff_snapshots
from .history import DEFAULT_WINDOW_SIZE, RollingHistory
from .models import DiffResult, RateSnapshot

logger = logging.getLogger(__name__)

Subscriber = Callable[[DiffResult], None]


class RateCache:
    """Owns the polling state: previous snapshot, last diff and failure info.

    Writers: CoinbaseRateSource or SimulatorRateSource (one at a time).
    Readers: REST endpoints, SSE stream, portfolio valuation.

    State is replaced as a whole after each successful diff. A failed diff
    leaves everything as it was.
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        self._lock = Lock()
        self._snapshot: RateSnapshot | None = None
        self._result = DiffResult(direction={}, top_gainer=None, history=RollingHistory(window_size=window_size))
        self._version: int = 0  # Bumped on every successful apply
        self._last_error: str | None = None
        self._last_error_at: float | None = None
        self._consecutive_failures: int = 0
        self._subscribers: list[Subscriber] = []

    def apply(self, snapshot: RateSnapshot) -> DiffResult | None:
        """Diff ``snapshot`` against the previous one and make it current.

        Raises ParseError (state untouched) if the snapshot has a bad price.
        An empty snapshot is ignored and None returned, so the next real poll
        still diffs against the last known prices.
        """
        with self._lock:
            if not snapshot.rates:
                logger.warning("Ignoring empty snapshot for %s", snapshot.currency)
                return None

            result = diff_snapshots(self._snapshot, snapshot, self._result.history)
            self._snapshot = snapshot
            self._result = result
            self._version += 1
            self._last_error = None
            self._consecutive_failures = 0
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(result)
            except Exception:
                logger.exception("Rate subscriber %r failed", callback)
        return result

    def record_failure(self, error: Exception) -> None:
        """Remember a failed poll cycle. Previous data stays available."""
        with self._lock:
            self._last_error = str(error)
            self._last_error_at = time.time()
            self._consecutive_failures += 1

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` with each new DiffResult. Returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def snapshot(self) -> RateSnapshot | None:
        with self._lock:
            return self._snapshot

    @property
    def result(self) -> DiffResult:
        with self._lock:
            return self._result

    def state(self) -> tuple[RateSnapshot | None, DiffResult, int]:
        """Consistent (snapshot, result, version) triple."""
        with self._lock:
            return self._snapshot, self._result, self._version

    def get_price(self, ticker: str) -> float | None:
        """Latest price for ``ticker``, or None if unknown."""
        snapshot, result, _ = self.state()
        if snapshot is None or ticker not in snapshot:
            return None
        points = result.history.get(ticker)
        return points[-1] if points else None

    @property
    def status(self) -> str:
        """'loading', 'ok', 'stale' (data but last poll failed) or 'unavailable'."""
        with self._lock:
            if self._snapshot is None:
                return "unavailable" if self._last_error else "loading"
            return "stale" if self._last_error else "ok"

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def version(self) -> int:
        """Current version counter. Useful for SSE change detection."""
        return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshot) if self._snapshot else 0

    def __contains__(self, ticker: str) -> bool:
        with self._lock:
            return self._snapshot is not None and ticker in self._snapshot
