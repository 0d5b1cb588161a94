"""Exchange-rate polling and diffing for RateWatch.

Public API:
    RateSnapshot        - Immutable poll result (ticker -> raw price)
    DiffResult          - Direction map, top gainer and rolling history
    diff_snapshots      - Pure differ over two consecutive snapshots
    RollingHistory      - Bounded per-ticker price history
    RateCache           - Thread-safe holder of the latest state
    RateSource          - Abstract interface for rate providers
    create_rate_source  - Factory that selects Coinbase or the simulator
    create_stream_router - FastAPI router factory for SSE endpoint
"""

from .cache import RateCache
from .differ import diff_snapshots
from .errors import FetchError, ParseError, RatesError
from .factory import create_rate_source
from .history import RollingHistory
from .interface import RateSource
from .models import DiffResult, Direction, RateSnapshot, TopGainer
from .stream import create_stream_router

__all__ = [
    "RateSnapshot",
    "Direction",
    "TopGainer",
    "DiffResult",
    "diff_snapshots",
    "RollingHistory",
    "RateCache",
    "RateSource",
    "RatesError",
    "FetchError",
    "ParseError",
    "create_rate_source",
    "create_stream_router",
]
