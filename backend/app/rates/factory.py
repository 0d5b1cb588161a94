"""Factory for creating rate sources."""

from __future__ import annotations

import logging

from ..config import Settings
from .backoff import PollBackoff
from .cache import RateCache
from .interface import RateSource

logger = logging.getLogger(__name__)


def create_rate_source(rate_cache: RateCache, settings: Settings) -> RateSource:
    """Create the rate source named by ``settings.source``.

    - "simulator" → SimulatorRateSource (GBM simulation, no network)
    - anything else → CoinbaseRateSource (real exchange rates)

    Returns an unstarted source. Caller must await source.start().
    """
    if settings.source == "simulator":
        from .simulator import SimulatorRateSource

        logger.info("Rate source: GBM simulator")
        return SimulatorRateSource(
            rate_cache=rate_cache,
            currency=settings.currency,
            update_interval=settings.poll_interval,
        )

    if settings.source != "coinbase":
        logger.warning("Unknown RATES_SOURCE %r, falling back to coinbase", settings.source)

    from .coinbase_client import CoinbaseRateSource

    logger.info("Rate source: Coinbase exchange rates (%s)", settings.currency)
    return CoinbaseRateSource(
        rate_cache=rate_cache,
        currency=settings.currency,
        poll_interval=settings.poll_interval,
        timeout=settings.http_timeout,
        backoff=PollBackoff(settings.poll_interval, max_delay=settings.backoff_max),
    )
