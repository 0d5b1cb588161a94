"""GBM-based exchange-rate simulator for offline development."""

from __future__ import annotations

import asyncio
import logging
import math
import random

import numpy as np

from .cache import RateCache
from .errors import RatesError
from .interface import RateSource
from .models import RateSnapshot
from .seed_prices import (
    CORRELATION_GROUPS,
    CROSS_GROUP_CORR,
    DEFAULT_PARAMS,
    INTRA_ALTS_CORR,
    INTRA_MAJORS_CORR,
    SEED_PRICES,
    STABLECOIN_CORR,
    TICKER_PARAMS,
)

logger = logging.getLogger(__name__)


class GBMSimulator:
    """Geometric Brownian Motion simulator for correlated crypto prices.

    Math:
        S(t+dt) = S(t) * exp((mu - sigma^2/2) * dt + sigma * sqrt(dt) * Z)

    Crypto trades around the clock, so dt is the step length as a fraction
    of a 365-day year.
    """

    SECONDS_PER_YEAR = 365 * 24 * 3600

    def __init__(
        self,
        tickers: list[str],
        step_seconds: float = 6.0,
        event_probability: float = 0.001,
    ) -> None:
        self._dt = step_seconds / self.SECONDS_PER_YEAR
        self._event_prob = event_probability
        self._tickers: list[str] = []
        self._prices: dict[str, float] = {}
        self._params: dict[str, dict[str, float]] = {}

        for ticker in tickers:
            if ticker in self._prices:
                continue
            self._tickers.append(ticker)
            self._prices[ticker] = SEED_PRICES.get(ticker, random.uniform(1.0, 100.0))
            self._params[ticker] = TICKER_PARAMS.get(ticker, dict(DEFAULT_PARAMS))

        self._cholesky = self._build_cholesky()

    @property
    def tickers(self) -> list[str]:
        return list(self._tickers)

    def get_price(self, ticker: str) -> float | None:
        return self._prices.get(ticker)

    def prices(self) -> dict[str, float]:
        return dict(self._prices)

    def step(self) -> dict[str, float]:
        """Advance all tickers by one time step. Returns {ticker: new_price}."""
        n = len(self._tickers)
        if n == 0:
            return {}

        z = np.random.standard_normal(n)
        if self._cholesky is not None:
            z = self._cholesky @ z

        for i, ticker in enumerate(self._tickers):
            mu = self._params[ticker]["mu"]
            sigma = self._params[ticker]["sigma"]
            drift = (mu - 0.5 * sigma**2) * self._dt
            diffusion = sigma * math.sqrt(self._dt) * z[i]
            self._prices[ticker] *= math.exp(drift + diffusion)

            # Occasional 2-8% shock; crypto gaps harder than equities
            if random.random() < self._event_prob:
                shock = random.uniform(0.02, 0.08) * random.choice([-1, 1])
                self._prices[ticker] *= 1 + shock
                logger.debug("Random event on %s: %+.1f%%", ticker, shock * 100)

        return self.prices()

    def _build_cholesky(self) -> np.ndarray | None:
        n = len(self._tickers)
        if n <= 1:
            return None

        corr = np.eye(n)
        for i in range(n):
            for j in range(i + 1, n):
                rho = self._pairwise_correlation(self._tickers[i], self._tickers[j])
                corr[i, j] = rho
                corr[j, i] = rho
        return np.linalg.cholesky(corr)

    @staticmethod
    def _pairwise_correlation(t1: str, t2: str) -> float:
        majors = CORRELATION_GROUPS["majors"]
        alts = CORRELATION_GROUPS["alts"]

        if t1 == "USDC" or t2 == "USDC":
            return STABLECOIN_CORR
        if t1 in majors and t2 in majors:
            return INTRA_MAJORS_CORR
        if t1 in alts and t2 in alts:
            return INTRA_ALTS_CORR
        return CROSS_GROUP_CORR


def format_rate(price: float) -> str:
    """Render a simulated price the way the exchange API does: a plain decimal string."""
    return f"{price:.10f}".rstrip("0").rstrip(".") or "0"


class SimulatorRateSource(RateSource):
    """RateSource backed by GBMSimulator.

    Emits snapshots in the same shape as the Coinbase source so the rest of
    the app can't tell the difference.
    """

    def __init__(
        self,
        rate_cache: RateCache,
        currency: str = "EUR",
        tickers: list[str] | None = None,
        update_interval: float = 6.0,
        event_probability: float = 0.001,
    ) -> None:
        self._cache = rate_cache
        self._currency = currency.upper()
        self._interval = update_interval
        self._sim = GBMSimulator(
            tickers=list(tickers or SEED_PRICES),
            step_seconds=update_interval,
            event_probability=event_probability,
        )
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        # Seed the cache with the starting prices so clients have data immediately
        self._publish(self._sim.prices())
        self._task = asyncio.create_task(self._run_loop(), name="simulator-loop")
        logger.info("Simulator started with %d tickers", len(self._sim.tickers))

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Simulator stopped")

    def get_tickers(self) -> list[str]:
        return self._sim.tickers

    async def poll_once(self) -> bool:
        try:
            return self._publish(self._sim.step())
        except RatesError as e:
            self._cache.record_failure(e)
            logger.warning("Simulator step rejected: %s", e)
            return False

    async def _run_loop(self) -> None:
        """Core loop: step the simulation, write to cache, sleep."""
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Simulator step failed")

    def _publish(self, prices: dict[str, float]) -> bool:
        """Apply one simulated snapshot. Returns False if the cache ignored it."""
        snapshot = RateSnapshot(
            currency=self._currency,
            rates={ticker: format_rate(price) for ticker, price in prices.items()},
        )
        return self._cache.apply(snapshot) is not None
