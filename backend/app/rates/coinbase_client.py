"""Coinbase public exchange-rates client."""

from __future__ import annotations

import asyncio
import logging

import requests

from .backoff import PollBackoff
from .cache import RateCache
from .errors import FetchError, RatesError
from .interface import RateSource
from .models import RateSnapshot

logger = logging.getLogger(__name__)

COINBASE_RATES_URL = "https://api.coinbase.com/v2/exchange-rates"


class CoinbaseRateSource(RateSource):
    """RateSource backed by ``GET /v2/exchange-rates?currency=<ref>``.

    One request per tick returns every rate quoted against the reference
    currency. Ticks never overlap: the loop awaits each fetch before sleeping
    again, and failures stretch the sleep via PollBackoff.
    """

    def __init__(
        self,
        rate_cache: RateCache,
        currency: str = "EUR",
        poll_interval: float = 6.0,
        timeout: float = 10.0,
        backoff: PollBackoff | None = None,
        url: str = COINBASE_RATES_URL,
    ) -> None:
        self._cache = rate_cache
        self._currency = currency.upper()
        self._interval = poll_interval
        self._timeout = timeout
        self._backoff = backoff or PollBackoff(poll_interval)
        self._url = url
        self._session = requests.Session()
        self._task: asyncio.Task | None = None
        self._stopped = False

    async def start(self) -> None:
        self._stopped = False
        # Immediate first poll so the cache has data right away
        await self.poll_once()

        self._task = asyncio.create_task(self._poll_loop(), name="coinbase-poller")
        logger.info(
            "Coinbase poller started: currency=%s, %.1fs interval",
            self._currency,
            self._interval,
        )

    async def stop(self) -> None:
        self._stopped = True
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        self._session.close()
        logger.info("Coinbase poller stopped")

    @property
    def currency(self) -> str:
        return self._currency

    # --- Internal ---

    async def _poll_loop(self) -> None:
        """Poll on interval. First poll already happened in start()."""
        while True:
            await asyncio.sleep(self._backoff.next_delay())
            await self.poll_once()

    async def poll_once(self) -> bool:
        """Execute one poll cycle: fetch a snapshot, diff it into the cache."""
        try:
            # requests is synchronous, so run it in a thread to keep the loop free
            snapshot = await asyncio.to_thread(self._fetch_snapshot)
            if self._stopped:
                logger.debug("Discarding snapshot fetched after stop()")
                return False
            if self._cache.apply(snapshot) is None:
                raise FetchError(f"Empty rates payload for {snapshot.currency}")
        except RatesError as e:
            self._fail(e)
            logger.warning("Coinbase poll failed (attempt %d): %s", self._backoff.failures, e)
            return False
        except Exception as e:
            self._fail(e)
            logger.exception("Unexpected error during Coinbase poll")
            return False

        self._backoff.success()
        logger.debug("Coinbase poll: %d rates, version %d", len(snapshot), self._cache.version)
        return True

    def _fail(self, error: Exception) -> None:
        self._backoff.failure()
        self._cache.record_failure(error)

    def _fetch_snapshot(self) -> RateSnapshot:
        """Synchronous call to the Coinbase API. Runs in a thread."""
        try:
            response = self._session.get(
                self._url,
                params={"currency": self._currency},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise FetchError(f"Request to {self._url} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"Response from {self._url} is not JSON") from e

        return RateSnapshot.from_payload(payload)
