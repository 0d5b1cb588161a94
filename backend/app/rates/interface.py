"""Abstract interface for exchange-rate sources."""

from __future__ import annotations

from abc import ABC, abstractmethod


class RateSource(ABC):
    """Contract for exchange-rate providers.

    Implementations poll on their own schedule and hand each full snapshot to
    a shared RateCache. Downstream code never calls the source for prices; it
    reads from the cache.

    Lifecycle:
        source = create_rate_source(cache, settings)
        await source.start()
        # ... app runs ...
        await source.stop()
    """

    @abstractmethod
    async def start(self) -> None:
        """Do one immediate poll, then start the background polling task.

        Must be called exactly once. Calling start() twice is undefined behavior.
        """

    @abstractmethod
    async def stop(self) -> None:
        """Cancel the background task.

        Safe to call multiple times. After stop(), the source will not write
        to the cache again.
        """

    @abstractmethod
    async def poll_once(self) -> bool:
        """Run a single poll cycle. Returns True if the cache was updated.

        Never raises for fetch or parse failures; those are logged and
        recorded on the cache.
        """
