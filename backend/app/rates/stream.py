"""SSE streaming endpoint for live rate diffs."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from .cache import RateCache

logger = logging.getLogger(__name__)


def create_stream_router(rate_cache: RateCache, interval: float = 0.5) -> APIRouter:
    """Create the SSE streaming router with a reference to the rate cache."""
    router = APIRouter(prefix="/api/stream", tags=["streaming"])

    @router.get("/rates")
    async def stream_rates(request: Request) -> StreamingResponse:
        """SSE endpoint for live rate diffs.

        Sends one event per successful poll (cache version change):

            data: {"version": 3, "currency": "EUR", "rates": {...},
                   "direction": {...}, "top_gainer": {...}, "history": {...}}
        """
        return StreamingResponse(
            _generate_events(rate_cache, request, interval),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


def build_event(rate_cache: RateCache) -> str | None:
    """SSE ``data:`` frame for the cache's current state, or None before the first poll."""
    snapshot, result, version = rate_cache.state()
    if snapshot is None:
        return None

    payload = {
        "version": version,
        "currency": snapshot.currency,
        "timestamp": snapshot.timestamp,
        "rates": dict(snapshot.rates),
        **result.to_dict(),
    }
    return f"data: {json.dumps(payload)}\n\n"


async def _generate_events(
    rate_cache: RateCache,
    request: Request,
    interval: float = 0.5,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted diff events.

    Checks the cache version every ``interval`` seconds and stops when the
    client disconnects.
    """
    # Tell the client to retry after 1 second if the connection drops
    yield "retry: 1000\n\n"

    last_version = -1
    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client connected: %s", client_ip)

    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break

            current_version = rate_cache.version
            if current_version != last_version:
                last_version = current_version
                event = build_event(rate_cache)
                if event:
                    yield event

            await asyncio.sleep(interval)
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
