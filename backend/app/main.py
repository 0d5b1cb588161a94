"""FastAPI application factory for RateWatch."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import Settings
from .i18n import Translator
from .portfolio.routes import create_portfolio_router
from .portfolio.store import PreferenceStore
from .rates.cache import RateCache
from .rates.factory import create_rate_source
from .rates.interface import RateSource
from .rates.routes import create_rates_router
from .rates.stream import create_stream_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, source: RateSource | None = None) -> FastAPI:
    """Wire cache, rate source, preference store and routers into an app.

    The rate source is started on app startup and stopped on shutdown, which
    cancels polling. Pass ``source`` to override the one chosen by settings.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    rate_cache = RateCache(window_size=settings.history_window)
    store = PreferenceStore(settings.store_path)
    translator = Translator(default_locale=settings.locale)
    rate_source = source or create_rate_source(rate_cache, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await rate_source.start()
        try:
            yield
        finally:
            await rate_source.stop()

    app = FastAPI(title="RateWatch", lifespan=lifespan)
    app.state.rate_cache = rate_cache
    app.state.store = store
    app.state.translator = translator
    app.state.rate_source = rate_source

    app.include_router(create_rates_router(rate_cache, store, translator))
    app.include_router(create_portfolio_router(rate_cache, store, translator))
    app.include_router(create_stream_router(rate_cache))

    @app.get("/api/health")
    async def health() -> dict:
        return {
            "status": rate_cache.status,
            "version": rate_cache.version,
            "consecutive_failures": rate_cache.consecutive_failures,
            "last_error": rate_cache.last_error,
        }

    logger.info("RateWatch app created (source=%s, currency=%s)", settings.source, settings.currency)
    return app
