"""REST endpoints for favorites, holdings and portfolio value."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..i18n import Translator, format_currency
from ..rates.cache import RateCache
from .store import PreferenceStore, normalize_ticker
from .valuation import value_portfolio

logger = logging.getLogger(__name__)


class HoldingUpdate(BaseModel):
    quantity: float = Field(ge=0, allow_inf_nan=False)


def create_portfolio_router(
    rate_cache: RateCache,
    store: PreferenceStore,
    translator: Translator,
) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["portfolio"])

    @router.get("/favorites")
    async def list_favorites() -> dict:
        return {"favorites": store.favorites()}

    @router.put("/favorites/{ticker}")
    async def add_favorite(ticker: str) -> dict:
        return {"favorites": store.add_favorite(ticker)}

    @router.delete("/favorites/{ticker}")
    async def remove_favorite(ticker: str) -> dict:
        return {"favorites": store.remove_favorite(ticker)}

    @router.get("/holdings")
    async def list_holdings() -> dict:
        return {"holdings": store.holdings()}

    @router.put("/holdings/{ticker}")
    async def set_holding(ticker: str, update: HoldingUpdate) -> dict:
        try:
            holdings = store.set_holding(ticker, update.quantity)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        logger.info("Holding for %s set to %s", normalize_ticker(ticker), update.quantity)
        return {"holdings": holdings}

    @router.delete("/holdings/{ticker}")
    async def remove_holding(ticker: str) -> dict:
        return {"holdings": store.remove_holding(ticker)}

    @router.get("/portfolio")
    async def get_portfolio(locale: str | None = None) -> dict:
        valuation = value_portfolio(store.holdings(), rate_cache.snapshot)
        body = {
            **valuation.to_dict(),
            "label": translator.translate("portfolio_value", locale),
            "display_total": None,
        }
        if valuation.currency:
            body["display_total"] = format_currency(valuation.total, valuation.currency, locale)
        return body

    return router
