"""REST endpoints for the current rate board and per-ticker history."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ..i18n import Translator, format_currency
from ..portfolio.store import PreferenceStore, normalize_ticker
from .cache import RateCache
from .differ import parse_price

_STATUS_MESSAGES = {
    "loading": "loading",
    "unavailable": "failed_to_load_data",
    "stale": "stale_data",
}

# Static UI strings the dashboard needs alongside the board
_LABEL_KEYS = ("rate", "rate_change", "recent_rates", "favorites", "close")


def create_rates_router(
    rate_cache: RateCache,
    store: PreferenceStore,
    translator: Translator,
) -> APIRouter:
    router = APIRouter(prefix="/api/rates", tags=["rates"])

    @router.get("")
    async def get_rates(locale: str | None = None, favorites_only: bool = False) -> dict:
        """Latest snapshot with direction, favorite flag and top gainer."""
        snapshot, result, version = rate_cache.state()
        status = rate_cache.status
        message_key = _STATUS_MESSAGES.get(status)
        body: dict = {
            "status": status,
            "message": translator.translate(message_key, locale) if message_key else None,
            "title": translator.translate("crypto_exchange_rates", locale),
            "labels": {key: translator.translate(key, locale) for key in _LABEL_KEYS},
            "version": version,
            "currency": None,
            "timestamp": None,
            "rates": [],
            "top_gainer": None,
        }
        if snapshot is None:
            return body

        favorites = set(store.favorites())
        rates = []
        for ticker, raw in snapshot.rates.items():
            if favorites_only and ticker not in favorites:
                continue
            direction = result.direction.get(ticker)
            price = parse_price(ticker, raw)
            rates.append(
                {
                    "ticker": ticker,
                    "price": price,
                    "display_price": format_currency(price, snapshot.currency, locale),
                    "direction": direction.value if direction else None,
                    "direction_label": translator.translate(f"rate_{direction.value}", locale) if direction else None,
                    "favorite": ticker in favorites,
                }
            )

        body.update(currency=snapshot.currency, timestamp=snapshot.timestamp, rates=rates)
        gainer = result.top_gainer
        if gainer:
            price = parse_price(gainer.ticker, snapshot.rates[gainer.ticker])
            body["top_gainer"] = {
                **gainer.to_dict(),
                "price": price,
                "display_price": format_currency(price, snapshot.currency, locale),
                "display_change": format_currency(gainer.change, snapshot.currency, locale),
                "label": translator.translate("most_growing_crypto", locale),
            }
        return body

    @router.get("/{ticker}/history")
    async def get_history(ticker: str) -> dict:
        """Recent prices for one ticker plus a [0, 1] sparkline."""
        ticker = normalize_ticker(ticker)
        history = rate_cache.result.history
        if ticker not in history:
            raise HTTPException(status_code=404, detail=f"No history for {ticker}")
        return {
            "ticker": ticker,
            "window_size": history.window_size,
            "prices": list(history[ticker]),
            "sparkline": history.sparkline(ticker),
        }

    return router
