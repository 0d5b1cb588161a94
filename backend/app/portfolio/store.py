"""JSON key/value persistence for favorites and holdings."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from threading import Lock

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"
HOLDINGS_KEY = "holdings"


def normalize_ticker(ticker: str) -> str:
    return ticker.upper().strip()


class PreferenceStore:
    """Favorites and holdings persisted as JSON-encoded strings under two keys.

    The file is read once on construction and rewritten on every mutation.
    Any corruption (unreadable file, bad JSON, wrong types) is logged and
    replaced by empty defaults rather than failing.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = Lock()
        raw = self._read_file()
        self._favorites = self._decode_favorites(raw.get(FAVORITES_KEY))
        self._holdings = self._decode_holdings(raw.get(HOLDINGS_KEY))
        logger.info(
            "Loaded preferences from %s: %d favorites, %d holdings",
            self._path,
            len(self._favorites),
            len(self._holdings),
        )

    @property
    def path(self) -> Path:
        return self._path

    # --- Favorites ---

    def favorites(self) -> list[str]:
        with self._lock:
            return list(self._favorites)

    def is_favorite(self, ticker: str) -> bool:
        with self._lock:
            return normalize_ticker(ticker) in self._favorites

    def add_favorite(self, ticker: str) -> list[str]:
        ticker = normalize_ticker(ticker)
        with self._lock:
            if ticker and ticker not in self._favorites:
                self._favorites.append(ticker)
                self._save()
            return list(self._favorites)

    def remove_favorite(self, ticker: str) -> list[str]:
        ticker = normalize_ticker(ticker)
        with self._lock:
            if ticker in self._favorites:
                self._favorites.remove(ticker)
                self._save()
            return list(self._favorites)

    def toggle_favorite(self, ticker: str) -> bool:
        """Flip favorite status. Returns True if the ticker is now a favorite."""
        if self.is_favorite(ticker):
            self.remove_favorite(ticker)
            return False
        self.add_favorite(ticker)
        return True

    # --- Holdings ---

    def holdings(self) -> dict[str, float]:
        with self._lock:
            return dict(self._holdings)

    def set_holding(self, ticker: str, quantity: float) -> dict[str, float]:
        """Set the held quantity. Zero removes the holding; negatives are rejected."""
        ticker = normalize_ticker(ticker)
        if not ticker:
            raise ValueError("Ticker must not be empty")
        if not math.isfinite(quantity) or quantity < 0:
            raise ValueError(f"Quantity must be a finite non-negative number, got {quantity!r}")

        with self._lock:
            if quantity == 0:
                self._holdings.pop(ticker, None)
            else:
                self._holdings[ticker] = float(quantity)
            self._save()
            return dict(self._holdings)

    def remove_holding(self, ticker: str) -> dict[str, float]:
        ticker = normalize_ticker(ticker)
        with self._lock:
            if self._holdings.pop(ticker, None) is not None:
                self._save()
            return dict(self._holdings)

    # --- Internal ---

    def _read_file(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Preference file %s is unreadable, starting empty: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Preference file %s is not an object, starting empty", self._path)
            return {}
        return data

    @staticmethod
    def _decode_favorites(raw: object) -> list[str]:
        if raw is None:
            return []
        try:
            values = json.loads(raw) if isinstance(raw, str) else None
        except ValueError:
            values = None
        if not isinstance(values, list):
            logger.warning("Ignoring corrupt %r entry", FAVORITES_KEY)
            return []

        favorites: list[str] = []
        for value in values:
            if not isinstance(value, str):
                continue
            ticker = normalize_ticker(value)
            if ticker and ticker not in favorites:
                favorites.append(ticker)
        return favorites

    @staticmethod
    def _decode_holdings(raw: object) -> dict[str, float]:
        if raw is None:
            return {}
        try:
            values = json.loads(raw) if isinstance(raw, str) else None
        except ValueError:
            values = None
        if not isinstance(values, dict):
            logger.warning("Ignoring corrupt %r entry", HOLDINGS_KEY)
            return {}

        holdings: dict[str, float] = {}
        for ticker, quantity in values.items():
            if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
                logger.warning("Dropping holding %s with non-numeric quantity %r", ticker, quantity)
                continue
            if math.isfinite(quantity) and quantity > 0:
                holdings[normalize_ticker(ticker)] = float(quantity)
        return holdings

    def _save(self) -> None:
        payload = {
            FAVORITES_KEY: json.dumps(self._favorites),
            HOLDINGS_KEY: json.dumps(self._holdings),
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp.replace(self._path)
