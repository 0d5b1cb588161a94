"""Display-string lookup backed by JSON catalogs in ``app/locales``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent / "locales"


class Translator:
    """Key -> display string lookup.

    Missing translations fall back to the default locale, then to the
    caller's literal default, then to the key itself. A missing or broken
    catalog is logged and treated as empty.
    """

    def __init__(self, default_locale: str = "en", locales_dir: Path = LOCALES_DIR) -> None:
        self._dir = locales_dir
        self.default_locale = self.normalize(default_locale)
        self._catalogs: dict[str, dict[str, str]] = {}
        self._available = frozenset(p.stem for p in self._dir.glob("*.json"))

    @staticmethod
    def normalize(locale: str) -> str:
        """'ar-EG' / 'ar_EG' / 'AR' -> 'ar'."""
        return locale.replace("_", "-").split("-")[0].strip().lower() or "en"

    def available(self) -> list[str]:
        return sorted(self._available)

    def resolve(self, locale: str | None) -> str:
        """Map a requested locale onto a shipped catalog, else the default locale.

        Only names found in the locales directory ever reach the filesystem.
        """
        code = self.normalize(locale or self.default_locale)
        return code if code in self._available else self.default_locale

    def translate(self, key: str, locale: str | None = None, default: str | None = None) -> str:
        for code in (self.resolve(locale), self.default_locale):
            value = self._catalog(code).get(key)
            if isinstance(value, str) and value.strip():
                return value
        return default if default is not None else key

    def _catalog(self, locale: str) -> dict[str, str]:
        if locale not in self._catalogs:
            self._catalogs[locale] = self._load(locale)
        return self._catalogs[locale]

    def _load(self, locale: str) -> dict[str, str]:
        path = self._dir / f"{locale}.json"
        if not path.exists():
            logger.debug("No translation catalog for %s", locale)
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Error loading translations for %s: %s", locale, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Translation catalog %s is not an object", path)
            return {}
        return data


CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "JPY": "¥"}


def format_currency(value: float, currency: str, locale: str | None = None) -> str:
    """Display string for an amount in ``currency``.

    Precision follows magnitude so sub-cent coins stay readable. English puts
    the symbol first ("€1,234.56"); other locales put it last ("1,234.56 €").
    """
    abs_val = abs(value)
    if abs_val == 0 or abs_val >= 10:
        decimals = 2
    elif abs_val < 0.0001:
        decimals = 8
    elif abs_val < 0.01:
        decimals = 6
    else:
        decimals = 4

    sign = "-" if value < 0 else ""
    amount = f"{abs_val:,.{decimals}f}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    if Translator.normalize(locale or "en") == "en":
        return f"{sign}{symbol}{amount}"
    return f"{sign}{amount} {symbol}"
