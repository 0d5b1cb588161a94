"""Runtime settings read from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path.home() / ".ratewatch" / "preferences.json"


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= minimum:
        logger.warning("%s must be greater than %s, using default %s", name, minimum, default)
        return default
    return value


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value < minimum:
        logger.warning("%s must be at least %s, using default %s", name, minimum, default)
        return default
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    source: str = "coinbase"  # "coinbase" or "simulator"
    currency: str = "EUR"
    poll_interval: float = 6.0
    history_window: int = 20
    http_timeout: float = 10.0
    backoff_max: float = 60.0
    store_path: Path = field(default=DEFAULT_STORE_PATH)
    locale: str = "en"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``RATES_*`` and ``LOG_LEVEL`` variables.

        Bad numeric values are logged and replaced by the defaults.
        """
        store_path = os.environ.get("RATES_STORE_PATH", "").strip()
        return cls(
            source=os.environ.get("RATES_SOURCE", "coinbase").strip().lower() or "coinbase",
            currency=os.environ.get("RATES_CURRENCY", "EUR").strip().upper() or "EUR",
            poll_interval=_env_float("RATES_POLL_INTERVAL", 6.0),
            history_window=_env_int("RATES_HISTORY_WINDOW", 20),
            http_timeout=_env_float("RATES_HTTP_TIMEOUT", 10.0),
            backoff_max=_env_float("RATES_BACKOFF_MAX", 60.0),
            store_path=Path(store_path).expanduser() if store_path else DEFAULT_STORE_PATH,
            locale=os.environ.get("RATES_LOCALE", "en").strip() or "en",
            log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
