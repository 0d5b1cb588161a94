"""Seed prices and per-ticker parameters for the rate simulator."""

# Rough EUR starting prices for the simulated board
SEED_PRICES: dict[str, float] = {
    "BTC": 58000.00,
    "ETH": 2400.00,
    "SOL": 130.00,
    "BNB": 520.00,
    "XRP": 0.52,
    "ADA": 0.34,
    "DOGE": 0.11,
    "DOT": 4.30,
    "LINK": 10.50,
    "LTC": 62.00,
    "USDC": 0.92,
    "SHIB": 0.000016,  # Below the dust threshold on purpose
}

# Per-ticker GBM parameters
# sigma: annualized volatility, mu: annualized drift
TICKER_PARAMS: dict[str, dict[str, float]] = {
    "BTC": {"sigma": 0.55, "mu": 0.10},
    "ETH": {"sigma": 0.70, "mu": 0.10},
    "SOL": {"sigma": 0.95, "mu": 0.12},
    "BNB": {"sigma": 0.60, "mu": 0.08},
    "XRP": {"sigma": 0.85, "mu": 0.05},
    "ADA": {"sigma": 0.85, "mu": 0.05},
    "DOGE": {"sigma": 1.10, "mu": 0.05},
    "DOT": {"sigma": 0.90, "mu": 0.05},
    "LINK": {"sigma": 0.90, "mu": 0.06},
    "LTC": {"sigma": 0.75, "mu": 0.04},
    "USDC": {"sigma": 0.02, "mu": 0.00},  # Stablecoin
    "SHIB": {"sigma": 1.20, "mu": 0.05},
}

DEFAULT_PARAMS: dict[str, float] = {"sigma": 0.80, "mu": 0.05}

# Correlation groups for the simulator's Cholesky decomposition
CORRELATION_GROUPS: dict[str, set[str]] = {
    "majors": {"BTC", "ETH"},
    "alts": {"SOL", "BNB", "XRP", "ADA", "DOGE", "DOT", "LINK", "LTC", "SHIB"},
}

INTRA_MAJORS_CORR = 0.8  # BTC and ETH move together
INTRA_ALTS_CORR = 0.6
CROSS_GROUP_CORR = 0.5  # Alts follow the majors loosely
STABLECOIN_CORR = 0.0  # USDC is pegged
