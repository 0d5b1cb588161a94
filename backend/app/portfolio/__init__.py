"""Favorites, holdings and portfolio valuation."""

from .store import PreferenceStore
from .valuation import PortfolioValuation, Position, value_portfolio

__all__ = ["PreferenceStore", "PortfolioValuation", "Position", "value_portfolio"]
