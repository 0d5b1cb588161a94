"""Exceptions raised by the rates subsystem."""

from __future__ import annotations


class RatesError(Exception):
    """Base class for recoverable rate-polling failures."""


class FetchError(RatesError):
    """The upstream rate source could not be reached or returned a bad response."""


class ParseError(RatesError):
    """A price in a snapshot could not be parsed as a finite number."""

    def __init__(self, ticker: str, value: object) -> None:
        self.ticker = ticker
        self.value = value
        super().__init__(f"Cannot parse price for {ticker}: {value!r}")
