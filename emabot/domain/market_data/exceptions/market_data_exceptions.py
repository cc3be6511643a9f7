"""Exceptions for the Market Data bounded context."""

from emabot.domain.shared import DomainException


class MarketDataError(DomainException):
    """Base exception for all market-data errors.

    Any of these aborts the current tick; the next scheduled tick retries.
    """

    pass


class MarketDataTimeoutError(MarketDataError):
    """Raised when the price source did not answer within the timeout."""

    pass


class MarketDataUnavailableError(MarketDataError):
    """Raised on transport errors, rate limits and 5xx responses.

    Transient - eligible for bounded retry with exponential backoff.
    """

    pass


class MalformedMarketDataError(MarketDataError):
    """Raised when the payload cannot be parsed into closing prices."""

    pass
