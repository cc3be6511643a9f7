"""Exponential backoff retry for price source calls.

Price APIs rate limit and drop connections. A failed fetch only costs one
tick, so retries stay few and short.
"""

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, Type, TypeVar

from emabot.config import get_logger
from emabot.domain.market_data import MarketDataTimeoutError, MarketDataUnavailableError

logger = get_logger(__name__)

T = TypeVar("T")


def retry_with_backoff(
    max_retries: int = 1,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
    retryable_exceptions: tuple[Type[Exception], ...] = (
        MarketDataUnavailableError,
        MarketDataTimeoutError,
    ),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for async calls: retry with exponential backoff.

    Args:
        max_retries: Retries after the first attempt (0 disables retrying).
        base_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound on any single delay.
        exponential_base: Delay multiplier per attempt.
        retryable_exceptions: Exceptions that trigger a retry; anything else
            propagates immediately.

    Example:
        >>> @retry_with_backoff(max_retries=2, base_delay=0.5)
        ... async def fetch():
        ...     return await client.get("/api/v3/klines", params=params)

        >>> # attempt 1 fails -> wait 0.5s, attempt 2 fails -> wait 1s,
        >>> # attempt 3 fails -> raise
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_retries + 1):
                try:
                    result = await func(*args, **kwargs)
                    if attempt > 0:
                        logger.info(
                            "retry.success",
                            function=func.__name__,
                            attempt=attempt + 1,
                        )
                    return result

                except retryable_exceptions as e:
                    if attempt >= max_retries:
                        if max_retries:
                            logger.error(
                                "retry.exhausted",
                                function=func.__name__,
                                total_attempts=max_retries + 1,
                                error=str(e),
                            )
                        raise

                    delay = min(base_delay * (exponential_base**attempt), max_delay)
                    logger.warning(
                        "retry.attempt",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        delay_seconds=delay,
                        error=str(e),
                    )
                    await asyncio.sleep(delay)

            raise RuntimeError("Retry logic error: no result and no exception")

        return wrapper

    return decorator
