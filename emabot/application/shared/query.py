"""Read-side messages."""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class Query(ABC):
    """Immutable request for position data. Handling it never writes.

    Example:
        >>> positions = await handler.handle(GetOrderHistoryQuery(symbol="BTCUSDT", limit=50))
    """
