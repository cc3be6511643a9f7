"""Domain events for the Trading bounded context."""

from .position_events import PositionClosedEvent, PositionOpenedEvent

__all__ = [
    "PositionOpenedEvent",
    "PositionClosedEvent",
]
