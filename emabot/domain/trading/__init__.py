"""Trading Bounded Context - Domain Layer.

Exports:
    Entities: Position (Aggregate Root)
    Value Objects: PositionStatus, PositionType, CrossSignal, TradingState,
        MarketQuote, ExitDetails, MarketSnapshot, PnlSummary
    Services: detect_cross, plan_transition
    Events: PositionOpenedEvent, PositionClosedEvent
    Repositories: PositionRepository (interface)
"""

from .entities import Position

from .value_objects import (
    CrossSignal,
    ExitDetails,
    MarketQuote,
    MarketSnapshot,
    PnlSummary,
    PositionStatus,
    PositionType,
    TradingState,
)

from .exceptions import (
    NoOpenPositionError,
    PositionAlreadyClosedError,
    PositionAlreadyOpenError,
    PositionIntegrityError,
    PositionStoreError,
)

from .events import PositionClosedEvent, PositionOpenedEvent

from .services import (
    ActionKind,
    Transition,
    TransitionAction,
    detect_cross,
    plan_transition,
)

from .repositories import PositionRepository

__all__ = [
    # Entities
    "Position",
    # Value Objects
    "CrossSignal",
    "ExitDetails",
    "MarketQuote",
    "MarketSnapshot",
    "PnlSummary",
    "PositionStatus",
    "PositionType",
    "TradingState",
    # Exceptions
    "NoOpenPositionError",
    "PositionAlreadyClosedError",
    "PositionAlreadyOpenError",
    "PositionIntegrityError",
    "PositionStoreError",
    # Events
    "PositionOpenedEvent",
    "PositionClosedEvent",
    # Services
    "ActionKind",
    "Transition",
    "TransitionAction",
    "detect_cross",
    "plan_transition",
    # Repositories
    "PositionRepository",
]
