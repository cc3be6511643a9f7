"""Base domain exceptions.

Domain exceptions represent business rule violations and failures at the
domain's ports. They do not depend on infrastructure.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain errors.

    Example:
        >>> raise DomainException("No OPEN position to close", symbol="BTCUSDT")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize domain exception.

        Args:
            message: Human-readable error message.
            **context: Additional context (position_id, symbol, etc).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class BusinessRuleViolation(DomainException):
    """Raised when a business rule is violated."""

    pass


class InvalidStateTransition(DomainException):
    """Raised for invalid state transitions.

    Example:
        >>> # CLOSED -> CLOSED is invalid
        >>> raise InvalidStateTransition(
        ...     "Position already closed",
        ...     position_id=7,
        ...     status="CLOSED",
        ... )
    """

    pass
