"""Exceptions for the Trading bounded context."""

from emabot.domain.shared import (
    BusinessRuleViolation,
    DomainException,
    InvalidStateTransition,
)


class PositionAlreadyClosedError(InvalidStateTransition):
    """Raised when closing a position that is no longer OPEN."""

    pass


class PositionAlreadyOpenError(InvalidStateTransition):
    """Raised when an open is attempted while a position is still open."""

    pass


class NoOpenPositionError(InvalidStateTransition):
    """Raised when a close is attempted without an open position."""

    pass


class PositionIntegrityError(BusinessRuleViolation):
    """Raised when a stored record violates the OPEN/CLOSED field rules.

    OPEN positions carry no exit data; CLOSED positions carry all of it.
    """

    pass


class PositionStoreError(DomainException):
    """Raised when the position store cannot complete an operation.

    Covers connectivity failures and rejected writes (e.g. a second OPEN
    row for the same symbol).
    """

    pass
