"""Exceptions for the Trading bounded context."""

from .trading_exceptions import (
    NoOpenPositionError,
    PositionAlreadyClosedError,
    PositionAlreadyOpenError,
    PositionIntegrityError,
    PositionStoreError,
)

__all__ = [
    "NoOpenPositionError",
    "PositionAlreadyClosedError",
    "PositionAlreadyOpenError",
    "PositionIntegrityError",
    "PositionStoreError",
]
