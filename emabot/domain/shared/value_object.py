"""Base ValueObject class for domain model."""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class ValueObject(ABC):
    """Base class for all domain value objects.

    - Immutable (frozen=True)
    - Equality by value, no identity
    - Replace instead of modify

    Override ``__post_init__`` to validate:

    Example:
        >>> @dataclass(frozen=True)
        ... class Quote(ValueObject):
        ...     price: Decimal
        ...
        ...     def __post_init__(self):
        ...         validate_value_object(self.price > 0, "price must be positive")
    """

    def __post_init__(self) -> None:
        pass


def validate_value_object(condition: bool, message: str) -> None:
    """Raise ValueError with ``message`` unless ``condition`` holds."""
    if not condition:
        raise ValueError(message)
