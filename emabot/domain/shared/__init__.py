"""Shared Kernel - base classes for the domain layer.

- Entity: object with identity
- ValueObject: immutable object compared by value
- AggregateRoot: consistency boundary that records domain events
- DomainEvent: something that happened in the domain
- DomainException: business rule violations
"""

from .aggregate_root import AggregateRoot
from .domain_event import DomainEvent
from .entity import Entity
from .exceptions import (
    BusinessRuleViolation,
    DomainException,
    InvalidStateTransition,
)
from .value_object import ValueObject, validate_value_object

__all__ = [
    # Base classes
    "Entity",
    "ValueObject",
    "AggregateRoot",
    "DomainEvent",
    # Utilities
    "validate_value_object",
    # Exceptions
    "DomainException",
    "BusinessRuleViolation",
    "InvalidStateTransition",
]
