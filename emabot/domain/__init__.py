"""Domain Layer - Pure Business Logic.

This layer contains:
- Trading bounded context (Position aggregate, signal detection, transitions)
- Market data bounded context (price source port and its errors)
- Shared kernel (Entity, AggregateRoot, ValueObject, DomainEvent, exceptions)

Key Principles:
- Zero dependencies on infrastructure
- Pure business logic only
"""

from .shared import AggregateRoot, DomainEvent, DomainException

__all__ = [
    "AggregateRoot",
    "DomainEvent",
    "DomainException",
]
