"""Aggregate root: an entity that records domain events."""

from .domain_event import DomainEvent
from .entity import Entity


class AggregateRoot(Entity):
    """Entity that collects domain events while it changes.

    The application layer publishes the pending events after the unit of
    work committed, then clears them:

        >>> position.close(exit_details)
        >>> await event_bus.publish_all(position.get_domain_events())
        >>> position.clear_domain_events()
    """

    def __init__(self, id: int | None = None) -> None:
        super().__init__(id)
        self._pending_events: list[DomainEvent] = []

    def add_domain_event(self, event: DomainEvent) -> None:
        self._pending_events.append(event)

    def get_domain_events(self) -> list[DomainEvent]:
        return list(self._pending_events)

    def clear_domain_events(self) -> None:
        self._pending_events.clear()

    @property
    def has_domain_events(self) -> bool:
        return bool(self._pending_events)
