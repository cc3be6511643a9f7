"""Event Bus - domain events infrastructure.

- The Position aggregate emits events (PositionOpened, PositionClosed)
- Subscribers react after the store accepted the change
- The domain does not know about subscribers
"""

from collections import defaultdict
from typing import Awaitable, Callable, Type

from emabot.config import get_logger
from emabot.domain.shared import DomainEvent
from emabot.domain.trading import PositionClosedEvent, PositionOpenedEvent

logger = get_logger(__name__)

# Event handler signature: async function that takes DomainEvent
EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """Event Bus for domain events.

    One instance per application.

    Example:
        >>> event_bus = EventBus()
        >>> event_bus.subscribe(PositionClosedEvent, log_position_event)

        >>> # Publish after the unit of work committed
        >>> await event_bus.publish_all(position.get_domain_events())
    """

    def __init__(self) -> None:
        self._subscribers: dict[Type[DomainEvent], list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """Subscribe handler to event type."""
        self._subscribers[event_type].append(handler)
        logger.debug(
            "event_bus.subscription_added",
            event_type=event_type.__name__,
            handler=handler.__name__,
        )

    async def publish(self, event: DomainEvent) -> None:
        """Publish single domain event to every handler of its type.

        A failing handler is logged and does not stop the others: the
        position change it reports is already persisted.
        """
        event_type = type(event)
        handlers = self._subscribers.get(event_type, [])

        if not handlers:
            logger.debug("event_bus.no_subscribers", event_type=event_type.__name__)
            return

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "event_bus.handler_failed",
                    event_type=event_type.__name__,
                    handler=handler.__name__,
                    error=str(e),
                    exc_info=True,
                )

    async def publish_all(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)


async def log_position_event(event: DomainEvent) -> None:
    """Write one operator-facing line per opened or closed position."""
    if isinstance(event, PositionOpenedEvent):
        logger.info(
            "position.opened",
            position_id=event.position_id,
            position_type=event.position_type,
            entry_price=str(event.entry_price),
            qty=event.qty,
        )
    elif isinstance(event, PositionClosedEvent):
        logger.info(
            "position.closed",
            position_id=event.position_id,
            position_type=event.position_type,
            entry_price=str(event.entry_price),
            exit_price=str(event.exit_price),
            profit_loss=f"{event.profit_loss:+}",
        )
