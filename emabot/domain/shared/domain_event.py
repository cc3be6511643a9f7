"""Domain events raised by aggregates."""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Something that already happened to an aggregate.

    Subclasses are frozen dataclasses named in the past tense. They are
    recorded on the aggregate and handed to the event bus only after the
    store accepted the change.
    """

    occurred_at: datetime = field(default_factory=_now, init=False)

    @property
    def event_name(self) -> str:
        return type(self).__name__
