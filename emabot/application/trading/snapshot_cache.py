"""Snapshot Cache - last computed market view served to read queries."""

from datetime import datetime, timedelta
from typing import Optional

from emabot.domain.trading import MarketSnapshot


class SnapshotCache:
    """Holds the most recent MarketSnapshot.

    Written only by the Tick Engine; never persisted.
    """

    def __init__(self) -> None:
        self._snapshot: Optional[MarketSnapshot] = None

    @property
    def current(self) -> Optional[MarketSnapshot]:
        return self._snapshot

    @property
    def last_tick_at(self) -> Optional[datetime]:
        return self._snapshot.tick_at if self._snapshot else None

    def update(self, snapshot: MarketSnapshot) -> None:
        self._snapshot = snapshot

    def is_stale(self, now: datetime, max_age_seconds: float) -> bool:
        """True if nothing was computed yet or the snapshot is older than ``max_age_seconds``."""
        if self._snapshot is None:
            return True
        return now - self._snapshot.tick_at > timedelta(seconds=max_age_seconds)
