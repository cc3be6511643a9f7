"""Unit tests for SnapshotCache."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from emabot.application.trading.snapshot_cache import SnapshotCache
from emabot.domain.trading import CrossSignal, MarketSnapshot

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def snapshot_at(tick_at) -> MarketSnapshot:
    return MarketSnapshot(
        price=Decimal("64000"),
        ema_fast=Decimal("63990"),
        ema_slow=Decimal("63950"),
        signal=CrossSignal.NONE,
        tick_at=tick_at,
    )


class TestSnapshotCache:
    def test_empty_cache_is_stale(self):
        cache = SnapshotCache()

        assert cache.current is None
        assert cache.last_tick_at is None
        assert cache.is_stale(T0, 70) is True

    def test_update_overwrites(self):
        cache = SnapshotCache()
        first, second = snapshot_at(T0), snapshot_at(T0 + timedelta(minutes=1))

        cache.update(first)
        cache.update(second)

        assert cache.current is second
        assert cache.last_tick_at == T0 + timedelta(minutes=1)

    def test_fresh_within_threshold(self):
        cache = SnapshotCache()
        cache.update(snapshot_at(T0))

        assert cache.is_stale(T0 + timedelta(seconds=70), 70) is False

    def test_stale_past_threshold(self):
        cache = SnapshotCache()
        cache.update(snapshot_at(T0))

        assert cache.is_stale(T0 + timedelta(seconds=71), 70) is True
