"""Tick Engine - fetch prices, compute EMAs, detect the cross, drive the state machine."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional, Sequence

from emabot.application.shared import CommandHandler
from emabot.application.trading.commands import RunTickCommand
from emabot.application.trading.dtos import TickOutcome, TickResult
from emabot.application.trading.position_state_machine import PositionStateMachine
from emabot.application.trading.snapshot_cache import SnapshotCache
from emabot.config import get_logger
from emabot.domain.market_data import MarketDataError, MarketDataPort
from emabot.domain.trading import MarketQuote, MarketSnapshot, TransitionAction, detect_cross
from emabot.infrastructure.indicators import calculate_ema

logger = get_logger(__name__)

EmaFunction = Callable[[Sequence, int], Sequence[float]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(round(float(value), 8)))


class TickEngine(CommandHandler[RunTickCommand, TickResult]):
    """Handler for RunTickCommand.

    Flow:
    1. Fetch ema_slow + candle_margin most recent closes
    2. Compute fast and slow EMA series over the same closes
    3. Detect the cross from the last two points of each series
    4. Drive the position state machine
    5. Overwrite the snapshot cache

    Fetch failures and insufficient history abort the cycle and leave both
    the position and the snapshot untouched. Not idempotent in effect: the
    scheduler guard prevents overlapping runs.
    """

    def __init__(
        self,
        symbol: str,
        interval: str,
        fast_period: int,
        slow_period: int,
        market_data: MarketDataPort,
        state_machine: PositionStateMachine,
        cache: SnapshotCache,
        candle_margin: int = 50,
        ema: EmaFunction = calculate_ema,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._symbol = symbol
        self._interval = interval
        self._fast_period = fast_period
        self._slow_period = slow_period
        self._market_data = market_data
        self._state_machine = state_machine
        self._cache = cache
        self._candle_margin = candle_margin
        self._ema = ema
        self._clock = clock

    async def handle(self, command: RunTickCommand) -> TickResult:
        """Run one cycle.

        Raises:
            PositionStoreError: Store failure while applying the decision.
                The snapshot is still refreshed before the error propagates.
        """
        tick_at = self._clock()
        limit = self._slow_period + self._candle_margin

        try:
            closes = await self._market_data.fetch_closes(
                self._symbol, self._interval, limit
            )
        except MarketDataError as e:
            logger.warning(
                "market_data.fetch_failed",
                trigger=command.trigger.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return TickResult(outcome=TickOutcome.FETCH_FAILED, error=str(e))

        if len(closes) < self._slow_period:
            logger.warning(
                "tick.insufficient_data",
                candles=len(closes),
                required=self._slow_period,
            )
            return TickResult(outcome=TickOutcome.INSUFFICIENT_DATA)

        fast_series = self._ema(closes, self._fast_period)
        slow_series = self._ema(closes, self._slow_period)
        if len(fast_series) < 2 or len(slow_series) < 2:
            logger.warning(
                "tick.insufficient_ema_points",
                fast_points=len(fast_series),
                slow_points=len(slow_series),
            )
            return TickResult(outcome=TickOutcome.INSUFFICIENT_DATA)

        prev_fast, fast = fast_series[-2], fast_series[-1]
        prev_slow, slow = slow_series[-2], slow_series[-1]
        signal = detect_cross(prev_fast, prev_slow, fast, slow)

        quote = MarketQuote(
            price=closes[-1],
            ema_fast=_to_decimal(fast),
            ema_slow=_to_decimal(slow),
            at=tick_at,
        )
        snapshot = MarketSnapshot(
            price=quote.price,
            ema_fast=quote.ema_fast,
            ema_slow=quote.ema_slow,
            signal=signal,
            tick_at=tick_at,
        )

        actions: Optional[list[TransitionAction]] = None
        try:
            actions = await self._state_machine.apply(signal, quote)
        finally:
            self._cache.update(snapshot)

        position = self._state_machine.open_position
        logger.info(
            "tick.completed",
            trigger=command.trigger.value,
            price=str(quote.price),
            ema_fast=str(quote.ema_fast),
            ema_slow=str(quote.ema_slow),
            fast_period=self._fast_period,
            slow_period=self._slow_period,
            signal=signal.value,
            actions=[str(a) for a in actions],
            position=(
                f"{position.position_type.value} OPEN @ {position.entry_price}"
                if position
                else "NONE"
            ),
        )

        return TickResult(
            outcome=TickOutcome.COMPLETED,
            signal=signal,
            snapshot=snapshot,
            actions=actions,
        )
