"""Transition table of the single-position state machine.

| Current | Signal | Actions                 | Next  |
|---------|--------|-------------------------|-------|
| FLAT    | GOLDEN | open LONG               | LONG  |
| FLAT    | DEATH  | open SHORT              | SHORT |
| LONG    | GOLDEN | -                       | LONG  |
| LONG    | DEATH  | close LONG, open SHORT  | SHORT |
| SHORT   | DEATH  | -                       | SHORT |
| SHORT   | GOLDEN | close SHORT, open LONG  | LONG  |
| any     | NONE   | -                       | same  |
"""

from dataclasses import dataclass
from enum import Enum

from ..value_objects import CrossSignal, PositionType, TradingState


class ActionKind(str, Enum):
    OPEN = "OPEN"
    CLOSE = "CLOSE"


@dataclass(frozen=True)
class TransitionAction:
    """One persisted step: open or close a position of ``position_type``."""

    kind: ActionKind
    position_type: PositionType

    def __str__(self) -> str:
        return f"{self.kind.value} {self.position_type.value}"


@dataclass(frozen=True)
class Transition:
    actions: tuple[TransitionAction, ...]
    next_state: TradingState

    @property
    def is_noop(self) -> bool:
        return not self.actions


_TARGET = {
    CrossSignal.GOLDEN: PositionType.LONG,
    CrossSignal.DEATH: PositionType.SHORT,
}


def plan_transition(state: TradingState, signal: CrossSignal) -> Transition:
    """Return the actions and next state for ``signal`` applied to ``state``."""
    target = _TARGET.get(signal)
    if target is None or state.value == target.value:
        return Transition(actions=(), next_state=state)

    open_target = TransitionAction(ActionKind.OPEN, target)
    if state == TradingState.FLAT:
        return Transition(actions=(open_target,), next_state=TradingState(target.value))

    close_current = TransitionAction(ActionKind.CLOSE, target.opposite)
    return Transition(
        actions=(close_current, open_target),
        next_state=TradingState(target.value),
    )
