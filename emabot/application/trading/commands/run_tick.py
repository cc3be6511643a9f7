"""RunTick Command - run one fetch/compute/decide/persist cycle."""

from dataclasses import dataclass
from enum import Enum

from emabot.application.shared import Command


class TickTrigger(str, Enum):
    """What asked for the tick."""

    TIMER = "timer"
    """Minute-aligned recurring timer."""

    MANUAL = "manual"
    """Administrative trigger endpoint."""

    STALE_READ = "stale_read"
    """Price query found the snapshot older than the staleness threshold."""


@dataclass(frozen=True)
class RunTickCommand(Command):
    """Command for one Tick Engine run.

    Example:
        >>> result = await tick_engine.handle(RunTickCommand(trigger=TickTrigger.MANUAL))
    """

    trigger: TickTrigger = TickTrigger.TIMER
