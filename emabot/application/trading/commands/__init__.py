"""Trading commands."""

from .run_tick import RunTickCommand, TickTrigger

__all__ = ["RunTickCommand", "TickTrigger"]
