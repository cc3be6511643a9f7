"""Background workers."""

from .tick_scheduler import TickScheduler, seconds_until_next_boundary

__all__ = ["TickScheduler", "seconds_until_next_boundary"]
