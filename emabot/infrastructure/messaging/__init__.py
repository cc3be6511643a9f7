"""Messaging infrastructure (in-process domain events)."""

from .event_bus import EventBus, log_position_event

__all__ = ["EventBus", "log_position_event"]
