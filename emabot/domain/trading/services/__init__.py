"""Domain services for the Trading bounded context (pure functions)."""

from .signal_detector import detect_cross
from .transitions import ActionKind, Transition, TransitionAction, plan_transition

__all__ = [
    "detect_cross",
    "plan_transition",
    "ActionKind",
    "Transition",
    "TransitionAction",
]
