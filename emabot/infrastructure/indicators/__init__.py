"""Technical indicator calculations."""

from .ema import calculate_ema

__all__ = ["calculate_ema"]
