"""Exponential Moving Average."""

from typing import Sequence

import numpy as np


def calculate_ema(values: Sequence, period: int) -> list[float]:
    """Calculate the EMA series of ``values``.

    Seeded with the simple average of the first ``period`` values, then
    smoothed with multiplier 2 / (period + 1). Only defined points are
    returned, so the result has ``len(values) - period + 1`` entries and is
    empty when there are fewer than ``period`` values.

    Args:
        values: Prices, oldest first (Decimal, float or int).
        period: EMA period.

    Returns:
        EMA values aligned to the end of ``values``.

    Raises:
        ValueError: If period is not positive.
    """
    if period <= 0:
        raise ValueError("Period must be positive")

    closes = np.asarray([float(v) for v in values], dtype=float)
    n = len(closes)
    if n < period:
        return []

    result = np.empty(n - period + 1)
    multiplier = 2.0 / (period + 1)

    # Initialize with SMA
    result[0] = closes[:period].mean()

    for i, close in enumerate(closes[period:], start=1):
        result[i] = (close - result[i - 1]) * multiplier + result[i - 1]

    return result.tolist()
