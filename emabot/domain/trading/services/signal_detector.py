"""Crossover detection between a fast and a slow moving average."""

from ..value_objects import CrossSignal


def detect_cross(prev_fast, prev_slow, fast, slow) -> CrossSignal:
    """Classify the move from (prev_fast, prev_slow) to (fast, slow).

    GOLDEN when fast was strictly below slow and is now strictly above,
    DEATH for the mirror image. Any equality on either side yields NONE.

    Example:
        >>> detect_cross(9.9, 10.1, 10.3, 10.0)
        <CrossSignal.GOLDEN: 'GOLDEN'>
    """
    if prev_fast < prev_slow and fast > slow:
        return CrossSignal.GOLDEN
    if prev_fast > prev_slow and fast < slow:
        return CrossSignal.DEATH
    return CrossSignal.NONE
