"""EMA crossover trading bot.

Single-symbol LONG/SHORT state machine driven by fast/slow EMA crossovers,
with persisted positions and a read-only FastAPI surface.
"""

__version__ = "2.0.0"
