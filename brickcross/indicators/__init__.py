from .core.interfaces import BatchIndicator, IncrementalIndicator, require_column
from .impl.ema import EMA
from .impl.volatility import MAX_WINDOW, MIN_WINDOW, RollingStd, clamp_window

__all__ = [
    "IncrementalIndicator",
    "BatchIndicator",
    "require_column",
    "EMA",
    "RollingStd",
    "clamp_window",
    "MIN_WINDOW",
    "MAX_WINDOW",
]
