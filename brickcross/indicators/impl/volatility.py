from collections import deque
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd

from ..core.interfaces import require_column

MIN_WINDOW = 5
MAX_WINDOW = 500


def clamp_window(window: int) -> int:
    """Clamp a volatility window into ``[MIN_WINDOW, MAX_WINDOW]``."""
    return max(MIN_WINDOW, min(MAX_WINDOW, int(window)))


@dataclass
class RollingStd:
    """
    Rolling standard deviation over a fixed trailing window.

    Uses the population formula (ddof=0) for the whole run. Ready once
    the window holds ``window`` values.
    """
    window: int
    src: str = "close"
    _values: deque = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.window < 1:
            raise ValueError(f"RollingStd window must be >= 1, got {self.window}")
        self._values = deque(maxlen=self.window)

    @property
    def name(self) -> str:
        return f"std_{self.window}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.window

    def update(self, value: float) -> None:
        # deque(maxlen) evicts the oldest value on overflow
        self._values.append(float(value))

    def current(self) -> Optional[float]:
        if not self._values:
            return None
        return float(np.std(np.fromiter(self._values, dtype=float), ddof=0))

    def is_ready(self) -> bool:
        return len(self._values) == self.window

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        """
        Computes the rolling population standard deviation over a frame.

        Args:
            ohlcv: A DataFrame containing the source column.

        Returns:
            A DataFrame with the rolling values, NaN until the window is full.
        """
        require_column(ohlcv, self.src)

        feature = ohlcv[self.src].rolling(window=self.window, min_periods=self.window).std(ddof=0)

        return feature.to_frame(name=self.name)
