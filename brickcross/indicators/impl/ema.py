from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from ..core.interfaces import require_column


@dataclass
class EMA:
    """Exponential moving average, updated one value at a time.

    The first update seeds the average with the value itself; every later
    update blends in ``value * k`` with ``k = 2 / (period + 1)``. The average
    is ready once ``period`` values have been seen.
    """

    period: int
    src: str = "close"
    _value: Optional[float] = field(default=None, init=False, repr=False)
    _samples: int = field(default=0, init=False, repr=False)
    _last_ts: Optional[pd.Timestamp] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.period < 1:
            raise ValueError(f"EMA period must be >= 1, got {self.period}")

    @property
    def name(self) -> str:
        return f"ema_{self.period}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.period

    @property
    def smoothing_factor(self) -> float:
        return 2.0 / (self.period + 1)

    @property
    def samples(self) -> int:
        return self._samples

    @property
    def last_timestamp(self) -> Optional[pd.Timestamp]:
        return self._last_ts

    def update(self, value: float, timestamp: Optional[pd.Timestamp] = None) -> None:
        if self._value is None:
            self._value = float(value)
        else:
            k = self.smoothing_factor
            self._value = value * k + self._value * (1.0 - k)
        self._samples += 1
        self._last_ts = timestamp

    def current(self) -> Optional[float]:
        return self._value

    def is_ready(self) -> bool:
        return self._samples >= self.period

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        require_column(ohlcv, self.src)

        feature = ohlcv[self.src].ewm(
            span=self.period, min_periods=self.period, adjust=False
        ).mean()

        return feature.to_frame(name=self.name)
