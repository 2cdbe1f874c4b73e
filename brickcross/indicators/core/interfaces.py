from typing import Optional, Protocol, runtime_checkable
import pandas as pd


@runtime_checkable
class IncrementalIndicator(Protocol):
    name: str
    lookback: int

    def update(self, value: float) -> None:
        """
        Feeds one new value into the indicator.

        Args:
            value: The next scalar of the stream the indicator tracks.
        """
        ...

    def current(self) -> Optional[float]:
        """
        Returns the latest indicator value, or None before the first update.
        """
        ...

    def is_ready(self) -> bool:
        """
        Returns True once enough values have been seen for the value to be meaningful.
        Readiness never goes back to False.
        """
        ...


@runtime_checkable
class BatchIndicator(Protocol):
    name: str
    lookback: int

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        """
        Computes the indicator values over a whole frame.

        Args:
            ohlcv: A DataFrame containing at least the source column.

        Returns:
            A DataFrame with the computed indicator values. The index must match the input index.
        """
        ...


def require_column(df: pd.DataFrame, src: str) -> None:
    """
    Validates that the input DataFrame contains the source column.

    Raises:
        ValueError: If the column is missing.
    """
    if src not in df.columns:
        raise ValueError(f"Source column '{src}' not found in input DataFrame.")
