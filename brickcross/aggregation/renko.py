"""Fixed-size price bricks (simplified Renko) built from a raw price stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional

import pandas as pd

log = logging.getLogger(__name__)


def _to_decimal(value: float) -> Decimal:
    # str() is the shortest repr, so 100.1 becomes Decimal("100.1")
    return Decimal(str(value))


class BrickDirection(Enum):
    NONE = 0
    UP = 1
    DOWN = -1


@dataclass(frozen=True)
class Brick:
    """One completed brick, a move of exactly one brick size."""

    end_time: pd.Timestamp
    close_price: float
    direction: BrickDirection = BrickDirection.NONE


class BrickAggregator:
    """Turns ``(price, timestamp)`` observations into completed bricks.

    The first observation only anchors the origin. After that every full
    ``brick_size`` the price has moved away from the origin closes one
    brick, and the origin moves to that brick's close. A gap spanning
    several brick sizes closes several bricks from a single observation,
    nearest first. There is no reversal rule: a brick in the opposite
    direction closes as soon as price crosses one brick size the other way.

    Prices and the origin are held as ``Decimal``, so a move of exactly
    ``k * brick_size`` closes ``k`` bricks even for sizes like 0.1.

    Parameters
    ----------
    brick_size : float
        Price distance per brick. Must be > 0.
    """

    def __init__(self, brick_size: float) -> None:
        if brick_size <= 0:
            raise ValueError(f"brick_size must be > 0, got {brick_size}")
        self.brick_size = float(brick_size)
        self._size = _to_decimal(brick_size)
        self._origin: Optional[Decimal] = None
        self._direction = BrickDirection.NONE
        self._n_bricks = 0

    @property
    def origin(self) -> Optional[float]:
        return None if self._origin is None else float(self._origin)

    @property
    def direction(self) -> BrickDirection:
        return self._direction

    @property
    def n_bricks(self) -> int:
        """Total bricks closed so far."""
        return self._n_bricks

    def on_observation(self, price: float, timestamp: pd.Timestamp) -> Iterator[Brick]:
        """Yield every brick completed by this observation.

        State advances as bricks are consumed, so callers must exhaust the
        iterator before feeding the next observation.
        """
        level = _to_decimal(price)
        if self._origin is None:
            self._origin = level
            return

        delta = level - self._origin
        while abs(delta) >= self._size:
            step = self._size if delta > 0 else -self._size
            self._origin += step
            self._direction = BrickDirection.UP if step > 0 else BrickDirection.DOWN
            self._n_bricks += 1
            brick = Brick(
                end_time=timestamp,
                close_price=float(self._origin),
                direction=self._direction,
            )
            log.debug("Brick %d %s close=%s at %s",
                      self._n_bricks, self._direction.name, brick.close_price, timestamp)
            yield brick
            delta = level - self._origin
