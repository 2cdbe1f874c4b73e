"""Aggregation package — raw observations into fixed-size price bricks."""

from .renko import Brick, BrickAggregator, BrickDirection

__all__ = ["Brick", "BrickAggregator", "BrickDirection"]
