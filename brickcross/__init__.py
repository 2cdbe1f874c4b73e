"""brickcross — EMA crossover signals on raw prices or fixed-size price bricks."""

__version__ = "0.1.0"
