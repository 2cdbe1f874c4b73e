"""Decision — output of the signal layer."""

from __future__ import annotations

from enum import Enum


class Decision(Enum):
    """What the crossover rule believes — NOT an execution instruction.

    The driver converts a Decision into an order intent based on the
    current position and available cash.
    """

    HOLD = "hold"
    ENTER_LONG = "enter_long"
    EXIT_LONG = "exit_long"
