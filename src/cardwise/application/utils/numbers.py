"""Rounding helpers shared by the scheduler and the stats calculator."""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with .5 going up.

    Python's round() rounds halves to even (round(12.5) == 12); interval
    growth and percentages use the schoolbook rule instead.
    """
    return math.floor(value + 0.5)


def round_to(value: float, digits: int) -> float:
    """Round half-up to a fixed number of decimal places."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
