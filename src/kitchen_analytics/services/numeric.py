"""Shared numeric helpers for the analytics engines."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class Stats:
    """Mean and population standard deviation of a sample."""

    mean: float
    std_dev: float


def round_half_away(value: float, places: int = 2) -> float:
    """Round half away from zero to the given number of decimal places."""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def calculate_stats(values: Sequence[float]) -> Stats:
    """Return mean and population standard deviation (divisor ``n``)."""
    if not values:
        return Stats(mean=0.0, std_dev=0.0)
    mean = sum(values) / len(values)
    if len(values) == 1:
        return Stats(mean=mean, std_dev=0.0)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return Stats(mean=mean, std_dev=math.sqrt(variance))
