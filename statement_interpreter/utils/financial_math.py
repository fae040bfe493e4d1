"""Pure financial calculation utilities.

Every function here is stateless and None-safe: an undefined result (zero
or missing denominator, non-positive CAGR endpoint) is ``None``.
"""

import math
from typing import Optional, Sequence


def growth_rate(current: float, previous: float) -> Optional[float]:
    """Calculate percentage growth rate relative to ``|previous|``.

    Returns None when previous is zero (undefined growth).

    >>> growth_rate(115, 100)
    15.0
    >>> growth_rate(85, 100)
    -15.0
    >>> growth_rate(100, 0) is None
    True
    """
    if previous == 0:
        return None
    return ((current - previous) / abs(previous)) * 100


def margin(numerator: float, denominator: float) -> Optional[float]:
    """Calculate a margin / ratio expressed as a percentage.

    >>> margin(30, 100)
    30.0
    >>> margin(0, 100)
    0.0
    >>> margin(10, 0) is None
    True
    """
    if denominator == 0:
        return None
    return (numerator / denominator) * 100


def safe_ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """Plain quotient, None when either side is missing or the denominator is zero.

    >>> safe_ratio(3, 2)
    1.5
    >>> safe_ratio(None, 2) is None
    True
    >>> safe_ratio(1, 0) is None
    True
    """
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


def period_average(current: float, previous: Optional[float]) -> float:
    """Two-period average, or the current value when no prior period exists.

    >>> period_average(100, 80)
    90.0
    >>> period_average(100, None)
    100
    """
    if previous is None:
        return current
    return (current + previous) / 2


def cagr(start: float, end: float, years: float) -> Optional[float]:
    """Compound annual growth rate as a percentage.

    Only defined for positive endpoints and a positive span.

    >>> round(cagr(100, 121, 2), 6)
    10.0
    >>> cagr(-5, 10, 2) is None
    True
    >>> cagr(100, 110, 0) is None
    True
    """
    if start <= 0 or end <= 0 or years <= 0:
        return None
    return (math.pow(end / start, 1 / years) - 1) * 100


def population_stdev(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for an empty sequence.

    >>> population_stdev([2, 4, 4, 4, 5, 5, 7, 9])
    2.0
    >>> population_stdev([])
    0.0
    """
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """
    >>> clamp(120)
    100.0
    >>> clamp(-4)
    0.0
    """
    return float(max(low, min(high, value)))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    >>> round_half_up(72.5)
    73
    >>> round_half_up(72.49)
    72
    """
    return int(math.floor(value + 0.5))
