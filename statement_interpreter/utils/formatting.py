"""Human-readable money and ratio formatting for flag descriptions."""


def billions(value: float) -> str:
    """
    >>> billions(20e9)
    '$20.00B'
    """
    return f"${value / 1e9:.2f}B"


def millions(value: float) -> str:
    """
    >>> millions(2.5e6)
    '$2.5M'
    """
    return f"${value / 1e6:.1f}M"


def currency(value: float) -> str:
    """Pick a $B / $M / $ scale from the magnitude.

    >>> currency(-3_200_000_000)
    '-$3.20B'
    >>> currency(45_000_000)
    '$45.0M'
    >>> currency(950)
    '$950'
    """
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= 1e9:
        return sign + billions(magnitude)
    if magnitude >= 1e6:
        return sign + millions(magnitude)
    return f"{sign}${magnitude:,.0f}"
