"""
Rounding Module
===============
Round-half-up helpers for monetary values and percentages.

Python's built-in round() uses banker's rounding and works on the binary
float value, so 2.675 becomes 2.67. Sales figures are rounded the way they
are printed instead: on the decimal representation, with ties going
towards positive infinity (2.675 -> 2.68, -12.25 -> -12.2).
"""

from decimal import Decimal, ROUND_HALF_DOWN, ROUND_HALF_UP

from config import settings


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round a number half-up to a fixed number of decimal places.

    Ties round towards positive infinity for negative numbers too, so a
    deviation of -12.25% is reported as -12.2%.

    Args:
        value: Number to round
        places: Decimal places to keep

    Returns:
        Rounded value as float
    """
    quantum = Decimal(1).scaleb(-places)
    number = Decimal(str(value))
    # Decimal rounds on magnitude; half-down on a negative is half towards +inf
    mode = ROUND_HALF_DOWN if number < 0 else ROUND_HALF_UP
    return float(number.quantize(quantum, rounding=mode))


def round_money(value: float) -> float:
    """Round a sales value to settings.MONEY_DECIMALS places."""
    return round_half_up(value, settings.MONEY_DECIMALS)


def round_percent(value: float) -> float:
    """Round a percentage to settings.DEVIATION_DECIMALS places."""
    return round_half_up(value, settings.DEVIATION_DECIMALS)
