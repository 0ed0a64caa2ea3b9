# File: utils/math_utils.py
"""Amount arithmetic utilities for household bills.

Pure Python math functions used by the summary aggregation and calendar
labels.

Functions:
    - round_amount: Consistent rounding to configured precision
    - is_finite_amount: Reject NaN/inf/non-numeric amounts
    - sum_amounts: Precise float summation with rounding
    - format_amount: "$1200.00" style label formatting
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import math

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for amount rounding
AMOUNT_PRECISION = 2


def round_amount(value: float, precision: int = AMOUNT_PRECISION) -> float:
    """Round a currency amount to the configured precision.

    Examples:
        round_amount(10.456) → 10.46
        round_amount(10.0) → 10.0
    """
    return round(value, precision)


def is_finite_amount(value: object) -> bool:
    """Return True if value is a real, finite number (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def sum_amounts(values: Iterable[float], precision: int = AMOUNT_PRECISION) -> float:
    """Sum amounts with math.fsum and round the result.

    Non-finite values are skipped so one corrupt record cannot poison a total.
    """
    finite: list[float] = []
    for value in values:
        if is_finite_amount(value):
            finite.append(float(value))
        else:
            _LOGGER.debug("Skipping non-finite amount in sum: %r", value)
    return round_amount(math.fsum(finite), precision)


def format_amount(value: float, symbol: str = "$") -> str:
    """Format an amount for event labels.

    Examples:
        format_amount(1200) → "$1200.00"
        format_amount(9.5) → "$9.50"
    """
    return f"{symbol}{value:.{AMOUNT_PRECISION}f}"
