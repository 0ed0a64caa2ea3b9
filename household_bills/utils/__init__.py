# File: utils/__init__.py
"""Pure Python utilities for household bills.

Submodules:
    - dt_utils: Calendar date parsing, recurring due date resolution, periods
    - math_utils: Amount rounding, summation and formatting

Usage:
    from . import dt_utils
    from .math_utils import round_amount
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
