"""Monetary rounding shared by the forward and inverse paths.

Convention: half away from zero, to the nearest multiple of the rule set's
rounding_unit (1 VND by default). Line items that make up a total (insurance
components, per-bracket tax) are rounded with the largest-remainder method
so that they always sum exactly to the rounded total.
"""

import math
from typing import List, Sequence, Tuple


def _clean(amount: float, unit: float) -> float:
    # Strip float noise such as 17460000.000000004 from integral units
    if float(unit).is_integer():
        return float(int(round(amount)))
    return round(amount, 10)


def round_amount(amount: float, unit: float = 1) -> float:
    """Round half away from zero to the nearest multiple of ``unit``.

    Example (unit=1): 440000.5 -> 440001, 440000.49 -> 440000
    """
    if amount >= 0:
        rounded = math.floor(amount / unit + 0.5) * unit
    else:
        rounded = -math.floor(-amount / unit + 0.5) * unit
    return _clean(rounded, unit)


def allocate_rounded(amounts: Sequence[float], unit: float = 1) -> Tuple[List[float], float]:
    """Round non-negative line items so they sum to their rounded total.

    Each item is floored to ``unit``; the units left over between that sum
    and round_amount(sum(amounts)) go to the items with the largest
    fractional remainders (ties keep table order).

    Args:
        amounts: Unrounded, non-negative line items
        unit: Smallest currency unit

    Returns:
        Tuple of (rounded_items, rounded_total)

    Example:
        allocate_rounded([1600000.08, 300000.015, 200000.01])
        -> ([1600000.0, 300000.0, 200000.0], 2100000.0)
    """
    total = round_amount(sum(amounts), unit)
    floors = [math.floor(a / unit) * unit for a in amounts]
    leftover_units = int(round((total - sum(floors)) / unit))

    by_remainder = sorted(
        range(len(amounts)),
        key=lambda i: amounts[i] - floors[i],
        reverse=True,
    )
    for i in by_remainder[:leftover_units]:
        floors[i] += unit

    return [_clean(a, unit) for a in floors], total
