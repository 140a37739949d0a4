"""Family allowance deductions."""

from typing import Tuple

from ..schemas import AllowanceConfig


def clamp_dependants(dependants: int, config: AllowanceConfig) -> int:
    """Clamp a dependant count into [0, max_dependents]."""
    return max(0, min(int(dependants), config.max_dependents))


def allowance_breakdown(dependants: int, config: AllowanceConfig) -> Tuple[float, float]:
    """Return (self_allowance, dependant_allowance_total).

    Out-of-range dependant counts are clamped, not rejected. The entry point
    (convert.validate_input) is where out-of-range counts are refused.
    """
    count = clamp_dependants(dependants, config)
    return config.self_allowance, count * config.per_dependent_allowance


def compute_allowance(dependants: int, config: AllowanceConfig) -> float:
    """Total allowance deducted from pre-tax income."""
    self_allowance, dependant_allowance = allowance_breakdown(dependants, config)
    return self_allowance + dependant_allowance
