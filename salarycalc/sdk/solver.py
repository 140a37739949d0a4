"""Inverse conversion: recover the gross salary that yields a target net.

Net salary is a monotonic, piecewise-linear function of gross. Its kinks sit
where taxable income enters a new tax bracket and where the insurance base
reaches a ceiling. Between two kinks net is affine, so once the segment
holding the target is known the gross follows from one division.

Two strategies:

1. Segment inversion (solve_gross): evaluate net at every kink inside the
   accepted salary range, binary-search the kink list for the segment whose
   net range holds the target, and invert the affine piece exactly.

2. Bounded bisection (bisect_gross): used when the insurance base is an
   arbitrary caller-supplied function of gross, so the kinks are unknown.
   Runs at most MAX_BISECTION_ITERATIONS halvings and never loops
   unboundedly.

Both raise InversionUnreachable when the target lies outside the net range
that the salary limits can produce.
"""

import logging
from bisect import bisect_left
from typing import Callable, Iterable, List, Optional, Sequence

from .errors import InversionUnreachable
from .schemas import TaxBracket

logger = logging.getLogger(__name__)

MAX_BISECTION_ITERATIONS = 64

NetFunction = Callable[[float], float]


def _interpolate(y: float, xs: Sequence[float], ys: Sequence[float]) -> Optional[float]:
    """Inverse-interpolate y on a strictly increasing piecewise-linear curve.

    Returns None when y lies outside [ys[0], ys[-1]].
    """
    if y < ys[0] or y > ys[-1]:
        return None
    i = bisect_left(ys, y)
    if ys[i] == y:
        return xs[i]
    x0, x1 = xs[i - 1], xs[i]
    y0, y1 = ys[i - 1], ys[i]
    return x0 + (y - y0) * (x1 - x0) / (y1 - y0)


def gross_breakpoints(
    pre_tax_of: NetFunction,
    total_allowance: float,
    brackets: Sequence[TaxBracket],
    insurance_ceilings: Iterable[float],
    lower: float,
    upper: float,
) -> List[float]:
    """Gross salaries where the net-of-gross curve can change slope.

    Pre-tax income (gross minus employee insurance) is itself piecewise
    linear, bending only where the insurance base hits a ceiling. Each bracket
    lower bound is translated back to gross by adding the allowance and
    inverting pre-tax income between those ceiling knots.

    Args:
        pre_tax_of: Gross -> pre-tax income
        total_allowance: Allowance deducted before tax
        brackets: Bracket table
        insurance_ceilings: Gross values where the insurance base stops
            growing (empty when the base does not depend on gross)
        lower: Lowest accepted gross
        upper: Highest accepted gross

    Returns:
        Ascending gross values, always starting at lower and ending at upper
    """
    knots = sorted({lower, upper, *(c for c in insurance_ceilings if lower < c < upper)})
    pre_tax_knots = [pre_tax_of(g) for g in knots]

    points = set(knots)
    for bracket in brackets:
        gross = _interpolate(total_allowance + bracket.lower_bound, knots, pre_tax_knots)
        if gross is not None and lower < gross < upper:
            points.add(gross)

    return sorted(points)


def _unreachable(target_net: float, net_low: float, net_high: float) -> InversionUnreachable:
    return InversionUnreachable(
        f"Net salary {target_net:,.0f} is not reachable; achievable net range "
        f"is {net_low:,.0f} to {net_high:,.0f}",
        target_net=target_net,
        min_net=net_low,
        max_net=net_high,
    )


def solve_gross(
    target_net: float,
    net_of: NetFunction,
    breakpoints: Sequence[float],
    tolerance: float,
) -> float:
    """Invert a piecewise-linear net function exactly.

    Args:
        target_net: Desired net salary
        net_of: Gross -> net (unrounded)
        breakpoints: Ascending gross values covering every kink of net_of
            between the first and last entry
        tolerance: Slack allowed at the range ends

    Returns:
        Unrounded gross with net_of(gross) == target_net

    Raises:
        InversionUnreachable: If target_net lies outside the net range
    """
    nets = [net_of(g) for g in breakpoints]

    if target_net < nets[0] - tolerance or target_net > nets[-1] + tolerance:
        raise _unreachable(target_net, nets[0], nets[-1])

    i = bisect_left(nets, target_net)
    if i == 0:
        return breakpoints[0]
    if i == len(nets):
        return breakpoints[-1]

    g_lo, g_hi = breakpoints[i - 1], breakpoints[i]
    n_lo, n_hi = nets[i - 1], nets[i]
    if n_hi == n_lo:
        return g_lo

    # net = slope * gross + intercept within [g_lo, g_hi]
    slope = (n_hi - n_lo) / (g_hi - g_lo)
    intercept = n_lo - slope * g_lo
    gross = (target_net - intercept) / slope

    logger.debug(
        f"Segment {i}/{len(nets) - 1}: gross {g_lo:,.2f}-{g_hi:,.2f}, "
        f"slope {slope:.6f} -> gross {gross:,.2f}"
    )
    return gross


def bisect_gross(
    target_net: float,
    net_of: NetFunction,
    lower: float,
    upper: float,
    tolerance: float,
    max_iterations: int = MAX_BISECTION_ITERATIONS,
) -> float:
    """Bounded bisection for net functions of unknown shape.

    net_of must be non-decreasing. Stops when the residual falls within
    half the tolerance or after max_iterations halvings, returning the
    best gross seen.

    Raises:
        InversionUnreachable: If target_net lies outside
            [net_of(lower), net_of(upper)] by more than tolerance
    """
    net_low, net_high = net_of(lower), net_of(upper)
    if target_net < net_low - tolerance or target_net > net_high + tolerance:
        raise _unreachable(target_net, net_low, net_high)

    best_gross, best_residual = lower, abs(net_low - target_net)
    if abs(net_high - target_net) < best_residual:
        best_gross, best_residual = upper, abs(net_high - target_net)

    low, high = lower, upper
    for _ in range(max_iterations):
        if best_residual <= tolerance / 2:
            break
        mid = (low + high) / 2
        residual = net_of(mid) - target_net
        if abs(residual) < best_residual:
            best_gross, best_residual = mid, abs(residual)
        if residual < 0:
            low = mid
        else:
            high = mid
    else:
        logger.debug(f"Bisection hit {max_iterations} iterations; residual {best_residual:.4f}")

    logger.debug(f"Bisection result: gross {best_gross:,.2f}, residual {best_residual:.4f}")
    return best_gross
