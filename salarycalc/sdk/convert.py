"""Gross/net salary conversion.

Forward (gross -> net):

    gross -> insurance (capped per component) -> pre-tax income
          -> minus allowances -> taxable income -> progressive tax -> net

Inverse (net -> gross) runs the same pipeline as an oracle through
solver.solve_gross, then settles on the whole-unit gross whose reported
net is closest to the target.

Reported figures are rounded in stages, the way a payslip is: gross, then
the insurance total (components allocated to match it), then pre-tax and
taxable income from those rounded amounts, then the tax total (brackets
allocated to match it). Each stage moves by at most one unit when gross
moves by one unit, so the reported net stays monotonic in gross.

convert() is the validated entry point. gross_to_net() and net_to_gross()
skip range validation and are intended for callers that have already
validated, or that want to explore outside the configured limits.
"""

import logging
import math
from typing import Callable, Dict, Optional, Tuple, Union

from .errors import (
    InvalidDependentCount,
    InvalidInsuranceBase,
    InvalidSalaryRange,
    InvalidZone,
    InversionUnreachable,
)
from .rounding import allocate_rounded, round_amount
from .schemas import (
    ConversionResult,
    Direction,
    InsuranceBreakdown,
    SalaryInput,
    SalaryRules,
    Zone,
)
from .solver import bisect_gross, gross_breakpoints, solve_gross
from .taxes import (
    allowance_breakdown,
    ceiling_breakpoints,
    clamp_dependants,
    compute_capped_insurance,
    compute_tax,
    marginal_rate,
)

logger = logging.getLogger(__name__)

# Whole units either side of the analytic gross searched for the best
# reported net. Staged rounding keeps the reported net within ~1.2 units of
# the unrounded curve, whose slope never drops below ~0.58.
_SEARCH_UNITS = 3

InsuranceBaseArg = Union[None, float, Callable[[float], float]]


def resolve_zone(zone: str, rules: SalaryRules) -> Tuple[str, Zone]:
    """Look up a region identifier (case-insensitive).

    Returns:
        Tuple of (normalized_zone_id, Zone)

    Raises:
        InvalidZone: If the identifier is not in the rule set
    """
    zone_id = str(zone).strip().upper()
    zone_rules = rules.zones.get(zone_id)
    if zone_rules is None:
        raise InvalidZone(
            f"Unknown zone '{zone}'. Valid zones: {', '.join(sorted(rules.zones))}",
            zone=zone,
        )
    return zone_id, zone_rules


def _insurance_base_for(gross: float, insurance_base: InsuranceBaseArg) -> float:
    if insurance_base is None:
        return gross
    if callable(insurance_base):
        return insurance_base(gross)
    return insurance_base


def _allowances(dependants: int, rules: SalaryRules) -> Tuple[float, float]:
    unit = rules.limits.rounding_unit
    self_allowance, dependant_allowance = allowance_breakdown(dependants, rules.allowance)
    return round_amount(self_allowance, unit), round_amount(dependant_allowance, unit)


def _breakdown(contributions: Dict[str, float], unit: float) -> InsuranceBreakdown:
    (social, health, unemployment), total = allocate_rounded(
        [contributions["social"], contributions["health"], contributions["unemployment"]],
        unit,
    )
    return InsuranceBreakdown(social=social, health=health, unemployment=unemployment, total=total)


def _build_result(
    gross: float,
    dependants: int,
    zone_id: str,
    zone: Zone,
    rules: SalaryRules,
    insurance_base: InsuranceBaseArg,
    direction: Direction,
) -> ConversionResult:
    """Run the forward pipeline with staged rounding and snapshot it."""
    unit = rules.limits.rounding_unit

    gross = round_amount(gross, unit)
    base = _insurance_base_for(gross, insurance_base)
    contributions = compute_capped_insurance(base, rules.insurance, rules.ceilings, zone)
    employee = _breakdown(contributions["employee"], unit)
    employer = _breakdown(contributions["employer"], unit)

    pre_tax = gross - employee.total
    if pre_tax < 0:
        raise InvalidInsuranceBase(
            f"Employee contributions ({employee.total:,.0f}) exceed gross salary ({gross:,.0f})",
            insurance_base=base,
            gross=gross,
        )

    self_allowance, dependant_allowance = _allowances(dependants, rules)
    total_allowance = self_allowance + dependant_allowance
    taxable = max(0.0, pre_tax - total_allowance)

    bracket_amounts, _ = compute_tax(taxable, rules.tax_brackets)
    bracket_taxes, total_tax = allocate_rounded(bracket_amounts, unit)

    return ConversionResult(
        direction=direction,
        zone=zone_id,
        dependants=clamp_dependants(dependants, rules.allowance),
        gross=gross,
        net=pre_tax - total_tax,
        insurance_base=round_amount(base, unit),
        employee=employee,
        employer=employer,
        self_allowance=self_allowance,
        dependant_allowance=dependant_allowance,
        total_allowance=total_allowance,
        pre_tax_income=pre_tax,
        taxable_income=taxable,
        bracket_taxes=bracket_taxes,
        total_tax=total_tax,
    )


def gross_to_net(
    gross: float,
    dependants: int,
    zone: str,
    rules: SalaryRules,
    insurance_base: InsuranceBaseArg = None,
) -> ConversionResult:
    """Convert a gross monthly salary to net with a full breakdown.

    Args:
        gross: Gross salary
        dependants: Registered dependants (clamped to the allowed range)
        zone: Region identifier
        rules: Resolved rule set
        insurance_base: Declared insurance salary. None uses gross; a
            callable receives gross and returns the base.

    Returns:
        ConversionResult with direction "forward"

    Raises:
        InvalidZone: Unknown zone
        InvalidInsuranceBase: Negative base, or contributions above gross
    """
    zone_id, zone_rules = resolve_zone(zone, rules)
    return _build_result(gross, dependants, zone_id, zone_rules, rules, insurance_base, "forward")


def net_to_gross(
    target_net: float,
    dependants: int,
    zone: str,
    rules: SalaryRules,
    insurance_base: InsuranceBaseArg = None,
) -> ConversionResult:
    """Find the gross salary that produces target_net.

    Searches gross within [limits.min_salary, limits.max_salary]. When the
    insurance base is None (tracks gross) or a fixed amount, the net curve's
    kinks are known and the segment is inverted exactly. A callable
    insurance base falls back to bounded bisection.

    Returns:
        ConversionResult with direction "inverse"; its net is within
        limits.tolerance of target_net

    Raises:
        InvalidZone: Unknown zone
        InversionUnreachable: No gross in range reproduces target_net
    """
    zone_id, zone_rules = resolve_zone(zone, rules)
    limits = rules.limits

    self_allowance, dependant_allowance = _allowances(dependants, rules)
    total_allowance = self_allowance + dependant_allowance

    def pre_tax_of(gross: float) -> float:
        base = _insurance_base_for(gross, insurance_base)
        contributions = compute_capped_insurance(base, rules.insurance, rules.ceilings, zone_rules)
        return gross - contributions["employee"]["total"]

    def net_of(gross: float) -> float:
        pre_tax = pre_tax_of(gross)
        _, total_tax = compute_tax(pre_tax - total_allowance, rules.tax_brackets)
        return pre_tax - total_tax

    if callable(insurance_base):
        logger.debug("Insurance base is a function of gross; using bounded bisection")
        raw_gross = bisect_gross(
            target_net, net_of, limits.min_salary, limits.max_salary, limits.rounding_unit
        )
    else:
        ceilings = ceiling_breakpoints(rules.ceilings, zone_rules) if insurance_base is None else []
        points = gross_breakpoints(
            pre_tax_of,
            total_allowance,
            rules.tax_brackets,
            ceilings,
            limits.min_salary,
            limits.max_salary,
        )
        raw_gross = solve_gross(target_net, net_of, points, limits.tolerance)

    return _settle_gross(raw_gross, target_net, dependants, zone_id, zone_rules, rules, insurance_base)


def _settle_gross(
    raw_gross: float,
    target_net: float,
    dependants: int,
    zone_id: str,
    zone: Zone,
    rules: SalaryRules,
    insurance_base: InsuranceBaseArg,
) -> ConversionResult:
    """Pick the whole-unit gross near raw_gross whose reported net best matches."""
    limits = rules.limits
    unit = limits.rounding_unit
    center = round_amount(raw_gross, unit)

    best: Optional[ConversionResult] = None
    best_key = None
    for step in range(-_SEARCH_UNITS, _SEARCH_UNITS + 1):
        candidate = center + step * unit
        if candidate < limits.min_salary or candidate > limits.max_salary:
            continue
        try:
            result = _build_result(
                candidate, dependants, zone_id, zone, rules, insurance_base, "inverse"
            )
        except InvalidInsuranceBase:
            # Fixed base above this candidate gross; a higher candidate may fit
            continue
        key = (abs(result.net - target_net), abs(candidate - raw_gross))
        if best_key is None or key < best_key:
            best, best_key = result, key

    if best is None or best_key[0] > limits.tolerance:
        raise InversionUnreachable(
            f"No gross salary between {limits.min_salary:,.0f} and {limits.max_salary:,.0f} "
            f"reproduces net {target_net:,.0f} within {limits.tolerance:g}",
            target_net=target_net,
            closest_gross=best.gross if best else None,
            closest_net=best.net if best else None,
        )

    logger.debug(
        f"Net {target_net:,.2f} -> gross {best.gross:,.0f} (analytic {raw_gross:,.2f}), "
        f"marginal tax rate {marginal_rate(best.taxable_income, rules.tax_brackets):.0%}"
    )
    return best


def validate_input(salary_input: SalaryInput, rules: SalaryRules) -> Zone:
    """Check a request against the rule set before any computation.

    Forward salaries must lie in [min_salary, max_salary]. Inverse targets
    only need to be within [0, max_salary]; whether they are reachable is
    the solver's call.

    Returns:
        The resolved Zone

    A declared insurance base must be finite and non-negative. In the
    forward direction its capped employee contributions may not exceed the
    gross salary.

    Raises:
        InvalidSalaryRange, InvalidDependentCount, InvalidZone,
        InvalidInsuranceBase
    """
    limits = rules.limits
    salary = salary_input.salary

    if salary_input.direction == "forward":
        if not limits.min_salary <= salary <= limits.max_salary:
            raise InvalidSalaryRange(
                f"Gross salary {salary:,.0f} outside allowed range "
                f"{limits.min_salary:,.0f} to {limits.max_salary:,.0f}",
                salary=salary,
            )
    elif not 0 <= salary <= limits.max_salary:
        raise InvalidSalaryRange(
            f"Target net salary {salary:,.0f} outside allowed range 0 to {limits.max_salary:,.0f}",
            salary=salary,
        )

    max_dependents = rules.allowance.max_dependents
    if not 0 <= salary_input.dependants <= max_dependents:
        raise InvalidDependentCount(
            f"Dependants must be between 0 and {max_dependents} (got {salary_input.dependants})",
            dependants=salary_input.dependants,
        )

    _, zone = resolve_zone(salary_input.zone, rules)

    insurance_base = salary_input.insurance_base
    if insurance_base is None:
        return zone

    if not math.isfinite(insurance_base) or insurance_base < 0:
        raise InvalidInsuranceBase(
            f"Insurance base must be a finite, non-negative amount (got {insurance_base})",
            insurance_base=insurance_base,
        )

    if salary_input.direction == "forward":
        unit = limits.rounding_unit
        gross = round_amount(salary, unit)
        contributions = compute_capped_insurance(insurance_base, rules.insurance, rules.ceilings, zone)
        employee_total = _breakdown(contributions["employee"], unit).total
        if employee_total > gross:
            raise InvalidInsuranceBase(
                f"Employee contributions ({employee_total:,.0f}) exceed gross salary ({gross:,.0f})",
                insurance_base=insurance_base,
                gross=gross,
            )

    return zone


def convert(salary_input: SalaryInput, rules: SalaryRules) -> ConversionResult:
    """Validate a request and run it in the requested direction.

    Args:
        salary_input: Salary, dependants, zone, direction, optional insurance base
        rules: Resolved rule set (see config.load_salary_rules)

    Returns:
        ConversionResult (same shape for both directions)

    Raises:
        SalaryCalcError subclasses; see validate_input and net_to_gross
    """
    validate_input(salary_input, rules)

    logger.debug(
        f"convert {salary_input.direction}: salary={salary_input.salary:,.0f} "
        f"dependants={salary_input.dependants} zone={salary_input.zone} year={rules.year}"
    )

    if salary_input.direction == "forward":
        return gross_to_net(
            salary_input.salary,
            salary_input.dependants,
            salary_input.zone,
            rules,
            salary_input.insurance_base,
        )
    return net_to_gross(
        salary_input.salary,
        salary_input.dependants,
        salary_input.zone,
        rules,
        salary_input.insurance_base,
    )
