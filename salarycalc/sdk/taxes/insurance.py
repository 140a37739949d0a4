"""Compulsory insurance contributions (social, health, unemployment).

compute_insurance applies rates to a single base and never caps it.
Ceiling rules differ per component (social/health share a cap tied to the
statutory base salary, unemployment is capped per region), so capping is a
separate step: capped_insurance_bases resolves the per-component bases and
compute_capped_insurance applies the rates to them.
"""

import math
from typing import Dict

from ..errors import InvalidInsuranceBase
from ..schemas import ContributionRates, InsuranceCeilings, InsuranceRates, Zone

COMPONENTS = ("social", "health", "unemployment")


def _contributions(bases: Dict[str, float], rates: ContributionRates) -> Dict[str, float]:
    """Apply percentage sub-rates to per-component bases."""
    amounts = {
        component: bases[component] * getattr(rates, component) / 100
        for component in COMPONENTS
    }
    amounts["total"] = sum(amounts[c] for c in COMPONENTS)
    return amounts


def _check_base(insurance_base: float) -> None:
    if not math.isfinite(insurance_base) or insurance_base < 0:
        raise InvalidInsuranceBase(
            f"Insurance base must be a finite, non-negative amount (got {insurance_base})",
            insurance_base=insurance_base,
        )


def compute_insurance(insurance_base: float, rates: InsuranceRates) -> Dict[str, Dict[str, float]]:
    """Calculate employee and employer contributions on an uncapped base.

    Args:
        insurance_base: Salary the rates apply to. Callers pre-cap it if a
            ceiling applies.
        rates: Employee and employer sub-rates in percent

    Returns:
        Dict with:
            - employee: {social, health, unemployment, total}
            - employer: {social, health, unemployment, total}

    Raises:
        InvalidInsuranceBase: If insurance_base is negative or not finite
    """
    _check_base(insurance_base)
    bases = {component: insurance_base for component in COMPONENTS}
    return {
        "employee": _contributions(bases, rates.employee),
        "employer": _contributions(bases, rates.employer),
    }


def capped_insurance_bases(
    insurance_base: float,
    ceilings: InsuranceCeilings,
    zone: Zone,
) -> Dict[str, float]:
    """Resolve the base each component is charged on after ceilings.

    Returns:
        Dict with social, health and unemployment bases
    """
    _check_base(insurance_base)
    social_health = min(insurance_base, ceilings.social_health_cap)
    return {
        "social": social_health,
        "health": social_health,
        "unemployment": min(insurance_base, ceilings.unemployment_cap(zone)),
    }


def compute_capped_insurance(
    insurance_base: float,
    rates: InsuranceRates,
    ceilings: InsuranceCeilings,
    zone: Zone,
) -> Dict[str, Dict[str, float]]:
    """Calculate contributions with statutory ceilings applied per component."""
    bases = capped_insurance_bases(insurance_base, ceilings, zone)
    return {
        "employee": _contributions(bases, rates.employee),
        "employer": _contributions(bases, rates.employer),
    }


def ceiling_breakpoints(ceilings: InsuranceCeilings, zone: Zone) -> list:
    """Insurance bases where a component stops growing, ascending."""
    return sorted({ceilings.social_health_cap, ceilings.unemployment_cap(zone)})
