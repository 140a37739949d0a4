"""taxes - Tax, insurance and allowance calculations.

Scope:
- Progressive income tax over a configurable bracket table
- Employee/employer insurance contributions and their ceilings
- Family allowance deductions

Constraints:
- Pure calculation - no file access, no rule loading (that's in config)
- Receives resolved rule objects, returns plain numbers and dicts

Usage:
    from salarycalc.sdk.taxes import compute_tax, compute_insurance

    per_bracket, total = compute_tax(6_900_000, rules.tax_brackets)
    contributions = compute_insurance(20_000_000, rules.insurance)
"""

from .income_tax import (
    compute_tax,
    bracket_base_amounts,
    marginal_rate,
)

from .insurance import (
    compute_insurance,
    compute_capped_insurance,
    capped_insurance_bases,
    ceiling_breakpoints,
)

from .allowance import (
    compute_allowance,
    allowance_breakdown,
    clamp_dependants,
)

__all__ = [
    # Income tax
    "compute_tax",
    "bracket_base_amounts",
    "marginal_rate",
    # Insurance
    "compute_insurance",
    "compute_capped_insurance",
    "capped_insurance_bases",
    "ceiling_breakpoints",
    # Allowances
    "compute_allowance",
    "allowance_breakdown",
    "clamp_dependants",
]
