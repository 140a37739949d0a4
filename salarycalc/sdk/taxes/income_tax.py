"""Progressive personal income tax.

Applies an ordered bracket table to a taxable income figure. The table is
configuration (see rules/<year>.yaml); nothing here knows how many bands a
jurisdiction has or where they sit.
"""

from typing import List, Sequence, Tuple

from ..schemas import TaxBracket


def compute_tax(taxable_income: float, brackets: Sequence[TaxBracket]) -> Tuple[List[float], float]:
    """Calculate tax per bracket and in total.

    Args:
        taxable_income: Income after insurance and allowances. Negative values
            are treated as zero.
        brackets: Bracket table sorted ascending by lower_bound

    Returns:
        Tuple of (per_bracket_amounts, total_tax). per_bracket_amounts is
        aligned with ``brackets``; bands the income never reaches hold 0.

    Example:
        taxable 6,900,000 against 5%/0-5M, 10%/5M-10M, ...
        -> ([250000.0, 190000.0, 0.0, ...], 440000.0)
    """
    taxable_income = max(0.0, taxable_income)

    per_bracket = []
    for bracket in brackets:
        if bracket.upper_bound is None:
            top = taxable_income
        else:
            top = min(taxable_income, bracket.upper_bound)
        amount_in_bracket = max(0.0, top - bracket.lower_bound)
        per_bracket.append(amount_in_bracket * bracket.rate)

    return per_bracket, sum(per_bracket)


def bracket_base_amounts(brackets: Sequence[TaxBracket]) -> List[Tuple[float, float, float]]:
    """Closed-form table: (lower_bound, base_tax, marginal_rate) per bracket.

    Tax on income x inside a bracket is base_tax + marginal_rate * (x - lower_bound).
    This is the published "quick calculation" form of the same table.
    """
    table = []
    base_tax = 0.0
    for bracket in brackets:
        table.append((bracket.lower_bound, base_tax, bracket.rate))
        if bracket.upper_bound is not None:
            base_tax += (bracket.upper_bound - bracket.lower_bound) * bracket.rate
    return table


def tax_from_base_amounts(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    """Total tax computed from the closed-form table."""
    taxable_income = max(0.0, taxable_income)
    tax = 0.0
    for lower_bound, base_tax, rate in bracket_base_amounts(brackets):
        if taxable_income >= lower_bound:
            tax = base_tax + (taxable_income - lower_bound) * rate
    return tax


def marginal_rate(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    """Rate applied to the next unit of taxable income.

    Zero taxable income sits in the first bracket, so its rate is returned.
    """
    rate = brackets[0].rate
    for bracket in brackets:
        if taxable_income >= bracket.lower_bound:
            rate = bracket.rate
    return rate
