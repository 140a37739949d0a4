"""Tests for rule schema validation.

The bracket table must span [0, inf) contiguously with strictly rising
rates; anything else is rejected when the rules are loaded.
"""

import copy

import pytest
from pydantic import ValidationError

from salarycalc.sdk import ContributionRates, SalaryRules, TaxBracket


def make_rules(raw: dict, **overrides) -> SalaryRules:
    data = copy.deepcopy(raw)
    data.update(overrides)
    return SalaryRules.model_validate(data)


class TestShippedRules:
    """The shipped rule files load cleanly."""

    def test_2024_rules(self, rules):
        assert rules.year == 2024
        assert len(rules.tax_brackets) == 7
        assert rules.tax_brackets[-1].upper_bound is None
        assert set(rules.zones) == {"I", "II", "III", "IV"}

    def test_employee_rate_total(self, rules):
        assert rules.insurance.employee.total == pytest.approx(10.5)
        assert rules.insurance.employer.total == pytest.approx(21.5)

    def test_rules_are_immutable(self, rules):
        with pytest.raises(ValidationError):
            rules.year = 2030


class TestBracketTable:
    """Bracket table invariants."""

    def test_gap_between_brackets(self, raw_rules):
        brackets = copy.deepcopy(raw_rules["tax_brackets"])
        brackets[1]["lower_bound"] = 6_000_000

        with pytest.raises(ValidationError, match="ends at"):
            make_rules(raw_rules, tax_brackets=brackets)

    def test_rates_must_increase(self, raw_rules):
        brackets = copy.deepcopy(raw_rules["tax_brackets"])
        brackets[2]["rate"] = 0.10

        with pytest.raises(ValidationError, match="must exceed"):
            make_rules(raw_rules, tax_brackets=brackets)

    def test_top_bracket_must_be_unbounded(self, raw_rules):
        brackets = copy.deepcopy(raw_rules["tax_brackets"])
        brackets[-1]["upper_bound"] = 100_000_000

        with pytest.raises(ValidationError, match="unbounded"):
            make_rules(raw_rules, tax_brackets=brackets)

    def test_unbounded_bracket_only_at_end(self, raw_rules):
        brackets = copy.deepcopy(raw_rules["tax_brackets"])
        brackets[3]["upper_bound"] = None

        with pytest.raises(ValidationError, match="not the last"):
            make_rules(raw_rules, tax_brackets=brackets)

    def test_must_start_at_zero(self, raw_rules):
        brackets = copy.deepcopy(raw_rules["tax_brackets"])[1:]

        with pytest.raises(ValidationError, match="start at 0"):
            make_rules(raw_rules, tax_brackets=brackets)

    def test_single_unbounded_bracket_is_valid(self, raw_rules):
        rules = make_rules(raw_rules, tax_brackets=[{"lower_bound": 0, "rate": 0.1}])
        assert rules.tax_brackets == [TaxBracket(lower_bound=0, upper_bound=None, rate=0.1)]

    def test_inverted_bounds(self):
        with pytest.raises(ValidationError):
            TaxBracket(lower_bound=10, upper_bound=5, rate=0.1)


class TestOtherSections:
    """Validation of insurance, limits and unknown keys."""

    def test_sub_rates_sum_to_total(self):
        rates = ContributionRates(social=8, health=1.5, unemployment=1)
        assert rates.total == pytest.approx(10.5)

    def test_employee_rate_of_100_percent_rejected(self, raw_rules):
        insurance = copy.deepcopy(raw_rules["insurance"])
        insurance["employee"]["social"] = 97.5

        with pytest.raises(ValidationError, match="below 100%"):
            make_rules(raw_rules, insurance=insurance)

    def test_limits_range(self, raw_rules):
        limits = dict(raw_rules["limits"], min_salary=5_000_000, max_salary=1_000_000)

        with pytest.raises(ValidationError, match="must exceed min_salary"):
            make_rules(raw_rules, limits=limits)

    def test_tolerance_must_cover_rounding_plateau(self, raw_rules):
        limits = dict(raw_rules["limits"], tolerance=2, rounding_unit=1000)

        with pytest.raises(ValidationError, match="at least twice rounding_unit"):
            make_rules(raw_rules, limits=limits)

    def test_tolerance_defaults_to_two_units(self, raw_rules):
        limits = {k: v for k, v in raw_rules["limits"].items() if k != "tolerance"}

        assert make_rules(raw_rules, limits=limits).limits.tolerance == 2

    def test_unknown_key_rejected(self, raw_rules):
        with pytest.raises(ValidationError):
            make_rules(raw_rules, surcharge=0.02)
