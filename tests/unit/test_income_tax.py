"""Unit tests for the progressive income tax engine."""

import pytest

from salarycalc.sdk.taxes import (
    bracket_base_amounts,
    compute_tax,
    marginal_rate,
)
from salarycalc.sdk.taxes.income_tax import tax_from_base_amounts


class TestComputeTax:
    """Tests for compute_tax per-bracket and total amounts."""

    def test_two_bracket_income(self, rules):
        """6.9M taxable = 5M @ 5% + 1.9M @ 10%."""
        per_bracket, total = compute_tax(6_900_000, rules.tax_brackets)

        assert per_bracket[0] == pytest.approx(250_000)
        assert per_bracket[1] == pytest.approx(190_000)
        assert per_bracket[2:] == [0.0] * 5
        assert total == pytest.approx(440_000)

    def test_per_bracket_aligned_with_table(self, rules):
        per_bracket, _ = compute_tax(123_456_789, rules.tax_brackets)
        assert len(per_bracket) == len(rules.tax_brackets)

    def test_zero_income(self, rules):
        per_bracket, total = compute_tax(0, rules.tax_brackets)
        assert total == 0
        assert all(amount == 0 for amount in per_bracket)

    def test_negative_income_treated_as_zero(self, rules):
        per_bracket, total = compute_tax(-3_000_000, rules.tax_brackets)
        assert total == 0
        assert all(amount == 0 for amount in per_bracket)

    def test_top_bracket_has_no_upper_clamp(self, rules):
        """Everything above 80M is taxed at 35%."""
        per_bracket, total = compute_tax(100_000_000, rules.tax_brackets)

        assert per_bracket[-1] == pytest.approx(20_000_000 * 0.35)
        assert total == pytest.approx(18_150_000 + 7_000_000)

    def test_exact_boundary(self, rules):
        """Income exactly at a boundary fills the lower bracket only."""
        per_bracket, total = compute_tax(10_000_000, rules.tax_brackets)

        assert per_bracket[2] == 0
        assert total == pytest.approx(750_000)

    @pytest.mark.parametrize("taxable", [
        0, 1, 4_999_999, 5_000_000, 7_250_000, 17_999_999,
        25_000_000, 32_000_001, 60_000_000, 80_000_000, 250_000_000,
    ])
    def test_bracket_sum_identity(self, rules, taxable):
        per_bracket, total = compute_tax(taxable, rules.tax_brackets)
        assert sum(per_bracket) == total


class TestClosedFormTable:
    """Tests for the base amount + marginal rate representation."""

    def test_base_amounts(self, rules):
        table = bracket_base_amounts(rules.tax_brackets)

        assert [lower for lower, _, _ in table] == [
            0, 5_000_000, 10_000_000, 18_000_000, 32_000_000, 52_000_000, 80_000_000,
        ]
        assert [base for _, base, _ in table] == pytest.approx([
            0, 250_000, 750_000, 1_950_000, 4_750_000, 9_750_000, 18_150_000,
        ])
        assert [rate for _, _, rate in table] == [0.05, 0.10, 0.15, 0.20, 0.25, 0.30, 0.35]

    @pytest.mark.parametrize("taxable", [
        0, 3_000_000, 5_000_000, 9_999_999, 14_000_000,
        31_000_000, 45_500_000, 79_000_000, 80_000_000, 500_000_000,
    ])
    def test_matches_progressive_calculation(self, rules, taxable):
        _, total = compute_tax(taxable, rules.tax_brackets)
        assert tax_from_base_amounts(taxable, rules.tax_brackets) == pytest.approx(total)


class TestMarginalRate:
    """Tests for marginal_rate lookup."""

    @pytest.mark.parametrize("taxable,expected", [
        (0, 0.05),
        (4_999_999, 0.05),
        (5_000_000, 0.10),
        (18_000_000, 0.20),
        (90_000_000, 0.35),
    ])
    def test_rate_at_income(self, rules, taxable, expected):
        assert marginal_rate(taxable, rules.tax_brackets) == expected
