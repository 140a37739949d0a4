"""Unit tests for family allowance deductions."""

import pytest

from salarycalc.sdk.taxes import allowance_breakdown, clamp_dependants, compute_allowance


class TestComputeAllowance:
    """Tests for compute_allowance."""

    def test_self_only(self, rules):
        assert compute_allowance(0, rules.allowance) == 11_000_000

    def test_with_dependants(self, rules):
        assert compute_allowance(2, rules.allowance) == 11_000_000 + 2 * 4_400_000

    def test_breakdown(self, rules):
        assert allowance_breakdown(3, rules.allowance) == (11_000_000, 13_200_000)

    def test_each_dependant_adds_fixed_amount(self, rules):
        for count in range(rules.allowance.max_dependents):
            delta = compute_allowance(count + 1, rules.allowance) - compute_allowance(count, rules.allowance)
            assert delta == rules.allowance.per_dependent_allowance


class TestClamping:
    """Out-of-range dependant counts are clamped, not rejected."""

    @pytest.mark.parametrize("given,expected", [(-4, 0), (0, 0), (7, 7), (10, 10), (25, 10)])
    def test_clamp_dependants(self, rules, given, expected):
        assert clamp_dependants(given, rules.allowance) == expected

    def test_negative_count_gives_self_allowance(self, rules):
        assert compute_allowance(-1, rules.allowance) == 11_000_000

    def test_count_above_max_uses_max(self, rules):
        assert compute_allowance(99, rules.allowance) == 11_000_000 + 10 * 4_400_000
