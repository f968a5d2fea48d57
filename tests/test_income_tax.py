"""Tests for progressive income tax and marginal rates."""

from __future__ import annotations

from decimal import Decimal

import numpy as np
import pytest

from taxmate.taxes.income_tax import gross_tax, marginal_rate
from taxmate.taxes.year import TaxYearRules


class TestGrossTax:
    @pytest.mark.parametrize(
        ("income", "expected"),
        [
            ("0", "0"),
            ("18200", "0"),
            ("45000", "5092"),
            ("120000", "29467"),
            ("180000", "51667"),
        ],
    )
    def test_bracket_boundaries(self, rules: TaxYearRules, income: str, expected: str) -> None:
        assert gross_tax(Decimal(income), rules) == Decimal(expected)

    def test_within_second_bracket(self, rules: TaxYearRules) -> None:
        # 19% of (30,000 - 18,200)
        assert gross_tax(Decimal("30000"), rules) == Decimal("2242")

    def test_salary_75k(self, rules: TaxYearRules) -> None:
        # 5,092 + 32.5% of 30,000
        assert gross_tax(Decimal("75000"), rules) == Decimal("14842")

    def test_top_bracket(self, rules: TaxYearRules) -> None:
        assert gross_tax(Decimal("250000"), rules) == Decimal("83167")

    def test_continuous_just_below_boundary(self, rules: TaxYearRules) -> None:
        below = gross_tax(Decimal("44999.99"), rules)
        assert Decimal("5091.99") < below < Decimal("5092")

    def test_fractional_income(self, rules: TaxYearRules) -> None:
        assert gross_tax(Decimal("18200.50"), rules) == Decimal("0.0950")

    def test_non_decreasing_and_non_negative(self, rules: TaxYearRules) -> None:
        incomes = np.linspace(0, 400_000, 801)
        taxes = np.array([float(gross_tax(Decimal(str(x)), rules)) for x in incomes])
        assert np.all(taxes >= 0)
        assert np.all(np.diff(taxes) >= 0)

    def test_default_rules(self) -> None:
        assert gross_tax(Decimal("45000")) == Decimal("5092")


class TestMarginalRate:
    @pytest.mark.parametrize(
        ("income", "expected"),
        [
            ("10000", "0"),
            ("18200", "0.19"),
            ("75000", "0.325"),
            ("150000", "0.37"),
            ("500000", "0.45"),
        ],
    )
    def test_rates(self, rules: TaxYearRules, income: str, expected: str) -> None:
        assert marginal_rate(Decimal(income), rules) == Decimal(expected)

    def test_negative_income_uses_tax_free_bracket(self, rules: TaxYearRules) -> None:
        assert marginal_rate(Decimal("-1"), rules) == 0
        assert gross_tax(Decimal("-1"), rules) == 0
        assert gross_tax(Decimal("-50000"), rules) == 0
