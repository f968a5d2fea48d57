"""Deduction aggregation and the work-from-home shortcut method."""

from __future__ import annotations

from decimal import Decimal

from taxmate.config.schema import Deductions
from taxmate.taxes.income_tax import marginal_rate
from taxmate.taxes.year import TaxYearRules, default_rules
from taxmate.utils.money import DOLLAR, ZERO, round_money

# Fixed shortcut-method rate per hour worked from home.
WFH_RATE_PER_HOUR = Decimal("0.67")


def work_from_home_deduction(hours: Decimal) -> Decimal:
    """Shortcut-method deduction for ``hours`` worked from home."""
    return hours * WFH_RATE_PER_HOUR


def total_manual_deductions(deductions: Deductions) -> Decimal:
    """Sum of every claimed category and subcategory amount."""
    return deductions.total()


def estimated_tax_saving(
    amount: Decimal,
    total_income: Decimal,
    rules: TaxYearRules | None = None,
) -> Decimal:
    """Rough tax saved by claiming a deduction of ``amount``.

    Multiplies the deduction by the marginal bracket rate at ``total_income``
    plus the Medicare levy rate once income clears the single levy threshold.
    Rounded to whole dollars; for guidance while entering deductions only.
    """
    if amount <= ZERO:
        return ZERO
    rules = rules or default_rules()
    rate = marginal_rate(total_income, rules)
    if total_income > rules.medicare.single_threshold:
        rate += rules.medicare.rate
    return round_money(amount * rate, DOLLAR)
