"""Progressive income tax on taxable income."""

from __future__ import annotations

from decimal import Decimal

from taxmate.taxes.year import TaxYearRules, bracket_for, default_rules


def gross_tax(taxable_income: Decimal, rules: TaxYearRules | None = None) -> Decimal:
    """Tax on ``taxable_income`` before offsets, levies and repayments.

    Uses the base-plus-marginal form: the matching bracket's ``base`` is the
    cumulative tax at its lower bound. Incomes below the first bracket pay
    that bracket's base.
    """
    rules = rules or default_rules()
    band = bracket_for(rules.income_tax, taxable_income)
    if taxable_income < band.lower:
        return band.base
    return band.base + (taxable_income - band.lower) * band.rate


def marginal_rate(taxable_income: Decimal, rules: TaxYearRules | None = None) -> Decimal:
    """Rate applying to the next dollar of taxable income."""
    rules = rules or default_rules()
    return bracket_for(rules.income_tax, taxable_income).rate
