"""Low Income Tax Offset (LITO)."""

from __future__ import annotations

from decimal import Decimal

from taxmate.taxes.year import TaxYearRules, bracket_for, default_rules
from taxmate.utils.money import ZERO


def lito(taxable_income: Decimal, rules: TaxYearRules | None = None) -> Decimal:
    """Low Income Tax Offset for ``taxable_income``.

    Full offset up to the first phase-out point (negative incomes included),
    then withdrawn linearly at each band's rate. Never negative; the offset
    may still exceed gross tax, which the engine's final clamp absorbs.
    """
    rules = rules or default_rules()
    band = bracket_for(rules.lito, taxable_income)
    if taxable_income < band.lower:
        return band.base
    return max(ZERO, band.base - (taxable_income - band.lower) * band.rate)
