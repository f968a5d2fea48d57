"""Medicare levy with low-income shade-in."""

from __future__ import annotations

from decimal import Decimal

from taxmate.taxes.year import TaxYearRules, default_rules
from taxmate.utils.money import ZERO


def medicare_threshold(dependent_count: int, rules: TaxYearRules | None = None) -> Decimal:
    """Income at or below which no levy is payable.

    Families with dependants use the family threshold, raised for each
    dependant; everyone else uses the single threshold.
    """
    m = (rules or default_rules()).medicare
    if dependent_count > 0:
        return m.family_threshold + dependent_count * m.dependent_increment
    return m.single_threshold


def medicare_levy(
    taxable_income: Decimal,
    is_exempt: bool = False,
    dependent_count: int = 0,
    rules: TaxYearRules | None = None,
) -> Decimal:
    """Medicare levy on ``taxable_income``.

    Between the threshold and ``threshold * (1 + shade_in_fraction)`` the full
    levy is phased in linearly, so the levy is continuous at both ends of the
    shade-in band.
    """
    if is_exempt:
        return ZERO
    rules = rules or default_rules()
    m = rules.medicare
    threshold = medicare_threshold(dependent_count, rules)
    if taxable_income <= threshold:
        return ZERO

    full_levy = taxable_income * m.rate
    shade_width = threshold * m.shade_in_fraction
    if taxable_income <= threshold + shade_width:
        return full_levy * (taxable_income - threshold) / shade_width
    return full_levy
