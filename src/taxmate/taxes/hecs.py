"""HECS-HELP compulsory repayment."""

from __future__ import annotations

from decimal import Decimal

from taxmate.taxes.year import TaxYearRules, default_rules, find_band
from taxmate.utils.money import ZERO


def hecs_repayment(
    taxable_income: Decimal,
    has_hecs_debt: bool = False,
    rules: TaxYearRules | None = None,
) -> Decimal:
    """Compulsory repayment for a study-loan debtor.

    The rate of the band containing the income applies to the whole income,
    not just the part above the band's lower bound.
    """
    if not has_hecs_debt:
        return ZERO
    hecs = (rules or default_rules()).hecs
    if taxable_income < hecs.repayment_threshold:
        return ZERO
    band = find_band(hecs.bands, taxable_income)
    if band is None:
        return ZERO
    return taxable_income * band.rate
