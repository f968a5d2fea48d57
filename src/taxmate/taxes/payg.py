"""Advisory PAYG withholding estimate.

Used only to pre-fill the tax-withheld input when the user does not know
what their employer withheld. It is never part of the assessed tax computed
by :func:`taxmate.core.engine.estimate`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from taxmate.taxes.year import TaxYearRules, bracket_for, default_rules
from taxmate.utils.money import DOLLAR, ZERO, round_money, to_amount


@dataclass(frozen=True)
class WithholdingEstimate:
    """Estimated PAYG withholding on employment income."""

    employment_income: Decimal
    income_tax_component: Decimal
    medicare_component: Decimal
    amount: Decimal  # whole dollars
    is_estimate: bool = True


def estimate_withholding(
    employment_incomes: Iterable[Any],
    rules: TaxYearRules | None = None,
) -> WithholdingEstimate:
    """Estimate PAYG withheld from salary and wages.

    Business (ABN) income is deliberately not an argument: no PAYG is
    withheld from it. Non-numeric entries count as zero.
    """
    payg = (rules or default_rules()).payg
    income = sum((to_amount(v) for v in employment_incomes), ZERO)
    if income <= ZERO:
        return WithholdingEstimate(income, ZERO, ZERO, ZERO)

    band = bracket_for(payg.brackets, income)
    tax = band.base + (income - band.lower) * band.rate
    medicare = income * payg.medicare_rate if income > payg.medicare_threshold else ZERO
    return WithholdingEstimate(
        employment_income=income,
        income_tax_component=tax,
        medicare_component=medicare,
        amount=round_money(tax + medicare, DOLLAR),
    )
