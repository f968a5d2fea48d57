"""Tax estimation engine — turns ``TaxInputs`` into an itemised ``TaxResult``."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from taxmate.config.schema import TaxInputs
from taxmate.taxes.deductions import total_manual_deductions, work_from_home_deduction
from taxmate.taxes.hecs import hecs_repayment
from taxmate.taxes.income_tax import gross_tax, marginal_rate
from taxmate.taxes.medicare import medicare_levy
from taxmate.taxes.offsets import lito
from taxmate.taxes.year import TaxYearRules, default_rules
from taxmate.utils.money import ZERO

_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TaxResult:
    """Fully itemised outcome of one estimate.

    Every amount is carried at full decimal precision; rounding for display
    belongs to :mod:`taxmate.io.report`. ``refund_or_owing`` is the only
    field that may be negative (an amount owing).
    """

    tax_year: str
    total_employment_income: Decimal
    total_business_income: Decimal
    total_income: Decimal
    work_from_home_deduction: Decimal
    total_manual_deductions: Decimal
    total_deductions: Decimal
    taxable_income: Decimal
    gross_tax: Decimal
    lito: Decimal
    medicare_levy: Decimal
    hecs_repayment: Decimal
    final_tax: Decimal
    tax_withheld: Decimal
    refund_or_owing: Decimal
    effective_tax_rate: Decimal  # percent
    marginal_rate: Decimal
    deduction_breakdown: dict[str, Decimal] = field(default_factory=dict)

    @property
    def is_refund(self) -> bool:
        """True when the withheld tax covers the final tax."""
        return self.refund_or_owing >= ZERO

    @property
    def refund_amount(self) -> Decimal:
        return max(ZERO, self.refund_or_owing)

    @property
    def amount_owing(self) -> Decimal:
        return max(ZERO, -self.refund_or_owing)


def estimate(inputs: TaxInputs, rules: TaxYearRules | None = None) -> TaxResult:
    """Estimate the tax outcome for ``inputs``.

    Aggregates income and deductions, applies the bracket tax, the low income
    offset, the Medicare levy and any HECS-HELP repayment, then settles the
    result against tax already withheld.

    Args:
        inputs: Validated inputs from the collector.
        rules: Tax-year tables; defaults to the bundled current year.

    Returns:
        A complete ``TaxResult``. Identical inputs always give an identical
        result.
    """
    rules = rules or default_rules()

    total_employment = sum(inputs.employment_incomes, ZERO)
    total_business = inputs.business_income
    total_income = total_employment + total_business

    wfh = work_from_home_deduction(inputs.work_from_home_hours)
    manual = total_manual_deductions(inputs.deductions)
    total_deductions = manual + wfh
    taxable = max(ZERO, total_income - total_deductions)

    tax = gross_tax(taxable, rules)
    offset = lito(taxable, rules)
    levy = medicare_levy(taxable, inputs.is_medicare_exempt, inputs.dependent_count, rules)
    repayment = hecs_repayment(taxable, inputs.has_hecs_debt, rules)

    final_tax = max(ZERO, tax - offset + levy + repayment)
    effective = final_tax / taxable * _HUNDRED if taxable > ZERO else ZERO

    return TaxResult(
        tax_year=rules.label,
        total_employment_income=total_employment,
        total_business_income=total_business,
        total_income=total_income,
        work_from_home_deduction=wfh,
        total_manual_deductions=manual,
        total_deductions=total_deductions,
        taxable_income=taxable,
        gross_tax=tax,
        lito=offset,
        medicare_levy=levy,
        hecs_repayment=repayment,
        final_tax=final_tax,
        tax_withheld=inputs.tax_withheld,
        refund_or_owing=inputs.tax_withheld - final_tax,
        effective_tax_rate=effective,
        marginal_rate=marginal_rate(taxable, rules),
        deduction_breakdown=inputs.deductions.category_totals(),
    )
