"""Default inputs and worked example scenarios for taxmate."""

from __future__ import annotations

from decimal import Decimal

from taxmate.config.schema import Deductions, TaxInputs


def default_inputs() -> TaxInputs:
    """Empty inputs: no income, no deductions, no special circumstances."""
    return TaxInputs()


def single_salary_scenario() -> TaxInputs:
    """A single $75,000 salary with $15,000 withheld and nothing else."""
    return TaxInputs(
        employment_incomes=(Decimal("75000"),),
        tax_withheld=Decimal("15000"),
    )


def low_income_scenario() -> TaxInputs:
    """$10,000 of wages: below the tax-free threshold, nothing withheld."""
    return TaxInputs(employment_incomes=(Decimal("10000"),))


def work_from_home_scenario() -> TaxInputs:
    """The single-salary scenario plus 400 hours worked from home."""
    return single_salary_scenario().model_copy(update={"work_from_home_hours": Decimal("400")})


def mixed_income_scenario() -> TaxInputs:
    """Two jobs, contractor income, itemised deductions and a HECS-HELP debt."""
    return TaxInputs(
        employment_incomes=(Decimal("62000"), Decimal("18500")),
        business_income=Decimal("12000"),
        tax_withheld=Decimal("17800"),
        deductions=Deductions.model_validate(
            {
                "work_related": {"travel": "850", "equipment": "1200"},
                "self_education": {"course_fees": "2400", "textbooks": "180"},
                "donations": {"charitable": "300"},
                "other": {"tax_agent": "250", "income_protection": "640"},
            }
        ),
        work_from_home_hours=Decimal("520"),
        has_hecs_debt=True,
    )


SCENARIOS = {
    "empty": default_inputs,
    "single-salary": single_salary_scenario,
    "low-income": low_income_scenario,
    "work-from-home": work_from_home_scenario,
    "mixed-income": mixed_income_scenario,
}
