"""Pydantic v2 models for the values entered into a tax estimate."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from taxmate.utils.money import ZERO, to_amount, to_count

# Missing or non-numeric values become zero instead of failing validation.
Amount = Annotated[Decimal, BeforeValidator(to_amount)]
Count = Annotated[int, BeforeValidator(to_count)]


class DeductionCategory(BaseModel):
    """A fixed set of deduction subcategories, each a dollar amount."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    LABEL: ClassVar[str] = ""
    SUBCATEGORY_LABELS: ClassVar[dict[str, str]] = {}

    def items(self) -> list[tuple[str, Decimal]]:
        """``(subcategory, amount)`` pairs in declaration order."""
        return [(name, getattr(self, name)) for name in type(self).model_fields]

    def total(self) -> Decimal:
        """Exact sum of every subcategory."""
        return sum((amount for _, amount in self.items()), ZERO)


class WorkRelatedDeductions(DeductionCategory):
    LABEL: ClassVar[str] = "Work-Related Expenses"
    SUBCATEGORY_LABELS: ClassVar[dict[str, str]] = {
        "travel": "Travel Expenses",
        "equipment": "Equipment & Tools",
        "uniforms": "Uniforms & Protective Clothing",
        "memberships": "Professional Memberships",
        "other": "Other Work Expenses",
    }

    travel: Amount = ZERO
    equipment: Amount = ZERO
    uniforms: Amount = ZERO
    memberships: Amount = ZERO
    other: Amount = ZERO


class SelfEducationDeductions(DeductionCategory):
    LABEL: ClassVar[str] = "Self-Education Expenses"
    SUBCATEGORY_LABELS: ClassVar[dict[str, str]] = {
        "course_fees": "Course Fees & Tuition",
        "textbooks": "Textbooks & Materials",
        "conferences": "Conferences & Seminars",
        "certifications": "Professional Certifications",
        "other": "Other Education Expenses",
    }

    course_fees: Amount = ZERO
    textbooks: Amount = ZERO
    conferences: Amount = ZERO
    certifications: Amount = ZERO
    other: Amount = ZERO


class DonationDeductions(DeductionCategory):
    LABEL: ClassVar[str] = "Charitable Donations"
    SUBCATEGORY_LABELS: ClassVar[dict[str, str]] = {
        "charitable": "Charitable Donations",
        "disaster_relief": "Disaster Relief Donations",
        "religious": "Religious Organisation Donations",
        "other": "Other Donations",
    }

    charitable: Amount = ZERO
    disaster_relief: Amount = ZERO
    religious: Amount = ZERO
    other: Amount = ZERO


class OtherDeductions(DeductionCategory):
    LABEL: ClassVar[str] = "Other Deductions"
    SUBCATEGORY_LABELS: ClassVar[dict[str, str]] = {
        "investment": "Investment Expenses",
        "tax_agent": "Tax Agent & Accounting Fees",
        "income_protection": "Income Protection Insurance",
        "bank_fees": "Bank Fees & Investment Charges",
        "other": "Other Allowable Deductions",
    }

    investment: Amount = ZERO
    tax_agent: Amount = ZERO
    income_protection: Amount = ZERO
    bank_fees: Amount = ZERO
    other: Amount = ZERO


class Deductions(BaseModel):
    """All manually claimed deductions, grouped by category."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    work_related: WorkRelatedDeductions = Field(default_factory=WorkRelatedDeductions)
    self_education: SelfEducationDeductions = Field(default_factory=SelfEducationDeductions)
    donations: DonationDeductions = Field(default_factory=DonationDeductions)
    other: OtherDeductions = Field(default_factory=OtherDeductions)

    @field_validator("work_related", "self_education", "donations", "other", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def categories(self) -> list[tuple[str, DeductionCategory]]:
        """``(category, record)`` pairs in declaration order."""
        return [(name, getattr(self, name)) for name in type(self).model_fields]

    def category_totals(self) -> dict[str, Decimal]:
        """Total claimed per category."""
        return {name: category.total() for name, category in self.categories()}

    def total(self) -> Decimal:
        """Sum of every subcategory across all categories."""
        return sum(self.category_totals().values(), ZERO)


class TaxInputs(BaseModel):
    """Everything the engine needs for one estimate."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employment_incomes: tuple[Amount, ...] = Field(
        default=(), description="Salary and wages, one amount per job"
    )
    business_income: Amount = Field(default=ZERO, description="ABN / contractor income")
    tax_withheld: Amount = Field(default=ZERO, description="PAYG tax already withheld")
    deductions: Deductions = Field(default_factory=Deductions)
    work_from_home_hours: Amount = Field(default=ZERO, description="Hours worked from home")
    has_hecs_debt: bool = False
    is_medicare_exempt: bool = False
    dependent_count: Count = 0

    @field_validator("employment_incomes", mode="before")
    @classmethod
    def _listify_incomes(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (str, int, float, Decimal)):
            return (value,)
        return value

    @field_validator("deductions", mode="before")
    @classmethod
    def _none_is_no_deductions(cls, value: Any) -> Any:
        return {} if value is None else value
