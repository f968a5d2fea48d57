"""Input collection: validate raw form values and build ``TaxInputs``.

Form values arrive as the strings a user typed. Validation here is strict
(negative or malformed numbers are reported back per field); once a form
passes, it is handed to the engine as a ``TaxInputs`` value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from taxmate.config.schema import Deductions, TaxInputs
from taxmate.taxes.payg import WithholdingEstimate, estimate_withholding
from taxmate.taxes.year import TaxYearRules
from taxmate.utils.exceptions import InputValidationError

INCOME_MAX = Decimal("10000000")
HOURS_MAX = Decimal("8760")
DEPENDENTS_MAX = Decimal("20")

REQUIRED_FIELD = "This field is required"
INVALID_NUMBER = "Please enter a valid number"
NEGATIVE_VALUE = "Value cannot be negative"
WHOLE_NUMBER = "Please enter a whole number"
POSITIVE_INCOME = "Must be a valid number greater than 0"
INCOME_REQUIRED = "At least one income source is required"
ABN_OR_JOB_REQUIRED = "Enter ABN income or at least one job income"
WITHHELD_REQUIRED = "Tax withheld is required"
WITHHELD_INVALID = "Must be a valid number (0 or greater)"

_ABN_WEIGHTS = (10, 1, 3, 5, 7, 9, 11, 13, 15, 17, 19)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        raise ValueError("expected text or a number")
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return value


Text = Annotated[str, BeforeValidator(_as_text)]


class FormData(BaseModel):
    """Raw values from the calculator form, before any parsing."""

    model_config = ConfigDict(extra="forbid")

    job_incomes: list[Text] = Field(default_factory=lambda: [""])
    abn_income: Text = ""
    abn: Text = Field(default="", description="Australian Business Number, if any")
    tax_withheld: Text = ""
    estimate_withholding: bool = Field(
        default=False, description="Pre-fill tax withheld with the PAYG estimate"
    )
    deductions: dict[str, dict[str, Text]] = Field(default_factory=dict)
    work_from_home_hours: Text = ""
    hecs_debt: bool = False
    medicare_exemption: bool = False
    has_dependents: bool = False
    dependents: Text = ""


@dataclass(frozen=True)
class CollectedInputs:
    """Validated engine inputs plus how the withholding figure was obtained."""

    inputs: TaxInputs
    withholding_estimated: bool = False
    withholding_estimate: WithholdingEstimate | None = None


def _parse(value: str) -> Decimal | None:
    cleaned = value.strip().replace(",", "").lstrip("$")
    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def validate_number(
    value: Any,
    *,
    minimum: Decimal = Decimal("0"),
    maximum: Decimal = INCOME_MAX,
    required: bool = False,
    allow_decimals: bool = True,
    field_name: str = "Value",
) -> str | None:
    """Return an error message for ``value``, or ``None`` if it is acceptable."""
    text = _as_text(value).strip()
    if not text:
        return REQUIRED_FIELD if required else None

    number = _parse(text)
    if number is None:
        return INVALID_NUMBER
    if number < 0:
        return NEGATIVE_VALUE
    if not allow_decimals and number != number.to_integral_value():
        return WHOLE_NUMBER
    if number < minimum:
        return f"{field_name} must be at least {minimum}"
    if number > maximum:
        return f"{field_name} cannot exceed {maximum:,}"
    return None


def validate_income(value: Any, required: bool = False) -> str | None:
    return validate_number(value, required=required, field_name="Income")


def validate_deduction(value: Any, required: bool = False) -> str | None:
    return validate_number(value, required=required, field_name="Deduction")


def validate_hours(value: Any, required: bool = False) -> str | None:
    return validate_number(
        value, maximum=HOURS_MAX, required=required, allow_decimals=False, field_name="Hours"
    )


def validate_dependents(value: Any, required: bool = False) -> str | None:
    return validate_number(
        value,
        maximum=DEPENDENTS_MAX,
        required=required,
        allow_decimals=False,
        field_name="Number of dependents",
    )


def validate_abn(value: Any, required: bool = False) -> str | None:
    """Check an 11-digit ABN against the ATO weighted checksum."""
    text = _as_text(value).strip()
    if not text:
        return REQUIRED_FIELD if required else None

    digits = re.sub(r"\D", "", text)
    if len(digits) != 11:
        return "ABN must be 11 digits"
    numbers = [int(d) for d in digits]
    numbers[0] -= 1
    if sum(n * w for n, w in zip(numbers, _ABN_WEIGHTS)) % 89 != 0:
        return "Please enter a valid ABN"
    return None


def _positive_income_error(value: str) -> str | None:
    error = validate_income(value)
    if error is not None:
        return error
    number = _parse(value)
    if number is None or number <= 0:
        return POSITIVE_INCOME
    return None


def validate_form(form: FormData) -> dict[str, str]:
    """Validate every field of ``form``.

    Returns:
        Mapping of field key (``"job_incomes.0"``, ``"deductions.donations.other"``,
        ...) to message. Empty when the form can be estimated.
    """
    errors: dict[str, str] = {}

    has_job_entry = False
    has_valid_income = False
    for i, income in enumerate(form.job_incomes):
        if not income.strip():
            continue
        has_job_entry = True
        error = _positive_income_error(income)
        if error:
            errors[f"job_incomes.{i}"] = error
        else:
            has_valid_income = True

    if form.abn_income.strip():
        error = _positive_income_error(form.abn_income)
        if error:
            errors["abn_income"] = error
        else:
            has_valid_income = True

    if not has_valid_income:
        if not has_job_entry:
            errors.setdefault("job_incomes.0", INCOME_REQUIRED)
        if not form.abn_income.strip():
            errors["abn_income"] = ABN_OR_JOB_REQUIRED

    if form.abn.strip():
        error = validate_abn(form.abn)
        if error:
            errors["abn"] = error

    if not form.estimate_withholding:
        if not form.tax_withheld.strip():
            errors["tax_withheld"] = WITHHELD_REQUIRED
        elif validate_income(form.tax_withheld):
            errors["tax_withheld"] = WITHHELD_INVALID

    for category, values in form.deductions.items():
        if category not in Deductions.model_fields:
            errors[f"deductions.{category}"] = "Unknown deduction category"
            continue
        known = type(getattr(Deductions(), category)).model_fields
        for sub, value in values.items():
            key = f"deductions.{category}.{sub}"
            if sub not in known:
                errors[key] = "Unknown deduction type"
            elif error := validate_deduction(value):
                errors[key] = error

    if error := validate_hours(form.work_from_home_hours):
        errors["work_from_home_hours"] = error

    if form.has_dependents and (error := validate_dependents(form.dependents)):
        errors["dependents"] = error

    return errors


def _text(amount: Decimal) -> str:
    return "" if amount == 0 else f"{amount.normalize():f}"


def form_from_inputs(inputs: TaxInputs) -> FormData:
    """Pre-fill a form from existing inputs, e.g. to edit a saved calculation."""
    deductions = {
        name: {sub: _text(amount) for sub, amount in category.items() if amount}
        for name, category in inputs.deductions.categories()
    }
    return FormData(
        job_incomes=[_text(v) for v in inputs.employment_incomes] or [""],
        abn_income=_text(inputs.business_income),
        tax_withheld=f"{inputs.tax_withheld.normalize():f}",
        deductions={k: v for k, v in deductions.items() if v},
        work_from_home_hours=_text(inputs.work_from_home_hours),
        hecs_debt=inputs.has_hecs_debt,
        medicare_exemption=inputs.is_medicare_exempt,
        has_dependents=inputs.dependent_count > 0,
        dependents=str(inputs.dependent_count) if inputs.dependent_count else "",
    )


def inputs_from_form(form: FormData, rules: TaxYearRules | None = None) -> CollectedInputs:
    """Validate ``form`` and convert it to engine inputs.

    When ``form.estimate_withholding`` is set, tax withheld is filled from the
    advisory PAYG estimate on the job incomes.

    Raises:
        InputValidationError: If any field is invalid.
    """
    errors = validate_form(form)
    if errors:
        raise InputValidationError(errors)

    estimate: WithholdingEstimate | None = None
    tax_withheld: Any = form.tax_withheld
    if form.estimate_withholding:
        estimate = estimate_withholding(form.job_incomes, rules)
        tax_withheld = estimate.amount

    inputs = TaxInputs(
        employment_incomes=tuple(v for v in form.job_incomes if v.strip()),
        business_income=form.abn_income,
        tax_withheld=tax_withheld,
        deductions=Deductions.model_validate(form.deductions),
        work_from_home_hours=form.work_from_home_hours,
        has_hecs_debt=form.hecs_debt,
        is_medicare_exempt=form.medicare_exemption,
        dependent_count=form.dependents if form.has_dependents else 0,
    )
    return CollectedInputs(
        inputs=inputs,
        withholding_estimated=estimate is not None,
        withholding_estimate=estimate,
    )
