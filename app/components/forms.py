"""Reusable form components for the Streamlit app."""

from __future__ import annotations

import streamlit as st

from taxmate.config.schema import Deductions
from taxmate.io.forms import FormData
from taxmate.io.report import format_currency
from taxmate.taxes.deductions import estimated_tax_saving
from taxmate.utils.money import to_amount

MAX_JOBS = 5


def _field_error(errors: dict[str, str], key: str) -> None:
    if key in errors:
        st.caption(f":red[{errors[key]}]")


def income_section(form: FormData, errors: dict[str, str]) -> FormData:
    """Job incomes, ABN income and tax withheld."""
    n_jobs = st.number_input(
        "Number of jobs", min_value=1, max_value=MAX_JOBS, value=max(1, len(form.job_incomes))
    )
    incomes: list[str] = []
    for i in range(int(n_jobs)):
        current = form.job_incomes[i] if i < len(form.job_incomes) else ""
        incomes.append(
            st.text_input(f"Job {i + 1} income (TFN) $", value=current, key=f"job_income_{i}")
        )
        _field_error(errors, f"job_incomes.{i}")

    col1, col2 = st.columns(2)
    with col1:
        abn_income = st.text_input("ABN / freelance income $", value=form.abn_income)
        _field_error(errors, "abn_income")
    with col2:
        abn = st.text_input("ABN (optional)", value=form.abn)
        _field_error(errors, "abn")

    estimate = st.checkbox(
        "I don't know how much tax was withheld (estimate it for me)",
        value=form.estimate_withholding,
    )
    tax_withheld = form.tax_withheld
    if not estimate:
        tax_withheld = st.text_input("Tax withheld (PAYG) $", value=form.tax_withheld)
        _field_error(errors, "tax_withheld")

    return form.model_copy(
        update={
            "job_incomes": incomes,
            "abn_income": abn_income,
            "abn": abn,
            "tax_withheld": tax_withheld,
            "estimate_withholding": estimate,
        }
    )


def deductions_section(form: FormData, errors: dict[str, str]) -> FormData:
    """One expander per deduction category, plus work-from-home hours."""
    total_income = sum((to_amount(v) for v in form.job_incomes), to_amount(form.abn_income))
    deductions: dict[str, dict[str, str]] = {}

    for name, category in Deductions().categories():
        entered = form.deductions.get(name, {})
        values: dict[str, str] = {}
        with st.expander(category.LABEL):
            for sub, label in category.SUBCATEGORY_LABELS.items():
                values[sub] = st.text_input(
                    f"{label} $", value=entered.get(sub, ""), key=f"ded_{name}_{sub}"
                )
                key = f"deductions.{name}.{sub}"
                if key in errors:
                    _field_error(errors, key)
                elif (amount := to_amount(values[sub])) > 0:
                    saving = estimated_tax_saving(amount, total_income)
                    st.caption(f"Estimated tax saving: {format_currency(saving, True)}")
        deductions[name] = {sub: v for sub, v in values.items() if v.strip()}

    hours = st.text_input(
        "Hours worked from home",
        value=form.work_from_home_hours,
        help="Claimed at the fixed rate of $0.67 per hour.",
    )
    _field_error(errors, "work_from_home_hours")

    return form.model_copy(
        update={
            "deductions": {k: v for k, v in deductions.items() if v},
            "work_from_home_hours": hours,
        }
    )


def details_section(form: FormData, errors: dict[str, str]) -> FormData:
    """HECS-HELP debt, Medicare exemption and dependants."""
    hecs = st.checkbox("I have a HECS-HELP debt", value=form.hecs_debt)
    exempt = st.checkbox("I am exempt from the Medicare levy", value=form.medicare_exemption)
    has_dependents = st.checkbox("I have dependent children", value=form.has_dependents)
    dependents = form.dependents
    if has_dependents:
        dependents = st.text_input("Number of dependants", value=form.dependents)
        _field_error(errors, "dependents")

    return form.model_copy(
        update={
            "hecs_debt": hecs,
            "medicare_exemption": exempt,
            "has_dependents": has_dependents,
            "dependents": dependents,
        }
    )
