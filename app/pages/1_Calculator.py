"""Calculator page — collect inputs, estimate, save and export."""

from __future__ import annotations

import streamlit as st

from app.components.charts import (
    deductions_pie_chart,
    tax_curve_chart,
    tax_rate_chart,
    tax_waterfall_chart,
)
from app.components.forms import deductions_section, details_section, income_section
from app.components.theme import outcome_color, register_theme
from taxmate.analytics.curves import income_grid, tax_curve
from taxmate.config.schema import TaxInputs
from taxmate.config.settings import get_settings
from taxmate.core.engine import estimate
from taxmate.io.forms import FormData, form_from_inputs, inputs_from_form
from taxmate.io.report import (
    format_currency,
    format_percentage,
    outcome_label,
    render_csv,
    render_html,
)
from taxmate.io.serialize import dump_inputs
from taxmate.io.store import ResultStore
from taxmate.taxes.year import load_tax_year
from taxmate.utils.exceptions import InputValidationError, StoreError

st.set_page_config(page_title="Calculator — taxmate", layout="wide")
register_theme()
st.title("Tax Calculator")

settings = get_settings()
rules = load_tax_year(settings.tax_year)

if "scenario" in st.session_state:
    st.session_state["form"] = form_from_inputs(st.session_state.pop("scenario"))
    st.session_state.pop("collected", None)

form: FormData = st.session_state.get("form", FormData())
errors: dict[str, str] = st.session_state.get("errors", {})

income_tab, deductions_tab, details_tab = st.tabs(["Income", "Deductions", "Your Details"])
with income_tab:
    form = income_section(form, errors)
with deductions_tab:
    form = deductions_section(form, errors)
with details_tab:
    form = details_section(form, errors)
st.session_state["form"] = form

if st.button("Calculate", type="primary"):
    try:
        st.session_state["collected"] = inputs_from_form(form, rules)
        st.session_state["errors"] = {}
    except InputValidationError as exc:
        st.session_state["errors"] = exc.errors
        st.session_state.pop("collected", None)
    st.rerun()

if errors:
    st.error("Please fix the highlighted fields: " + ", ".join(errors))

collected = st.session_state.get("collected")
if collected is not None:
    inputs: TaxInputs = collected.inputs
    result = estimate(inputs, rules)

    st.subheader("Your Estimate")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Taxable Income", format_currency(result.taxable_income))
    col2.metric("Final Tax", format_currency(result.final_tax))
    col3.metric("Effective Rate", format_percentage(result.effective_tax_rate))
    color = outcome_color(float(result.refund_or_owing))
    col4.markdown(
        f"{outcome_label(result)}<br>"
        f"<span style='color:{color}; font-size:1.8em; font-weight:600'>"
        f"{format_currency(abs(result.refund_or_owing))}</span>",
        unsafe_allow_html=True,
    )
    if collected.withholding_estimated:
        st.warning(
            "Tax withheld was estimated at "
            f"{format_currency(result.tax_withheld, whole_dollars=True)}. "
            "Check your income statement for the actual amount."
        )

    with st.expander("Full breakdown", expanded=True):
        rows = {
            "Employment income": result.total_employment_income,
            "Business income": result.total_business_income,
            "Work from home deduction": result.work_from_home_deduction,
            "Other deductions": result.total_manual_deductions,
            "Income tax": result.gross_tax,
            "Low income tax offset": -result.lito,
            "Medicare levy": result.medicare_levy,
        }
        if result.hecs_repayment > 0:
            rows["HECS-HELP repayment"] = result.hecs_repayment
        rows["Tax withheld"] = result.tax_withheld
        st.table({"Item": list(rows), "Amount": [format_currency(v) for v in rows.values()]})

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(tax_waterfall_chart(result), use_container_width=True)
    with col2:
        st.plotly_chart(deductions_pie_chart(result), use_container_width=True)

    st.subheader("How Your Tax Changes With Income")
    top = max(250_000.0, float(result.total_income) * 1.5)
    curve = tax_curve(income_grid(stop=top, step=top / 250), inputs, rules)
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(
            tax_curve_chart(curve, float(result.total_income)), use_container_width=True
        )
    with col2:
        st.plotly_chart(
            tax_rate_chart(curve, float(result.total_income)), use_container_width=True
        )

    st.subheader("Save & Export")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        name = st.text_input("Name", placeholder="e.g. 2024-25 draft")
        if st.button("Save Calculation"):
            try:
                record = ResultStore(settings.store_path).save(
                    inputs, result, name, collected.withholding_estimated
                )
                st.success(f"Saved as {record.display_name}")
            except StoreError as exc:
                st.error(str(exc))
    with col2:
        st.download_button(
            "Download Summary (CSV)",
            data=render_csv(result),
            file_name="tax_calculation.csv",
            mime="text/csv",
        )
    with col3:
        st.download_button(
            "Download Report (HTML)",
            data=render_html(
                result, inputs, withholding_estimated=collected.withholding_estimated
            ),
            file_name="tax_report.html",
            mime="text/html",
        )
    with col4:
        st.download_button(
            "Download Inputs (JSON)",
            data=dump_inputs(inputs),
            file_name="tax_inputs.json",
            mime="application/json",
        )
