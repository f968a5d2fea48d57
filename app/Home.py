"""taxmate — Australian income tax estimator."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the repo root is on sys.path so `from app.components...` imports work
# when running `streamlit run app/Home.py`.
_root = str(Path(__file__).resolve().parent.parent)
if _root not in sys.path:
    sys.path.insert(0, _root)

import streamlit as st

st.set_page_config(
    page_title="taxmate",
    page_icon="🧾",
    layout="wide",
    initial_sidebar_state="expanded",
)

from app.components.theme import register_theme
from taxmate.config.defaults import SCENARIOS
from taxmate.config.settings import get_settings
from taxmate.io.report import format_currency, outcome_label
from taxmate.io.store import ResultStore
from taxmate.utils.exceptions import StoreError
from taxmate.utils.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.log_format)
register_theme()

st.title("taxmate")
st.subheader(f"Australian Tax Estimator — {settings.tax_year} income year")

st.markdown(
    """
    Estimate your tax refund or the amount you owe from your income,
    deductions and circumstances.

    ---

    ### How it works

    1. **Calculator** — Enter your jobs, ABN income, tax withheld, deductions
       and personal details, then see an itemised estimate
    2. **Saved Calculations** — Review, rename, export or delete past estimates

    ---

    ### Important Disclaimer

    This is an **estimate only** and is **not tax advice**. It covers the
    common cases: bracket tax, the low income tax offset, the Medicare levy
    and HECS-HELP repayments. Lodge your return with the ATO to confirm your
    actual outcome.

    ---
    """
)

st.subheader("Example Scenarios")
cols = st.columns(len(SCENARIOS) - 1)
for col, (name, build) in zip(cols, [s for s in SCENARIOS.items() if s[0] != "empty"]):
    with col:
        if st.button(name.replace("-", " ").title()):
            st.session_state["scenario"] = build()
            st.success("Loaded — open the Calculator page.")

st.subheader("Recent Calculations")
try:
    records = ResultStore(settings.store_path).all()[:5]
except StoreError as exc:
    st.error(str(exc))
    records = []

if not records:
    st.info("No saved calculations yet.")
for record in records:
    result = record.result
    col1, col2, col3 = st.columns([3, 2, 2])
    col1.markdown(f"**{record.display_name}**  \n{record.saved_at:%d %b %Y %H:%M}")
    col2.metric("Taxable Income", format_currency(result.taxable_income, whole_dollars=True))
    col3.metric(outcome_label(result), format_currency(abs(result.refund_or_owing)))
