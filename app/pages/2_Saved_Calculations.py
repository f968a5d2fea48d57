"""Saved Calculations page — review, rename, export and delete past estimates."""

from __future__ import annotations

import streamlit as st

from app.components.charts import history_chart
from app.components.theme import register_theme
from taxmate.config.settings import get_settings
from taxmate.io.report import (
    format_currency,
    format_percentage,
    outcome_label,
    render_csv,
    render_html,
    render_summary,
)
from taxmate.io.store import ResultStore
from taxmate.utils.exceptions import StoreError

st.set_page_config(page_title="Saved Calculations — taxmate", layout="wide")
register_theme()
st.title("Saved Calculations")

store = ResultStore(get_settings().store_path)

try:
    records = store.all()
    stats = store.stats()
except StoreError as exc:
    st.error(str(exc))
    st.stop()

if not records:
    st.info("No saved calculations yet. Use the Calculator page to create one.")
    st.stop()

col1, col2, col3, col4 = st.columns(4)
col1.metric("Calculations", stats.total_calculations)
col2.metric(f"Refunds ({stats.refund_count})", format_currency(stats.total_refunds, True))
col3.metric(f"Owing ({stats.owed_count})", format_currency(stats.total_owed, True))
col4.metric("Average Refund", format_currency(stats.average_refund, True))

st.plotly_chart(history_chart(records), use_container_width=True)

for record in records:
    result = record.result
    header = (
        f"{record.display_name} — {outcome_label(result)} "
        f"{format_currency(abs(result.refund_or_owing))}"
    )
    with st.expander(header):
        st.caption(
            f"Saved {record.saved_at:%d %b %Y %H:%M} UTC · "
            f"effective rate {format_percentage(result.effective_tax_rate)}"
        )
        st.code(render_summary(result, record.withholding_estimated), language=None)

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            new_name = st.text_input("Rename", value=record.name or "", key=f"name_{record.id}")
            if st.button("Save name", key=f"rename_{record.id}"):
                store.rename(record.id, new_name)
                st.rerun()
        with col2:
            st.download_button(
                "CSV",
                data=render_csv(result, on=record.saved_at.date()),
                file_name=f"tax_calculation_{record.id[:8]}.csv",
                mime="text/csv",
                key=f"csv_{record.id}",
            )
        with col3:
            st.download_button(
                "HTML report",
                data=render_html(
                    result,
                    record.inputs,
                    title=record.display_name,
                    on=record.saved_at.date(),
                    withholding_estimated=record.withholding_estimated,
                ),
                file_name=f"tax_report_{record.id[:8]}.html",
                mime="text/html",
                key=f"html_{record.id}",
            )
        with col4:
            if st.button("Load into calculator", key=f"load_{record.id}"):
                st.session_state["scenario"] = record.inputs
                st.success("Loaded — open the Calculator page.")
            if st.button("Delete", key=f"delete_{record.id}"):
                store.delete(record.id)
                st.rerun()

st.divider()
if st.button("Delete all saved calculations"):
    st.session_state["confirm_clear"] = True
if st.session_state.get("confirm_clear"):
    st.warning("This removes every saved calculation.")
    if st.button("Yes, delete everything", type="primary"):
        store.clear()
        st.session_state["confirm_clear"] = False
        st.rerun()
