"""Chart components for the Streamlit app."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import plotly.graph_objects as go

from app.components.theme import (
    COMPONENT_COLORS,
    PRIMARY_COLOR,
    TAKE_HOME_COLOR,
    add_income_vline,
    outcome_color,
)
from taxmate.analytics.curves import TaxCurve
from taxmate.config.schema import Deductions
from taxmate.core.engine import TaxResult
from taxmate.io.report import outcome_label
from taxmate.io.store import SavedCalculation


def tax_waterfall_chart(result: TaxResult) -> go.Figure:
    """Waterfall from income tax, through offsets and levies, to refund or owing."""
    # The offset shown is the part actually used; final tax never goes below zero.
    charged = result.gross_tax + result.medicare_levy + result.hecs_repayment
    steps: list[tuple[str, float, str]] = [
        ("Income tax", float(result.gross_tax), "relative"),
        ("Medicare levy", float(result.medicare_levy), "relative"),
    ]
    if result.hecs_repayment > 0:
        steps.append(("HECS-HELP", float(result.hecs_repayment), "relative"))
    steps += [
        ("Low income offset", float(result.final_tax - charged), "relative"),
        ("Final tax", float(result.final_tax), "total"),
        ("Tax withheld", -float(result.tax_withheld), "relative"),
    ]

    labels = [s[0] for s in steps]
    values = [s[1] for s in steps]
    measures = [s[2] for s in steps]
    # Totals are running sums: owing ends above zero, a refund below.
    labels.append(outcome_label(result))
    values.append(float(-result.refund_or_owing))
    measures.append("total")

    fig = go.Figure(
        go.Waterfall(
            x=labels,
            y=values,
            measure=measures,
            connector=dict(line=dict(color="#BDBDBD")),
            increasing=dict(marker=dict(color=COMPONENT_COLORS["gross_tax"])),
            decreasing=dict(marker=dict(color=COMPONENT_COLORS["lito"])),
            totals=dict(marker=dict(color=outcome_color(float(result.refund_or_owing)))),
        )
    )
    fig.update_layout(
        title="From Income Tax to Your Outcome",
        yaxis_title="Amount ($)",
        yaxis_tickformat="$,.0f",
        showlegend=False,
        height=420,
    )
    return fig


def deductions_pie_chart(result: TaxResult) -> go.Figure:
    """Share of each deduction category in total deductions."""
    categories = dict(Deductions().categories())
    labels = [categories[name].LABEL for name in result.deduction_breakdown]
    values = [float(v) for v in result.deduction_breakdown.values()]
    labels.append("Work From Home")
    values.append(float(result.work_from_home_deduction))

    shown = [(label, value) for label, value in zip(labels, values) if value > 0]
    fig = go.Figure()
    if shown:
        fig.add_trace(
            go.Pie(
                labels=[label for label, _ in shown],
                values=[value for _, value in shown],
                hole=0.45,
                textinfo="label+percent",
            )
        )
    else:
        fig.add_annotation(text="No deductions claimed", showarrow=False, font=dict(size=14))
        fig.update_xaxes(visible=False)
        fig.update_yaxes(visible=False)
    fig.update_layout(title="Deductions by Category", height=400)
    return fig


def tax_curve_chart(curve: TaxCurve, income: float | None = None) -> go.Figure:
    """Final tax and take-home pay across the income grid."""
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=curve.incomes,
            y=curve.take_home,
            mode="lines",
            line=dict(color=TAKE_HOME_COLOR, width=2),
            name="Take-home",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=curve.incomes,
            y=curve.final_tax,
            mode="lines",
            line=dict(color=COMPONENT_COLORS["final_tax"], width=2),
            name="Final tax",
        )
    )
    if np.any(curve.hecs_repayment > 0):
        fig.add_trace(
            go.Scatter(
                x=curve.incomes,
                y=curve.hecs_repayment,
                mode="lines",
                line=dict(color=COMPONENT_COLORS["hecs_repayment"], width=1, dash="dot"),
                name="HECS-HELP",
            )
        )
    if income is not None:
        add_income_vline(fig, income)

    fig.update_layout(
        title="Tax and Take-home Pay by Income",
        xaxis_title="Income ($)",
        yaxis_title="Amount ($)",
        xaxis_tickformat="$,.0f",
        yaxis_tickformat="$,.0f",
        hovermode="x unified",
        height=450,
    )
    return fig


def tax_rate_chart(curve: TaxCurve, income: float | None = None) -> go.Figure:
    """Effective and marginal tax rates across the income grid."""
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=curve.incomes,
            y=curve.effective_rate,
            mode="lines",
            line=dict(color=PRIMARY_COLOR, width=2),
            name="Effective rate",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=curve.incomes,
            y=curve.marginal_rate,
            mode="lines",
            line=dict(color="#9E9E9E", width=1, shape="hv"),
            name="Marginal bracket rate",
        )
    )
    if income is not None:
        add_income_vline(fig, income)

    fig.update_layout(
        title="Tax Rates by Income",
        xaxis_title="Income ($)",
        yaxis_title="Rate (%)",
        xaxis_tickformat="$,.0f",
        hovermode="x unified",
        height=400,
    )
    return fig


def history_chart(records: Sequence[SavedCalculation]) -> go.Figure:
    """Refund (positive) or amount owing (negative) of each saved calculation."""
    ordered = sorted(records, key=lambda r: r.saved_at)
    outcomes = [float(r.result.refund_or_owing) for r in ordered]
    fig = go.Figure(
        go.Bar(
            x=[r.display_name for r in ordered],
            y=outcomes,
            marker_color=[outcome_color(v) for v in outcomes],
        )
    )
    fig.add_hline(y=0, line_dash="dot", line_color="#BDBDBD", line_width=1)
    fig.update_layout(
        title="Saved Calculations",
        yaxis_title="Refund / Owing ($)",
        yaxis_tickformat="$,.0f",
        showlegend=False,
        height=max(350, 40 * len(ordered)),
    )
    return fig
