"""Smoke tests for chart functions — each returns a go.Figure with expected traces."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import plotly.graph_objects as go
import pytest
from app.components.charts import (
    deductions_pie_chart,
    history_chart,
    tax_curve_chart,
    tax_rate_chart,
    tax_waterfall_chart,
)
from app.components.theme import outcome_color, register_theme

from taxmate.analytics.curves import income_grid, tax_curve
from taxmate.config.defaults import (
    low_income_scenario,
    mixed_income_scenario,
    single_salary_scenario,
)
from taxmate.core.engine import estimate
from taxmate.io.report import OWING_COLOR, REFUND_COLOR
from taxmate.io.store import SavedCalculation
from taxmate.taxes.year import TaxYearRules

# Register theme once for all tests
register_theme()


class TestWaterfall:
    def test_steps(self, rules: TaxYearRules) -> None:
        fig = tax_waterfall_chart(estimate(single_salary_scenario(), rules))
        assert isinstance(fig, go.Figure)
        trace = fig.data[0]
        assert list(trace.x)[-1] == "Tax Owing"
        assert "HECS-HELP" not in list(trace.x)

    def test_offset_limited_to_tax(self, rules: TaxYearRules) -> None:
        fig = tax_waterfall_chart(estimate(low_income_scenario(), rules))
        values = dict(zip(fig.data[0].x, fig.data[0].y))
        assert values["Low income offset"] == pytest.approx(0.0)

    def test_hecs_step(self, rules: TaxYearRules) -> None:
        fig = tax_waterfall_chart(estimate(mixed_income_scenario(), rules))
        assert "HECS-HELP" in list(fig.data[0].x)


class TestDeductionsPie:
    def test_categories(self, rules: TaxYearRules) -> None:
        fig = deductions_pie_chart(estimate(mixed_income_scenario(), rules))
        labels = list(fig.data[0].labels)
        assert "Self-Education Expenses" in labels
        assert "Work From Home" in labels

    def test_no_deductions(self, rules: TaxYearRules) -> None:
        fig = deductions_pie_chart(estimate(single_salary_scenario(), rules))
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "No deductions claimed"


class TestCurveCharts:
    def test_tax_curve(self, rules: TaxYearRules) -> None:
        curve = tax_curve(income_grid(stop=100_000, step=10_000), rules=rules)
        fig = tax_curve_chart(curve, income=75_000)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 2
        assert len(fig.layout.shapes) == 1

    def test_tax_curve_with_hecs(self, rules: TaxYearRules) -> None:
        curve = tax_curve(
            income_grid(stop=100_000, step=10_000), mixed_income_scenario(), rules
        )
        assert len(tax_curve_chart(curve).data) == 3

    def test_rate_chart(self, rules: TaxYearRules) -> None:
        curve = tax_curve(income_grid(stop=100_000, step=10_000), rules=rules)
        fig = tax_rate_chart(curve)
        assert len(fig.data) == 2


class TestHistoryChart:
    def test_bars_coloured_by_outcome(self, rules: TaxYearRules) -> None:
        now = datetime.now(timezone.utc)
        records = [
            SavedCalculation(
                id=str(i),
                name=name,
                saved_at=now + timedelta(minutes=i),
                inputs=inputs,
                result=estimate(inputs, rules),
            )
            for i, (name, inputs) in enumerate(
                [("owing", single_salary_scenario()), ("nil", low_income_scenario())]
            )
        ]
        fig = history_chart(records)
        assert list(fig.data[0].x) == ["owing", "nil"]
        assert list(fig.data[0].marker.color) == [OWING_COLOR, REFUND_COLOR]

    def test_outcome_color(self) -> None:
        assert outcome_color(0) == REFUND_COLOR
        assert outcome_color(-1) == OWING_COLOR
