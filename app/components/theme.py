"""Custom Plotly theme for taxmate charts."""

from __future__ import annotations

import plotly.graph_objects as go
import plotly.io as pio

from taxmate.io.report import OWING_COLOR, REFUND_COLOR

PRIMARY_COLOR = "#4A90E2"
TAKE_HOME_COLOR = "#3CB44B"

# One colour per tax component, in the order they appear on a result.
COMPONENT_COLORS = {
    "gross_tax": "#4363D8",
    "lito": "#3CB44B",
    "medicare_levy": "#F58231",
    "hecs_repayment": "#911EB4",
    "final_tax": "#E6194B",
}

COLOR_SEQUENCE = [
    "#4A90E2",  # blue
    "#F58231",  # orange
    "#3CB44B",  # green
    "#911EB4",  # purple
    "#42D4F4",  # cyan
    "#F032E6",  # magenta
]

_FONT_FAMILY = "Inter, -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif"


def outcome_color(refund_or_owing: float) -> str:
    """Green for a refund (including break-even), red for an amount owing."""
    return REFUND_COLOR if refund_or_owing >= 0 else OWING_COLOR


def add_income_vline(fig: go.Figure, income: float, label: str = "Your income") -> None:
    """Mark the user's own income on an income-axis chart."""
    fig.add_vline(
        x=income,
        line_dash="dash",
        line_color="#9E9E9E",
        line_width=1.5,
        annotation_text=label,
        annotation_font_size=11,
        annotation_font_color="#757575",
    )


def register_theme() -> None:
    """Register and activate the taxmate Plotly template."""
    taxmate_layout = go.Layout(
        font=dict(family=_FONT_FAMILY, size=13),
        title_font=dict(size=16),
        colorway=COLOR_SEQUENCE,
        plot_bgcolor="white",
        paper_bgcolor="white",
        xaxis=dict(gridcolor="#E5E5E5", zerolinecolor="#BDBDBD", zerolinewidth=1),
        yaxis=dict(gridcolor="#E5E5E5", zerolinecolor="#BDBDBD", zerolinewidth=1),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
        margin=dict(l=60, r=20, t=60, b=40),
    )

    pio.templates["taxmate"] = go.layout.Template(layout=taxmate_layout)
    pio.templates.default = "taxmate"
