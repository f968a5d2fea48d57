"""Human-readable and exportable renderings of a tax result.

This is the only place amounts are rounded: the engine works at full
precision and every renderer rounds half-up to cents (or whole dollars) on
the way out.
"""

from __future__ import annotations

import csv
import html
import io
from datetime import date
from decimal import Decimal

from taxmate.config.schema import TaxInputs
from taxmate.core.engine import TaxResult
from taxmate.utils.money import DOLLAR, ZERO, round_money

CSV_HEADERS = [
    "Date",
    "TFN Income",
    "ABN Income",
    "WFH Deduction",
    "Manual Deductions",
    "Total Deductions",
    "Taxable Income",
    "Gross Tax",
    "LITO",
    "Medicare",
    "HECS",
    "Final Tax",
    "Refund/Owing",
]

REFUND_COLOR = "#28a745"
OWING_COLOR = "#dc3545"


def format_currency(amount: Decimal, whole_dollars: bool = False) -> str:
    """Format as Australian dollars, e.g. ``$1,234.56`` or ``-$1,342.00``."""
    rounded = round_money(amount, DOLLAR if whole_dollars else Decimal("0.01"))
    sign = "-" if rounded < ZERO else ""
    digits = f"{abs(rounded):,.0f}" if whole_dollars else f"{abs(rounded):,.2f}"
    return f"{sign}${digits}"


def format_percentage(value: Decimal, decimals: int = 1) -> str:
    """Format a percentage value (already scaled to 0-100)."""
    return f"{round_money(value, Decimal(1).scaleb(-decimals)):.{decimals}f}%"


def outcome_label(result: TaxResult) -> str:
    return "Tax Refund" if result.is_refund else "Tax Owing"


def _cents(amount: Decimal) -> str:
    return f"{round_money(amount):.2f}"


def render_summary(result: TaxResult, withholding_estimated: bool = False) -> str:
    """Plain-text breakdown for terminals and logs."""
    withheld_label = "Tax withheld (PAYG" + (", estimated)" if withholding_estimated else ")")
    rows: list[tuple[str, str]] = [
        ("Employment income", format_currency(result.total_employment_income)),
        ("Business income", format_currency(result.total_business_income)),
        ("Total income", format_currency(result.total_income)),
        ("Work from home deduction", format_currency(result.work_from_home_deduction)),
        ("Other deductions", format_currency(result.total_manual_deductions)),
        ("Total deductions", format_currency(result.total_deductions)),
        ("Taxable income", format_currency(result.taxable_income)),
        ("Income tax", format_currency(result.gross_tax)),
        ("Low income tax offset", "-" + format_currency(result.lito)),
        ("Medicare levy", format_currency(result.medicare_levy)),
    ]
    if result.hecs_repayment > ZERO:
        rows.append(("HECS-HELP repayment", format_currency(result.hecs_repayment)))
    rows += [
        ("Final tax", format_currency(result.final_tax)),
        (withheld_label, format_currency(result.tax_withheld)),
        ("Effective tax rate", format_percentage(result.effective_tax_rate)),
        ("Marginal rate", format_percentage(result.marginal_rate * 100)),
    ]

    width = max(len(label) for label, _ in rows)
    lines = [f"Tax estimate {result.tax_year}", ""]
    lines += [f"{label:<{width}}  {value:>14}" for label, value in rows]
    lines.append("")
    lines.append(f"{outcome_label(result)}: {format_currency(abs(result.refund_or_owing))}")
    return "\n".join(lines)


def render_csv(result: TaxResult, on: date | None = None) -> str:
    """One-row CSV summary with a header row.

    Args:
        result: Result to export.
        on: Date written in the first column; defaults to today.
    """
    on = on or date.today()
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerow(
        [
            on.strftime("%d/%m/%Y"),
            _cents(result.total_employment_income),
            _cents(result.total_business_income),
            _cents(result.work_from_home_deduction),
            _cents(result.total_manual_deductions),
            _cents(result.total_deductions),
            _cents(result.taxable_income),
            _cents(result.gross_tax),
            _cents(result.lito),
            _cents(result.medicare_levy),
            _cents(result.hecs_repayment),
            _cents(result.final_tax),
            _cents(result.refund_or_owing),
        ]
    )
    return output.getvalue()


_HTML_STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; color: #333; }
.header {
    text-align: center;
    margin-bottom: 30px;
    border-bottom: 2px solid #4A90E2;
    padding-bottom: 20px;
}
.title { color: #4A90E2; font-size: 24px; font-weight: bold; margin-bottom: 10px; }
.date { color: #666; font-size: 14px; }
.section { margin-bottom: 25px; }
.section-title {
    color: #2D3748;
    font-size: 18px;
    font-weight: bold;
    margin-bottom: 15px;
    border-bottom: 1px solid #E2E8F0;
    padding-bottom: 5px;
}
.summary-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 20px; }
.summary-card {
    background: #F8FAFC;
    padding: 15px;
    border-radius: 8px;
    border: 1px solid #E2E8F0;
}
.summary-label {
    font-size: 12px;
    color: #64748B;
    text-transform: uppercase;
    font-weight: 600;
    margin-bottom: 5px;
}
.summary-amount { font-size: 20px; font-weight: bold; color: #2D3748; }
.breakdown-table { width: 100%; border-collapse: collapse; margin-top: 10px; }
.breakdown-table th, .breakdown-table td {
    padding: 10px;
    text-align: left;
    border-bottom: 1px solid #E2E8F0;
}
.breakdown-table th { background: #F8FAFC; font-weight: 600; color: #2D3748; }
.total-row { font-weight: bold; border-top: 2px solid #4A90E2; background: #F0F9FF; }
.footer {
    margin-top: 40px;
    padding-top: 20px;
    border-top: 1px solid #E2E8F0;
    text-align: center;
    color: #666;
    font-size: 12px;
}
"""


def _row(*cells: str, css_class: str = "") -> str:
    attr = f' class="{css_class}"' if css_class else ""
    return f"<tr{attr}>" + "".join(f"<td>{c}</td>" for c in cells) + "</tr>"


def _table(rows: list[str]) -> str:
    return '<table class="breakdown-table">' + "".join(rows) + "</table>"


def _card(label: str, value: str, color: str | None = None) -> str:
    style = f' style="color: {color}"' if color else ""
    return (
        '<div class="summary-card">'
        f'<div class="summary-label">{html.escape(label)}</div>'
        f'<div class="summary-amount"{style}>{value}</div>'
        "</div>"
    )


def render_html(
    result: TaxResult,
    inputs: TaxInputs,
    title: str = "Australian Tax Calculation Report",
    on: date | None = None,
    withholding_estimated: bool = False,
) -> str:
    """Standalone HTML report with summary, income, deduction and tax tables."""
    on = on or date.today()
    outcome_color = REFUND_COLOR if result.is_refund else OWING_COLOR
    outcome_value = format_currency(abs(result.refund_or_owing))

    summary = "".join(
        [
            _card("Total Income", format_currency(result.total_income)),
            _card("Total Deductions", format_currency(result.total_deductions)),
            _card("Taxable Income", format_currency(result.taxable_income)),
            _card(outcome_label(result), outcome_value, outcome_color),
        ]
    )

    income_rows = [
        "<tr><th>Source</th><th>Amount</th></tr>",
        _row("Employment Income (TFN)", format_currency(result.total_employment_income)),
        _row("ABN/Freelance Income", format_currency(result.total_business_income)),
        _row("Total Income", format_currency(result.total_income), css_class="total-row"),
    ]

    deduction_rows = ["<tr><th>Category</th><th>Type</th><th>Amount</th></tr>"]
    for _, category in inputs.deductions.categories():
        deduction_rows.append(
            f'<tr><td colspan="3"><strong>{html.escape(category.LABEL)}</strong></td></tr>'
        )
        for sub, amount in category.items():
            label = category.SUBCATEGORY_LABELS.get(sub, sub)
            deduction_rows.append(_row("", html.escape(label), format_currency(amount)))
    deduction_rows.append('<tr><td colspan="3"><strong>Work From Home</strong></td></tr>')
    hours = html.escape(f"{inputs.work_from_home_hours.normalize():f}")
    deduction_rows.append(
        _row("", f"Work From Home ({hours} hrs)", format_currency(result.work_from_home_deduction))
    )
    deduction_rows.append(
        f'<tr class="total-row"><td colspan="2"><strong>Total Deductions</strong></td>'
        f"<td><strong>{format_currency(result.total_deductions)}</strong></td></tr>"
    )

    withheld_label = "Tax Withheld (PAYG" + (", estimated)" if withholding_estimated else ")")
    tax_rows = [
        "<tr><th>Component</th><th>Amount</th></tr>",
        _row("Taxable Income", format_currency(result.taxable_income)),
        _row("Income Tax", format_currency(result.gross_tax)),
        _row("Low Income Tax Offset", "-" + format_currency(result.lito)),
        _row("Medicare Levy", format_currency(result.medicare_levy)),
    ]
    if result.hecs_repayment > ZERO:
        tax_rows.append(_row("HECS-HELP Repayment", format_currency(result.hecs_repayment)))
    tax_rows += [
        _row("Total Tax", format_currency(result.final_tax)),
        _row(withheld_label, "-" + format_currency(result.tax_withheld)),
        f'<tr class="total-row"><td>{outcome_label(result)}</td>'
        f'<td style="color: {outcome_color}">{outcome_value}</td></tr>',
    ]

    sections = [
        ("Summary", f'<div class="summary-grid">{summary}</div>'),
        ("Income Breakdown", _table(income_rows)),
        ("Deductions Breakdown", _table(deduction_rows)),
        ("Tax Calculation", _table(tax_rows)),
    ]
    body = "".join(
        f'<div class="section"><div class="section-title">{name}</div>{content}</div>'
        for name, content in sections
    )

    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        f"<title>{html.escape(title)}</title>"
        f"<style>{_HTML_STYLE}</style></head><body>"
        '<div class="header">'
        f'<div class="title">{html.escape(title)}</div>'
        f'<div class="date">Generated on {on:%A %d %B %Y} '
        f"for the {html.escape(result.tax_year)} income year</div>"
        "</div>"
        f"{body}"
        '<div class="footer">This is an estimate only and not tax advice. '
        "Lodge your return with the ATO to confirm your actual outcome.</div>"
        "</body></html>\n"
    )
