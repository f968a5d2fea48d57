"""Tax curves: the engine swept across a grid of incomes, for charts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import numpy as np

from taxmate.config.schema import TaxInputs
from taxmate.core.engine import estimate
from taxmate.taxes.year import TaxYearRules, default_rules


@dataclass(frozen=True)
class TaxCurve:
    """Components of the tax outcome at each income in ``incomes``.

    All arrays share the shape of ``incomes``. Rates are percentages of
    total income.
    """

    incomes: np.ndarray
    taxable_income: np.ndarray
    gross_tax: np.ndarray
    lito: np.ndarray
    medicare_levy: np.ndarray
    hecs_repayment: np.ndarray
    final_tax: np.ndarray
    take_home: np.ndarray
    effective_rate: np.ndarray
    marginal_rate: np.ndarray


def income_grid(stop: float = 250_000, step: float = 1_000, start: float = 0) -> np.ndarray:
    """Evenly spaced incomes from ``start`` to ``stop`` inclusive."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    n = int(np.floor((stop - start) / step)) + 1
    return start + step * np.arange(max(n, 0), dtype=np.float64)


def tax_curve(
    incomes: np.ndarray,
    base: TaxInputs | None = None,
    rules: TaxYearRules | None = None,
) -> TaxCurve:
    """Estimate tax at every income in ``incomes``.

    Each point replaces the income sources of ``base`` with a single salary
    of that amount. Deductions, HECS-HELP, Medicare and dependant settings of
    ``base`` are kept, so the curve shows how the same person's tax changes
    with income.

    Args:
        incomes: 1-D array of gross incomes.
        base: Circumstances to hold fixed. Defaults to no deductions and no
            HECS-HELP debt.
        rules: Tax-year tables; defaults to the bundled current year.
    """
    rules = rules or default_rules()
    base = base or TaxInputs()
    incomes = np.asarray(incomes, dtype=np.float64)

    columns: dict[str, list[float]] = {
        name: []
        for name in (
            "taxable_income",
            "gross_tax",
            "lito",
            "medicare_levy",
            "hecs_repayment",
            "final_tax",
            "marginal_rate",
        )
    }
    for income in incomes:
        inputs = base.model_copy(
            update={
                "employment_incomes": (Decimal(str(income)),),
                "business_income": Decimal("0"),
            }
        )
        result = estimate(inputs, rules)
        for name, values in columns.items():
            values.append(float(getattr(result, name)))

    arrays = {name: np.array(values, dtype=np.float64) for name, values in columns.items()}
    final_tax = arrays["final_tax"]
    with np.errstate(divide="ignore", invalid="ignore"):
        effective = np.where(incomes > 0, final_tax / incomes * 100.0, 0.0)

    return TaxCurve(
        incomes=incomes,
        taxable_income=arrays["taxable_income"],
        gross_tax=arrays["gross_tax"],
        lito=arrays["lito"],
        medicare_levy=arrays["medicare_levy"],
        hecs_repayment=arrays["hecs_repayment"],
        final_tax=final_tax,
        take_home=incomes - final_tax,
        effective_rate=effective,
        marginal_rate=arrays["marginal_rate"] * 100.0,
    )
