"""Shared test fixtures."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from taxmate.config.schema import TaxInputs
from taxmate.io.store import ResultStore
from taxmate.taxes.year import TaxYearRules, load_tax_year


@pytest.fixture
def rules() -> TaxYearRules:
    """Bundled 2024-25 rules."""
    return load_tax_year("2024-25")


@pytest.fixture
def store(tmp_path: Path) -> ResultStore:
    """Empty store backed by a temporary file."""
    return ResultStore(tmp_path / "calculations.json")


@pytest.fixture
def salary_inputs() -> TaxInputs:
    """$75,000 salary with $15,000 withheld."""
    return TaxInputs(employment_incomes=(Decimal("75000"),), tax_withheld=Decimal("15000"))
