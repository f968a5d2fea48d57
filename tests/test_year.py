"""Tests for tax-year table loading and validation."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from taxmate.io.yaml_loader import load_package_yaml
from taxmate.taxes.year import (
    Band,
    TaxYearRules,
    available_tax_years,
    bracket_for,
    find_band,
    load_tax_year,
    parse_tax_year,
)
from taxmate.utils.exceptions import ConfigError, TaxTableError


def _raw_table() -> dict[str, Any]:
    return load_package_yaml("taxes/tables/au_2024_25.yaml")


class TestBundledTable:
    def test_label(self, rules: TaxYearRules) -> None:
        assert rules.label == "2024-25"

    def test_available_years(self) -> None:
        assert available_tax_years() == ["2024-25"]

    def test_income_tax_bands(self, rules: TaxYearRules) -> None:
        assert [b.lower for b in rules.income_tax] == [0, 18200, 45000, 120000, 180000]
        assert [b.rate for b in rules.income_tax] == [
            Decimal("0"),
            Decimal("0.19"),
            Decimal("0.325"),
            Decimal("0.37"),
            Decimal("0.45"),
        ]
        assert rules.income_tax[-1].upper is None

    def test_medicare_constants(self, rules: TaxYearRules) -> None:
        assert rules.medicare.rate == Decimal("0.02")
        assert rules.medicare.single_threshold == 27222
        assert rules.medicare.family_threshold == 45907
        assert rules.medicare.dependent_increment == 4216

    def test_hecs_bands_are_contiguous(self, rules: TaxYearRules) -> None:
        bands = rules.hecs.bands
        assert len(bands) == 11
        assert bands[0].lower == rules.hecs.repayment_threshold == 51000
        for prev, nxt in zip(bands, bands[1:]):
            assert prev.upper == nxt.lower

    def test_cached(self) -> None:
        assert load_tax_year("2024-25") is load_tax_year("2024-25")

    def test_unknown_year(self) -> None:
        with pytest.raises(TaxTableError, match="available: 2024-25"):
            load_tax_year("1999-00")


class TestFindBand:
    def test_half_open(self) -> None:
        bands = (
            Band(Decimal("0"), Decimal("10"), Decimal("0")),
            Band(Decimal("10"), None, Decimal("0.1")),
        )
        assert find_band(bands, Decimal("9.99")) is bands[0]
        assert find_band(bands, Decimal("10")) is bands[1]
        assert find_band(bands, Decimal("1e9")) is bands[1]

    def test_below_first_band(self) -> None:
        bands = (Band(Decimal("5"), None, Decimal("0")),)
        assert find_band(bands, Decimal("4")) is None

    def test_bracket_for_clamps_below_first_band(self) -> None:
        bands = (
            Band(Decimal("0"), Decimal("10"), Decimal("0")),
            Band(Decimal("10"), None, Decimal("0.1")),
        )
        assert bracket_for(bands, Decimal("-3")) is bands[0]
        assert bracket_for(bands, Decimal("12")) is bands[1]


class TestParseValidation:
    def test_round_trip_of_bundled_data(self, rules: TaxYearRules) -> None:
        assert parse_tax_year(_raw_table()) == rules

    def test_missing_section(self) -> None:
        data = _raw_table()
        del data["medicare"]
        with pytest.raises(TaxTableError, match="medicare"):
            parse_tax_year(data)

    def test_gap_between_bands(self) -> None:
        data = _raw_table()
        data["income_tax"][1][0] = 18201
        with pytest.raises(TaxTableError, match="does not continue"):
            parse_tax_year(data)

    def test_last_band_must_be_unbounded(self) -> None:
        data = _raw_table()
        data["lito"][-1][1] = 100000
        with pytest.raises(TaxTableError, match="unbounded"):
            parse_tax_year(data)

    def test_non_numeric_rate(self) -> None:
        data = _raw_table()
        data["hecs"]["bands"][0][2] = "one percent"
        with pytest.raises(TaxTableError, match="hecs.bands"):
            parse_tax_year(data)

    def test_short_row(self) -> None:
        data = _raw_table()
        data["income_tax"][0] = [0, 18200, 0]
        with pytest.raises(TaxTableError, match="lower, upper, rate, base"):
            parse_tax_year(data)

    def test_table_errors_are_config_errors(self) -> None:
        with pytest.raises(ConfigError):
            parse_tax_year([])
