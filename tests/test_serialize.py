"""Tests for JSON serialization of inputs and results."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from taxmate.config.defaults import mixed_income_scenario, single_salary_scenario
from taxmate.core.engine import estimate
from taxmate.io.serialize import (
    compute_inputs_hash,
    dump_inputs,
    dump_result,
    load_inputs,
    result_from_dict,
    result_to_dict,
)
from taxmate.taxes.year import TaxYearRules
from taxmate.utils.exceptions import ConfigError


class TestInputs:
    def test_round_trip(self) -> None:
        inputs = mixed_income_scenario()
        assert load_inputs(dump_inputs(inputs)) == inputs

    def test_amounts_written_as_strings(self) -> None:
        data = json.loads(dump_inputs(single_salary_scenario()))
        assert data["employment_incomes"] == ["75000"]
        assert data["tax_withheld"] == "15000"

    def test_load_partial_file(self) -> None:
        inputs = load_inputs('{"employment_incomes": [75000], "tax_withheld": 15000}')
        assert inputs == single_salary_scenario()

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_inputs("{not json")

    def test_unknown_field(self) -> None:
        with pytest.raises(ConfigError, match="not valid"):
            load_inputs('{"salary": 1}')


class TestInputsHash:
    def test_deterministic(self) -> None:
        assert compute_inputs_hash(mixed_income_scenario()) == compute_inputs_hash(
            mixed_income_scenario()
        )

    def test_sensitive_to_changes(self) -> None:
        inputs = single_salary_scenario()
        changed = inputs.model_copy(update={"has_hecs_debt": True})
        assert compute_inputs_hash(inputs) != compute_inputs_hash(changed)

    def test_sha256_hex(self) -> None:
        digest = compute_inputs_hash(single_salary_scenario())
        assert len(digest) == 64
        int(digest, 16)


class TestResult:
    def test_round_trip(self, rules: TaxYearRules) -> None:
        result = estimate(mixed_income_scenario(), rules)
        assert result_from_dict(result_to_dict(result)) == result

    def test_json_safe(self, rules: TaxYearRules) -> None:
        result = estimate(single_salary_scenario(), rules)
        data = json.loads(dump_result(result))
        assert data["tax_year"] == "2024-25"
        assert Decimal(data["final_tax"]) == Decimal("16342")
        assert Decimal(data["refund_or_owing"]) == Decimal("-1342")
        assert set(data["deduction_breakdown"]) == {
            "work_related",
            "self_education",
            "donations",
            "other",
        }
