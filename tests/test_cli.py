"""Tests for CLI."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from taxmate.cli.main import cli
from taxmate.config.defaults import mixed_income_scenario
from taxmate.io.serialize import dump_inputs
from taxmate.io.store import ResultStore

SALARY = ["--income", "75000", "--withheld", "15000"]


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "calcs.json"


def _invoke(store_path: Path, *args: str, input: str | None = None) -> Result:
    runner = CliRunner()
    return runner.invoke(cli, ["--store", str(store_path), *args], input=input)


def _saved_id(store_path: Path) -> str:
    return ResultStore(store_path).all()[0].id


class TestCLI:
    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("estimate", "payg", "rates", "history"):
            assert command in result.output


class TestEstimate:
    def test_summary(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", *SALARY)
        assert result.exit_code == 0, result.output
        assert "Tax estimate 2024-25" in result.output
        assert "Tax Owing: $1,342.00" in result.output
        assert not store_path.exists()

    def test_json(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", *SALARY, "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert Decimal(data["final_tax"]) == Decimal("16342")

    def test_multiple_jobs_and_deductions(self, store_path: Path) -> None:
        result = _invoke(
            store_path,
            "estimate",
            "--income",
            "50000",
            "--income",
            "25000",
            "--withheld",
            "15000",
            "--deduction",
            "work_related.travel=850",
            "--wfh-hours",
            "400",
        )
        assert result.exit_code == 0, result.output
        assert "$1,118.00" in result.output  # 850 + 268

    def test_hecs_and_dependants(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", *SALARY, "--hecs", "--dependents", "2")
        assert result.exit_code == 0, result.output
        assert "HECS-HELP repayment" in result.output

    def test_estimate_withholding(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", "--income", "75000", "--estimate-withholding")
        assert result.exit_code == 0, result.output
        assert "Tax withheld was estimated" in result.output
        assert "Tax Refund: $0.00" in result.output

    def test_validation_errors(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", "--withheld", "100")
        assert result.exit_code == 1
        assert "Invalid input for" in result.output
        assert "At least one income source is required" in result.output

    def test_negative_income(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", "--income", "-5", "--withheld", "0")
        assert result.exit_code == 1
        assert "Value cannot be negative" in result.output

    def test_bad_deduction_syntax(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", *SALARY, "--deduction", "travel850")
        assert result.exit_code == 2
        assert "CATEGORY.SUBCATEGORY=AMOUNT" in result.output

    def test_inputs_file(self, store_path: Path, tmp_path: Path) -> None:
        inputs_file = tmp_path / "inputs.json"
        inputs_file.write_text(dump_inputs(mixed_income_scenario()))
        result = _invoke(store_path, "estimate", "--inputs", str(inputs_file))
        assert result.exit_code == 0, result.output
        assert "$86,331.60" in result.output

    def test_inputs_file_not_combined(self, store_path: Path, tmp_path: Path) -> None:
        inputs_file = tmp_path / "inputs.json"
        inputs_file.write_text(dump_inputs(mixed_income_scenario()))
        result = _invoke(store_path, "estimate", "--inputs", str(inputs_file), *SALARY)
        assert result.exit_code == 2

    @pytest.mark.parametrize(
        "flags",
        [
            ("--hecs",),
            ("--medicare-exempt",),
            ("--dependents", "2"),
            ("--estimate-withholding",),
        ],
    )
    def test_inputs_file_rejects_detail_flags(
        self, store_path: Path, tmp_path: Path, flags: tuple[str, ...]
    ) -> None:
        inputs_file = tmp_path / "inputs.json"
        inputs_file.write_text(dump_inputs(mixed_income_scenario()))
        result = _invoke(store_path, "estimate", "--inputs", str(inputs_file), *flags)
        assert result.exit_code == 2
        assert f"cannot be combined with {flags[0]}" in result.output

    def test_bad_inputs_file(self, store_path: Path, tmp_path: Path) -> None:
        inputs_file = tmp_path / "inputs.json"
        inputs_file.write_text("{broken")
        result = _invoke(store_path, "estimate", "--inputs", str(inputs_file))
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_exports(self, store_path: Path, tmp_path: Path) -> None:
        csv_path = tmp_path / "out.csv"
        html_path = tmp_path / "out.html"
        result = _invoke(
            store_path, "estimate", *SALARY, "--csv", str(csv_path), "--html", str(html_path)
        )
        assert result.exit_code == 0, result.output
        assert csv_path.read_text().startswith("Date,TFN Income,ABN Income")
        assert "<!DOCTYPE html>" in html_path.read_text()

    def test_save(self, store_path: Path) -> None:
        result = _invoke(store_path, "estimate", *SALARY, "--save", "My return")
        assert result.exit_code == 0, result.output
        assert "Saved as" in result.output
        records = ResultStore(store_path).all()
        assert [r.name for r in records] == ["My return"]

    def test_save_notes_matching_inputs(self, store_path: Path) -> None:
        first = _invoke(store_path, "estimate", *SALARY, "--save", "first")
        assert "Same inputs as" not in first.output
        first_id = _saved_id(store_path)
        again = _invoke(store_path, "estimate", *SALARY, "--save", "second")
        assert again.exit_code == 0, again.output
        assert f"Same inputs as {first_id[:8]} (first)" in again.output


class TestOtherCommands:
    def test_payg(self, store_path: Path) -> None:
        result = _invoke(store_path, "payg", "--income", "50000", "--income", "25000")
        assert result.exit_code == 0, result.output
        assert "$16,342" in result.output

    def test_payg_requires_income(self, store_path: Path) -> None:
        assert _invoke(store_path, "payg").exit_code == 2

    def test_rates(self, store_path: Path) -> None:
        result = _invoke(store_path, "rates")
        assert result.exit_code == 0, result.output
        assert "Income year 2024-25" in result.output
        assert "$51,667 + 45.0% over $180,000" in result.output
        assert "$152,000 and over" in result.output


class TestHistory:
    def test_empty(self, store_path: Path) -> None:
        result = _invoke(store_path, "history", "list")
        assert result.exit_code == 0
        assert "No saved calculations." in result.output

    def test_list_show_rename_delete(self, store_path: Path) -> None:
        _invoke(store_path, "estimate", *SALARY, "--save", "draft")
        record_id = _saved_id(store_path)

        listed = _invoke(store_path, "history", "list")
        assert record_id[:8] in listed.output
        assert "draft" in listed.output
        assert "Tax Owing $1,342.00" in listed.output

        shown = _invoke(store_path, "history", "show", record_id[:8])
        assert shown.exit_code == 0, shown.output
        assert "Tax Owing: $1,342.00" in shown.output
        assert ResultStore(store_path).get(record_id).inputs_hash[:12] in shown.output

        renamed = _invoke(store_path, "history", "rename", record_id, "final")
        assert renamed.exit_code == 0
        assert ResultStore(store_path).get(record_id).name == "final"

        deleted = _invoke(store_path, "history", "delete", record_id)
        assert deleted.exit_code == 0
        assert ResultStore(store_path).all() == []

    def test_show_json(self, store_path: Path) -> None:
        _invoke(store_path, "estimate", *SALARY, "--save", "draft")
        result = _invoke(store_path, "history", "show", _saved_id(store_path), "--json")
        assert result.exit_code == 0
        assert '"employment_incomes"' in result.output
        assert '"final_tax"' in result.output

    def test_unknown_id(self, store_path: Path) -> None:
        result = _invoke(store_path, "history", "show", "nope")
        assert result.exit_code == 1
        assert "No saved calculation with id 'nope'" in result.output

    def test_clear_needs_confirmation(self, store_path: Path) -> None:
        _invoke(store_path, "estimate", *SALARY, "--save", "a")
        aborted = _invoke(store_path, "history", "clear", input="n\n")
        assert aborted.exit_code == 1
        assert len(ResultStore(store_path).all()) == 1

        cleared = _invoke(store_path, "history", "clear", "--yes")
        assert cleared.exit_code == 0
        assert "Deleted 1 saved calculation(s)." in cleared.output

    def test_stats(self, store_path: Path) -> None:
        _invoke(store_path, "estimate", *SALARY, "--save", "owing")
        _invoke(store_path, "estimate", "--income", "30000", "--withheld", "3000", "--save", "r")
        result = _invoke(store_path, "history", "stats")
        assert result.exit_code == 0, result.output
        assert "Calculations:    2" in result.output
        assert "1 totalling $858.00" in result.output
        assert "1 totalling $1,342.00" in result.output

    def test_export_csv_to_stdout(self, store_path: Path) -> None:
        _invoke(store_path, "estimate", *SALARY, "--save", "draft")
        result = _invoke(store_path, "history", "export", _saved_id(store_path))
        assert result.exit_code == 0
        assert result.output.splitlines()[0].startswith("Date,")
        assert result.output.splitlines()[1].endswith(",-1342.00")

    def test_export_html_to_file(self, store_path: Path, tmp_path: Path) -> None:
        _invoke(store_path, "estimate", *SALARY, "--save", "Named <report>")
        out = tmp_path / "report.html"
        result = _invoke(
            store_path,
            "history",
            "export",
            _saved_id(store_path),
            "--format",
            "html",
            "--output",
            str(out),
        )
        assert result.exit_code == 0, result.output
        assert "Named &lt;report&gt;" in out.read_text()

    def test_corrupt_store(self, store_path: Path) -> None:
        store_path.write_text("not json")
        result = _invoke(store_path, "history", "list")
        assert result.exit_code == 1
        assert "cannot read saved calculations" in result.output
