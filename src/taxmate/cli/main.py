"""CLI entry point for taxmate."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import click

from taxmate.config.settings import Settings, get_settings
from taxmate.core.engine import estimate as run_estimate
from taxmate.io.forms import FormData, inputs_from_form
from taxmate.io.report import (
    format_currency,
    format_percentage,
    outcome_label,
    render_csv,
    render_html,
    render_summary,
)
from taxmate.io.serialize import dump_inputs, dump_result, load_inputs
from taxmate.io.store import ResultStore
from taxmate.taxes.payg import estimate_withholding
from taxmate.taxes.year import TaxYearRules, load_tax_year
from taxmate.utils.exceptions import InputValidationError, TaxmateError
from taxmate.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


@dataclass
class CliState:
    """Objects shared by every subcommand."""

    settings: Settings
    store: ResultStore

    def rules(self) -> TaxYearRules:
        return load_tax_year(self.settings.tax_year)


pass_state = click.make_pass_decorator(CliState)


@contextmanager
def _errors_as_click() -> Iterator[None]:
    """Report library errors as a one-line CLI failure (exit code 1)."""
    try:
        yield
    except InputValidationError as exc:
        lines = [str(exc)] + [f"  {field}: {message}" for field, message in exc.errors.items()]
        raise click.ClickException("\n".join(lines)) from exc
    except TaxmateError as exc:
        raise click.ClickException(str(exc)) from exc


def _write(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise click.ClickException(f"cannot write {path}: {exc}") from exc
    click.echo(f"Written to {path}")


def _parse_deductions(values: tuple[str, ...]) -> dict[str, dict[str, str]]:
    deductions: dict[str, dict[str, str]] = {}
    for item in values:
        key, sep, amount = item.partition("=")
        category, dot, sub = key.strip().partition(".")
        if not sep or not dot or not category or not sub:
            raise click.BadParameter(
                f"{item!r} is not CATEGORY.SUBCATEGORY=AMOUNT", param_hint="--deduction"
            )
        deductions.setdefault(category, {})[sub] = amount.strip()
    return deductions


@click.group()
@click.version_option(package_name="taxmate")
@click.option(
    "--store",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Saved calculations file. Defaults to TAXMATE_STORE_PATH or ~/.taxmate.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Minimum log level written to stderr.",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log line format.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    store_path: Path | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """taxmate — Australian income tax estimator."""
    settings = get_settings()
    configure_logging(
        log_level or settings.log_level,
        "json" if (log_format or settings.log_format) == "json" else "console",
    )
    ctx.obj = CliState(settings=settings, store=ResultStore(store_path or settings.store_path))


@cli.command()
@click.option("--income", "incomes", multiple=True, help="Salary or wages from one job.")
@click.option("--business-income", default="", help="ABN / freelance income.")
@click.option("--withheld", default="", help="PAYG tax withheld by employers.")
@click.option(
    "--estimate-withholding",
    is_flag=True,
    help="Estimate tax withheld from the job incomes instead of entering it.",
)
@click.option("--wfh-hours", default="", help="Hours worked from home.")
@click.option(
    "--deduction",
    "deductions",
    multiple=True,
    metavar="CATEGORY.SUBCATEGORY=AMOUNT",
    help="A claimed deduction, e.g. work_related.travel=850.",
)
@click.option("--hecs", is_flag=True, help="Has a HECS-HELP debt.")
@click.option("--medicare-exempt", is_flag=True, help="Exempt from the Medicare levy.")
@click.option("--dependents", default=None, help="Number of dependent children.")
@click.option(
    "--inputs",
    "inputs_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON inputs file. Cannot be combined with the other input options.",
)
@click.option("--save", "save_name", default=None, help="Save the calculation under this name.")
@click.option("--csv", "csv_path", type=click.Path(path_type=Path), default=None)
@click.option("--html", "html_path", type=click.Path(path_type=Path), default=None)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@pass_state
def estimate(
    state: CliState,
    incomes: tuple[str, ...],
    business_income: str,
    withheld: str,
    estimate_withholding: bool,
    wfh_hours: str,
    deductions: tuple[str, ...],
    hecs: bool,
    medicare_exempt: bool,
    dependents: str | None,
    inputs_path: Path | None,
    save_name: str | None,
    csv_path: Path | None,
    html_path: Path | None,
    as_json: bool,
) -> None:
    """Estimate the refund or amount owing for one income year."""
    with _errors_as_click():
        rules = state.rules()
        withholding_estimated = False

        if inputs_path is not None:
            conflicting = {
                "--income": bool(incomes),
                "--business-income": bool(business_income),
                "--withheld": bool(withheld),
                "--estimate-withholding": estimate_withholding,
                "--wfh-hours": bool(wfh_hours),
                "--deduction": bool(deductions),
                "--hecs": hecs,
                "--medicare-exempt": medicare_exempt,
                "--dependents": dependents is not None,
            }
            given = [name for name, used in conflicting.items() if used]
            if given:
                raise click.UsageError(f"--inputs cannot be combined with {', '.join(given)}")
            inputs = load_inputs(inputs_path.read_text(encoding="utf-8"))
        else:
            form = FormData(
                job_incomes=list(incomes) or [""],
                abn_income=business_income,
                tax_withheld=withheld,
                estimate_withholding=estimate_withholding,
                deductions=_parse_deductions(deductions),
                work_from_home_hours=wfh_hours,
                hecs_debt=hecs,
                medicare_exemption=medicare_exempt,
                has_dependents=dependents is not None,
                dependents=dependents or "",
            )
            collected = inputs_from_form(form, rules)
            inputs = collected.inputs
            withholding_estimated = collected.withholding_estimated

        result = run_estimate(inputs, rules)
        logger.info(
            "estimate_completed",
            taxable_income=str(result.taxable_income),
            final_tax=str(result.final_tax),
            refund_or_owing=str(result.refund_or_owing),
        )

        if as_json:
            click.echo(dump_result(result))
        else:
            click.echo(render_summary(result, withholding_estimated))
            if withholding_estimated:
                click.echo("\nTax withheld was estimated; check your income statement.")

        if save_name is not None:
            previous = state.store.find_by_inputs(inputs)
            record = state.store.save(inputs, result, save_name, withholding_estimated)
            click.echo(f"Saved as {record.id[:8]} ({record.display_name})")
            if previous:
                click.echo(
                    f"Same inputs as {previous[0].id[:8]} ({previous[0].display_name})"
                )
        if csv_path is not None:
            _write(csv_path, render_csv(result))
        if html_path is not None:
            page = render_html(result, inputs, withholding_estimated=withholding_estimated)
            _write(html_path, page)


@cli.command()
@click.option("--income", "incomes", multiple=True, required=True, help="Salary from one job.")
@pass_state
def payg(state: CliState, incomes: tuple[str, ...]) -> None:
    """Estimate PAYG withholding on salary and wages."""
    with _errors_as_click():
        withholding = estimate_withholding(incomes, state.rules())
    click.echo(f"Employment income:   {format_currency(withholding.employment_income)}")
    click.echo(f"Income tax:          {format_currency(withholding.income_tax_component)}")
    click.echo(f"Medicare:            {format_currency(withholding.medicare_component)}")
    click.echo(f"Estimated withheld:  {format_currency(withholding.amount, whole_dollars=True)}")


def _band_range(lower: Decimal, upper: Decimal | None) -> str:
    top = "and over" if upper is None else f"to {format_currency(upper, whole_dollars=True)}"
    return f"{format_currency(lower, whole_dollars=True)} {top}"


@cli.command()
@pass_state
def rates(state: CliState) -> None:
    """Show the tax rates and thresholds in use."""
    with _errors_as_click():
        rules = state.rules()

    click.echo(f"Income year {rules.label}\n")
    click.echo("Income tax")
    for band in rules.income_tax:
        click.echo(
            f"  {_band_range(band.lower, band.upper):<28} "
            f"{format_currency(band.base, whole_dollars=True)} + "
            f"{format_percentage(band.rate * 100)} over {format_currency(band.lower, True)}"
        )

    click.echo("\nLow income tax offset")
    for band in rules.lito:
        click.echo(
            f"  {_band_range(band.lower, band.upper):<28} "
            f"{format_currency(band.base, True)} less {format_percentage(band.rate * 100)}"
        )

    medicare = rules.medicare
    click.echo("\nMedicare levy")
    click.echo(f"  Rate {format_percentage(medicare.rate * 100)}")
    click.echo(f"  Single threshold {format_currency(medicare.single_threshold, True)}")
    click.echo(
        f"  Family threshold {format_currency(medicare.family_threshold, True)}"
        f" + {format_currency(medicare.dependent_increment, True)} per dependant"
    )

    click.echo("\nHECS-HELP repayment")
    for band in rules.hecs.bands:
        band_range = _band_range(band.lower, band.upper)
        click.echo(f"  {band_range:<28} {format_percentage(band.rate * 100)}")


@cli.group()
def history() -> None:
    """Manage saved calculations."""


@history.command("list")
@pass_state
def history_list(state: CliState) -> None:
    """List saved calculations, newest first."""
    with _errors_as_click():
        records = state.store.all()
    if not records:
        click.echo("No saved calculations.")
        return
    for record in records:
        outcome = format_currency(abs(record.result.refund_or_owing))
        click.echo(
            f"{record.id[:8]}  {record.saved_at:%Y-%m-%d %H:%M}  "
            f"{record.display_name:<30}  {outcome_label(record.result)} {outcome}"
        )


@history.command("show")
@click.argument("record_id")
@click.option("--json", "as_json", is_flag=True, help="Print inputs and result as JSON.")
@pass_state
def history_show(state: CliState, record_id: str, as_json: bool) -> None:
    """Show one saved calculation."""
    with _errors_as_click():
        record = state.store.get(record_id)
    if as_json:
        click.echo(dump_inputs(record.inputs))
        click.echo(dump_result(record.result))
        return
    click.echo(f"{record.display_name} (saved {record.saved_at:%Y-%m-%d %H:%M} UTC)")
    click.echo(f"Inputs {record.inputs_hash[:12]}\n")
    click.echo(render_summary(record.result, record.withholding_estimated))


@history.command("rename")
@click.argument("record_id")
@click.argument("name")
@pass_state
def history_rename(state: CliState, record_id: str, name: str) -> None:
    """Rename a saved calculation."""
    with _errors_as_click():
        state.store.rename(record_id, name)
    click.echo("Renamed.")


@history.command("delete")
@click.argument("record_id")
@pass_state
def history_delete(state: CliState, record_id: str) -> None:
    """Delete a saved calculation."""
    with _errors_as_click():
        state.store.delete(record_id)
    click.echo("Deleted.")


@history.command("clear")
@click.confirmation_option(prompt="Delete every saved calculation?")
@pass_state
def history_clear(state: CliState) -> None:
    """Delete every saved calculation."""
    with _errors_as_click():
        count = state.store.clear()
    click.echo(f"Deleted {count} saved calculation(s).")


@history.command("stats")
@pass_state
def history_stats(state: CliState) -> None:
    """Summarise refunds and amounts owing across saved calculations."""
    with _errors_as_click():
        stats = state.store.stats()
    click.echo(f"Calculations:    {stats.total_calculations}")
    refunds = format_currency(stats.total_refunds)
    click.echo(f"Refunds:         {stats.refund_count} totalling {refunds}")
    click.echo(f"Owing:           {stats.owed_count} totalling {format_currency(stats.total_owed)}")
    click.echo(f"Average refund:  {format_currency(stats.average_refund)}")


@history.command("export")
@click.argument("record_id")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "html", "json"]),
    default="csv",
    show_default=True,
)
@click.option("--output", "output_path", type=click.Path(path_type=Path), default=None)
@pass_state
def history_export(
    state: CliState, record_id: str, fmt: str, output_path: Path | None
) -> None:
    """Export a saved calculation as CSV, HTML or JSON."""
    with _errors_as_click():
        record = state.store.get(record_id)
    on = record.saved_at.date()
    if fmt == "csv":
        text = render_csv(record.result, on=on)
    elif fmt == "html":
        text = render_html(
            record.result,
            record.inputs,
            title=record.display_name,
            on=on,
            withholding_estimated=record.withholding_estimated,
        )
    else:
        text = dump_result(record.result) + "\n"

    if output_path is None:
        click.echo(text, nl=False)
    else:
        _write(output_path, text)


if __name__ == "__main__":
    cli()
