"""Tax-year rule tables: brackets, offsets, levies and repayment bands.

Each supported income year is a YAML file under ``taxes/tables/``. The file is
parsed once into immutable dataclasses so every rule function receives plain
``Decimal`` values and never touches I/O.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Any

from taxmate.io.yaml_loader import PACKAGE_ROOT, load_package_yaml
from taxmate.utils.exceptions import TaxTableError
from taxmate.utils.logging import get_logger

DEFAULT_TAX_YEAR = "2024-25"

logger = get_logger(__name__)


@dataclass(frozen=True)
class Band:
    """One row of a band table covering ``lower <= x < upper``."""

    lower: Decimal
    upper: Decimal | None
    rate: Decimal
    base: Decimal = Decimal("0")

    def contains(self, amount: Decimal) -> bool:
        """Whether ``amount`` falls inside this band."""
        if amount < self.lower:
            return False
        return self.upper is None or amount < self.upper


def find_band(bands: Sequence[Band], amount: Decimal) -> Band | None:
    """Return the first band containing ``amount``, or ``None``."""
    for band in bands:
        if band.contains(amount):
            return band
    return None


def bracket_for(bands: Sequence[Band], amount: Decimal) -> Band:
    """Band of a schedule that starts at zero.

    Amounts below the first lower bound (negative incomes passed in directly)
    fall into the first band rather than matching nothing.
    """
    if amount < bands[0].lower:
        return bands[0]
    band = find_band(bands, amount)
    if band is None:
        raise TaxTableError(f"no band covers {amount}")
    return band


@dataclass(frozen=True)
class MedicareRules:
    """Medicare levy rate and low-income thresholds."""

    rate: Decimal
    single_threshold: Decimal
    family_threshold: Decimal
    dependent_increment: Decimal
    shade_in_fraction: Decimal


@dataclass(frozen=True)
class HecsRules:
    """HECS-HELP compulsory repayment bands."""

    repayment_threshold: Decimal
    bands: tuple[Band, ...]


@dataclass(frozen=True)
class PaygRules:
    """Coarse table behind the advisory withholding estimate."""

    brackets: tuple[Band, ...]
    medicare_threshold: Decimal
    medicare_rate: Decimal


@dataclass(frozen=True)
class TaxYearRules:
    """Every constant the engine needs for one income year."""

    label: str
    income_tax: tuple[Band, ...]
    lito: tuple[Band, ...]
    medicare: MedicareRules
    hecs: HecsRules
    payg: PaygRules


def _decimal(value: Any, where: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TaxTableError(f"{where}: expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except ArithmeticError as exc:
        raise TaxTableError(f"{where}: expected a number, got {value!r}") from exc


def _parse_bands(rows: Any, where: str) -> tuple[Band, ...]:
    if not isinstance(rows, list) or not rows:
        raise TaxTableError(f"{where}: expected a non-empty list of bands")

    bands: list[Band] = []
    for i, row in enumerate(rows):
        if not isinstance(row, list) or len(row) != 4:
            raise TaxTableError(f"{where}[{i}]: expected [lower, upper, rate, base]")
        lower, upper, rate, base = row
        bands.append(
            Band(
                lower=_decimal(lower, f"{where}[{i}].lower"),
                upper=None if upper is None else _decimal(upper, f"{where}[{i}].upper"),
                rate=_decimal(rate, f"{where}[{i}].rate"),
                base=_decimal(base, f"{where}[{i}].base"),
            )
        )

    for i, (prev, nxt) in enumerate(zip(bands, bands[1:])):
        if prev.upper is None:
            raise TaxTableError(f"{where}[{i}]: only the last band may be unbounded")
        if prev.upper <= prev.lower:
            raise TaxTableError(f"{where}[{i}]: upper must be greater than lower")
        if nxt.lower != prev.upper:
            raise TaxTableError(
                f"{where}[{i + 1}]: lower {nxt.lower} does not continue from {prev.upper}"
            )
    if bands[-1].upper is not None:
        raise TaxTableError(f"{where}: the last band must be unbounded (upper: null)")
    return tuple(bands)


def _section(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError as exc:
        raise TaxTableError(f"missing section {key!r}") from exc


def parse_tax_year(data: Any) -> TaxYearRules:
    """Build ``TaxYearRules`` from a parsed YAML mapping.

    Raises:
        TaxTableError: If a section is missing or a band table is malformed.
    """
    if not isinstance(data, dict):
        raise TaxTableError("tax table must be a mapping")

    medicare = _section(data, "medicare")
    hecs = _section(data, "hecs")
    payg = _section(data, "payg")
    try:
        return TaxYearRules(
            label=str(_section(data, "label")),
            income_tax=_parse_bands(_section(data, "income_tax"), "income_tax"),
            lito=_parse_bands(_section(data, "lito"), "lito"),
            medicare=MedicareRules(
                rate=_decimal(medicare["rate"], "medicare.rate"),
                single_threshold=_decimal(
                    medicare["single_threshold"], "medicare.single_threshold"
                ),
                family_threshold=_decimal(
                    medicare["family_threshold"], "medicare.family_threshold"
                ),
                dependent_increment=_decimal(
                    medicare["dependent_increment"], "medicare.dependent_increment"
                ),
                shade_in_fraction=_decimal(
                    medicare["shade_in_fraction"], "medicare.shade_in_fraction"
                ),
            ),
            hecs=HecsRules(
                repayment_threshold=_decimal(
                    hecs["repayment_threshold"], "hecs.repayment_threshold"
                ),
                bands=_parse_bands(hecs["bands"], "hecs.bands"),
            ),
            payg=PaygRules(
                brackets=_parse_bands(payg["brackets"], "payg.brackets"),
                medicare_threshold=_decimal(payg["medicare_threshold"], "payg.medicare_threshold"),
                medicare_rate=_decimal(payg["medicare_rate"], "payg.medicare_rate"),
            ),
        )
    except (KeyError, TypeError) as exc:
        raise TaxTableError(f"malformed tax table: {exc}") from exc


def table_path(label: str) -> str:
    """Package-relative path of the table for ``label`` (e.g. ``"2024-25"``)."""
    return f"taxes/tables/au_{label.replace('-', '_')}.yaml"


def available_tax_years() -> list[str]:
    """Labels of every bundled tax-year table."""
    tables = (PACKAGE_ROOT / "taxes" / "tables").glob("au_*.yaml")
    return sorted(p.stem[len("au_") :].replace("_", "-") for p in tables)


@lru_cache(maxsize=None)
def load_tax_year(label: str = DEFAULT_TAX_YEAR) -> TaxYearRules:
    """Load and validate the bundled rules for one income year.

    Raises:
        TaxTableError: If no table exists for ``label`` or it is malformed.
    """
    try:
        data = load_package_yaml(table_path(label))
    except FileNotFoundError as exc:
        raise TaxTableError(
            f"no tax table for {label!r}; available: {', '.join(available_tax_years())}"
        ) from exc
    rules = parse_tax_year(data)
    logger.debug("tax_year_loaded", tax_year=rules.label)
    return rules


def default_rules() -> TaxYearRules:
    """Rules for the default income year."""
    return load_tax_year(DEFAULT_TAX_YEAR)
