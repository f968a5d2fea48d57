"""JSON-file store of named, saved calculations."""

from __future__ import annotations

import json
import os
import tempfile
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from taxmate.config.schema import TaxInputs
from taxmate.core.engine import TaxResult
from taxmate.io.serialize import compute_inputs_hash, result_from_dict, result_to_dict
from taxmate.utils.exceptions import RecordNotFoundError, StoreError
from taxmate.utils.logging import get_logger
from taxmate.utils.money import ZERO

FORMAT_VERSION = 1

logger = get_logger(__name__)


@dataclass(frozen=True)
class SavedCalculation:
    """A result persisted together with the inputs that produced it."""

    id: str
    name: str | None
    saved_at: datetime
    inputs: TaxInputs
    result: TaxResult
    withholding_estimated: bool = False
    inputs_hash: str = ""

    @property
    def display_name(self) -> str:
        return self.name or f"Calculation {self.saved_at:%d %b %Y %H:%M}"


@dataclass(frozen=True)
class CalculationStats:
    """Totals across every saved calculation."""

    total_calculations: int
    total_refunds: Decimal
    total_owed: Decimal
    average_refund: Decimal
    refund_count: int
    owed_count: int


def _record_to_dict(record: SavedCalculation) -> dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "saved_at": record.saved_at.isoformat(),
        "withholding_estimated": record.withholding_estimated,
        "inputs_hash": record.inputs_hash,
        "inputs": record.inputs.model_dump(mode="json"),
        "result": result_to_dict(record.result),
    }


def _record_from_dict(data: dict[str, Any]) -> SavedCalculation:
    inputs = TaxInputs.model_validate(data["inputs"])
    return SavedCalculation(
        id=str(data["id"]),
        name=data.get("name"),
        saved_at=datetime.fromisoformat(data["saved_at"]),
        inputs=inputs,
        result=result_from_dict(data["result"]),
        withholding_estimated=bool(data.get("withholding_estimated", False)),
        inputs_hash=str(data.get("inputs_hash") or compute_inputs_hash(inputs)),
    )


class ResultStore:
    """Saved calculations kept in a single JSON file.

    Every mutation rewrites the whole file through a temporary file and an
    atomic rename, so readers never see a half-written store.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"cannot read saved calculations from {self._path}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("calculations"), list):
            raise StoreError(f"{self._path} is not a taxmate store")
        records: list[dict[str, Any]] = data["calculations"]
        if not all(isinstance(r, dict) for r in records):
            raise StoreError(f"{self._path} contains a malformed record")
        return records

    def _write(self, records: list[dict[str, Any]]) -> None:
        payload = {"version": FORMAT_VERSION, "calculations": records}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=".calculations-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            raise StoreError(f"cannot write saved calculations to {self._path}: {exc}") from exc

    def _load_all(self) -> list[SavedCalculation]:
        try:
            return [_record_from_dict(r) for r in self._read()]
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise StoreError(f"{self._path} contains a malformed record: {exc}") from exc

    def _resolve_id(self, records: list[dict[str, Any]], record_id: str) -> int:
        """Index of the record matching ``record_id`` exactly or by unique prefix."""
        exact = [i for i, r in enumerate(records) if r.get("id") == record_id]
        if exact:
            return exact[0]
        matches = [i for i, r in enumerate(records) if str(r.get("id", "")).startswith(record_id)]
        if len(matches) == 1 and record_id:
            return matches[0]
        raise RecordNotFoundError(record_id)

    def save(
        self,
        inputs: TaxInputs,
        result: TaxResult,
        name: str | None = None,
        withholding_estimated: bool = False,
    ) -> SavedCalculation:
        """Persist a calculation and return the stored record."""
        record = SavedCalculation(
            id=uuid.uuid4().hex,
            name=name.strip() if name and name.strip() else None,
            saved_at=datetime.now(timezone.utc),
            inputs=inputs,
            result=result,
            withholding_estimated=withholding_estimated,
            inputs_hash=compute_inputs_hash(inputs),
        )
        records = self._read()
        records.insert(0, _record_to_dict(record))
        self._write(records)
        logger.info("calculation_saved", id=record.id, name=record.name)
        return record

    def all(self) -> list[SavedCalculation]:
        """Every saved calculation, newest first."""
        return sorted(self._load_all(), key=lambda r: r.saved_at, reverse=True)

    def find_by_inputs(self, inputs: TaxInputs) -> list[SavedCalculation]:
        """Saved calculations made from the same inputs, newest first."""
        digest = compute_inputs_hash(inputs)
        return [r for r in self.all() if r.inputs_hash == digest]

    def get(self, record_id: str) -> SavedCalculation:
        """Look up a calculation by id or unique id prefix.

        Raises:
            RecordNotFoundError: If nothing (or more than one record) matches.
        """
        records = self._read()
        index = self._resolve_id(records, record_id)
        try:
            return _record_from_dict(records[index])
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise StoreError(f"saved calculation {record_id!r} is malformed: {exc}") from exc

    def rename(self, record_id: str, name: str) -> None:
        records = self._read()
        index = self._resolve_id(records, record_id)
        records[index]["name"] = name.strip() or None
        self._write(records)
        logger.info("calculation_renamed", id=records[index]["id"], name=name)

    def delete(self, record_id: str) -> None:
        records = self._read()
        index = self._resolve_id(records, record_id)
        removed = records.pop(index)
        self._write(records)
        logger.info("calculation_deleted", id=removed["id"])

    def clear(self) -> int:
        """Remove every saved calculation and return how many there were."""
        count = len(self._read())
        self._write([])
        logger.info("calculations_cleared", count=count)
        return count

    def stats(self) -> CalculationStats:
        """Refund and owing totals across all saved calculations."""
        outcomes = [r.result.refund_or_owing for r in self._load_all()]
        refunds = [v for v in outcomes if v > ZERO]
        owed = [-v for v in outcomes if v < ZERO]
        total_refunds = sum(refunds, ZERO)
        return CalculationStats(
            total_calculations=len(outcomes),
            total_refunds=total_refunds,
            total_owed=sum(owed, ZERO),
            average_refund=total_refunds / len(refunds) if refunds else ZERO,
            refund_count=len(refunds),
            owed_count=len(owed),
        )
