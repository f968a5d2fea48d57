"""Serialization for inputs and results."""

from __future__ import annotations

import dataclasses
import hashlib
import json
from decimal import Decimal
from typing import Any

from taxmate.config.schema import TaxInputs
from taxmate.core.engine import TaxResult
from taxmate.utils.exceptions import ConfigError


def compute_inputs_hash(inputs: TaxInputs) -> str:
    """Compute a deterministic SHA-256 hash of the inputs.

    Uses canonical JSON (sorted keys, no whitespace) so the same logical
    inputs always produce the same hash.
    """
    canonical = json.dumps(
        inputs.model_dump(mode="json"), sort_keys=True, separators=(",", ":")
    )
    return hashlib.sha256(canonical.encode()).hexdigest()


def dump_inputs(inputs: TaxInputs) -> str:
    """Serialize inputs to a JSON string."""
    return json.dumps(inputs.model_dump(mode="json"), indent=2)


def load_inputs(json_str: str) -> TaxInputs:
    """Deserialize inputs from a JSON string.

    Raises:
        ConfigError: If the text is not JSON or does not describe ``TaxInputs``.
    """
    try:
        data: Any = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"inputs file is not valid JSON: {exc}") from exc
    try:
        return TaxInputs.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"inputs file is not valid: {exc}") from exc


def result_to_dict(result: TaxResult) -> dict[str, Any]:
    """Convert a result to JSON-safe primitives; amounts become strings."""
    data: dict[str, Any] = {}
    for f in dataclasses.fields(result):
        value = getattr(result, f.name)
        if isinstance(value, Decimal):
            data[f.name] = str(value)
        elif isinstance(value, dict):
            data[f.name] = {k: str(v) for k, v in value.items()}
        else:
            data[f.name] = value
    return data


def result_from_dict(data: dict[str, Any]) -> TaxResult:
    """Rebuild a result written by :func:`result_to_dict`."""
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(TaxResult):
        value = data[f.name]
        if f.name == "tax_year":
            kwargs[f.name] = str(value)
        elif f.name == "deduction_breakdown":
            kwargs[f.name] = {k: Decimal(v) for k, v in value.items()}
        else:
            kwargs[f.name] = Decimal(value)
    return TaxResult(**kwargs)


def dump_result(result: TaxResult) -> str:
    """Serialize a result to a JSON string."""
    return json.dumps(result_to_dict(result), indent=2)
