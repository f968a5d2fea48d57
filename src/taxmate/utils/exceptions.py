"""Custom exceptions for taxmate."""

from __future__ import annotations


class TaxmateError(Exception):
    """Base exception for taxmate."""


class ConfigError(TaxmateError):
    """Invalid configuration."""


class TaxTableError(ConfigError):
    """A tax-year rule table is missing or malformed."""


class InputValidationError(TaxmateError):
    """User-entered values failed validation.

    Attributes:
        errors: Mapping of field key to a human-readable message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid input for: {fields}")


class StoreError(TaxmateError):
    """Saved calculations could not be read or written."""


class RecordNotFoundError(StoreError):
    """No saved calculation exists with the requested id."""

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"No saved calculation with id {record_id!r}")
