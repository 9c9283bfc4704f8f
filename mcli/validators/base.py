"""Shared helpers for the schema validators.

Validators work on raw, untrusted data (usually freshly parsed JSON). They
never raise: every broken rule is recorded as a Violation and validation
continues so that callers see all problems at once.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from mcli.models.model_validation import ValidationResult, Violation, ViolationKind


def as_mapping(candidate: Any) -> Any:
    """Return the wire-shaped dict for pydantic models, the candidate otherwise."""
    if isinstance(candidate, BaseModel):
        return candidate.model_dump(mode="json", by_alias=True, exclude_none=True)
    return candidate


def is_number(value: Any) -> bool:
    """True for int/float values. Booleans do not count as numbers."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """True for ints and integral floats such as 4.0."""
    if not is_number(value):
        return False
    return isinstance(value, int) or value.is_integer()


def join_path(prefix: str, field: str) -> str:
    """Join a dotted field path."""
    return f"{prefix}.{field}" if prefix else field


class ViolationCollector:
    """Accumulates violations for one record."""

    def __init__(self) -> None:
        self.violations: list[Violation] = []

    def add(self, kind: ViolationKind, field: str, message: str) -> None:
        self.violations.append(Violation(kind=kind, field=field, message=message))

    def extend(self, result: ValidationResult) -> None:
        self.violations.extend(result.violations)

    def result(self) -> ValidationResult:
        return ValidationResult(violations=list(self.violations))

    def check_non_empty_string(
        self, data: Mapping[str, Any], key: str, field: str, message: str
    ) -> bool:
        """Record a violation unless data[key] is a non-empty string."""
        if key not in data or data[key] is None:
            self.add(ViolationKind.MISSING, field, message)
            return False
        value = data[key]
        if not isinstance(value, str):
            self.add(ViolationKind.WRONG_TYPE, field, message)
            return False
        if not value:
            self.add(ViolationKind.EMPTY, field, message)
            return False
        return True

    def check_bool(self, data: Mapping[str, Any], key: str, field: str) -> bool:
        """Record a violation unless data[key] is a boolean."""
        value = data.get(key)
        if isinstance(value, bool):
            return True
        kind = ViolationKind.MISSING if value is None else ViolationKind.WRONG_TYPE
        self.add(kind, field, f"{field} must be boolean")
        return False

    def check_int_range(
        self, value: Any, field: str, low: int, high: int, *, missing: bool = False
    ) -> bool:
        """Record a violation unless value is an integer within [low, high]."""
        message = f"{field} must be an integer between {low} and {high}"
        if missing:
            self.add(ViolationKind.MISSING, field, f"{field} is required")
            return False
        if not is_number(value):
            self.add(ViolationKind.WRONG_TYPE, field, message)
            return False
        if not is_integer(value):
            self.add(ViolationKind.NOT_INTEGER, field, message)
            return False
        if not low <= value <= high:
            self.add(ViolationKind.OUT_OF_RANGE, field, message)
            return False
        return True

    def check_string_list(self, value: Any, field: str) -> bool:
        """Record a violation unless value is a list of strings."""
        if not isinstance(value, list):
            kind = ViolationKind.MISSING if value is None else ViolationKind.WRONG_TYPE
            self.add(kind, field, f"{field} must be a list")
            return False
        if not all(isinstance(item, str) for item in value):
            self.add(ViolationKind.WRONG_TYPE, field, f"{field} entries must be strings")
            return False
        return True
