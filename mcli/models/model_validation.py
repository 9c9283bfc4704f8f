"""Typed validation results for the schema validators."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class ViolationKind(str, Enum):
    """Category of a schema violation."""

    MISSING = "missing"
    WRONG_TYPE = "wrong_type"
    EMPTY = "empty"
    BAD_FORMAT = "bad_format"
    OUT_OF_RANGE = "out_of_range"
    NOT_INTEGER = "not_integer"
    INVALID_CHOICE = "invalid_choice"
    UNKNOWN_FIELD = "unknown_field"
    DUPLICATE = "duplicate"
    INCONSISTENT = "inconsistent"


class Violation(BaseModel):
    """A single rule violation found while validating a record."""

    kind: ViolationKind
    field: str = Field(description="Dotted path of the offending field ('' for the record)")
    message: str = Field(description="Human-readable explanation")


class ValidationResult(BaseModel):
    """Outcome of validating a candidate record. Never raised, always returned."""

    violations: list[Violation] = Field(default_factory=list)

    @computed_field
    @property
    def valid(self) -> bool:
        """True when no rule was violated."""
        return not self.violations

    @computed_field
    @property
    def errors(self) -> list[str]:
        """Violation messages in discovery order."""
        return [v.message for v in self.violations]

    def kinds(self) -> set[ViolationKind]:
        """Distinct violation kinds present."""
        return {v.kind for v in self.violations}
