"""Validation of 5-dimension score vectors (agent scores or review scores)."""

from collections.abc import Sequence
from typing import Any

from mcli.consts import DIMENSION_MAX, DIMENSION_MIN
from mcli.models.model_tool import AGENT_SCORE_DIMENSIONS
from mcli.models.model_validation import ValidationResult, ViolationKind
from mcli.validators.base import ViolationCollector, as_mapping, join_path


def validate_score_vector(
    candidate: Any,
    dimensions: Sequence[str] = AGENT_SCORE_DIMENSIONS,
    field_prefix: str = "",
) -> ValidationResult:
    """Validate a score vector against an exact set of dimensions.

    Every named dimension must be present (no defaults) and hold an integer
    between 1 and 5. Keys outside the dimension set are rejected.

    Args:
        candidate: Mapping (or score model) to check
        dimensions: Wire names of the required dimensions
        field_prefix: Dotted path prepended to field names in messages

    Returns:
        ValidationResult listing every violation found
    """
    collector = ViolationCollector()
    data = as_mapping(candidate)

    if not isinstance(data, dict):
        label = field_prefix or "Scores"
        collector.add(ViolationKind.WRONG_TYPE, field_prefix, f"{label} must be an object")
        return collector.result()

    for dim in dimensions:
        field = join_path(field_prefix, dim)
        collector.check_int_range(
            data.get(dim),
            field,
            DIMENSION_MIN,
            DIMENSION_MAX,
            missing=dim not in data or data[dim] is None,
        )

    for key in data:
        if key not in dimensions:
            field = join_path(field_prefix, str(key))
            collector.add(ViolationKind.UNKNOWN_FIELD, field, f"{field} is not a known dimension")

    return collector.result()
