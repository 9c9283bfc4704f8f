"""Schema validation for agent review records."""

import re
from datetime import datetime
from typing import Any

from mcli.consts import PROOF_HASH_PATTERN
from mcli.models.model_review import REVIEW_SCORE_DIMENSIONS
from mcli.models.model_validation import ValidationResult, ViolationKind
from mcli.validators.base import ViolationCollector, as_mapping
from mcli.validators.score_validator import validate_score_vector
from mcli.validators.tool_validator import is_valid_slug

PROOF_HASH_REGEX = re.compile(PROOF_HASH_PATTERN)


def is_valid_proof_hash(value: Any) -> bool:
    """True if value is exactly 64 lowercase hex characters."""
    return isinstance(value, str) and bool(PROOF_HASH_REGEX.fullmatch(value))


def validate_review(candidate: Any) -> ValidationResult:
    """Validate a candidate review record.

    Existence of the reviewed tool and the one-review-per-agent rule are
    the review store's responsibility, not checked here.
    """
    data = as_mapping(candidate)
    collector = ViolationCollector()

    if not isinstance(data, dict):
        collector.add(ViolationKind.WRONG_TYPE, "", "Review must be an object")
        return collector.result()

    if collector.check_non_empty_string(data, "tool", "tool", "Missing or invalid field: tool"):
        if not is_valid_slug(data["tool"]):
            collector.add(
                ViolationKind.BAD_FORMAT,
                "tool",
                "tool must be a slug (lowercase alphanumeric with hyphens only)",
            )

    collector.check_non_empty_string(data, "agentId", "agentId", "Missing or invalid field: agentId")

    if data.get("scores") is None:
        collector.add(ViolationKind.MISSING, "scores", "scores is required")
    else:
        collector.extend(
            validate_score_vector(data["scores"], REVIEW_SCORE_DIMENSIONS, field_prefix="scores")
        )

    proof_hash = data.get("proofHash")
    if not is_valid_proof_hash(proof_hash):
        kind = ViolationKind.MISSING if proof_hash is None else ViolationKind.BAD_FORMAT
        collector.add(
            kind, "proofHash", "proofHash must be a SHA-256 hex digest (64 characters of a-f0-9)"
        )

    notes = data.get("notes")
    if notes is not None and not isinstance(notes, str):
        collector.add(ViolationKind.WRONG_TYPE, "notes", "notes must be a string")

    if collector.check_non_empty_string(
        data, "timestamp", "timestamp", "Missing or invalid field: timestamp"
    ):
        try:
            datetime.fromisoformat(data["timestamp"])
        except ValueError:
            collector.add(
                ViolationKind.BAD_FORMAT, "timestamp", "timestamp must be an ISO-8601 datetime"
            )

    return collector.result()
