"""Schema validators for tool, review and registry records.

Validators take untrusted data and return a ValidationResult that lists
every violated rule. They never raise for malformed input; callers decide
whether an invalid record blocks a write.
"""

from mcli.validators.registry_validator import validate_registry
from mcli.validators.review_validator import is_valid_proof_hash, validate_review
from mcli.validators.score_validator import validate_score_vector
from mcli.validators.tool_validator import is_valid_slug, validate_tool

__all__ = [
    "validate_tool",
    "validate_review",
    "validate_registry",
    "validate_score_vector",
    "is_valid_slug",
    "is_valid_proof_hash",
]
