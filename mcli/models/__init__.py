"""Pydantic models for mcli."""

from mcli.models.model_review import (
    REVIEW_SCORE_DIMENSIONS,
    AggregateResult,
    DimensionStats,
    Review,
    ReviewScores,
)
from mcli.models.model_storage import Registry, ReviewsFile
from mcli.models.model_tool import (
    AGENT_SCORE_DIMENSIONS,
    AgentScores,
    Capabilities,
    CliTool,
    InstallMethod,
    InstallMethods,
    Tier,
    Vendor,
)
from mcli.models.model_validation import ValidationResult, Violation, ViolationKind
from mcli.models.model_verify import CheckResult, VerificationChecks, VerificationResult

__all__ = [
    # Tool models
    "AgentScores",
    "Capabilities",
    "CliTool",
    "InstallMethod",
    "InstallMethods",
    "Tier",
    "Vendor",
    # Review models
    "AggregateResult",
    "DimensionStats",
    "Review",
    "ReviewScores",
    # Storage models
    "Registry",
    "ReviewsFile",
    # Validation models
    "ValidationResult",
    "Violation",
    "ViolationKind",
    # Verification models
    "CheckResult",
    "VerificationChecks",
    "VerificationResult",
    # Dimension names
    "AGENT_SCORE_DIMENSIONS",
    "REVIEW_SCORE_DIMENSIONS",
]
