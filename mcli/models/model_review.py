"""Review models: one agent's experiential evaluation of one tool."""

from pydantic import Field

from mcli.consts import PROOF_HASH_PATTERN
from mcli.models.common import WireModel

# Wire names of the experiential review dimensions
REVIEW_SCORE_DIMENSIONS = (
    "jsonParseable",
    "errorClarity",
    "authSimplicity",
    "idempotency",
    "docsSufficient",
)


class ReviewScores(WireModel):
    """Per-dimension review ratings, each 1-5 (5 = excellent)."""

    json_parseable: int = Field(ge=1, le=5)
    error_clarity: int = Field(ge=1, le=5)
    auth_simplicity: int = Field(ge=1, le=5)
    idempotency: int = Field(ge=1, le=5)
    docs_sufficient: int = Field(ge=1, le=5)


class Review(WireModel):
    """A single agent's review of a tool.

    The proof hash is a caller-supplied commitment to real tool usage; it is
    format-checked but never verified against actual command output.
    """

    tool: str = Field(description="Slug of the reviewed tool")
    agent_id: str = Field(description="Opaque, self-reported agent identifier")
    scores: ReviewScores
    proof_hash: str = Field(pattern=PROOF_HASH_PATTERN)
    notes: str | None = None
    timestamp: str = Field(description="ISO-8601 submission time")


class DimensionStats(WireModel):
    """Aggregated statistics for one review dimension."""

    avg: float = Field(description="Mean rating, one decimal")
    pct: int = Field(ge=0, le=100, description="Share of reviews rating >= 4")


class AggregateResult(WireModel):
    """Aggregate over all reviews of one tool."""

    count: int = Field(ge=1)
    avg_score: float = Field(ge=0.0, le=10.0, description="Overall 0-10 score, one decimal")
    dimensions: dict[str, DimensionStats] = Field(default_factory=dict)
