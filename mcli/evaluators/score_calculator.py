"""Weighted scoring of 5-dimension vectors onto the 1-10 scale."""

import math
from collections.abc import Mapping
from fractions import Fraction
from typing import Any

from pydantic import BaseModel

from mcli.consts import DIMENSION_MAX

# Agent-friendliness weights: output format and non-interactivity dominate
AGENT_SCORE_WEIGHTS: dict[str, int] = {
    "jsonOutput": 3,
    "nonInteractive": 3,
    "tokenEfficiency": 2,
    "safetyFeatures": 1,
    "pipelineFriendly": 1,
}

# Review overall score: every dimension counts the same
REVIEW_SCORE_WEIGHTS: dict[str, int] = {
    "jsonParseable": 1,
    "errorClarity": 1,
    "authSimplicity": 1,
    "idempotency": 1,
    "docsSufficient": 1,
}


def round_half_up(value: Fraction | float, ndigits: int = 0) -> Fraction:
    """Round half away from zero for non-negative values (2.5 -> 3, not 2)."""
    scale = Fraction(10) ** ndigits
    return Fraction(math.floor(Fraction(value) * scale + Fraction(1, 2))) / scale


def _vector_values(vector: Mapping[str, Any] | BaseModel) -> Mapping[str, Any]:
    if isinstance(vector, BaseModel):
        return vector.model_dump(by_alias=True)
    return vector


def compute_score(vector: Mapping[str, Any] | BaseModel, weights: Mapping[str, float]) -> int:
    """Map a 5-dimension vector to a single 1-10 rating.

    score = round(sum(d_i * w_i) / sum(5 * w_i) * 10)

    Computed with exact fractions, so ties always round up. The vector is
    assumed to be validated already: every weighted dimension present and
    within 1-5. With that precondition the result is 2 for an all-1 vector
    and 10 for an all-5 vector.

    Args:
        vector: Dimension values keyed by wire name, or a score model
        weights: Weight per dimension wire name

    Returns:
        Integer rating
    """
    values = _vector_values(vector)
    weighted = sum(Fraction(values[dim]) * Fraction(w) for dim, w in weights.items())
    maximum = sum(DIMENSION_MAX * Fraction(w) for w in weights.values())
    return int(round_half_up(weighted / maximum * 10))


def compute_agent_score(scores: Mapping[str, Any] | BaseModel) -> int:
    """Agent-friendliness rating (1-10) from an agentScores vector."""
    return compute_score(scores, AGENT_SCORE_WEIGHTS)


def compute_review_score(scores: Mapping[str, Any] | BaseModel) -> int:
    """Overall rating (1-10) of a single review."""
    return compute_score(scores, REVIEW_SCORE_WEIGHTS)


def main() -> None:
    """Demonstrate both weighting schemes on sample vectors."""
    print("Score Calculator Demo")
    print("=" * 50)

    samples = [
        ("All minimum", dict.fromkeys(AGENT_SCORE_WEIGHTS, 1)),
        ("All maximum", dict.fromkeys(AGENT_SCORE_WEIGHTS, 5)),
        (
            "Mixed (jq-like output, some prompts)",
            {
                "jsonOutput": 5,
                "nonInteractive": 3,
                "tokenEfficiency": 4,
                "safetyFeatures": 2,
                "pipelineFriendly": 3,
            },
        ),
    ]

    print("\n## Agent weights")
    for dim, weight in AGENT_SCORE_WEIGHTS.items():
        print(f"  {dim}: {weight}")

    for label, vector in samples:
        print(f"\n{label}: {vector}")
        print(f"  Agent score: {compute_agent_score(vector)}/10")

    review = {"jsonParseable": 5, "errorClarity": 4, "authSimplicity": 3, "idempotency": 4, "docsSufficient": 2}
    print(f"\nReview {review}")
    print(f"  Review score: {compute_review_score(review)}/10")


if __name__ == "__main__":
    main()
