"""Aggregation of independent agent reviews into per-dimension statistics."""

from collections.abc import Iterable, Sequence
from fractions import Fraction

from mcli.consts import DIMENSION_MAX, FAVORABLE_THRESHOLD
from mcli.evaluators.score_calculator import round_half_up
from mcli.models.model_review import (
    REVIEW_SCORE_DIMENSIONS,
    AggregateResult,
    DimensionStats,
    Review,
)


def get_reviews_for_tool(reviews: Iterable[Review], slug: str) -> list[Review]:
    """Return the reviews of one tool, in their original order."""
    return [review for review in reviews if review.tool == slug]


def aggregate_reviews(reviews: Sequence[Review]) -> AggregateResult | None:
    """Aggregate reviews of a single tool.

    Every review counts equally: no recency, reputation or outlier weighting.

    The overall score is the mean of the (unrounded) dimension means, scaled
    from 1-5 onto 0-10. This is not the mean of each review's own score.

    Args:
        reviews: Reviews of one tool (validated)

    Returns:
        AggregateResult, or None when there are no reviews yet
    """
    if not reviews:
        return None

    count = len(reviews)
    vectors = [review.scores.model_dump(by_alias=True) for review in reviews]
    dimensions: dict[str, DimensionStats] = {}
    total_of_means = Fraction(0)

    for dim in REVIEW_SCORE_DIMENSIONS:
        values = [vector[dim] for vector in vectors]
        mean = Fraction(sum(values), count)
        favorable = sum(1 for value in values if value >= FAVORABLE_THRESHOLD)

        dimensions[dim] = DimensionStats(
            avg=float(round_half_up(mean, 1)),
            pct=int(round_half_up(Fraction(favorable, count) * 100)),
        )
        total_of_means += mean

    mean_of_means = total_of_means / len(REVIEW_SCORE_DIMENSIONS)
    avg_score = round_half_up(mean_of_means / DIMENSION_MAX * 10, 1)

    return AggregateResult(count=count, avg_score=float(avg_score), dimensions=dimensions)
