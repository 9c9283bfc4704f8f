"""Scoring and trust evaluation for registry tools.

- Score calculator: weighted 1-5 dimension vectors -> 1-10 rating
- Review aggregator: per-dimension means and favorable percentages
- Provenance verifier: GitHub-backed checks -> tier recommendation

The calculator and aggregator are pure functions. The verifier performs a
single outbound lookup per tool and never raises for network failures.
"""

from mcli.evaluators.review_aggregator import aggregate_reviews, get_reviews_for_tool
from mcli.evaluators.score_calculator import (
    AGENT_SCORE_WEIGHTS,
    REVIEW_SCORE_WEIGHTS,
    compute_agent_score,
    compute_review_score,
    compute_score,
)
from mcli.evaluators.verification import (
    ProvenanceVerifier,
    domain_to_org_candidates,
    parse_github_repo,
    recommend_tier,
    verify_tool,
    verify_tools,
)

__all__ = [
    # Score calculator
    "AGENT_SCORE_WEIGHTS",
    "REVIEW_SCORE_WEIGHTS",
    "compute_score",
    "compute_agent_score",
    "compute_review_score",
    # Review aggregator
    "get_reviews_for_tool",
    "aggregate_reviews",
    # Verification
    "ProvenanceVerifier",
    "verify_tool",
    "verify_tools",
    "recommend_tier",
    "parse_github_repo",
    "domain_to_org_candidates",
]
