"""Schema validation for a single tool record."""

import re
from typing import Any

from mcli.consts import AGENT_SCORE_MAX, AGENT_SCORE_MIN, SLUG_PATTERN
from mcli.evaluators.score_calculator import compute_agent_score
from mcli.models.model_tool import AGENT_SCORE_DIMENSIONS, InstallMethod, Tier
from mcli.models.model_validation import ValidationResult, ViolationKind
from mcli.validators.base import ViolationCollector, as_mapping
from mcli.validators.score_validator import validate_score_vector

SLUG_REGEX = re.compile(SLUG_PATTERN)
URL_REGEX = re.compile(r"^https?://\S+$")

CAPABILITY_FLAGS = ("jsonOutput", "idempotent", "interactive", "streaming")
VALID_TIERS = [tier.value for tier in Tier]
VALID_INSTALL_METHODS = {method.value for method in InstallMethod}


def is_valid_slug(value: Any) -> bool:
    """True if value is a non-empty slug of lowercase letters, digits and hyphens."""
    return isinstance(value, str) and bool(SLUG_REGEX.fullmatch(value))


def validate_tool(candidate: Any) -> ValidationResult:
    """Validate a candidate tool record.

    Accepts raw JSON data or a CliTool model. All rule violations are
    collected; nothing is raised.

    Args:
        candidate: The record to check

    Returns:
        ValidationResult with every violation found
    """
    data = as_mapping(candidate)
    collector = ViolationCollector()

    if not isinstance(data, dict):
        collector.add(ViolationKind.WRONG_TYPE, "", "Tool must be an object")
        return collector.result()

    # Required display strings
    for field in ("slug", "name", "description"):
        collector.check_non_empty_string(data, field, field, f"Missing or invalid field: {field}")

    slug = data.get("slug")
    if isinstance(slug, str) and slug and not SLUG_REGEX.fullmatch(slug):
        collector.add(
            ViolationKind.BAD_FORMAT,
            "slug",
            "Slug must be lowercase alphanumeric with hyphens only",
        )

    agent_score_ok = collector.check_int_range(
        data.get("agentScore"),
        "agentScore",
        AGENT_SCORE_MIN,
        AGENT_SCORE_MAX,
        missing="agentScore" not in data or data["agentScore"] is None,
    )

    if data.get("tier") not in VALID_TIERS:
        collector.add(
            ViolationKind.INVALID_CHOICE,
            "tier",
            f"tier must be one of: {', '.join(VALID_TIERS)}",
        )

    _check_categories(collector, data.get("categories"))
    _check_vendor(collector, data.get("vendor"))
    _check_install(collector, data.get("install"))
    _check_capabilities(collector, data.get("capabilities"))

    for field in ("repo", "docs"):
        value = data.get(field)
        if value is not None and not (isinstance(value, str) and URL_REGEX.fullmatch(value)):
            collector.add(ViolationKind.BAD_FORMAT, field, f"{field} must be an http(s) URL")

    # Optional breakdown; when present the published score must follow from it
    if data.get("agentScores") is not None:
        scores_result = validate_score_vector(
            data["agentScores"], AGENT_SCORE_DIMENSIONS, field_prefix="agentScores"
        )
        collector.extend(scores_result)
        if scores_result.valid and agent_score_ok:
            expected = compute_agent_score(data["agentScores"])
            if data["agentScore"] != expected:
                collector.add(
                    ViolationKind.INCONSISTENT,
                    "agentScore",
                    f"agentScore {data['agentScore']} does not match "
                    f"{expected} computed from agentScores",
                )

    return collector.result()


def _check_categories(collector: ViolationCollector, categories: Any) -> None:
    if not isinstance(categories, list) or not categories:
        kind = ViolationKind.EMPTY if isinstance(categories, list) else ViolationKind.WRONG_TYPE
        if categories is None:
            kind = ViolationKind.MISSING
        collector.add(kind, "categories", "categories must be a non-empty list")
        return
    if not all(isinstance(c, str) and c for c in categories):
        collector.add(
            ViolationKind.WRONG_TYPE,
            "categories",
            "categories entries must be non-empty strings",
        )


def _check_vendor(collector: ViolationCollector, vendor: Any) -> None:
    if not isinstance(vendor, dict):
        kind = ViolationKind.MISSING if vendor is None else ViolationKind.WRONG_TYPE
        collector.add(kind, "vendor", "vendor must be an object")
        return
    collector.check_non_empty_string(vendor, "name", "vendor.name", "vendor.name is required")
    collector.check_non_empty_string(vendor, "domain", "vendor.domain", "vendor.domain is required")
    collector.check_bool(vendor, "verified", "vendor.verified")


def _check_install(collector: ViolationCollector, install: Any) -> None:
    if not isinstance(install, dict):
        kind = ViolationKind.MISSING if install is None else ViolationKind.WRONG_TYPE
        collector.add(kind, "install", "install must be an object")
        return
    for method, value in install.items():
        field = f"install.{method}"
        if method not in VALID_INSTALL_METHODS:
            collector.add(
                ViolationKind.UNKNOWN_FIELD, field, f"{field} is not a known install method"
            )
        elif value is not None and not isinstance(value, str):
            collector.add(ViolationKind.WRONG_TYPE, field, f"{field} must be a string")


def _check_capabilities(collector: ViolationCollector, capabilities: Any) -> None:
    if not isinstance(capabilities, dict):
        kind = ViolationKind.MISSING if capabilities is None else ViolationKind.WRONG_TYPE
        collector.add(kind, "capabilities", "capabilities must be an object")
        return
    for flag in CAPABILITY_FLAGS:
        collector.check_bool(capabilities, flag, f"capabilities.{flag}")
    collector.check_string_list(capabilities.get("auth"), "capabilities.auth")
