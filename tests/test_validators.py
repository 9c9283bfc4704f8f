"""Tests for the schema validators."""

import copy

import pytest

from conftest import PROOF_HASH, make_review
from mcli.models.model_validation import ViolationKind
from mcli.validators import (
    is_valid_proof_hash,
    is_valid_slug,
    validate_registry,
    validate_review,
    validate_score_vector,
    validate_tool,
)

REVIEW_SCORES = {
    "jsonParseable": 5,
    "errorClarity": 4,
    "authSimplicity": 3,
    "idempotency": 4,
    "docsSufficient": 2,
}


@pytest.fixture
def review_data() -> dict:
    return {
        "tool": "jq",
        "agentId": "4c1e9a7b22d0f318",
        "scores": dict(REVIEW_SCORES),
        "proofHash": PROOF_HASH,
        "notes": "parsed cleanly",
        "timestamp": "2026-09-14T10:22:31Z",
    }


class TestSlug:
    """Tests for slug format."""

    @pytest.mark.parametrize("slug", ["gh", "aws-cli", "k9s", "a", "1password-cli"])
    def test_valid(self, slug: str) -> None:
        assert is_valid_slug(slug)

    @pytest.mark.parametrize("slug", ["", "GH", "my_tool", "my tool", "gh\n", "gh.cli", None, 7])
    def test_invalid(self, slug) -> None:
        assert not is_valid_slug(slug)


class TestProofHash:
    """Tests for proof hash format."""

    def test_valid(self) -> None:
        assert is_valid_proof_hash("0123456789abcdef" * 4)

    @pytest.mark.parametrize(
        "value", ["", "ab" * 31, "ab" * 33, "AB" * 32, "zz" * 32, None, ("ab" * 32) + "\n"]
    )
    def test_invalid(self, value) -> None:
        assert not is_valid_proof_hash(value)


class TestScoreVector:
    """Tests for validate_score_vector."""

    def test_valid_agent_vector(self, tool_data: dict) -> None:
        assert validate_score_vector(tool_data["agentScores"]).valid

    def test_missing_dimension(self, tool_data: dict) -> None:
        scores = tool_data["agentScores"]
        del scores["safetyFeatures"]

        result = validate_score_vector(scores)

        assert not result.valid
        assert result.errors == ["safetyFeatures is required"]
        assert result.kinds() == {ViolationKind.MISSING}

    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (0, ViolationKind.OUT_OF_RANGE),
            (6, ViolationKind.OUT_OF_RANGE),
            (3.5, ViolationKind.NOT_INTEGER),
            ("4", ViolationKind.WRONG_TYPE),
            (True, ViolationKind.WRONG_TYPE),
        ],
    )
    def test_bad_value(self, tool_data: dict, value, kind: ViolationKind) -> None:
        scores = tool_data["agentScores"]
        scores["jsonOutput"] = value

        result = validate_score_vector(scores, field_prefix="agentScores")

        assert result.errors == ["agentScores.jsonOutput must be an integer between 1 and 5"]
        assert result.violations[0].kind == kind
        assert result.violations[0].field == "agentScores.jsonOutput"

    def test_integral_float_accepted(self, tool_data: dict) -> None:
        tool_data["agentScores"]["jsonOutput"] = 5.0
        assert validate_score_vector(tool_data["agentScores"]).valid

    def test_unknown_dimension(self, tool_data: dict) -> None:
        tool_data["agentScores"]["speed"] = 5
        result = validate_score_vector(tool_data["agentScores"])
        assert result.errors == ["speed is not a known dimension"]

    def test_not_an_object(self) -> None:
        result = validate_score_vector([5, 5, 5, 5, 5])
        assert result.errors == ["Scores must be an object"]

    def test_review_dimensions(self) -> None:
        from mcli.models.model_review import REVIEW_SCORE_DIMENSIONS

        assert validate_score_vector(REVIEW_SCORES, REVIEW_SCORE_DIMENSIONS).valid
        # Agent dimensions do not satisfy the review dimension set
        assert not validate_score_vector(REVIEW_SCORES).valid


class TestValidateTool:
    """Tests for validate_tool."""

    def test_valid(self, tool_data: dict) -> None:
        result = validate_tool(tool_data)
        assert result.valid, result.errors

    def test_accepts_model(self, sample_tool) -> None:
        assert validate_tool(sample_tool).valid

    def test_not_an_object(self) -> None:
        assert validate_tool("gh").errors == ["Tool must be an object"]

    def test_missing_required_strings(self, tool_data: dict) -> None:
        del tool_data["name"]
        tool_data["description"] = ""

        result = validate_tool(tool_data)

        assert "Missing or invalid field: name" in result.errors
        assert "Missing or invalid field: description" in result.errors

    def test_bad_slug(self, tool_data: dict) -> None:
        tool_data["slug"] = "Do_CTL"
        result = validate_tool(tool_data)
        assert result.errors == ["Slug must be lowercase alphanumeric with hyphens only"]

    @pytest.mark.parametrize("score", [0, 11, 7.5, "8", None])
    def test_bad_agent_score(self, tool_data: dict, score) -> None:
        del tool_data["agentScores"]
        tool_data["agentScore"] = score

        result = validate_tool(tool_data)

        assert not result.valid
        assert result.violations[0].field == "agentScore"

    def test_bad_tier(self, tool_data: dict) -> None:
        tool_data["tier"] = "gold"
        result = validate_tool(tool_data)
        assert result.errors == ["tier must be one of: verified, community, unverified"]
        assert result.kinds() == {ViolationKind.INVALID_CHOICE}

    def test_missing_tier(self, tool_data: dict) -> None:
        del tool_data["tier"]
        assert not validate_tool(tool_data).valid

    def test_empty_categories(self, tool_data: dict) -> None:
        tool_data["categories"] = []
        assert validate_tool(tool_data).errors == ["categories must be a non-empty list"]

    def test_vendor_checks(self, tool_data: dict) -> None:
        tool_data["vendor"] = {"name": "", "verified": "yes"}
        result = validate_tool(tool_data)
        assert result.errors == [
            "vendor.name is required",
            "vendor.domain is required",
            "vendor.verified must be boolean",
        ]

    def test_unknown_install_method(self, tool_data: dict) -> None:
        tool_data["install"] = {"brew": "doctl", "snap": "doctl"}
        result = validate_tool(tool_data)
        assert result.errors == ["install.snap is not a known install method"]

    def test_capability_flags(self, tool_data: dict) -> None:
        tool_data["capabilities"]["jsonOutput"] = "true"
        del tool_data["capabilities"]["auth"]

        result = validate_tool(tool_data)

        assert "capabilities.jsonOutput must be boolean" in result.errors
        assert "capabilities.auth must be a list" in result.errors

    def test_bad_urls(self, tool_data: dict) -> None:
        tool_data["repo"] = "github.com/digitalocean/doctl"
        tool_data["docs"] = "ftp://docs.example.com"

        result = validate_tool(tool_data)

        assert result.errors == ["repo must be an http(s) URL", "docs must be an http(s) URL"]

    def test_inconsistent_agent_score(self, tool_data: dict) -> None:
        tool_data["agentScore"] = 9
        result = validate_tool(tool_data)
        assert result.errors == ["agentScore 9 does not match 8 computed from agentScores"]
        assert result.kinds() == {ViolationKind.INCONSISTENT}

    def test_invalid_breakdown_reported_with_prefix(self, tool_data: dict) -> None:
        tool_data["agentScores"]["pipelineFriendly"] = 9
        result = validate_tool(tool_data)
        assert result.errors == ["agentScores.pipelineFriendly must be an integer between 1 and 5"]

    def test_collects_all_violations(self, tool_data: dict) -> None:
        """Test validation continues after the first failure."""
        tool_data["slug"] = "BAD"
        tool_data["tier"] = "gold"
        tool_data["categories"] = "cloud"
        assert len(validate_tool(tool_data).errors) == 3


class TestValidateReview:
    """Tests for validate_review."""

    def test_valid(self, review_data: dict) -> None:
        result = validate_review(review_data)
        assert result.valid, result.errors

    def test_accepts_model(self) -> None:
        assert validate_review(make_review()).valid

    def test_notes_optional(self, review_data: dict) -> None:
        del review_data["notes"]
        assert validate_review(review_data).valid

    def test_missing_scores(self, review_data: dict) -> None:
        del review_data["scores"]
        assert validate_review(review_data).errors == ["scores is required"]

    def test_bad_score_prefixed(self, review_data: dict) -> None:
        review_data["scores"]["idempotency"] = 0
        assert validate_review(review_data).errors == [
            "scores.idempotency must be an integer between 1 and 5"
        ]

    @pytest.mark.parametrize("proof_hash", [None, "abc", "AB" * 32])
    def test_bad_proof_hash(self, review_data: dict, proof_hash) -> None:
        review_data["proofHash"] = proof_hash
        assert validate_review(review_data).errors == [
            "proofHash must be a SHA-256 hex digest (64 characters of a-f0-9)"
        ]

    def test_bad_tool_slug(self, review_data: dict) -> None:
        review_data["tool"] = "Not A Slug"
        result = validate_review(review_data)
        assert result.violations[0].field == "tool"

    def test_bad_timestamp(self, review_data: dict) -> None:
        review_data["timestamp"] = "yesterday"
        assert validate_review(review_data).errors == ["timestamp must be an ISO-8601 datetime"]

    def test_not_an_object(self) -> None:
        assert validate_review(None).errors == ["Review must be an object"]


class TestValidateRegistry:
    """Tests for validate_registry."""

    def test_valid(self, sample_registry) -> None:
        result = validate_registry(sample_registry.to_wire())
        assert result.valid, result.errors

    def test_bundled_registry_is_valid(self) -> None:
        import json

        from mcli.consts import BUNDLED_REGISTRY_PATH

        data = json.loads(BUNDLED_REGISTRY_PATH.read_text(encoding="utf-8"))
        result = validate_registry(data)
        assert result.valid, result.errors

    def test_missing_tools(self) -> None:
        result = validate_registry({"version": "1.0"})
        assert result.errors == ["Registry must have a tools list"]

    def test_missing_version(self) -> None:
        result = validate_registry({"tools": []})
        assert result.errors == ["Registry must have a version string"]

    def test_not_an_object(self) -> None:
        assert validate_registry([]).errors == ["Registry must be an object"]

    def test_duplicate_slugs(self, tool_data: dict) -> None:
        data = {"version": "1.0", "tools": [tool_data, copy.deepcopy(tool_data), copy.deepcopy(tool_data)]}

        result = validate_registry(data)

        assert result.errors == ["Duplicate slug: doctl", "Duplicate slug: doctl"]
        assert [v.field for v in result.violations] == ["tools[1].slug", "tools[2].slug"]

    def test_tool_errors_prefixed(self, tool_data: dict) -> None:
        tool_data["tier"] = "gold"
        broken = {"slug": "Bad Slug"}

        result = validate_registry({"version": "1.0", "tools": [tool_data, broken]})

        assert 'Tool "doctl": tier must be one of: verified, community, unverified' in result.errors
        assert 'Tool "unknown": Slug must be lowercase alphanumeric with hyphens only' in result.errors
        assert result.violations[0].field == "tools[0].tier"

    def test_non_object_tool(self) -> None:
        result = validate_registry({"version": "1.0", "tools": ["gh"]})
        assert result.errors == ['Tool "unknown": Tool must be an object']
        assert result.violations[0].field == "tools[0]"

    def test_updated_must_be_a_string(self, tool_data: dict) -> None:
        result = validate_registry({"version": "1.0", "updated": 20261001, "tools": [tool_data]})

        assert result.errors == ["Registry updated date must be a string"]
        assert result.violations[0].kind == ViolationKind.WRONG_TYPE

    def test_updated_is_optional(self, tool_data: dict) -> None:
        assert validate_registry({"version": "1.0", "updated": None, "tools": [tool_data]}).valid
