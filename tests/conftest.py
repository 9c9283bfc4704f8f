"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from mcli.models.model_review import Review, ReviewScores
from mcli.models.model_storage import Registry
from mcli.models.model_tool import (
    AgentScores,
    Capabilities,
    CliTool,
    InstallMethods,
    Tier,
    Vendor,
)

PROOF_HASH = "ab" * 32


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every test at a private MCLI_HOME and strip overriding env vars."""
    home = tmp_path / "mcli-home"
    monkeypatch.setenv("MCLI_HOME", str(home))
    for var in ("MCLI_REGISTRY_PATH", "MCLI_REGISTRY_URL", "MCLI_GITHUB_API_URL", "GITHUB_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def tool_data() -> dict[str, Any]:
    """A valid tool record in wire (camelCase) shape."""
    return {
        "slug": "doctl",
        "name": "DigitalOcean CLI",
        "vendor": {"name": "DigitalOcean", "domain": "digitalocean.com", "verified": True},
        "repo": "https://github.com/digitalocean/doctl",
        "docs": "https://docs.digitalocean.com/reference/doctl/",
        "install": {"brew": "doctl"},
        "capabilities": {
            "jsonOutput": True,
            "auth": ["env:DIGITALOCEAN_ACCESS_TOKEN"],
            "idempotent": True,
            "interactive": False,
            "streaming": False,
        },
        "agentScore": 8,
        "agentScores": {
            "jsonOutput": 5,
            "nonInteractive": 4,
            "tokenEfficiency": 4,
            "safetyFeatures": 3,
            "pipelineFriendly": 4,
        },
        "categories": ["cloud", "infrastructure"],
        "description": "Official command line interface for the DigitalOcean API",
        "tier": "verified",
    }


@pytest.fixture
def sample_tool() -> CliTool:
    """A tool whose GitHub owner matches its vendor domain."""
    return CliTool(
        slug="doctl",
        name="DigitalOcean CLI",
        vendor=Vendor(name="DigitalOcean", domain="digitalocean.com", verified=True),
        repo="https://github.com/digitalocean/doctl",
        install=InstallMethods(brew="doctl"),
        capabilities=Capabilities(
            json_output=True, auth=[], idempotent=True, interactive=False, streaming=False
        ),
        agent_score=8,
        agent_scores=AgentScores(
            json_output=5, non_interactive=4, token_efficiency=4, safety_features=3, pipeline_friendly=4
        ),
        categories=["cloud", "infrastructure"],
        description="Official command line interface for the DigitalOcean API",
        tier=Tier.COMMUNITY,
    )


def make_tool(slug: str, agent_score: int = 5, **overrides: Any) -> CliTool:
    """Build a minimal valid tool without a score breakdown."""
    fields: dict[str, Any] = {
        "slug": slug,
        "name": slug.upper(),
        "vendor": Vendor(name=slug, domain=f"{slug}.dev"),
        "install": InstallMethods(brew=slug),
        "capabilities": Capabilities(
            json_output=True, auth=[], idempotent=True, interactive=False, streaming=False
        ),
        "agent_score": agent_score,
        "categories": ["misc"],
        "description": f"The {slug} tool",
    }
    fields.update(overrides)
    return CliTool(**fields)


def make_review(
    tool: str = "doctl",
    agent_id: str = "agent-1",
    values: tuple[int, int, int, int, int] = (5, 4, 4, 4, 5),
    proof_hash: str = PROOF_HASH,
) -> Review:
    """Build a review from a tuple of the five dimension values."""
    json_parseable, error_clarity, auth_simplicity, idempotency, docs_sufficient = values
    return Review(
        tool=tool,
        agent_id=agent_id,
        scores=ReviewScores(
            json_parseable=json_parseable,
            error_clarity=error_clarity,
            auth_simplicity=auth_simplicity,
            idempotency=idempotency,
            docs_sufficient=docs_sufficient,
        ),
        proof_hash=proof_hash,
        timestamp="2026-09-14T10:22:31Z",
    )


@pytest.fixture
def sample_registry(sample_tool: CliTool) -> Registry:
    """Registry with three tools of different scores and tiers."""
    return Registry(
        version="1.0",
        updated="2026-10-01",
        tools=[
            sample_tool,
            make_tool("jq", agent_score=10, categories=["json"], tier=Tier.VERIFIED),
            make_tool(
                "fzf",
                agent_score=4,
                categories=["search", "terminal"],
                description="General-purpose fuzzy finder",
            ),
        ],
    )


@pytest.fixture
def registry_file(tmp_path: Path, sample_registry: Registry) -> Path:
    """Sample registry written to disk in wire shape."""
    path = tmp_path / "tools.json"
    path.write_text(json.dumps(sample_registry.to_wire(), indent=2), encoding="utf-8")
    return path
