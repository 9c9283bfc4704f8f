from enum import Enum

from pydantic import Field

from mcli.models.common import WireModel

# Wire names of the declared-capability dimensions, in weight order
AGENT_SCORE_DIMENSIONS = (
    "jsonOutput",
    "nonInteractive",
    "tokenEfficiency",
    "safetyFeatures",
    "pipelineFriendly",
)


class Tier(str, Enum):
    """Published trust classification of a tool."""

    VERIFIED = "verified"
    COMMUNITY = "community"
    UNVERIFIED = "unverified"


class InstallMethod(str, Enum):
    """Supported installation methods."""

    BREW = "brew"
    APT = "apt"
    NPM = "npm"
    CARGO = "cargo"
    GO = "go"
    BINARY = "binary"
    SCRIPT = "script"


class Vendor(WireModel):
    """Publisher of a tool. The domain is the authority for provenance checks."""

    name: str = Field(description="Vendor display name")
    domain: str = Field(description="Vendor domain, e.g. 'github.com'")
    verified: bool = Field(default=False, description="Vendor identity confirmed by a maintainer")


class InstallMethods(WireModel):
    """Install argument per method. Any subset may be present."""

    brew: str | None = None
    apt: str | None = None
    npm: str | None = None
    cargo: str | None = None
    go: str | None = None
    binary: str | None = None
    script: str | None = None

    def present(self) -> dict[str, str]:
        """Return the methods that carry a non-empty value."""
        return {
            method.value: value
            for method in InstallMethod
            if (value := getattr(self, method.value))
        }


class Capabilities(WireModel):
    """Declared runtime behaviour of a tool."""

    json_output: bool = Field(description="Supports machine-readable output")
    auth: list[str] = Field(default_factory=list, description="Auth methods, e.g. 'env:GH_TOKEN'")
    idempotent: bool = Field(description="Repeated invocations are safe")
    interactive: bool = Field(description="Requires a TTY or prompts")
    streaming: bool = Field(description="Streams output")


class AgentScores(WireModel):
    """Multi-dimensional agent-friendliness scores, each 1-5 (5 = best)."""

    # --json, --output=json, parseable formats
    json_output: int = Field(ge=1, le=5)
    # --yes, env auth, no prompts, no TTY required
    non_interactive: int = Field(ge=1, le=5)
    # --quiet, --compact, --id-only, minimal output
    token_efficiency: int = Field(ge=1, le=5)
    # --dry-run, structured exit codes, confirmation flags
    safety_features: int = Field(ge=1, le=5)
    # clean stderr/stdout separation, chainable output
    pipeline_friendly: int = Field(ge=1, le=5)


class CliTool(WireModel):
    """Canonical description of one CLI tool in the registry."""

    slug: str = Field(description="Unique identifier, lowercase letters, digits and hyphens")
    name: str = Field(description="Display name")
    vendor: Vendor
    repo: str | None = Field(default=None, description="Source repository URL")
    docs: str | None = Field(default=None, description="Documentation URL")
    install: InstallMethods = Field(default_factory=InstallMethods)
    capabilities: Capabilities
    agent_score: int = Field(ge=1, le=10, description="Published 1-10 rating")
    agent_scores: AgentScores | None = Field(
        default=None, description="Breakdown the agent score is computed from"
    )
    categories: list[str] = Field(min_length=1)
    description: str
    tier: Tier = Field(default=Tier.UNVERIFIED)
