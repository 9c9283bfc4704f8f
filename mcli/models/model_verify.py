"""Provenance verification result models."""

from pydantic import Field, computed_field

from mcli.models.common import WireModel
from mcli.models.model_tool import Tier


class CheckResult(WireModel):
    """Outcome of one provenance check."""

    passed: bool = False
    detail: str = ""


class VerificationChecks(WireModel):
    """The four named provenance checks."""

    repo_exists: CheckResult = Field(
        default_factory=lambda: CheckResult(detail="No repo URL provided")
    )
    repo_active: CheckResult = Field(
        default_factory=lambda: CheckResult(detail="Could not check activity")
    )
    domain_match: CheckResult = Field(
        default_factory=lambda: CheckResult(detail="Could not verify domain match")
    )
    has_install_method: CheckResult = Field(
        default_factory=lambda: CheckResult(detail="No install method provided")
    )

    def items(self) -> list[tuple[str, CheckResult]]:
        """Checks keyed by wire name, in report order."""
        return [
            ("repoExists", self.repo_exists),
            ("repoActive", self.repo_active),
            ("domainMatch", self.domain_match),
            ("hasInstallMethod", self.has_install_method),
        ]


class VerificationResult(WireModel):
    """Ephemeral verification report. The recommendation is never applied here."""

    slug: str
    checks: VerificationChecks = Field(default_factory=VerificationChecks)
    score: int = Field(ge=0, le=100)
    recommendation: Tier

    @computed_field
    @property
    def passed_count(self) -> int:
        """Number of checks that passed."""
        return sum(1 for _, check in self.checks.items() if check.passed)
