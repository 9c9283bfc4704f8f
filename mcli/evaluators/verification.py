"""Provenance verification of CLI tools against their GitHub repository.

Four independent checks feed a 0-100 score and a tier recommendation:
- hasInstallMethod: at least one install method declared (local)
- repoExists: GitHub knows the declared repository (one API call)
- repoActive: last push within the activity window
- domainMatch: repository owner matches the vendor's domain

The verifier only recommends a tier. Writing it back to the registry is a
separate, operator-confirmed step (see mcli.catalog.apply_tier).
"""

import asyncio
import logging
import os
import re
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from mcli.consts import (
    DOMAIN_TLD_SUFFIXES,
    ENV_GITHUB_API_URL,
    ENV_GITHUB_TOKEN,
    GITHUB_API_URL,
    GITHUB_HOST,
    REPO_ACTIVE_DAYS,
    VERIFY_CONCURRENCY,
    VERIFY_TIMEOUT_SECONDS,
    VERIFY_USER_AGENT,
)
from mcli.evaluators.score_calculator import round_half_up
from mcli.models.model_tool import CliTool, Tier
from mcli.models.model_verify import CheckResult, VerificationChecks, VerificationResult

logger = logging.getLogger(__name__)

TLD_SUFFIX_REGEX = re.compile(r"\.(" + "|".join(DOMAIN_TLD_SUFFIXES) + r")$")

# Minimum passed checks per recommendation
VERIFIED_MIN_PASSED = 4
COMMUNITY_MIN_PASSED = 2


def _github_url(repo_url: str) -> httpx.URL | None:
    """Parse repo_url, returning None unless it points at github.com."""
    if "://" not in repo_url:
        repo_url = f"https://{repo_url}"
    try:
        url = httpx.URL(repo_url)
    except httpx.InvalidURL:
        return None

    host = (url.host or "").lower()
    if host not in (GITHUB_HOST, f"www.{GITHUB_HOST}"):
        return None
    return url


def is_github_url(repo_url: str) -> bool:
    return _github_url(repo_url) is not None


def parse_github_repo(repo_url: str) -> tuple[str, str] | None:
    """Extract (owner, name) from a GitHub repository URL.

    Returns None when the URL is not on github.com or lacks an owner/name path.
    """
    url = _github_url(repo_url)
    if url is None:
        return None

    parts = [part for part in url.path.split("/") if part]
    if len(parts) < 2:
        return None

    owner, name = parts[0], parts[1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return owner, name


def domain_to_org_candidates(domain: str) -> list[str]:
    """Generate plausible GitHub organization names from a vendor domain.

    e.g. "cli.github.com" -> ["cli.github", "cligithub", "cli-github", "cli"]
    """
    lowered = domain.lower()
    base = TLD_SUFFIX_REGEX.sub("", lowered)
    return [
        base,
        base.replace(".", ""),
        base.replace(".", "-"),
        lowered.split(".")[0],
    ]


def recommend_tier(passed_count: int) -> Tier:
    """Map the number of passed checks to a tier recommendation."""
    if passed_count >= VERIFIED_MIN_PASSED:
        return Tier.VERIFIED
    if passed_count >= COMMUNITY_MIN_PASSED:
        return Tier.COMMUNITY
    return Tier.UNVERIFIED


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class ProvenanceVerifier:
    """Runs the provenance checks for one tool at a time.

    Holds configuration only; each verify() call is independent, so one
    verifier may serve many concurrent verifications.
    """

    def __init__(
        self,
        api_url: str | None = None,
        active_days: int = REPO_ACTIVE_DAYS,
        user_agent: str = VERIFY_USER_AGENT,
    ):
        """Initialize the verifier.

        Args:
            api_url: GitHub API base URL. None = read from env (MCLI_GITHUB_API_URL)
            active_days: Window in days for the activity check
            user_agent: User-Agent header sent with the lookup
        """
        self.api_url = (api_url or os.getenv(ENV_GITHUB_API_URL) or GITHUB_API_URL).rstrip("/")
        self.active_days = active_days
        self.user_agent = user_agent

    async def verify(
        self,
        tool: CliTool,
        client: httpx.AsyncClient,
        now: datetime | None = None,
    ) -> VerificationResult:
        """Verify a tool's provenance.

        Performs at most one GET against the GitHub API. Network failures are
        reported as a failed repoExists check and never raised.

        Args:
            tool: The tool to verify
            client: HTTP client used for the repository lookup
            now: Evaluation time for the activity window (defaults to now)

        Returns:
            VerificationResult with per-check details, score and recommendation
        """
        if now is None:
            now = datetime.now(UTC)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=UTC)

        checks = VerificationChecks()

        installs = tool.install.present()
        if installs:
            checks.has_install_method = CheckResult(
                passed=True, detail=f"{len(installs)} install method(s)"
            )

        if tool.repo:
            await self._check_repository(tool, client, now, checks)

        passed = sum(1 for _, check in checks.items() if check.passed)
        score = int(round_half_up(passed * 100 / 4))

        return VerificationResult(
            slug=tool.slug,
            checks=checks,
            score=score,
            recommendation=recommend_tier(passed),
        )

    async def _check_repository(
        self,
        tool: CliTool,
        client: httpx.AsyncClient,
        now: datetime,
        checks: VerificationChecks,
    ) -> None:
        """Run repoExists, then repoActive and domainMatch from its response."""
        parsed = parse_github_repo(tool.repo)
        if parsed is None:
            if is_github_url(tool.repo):
                detail = f"Repo URL is missing owner/name: {tool.repo}"
            else:
                detail = f"Repo URL is not on {GITHUB_HOST}: {tool.repo}"
            checks.repo_exists = CheckResult(detail=detail)
            return

        owner, name = parsed
        endpoint = f"{self.api_url}/repos/{owner}/{name}"
        logger.debug(f"Looking up {endpoint} for {tool.slug}")

        # Renamed or transferred repositories answer with a 301
        try:
            response = await client.get(
                endpoint,
                headers={"User-Agent": self.user_agent, "Accept": "application/vnd.github+json"},
                follow_redirects=True,
            )
            if not response.is_success:
                checks.repo_exists = CheckResult(detail=f"GitHub returned {response.status_code}")
                return
            data = response.json()
        except Exception as e:
            logger.warning(f"Failed to fetch repo info for {tool.slug}: {e!r}")
            checks.repo_exists = CheckResult(detail=f"Failed to fetch repo info: {type(e).__name__}")
            return

        if not isinstance(data, dict):
            data = {}

        checks.repo_exists = CheckResult(passed=True, detail="Repository exists on GitHub")
        checks.repo_active = self._check_activity(data, now)
        checks.domain_match = self._check_domain(owner.lower(), tool.vendor.domain)

    def _check_activity(self, data: dict[str, Any], now: datetime) -> CheckResult:
        """Pass if the last push falls within the activity window."""
        last_push = _parse_timestamp(data.get("pushed_at"))
        if last_push is None:
            return CheckResult(detail="Could not check activity: last push unknown")

        date_str = last_push.date().isoformat()
        if last_push < now - timedelta(days=self.active_days):
            return CheckResult(detail=f"Inactive since {date_str}")

        stars = data.get("stargazers_count")
        if isinstance(stars, int) and not isinstance(stars, bool):
            return CheckResult(passed=True, detail=f"Last activity: {date_str}, {stars} stars")
        return CheckResult(passed=True, detail=f"Last activity: {date_str}")

    def _check_domain(self, org: str, domain: str) -> CheckResult:
        """Pass if the repository owner is one of the domain's org candidates."""
        if org in domain_to_org_candidates(domain):
            return CheckResult(passed=True, detail=f'GitHub org "{org}" matches vendor domain')
        return CheckResult(detail=f'GitHub org "{org}" doesn\'t match "{domain}"')


def _default_client() -> httpx.AsyncClient:
    headers = {}
    token = os.getenv(ENV_GITHUB_TOKEN, "").strip()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.AsyncClient(timeout=httpx.Timeout(VERIFY_TIMEOUT_SECONDS), headers=headers)


async def verify_tool(
    tool: CliTool,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
    verifier: ProvenanceVerifier | None = None,
) -> VerificationResult:
    """Verify one tool, creating a short-lived client if none is given."""
    verifier = verifier or ProvenanceVerifier()
    if client is not None:
        return await verifier.verify(tool, client, now)
    async with _default_client() as own_client:
        return await verifier.verify(tool, own_client, now)


async def verify_tools(
    tools: Sequence[CliTool],
    client: httpx.AsyncClient | None = None,
    concurrency: int = VERIFY_CONCURRENCY,
    now: datetime | None = None,
) -> list[VerificationResult]:
    """Verify many tools concurrently, returning results in input order.

    Uses asyncio.Semaphore to limit parallel lookups.
    """
    verifier = ProvenanceVerifier()
    semaphore = asyncio.Semaphore(concurrency)

    async def verify_one(tool: CliTool, http: httpx.AsyncClient) -> VerificationResult:
        async with semaphore:
            return await verifier.verify(tool, http, now)

    if client is not None:
        return list(await asyncio.gather(*(verify_one(t, client) for t in tools)))

    async with _default_client() as own_client:
        return list(await asyncio.gather(*(verify_one(t, own_client) for t in tools)))
