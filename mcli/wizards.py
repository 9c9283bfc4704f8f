"""Interactive submission flows for new tools and agent reviews.

Both flows only write to the local pending files; publishing happens by
opening a pull request against the registry with the printed JSON.
"""

import json
import logging

import typer
from rich.console import Console

from mcli.catalog import find_tool
from mcli.consts import DIMENSION_MAX, DIMENSION_MIN
from mcli.evaluators.score_calculator import compute_agent_score, compute_review_score
from mcli.exceptions import RegistryError, ReviewError
from mcli.models.common import utc_now
from mcli.models.model_review import Review, ReviewScores
from mcli.models.model_storage import Registry
from mcli.models.model_tool import AgentScores, Capabilities, CliTool, InstallMethods, Tier, Vendor
from mcli.storage.file_manager import FileManager
from mcli.validators import is_valid_proof_hash, is_valid_slug, validate_tool

logger = logging.getLogger(__name__)

console = Console()

# (field, question) pairs, in prompt order
AGENT_SCORE_QUESTIONS = [
    ("json_output", "JSON output support? (1=none, 5=excellent)"),
    ("non_interactive", "Non-interactive usage? (1=requires TTY, 5=fully scriptable)"),
    ("token_efficiency", "Token efficiency? (1=verbose, 5=concise)"),
    ("safety_features", "Safety features? (1=dangerous, 5=safe defaults)"),
    ("pipeline_friendly", "Pipeline friendly? (1=hard to chain, 5=easy)"),
]

REVIEW_SCORE_QUESTIONS = [
    ("json_parseable", "JSON output parseable?"),
    ("error_clarity", "Error messages clear?"),
    ("auth_simplicity", "Auth setup simple?"),
    ("idempotency", "Commands idempotent?"),
    ("docs_sufficient", "Docs sufficient?"),
]

# (install method, question) pairs offered by the add wizard
INSTALL_QUESTIONS = [
    ("brew", "Homebrew package"),
    ("npm", "npm package"),
    ("apt", "apt package"),
    ("cargo", "cargo crate"),
]

PROOF_HASH_HINT = 'echo -n "command: <cmd>, output: <output>" | sha256sum'


def prompt_text(question: str, optional: bool = False) -> str:
    """Prompt for a line of text. Optional prompts accept an empty answer."""
    if optional:
        return typer.prompt(question, default="", show_default=False).strip()
    return typer.prompt(question).strip()


def prompt_dimension(question: str, low: int = DIMENSION_MIN, high: int = DIMENSION_MAX) -> int:
    """Prompt until the answer is an integer within [low, high]."""
    while True:
        value = typer.prompt(question, type=int)
        if low <= value <= high:
            return value
        console.print(f"  Please enter a number between {low} and {high}")


def _print_submission(data: dict, target: str) -> None:
    console.print(f"\nTo submit, create a PR adding this to {target}:")
    console.print("─" * 50)
    console.print_json(json.dumps(data))
    console.print("─" * 50)


def run_add_wizard(slug: str, file_manager: FileManager, registry: Registry) -> CliTool:
    """Collect a new tool description and queue it in pending-tools.json.

    Raises:
        RegistryError: If the slug is malformed or taken, or the tool is invalid.
    """
    if not is_valid_slug(slug):
        raise RegistryError("Slug must be lowercase alphanumeric with hyphens only")
    if find_tool(registry, slug) is not None:
        raise RegistryError(f"Tool already exists in the registry: {slug}")

    console.print(f"\n[bold]Adding new tool: {slug}[/bold]\n")

    name = prompt_text('Tool name (e.g., "GitHub CLI")')
    description = prompt_text("Short description")

    console.print("\n[bold]Vendor Info[/bold]")
    vendor_name = prompt_text('Vendor name (e.g., "GitHub")')
    vendor_domain = prompt_text('Vendor domain (e.g., "github.com")')

    console.print("\n[bold]URLs[/bold]")
    repo = prompt_text("GitHub repo URL (optional)", optional=True)
    docs = prompt_text("Documentation URL (optional)", optional=True)

    console.print("\n[bold]Install Commands (leave blank if N/A)[/bold]")
    install = {method: prompt_text(question, optional=True) for method, question in INSTALL_QUESTIONS}

    console.print("\n[bold]Categories[/bold]")
    raw_categories = prompt_text('Categories (comma-separated, e.g., "cloud,infrastructure")', optional=True)
    categories = [c.strip() for c in raw_categories.split(",") if c.strip()] or ["other"]

    console.print("\n[bold]Agent Friendliness Scores (1-5 each)[/bold]")
    agent_scores = AgentScores(**{field: prompt_dimension(q) for field, q in AGENT_SCORE_QUESTIONS})
    agent_score = compute_agent_score(agent_scores)

    tool = CliTool(
        slug=slug,
        name=name,
        vendor=Vendor(name=vendor_name, domain=vendor_domain, verified=False),
        repo=repo or None,
        docs=docs or None,
        install=InstallMethods(**{method: value for method, value in install.items() if value}),
        # Capabilities are inferred from the self-assessment until a maintainer reviews them
        capabilities=Capabilities(
            json_output=agent_scores.json_output >= 3,
            auth=[],
            idempotent=True,
            interactive=agent_scores.non_interactive < 3,
            streaming=False,
        ),
        agent_score=agent_score,
        agent_scores=agent_scores,
        categories=categories,
        description=description,
        tier=Tier.UNVERIFIED,
    )

    validation = validate_tool(tool.to_wire())
    if not validation.valid:
        raise RegistryError(f"Validation failed: {'; '.join(validation.errors)}")

    path = file_manager.add_pending_tool(tool)

    console.print(f"\n[green]✓ Tool saved to {path}[/green]")
    console.print(f"  Agent Score: {agent_score}/10")
    _print_submission(tool.to_wire(), "registry/tools.json")
    console.print("\nOr run: mcli pending --export")
    return tool


def run_review_wizard(slug: str, file_manager: FileManager, registry: Registry) -> Review:
    """Collect an agent review for an existing tool and queue it.

    Raises:
        ReviewError: If the tool is unknown, the proof hash is malformed, or
            this agent already has a pending review for the tool.
    """
    tool = find_tool(registry, slug)
    if tool is None:
        raise ReviewError(f"Tool not found: {slug}")

    agent_id = file_manager.get_or_create_agent_id()
    console.print(f"\n[bold]Reviewing: {tool.name} ({slug})[/bold]")
    console.print(f"Agent ID: {agent_id}\n")

    console.print("Rate each dimension 1-5 (1=poor, 5=excellent):\n")
    scores = ReviewScores(**{field: prompt_dimension(q) for field, q in REVIEW_SCORE_QUESTIONS})

    notes = prompt_text("\nOptional notes (or press Enter to skip)", optional=True)

    console.print("\n[bold]Proof of Use (required)[/bold]")
    console.print("Run a command and hash the output:")
    console.print(f"  {PROOF_HASH_HINT}")
    proof_hash = prompt_text("Proof hash", optional=True)

    if not is_valid_proof_hash(proof_hash):
        raise ReviewError(
            "Proof hash is required (must be a SHA-256 hex digest - 64 lowercase hex characters). "
            f"Generate with: {PROOF_HASH_HINT}"
        )

    review = Review(
        tool=slug,
        agent_id=agent_id,
        scores=scores,
        proof_hash=proof_hash,
        notes=notes or None,
        timestamp=utc_now().isoformat().replace("+00:00", "Z"),
    )

    path = file_manager.add_pending_review(review, registry)
    logger.debug(f"Review of {slug} by {agent_id} queued")

    console.print(f"\n[green]✓ Review saved (score: {compute_review_score(scores)}/10)[/green]")
    console.print(f"  Saved to {path}")
    _print_submission(review.to_wire(), "registry/reviews.json")
    return review
