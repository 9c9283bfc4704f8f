"""CLI interface for mcli."""

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mcli.catalog import (
    apply_tier,
    compare_tools,
    filter_by_category,
    filter_by_min_score,
    filter_by_tier,
    find_tool,
    get_categories,
    get_install_command,
    rescore_tools,
    search_tools,
    sort_by_agent_score,
    tier_badge,
)
from mcli.consts import BUNDLED_REGISTRY_PATH, INSTALL_METHOD_LABELS
from mcli.evaluators import aggregate_reviews, get_reviews_for_tool, verify_tool, verify_tools
from mcli.exceptions import RegistryError, ReviewError
from mcli.models.model_storage import Registry
from mcli.models.model_tool import CliTool, Tier
from mcli.models.model_verify import VerificationResult
from mcli.storage.file_manager import FileManager, read_registry_file
from mcli.storage.remote import update_registry
from mcli.validators import validate_registry
from mcli.wizards import run_add_wizard, run_review_wizard

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mcli",
    help="mcli - Find CLI tools that work well for AI agents",
)

console = Console()

TIER_CHOICES = ", ".join(t.value for t in Tier)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Discover, compare, verify and review agent-friendly CLI tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _get_score_color(score: int) -> str:
    """Get color for a 1-10 agent score."""
    if score >= 8:
        return "green"
    elif score >= 5:
        return "yellow"
    else:
        return "red"


def _fail(error: Exception) -> typer.Exit:
    """Print an error (and its cause, if any) and return the exit to raise."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    cause = getattr(error, "cause", None)
    if cause is not None:
        console.print(f"  [dim]Caused by: {escape(str(cause))}[/dim]")
    return typer.Exit(1)


def _not_found(slug: str) -> typer.Exit:
    console.print(f"[red]Tool not found: {escape(slug)}[/red]")
    return typer.Exit(1)


def _load_registry(file_manager: FileManager) -> Registry:
    try:
        return file_manager.load_registry()
    except RegistryError as e:
        raise _fail(e)


def _writable_registry_path(file_manager: FileManager) -> Path:
    """Registry file that curation commands write back to.

    The bundled registry is read-only package data, so edits to it land in
    the local cache instead.
    """
    path = file_manager.resolve_registry_path()
    if path.resolve() == BUNDLED_REGISTRY_PATH:
        return file_manager.local_registry_path
    return path


def _parse_tier(value: str) -> Tier:
    try:
        return Tier(value.lower())
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid tier '{escape(value)}'. Must be one of: {TIER_CHOICES}")
        raise typer.Exit(1)


def _print_tool(tool: CliTool, detailed: bool = False) -> None:
    color = _get_score_color(tool.agent_score)
    console.print(
        f"{tier_badge(tool.tier)} [bold]{escape(tool.name)}[/bold] ({tool.slug}) - "
        f"Agent Score: [{color}]{tool.agent_score}/10[/{color}]"
    )
    console.print(f"  {escape(tool.description)}")
    if not detailed:
        return

    console.print(f"  Vendor: {escape(tool.vendor.name)} ({escape(tool.vendor.domain)})")
    console.print(f"  Tier: {tool.tier.value}")
    console.print(f"  Categories: {', '.join(tool.categories)}")

    if tool.agent_scores is not None:
        scores = tool.agent_scores
        console.print("  Agent Scores:")
        console.print(f"    JSON Output:       {scores.json_output}/5")
        console.print(f"    Non-Interactive:   {scores.non_interactive}/5")
        console.print(f"    Token Efficiency:  {scores.token_efficiency}/5")
        console.print(f"    Safety Features:   {scores.safety_features}/5")
        console.print(f"    Pipeline Friendly: {scores.pipeline_friendly}/5")

    installs = tool.install.present()
    if installs:
        console.print("  Install:")
        for method, value in installs.items():
            console.print(f"    {method}: {escape(value)}")

    caps = tool.capabilities
    console.print("  Capabilities:")
    console.print(f"    JSON output: {'yes' if caps.json_output else 'no'}")
    console.print(f"    Idempotent: {'yes' if caps.idempotent else 'no'}")
    console.print(f"    Interactive: {'yes' if caps.interactive else 'no'}")
    console.print(f"    Streaming: {'yes' if caps.streaming else 'no'}")
    if caps.auth:
        console.print(f"    Auth: {escape(', '.join(caps.auth))}")

    if tool.repo:
        console.print(f"  Repo: {tool.repo}")
    if tool.docs:
        console.print(f"  Docs: {tool.docs}")


def _print_tools(tools: list[CliTool], empty_message: str) -> None:
    if not tools:
        console.print(f"[yellow]{empty_message}[/yellow]")
        return
    for tool in tools:
        _print_tool(tool)


def _apply_filters(
    tools: list[CliTool],
    min_score: int | None,
    category: str | None,
    agent_friendly: bool,
) -> list[CliTool]:
    if min_score is not None:
        tools = filter_by_min_score(tools, min_score)
    if category:
        tools = filter_by_category(tools, category)
    if agent_friendly:
        tools = sort_by_agent_score(tools)
    return tools


# === DISCOVERY ===


@app.command()
def search(
    query: list[str] = typer.Argument(..., help="Search query"),
    min_score: int = typer.Option(None, "--min-score", help="Only show tools with agent score >= N"),
    category: str = typer.Option(None, "--category", "-c", help="Filter by category"),
    agent_friendly: bool = typer.Option(
        False, "--agent-friendly", help="Sort by agent score (highest first)"
    ),
) -> None:
    """Search tools by slug, name, description or category."""
    registry = _load_registry(FileManager())
    results = search_tools(registry, " ".join(query))
    _print_tools(_apply_filters(results, min_score, category, agent_friendly), "No tools found")


@app.command("list")
def list_tools(
    min_score: int = typer.Option(None, "--min-score", help="Only show tools with agent score >= N"),
    category: str = typer.Option(None, "--category", "-c", help="Filter by category"),
    tier: str = typer.Option(None, "--tier", help=f"Filter by tier ({TIER_CHOICES})"),
    agent_friendly: bool = typer.Option(
        False, "--agent-friendly", help="Sort by agent score (highest first)"
    ),
) -> None:
    """List all tools in the registry."""
    registry = _load_registry(FileManager())
    tools = list(registry.tools)
    if tier:
        tools = filter_by_tier(tools, _parse_tier(tier))
    _print_tools(
        _apply_filters(tools, min_score, category, agent_friendly),
        "No tools found matching filters",
    )


@app.command()
def info(slug: str = typer.Argument(..., help="Tool slug")) -> None:
    """Show detailed information about a tool."""
    file_manager = FileManager()
    registry = _load_registry(file_manager)
    tool = find_tool(registry, slug)
    if tool is None:
        raise _not_found(slug)

    _print_tool(tool, detailed=True)

    try:
        aggregate = aggregate_reviews(get_reviews_for_tool(file_manager.load_reviews(), slug))
    except RegistryError as e:
        logger.warning(f"Could not load reviews: {e}")
        aggregate = None
    if aggregate is not None:
        console.print(f"  Reviews: {aggregate.count} (avg {aggregate.avg_score}/10)")


@app.command()
def compare(slugs: list[str] = typer.Argument(..., help="Two or more tool slugs")) -> None:
    """Compare tools side by side."""
    if len(slugs) < 2:
        console.print("Usage: mcli compare <slug> <slug> [slug...]")
        raise typer.Exit(1)

    registry = _load_registry(FileManager())
    tools = []
    for slug in slugs:
        tool = find_tool(registry, slug)
        if tool is None:
            raise _not_found(slug)
        tools.append(tool)

    table = Table(title="Tool Comparison")
    table.add_column("Tool", style="cyan")
    for tool in tools:
        table.add_column(tool.slug, justify="center")

    for field, values in compare_tools(tools):
        if field == "Agent Score":
            cells = [f"[{_get_score_color(v)}]{v}/10[/{_get_score_color(v)}]" for v in values]
        elif field == "Tier":
            cells = [f"{tier_badge(v)} {v}" for v in values]
        else:
            cells = ["yes" if v else "no" for v in values]
        table.add_row(field, *cells)

    console.print(table)


@app.command()
def install(slug: str = typer.Argument(..., help="Tool slug")) -> None:
    """Print install commands for a tool."""
    registry = _load_registry(FileManager())
    tool = find_tool(registry, slug)
    if tool is None:
        raise _not_found(slug)

    methods = tool.install.present()
    if not methods:
        console.print(f"[yellow]No install methods listed for {slug}[/yellow]")
        return

    console.print(f"# Install {escape(tool.name)}\n", highlight=False)
    for method in methods:
        console.print(f"# {INSTALL_METHOD_LABELS[method]}", highlight=False)
        console.print(escape(get_install_command(tool, method)), highlight=False)
        console.print()


@app.command()
def categories() -> None:
    """List all categories."""
    registry = _load_registry(FileManager())
    console.print(f"Categories: {', '.join(get_categories(registry))}")


# === REGISTRY MAINTENANCE ===


@app.command()
def update() -> None:
    """Refresh the local registry cache from the remote registry."""
    file_manager = FileManager()
    try:
        registry = asyncio.run(update_registry(file_manager))
    except RegistryError as e:
        raise _fail(e)

    console.print(
        f"[green]✓ Updated local registry: {len(registry.tools)} tools[/green] "
        f"({file_manager.local_registry_path})"
    )


@app.command()
def validate(
    path: Path = typer.Argument(None, help="Registry file (default: active registry)"),
) -> None:
    """Validate a registry file and report every violation."""
    target = path or FileManager().resolve_registry_path()
    try:
        data = json.loads(Path(target).read_text(encoding="utf-8"))
    except OSError as e:
        raise _fail(RegistryError(f"Failed to read registry file: {target}", e))
    except json.JSONDecodeError as e:
        raise _fail(RegistryError(f"Registry file contains invalid JSON: {target}", e))

    result = validate_registry(data)
    if result.valid:
        count = len(data["tools"])
        console.print(f"[green]✓ Registry is valid ({count} tools)[/green] {target}")
        return

    console.print(f"[red]✗ Registry has {len(result.errors)} error(s):[/red] {target}")
    for error in result.errors:
        console.print(f"  - {escape(error)}")
    raise typer.Exit(1)


def _print_verification(result: VerificationResult, current: Tier) -> None:
    table = Table(title=f"Verification: {result.slug}")
    table.add_column("Check", style="cyan")
    table.add_column("Result", justify="center")
    table.add_column("Detail", style="dim")

    for name, check in result.checks.items():
        mark = "[green]✓[/green]" if check.passed else "[red]✗[/red]"
        table.add_row(name, mark, escape(check.detail))

    console.print(table)
    console.print(
        f"Score: {result.score}/100 ({result.passed_count}/4 checks) - "
        f"Recommended tier: {tier_badge(result.recommendation)} {result.recommendation.value} "
        f"(current: {current.value})\n"
    )


@app.command()
def verify(
    slug: str = typer.Argument(None, help="Tool slug"),
    all_tools: bool = typer.Option(False, "--all", help="Verify every tool in the registry"),
    apply: bool = typer.Option(False, "--apply", help="Write recommended tiers to the registry"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply without asking for confirmation"),
) -> None:
    """Check tool provenance against GitHub and recommend a tier."""
    if not slug and not all_tools:
        console.print("[red]Error:[/red] Must specify a slug or --all")
        raise typer.Exit(1)

    file_manager = FileManager()
    registry = _load_registry(file_manager)

    if all_tools:
        console.print(f"\n[bold]Verifying {len(registry.tools)} tools...[/bold]\n")
        results = asyncio.run(verify_tools(registry.tools))
    else:
        tool = find_tool(registry, slug)
        if tool is None:
            raise _not_found(slug)
        results = [asyncio.run(verify_tool(tool))]

    for result in results:
        _print_verification(result, find_tool(registry, result.slug).tier)

    if all_tools:
        summary = Table(title="Verification Summary")
        summary.add_column("Recommendation", style="cyan")
        summary.add_column("Count", justify="right", style="magenta")
        for tier in Tier:
            count = sum(1 for r in results if r.recommendation == tier)
            summary.add_row(f"{tier_badge(tier)} {tier.value}", str(count))
        console.print(summary)

    if not apply:
        return

    changes = [r for r in results if find_tool(registry, r.slug).tier != r.recommendation]
    if not changes:
        console.print("[green]All tiers already match their recommendations.[/green]")
        return

    applied = 0
    for result in changes:
        current = find_tool(registry, result.slug).tier
        prompt = f"Set {result.slug} tier {current.value} -> {result.recommendation.value}?"
        if yes or typer.confirm(prompt, default=False):
            registry = apply_tier(registry, result.slug, result.recommendation)
            applied += 1

    if not applied:
        console.print("[yellow]No tier changes applied.[/yellow]")
        return

    try:
        target = file_manager.save_registry(registry, _writable_registry_path(file_manager))
    except RegistryError as e:
        raise _fail(e)
    console.print(f"[green]✓ Applied {applied} tier change(s) to {target}[/green]")


@app.command("set-tier")
def set_tier(
    slug: str = typer.Argument(..., help="Tool slug"),
    tier: str = typer.Argument(..., help=f"New tier ({TIER_CHOICES})"),
) -> None:
    """Set a tool's published tier."""
    new_tier = _parse_tier(tier)
    file_manager = FileManager()
    registry = _load_registry(file_manager)

    tool = find_tool(registry, slug)
    if tool is None:
        raise _not_found(slug)

    try:
        target = file_manager.save_registry(
            apply_tier(registry, slug, new_tier), _writable_registry_path(file_manager)
        )
    except RegistryError as e:
        raise _fail(e)
    console.print(f"[green]✓ {slug}: {tool.tier.value} -> {new_tier.value}[/green] ({target})")


@app.command()
def rescore(
    path: Path = typer.Argument(None, help="Registry file (default: active registry)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without writing"),
) -> None:
    """Recompute agent scores from their dimension breakdowns."""
    file_manager = FileManager()
    source = path or file_manager.resolve_registry_path()
    try:
        registry = read_registry_file(source, check=False)
    except RegistryError as e:
        raise _fail(e)

    updated, changed = rescore_tools(registry)
    if not changed:
        console.print("[green]All agent scores are up to date.[/green]")
        return

    table = Table(title=f"Rescored Tools ({len(changed)})")
    table.add_column("Tool", style="cyan")
    table.add_column("Old", justify="right")
    table.add_column("New", justify="right", style="green")
    for changed_slug in changed:
        table.add_row(
            changed_slug,
            str(find_tool(registry, changed_slug).agent_score),
            str(find_tool(updated, changed_slug).agent_score),
        )
    console.print(table)

    if dry_run:
        console.print("\n[dim]Run without --dry-run to write changes[/dim]")
        return

    target = path or _writable_registry_path(file_manager)
    try:
        file_manager.save_registry(updated, target)
    except RegistryError as e:
        raise _fail(e)
    console.print(f"[green]✓ Saved {target}[/green]")


# === REVIEWS & SUBMISSIONS ===


@app.command()
def reviews(
    slug: str = typer.Argument(..., help="Tool slug"),
    reviews_file: Path = typer.Option(None, "--file", "-f", help="Reviews file (default: bundled)"),
) -> None:
    """Show aggregated agent reviews for a tool."""
    file_manager = FileManager()
    registry = _load_registry(file_manager)
    tool = find_tool(registry, slug)
    if tool is None:
        raise _not_found(slug)

    try:
        all_reviews = file_manager.load_reviews(reviews_file)
    except RegistryError as e:
        raise _fail(e)

    aggregate = aggregate_reviews(get_reviews_for_tool(all_reviews, slug))
    if aggregate is None:
        console.print(f"[yellow]No reviews yet for {slug}[/yellow]")
        return

    table = Table(title=f"Reviews for {tool.name} ({aggregate.count})")
    table.add_column("Dimension", style="cyan")
    table.add_column("Avg", justify="right")
    table.add_column("Favorable", justify="right", style="magenta")
    for dimension, stats in aggregate.dimensions.items():
        table.add_row(dimension, f"{stats.avg}/5", f"{stats.pct}%")

    console.print(table)
    console.print(f"Overall: [bold]{aggregate.avg_score}/10[/bold] from {aggregate.count} review(s)")


@app.command()
def add(slug: str = typer.Argument(..., help="Slug for the new tool")) -> None:
    """Describe a new tool and queue it for submission."""
    file_manager = FileManager()
    registry = _load_registry(file_manager)
    try:
        run_add_wizard(slug, file_manager, registry)
    except RegistryError as e:
        raise _fail(e)


@app.command()
def review(slug: str = typer.Argument(..., help="Slug of the tool to review")) -> None:
    """Review a tool you have used and queue the review for submission."""
    file_manager = FileManager()
    registry = _load_registry(file_manager)
    try:
        run_review_wizard(slug, file_manager, registry)
    except (ReviewError, RegistryError) as e:
        raise _fail(e)


@app.command()
def pending(
    export: bool = typer.Option(False, "--export", help="Print pending submissions as JSON"),
) -> None:
    """Show tools and reviews waiting to be submitted."""
    file_manager = FileManager()
    try:
        tools = file_manager.load_pending_tools()
        queued_reviews = file_manager.load_pending_reviews()
    except RegistryError as e:
        raise _fail(e)

    if export:
        data = {
            "tools": [t.to_wire() for t in tools],
            "reviews": [r.to_wire() for r in queued_reviews],
        }
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    if not tools and not queued_reviews:
        console.print("[yellow]No pending submissions.[/yellow]")
        return

    if tools:
        console.print(f"[bold]Pending tools ({len(tools)}):[/bold]")
        for tool in tools:
            _print_tool(tool)
    if queued_reviews:
        console.print(f"[bold]Pending reviews ({len(queued_reviews)}):[/bold]")
        for queued in queued_reviews:
            console.print(f"  {queued.tool} by {queued.agent_id} at {queued.timestamp}")

    console.print("\n[dim]Run 'mcli pending --export' to get JSON for a registry PR[/dim]")


if __name__ == "__main__":
    app()
