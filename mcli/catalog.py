"""Query and curation helpers over a loaded registry.

All functions return new lists or registries; records are replaced whole,
never patched in place.
"""

import logging
from datetime import UTC, datetime

from mcli.consts import INSTALL_COMMAND_TEMPLATES
from mcli.evaluators.score_calculator import compute_agent_score
from mcli.models.model_storage import Registry
from mcli.models.model_tool import CliTool, Tier

logger = logging.getLogger(__name__)

TIER_BADGES = {
    Tier.VERIFIED: "✓",
    Tier.COMMUNITY: "○",
    Tier.UNVERIFIED: "?",
}


def search_tools(registry: Registry, query: str) -> list[CliTool]:
    """Match query against slug, name, description and categories."""
    q = query.lower().strip()
    if not q:
        return []

    return [
        tool
        for tool in registry.tools
        if q in tool.slug.lower()
        or q in tool.name.lower()
        or q in tool.description.lower()
        or any(q in c.lower() for c in tool.categories)
    ]


def find_tool(registry: Registry, slug: str) -> CliTool | None:
    """Find a tool by exact slug."""
    return next((tool for tool in registry.tools if tool.slug == slug), None)


def get_categories(registry: Registry) -> list[str]:
    """All distinct categories, sorted."""
    return sorted({c for tool in registry.tools for c in tool.categories})


def sort_by_agent_score(tools: list[CliTool]) -> list[CliTool]:
    """Highest agent score first. Ties keep their registry order."""
    return sorted(tools, key=lambda t: t.agent_score, reverse=True)


def filter_by_min_score(tools: list[CliTool], min_score: int) -> list[CliTool]:
    return [t for t in tools if t.agent_score >= min_score]


def filter_by_category(tools: list[CliTool], category: str) -> list[CliTool]:
    """Case-insensitive exact category match."""
    cat = category.lower()
    return [t for t in tools if any(c.lower() == cat for c in t.categories)]


def filter_by_tier(tools: list[CliTool], tier: Tier | str) -> list[CliTool]:
    return [t for t in tools if t.tier == Tier(tier)]


def tier_badge(tier: Tier | str) -> str:
    """Single-character badge for a tier ('?' for anything unknown)."""
    try:
        return TIER_BADGES[Tier(tier)]
    except ValueError:
        return "?"


def get_install_command(tool: CliTool, method: str) -> str | None:
    """Shell command installing the tool with the given method, if declared."""
    argument = tool.install.present().get(method)
    template = INSTALL_COMMAND_TEMPLATES.get(method)
    if not argument or template is None:
        return None
    return template.format(argument)


def compare_tools(tools: list[CliTool]) -> list[tuple[str, list[str | bool | int]]]:
    """Build a comparison matrix: one (field, values-per-tool) row per attribute."""
    if not tools:
        return []

    return [
        ("Agent Score", [t.agent_score for t in tools]),
        ("JSON Output", [t.capabilities.json_output for t in tools]),
        ("Idempotent", [t.capabilities.idempotent for t in tools]),
        ("Interactive", [t.capabilities.interactive for t in tools]),
        ("Streaming", [t.capabilities.streaming for t in tools]),
        ("Tier", [t.tier.value for t in tools]),
    ]


def _today() -> str:
    return datetime.now(UTC).date().isoformat()


def replace_tool(registry: Registry, tool: CliTool) -> Registry:
    """Return a registry with the record for tool.slug replaced whole.

    Raises:
        KeyError: If no tool with that slug exists.
    """
    if find_tool(registry, tool.slug) is None:
        raise KeyError(tool.slug)

    tools = [tool if t.slug == tool.slug else t for t in registry.tools]
    return registry.model_copy(update={"tools": tools, "updated": _today()})


def apply_tier(registry: Registry, slug: str, tier: Tier | str) -> Registry:
    """Return a registry where one tool carries a new published tier.

    This is the explicit second step after verification: the verifier only
    recommends, an operator decides and calls this.

    Raises:
        KeyError: If no tool with that slug exists.
    """
    tool = find_tool(registry, slug)
    if tool is None:
        raise KeyError(slug)

    new_tier = Tier(tier)
    if tool.tier != new_tier:
        logger.info(f"Changing tier of {slug}: {tool.tier.value} -> {new_tier.value}")
    return replace_tool(registry, tool.model_copy(update={"tier": new_tier}))


def rescore_tools(registry: Registry) -> tuple[Registry, list[str]]:
    """Recompute agentScore from agentScores for every tool that has a breakdown.

    Returns:
        Tuple of (updated registry, slugs whose score changed)
    """
    changed: list[str] = []
    tools: list[CliTool] = []

    for tool in registry.tools:
        if tool.agent_scores is not None:
            score = compute_agent_score(tool.agent_scores)
            if score != tool.agent_score:
                logger.info(f"Rescored {tool.slug}: {tool.agent_score} -> {score}")
                changed.append(tool.slug)
                tool = tool.model_copy(update={"agent_score": score})
        tools.append(tool)

    if not changed:
        return registry, changed
    return registry.model_copy(update={"tools": tools, "updated": _today()}), changed
