"""Whole-registry validation including cross-record invariants."""

from typing import Any

from mcli.models.model_validation import ValidationResult, Violation, ViolationKind
from mcli.validators.base import ViolationCollector, as_mapping
from mcli.validators.tool_validator import is_valid_slug, validate_tool


def validate_registry(candidate: Any) -> ValidationResult:
    """Validate a registry document.

    Requires a version string and a tools list, reports every repeated slug,
    and validates each tool. Per-tool messages are prefixed with the tool's
    slug (or "unknown" when the slug itself is unusable) so they stay
    attributable.
    """
    data = as_mapping(candidate)
    collector = ViolationCollector()

    if not isinstance(data, dict):
        collector.add(ViolationKind.WRONG_TYPE, "", "Registry must be an object")
        return collector.result()

    if not isinstance(data.get("version"), str):
        kind = ViolationKind.MISSING if data.get("version") is None else ViolationKind.WRONG_TYPE
        collector.add(kind, "version", "Registry must have a version string")

    updated = data.get("updated")
    if updated is not None and not isinstance(updated, str):
        collector.add(ViolationKind.WRONG_TYPE, "updated", "Registry updated date must be a string")

    tools = data.get("tools")
    if not isinstance(tools, list):
        kind = ViolationKind.MISSING if tools is None else ViolationKind.WRONG_TYPE
        collector.add(kind, "tools", "Registry must have a tools list")
        return collector.result()

    seen: set[str] = set()
    for index, tool in enumerate(tools):
        slug = tool.get("slug") if isinstance(tool, dict) else None

        if isinstance(slug, str):
            if slug in seen:
                collector.add(
                    ViolationKind.DUPLICATE, f"tools[{index}].slug", f"Duplicate slug: {slug}"
                )
            seen.add(slug)

        label = slug if is_valid_slug(slug) else "unknown"
        for violation in validate_tool(tool).violations:
            collector.violations.append(
                Violation(
                    kind=violation.kind,
                    field=f"tools[{index}].{violation.field}".rstrip("."),
                    message=f'Tool "{label}": {violation.message}',
                )
            )

    return collector.result()
