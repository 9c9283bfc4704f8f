"""File-based storage for the registry document, reviews and pending submissions.

Directory structure (MCLI_HOME, default ~/.mcli):
    registry.json          # Local registry cache (from `mcli update`)
    pending-tools.json     # Submitted tools awaiting a registry PR
    pending-reviews.json   # Submitted reviews awaiting a registry PR
    agent-id               # This machine's opaque reviewer id
"""

import hashlib
import json
import logging
import os
import platform
import secrets
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from mcli.consts import (
    AGENT_ID_FILENAME,
    BUNDLED_REGISTRY_PATH,
    BUNDLED_REVIEWS_PATH,
    DEFAULT_DATA_DIR,
    ENV_HOME,
    ENV_REGISTRY_PATH,
    LOCAL_REGISTRY_FILENAME,
    PENDING_REVIEWS_FILENAME,
    PENDING_TOOLS_FILENAME,
)
from mcli.exceptions import RegistryError, ReviewError
from mcli.models.model_review import Review
from mcli.models.model_storage import Registry
from mcli.models.model_tool import CliTool
from mcli.validators import validate_registry, validate_review, validate_tool

logger = logging.getLogger(__name__)


def read_registry_file(path: Path | str, check: bool = True) -> Registry:
    """Load and validate a registry from a JSON file.

    With check=False only the model shape is enforced, so records whose
    agentScore disagrees with agentScores still load (used by rescoring).

    Raises:
        RegistryError: If the file is missing, unreadable, malformed or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise RegistryError(f"Registry file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RegistryError(f"Failed to read registry file: {path}", e) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise RegistryError(f"Registry file contains invalid JSON: {path}", e) from e

    if check:
        return parse_registry(data)
    try:
        return Registry.model_validate(data)
    except ValidationError as e:
        raise RegistryError(f"Registry does not match the schema: {path}", e) from e


def parse_registry(data: Any) -> Registry:
    """Validate raw registry data and build the model.

    Raises:
        RegistryError: If the data violates the registry schema.
    """
    validation = validate_registry(data)
    if not validation.valid:
        raise RegistryError(f"Registry validation failed: {'; '.join(validation.errors)}")
    try:
        return Registry.model_validate(data)
    except ValidationError as e:
        raise RegistryError("Registry does not match the schema", e) from e


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


class FileManager:
    """Local file storage for mcli.

    The registry is a single JSON document; every write replaces it whole.
    """

    def __init__(self, data_dir: Path | str | None = None):
        """Initialize FileManager.

        Args:
            data_dir: Root directory for local files.
                      None = read from env (MCLI_HOME), else ~/.mcli
        """
        if data_dir is None:
            data_dir = os.getenv(ENV_HOME, "").strip() or DEFAULT_DATA_DIR
        self.data_dir = Path(data_dir)
        self.local_registry_path = self.data_dir / LOCAL_REGISTRY_FILENAME
        self.pending_tools_path = self.data_dir / PENDING_TOOLS_FILENAME
        self.pending_reviews_path = self.data_dir / PENDING_REVIEWS_FILENAME
        self.agent_id_path = self.data_dir / AGENT_ID_FILENAME

    # === REGISTRY ===

    def has_local_registry(self) -> bool:
        return self.local_registry_path.exists()

    def resolve_registry_path(self, path: Path | str | None = None) -> Path:
        """Pick the registry to read: explicit > MCLI_REGISTRY_PATH > local cache > bundled."""
        if path:
            return Path(path)
        env_path = os.getenv(ENV_REGISTRY_PATH, "").strip()
        if env_path:
            return Path(env_path)
        if self.has_local_registry():
            return self.local_registry_path
        return BUNDLED_REGISTRY_PATH

    def load_registry(self, path: Path | str | None = None) -> Registry:
        """Load the active registry. See resolve_registry_path for lookup order."""
        resolved = self.resolve_registry_path(path)
        logger.debug(f"Loading registry from {resolved}")
        return read_registry_file(resolved)

    def save_registry(self, registry: Registry, path: Path | str | None = None) -> Path:
        """Write a registry (default: the local cache) after validating it.

        Raises:
            RegistryError: If the registry fails validation.
        """
        data = registry.to_wire()
        validation = validate_registry(data)
        if not validation.valid:
            raise RegistryError(f"Refusing to save invalid registry: {'; '.join(validation.errors)}")

        target = Path(path) if path else self.local_registry_path
        _write_json(target, data)
        logger.info(f"Saved registry: {target} ({len(registry.tools)} tools)")
        return target

    # === REVIEWS ===

    def load_reviews(self, path: Path | str | None = None) -> list[Review]:
        """Load published reviews (default: bundled reviews.json).

        Accepts either {"reviews": [...]} or a bare list. Invalid entries are
        skipped with a warning; a missing file means no reviews.

        Raises:
            RegistryError: If the file is not valid JSON.
        """
        path = Path(path) if path else BUNDLED_REVIEWS_PATH
        if not path.exists():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise RegistryError(f"Reviews file contains invalid JSON: {path}", e) from e

        entries = data.get("reviews", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise RegistryError(f"Reviews file has no reviews list: {path}")

        reviews: list[Review] = []
        for entry in entries:
            validation = validate_review(entry)
            if not validation.valid:
                logger.warning(f"Skipping invalid review in {path}: {'; '.join(validation.errors)}")
                continue
            reviews.append(Review.model_validate(entry))
        return reviews

    # === PENDING SUBMISSIONS ===

    def _load_pending(self, path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise RegistryError(f"Pending file contains invalid JSON: {path}", e) from e
        if not isinstance(data, list):
            raise RegistryError(f"Pending file must hold a list: {path}")
        return data

    def load_pending_tools(self) -> list[CliTool]:
        tools = []
        for entry in self._load_pending(self.pending_tools_path):
            try:
                tools.append(CliTool.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid pending tool: {e}")
        return tools

    def add_pending_tool(self, tool: CliTool) -> Path:
        """Queue a validated tool. A pending entry with the same slug is replaced.

        Raises:
            RegistryError: If the tool fails validation.
        """
        data = tool.to_wire()
        validation = validate_tool(data)
        if not validation.valid:
            raise RegistryError(f"Tool validation failed: {'; '.join(validation.errors)}")

        pending = [t for t in self._load_pending(self.pending_tools_path) if t.get("slug") != tool.slug]
        pending.append(data)
        _write_json(self.pending_tools_path, pending)
        logger.info(f"Queued tool {tool.slug} in {self.pending_tools_path}")
        return self.pending_tools_path

    def load_pending_reviews(self) -> list[Review]:
        reviews = []
        for entry in self._load_pending(self.pending_reviews_path):
            try:
                reviews.append(Review.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid pending review: {e}")
        return reviews

    def add_pending_review(self, review: Review, registry: Registry) -> Path:
        """Queue a review, enforcing tool existence and one review per (tool, agent).

        Raises:
            ReviewError: If the tool is unknown, the review is invalid, or this
                agent already has a pending review for the tool.
        """
        if not any(t.slug == review.tool for t in registry.tools):
            raise ReviewError(f"Tool not found: {review.tool}")

        data = review.to_wire()
        validation = validate_review(data)
        if not validation.valid:
            raise ReviewError(f"Review validation failed: {'; '.join(validation.errors)}")

        pending = self._load_pending(self.pending_reviews_path)
        if any(r.get("tool") == review.tool and r.get("agentId") == review.agent_id for r in pending):
            raise ReviewError(f"You already have a pending review for {review.tool}")

        pending.append(data)
        _write_json(self.pending_reviews_path, pending)
        logger.info(f"Queued review of {review.tool} in {self.pending_reviews_path}")
        return self.pending_reviews_path

    # === AGENT IDENTITY ===

    def get_or_create_agent_id(self) -> str:
        """Return this machine's reviewer id, creating and persisting it once."""
        if self.agent_id_path.exists():
            agent_id = self.agent_id_path.read_text(encoding="utf-8").strip()
            if agent_id:
                return agent_id

        seed = f"{Path.home()}-{platform.node()}-{secrets.token_hex(16)}"
        agent_id = hashlib.sha256(seed.encode("utf-8")).hexdigest()[:16]
        self.agent_id_path.parent.mkdir(parents=True, exist_ok=True)
        self.agent_id_path.write_text(agent_id, encoding="utf-8")
        logger.info(f"Created agent id {agent_id}")
        return agent_id
