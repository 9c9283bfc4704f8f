"""Storage file models for the registry and review documents."""

from pydantic import Field

from mcli.consts import REGISTRY_SCHEMA_VERSION
from mcli.models.common import WireModel
from mcli.models.model_review import Review
from mcli.models.model_tool import CliTool


class Registry(WireModel):
    """The registry document: sole aggregate root for tool records."""

    version: str = Field(default=REGISTRY_SCHEMA_VERSION, description="Schema version for migrations")
    updated: str | None = Field(default=None, description="Date of last change (YYYY-MM-DD)")
    tools: list[CliTool] = Field(default_factory=list)


class ReviewsFile(WireModel):
    """Published reviews document (registry/reviews.json)."""

    version: str = Field(default=REGISTRY_SCHEMA_VERSION)
    reviews: list[Review] = Field(default_factory=list)
