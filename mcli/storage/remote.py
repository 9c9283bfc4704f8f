"""Fetching the published registry from its remote location."""

import logging
import os

import httpx

from mcli.consts import ENV_REGISTRY_URL, REMOTE_REGISTRY_URL
from mcli.exceptions import RegistryError
from mcli.models.model_storage import Registry
from mcli.storage.file_manager import FileManager, parse_registry

logger = logging.getLogger(__name__)


def registry_url() -> str:
    """Remote registry URL: MCLI_REGISTRY_URL if set, else the upstream default."""
    return os.getenv(ENV_REGISTRY_URL, "").strip() or REMOTE_REGISTRY_URL


async def fetch_remote_registry(
    client: httpx.AsyncClient | None = None,
    url: str | None = None,
) -> Registry:
    """Download and validate the remote registry.

    Raises:
        RegistryError: On network failure, HTTP error status, invalid JSON
            or schema violations.
    """
    url = url or registry_url()
    logger.info(f"Fetching registry from {url}")

    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(30.0)) as own_client:
                response = await own_client.get(url)
    except httpx.HTTPError as e:
        raise RegistryError("Failed to fetch remote registry", e) from e

    if not response.is_success:
        raise RegistryError(f"Failed to fetch registry: HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise RegistryError("Remote registry contains invalid JSON", e) from e

    try:
        return parse_registry(data)
    except RegistryError as e:
        raise RegistryError(f"Remote registry is invalid: {e}") from e


async def update_registry(
    file_manager: FileManager,
    client: httpx.AsyncClient | None = None,
    url: str | None = None,
) -> Registry:
    """Fetch the remote registry and store it as the local cache."""
    registry = await fetch_remote_registry(client=client, url=url)
    file_manager.save_registry(registry)
    return registry
