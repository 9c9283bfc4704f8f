"""Storage layer: local registry files, reviews, pending submissions, remote fetch."""

from mcli.storage.file_manager import FileManager, parse_registry, read_registry_file
from mcli.storage.remote import fetch_remote_registry, registry_url, update_registry

__all__ = [
    "FileManager",
    "parse_registry",
    "read_registry_file",
    "fetch_remote_registry",
    "registry_url",
    "update_registry",
]
