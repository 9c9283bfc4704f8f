"""mcli - a registry of CLI tools rated for use by AI agents."""

__version__ = "0.1.0"
