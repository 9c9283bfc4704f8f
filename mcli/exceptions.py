"""Errors raised by the storage, review and submission collaborators.

The engine itself never raises for bad input: validators return results and
the verifier converts network failures into failed checks.
"""


class RegistryError(Exception):
    """A registry document or tool record could not be loaded or was rejected."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ReviewError(Exception):
    """A review submission was rejected by the review store."""
