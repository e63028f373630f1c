"""Document store exceptions."""

from typing import Any


class DocumentStoreError(Exception):
    """The document store could not be read."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
