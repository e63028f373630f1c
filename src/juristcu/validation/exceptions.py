"""
Exceptions for the evaluation reply decoder.

Every decode failure is a ResponseParseFailure. The evaluator catches it and
records the criterion as not met; it never counts as a provider failure and
never reaches the router.
"""

from typing import Any

REPLY_SNIPPET_LENGTH = 500


class ResponseParseFailure(Exception):
    """A provider reply that does not hold a usable evaluation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} ({', '.join(sorted(self.details))})"


class JSONParseError(ResponseParseFailure):
    """No JSON object could be decoded from the reply."""

    def __init__(self, message: str, reply: str | None = None, parse_error: str | None = None):
        details: dict[str, Any] = {}
        if reply:
            details["content_snippet"] = reply[:REPLY_SNIPPET_LENGTH]
        if parse_error:
            details["parse_error"] = parse_error
        super().__init__(message, details)


class SchemaValidationError(ResponseParseFailure):
    """The decoded object is not {"atende": bool, "justificativa": str}."""

    def __init__(self, message: str, validation_errors: list[str] | None = None):
        super().__init__(
            message,
            {"validation_errors": validation_errors} if validation_errors else None,
        )
