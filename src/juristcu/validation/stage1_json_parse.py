"""
Stage 1: JSON object extraction.

Models often wrap the requested JSON in prose or markdown fences. Instead of
a greedy brace-matching regex, try `JSONDecoder.raw_decode` at every "{" and
keep the first position that decodes to a complete JSON object.
"""

import json
import structlog

from juristcu.monitoring.metrics import evaluation_parse_failures_total
from .exceptions import JSONParseError

logger = structlog.get_logger(__name__)


class Stage1JSONParse:
    """
    Stage 1 validator: find the first well-formed JSON object in a reply.

    Raises JSONParseError when there is none.
    """

    def __init__(self):
        self._decoder = json.JSONDecoder()

    def validate(self, content: str) -> dict:
        """
        Extract the first JSON object embedded in the reply.

        Args:
            content: Raw reply text from the provider

        Returns:
            Decoded dict

        Raises:
            JSONParseError: If no position in the reply decodes to a JSON object
        """
        if not content or not content.strip():
            evaluation_parse_failures_total.labels(stage="stage1").inc()
            raise JSONParseError(
                "Reply content is empty or whitespace-only",
                reply=content,
                parse_error="Empty content"
            )

        last_error = "No '{' found"
        start = content.find("{")
        while start != -1:
            try:
                parsed, _ = self._decoder.raw_decode(content, start)
            except json.JSONDecodeError as e:
                last_error = f"{e.msg} at line {e.lineno} col {e.colno}"
            else:
                if isinstance(parsed, dict):
                    logger.debug("Stage 1: extracted JSON object", top_level_keys=len(parsed))
                    return parsed
            start = content.find("{", start + 1)

        evaluation_parse_failures_total.labels(stage="stage1").inc()
        raise JSONParseError(
            "No JSON object found in reply",
            reply=content,
            parse_error=last_error
        )
