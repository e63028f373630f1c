"""
Stage 2: JSON Schema Validation.

Validate the extracted object against the evaluation schema:
`atende` must be a boolean and `justificativa` a string. Extra keys are
tolerated.
"""

import logging

from jsonschema import Draft7Validator

from juristcu.monitoring.metrics import evaluation_parse_failures_total
from .exceptions import SchemaValidationError

logger = logging.getLogger(__name__)


EVALUATION_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "CriterionEvaluation",
    "type": "object",
    "properties": {
        "atende": {"type": "boolean"},
        "justificativa": {"type": "string"},
    },
    "required": ["atende", "justificativa"],
    "additionalProperties": True,
}


class Stage2SchemaValidation:
    """
    Stage 2 validator: Validate against JSON Schema.

    Raises SchemaValidationError on schema violations.
    """

    def __init__(self, schema: dict | None = None):
        self.schema = schema or EVALUATION_SCHEMA
        Draft7Validator.check_schema(self.schema)
        self._validator = Draft7Validator(self.schema)

    def validate(self, data: dict) -> None:
        """
        Validate data against JSON Schema.

        Args:
            data: Decoded JSON dict to validate

        Raises:
            SchemaValidationError: If data doesn't conform to schema
        """
        errors = list(self._validator.iter_errors(data))

        if errors:
            error_messages = []
            for error in errors[:10]:  # Limit to first 10 errors
                path = ".".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            evaluation_parse_failures_total.labels(stage="stage2").inc()
            raise SchemaValidationError(
                f"JSON Schema validation failed with {len(errors)} error(s)",
                validation_errors=error_messages
            )

        logger.debug("Stage 2: Successfully validated against JSON Schema")
