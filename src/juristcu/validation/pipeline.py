"""
Evaluation decode pipeline.

Turns raw reply text into an Evaluation:
- Stage 1: extract the first JSON object
- Stage 2: validate it against the evaluation schema
- Stage 3: build the pydantic model, clipping justificativa

Any failure raises ResponseParseFailure; `parse_or_default` converts it
into the "not met" fallback evaluation used by the scanner.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from juristcu.llm.text_utils import clip
from juristcu.models.domain import Evaluation
from .exceptions import ResponseParseFailure
from .stage1_json_parse import Stage1JSONParse
from .stage2_schema import Stage2SchemaValidation

logger = logging.getLogger(__name__)

INVALID_REPLY_JUSTIFICATION = "Resposta da IA inválida"


class EvaluationParser:
    """Strict decoder for criterion evaluation replies."""

    def __init__(self, justification_max_length: int = 200):
        self.justification_max_length = justification_max_length
        self.stage1 = Stage1JSONParse()
        self.stage2 = Stage2SchemaValidation()

    def parse(self, content: str) -> Evaluation:
        """
        Decode a reply into an Evaluation.

        Raises:
            ResponseParseFailure: reply has no valid evaluation object
        """
        data = self.stage1.validate(content)
        self.stage2.validate(data)

        try:
            return Evaluation(
                atende=data["atende"],
                justificativa=clip(data["justificativa"], self.justification_max_length),
            )
        except PydanticValidationError as e:
            raise ResponseParseFailure(
                "Evaluation model construction failed",
                {"errors": e.errors()},
            ) from e

    def parse_or_default(self, content: str) -> Evaluation:
        """Decode a reply, falling back to a "not met" evaluation on failure."""
        try:
            return self.parse(content)
        except ResponseParseFailure as e:
            logger.warning(
                "Invalid evaluation reply, recording criterion as not met",
                extra={"error": e.message, "details": e.details},
            )
            return Evaluation(atende=False, justificativa=INVALID_REPLY_JUSTIFICATION)
