"""
Strict decoding of provider replies into evaluations.
"""

from juristcu.validation.exceptions import JSONParseError, ResponseParseFailure, SchemaValidationError
from juristcu.validation.pipeline import INVALID_REPLY_JUSTIFICATION, EvaluationParser
from juristcu.validation.stage1_json_parse import Stage1JSONParse
from juristcu.validation.stage2_schema import EVALUATION_SCHEMA, Stage2SchemaValidation

__all__ = [
    "ResponseParseFailure",
    "JSONParseError",
    "SchemaValidationError",
    "EvaluationParser",
    "INVALID_REPLY_JUSTIFICATION",
    "Stage1JSONParse",
    "Stage2SchemaValidation",
    "EVALUATION_SCHEMA",
]
