"""
Corpus scanning: per-criterion evaluation, scoring, ranking, early stop.
"""

from juristcu.scanning.aggregator import (
    build_document_result,
    progress_percent,
    rank_results,
    score_subcategory,
)
from juristcu.scanning.evaluator import CriterionEvaluator
from juristcu.scanning.exceptions import CorpusEmpty, InputValidationError, ScanError
from juristcu.scanning.pacing import Pacer
from juristcu.scanning.scanner import CorpusScanner, ScanLimits, resolve_limits

__all__ = [
    "CorpusScanner",
    "CriterionEvaluator",
    "Pacer",
    "ScanLimits",
    "resolve_limits",
    "score_subcategory",
    "build_document_result",
    "rank_results",
    "progress_percent",
    "ScanError",
    "InputValidationError",
    "CorpusEmpty",
]
