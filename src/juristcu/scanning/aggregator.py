"""
Result aggregation: subcategory scores, document results, ranking.

Pure functions; the scanner owns the loop and the provider calls.
"""

from typing import Optional, Sequence

from juristcu.models.domain import (
    CriterionEvaluation,
    Document,
    DocumentResult,
    SubcategoryResult,
)


def score_subcategory(
    category: str,
    subcategory: str,
    evaluations: Sequence[CriterionEvaluation],
    total_criteria: int,
) -> SubcategoryResult:
    """
    Score one subcategory.

    The denominator is the subcategory's full criteria count, not the number
    of evaluations that succeeded.
    """
    met = sum(1 for evaluation in evaluations if evaluation.atende)
    return SubcategoryResult(
        categoria=category,
        subcategoria=subcategory,
        criterios=list(evaluations),
        total_criterios=total_criteria,
        criterios_atendidos=met,
        percentual_atendimento=100.0 * met / total_criteria,
    )


def qualifies(result: SubcategoryResult, threshold: float = 60.0) -> bool:
    return result.percentual_atendimento >= threshold


def build_document_result(
    document: Document,
    subcategory_results: Sequence[SubcategoryResult],
    threshold: float = 60.0,
) -> Optional[DocumentResult]:
    """
    Keep the qualifying subcategories of a document.

    Returns:
        DocumentResult with categorias sorted by percentage (descending),
        or None when no subcategory reaches the threshold
    """
    qualifying = [result for result in subcategory_results if qualifies(result, threshold)]
    if not qualifying:
        return None

    qualifying.sort(key=lambda result: result.percentual_atendimento, reverse=True)
    return DocumentResult(
        acordao=document.reference(),
        categorias=qualifying,
        melhor_percentual=qualifying[0].percentual_atendimento,
    )


def rank_results(results: Sequence[DocumentResult], max_results: int) -> list[DocumentResult]:
    """Sort by melhor_percentual descending (stable for ties) and keep the top `max_results`."""
    ranked = sorted(results, key=lambda result: result.melhor_percentual, reverse=True)
    return ranked[:max_results]


def progress_percent(processed: int, total: int) -> float:
    """Completion percentage rounded to two decimals."""
    if total == 0:
        return 100.0
    return round(100.0 * processed / total, 2)
