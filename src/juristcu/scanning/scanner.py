"""
Corpus scanner: drives the whole taxonomy over every document.

For each document (in the order supplied, newest session first), for each
subcategory in taxonomy order, every criterion is evaluated once. The scan
stops early, keeping the results of fully evaluated documents, as soon as
the router runs out of providers.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import structlog

from juristcu.llm.base_client import BaseProviderClient
from juristcu.llm.prompt_builder import PromptBuilder
from juristcu.models.domain import (
    CriterionEvaluation,
    Document,
    DocumentResult,
    Evaluation,
    ScanOutcome,
    SubcategoryResult,
)
from juristcu.models.enums import HaltReason, ProviderId
from juristcu.monitoring.metrics import documents_scanned_total, scans_total
from juristcu.routing.exceptions import AllProvidersExhausted
from juristcu.routing.provider_router import ProviderCredentials, ProviderRouter
from juristcu.scanning.aggregator import (
    build_document_result,
    progress_percent,
    rank_results,
    score_subcategory,
)
from juristcu.scanning.evaluator import CriterionEvaluator
from juristcu.scanning.exceptions import CorpusEmpty, InputValidationError
from juristcu.scanning.pacing import ClockFn, Pacer, SleepFn
from juristcu.taxonomy import CRITERIOS, Taxonomy, iter_subcategories
from juristcu.validation.pipeline import EvaluationParser


logger = structlog.get_logger(__name__)

UNHANDLED_ERROR_JUSTIFICATION = "Erro não tratado"


@dataclass(frozen=True)
class ScanLimits:
    """Effective result and document limits for one scan."""

    max_results: int
    max_documents: Optional[int] = None


def resolve_limits(
    max_results: Optional[int],
    max_documents: Optional[int],
    default_max_results: int = 10,
    max_results_cap: int = 100,
    max_documents_cap: int = 10000,
) -> ScanLimits:
    """
    Apply defaults and caps to user-supplied limits.

    A missing or zero max_results means the default; a missing or zero
    max_documents means the whole corpus.
    """
    results = min(max_results or default_max_results, max_results_cap)
    documents = min(max_documents, max_documents_cap) if max_documents else None
    return ScanLimits(max_results=results, max_documents=documents)


class CorpusScanner:
    """
    Scans a document corpus against the taxonomy for one case description.

    Each call to `scan()` builds its own ProviderRouter, so provider
    exhaustion never leaks from one scan into the next.
    """

    def __init__(
        self,
        clients: Mapping[ProviderId, BaseProviderClient],
        credentials: ProviderCredentials,
        prompt_builder: PromptBuilder,
        parser: EvaluationParser,
        taxonomy: Taxonomy = CRITERIOS,
        qualifying_threshold: float = 60.0,
        min_case_text_length: int = 50,
        courtesy_delay_seconds: float = 0.5,
        temperature: float = 0.1,
        max_tokens: int = 500,
        progress_log_interval: int = 10,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ):
        """
        Initialize scanner.

        Args:
            clients: Transport client per provider
            credentials: Keys available to each scan's router
            prompt_builder: Renders criterion prompts
            parser: Decodes replies into evaluations
            taxonomy: Category -> subcategory -> criteria
            qualifying_threshold: Minimum subcategory percentage to report
            min_case_text_length: Minimum case description length
            courtesy_delay_seconds: Pause after each successful call
            temperature: Sampling temperature sent to providers
            max_tokens: Reply token limit sent to providers
            progress_log_interval: Log progress every N documents
            sleep: Awaitable sleep (tests pass a no-op)
            clock: Monotonic clock for elapsed time
        """
        self.clients = clients
        self.credentials = credentials
        self.prompt_builder = prompt_builder
        self.parser = parser
        self.taxonomy = taxonomy
        self.qualifying_threshold = qualifying_threshold
        self.min_case_text_length = min_case_text_length
        self.courtesy_delay_seconds = courtesy_delay_seconds
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.progress_log_interval = progress_log_interval
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings,
        clients: Mapping[ProviderId, BaseProviderClient],
        prompt_builder: PromptBuilder,
        **overrides: Any,
    ) -> "CorpusScanner":
        options = dict(
            credentials=ProviderCredentials.from_settings(settings),
            parser=EvaluationParser(settings.JUSTIFICATION_MAX_LENGTH),
            qualifying_threshold=settings.QUALIFYING_THRESHOLD,
            min_case_text_length=settings.MIN_CASE_TEXT_LENGTH,
            courtesy_delay_seconds=settings.COURTESY_DELAY_SECONDS,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            progress_log_interval=settings.PROGRESS_LOG_INTERVAL,
        )
        options.update(overrides)
        return cls(clients=clients, prompt_builder=prompt_builder, **options)

    def validate_case_text(self, case_text: Any) -> str:
        """
        Raises:
            InputValidationError: not a non-empty string of the minimum length
        """
        if not isinstance(case_text, str) or not case_text:
            raise InputValidationError(
                'O campo "caso_concreto" é obrigatório e deve ser uma string'
            )
        if len(case_text) < self.min_case_text_length:
            raise InputValidationError(
                f"O caso concreto deve ter pelo menos {self.min_case_text_length} caracteres",
                {"length": len(case_text), "minimum": self.min_case_text_length},
                title="Caso muito curto",
            )
        return case_text

    async def scan(
        self,
        case_text: Any,
        documents: Sequence[Document],
        max_results: int = 10,
        max_documents: Optional[int] = None,
    ) -> ScanOutcome:
        """
        Scan `documents` for rulings relevant to `case_text`.

        Args:
            case_text: Case description (validated here)
            documents: Corpus in processing order
            max_results: Number of ranked results to return
            max_documents: Scan only the first N documents

        Returns:
            ScanOutcome, halted or complete

        Raises:
            InputValidationError: invalid case description (no provider call made)
            CorpusEmpty: no document to scan (no provider call made)
        """
        try:
            case_text = self.validate_case_text(case_text)
        except InputValidationError:
            scans_total.labels(outcome="rejected").inc()
            raise

        documents = list(documents)
        if not documents:
            scans_total.labels(outcome="rejected").inc()
            raise CorpusEmpty()
        if max_documents:
            documents = documents[:max_documents]

        pacer = Pacer(self.courtesy_delay_seconds, sleep=self._sleep, clock=self._clock)
        router = ProviderRouter(self.credentials)
        evaluator = CriterionEvaluator(
            clients=self.clients,
            router=router,
            prompt_builder=self.prompt_builder,
            parser=self.parser,
            pacer=pacer,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        total = len(documents)

        logger.info(
            "Scan started",
            total_documents=total,
            max_results=max_results,
            case_preview=case_text[:100],
        )

        relevant: list[DocumentResult] = []
        processed = 0
        halt_reason: Optional[HaltReason] = None

        try:
            # Raises before any call when nothing is configured
            router.current()
            for index, document in enumerate(documents, start=1):
                logger.debug("Scanning document", position=index, total=total, document=document.label)
                result = await self._scan_document(evaluator, case_text, document)
                processed = index
                documents_scanned_total.inc()

                if result is not None:
                    relevant.append(result)
                    logger.info(
                        "Relevant document found",
                        document=document.label,
                        melhor_percentual=round(result.melhor_percentual, 1),
                    )

                if processed % self.progress_log_interval == 0:
                    logger.info(
                        "Scan progress",
                        processed=processed,
                        total=total,
                        progress_percent=progress_percent(processed, total),
                        relevant=len(relevant),
                    )
        except AllProvidersExhausted as e:
            halt_reason = e.reason
            logger.warning(
                "Scan halted, no provider left",
                reason=e.reason.value,
                processed=processed,
                total=total,
                discarded_document=(
                    documents[processed].label
                    if e.reason is HaltReason.QUOTA_EXHAUSTED_ALL_PROVIDERS and processed < total
                    else None
                ),
            )

        outcome = ScanOutcome(
            resultados=rank_results(relevant, max_results),
            acordaos_processados=processed,
            total_acordaos=total,
            acordaos_relevantes_encontrados=len(relevant),
            progresso_percentual=progress_percent(processed, total),
            tempo_processamento_segundos=round(pacer.elapsed(), 2),
            interrompido=halt_reason is not None,
            motivo_interrupcao=halt_reason,
            provedores=router.status(),
            provedores_utilizados=router.used_providers(),
        )
        scans_total.labels(outcome="halted" if outcome.interrompido else "completed").inc()

        logger.info(
            "Scan finished",
            elapsed_seconds=outcome.tempo_processamento_segundos,
            processed=processed,
            total=total,
            relevant=len(relevant),
            returned=len(outcome.resultados),
            halted=outcome.interrompido,
            providers={name: status.value for name, status in outcome.provedores.items()},
            providers_used=outcome.provedores_utilizados,
        )
        return outcome

    async def _scan_document(
        self,
        evaluator: CriterionEvaluator,
        case_text: str,
        document: Document,
    ) -> Optional[DocumentResult]:
        subcategory_results: list[SubcategoryResult] = []
        for category, subcategory, criteria in iter_subcategories(self.taxonomy):
            evaluations = []
            for number, criterion in enumerate(criteria, start=1):
                evaluation = await self._evaluate_criterion(evaluator, case_text, document, criterion)
                evaluations.append(
                    CriterionEvaluation(
                        numero=number,
                        texto=criterion,
                        atende=evaluation.atende,
                        justificativa=evaluation.justificativa,
                    )
                )
            subcategory_results.append(
                score_subcategory(category, subcategory, evaluations, len(criteria))
            )
        return build_document_result(document, subcategory_results, self.qualifying_threshold)

    async def _evaluate_criterion(
        self,
        evaluator: CriterionEvaluator,
        case_text: str,
        document: Document,
        criterion: str,
    ) -> Evaluation:
        try:
            return await evaluator.evaluate(case_text, document, criterion)
        except AllProvidersExhausted:
            raise
        except Exception as e:
            logger.error(
                "Unhandled error evaluating criterion",
                document=document.label,
                criterion=criterion[:80],
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return Evaluation(atende=False, justificativa=UNHANDLED_ERROR_JUSTIFICATION)
