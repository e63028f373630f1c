"""
Criterion evaluator: one yes/no judgment per (case, document, criterion).

Calls the active provider, and on failure classifies the error, lets the
router move on, and retries against whichever provider is active next. The
loop ends with an Evaluation or with AllProvidersExhausted from the router.
"""

from typing import Mapping

import structlog

from juristcu.llm.base_client import BaseProviderClient
from juristcu.llm.exceptions import LLMClientError
from juristcu.llm.prompt_builder import PromptBuilder
from juristcu.models.domain import Document, Evaluation
from juristcu.models.enums import ProviderId
from juristcu.monitoring.metrics import provider_calls_total, provider_failures_total
from juristcu.routing.provider_router import ProviderRouter
from juristcu.routing.quota_classifier import classify_error
from juristcu.scanning.pacing import Pacer
from juristcu.validation.pipeline import EvaluationParser


logger = structlog.get_logger(__name__)


class CriterionEvaluator:
    """
    Evaluates criteria against documents through the provider chain.

    Responsibilities:
    - Build the prompt once per evaluation
    - Route each attempt through the router's active provider/key
    - Classify failures and report them to the router
    - Decode replies (invalid replies count as "not met", never as failures)
    - Observe the courtesy pause after every successful call

    No same-key retries and no sleep after failures: each failure moves the
    router forward, so the loop is bounded by the number of keys in the chain.
    """

    def __init__(
        self,
        clients: Mapping[ProviderId, BaseProviderClient],
        router: ProviderRouter,
        prompt_builder: PromptBuilder,
        parser: EvaluationParser,
        pacer: Pacer,
        temperature: float = 0.1,
        max_tokens: int = 500,
    ):
        self.clients = clients
        self.router = router
        self.prompt_builder = prompt_builder
        self.parser = parser
        self.pacer = pacer
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def evaluate(self, case_text: str, document: Document, criterion: str) -> Evaluation:
        """
        Judge whether `document` meets `criterion` for `case_text`.

        Raises:
            AllProvidersExhausted: the router has no provider left
        """
        prompt = self.prompt_builder.build_criterion_prompt(case_text, document, criterion)

        while True:
            provider = self.router.current()
            credential = self.router.credential()

            try:
                reply = await self.clients[provider].complete(
                    prompt,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    credential=credential,
                )
            except LLMClientError as e:
                status_code = getattr(e, "status_code", None)
                error = classify_error(provider, status_code, e.message)
                provider_calls_total.labels(provider=provider.value, outcome="failure").inc()
                provider_failures_total.labels(
                    provider=provider.value, error_kind=error.kind.value
                ).inc()
                logger.warning(
                    "Provider call failed",
                    provider=provider.value,
                    error_kind=error.kind.value,
                    error_type=type(error).__name__,
                    status_code=status_code,
                    document=document.label,
                    error=e.message[:200],
                )
                self.router.report_failure(provider, error.kind)
                continue

            provider_calls_total.labels(provider=provider.value, outcome="success").inc()
            self.router.record_success(provider)
            evaluation = self.parser.parse_or_default(reply)
            await self.pacer.courtesy_pause()
            return evaluation
