"""
Unit tests for the criterion evaluator.
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from juristcu.llm.openai_client import OpenAIClient
from juristcu.models.enums import ProviderId
from juristcu.routing.exceptions import AllProvidersExhausted
from juristcu.routing.provider_router import ProviderCredentials, ProviderRouter
from juristcu.scanning.evaluator import CriterionEvaluator
from juristcu.scanning.pacing import Pacer
from juristcu.validation.pipeline import INVALID_REPLY_JUSTIFICATION, EvaluationParser
from tests.helpers import CASE_TEXT, NO, YES, FakeProviderClient, call_error, make_document

GEMINI = ProviderId.GEMINI
CLAUDE = ProviderId.CLAUDE
OPENAI = ProviderId.OPENAI


def build_evaluator(clients, credentials, prompt_builder, sleep):
    return CriterionEvaluator(
        clients=clients,
        router=ProviderRouter(credentials),
        prompt_builder=prompt_builder,
        parser=EvaluationParser(200),
        pacer=Pacer(0.5, sleep=sleep, clock=lambda: 0.0),
    )


def fake_clients(call_log, gemini=(), claude=(), openai=()):
    return {
        GEMINI: FakeProviderClient(GEMINI, call_log, replies=gemini),
        CLAUDE: FakeProviderClient(CLAUDE, call_log, replies=claude),
        OPENAI: FakeProviderClient(OPENAI, call_log, replies=openai),
    }


class TestCriterionEvaluator:

    @pytest.mark.asyncio
    async def test_success_on_first_provider(self, call_log, full_credentials, prompt_builder, no_sleep):
        evaluator = build_evaluator(fake_clients(call_log, gemini=[YES]), full_credentials, prompt_builder, no_sleep)

        evaluation = await evaluator.evaluate(CASE_TEXT, make_document(1), "CRITERIO_A_1")

        assert evaluation.atende is True
        assert [(c.provider, c.credential) for c in call_log] == [(GEMINI, "gemini-key-1")]
        assert "CRITERIO_A_1" in call_log[0].prompt
        assert evaluator.router.used_providers() == ["gemini"]

    @pytest.mark.asyncio
    async def test_courtesy_pause_after_success_only(self, call_log, full_credentials, prompt_builder, no_sleep):
        clients = fake_clients(call_log, gemini=[call_error(GEMINI), NO])
        evaluator = build_evaluator(clients, full_credentials, prompt_builder, no_sleep)

        await evaluator.evaluate(CASE_TEXT, make_document(1), "c")

        no_sleep.assert_awaited_once_with(0.5)

    @pytest.mark.asyncio
    async def test_walks_the_whole_chain(self, call_log, full_credentials, prompt_builder, no_sleep):
        clients = fake_clients(
            call_log,
            gemini=[call_error(GEMINI, 429, "RESOURCE_EXHAUSTED"), call_error(GEMINI, 400, "API key not valid")],
            claude=[call_error(CLAUDE, 402, "credit")],
            openai=[YES],
        )
        evaluator = build_evaluator(clients, full_credentials, prompt_builder, no_sleep)

        evaluation = await evaluator.evaluate(CASE_TEXT, make_document(1), "c")

        assert evaluation.atende is True
        assert [(c.provider, c.credential) for c in call_log] == [
            (GEMINI, "gemini-key-1"),
            (GEMINI, "gemini-key-2"),
            (CLAUDE, "claude-key"),
            (OPENAI, "openai-key"),
        ]
        # Same prompt on every attempt
        assert len({c.prompt for c in call_log}) == 1

    @pytest.mark.asyncio
    async def test_raises_when_chain_is_exhausted(self, call_log, full_credentials, prompt_builder, no_sleep):
        clients = fake_clients(
            call_log,
            gemini=[call_error(GEMINI), call_error(GEMINI)],
            claude=[call_error(CLAUDE, 500, "overloaded")],
            openai=[call_error(OPENAI, 429, "insufficient_quota")],
        )
        evaluator = build_evaluator(clients, full_credentials, prompt_builder, no_sleep)

        with pytest.raises(AllProvidersExhausted):
            await evaluator.evaluate(CASE_TEXT, make_document(1), "c")

        assert len(call_log) == 4
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_reply_is_not_a_provider_failure(self, call_log, full_credentials, prompt_builder, no_sleep):
        clients = fake_clients(call_log, gemini=["Não sei responder."])
        evaluator = build_evaluator(clients, full_credentials, prompt_builder, no_sleep)

        evaluation = await evaluator.evaluate(CASE_TEXT, make_document(1), "c")

        assert evaluation.atende is False
        assert evaluation.justificativa == INVALID_REPLY_JUSTIFICATION
        assert evaluator.router.current() == GEMINI
        assert evaluator.router.credential() == "gemini-key-1"

    @pytest.mark.asyncio
    async def test_empty_reply_is_not_a_provider_failure(self, call_log, full_credentials, prompt_builder, no_sleep):
        clients = fake_clients(call_log, gemini=[""])
        evaluator = build_evaluator(clients, full_credentials, prompt_builder, no_sleep)

        evaluation = await evaluator.evaluate(CASE_TEXT, make_document(1), "c")

        assert evaluation.atende is False
        assert evaluation.justificativa == INVALID_REPLY_JUSTIFICATION
        assert evaluator.router.current() == GEMINI
        assert evaluator.router.credential() == "gemini-key-1"

    @pytest.mark.asyncio
    async def test_content_filtered_reply_keeps_last_provider(self, prompt_builder, no_sleep):
        filtered = {"choices": [{"message": {"content": None}, "finish_reason": "content_filter"}]}
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=filtered))
        client = OpenAIClient(base_url="https://openai.test", transport=transport)
        evaluator = build_evaluator(
            {OPENAI: client}, ProviderCredentials(openai_key="openai-key"), prompt_builder, no_sleep
        )

        first = await evaluator.evaluate(CASE_TEXT, make_document(1), "c")
        second = await evaluator.evaluate(CASE_TEXT, make_document(2), "c")

        assert first.atende is False and second.atende is False
        assert first.justificativa == INVALID_REPLY_JUSTIFICATION
        assert evaluator.router.current() == OPENAI
        await client.close()

    @pytest.mark.asyncio
    async def test_no_providers_configured(self, call_log, prompt_builder, no_sleep):
        evaluator = build_evaluator(fake_clients(call_log), ProviderCredentials(), prompt_builder, no_sleep)

        with pytest.raises(AllProvidersExhausted):
            await evaluator.evaluate(CASE_TEXT, make_document(1), "c")
        assert call_log == []

    @pytest.mark.asyncio
    async def test_sends_configured_generation_parameters(self, full_credentials, prompt_builder, no_sleep):
        client = AsyncMock()
        client.complete = AsyncMock(return_value=YES)
        evaluator = CriterionEvaluator(
            clients={GEMINI: client},
            router=ProviderRouter(ProviderCredentials(gemini_keys=("k",))),
            prompt_builder=prompt_builder,
            parser=EvaluationParser(200),
            pacer=Pacer(0, sleep=no_sleep),
            temperature=0.1,
            max_tokens=500,
        )

        await evaluator.evaluate(CASE_TEXT, make_document(1), "c")

        _, kwargs = client.complete.call_args
        assert kwargs == {"temperature": 0.1, "max_tokens": 500, "credential": "k"}
        no_sleep.assert_not_awaited()
