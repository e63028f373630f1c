"""
Integration tests for the API endpoints.

The app runs in-process through TestClient with the scanner, repository and
settings swapped via dependency_overrides; providers are scripted clients.
"""

import pytest
from fastapi.testclient import TestClient

from juristcu.api.dependencies import get_repository, get_scanner, get_settings
from juristcu.main import app
from juristcu.models.enums import ProviderId
from juristcu.persistence.repository import InMemoryDocumentRepository
from tests.helpers import CASE_TEXT, NO, YES, FakeProviderClient, call_error

pytestmark = pytest.mark.integration

AUTH = {"X-API-Key": "tcu_test_key_123"}


@pytest.fixture
def gemini_replies():
    """Replies scripted for Gemini; defaults to YES once exhausted."""
    return []


@pytest.fixture
def clients(call_log, gemini_replies):
    return {
        ProviderId.GEMINI: FakeProviderClient(ProviderId.GEMINI, call_log, replies=gemini_replies, default=YES),
        ProviderId.CLAUDE: FakeProviderClient(ProviderId.CLAUDE, call_log, default=call_error(ProviderId.CLAUDE, 402, "credit")),
        ProviderId.OPENAI: FakeProviderClient(ProviderId.OPENAI, call_log, default=call_error(ProviderId.OPENAI, 429, "insufficient_quota")),
    }


@pytest.fixture
def repository(sample_rows):
    return InMemoryDocumentRepository(sample_rows)


@pytest.fixture
def client(test_settings, make_scanner, clients, full_credentials, repository):
    scanner = make_scanner(clients, full_credentials)
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_scanner] = lambda: scanner
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestAuthentication:

    def test_missing_key(self, client, call_log):
        response = client.post("/api/v1/analisar-caso", json={"caso_concreto": CASE_TEXT})

        assert response.status_code == 401
        body = response.json()
        assert body["erro"] == "API Key não fornecida"
        assert "timestamp" in body
        assert call_log == []

    def test_invalid_key(self, client):
        response = client.get("/api/v1/info", headers={"X-API-Key": "tcu_wrong"})

        assert response.status_code == 403
        assert response.json()["erro"] == "API Key inválida"

    def test_bearer_token(self, client):
        response = client.get("/api/v1/info", headers={"Authorization": "Bearer tcu_test_key_123"})
        assert response.status_code == 200

    def test_health_is_public(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "online"
        assert body["servicos"] == {
            "supabase": "desconectado",
            "gemini": "2 chave(s)",
            "claude": "configurado",
            "openai": "configurado",
        }


class TestAnalyzeCase:

    def test_success_shape(self, client, call_log):
        response = client.post(
            "/api/v1/analisar-caso",
            json={"caso_concreto": CASE_TEXT, "max_resultados": 2},
            headers=AUTH,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["sucesso"] is True
        assert body["total_acordaos_banco"] == 3
        assert body["acordaos_processados"] == 3
        assert body["acordaos_relevantes_encontrados"] == 3
        assert body["acordaos_retornados"] == 2
        assert body["caso_concreto"] == CASE_TEXT
        # Newest session first, all tied at 100%
        assert [r["acordao"]["id"] for r in body["resultados"]] == [2, 5]
        assert body["resultados"][0]["melhor_percentual"] == 100.0
        assert body["estatisticas"]["gemini_usado"] is True
        assert body["estatisticas"]["claude_usado"] is False
        assert body["estatisticas"]["progresso_percentual"] == 100.0
        assert len(call_log) == 3 * 8

    def test_max_acordaos_limits_processing(self, client, call_log):
        response = client.post(
            "/api/v1/analisar-caso",
            json={"caso_concreto": CASE_TEXT, "max_acordaos": 1},
            headers=AUTH,
        )

        body = response.json()
        assert body["total_acordaos_banco"] == 3
        assert body["acordaos_processados"] == 1
        assert [r["acordao"]["id"] for r in body["resultados"]] == [2]

    def test_short_case(self, client, call_log):
        response = client.post(
            "/api/v1/analisar-caso", json={"caso_concreto": "curto demais"}, headers=AUTH
        )

        assert response.status_code == 400
        assert response.json()["erro"] == "Caso muito curto"
        assert call_log == []

    def test_missing_case(self, client):
        response = client.post("/api/v1/analisar-caso", json={}, headers=AUTH)

        assert response.status_code == 400
        assert response.json()["erro"] == "Parâmetro inválido"

    def test_malformed_body(self, client):
        response = client.post(
            "/api/v1/analisar-caso",
            content=b"{not json",
            headers={**AUTH, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["erro"] == "Parâmetro inválido"

    def test_empty_corpus(self, client, call_log):
        app.dependency_overrides[get_repository] = lambda: InMemoryDocumentRepository()

        response = client.post("/api/v1/analisar-caso", json={"caso_concreto": CASE_TEXT}, headers=AUTH)

        assert response.status_code == 404
        assert response.json()["erro"] == "Nenhum acórdão encontrado"
        assert call_log == []

    @pytest.mark.parametrize("gemini_replies", [[YES] * 8 + [NO] * 2 + [call_error(ProviderId.GEMINI)] * 2])
    def test_halt_returns_partial_results(self, client, gemini_replies, call_log):
        # Document 1 fully evaluated; key 2 fails too, then Claude and OpenAI
        response = client.post("/api/v1/analisar-caso", json={"caso_concreto": CASE_TEXT}, headers=AUTH)

        assert response.status_code == 503
        body = response.json()
        assert body["erro"] == "Serviços de IA indisponíveis"
        assert body["motivo_interrupcao"] == "quota_exhausted_all_providers"
        assert body["acordaos_processados"] == 1
        assert body["total_acordaos"] == 3
        assert body["progresso_percentual"] == 33.33
        assert [r["acordao"]["id"] for r in body["resultados_parciais"]] == [2]
        assert body["detalhes"] == {
            "gemini": "Todas as chaves falharam",
            "claude": "Quota excedida",
            "openai": "Quota excedida",
        }


class TestInfoAndStatistics:

    def test_info(self, client):
        response = client.get("/api/v1/info", headers=AUTH)

        body = response.json()
        assert body["total_criterios"] == 68
        assert len(body["categorias_disponiveis"]) == 5
        assert body["comportamento"]["limite_retorno_padrao"] == 10
        assert set(body["modelos"]) == {"gemini", "claude", "openai"}
        assert body["modelos"]["openai"]["fallback_model"] == "gpt-4o"

    def test_statistics(self, client):
        response = client.get("/api/v1/estatisticas", headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {
            "sucesso": True,
            "total_acordaos": 5,
            "acordaos_processaveis": 3,
            "acordaos_sem_texto": 2,
            "percentual_processavel": "60.00%",
        }

    def test_statistics_on_empty_corpus(self, client):
        app.dependency_overrides[get_repository] = lambda: InMemoryDocumentRepository()

        response = client.get("/api/v1/estatisticas", headers=AUTH)

        assert response.json()["percentual_processavel"] == "0.00%"


class TestRouting:

    def test_unknown_endpoint(self, client):
        response = client.get("/api/v1/nao-existe")

        assert response.status_code == 404
        body = response.json()
        assert body["erro"] == "Endpoint não encontrado"
        assert body["mensagem"] == "O endpoint GET /api/v1/nao-existe não existe"
        assert "POST /api/v1/analisar-caso" in body["endpoints_disponiveis"]

    def test_request_id_header(self, client):
        response = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
