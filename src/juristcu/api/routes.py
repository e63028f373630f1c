"""
JurisTCU API routes (v1).

- POST /api/v1/analisar-caso: scan the corpus for a case (authenticated)
- GET  /api/v1/health: service status (public)
- GET  /api/v1/info: API description (authenticated)
- GET  /api/v1/estatisticas: corpus counts (authenticated)
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from juristcu.api.dependencies import (
    get_provider_clients,
    get_repository,
    get_scanner,
    get_settings,
    require_api_key,
)
from juristcu.api.models import (
    AnalyzeCaseRequest,
    AnalyzeCaseResponse,
    ErrorResponse,
    HaltedScanResponse,
    HealthResponse,
    InfoResponse,
    ScanStatistics,
    StatisticsResponse,
)
from juristcu.config import Settings
from juristcu.llm.text_utils import preview
from juristcu.models.domain import ScanOutcome
from juristcu.models.enums import HaltReason, ProviderId, ProviderStatus
from juristcu.persistence.repository import DocumentRepository
from juristcu.scanning.scanner import CorpusScanner, resolve_limits
from juristcu.taxonomy import categories, count_criteria

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")

_HALT_MESSAGES = {
    HaltReason.QUOTA_EXHAUSTED_ALL_PROVIDERS: (
        "Serviços de IA indisponíveis",
        "Todas as opções de IA estão indisponíveis no momento.",
    ),
    HaltReason.NO_PROVIDERS_CONFIGURED: (
        "Nenhum provedor de IA configurado",
        "Configure GEMINI_KEYS, ANTHROPIC_API_KEY ou OPENAI_API_KEY.",
    ),
}


def describe_providers(outcome: ScanOutcome) -> dict[str, str]:
    """Human-readable provider status for halt reports."""
    labels = {}
    for provider in ProviderId.chain():
        state = outcome.provedores.get(provider.value, ProviderStatus.NOT_CONFIGURED)
        if state is ProviderStatus.NOT_CONFIGURED:
            labels[provider.value] = "Não configurado"
        elif state is ProviderStatus.EXHAUSTED:
            labels[provider.value] = (
                "Todas as chaves falharam" if provider is ProviderId.GEMINI else "Quota excedida"
            )
        else:
            labels[provider.value] = "Disponível"
    return labels


def build_statistics(outcome: ScanOutcome) -> ScanStatistics:
    used = set(outcome.provedores_utilizados)
    return ScanStatistics(
        gemini_usado=ProviderId.GEMINI.value in used,
        claude_usado=ProviderId.CLAUDE.value in used,
        openai_usado=ProviderId.OPENAI.value in used,
        quota_claude_excedida=outcome.provedores.get(ProviderId.CLAUDE.value) is ProviderStatus.EXHAUSTED,
        quota_openai_excedida=outcome.provedores.get(ProviderId.OPENAI.value) is ProviderStatus.EXHAUSTED,
        provedores={name: state.value for name, state in outcome.provedores.items()},
        progresso_percentual=outcome.progresso_percentual,
    )


@router.post(
    "/analisar-caso",
    response_model=AnalyzeCaseResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze a case against the ruling corpus",
    responses={
        200: {"description": "Scan completed"},
        400: {"model": ErrorResponse, "description": "Invalid case description"},
        401: {"model": ErrorResponse, "description": "API key missing"},
        403: {"model": ErrorResponse, "description": "API key invalid"},
        404: {"model": ErrorResponse, "description": "No processable ruling"},
        503: {"model": HaltedScanResponse, "description": "All providers exhausted, partial results"},
    },
)
async def analyze_case(
    request: AnalyzeCaseRequest,
    _: str = Depends(require_api_key),
    scanner: CorpusScanner = Depends(get_scanner),
    repository: DocumentRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    """
    Scan every processable ruling (or the `max_acordaos` most recent) and
    return the `max_resultados` best matches.

    Returns:
        AnalyzeCaseResponse, or a 503 HaltedScanResponse when the provider
        chain ran out mid-scan
    """
    # Reject bad input before touching the document store
    case_text = scanner.validate_case_text(request.caso_concreto)
    limits = resolve_limits(
        request.max_resultados,
        request.max_acordaos,
        default_max_results=settings.DEFAULT_MAX_RESULTS,
        max_results_cap=settings.MAX_RESULTS_CAP,
        max_documents_cap=settings.MAX_DOCUMENTS_CAP,
    )

    logger.info(
        "Scan request received",
        extra={
            "case_length": len(case_text),
            "max_results": limits.max_results,
            "max_documents": limits.max_documents,
        },
    )

    documents = await repository.fetch_processable()
    outcome = await scanner.scan(
        case_text,
        documents,
        max_results=limits.max_results,
        max_documents=limits.max_documents,
    )

    if outcome.interrompido:
        title, message = _HALT_MESSAGES[outcome.motivo_interrupcao]
        halted = HaltedScanResponse(
            erro=title,
            mensagem=message,
            motivo_interrupcao=outcome.motivo_interrupcao.value,
            detalhes=describe_providers(outcome),
            resultados_parciais=outcome.resultados,
            acordaos_processados=outcome.acordaos_processados,
            total_acordaos=outcome.total_acordaos,
            acordaos_relevantes_encontrados=outcome.acordaos_relevantes_encontrados,
            progresso_percentual=outcome.progresso_percentual,
            tempo_processamento_segundos=outcome.tempo_processamento_segundos,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=halted.model_dump(mode="json"),
        )

    return AnalyzeCaseResponse(
        caso_concreto=preview(case_text, 200),
        total_acordaos_banco=len(documents),
        acordaos_processados=outcome.acordaos_processados,
        acordaos_relevantes_encontrados=outcome.acordaos_relevantes_encontrados,
        acordaos_retornados=len(outcome.resultados),
        tempo_processamento_segundos=outcome.tempo_processamento_segundos,
        resultados=outcome.resultados,
        estatisticas=build_statistics(outcome),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Report configuration status. Public; makes no provider or database calls.
    """
    gemini_keys = len(settings.gemini_keys)
    return HealthResponse(
        status="online",
        versao=settings.APP_VERSION,
        servicos={
            "supabase": "conectado" if settings.SUPABASE_URL and settings.SUPABASE_KEY else "desconectado",
            "gemini": f"{gemini_keys} chave(s)" if gemini_keys else "não configurado",
            "claude": "configurado" if settings.ANTHROPIC_API_KEY else "não configurado",
            "openai": "configurado" if settings.OPENAI_API_KEY else "não configurado",
        },
        timestamp=datetime.utcnow(),
    )


@router.get(
    "/info",
    response_model=InfoResponse,
    summary="API description",
)
async def info(
    _: str = Depends(require_api_key),
    settings: Settings = Depends(get_settings),
    clients: dict = Depends(get_provider_clients),
) -> InfoResponse:
    return InfoResponse(
        nome=settings.APP_NAME,
        versao=settings.APP_VERSION,
        descricao="API para análise e categorização de casos concretos baseado em acórdãos do TCU",
        endpoints={
            "/api/v1/health": "Verificar status da API (público)",
            "/api/v1/info": "Informações sobre a API (requer autenticação)",
            "/api/v1/estatisticas": "Estatísticas do banco de acórdãos (requer autenticação)",
            "/api/v1/analisar-caso": "Analisar caso concreto (POST, requer autenticação)",
        },
        categorias_disponiveis=categories(),
        total_criterios=count_criteria(),
        autenticacao="Necessário header X-API-Key ou Authorization: Bearer <key>",
        comportamento={
            "processamento": "Analisa TODOS os acórdãos do banco de dados",
            "retorno": "Retorna apenas os X acórdãos mais relevantes (definido por max_resultados)",
            "limite_retorno_padrao": settings.DEFAULT_MAX_RESULTS,
            "limite_retorno_maximo": settings.MAX_RESULTS_CAP,
            "limite_processamento_maximo": settings.MAX_DOCUMENTS_CAP,
            "percentual_minimo_relevancia": settings.QUALIFYING_THRESHOLD,
        },
        modelos={provider.value: client.health_check() for provider, client in clients.items()},
    )


@router.get(
    "/estatisticas",
    response_model=StatisticsResponse,
    summary="Corpus statistics",
)
async def statistics(
    _: str = Depends(require_api_key),
    repository: DocumentRepository = Depends(get_repository),
) -> StatisticsResponse:
    total = await repository.count_all()
    processable = await repository.count_processable()
    percent = 100.0 * processable / total if total else 0.0
    return StatisticsResponse(
        total_acordaos=total,
        acordaos_processaveis=processable,
        acordaos_sem_texto=total - processable,
        percentual_processavel=f"{percent:.2f}%",
    )
