"""
API-specific request and response models for FastAPI endpoints.

Field names are Portuguese to match the public JurisTCU contract.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from juristcu.models.domain import DocumentResult


class AnalyzeCaseRequest(BaseModel):
    """Body of POST /api/v1/analisar-caso."""

    caso_concreto: Any = Field(
        default=None,
        description="Case description (string, at least 50 characters)",
    )
    max_resultados: Optional[int] = Field(
        default=None,
        ge=0,
        description="Number of ranked rulings to return (default 10, capped at 100)",
    )
    max_acordaos: Optional[int] = Field(
        default=None,
        ge=0,
        description="Scan only the N most recent rulings (capped at 10000)",
    )


class ScanStatistics(BaseModel):
    """Provider usage summary for a scan."""

    gemini_usado: bool
    claude_usado: bool
    openai_usado: bool
    quota_claude_excedida: bool
    quota_openai_excedida: bool
    provedores: dict[str, str]
    progresso_percentual: float


class AnalyzeCaseResponse(BaseModel):
    """Response for a scan that covered the whole (requested) corpus."""

    sucesso: bool = True
    caso_concreto: str = Field(description="First 200 characters of the case")
    total_acordaos_banco: int = Field(ge=0)
    acordaos_processados: int = Field(ge=0)
    acordaos_relevantes_encontrados: int = Field(ge=0)
    acordaos_retornados: int = Field(ge=0)
    tempo_processamento_segundos: float
    resultados: list[DocumentResult]
    estatisticas: ScanStatistics


class HaltedScanResponse(BaseModel):
    """503 body: scan stopped because no provider was left."""

    erro: str
    mensagem: str
    motivo_interrupcao: str
    detalhes: dict[str, str]
    resultados_parciais: list[DocumentResult]
    acordaos_processados: int = Field(ge=0)
    total_acordaos: int = Field(ge=0)
    acordaos_relevantes_encontrados: int = Field(ge=0)
    progresso_percentual: float
    tempo_processamento_segundos: float


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(examples=["online"])
    versao: str
    servicos: dict[str, str]
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class InfoResponse(BaseModel):
    """Response for API info endpoint."""

    nome: str
    versao: str
    descricao: str
    endpoints: dict[str, str]
    categorias_disponiveis: list[str]
    total_criterios: int
    autenticacao: str
    comportamento: dict[str, Any]
    modelos: dict[str, Any] = Field(default_factory=dict, description="Configured model per provider")


class StatisticsResponse(BaseModel):
    """Corpus counts."""

    sucesso: bool = True
    total_acordaos: int = Field(ge=0)
    acordaos_processaveis: int = Field(ge=0)
    acordaos_sem_texto: int = Field(ge=0)
    percentual_processavel: str = Field(examples=["93.50%"])


class ErrorResponse(BaseModel):
    """Standard error body."""

    erro: str
    mensagem: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
