"""
Domain models for the corpus scan.

Documents come read-only from the document store; everything else is
derived per scan and never persisted.
"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from juristcu.models.enums import HaltReason, ProviderStatus


class Document(BaseModel):
    """
    A ruling (acórdão) as stored in the `acordaos` table.

    Only rows with non-null texto_pdf and sumario are handed to the scanner.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: Union[int, str]
    numero_acordao: Union[int, str]
    ano_acordao: Union[int, str]
    titulo: Optional[str] = None
    sumario: Optional[str] = None
    texto_pdf: Optional[str] = None
    data_sessao: Optional[Union[date, datetime, str]] = None
    relator: Optional[str] = None
    colegiado: Optional[str] = None
    url_acordao: Optional[str] = None

    @property
    def label(self) -> str:
        """Human form used in logs and prompts, e.g. 1234/2024."""
        return f"{self.numero_acordao}/{self.ano_acordao}"

    def reference(self) -> "DocumentReference":
        return DocumentReference(
            id=self.id,
            numero=self.numero_acordao,
            ano=self.ano_acordao,
            titulo=self.titulo,
            data_sessao=self.data_sessao,
            relator=self.relator,
            colegiado=self.colegiado,
            url_acordao=self.url_acordao,
        )


class DocumentReference(BaseModel):
    """Document metadata echoed back in scan results."""

    id: Union[int, str]
    numero: Union[int, str]
    ano: Union[int, str]
    titulo: Optional[str] = None
    data_sessao: Optional[Union[date, datetime, str]] = None
    relator: Optional[str] = None
    colegiado: Optional[str] = None
    url_acordao: Optional[str] = None


class Evaluation(BaseModel):
    """Yes/no judgment of one criterion against one document."""

    model_config = ConfigDict(frozen=True)

    atende: bool
    justificativa: str


class CriterionEvaluation(BaseModel):
    """An Evaluation tagged with the criterion it answers."""

    numero: int = Field(..., ge=1, description="1-based position within the subcategory")
    texto: str
    atende: bool
    justificativa: str


class SubcategoryResult(BaseModel):
    """Score of one subcategory for one document."""

    categoria: str
    subcategoria: str
    criterios: list[CriterionEvaluation] = Field(default_factory=list)
    total_criterios: int = Field(..., ge=1)
    criterios_atendidos: int = Field(..., ge=0)
    percentual_atendimento: float = Field(..., ge=0.0, le=100.0)


class DocumentResult(BaseModel):
    """A document with at least one qualifying subcategory."""

    acordao: DocumentReference
    categorias: list[SubcategoryResult]
    melhor_percentual: float


class ScanOutcome(BaseModel):
    """
    Result of one scan, complete or halted.

    `resultados` is ranked by melhor_percentual (descending) and truncated to
    the requested maximum; `acordaos_relevantes_encontrados` counts every
    qualifying document before truncation.
    """

    resultados: list[DocumentResult] = Field(default_factory=list)
    acordaos_processados: int = Field(..., ge=0)
    total_acordaos: int = Field(..., ge=0)
    acordaos_relevantes_encontrados: int = Field(..., ge=0)
    progresso_percentual: float = Field(..., ge=0.0, le=100.0)
    tempo_processamento_segundos: float = Field(..., ge=0.0)
    interrompido: bool = False
    motivo_interrupcao: Optional[HaltReason] = None
    provedores: dict[str, ProviderStatus] = Field(default_factory=dict)
    provedores_utilizados: list[str] = Field(default_factory=list)
