"""
Pydantic data models for the JurisTCU service.

Includes:
- Enums (ProviderId, ErrorKind, HaltReason, ProviderStatus)
- Domain models (Document, Evaluation, SubcategoryResult, DocumentResult, ScanOutcome)
"""

from juristcu.models.enums import ErrorKind, HaltReason, ProviderId, ProviderStatus
from juristcu.models.domain import (
    CriterionEvaluation,
    Document,
    DocumentReference,
    DocumentResult,
    Evaluation,
    ScanOutcome,
    SubcategoryResult,
)

__all__ = [
    # Enums
    "ProviderId",
    "ErrorKind",
    "HaltReason",
    "ProviderStatus",
    # Domain models
    "Document",
    "DocumentReference",
    "Evaluation",
    "CriterionEvaluation",
    "SubcategoryResult",
    "DocumentResult",
    "ScanOutcome",
]
