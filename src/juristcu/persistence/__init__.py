"""Read-only document store access."""

from juristcu.persistence.exceptions import DocumentStoreError
from juristcu.persistence.repository import (
    DocumentRepository,
    InMemoryDocumentRepository,
    SupabaseDocumentRepository,
    parse_content_range_total,
)

__all__ = [
    "DocumentRepository",
    "SupabaseDocumentRepository",
    "InMemoryDocumentRepository",
    "DocumentStoreError",
    "parse_content_range_total",
]
