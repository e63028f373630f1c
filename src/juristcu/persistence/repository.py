"""
Repository pattern for the ruling corpus.

The scanner only ever reads documents. Two backends:
- SupabaseDocumentRepository: PostgREST table over httpx (production)
- InMemoryDocumentRepository: a list of rows, optionally loaded from JSON
  (local runs and tests)

Processable documents have both texto_pdf and sumario, ordered by
data_sessao descending.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Optional

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from juristcu.models.domain import Document
from juristcu.persistence.exceptions import DocumentStoreError

logger = structlog.get_logger(__name__)


class DocumentRepository(ABC):
    """Read-only access to the acórdãos corpus."""

    @abstractmethod
    async def fetch_processable(self) -> list[Document]:
        """Documents with body and summary, newest session first."""

    @abstractmethod
    async def count_all(self) -> int:
        ...

    @abstractmethod
    async def count_processable(self) -> int:
        ...

    async def close(self) -> None:
        return None


class SupabaseDocumentRepository(DocumentRepository):
    """
    Supabase (PostgREST) backed repository.

    Rows are fetched in pages of `page_size` with limit/offset until a short
    page comes back. Counts use `Prefer: count=exact` and read the total from
    the Content-Range header ("0-0/3573" or "*/3573").
    """

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "acordaos",
        page_size: int = 1000,
        timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize repository.

        Args:
            url: Supabase project URL
            key: Supabase API key (anon or service role)
            table: Table holding the rulings
            page_size: Rows per request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = url.rstrip('/')
        self.table = table
        self.page_size = page_size
        self.timeout = timeout
        self._headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept": "application/json",
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/rest/v1",
                headers=self._headers,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def fetch_processable(self) -> list[Document]:
        documents: list[Document] = []
        offset = 0

        while True:
            params = {
                "select": "*",
                "texto_pdf": "not.is.null",
                "sumario": "not.is.null",
                "order": "data_sessao.desc",
                "limit": str(self.page_size),
                "offset": str(offset),
            }
            response = await self._request("GET", params=params)
            try:
                rows = response.json()
            except ValueError as e:
                raise DocumentStoreError(
                    "Invalid JSON from document store",
                    {"table": self.table, "offset": offset},
                ) from e

            documents.extend(_to_documents(rows))
            logger.debug("Fetched document page", offset=offset, rows=len(rows))

            if len(rows) < self.page_size:
                break
            offset += self.page_size

        logger.info("Fetched processable documents", table=self.table, count=len(documents))
        return documents

    async def count_all(self) -> int:
        return await self._count({})

    async def count_processable(self) -> int:
        return await self._count({"texto_pdf": "not.is.null", "sumario": "not.is.null"})

    async def _count(self, filters: dict[str, str]) -> int:
        params = {"select": "id", "limit": "1", **filters}
        response = await self._request("GET", params=params, headers={"Prefer": "count=exact"})
        return parse_content_range_total(response.headers.get("content-range"))

    async def _request(self, method: str, params: dict, headers: dict | None = None) -> httpx.Response:
        client = await self._get_client()
        try:
            response = await client.request(method, f"/{self.table}", params=params, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Document store HTTP error",
                table=self.table,
                status_code=e.response.status_code,
                error=e.response.text[:200],
            )
            raise DocumentStoreError(
                f"Document store returned HTTP {e.response.status_code}",
                {"table": self.table, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Document store unreachable", table=self.table, error=str(e))
            raise DocumentStoreError(
                f"Document store unreachable: {type(e).__name__}",
                {"table": self.table},
            ) from e
        return response

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()


class InMemoryDocumentRepository(DocumentRepository):
    """Repository over an in-memory list of rows."""

    def __init__(self, rows: Iterable[Any] = ()):
        self._documents = _to_documents(rows)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryDocumentRepository":
        """Load rows from a JSON array file (same columns as the acordaos table)."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except (OSError, ValueError) as e:
            raise DocumentStoreError(f"Cannot load documents file: {e}", {"path": str(path)}) from e
        if not isinstance(rows, list):
            raise DocumentStoreError("Documents file must hold a JSON array", {"path": str(path)})
        logger.info("Loaded documents file", path=str(path), rows=len(rows))
        return cls(rows)

    async def fetch_processable(self) -> list[Document]:
        processable = [d for d in self._documents if _is_processable(d)]
        # Rows without a session date go last
        dated = [d for d in processable if d.data_sessao is not None]
        undated = [d for d in processable if d.data_sessao is None]
        dated.sort(key=lambda d: str(d.data_sessao), reverse=True)
        return dated + undated

    async def count_all(self) -> int:
        return len(self._documents)

    async def count_processable(self) -> int:
        return sum(1 for d in self._documents if _is_processable(d))


def parse_content_range_total(header: Optional[str]) -> int:
    """
    Total from a PostgREST Content-Range header.

    Examples:
        >>> parse_content_range_total("0-24/3573")
        3573
        >>> parse_content_range_total("*/0")
        0
    """
    if not header or "/" not in header:
        raise DocumentStoreError("Missing Content-Range total", {"content_range": header})
    total = header.rsplit("/", 1)[1]
    if not total.isdigit():
        raise DocumentStoreError("Unknown Content-Range total", {"content_range": header})
    return int(total)


def _is_processable(document: Document) -> bool:
    return document.texto_pdf is not None and document.sumario is not None


def _to_documents(rows: Iterable[Any]) -> list[Document]:
    documents = []
    for row in rows:
        if isinstance(row, Document):
            documents.append(row)
            continue
        try:
            documents.append(Document.model_validate(row))
        except PydanticValidationError as e:
            raise DocumentStoreError(
                "Malformed document row",
                {"errors": e.errors(include_url=False)},
            ) from e
    return documents
