"""
Unit tests for the document repositories.
"""

import json

import httpx
import pytest

from juristcu.persistence.exceptions import DocumentStoreError
from juristcu.persistence.repository import (
    InMemoryDocumentRepository,
    SupabaseDocumentRepository,
    parse_content_range_total,
)
from tests.helpers import make_document


class TestInMemoryDocumentRepository:

    @pytest.mark.asyncio
    async def test_only_processable_newest_first(self, sample_rows):
        repository = InMemoryDocumentRepository(sample_rows)

        documents = await repository.fetch_processable()

        assert [d.id for d in documents] == [2, 5, 1]

    @pytest.mark.asyncio
    async def test_counts(self, sample_rows):
        repository = InMemoryDocumentRepository(sample_rows)

        assert await repository.count_all() == 5
        assert await repository.count_processable() == 3

    @pytest.mark.asyncio
    async def test_undated_documents_go_last(self):
        repository = InMemoryDocumentRepository(
            [make_document(1, data_sessao=None), make_document(2), make_document(3)]
        )

        documents = await repository.fetch_processable()

        assert [d.id for d in documents] == [2, 3, 1]

    @pytest.mark.asyncio
    async def test_from_json_file(self, fixtures_dir):
        repository = InMemoryDocumentRepository.from_json_file(fixtures_dir / "acordaos.json")
        assert await repository.count_all() == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentStoreError, match="Cannot load documents file"):
            InMemoryDocumentRepository.from_json_file(tmp_path / "missing.json")

    def test_file_must_hold_array(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps({"id": 1}), encoding="utf-8")

        with pytest.raises(DocumentStoreError, match="JSON array"):
            InMemoryDocumentRepository.from_json_file(path)

    def test_malformed_row(self):
        with pytest.raises(DocumentStoreError, match="Malformed document row"):
            InMemoryDocumentRepository([{"titulo": "sem id nem número"}])


class TestParseContentRangeTotal:

    @pytest.mark.parametrize("header,expected", [("0-24/3573", 3573), ("*/0", 0), ("0-0/1", 1)])
    def test_total(self, header, expected):
        assert parse_content_range_total(header) == expected

    @pytest.mark.parametrize("header", [None, "", "0-24", "0-24/*"])
    def test_unusable_header(self, header):
        with pytest.raises(DocumentStoreError):
            parse_content_range_total(header)


class TestSupabaseDocumentRepository:

    @staticmethod
    def _rows(start: int, count: int) -> list[dict]:
        return [
            make_document(i).model_dump(mode="json")
            for i in range(start, start + count)
        ]

    @pytest.mark.asyncio
    async def test_pages_until_short_page(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            offset = int(request.url.params["offset"])
            count = 2 if offset < 4 else 1
            return httpx.Response(200, json=self._rows(offset + 1, count))

        repository = SupabaseDocumentRepository(
            "https://project.supabase.co/", "service-key", page_size=2,
            transport=httpx.MockTransport(handler),
        )

        documents = await repository.fetch_processable()
        await repository.close()

        assert [d.id for d in documents] == [1, 2, 3, 4, 5]
        assert [r.url.params["offset"] for r in requests] == ["0", "2", "4"]
        first = requests[0]
        assert first.url.path == "/rest/v1/acordaos"
        assert first.url.params["texto_pdf"] == "not.is.null"
        assert first.url.params["sumario"] == "not.is.null"
        assert first.url.params["order"] == "data_sessao.desc"
        assert first.url.params["limit"] == "2"
        assert first.headers["apikey"] == "service-key"
        assert first.headers["authorization"] == "Bearer service-key"

    @pytest.mark.asyncio
    async def test_counts_read_content_range(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            total = "3" if "texto_pdf" in request.url.params else "5"
            return httpx.Response(200, json=[{"id": 1}], headers={"Content-Range": f"0-0/{total}"})

        repository = SupabaseDocumentRepository(
            "https://project.supabase.co", "k", transport=httpx.MockTransport(handler)
        )

        assert await repository.count_all() == 5
        assert await repository.count_processable() == 3
        assert requests[0].headers["prefer"] == "count=exact"
        assert requests[0].url.params["select"] == "id"

    @pytest.mark.asyncio
    async def test_http_error_becomes_store_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "Invalid API key"})

        repository = SupabaseDocumentRepository(
            "https://project.supabase.co", "bad", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(DocumentStoreError) as exc_info:
            await repository.fetch_processable()
        assert exc_info.value.details["status_code"] == 401

    @pytest.mark.asyncio
    async def test_network_error_becomes_store_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        repository = SupabaseDocumentRepository(
            "https://project.supabase.co", "k", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(DocumentStoreError, match="unreachable"):
            await repository.count_all()
