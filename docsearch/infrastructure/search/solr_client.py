"""Apache Solr client (JSON request handlers on /solr/{core})."""

from __future__ import annotations

import logging

import httpx

from docsearch.application.dtos.document import DocumentResult
from docsearch.application.dtos.search import EngineHit
from docsearch.domain.enums import SearchEngine
from docsearch.infrastructure.search.base import (
    HttpSearchClient,
    document_payload,
    first_value,
)
from docsearch.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

MATCH_ALL = "*:*"


class SolrClient(HttpSearchClient):
    """Solr core reached through the select/update/ping handlers."""

    engine = SearchEngine.SOLR

    def __init__(
        self,
        base_url: str,
        core: str,
        *,
        timeout_seconds: float = 2.0,
        rows: int = 10,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout_seconds=timeout_seconds, rows=rows, http=http)
        self.core = core

    @property
    def _core_path(self) -> str:
        return f"/solr/{self.core}"

    @traced("search.solr")
    async def search(self, term: str, limit: int | None = None) -> list[EngineHit]:
        """Lucene query; blank term matches all documents."""
        q = term.strip() if term and term.strip() else MATCH_ALL
        response = await self._request(
            "GET",
            f"{self._core_path}/select",
            params={"q": q, "rows": self._rows(limit), "fl": "*,score", "wt": "json"},
        )
        docs = response.json().get("response", {}).get("docs", [])
        logger.debug("Solr returned %d hits for %r", len(docs), q)
        return [
            EngineHit(
                id=str(first_value(doc.get("id"))),
                title=first_value(doc.get("title")),
                content=first_value(doc.get("content")),
                author=first_value(doc.get("author")),
                score=float(doc.get("score") or 0.0),
                engine=self.engine.value,
            )
            for doc in docs
        ]

    async def _index(self, document: DocumentResult) -> None:
        await self._request(
            "POST",
            f"{self._core_path}/update",
            params={"commit": "true"},
            json=[document_payload(document)],
        )

    async def _index_many(self, documents: list[DocumentResult]) -> int:
        await self._request(
            "POST",
            f"{self._core_path}/update",
            params={"commit": "true"},
            json=[document_payload(d) for d in documents],
        )
        return len(documents)

    async def _delete(self, document_id: str) -> bool:
        await self._request(
            "POST",
            f"{self._core_path}/update",
            params={"commit": "true"},
            json={"delete": {"id": document_id}},
        )
        return True

    async def _ping(self) -> bool:
        response = await self._request("GET", f"{self._core_path}/admin/ping", params={"wt": "json"})
        return response.json().get("status") == "OK"
