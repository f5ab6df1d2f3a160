"""OpenSearch client (REST: _search, _doc, _bulk, _cluster/health)."""

from __future__ import annotations

import json
import logging

import httpx

from docsearch.application.dtos.document import DocumentResult
from docsearch.application.dtos.search import EngineHit
from docsearch.domain.enums import SearchEngine
from docsearch.infrastructure.search.base import HttpSearchClient, document_payload
from docsearch.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

# title weighted double; fuzzy matching tolerates small typos
SEARCH_FIELDS = ["title^2", "content", "author"]


class OpenSearchClient(HttpSearchClient):
    """Single OpenSearch index, optional basic auth."""

    engine = SearchEngine.OPENSEARCH

    def __init__(
        self,
        base_url: str,
        index: str,
        *,
        username: str | None = None,
        password: str | None = None,
        timeout_seconds: float = 2.0,
        rows: int = 10,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        auth = httpx.BasicAuth(username, password or "") if username else None
        super().__init__(
            base_url, timeout_seconds=timeout_seconds, rows=rows, http=http, auth=auth
        )
        self.index = index

    def build_query(self, term: str, limit: int | None = None) -> dict:
        size = self._rows(limit)
        if not term or not term.strip():
            return {"size": size, "query": {"match_all": {}}}
        return {
            "size": size,
            "query": {
                "multi_match": {
                    "query": term.strip(),
                    "fields": SEARCH_FIELDS,
                    "fuzziness": "AUTO",
                }
            },
        }

    @traced("search.opensearch")
    async def search(self, term: str, limit: int | None = None) -> list[EngineHit]:
        response = await self._request(
            "POST", f"/{self.index}/_search", json=self.build_query(term, limit)
        )
        hits = response.json().get("hits", {}).get("hits", [])
        logger.debug("OpenSearch returned %d hits for %r", len(hits), term)
        results = []
        for hit in hits:
            source = hit.get("_source", {})
            results.append(
                EngineHit(
                    id=str(hit.get("_id") or source.get("id")),
                    title=source.get("title"),
                    content=source.get("content"),
                    author=source.get("author"),
                    score=float(hit.get("_score") or 0.0),
                    engine=self.engine.value,
                )
            )
        return results

    async def _index(self, document: DocumentResult) -> None:
        await self._request(
            "PUT",
            f"/{self.index}/_doc/{document.id}",
            params={"refresh": "true"},
            json=document_payload(document),
        )

    async def _index_many(self, documents: list[DocumentResult]) -> int:
        lines = []
        for document in documents:
            lines.append(json.dumps({"index": {"_index": self.index, "_id": document.id}}))
            lines.append(json.dumps(document_payload(document)))
        response = await self._request(
            "POST",
            "/_bulk",
            params={"refresh": "true"},
            content="\n".join(lines) + "\n",
            headers={"Content-Type": "application/x-ndjson"},
        )
        items = response.json().get("items", [])
        return sum(
            1 for item in items if 200 <= item.get("index", {}).get("status", 500) < 300
        )

    async def _delete(self, document_id: str) -> bool:
        response = await self._request(
            "DELETE",
            f"/{self.index}/_doc/{document_id}",
            params={"refresh": "true"},
            allow_not_found=True,
        )
        return response.status_code != 404

    async def _ping(self) -> bool:
        response = await self._request("GET", "/_cluster/health")
        return response.json().get("status") in ("green", "yellow")
