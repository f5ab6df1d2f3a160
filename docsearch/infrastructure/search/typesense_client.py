"""Typesense client (collections API, API key header)."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from docsearch.application.dtos.document import DocumentResult
from docsearch.application.dtos.search import EngineHit
from docsearch.domain.enums import SearchEngine
from docsearch.infrastructure.search.base import HttpSearchClient
from docsearch.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-TYPESENSE-API-KEY"
QUERY_BY = "title,content,author"
# Typesense rejects per_page above 250
MAX_PER_PAGE = 250


def typesense_payload(document: DocumentResult) -> dict[str, Any]:
    """Typesense body: timestamps as int64 epoch seconds, empty strings for nulls."""
    return {
        "id": document.id,
        "title": document.title,
        "content": document.content or "",
        "author": document.author or "",
        "category": document.category or "",
        "status": document.status or "",
        "created_at": int(document.created_at.timestamp()),
        "updated_at": int(document.updated_at.timestamp()),
    }


class TypesenseClient(HttpSearchClient):
    """One Typesense collection."""

    engine = SearchEngine.TYPESENSE

    def __init__(
        self,
        base_url: str,
        collection: str,
        api_key: str,
        *,
        timeout_seconds: float = 2.0,
        rows: int = 10,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(
            base_url,
            timeout_seconds=timeout_seconds,
            rows=rows,
            http=http,
            headers={API_KEY_HEADER: api_key},
        )
        self.collection = collection
        self._api_key = api_key

    @property
    def _documents_path(self) -> str:
        return f"/collections/{self.collection}/documents"

    def _auth_headers(self) -> dict[str, str]:
        # injected clients (tests) do not carry the default header
        return {API_KEY_HEADER: self._api_key}

    @traced("search.typesense")
    async def search(self, term: str, limit: int | None = None) -> list[EngineHit]:
        """Hits for term; budgets above MAX_PER_PAGE are fetched page by page."""
        q = term.strip() if term and term.strip() else "*"
        wanted = self._rows(limit)
        per_page = min(wanted, MAX_PER_PAGE)
        hits: list[dict[str, Any]] = []
        page = 1
        while len(hits) < wanted:
            response = await self._request(
                "GET",
                f"{self._documents_path}/search",
                params={"q": q, "query_by": QUERY_BY, "per_page": per_page, "page": page},
                headers=self._auth_headers(),
            )
            batch = response.json().get("hits", [])
            hits.extend(batch)
            if len(batch) < per_page:
                break
            page += 1
        hits = hits[:wanted]
        logger.debug("Typesense returned %d hits for %r", len(hits), q)
        return [
            EngineHit(
                id=str(hit.get("document", {}).get("id")),
                title=hit.get("document", {}).get("title"),
                content=hit.get("document", {}).get("content") or None,
                author=hit.get("document", {}).get("author") or None,
                score=float(hit.get("text_match") or 0.0),
                engine=self.engine.value,
            )
            for hit in hits
        ]

    async def _index(self, document: DocumentResult) -> None:
        await self._request(
            "POST",
            self._documents_path,
            params={"action": "upsert"},
            json=typesense_payload(document),
            headers=self._auth_headers(),
        )

    async def _index_many(self, documents: list[DocumentResult]) -> int:
        body = "\n".join(json.dumps(typesense_payload(d)) for d in documents)
        response = await self._request(
            "POST",
            f"{self._documents_path}/import",
            params={"action": "upsert"},
            content=body,
            headers={**self._auth_headers(), "Content-Type": "text/plain"},
        )
        indexed = 0
        for line in response.text.splitlines():
            if line.strip() and json.loads(line).get("success"):
                indexed += 1
        return indexed

    async def _delete(self, document_id: str) -> bool:
        response = await self._request(
            "DELETE",
            f"{self._documents_path}/{document_id}",
            headers=self._auth_headers(),
            allow_not_found=True,
        )
        return response.status_code != 404

    async def _ping(self) -> bool:
        response = await self._request("GET", "/health")
        return bool(response.json().get("ok"))
