"""Shared httpx plumbing for search engine clients.

Every request is bounded twice: by the AsyncClient timeout and by
asyncio.wait_for with the engine's configured budget. Transport errors,
timeouts and non-2xx responses surface as BackendUnavailableError.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx

from docsearch.application.dtos.document import DocumentResult
from docsearch.application.dtos.search import EngineHit
from docsearch.domain.enums import SearchEngine
from docsearch.domain.exceptions import BackendUnavailableError

logger = logging.getLogger(__name__)


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def document_payload(document: DocumentResult) -> dict[str, Any]:
    """Engine-neutral JSON body for one document."""
    return {
        "id": document.id,
        "title": document.title,
        "content": document.content,
        "author": document.author,
        "category": document.category,
        "status": document.status,
        "created_at": _iso(document.created_at),
        "updated_at": _iso(document.updated_at),
    }


def first_value(value: Any) -> Any:
    """Unwrap multi-valued fields (Solr returns lists for untyped text fields)."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


class HttpSearchClient(ABC):
    """Base class for search engines reached over HTTP.

    Subclasses set ``engine`` and implement search/index/delete/ping on top
    of _request(). ``rows`` is the hit count when search() gets no limit.
    The AsyncClient is owned by the client unless one is passed in.
    """

    engine: SearchEngine

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 2.0,
        rows: int = 10,
        http: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        auth: httpx.Auth | tuple[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.rows = rows
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers=headers,
            auth=auth,
        )

    @property
    def name(self) -> str:
        return self.engine.value

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        content: str | bytes | None = None,
        headers: dict[str, str] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response:
        try:
            response = await asyncio.wait_for(
                self._http.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    content=content,
                    headers=headers,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as e:
            raise BackendUnavailableError(
                self.name, f"timed out after {self.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            raise BackendUnavailableError(self.name, str(e) or type(e).__name__) from e
        if allow_not_found and response.status_code == 404:
            return response
        if response.is_error:
            raise BackendUnavailableError(
                self.name, f"HTTP {response.status_code} for {method} {path}"
            )
        return response

    def _rows(self, limit: int | None) -> int:
        return self.rows if limit is None or limit <= 0 else limit

    @abstractmethod
    async def search(self, term: str, limit: int | None = None) -> list[EngineHit]:
        """Ranked hits for term, at most limit (default rows)."""
        ...

    @abstractmethod
    async def _index(self, document: DocumentResult) -> None:
        ...

    async def _index_many(self, documents: list[DocumentResult]) -> int:
        """Default bulk: one request per document."""
        indexed = 0
        for document in documents:
            if await self.index_document(document):
                indexed += 1
        return indexed

    @abstractmethod
    async def _delete(self, document_id: str) -> bool:
        ...

    @abstractmethod
    async def _ping(self) -> bool:
        ...

    async def index_document(self, document: DocumentResult) -> bool:
        """Upsert one document. Returns False (logged) on failure."""
        try:
            await self._index(document)
        except BackendUnavailableError as e:
            logger.warning("Failed to index document %s in %s: %s", document.id, self.name, e.reason)
            return False
        logger.debug("Indexed document %s in %s", document.id, self.name)
        return True

    async def index_documents(self, documents: list[DocumentResult]) -> int:
        """Bulk upsert. Returns the number of documents the engine accepted."""
        if not documents:
            return 0
        try:
            return await self._index_many(documents)
        except BackendUnavailableError as e:
            logger.warning("Bulk index of %d documents in %s failed: %s", len(documents), self.name, e.reason)
            return 0

    async def delete_document(self, document_id: str) -> bool:
        """Remove one document. Returns False when absent or on failure."""
        try:
            return await self._delete(document_id)
        except BackendUnavailableError as e:
            logger.warning("Failed to delete document %s from %s: %s", document_id, self.name, e.reason)
            return False

    async def is_available(self) -> bool:
        try:
            return await self._ping()
        except BackendUnavailableError as e:
            logger.debug("%s health check failed: %s", self.name, e.reason)
            return False
