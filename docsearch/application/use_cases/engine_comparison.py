"""Side-by-side engine comparison: same query, all engines, concurrently."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING

from docsearch.application.dtos.search import EngineComparisonReport, EngineHit
from docsearch.domain.enums import SearchEngine
from docsearch.shared.telemetry.tracing import traced

if TYPE_CHECKING:
    from docsearch.application.interfaces.services import ISearchBackendClient

logger = logging.getLogger(__name__)


class EngineComparator:
    """Runs one query against Solr, OpenSearch and Typesense at the same time.

    Each engine is timed around its own call and bounded by its own timeout.
    A failing, timed-out or unconfigured engine contributes an empty hit list
    and its measured time; compare() never raises for engine errors.
    """

    def __init__(self, clients: Mapping[SearchEngine, ISearchBackendClient]) -> None:
        self.clients = dict(clients)

    async def _timed_search(
        self, engine: SearchEngine, query: str
    ) -> tuple[list[EngineHit], int]:
        client = self.clients.get(engine)
        start = time.perf_counter()
        if client is None:
            return [], 0
        try:
            hits = await asyncio.wait_for(client.search(query), client.timeout_seconds)
        except TimeoutError:
            logger.warning("%s timed out after %ss during comparison", engine.value, client.timeout_seconds)
            hits = []
        except Exception as e:
            logger.warning("%s failed during comparison: %s", engine.value, e)
            hits = []
        elapsed = int((time.perf_counter() - start) * 1000)
        return hits, elapsed

    @traced("search.compare")
    async def compare(self, query: str) -> EngineComparisonReport:
        (solr, solr_ms), (opensearch, opensearch_ms), (typesense, typesense_ms) = (
            await asyncio.gather(
                self._timed_search(SearchEngine.SOLR, query),
                self._timed_search(SearchEngine.OPENSEARCH, query),
                self._timed_search(SearchEngine.TYPESENSE, query),
            )
        )
        report = EngineComparisonReport(
            query=query,
            solr_results=solr,
            opensearch_results=opensearch,
            typesense_results=typesense,
            solr_time=solr_ms,
            opensearch_time=opensearch_ms,
            typesense_time=typesense_ms,
        )
        logger.info(
            "Engine comparison for %r: Solr=%dms OpenSearch=%dms TypeSense=%dms",
            query,
            solr_ms,
            opensearch_ms,
            typesense_ms,
        )
        return report

    async def search_engine(self, engine: SearchEngine, query: str) -> list[EngineHit]:
        """Single-engine search; errors and timeouts yield an empty list."""
        hits, _ = await self._timed_search(engine, query)
        return hits
