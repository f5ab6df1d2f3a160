"""Build the engine clients from settings."""

from __future__ import annotations

import logging

from docsearch.core.config import Settings
from docsearch.domain.enums import SearchEngine
from docsearch.infrastructure.search.base import HttpSearchClient
from docsearch.infrastructure.search.opensearch_client import OpenSearchClient
from docsearch.infrastructure.search.solr_client import SolrClient
from docsearch.infrastructure.search.typesense_client import TypesenseClient

logger = logging.getLogger(__name__)


def build_search_clients(settings: Settings) -> dict[SearchEngine, HttpSearchClient]:
    """One client per engine, keyed by engine tag."""
    clients: dict[SearchEngine, HttpSearchClient] = {
        SearchEngine.SOLR: SolrClient(
            settings.solr_url,
            settings.solr_core,
            timeout_seconds=settings.solr_timeout_seconds,
            rows=settings.search_result_rows,
        ),
        SearchEngine.OPENSEARCH: OpenSearchClient(
            settings.opensearch_url,
            settings.opensearch_index,
            username=settings.opensearch_username,
            password=(
                settings.opensearch_password.get_secret_value()
                if settings.opensearch_password
                else None
            ),
            timeout_seconds=settings.opensearch_timeout_seconds,
            rows=settings.search_result_rows,
        ),
        SearchEngine.TYPESENSE: TypesenseClient(
            settings.typesense_url,
            settings.typesense_collection,
            settings.typesense_api_key.get_secret_value(),
            timeout_seconds=settings.typesense_timeout_seconds,
            rows=settings.search_result_rows,
        ),
    }
    logger.info(
        "Search clients configured: solr=%s opensearch=%s typesense=%s",
        settings.solr_url,
        settings.opensearch_url,
        settings.typesense_url,
    )
    return clients


async def close_search_clients(clients: dict[SearchEngine, HttpSearchClient]) -> None:
    for client in clients.values():
        await client.aclose()
