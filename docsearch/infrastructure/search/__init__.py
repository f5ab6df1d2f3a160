"""Full-text search engine clients (Solr, OpenSearch, Typesense) over httpx."""

from docsearch.infrastructure.search.base import HttpSearchClient
from docsearch.infrastructure.search.factory import build_search_clients, close_search_clients
from docsearch.infrastructure.search.opensearch_client import OpenSearchClient
from docsearch.infrastructure.search.solr_client import SolrClient
from docsearch.infrastructure.search.typesense_client import TypesenseClient

__all__ = [
    "HttpSearchClient",
    "OpenSearchClient",
    "SolrClient",
    "TypesenseClient",
    "build_search_clients",
    "close_search_clients",
]
