"""UnifiedSearchOrchestrator unit tests with mocked repositories and fake engines."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from docsearch.application.dtos.document import DocumentResult
from docsearch.application.dtos.search import Facets, SearchQuery, SearchResultPage
from docsearch.application.services.permission_service import PermissionService
from docsearch.application.services.query_frequency import QueryFrequencyAnalyzer
from docsearch.application.services.search_metrics import SearchMetricsCollector
from docsearch.application.use_cases.search import (
    UnifiedSearchOrchestrator,
    field_label,
    order_engines,
)
from docsearch.domain.enums import AutocompleteField, SearchEngine
from docsearch.domain.exceptions import InvalidArgumentError, InvalidFieldError
from tests.fakes import FakeSearchClient, fake_clients, hit

_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _doc(document_id: str, title: str | None = None) -> DocumentResult:
    return DocumentResult(
        id=document_id,
        title=title or f"Title {document_id}",
        content=None,
        author="Ann",
        category="doc",
        status="draft",
        created_at=_NOW,
        updated_at=_NOW,
    )


def _empty_page() -> SearchResultPage:
    return SearchResultPage.build([], 0, 0, 20)


class FakeCache:
    def __init__(self) -> None:
        self.store: dict[str, object] = {}

    def is_available(self) -> bool:
        return True

    async def get(self, key: str):
        return self.store.get(key)

    async def set(self, key: str, value, ttl: int | None = None) -> None:
        self.store[key] = value

    async def delete_pattern(self, pattern: str) -> None:
        self.store.clear()


@pytest.fixture
def search_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.search = AsyncMock(return_value=_empty_page())
    repo.search_ids = AsyncMock(return_value=[])
    repo.filter_ids = AsyncMock(return_value=set())
    repo.facets = AsyncMock(return_value=Facets())
    repo.autocomplete = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def document_repo() -> AsyncMock:
    repo = AsyncMock()

    async def get_by_ids(ids: list[str]) -> list[DocumentResult]:
        # store order differs from the requested order on purpose
        return [_doc(i) for i in sorted(ids)]

    repo.get_by_ids = AsyncMock(side_effect=get_by_ids)
    return repo


@pytest.fixture
def metrics() -> SearchMetricsCollector:
    return SearchMetricsCollector()


def _orchestrator(
    search_repo,
    document_repo,
    metrics,
    clients=None,
    permission_filter=None,
    **kwargs,
) -> UnifiedSearchOrchestrator:
    return UnifiedSearchOrchestrator(
        search_repo,
        document_repo,
        order_engines(clients if clients is not None else fake_clients()),
        permission_filter or PermissionService(),
        metrics,
        **kwargs,
    )


class TestEngineOrder:
    def test_priority_is_typesense_opensearch_solr(self) -> None:
        ordered = order_engines(fake_clients())
        assert [engine for engine, _ in ordered] == [
            SearchEngine.TYPESENSE,
            SearchEngine.OPENSEARCH,
            SearchEngine.SOLR,
        ]

    def test_unconfigured_engines_skipped(self) -> None:
        clients = fake_clients()
        del clients[SearchEngine.OPENSEARCH]
        assert [e for e, _ in order_engines(clients)] == [
            SearchEngine.TYPESENSE,
            SearchEngine.SOLR,
        ]


class TestStrategySelection:
    async def test_filters_without_text_use_relational_only(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        await orchestrator.search_documents(SearchQuery(category="doc"))

        search_repo.search.assert_awaited_once()
        assert all(fake.searched == [] for fake in clients.values())

    async def test_empty_query_uses_relational_unfiltered(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        await orchestrator.search_documents(SearchQuery(query="   "))

        search_repo.search.assert_awaited_once()
        assert all(fake.searched == [] for fake in clients.values())

    async def test_text_uses_first_engine_in_priority(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit("b", SearchEngine.TYPESENSE),
            hit("a", SearchEngine.TYPESENSE),
        ]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java"))

        assert [d.id for d in page.content] == ["b", "a"]
        assert page.total_elements == 2
        assert clients[SearchEngine.OPENSEARCH].searched == []
        assert clients[SearchEngine.SOLR].searched == []
        search_repo.search.assert_not_awaited()

    async def test_falls_through_engines_in_order(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].fail = True
        clients[SearchEngine.OPENSEARCH].fail = True
        clients[SearchEngine.SOLR].hits = [hit("s1", SearchEngine.SOLR)]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java"))

        assert [d.id for d in page.content] == ["s1"]
        for fake in clients.values():
            assert fake.searched == ["java"]

    async def test_timed_out_engine_treated_as_failure(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE] = FakeSearchClient(
            SearchEngine.TYPESENSE,
            [hit("slow", SearchEngine.TYPESENSE)],
            delay=1.0,
            timeout_seconds=0.05,
        )
        clients[SearchEngine.OPENSEARCH].hits = [hit("fast", SearchEngine.OPENSEARCH)]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java"))

        assert [d.id for d in page.content] == ["fast"]

    async def test_all_engines_down_falls_back_to_relational(
        self, search_repo, document_repo, metrics
    ) -> None:
        expected = SearchResultPage.build([_doc("r1")], 1, 0, 20)
        search_repo.search = AsyncMock(return_value=expected)
        orchestrator = _orchestrator(
            search_repo, document_repo, metrics, fake_clients(fail=True)
        )

        page = await orchestrator.search_documents(SearchQuery(query="java"))

        assert page is expected
        assert metrics.get_count("search") == 1
        assert metrics.get_count("search_error") == 0

    async def test_unexpected_error_while_resolving_hits_falls_back(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [hit("a", SearchEngine.TYPESENSE)]
        document_repo.get_by_ids = AsyncMock(side_effect=RuntimeError("boom"))
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        await orchestrator.search_documents(SearchQuery(query="java"))

        search_repo.search.assert_awaited_once()

    async def test_engine_hits_narrowed_by_structured_filters(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit("a", SearchEngine.TYPESENSE),
            hit("b", SearchEngine.TYPESENSE),
            hit("c", SearchEngine.TYPESENSE),
        ]
        search_repo.filter_ids = AsyncMock(return_value={"a", "c"})
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java", category="doc"))

        assert [d.id for d in page.content] == ["a", "c"]
        assert page.total_elements == 2

    async def test_duplicate_hits_collapsed(self, search_repo, document_repo, metrics) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit("a", SearchEngine.TYPESENSE),
            hit("a", SearchEngine.TYPESENSE),
        ]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java"))

        assert page.total_elements == 1

    async def test_engine_hits_paged(self, search_repo, document_repo, metrics) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit(str(i), SearchEngine.TYPESENSE) for i in range(5)
        ]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java", page=1, size=2))

        assert [d.id for d in page.content] == ["2", "3"]
        assert page.total_pages == 3
        assert page.has_next is True
        assert page.has_previous is True


class TestPermissionFiltering:
    async def test_engine_path_drops_denied_and_recounts(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit(i, SearchEngine.TYPESENSE) for i in ("a", "b", "c")
        ]
        permissions = PermissionService({"bob": ["b"]})
        orchestrator = _orchestrator(
            search_repo, document_repo, metrics, clients, permission_filter=permissions
        )

        page = await orchestrator.search_documents(SearchQuery(query="java"), principal="bob")

        assert [d.id for d in page.content] == ["a", "c"]
        assert page.total_elements == 2

    async def test_relational_path_filters_full_id_set(
        self, search_repo, document_repo, metrics
    ) -> None:
        search_repo.search_ids = AsyncMock(return_value=["a", "b", "c", "d"])
        permissions = PermissionService({"bob": ["a", "c"]})
        orchestrator = _orchestrator(
            search_repo, document_repo, metrics, permission_filter=permissions
        )

        page = await orchestrator.search_documents(
            SearchQuery(category="doc", size=1), principal="bob"
        )

        assert [d.id for d in page.content] == ["b"]
        assert page.total_elements == 2
        assert page.total_pages == 2
        search_repo.search.assert_not_awaited()

    async def test_no_principal_skips_filtering(self, search_repo, document_repo, metrics) -> None:
        permissions = AsyncMock()
        orchestrator = _orchestrator(
            search_repo, document_repo, metrics, permission_filter=permissions
        )

        await orchestrator.search_documents(SearchQuery(category="doc"))

        permissions.filter_allowed.assert_not_awaited()

    async def test_filter_called_once_per_search(self, search_repo, document_repo, metrics) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [hit("a", SearchEngine.TYPESENSE)]
        permissions = AsyncMock()
        permissions.filter_allowed = AsyncMock(return_value=["a"])
        orchestrator = _orchestrator(
            search_repo, document_repo, metrics, clients, permission_filter=permissions
        )

        await orchestrator.search_documents(SearchQuery(query="java"), principal="ann")

        permissions.filter_allowed.assert_awaited_once_with(["a"], "ann")


class TestMetrics:
    async def test_search_recorded_once(self, search_repo, document_repo, metrics) -> None:
        orchestrator = _orchestrator(search_repo, document_repo, metrics)
        await orchestrator.search_documents(SearchQuery())
        assert metrics.get_count("search") == 1

    async def test_relational_error_recorded_and_raised(
        self, search_repo, document_repo, metrics
    ) -> None:
        search_repo.search = AsyncMock(side_effect=RuntimeError("db down"))
        orchestrator = _orchestrator(search_repo, document_repo, metrics)

        with pytest.raises(RuntimeError):
            await orchestrator.search_documents(SearchQuery(category="doc"))

        assert metrics.get_count("search_error") == 1
        assert metrics.get_count("search") == 0

    async def test_facets_recorded(self, search_repo, document_repo, metrics) -> None:
        orchestrator = _orchestrator(search_repo, document_repo, metrics)
        await orchestrator.get_facets(SearchQuery())
        assert metrics.get_count("facets") == 1

    async def test_query_frequency_records_text(self, search_repo, document_repo, metrics) -> None:
        analyzer = QueryFrequencyAnalyzer()
        orchestrator = _orchestrator(
            search_repo, document_repo, metrics, fake_clients(), query_frequency=analyzer
        )

        await orchestrator.search_documents(SearchQuery(query="java  tips"))

        stats = analyzer.get_stats("java tips")
        assert stats is not None
        assert stats.total_count == 1


class TestAutocomplete:
    async def test_all_fields_plan_and_order(self, search_repo, document_repo, metrics) -> None:
        async def autocomplete(field, prefix, limit):
            return {
                AutocompleteField.TITLE: ["Java Guide", "java Tips"],
                AutocompleteField.AUTHOR: ["Jane"],
                AutocompleteField.CATEGORY: ["javadoc"],
            }[field]

        search_repo.autocomplete = AsyncMock(side_effect=autocomplete)
        orchestrator = _orchestrator(search_repo, document_repo, metrics)

        results = await orchestrator.autocomplete("ja", limit=3)

        assert [(r.text, r.type) for r in results] == [
            ("java Tips", "title"),
            ("Java Guide", "title"),
            ("Jane", "author"),
        ]
        limits = {c.args[0]: c.args[2] for c in search_repo.autocomplete.await_args_list}
        assert limits == {
            AutocompleteField.TITLE: 6,
            AutocompleteField.AUTHOR: 3,
            AutocompleteField.CATEGORY: 3,
        }
        assert metrics.get_count("autocomplete") == 1

    async def test_single_field(self, search_repo, document_repo, metrics) -> None:
        search_repo.autocomplete = AsyncMock(return_value=["Ann"])
        orchestrator = _orchestrator(search_repo, document_repo, metrics)

        results = await orchestrator.autocomplete("an", field="Author")

        assert [(r.text, r.type) for r in results] == [("Ann", "author")]
        search_repo.autocomplete.assert_awaited_once_with(AutocompleteField.AUTHOR, "an", 10)

    async def test_unknown_field_raises(self, search_repo, document_repo, metrics) -> None:
        orchestrator = _orchestrator(search_repo, document_repo, metrics)

        with pytest.raises(InvalidFieldError):
            await orchestrator.autocomplete("ja", field="content")

        assert metrics.get_count("autocomplete_error") == 1

    async def test_short_prefix_raises(self, search_repo, document_repo, metrics) -> None:
        orchestrator = _orchestrator(search_repo, document_repo, metrics)

        with pytest.raises(InvalidArgumentError):
            await orchestrator.autocomplete(" j ", field="title")

        search_repo.autocomplete.assert_not_awaited()
        assert metrics.get_count("autocomplete_error") == 1

    async def test_limit_defaulted_and_capped(self, search_repo, document_repo, metrics) -> None:
        orchestrator = _orchestrator(search_repo, document_repo, metrics)

        await orchestrator.autocomplete("ja", field="title", limit=0)
        await orchestrator.autocomplete("ja", field="title", limit=500)

        limits = [c.args[2] for c in search_repo.autocomplete.await_args_list]
        assert limits == [10, 50]

    async def test_cached_results_reused(self, search_repo, document_repo, metrics) -> None:
        search_repo.autocomplete = AsyncMock(return_value=["Java Guide"])
        cache = FakeCache()
        orchestrator = _orchestrator(search_repo, document_repo, metrics, cache=cache)

        first = await orchestrator.autocomplete("Ja", field="title")
        second = await orchestrator.autocomplete("ja", field="title")

        assert first == second
        search_repo.autocomplete.assert_awaited_once()
        assert len(cache.store) == 1


def test_field_label() -> None:
    assert field_label(None) == "ALL"
    assert field_label(" all ") == "ALL"
    assert field_label("Title") == "title"


class TestEngineHitBudget:
    async def test_first_request_sized_to_requested_page(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [hit("t1", SearchEngine.TYPESENSE)]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        await orchestrator.search_documents(SearchQuery(query="java", page=2, size=15))

        assert clients[SearchEngine.TYPESENSE].limits == [45]

    async def test_full_batches_widen_until_complete(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit(f"t{i:02d}", SearchEngine.TYPESENSE) for i in range(30)
        ]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java", page=2, size=10))

        assert clients[SearchEngine.TYPESENSE].limits == [30, 60]
        assert [d.id for d in page.content] == [f"t{i}" for i in range(20, 30)]
        assert page.total_elements == 30
        assert page.total_pages == 3
        assert page.has_next is False

    async def test_pages_past_first_batch_are_filled(
        self, search_repo, document_repo, metrics
    ) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit(f"t{i:02d}", SearchEngine.TYPESENSE) for i in range(25)
        ]
        orchestrator = _orchestrator(search_repo, document_repo, metrics, clients)

        page = await orchestrator.search_documents(SearchQuery(query="java", page=1, size=20))

        assert len(page.content) == 5
        assert page.total_elements == 25
        assert page.total_pages == 2
        assert page.has_previous is True

    async def test_ceiling_bounds_the_walk(self, search_repo, document_repo, metrics) -> None:
        clients = fake_clients()
        clients[SearchEngine.TYPESENSE].hits = [
            hit(f"t{i:03d}", SearchEngine.TYPESENSE) for i in range(200)
        ]
        orchestrator = _orchestrator(
            search_repo, document_repo, metrics, clients, engine_max_hits=50
        )

        page = await orchestrator.search_documents(SearchQuery(query="java", size=20))

        assert clients[SearchEngine.TYPESENSE].limits == [20, 40, 50]
        assert page.total_elements == 50
