"""EngineComparator: concurrent fan-out with per-engine failure isolation."""

import time

from docsearch.application.dtos.search import EngineComparisonReport
from docsearch.application.use_cases.engine_comparison import EngineComparator
from docsearch.domain.enums import SearchEngine
from tests.fakes import FakeSearchClient, fake_clients, hit


async def test_all_engines_failing_returns_empty_report() -> None:
    """Every client raises: empty lists, all durations present, nothing raised."""
    comparator = EngineComparator(fake_clients(fail=True))

    report = await comparator.compare("x")

    assert report.query == "x"
    assert report.solr_results == []
    assert report.opensearch_results == []
    assert report.typesense_results == []
    assert report.solr_time >= 0
    assert report.opensearch_time >= 0
    assert report.typesense_time >= 0


async def test_one_failing_engine_does_not_affect_others() -> None:
    clients = {
        SearchEngine.SOLR: FakeSearchClient(SearchEngine.SOLR, [hit("a", SearchEngine.SOLR)]),
        SearchEngine.OPENSEARCH: FakeSearchClient(SearchEngine.OPENSEARCH, fail=True),
        SearchEngine.TYPESENSE: FakeSearchClient(
            SearchEngine.TYPESENSE, [hit("b", SearchEngine.TYPESENSE)]
        ),
    }

    report = await EngineComparator(clients).compare("java")

    assert [h.id for h in report.solr_results] == ["a"]
    assert report.opensearch_results == []
    assert [h.id for h in report.typesense_results] == ["b"]


async def test_timed_out_engine_yields_empty_list() -> None:
    clients = fake_clients()
    clients[SearchEngine.OPENSEARCH] = FakeSearchClient(
        SearchEngine.OPENSEARCH,
        [hit("late", SearchEngine.OPENSEARCH)],
        delay=1.0,
        timeout_seconds=0.05,
    )

    report = await EngineComparator(clients).compare("java")

    assert report.opensearch_results == []
    assert report.opensearch_time >= 0


async def test_engines_run_concurrently() -> None:
    """Three 0.2s engines finish in well under 0.6s when gathered."""
    clients = fake_clients(delay=0.2)

    start = time.perf_counter()
    report = await EngineComparator(clients).compare("java")

    assert time.perf_counter() - start < 0.5

    assert report.solr_time >= 150
    assert report.opensearch_time >= 150
    assert report.typesense_time >= 150
    for fake in clients.values():
        assert fake.searched == ["java"]


async def test_missing_engine_reports_empty_with_zero_time() -> None:
    clients = fake_clients()
    del clients[SearchEngine.SOLR]

    report = await EngineComparator(clients).compare("java")

    assert report.solr_results == []
    assert report.solr_time == 0


async def test_search_engine_swallows_errors() -> None:
    comparator = EngineComparator(fake_clients(fail=True))
    assert await comparator.search_engine(SearchEngine.TYPESENSE, "java") == []


def test_fastest_engine_picks_minimum_time() -> None:
    report = EngineComparisonReport(
        query="q",
        solr_results=[],
        opensearch_results=[],
        typesense_results=[],
        solr_time=40,
        opensearch_time=12,
        typesense_time=30,
    )
    assert report.fastest_engine == "OpenSearch"
