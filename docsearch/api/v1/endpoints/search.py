"""Engine API: single-engine search and side-by-side comparison."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from docsearch.api.v1.dependencies import get_engine_comparator
from docsearch.application.use_cases.engine_comparison import EngineComparator
from docsearch.domain.enums import SearchEngine
from docsearch.schemas.search import EngineComparisonResponse, EngineHitResponse

router = APIRouter()

_ENGINE_PATHS: dict[str, SearchEngine] = {
    "solr": SearchEngine.SOLR,
    "opensearch": SearchEngine.OPENSEARCH,
    "typesense": SearchEngine.TYPESENSE,
}


@router.get("/compare", response_model=EngineComparisonResponse)
async def compare_engines(
    comparator: Annotated[EngineComparator, Depends(get_engine_comparator)],
    q: str = Query(..., min_length=1, max_length=500),
):
    """Run q on Solr, OpenSearch and Typesense concurrently; failed engines return no hits."""
    report = await comparator.compare(q)
    return EngineComparisonResponse(
        query=report.query,
        solr_results=[EngineHitResponse.model_validate(h) for h in report.solr_results],
        opensearch_results=[
            EngineHitResponse.model_validate(h) for h in report.opensearch_results
        ],
        typesense_results=[
            EngineHitResponse.model_validate(h) for h in report.typesense_results
        ],
        solr_time=report.solr_time,
        opensearch_time=report.opensearch_time,
        typesense_time=report.typesense_time,
        fastest_engine=report.fastest_engine,
    )


def _engine_route(engine: SearchEngine):
    async def search_engine(
        comparator: Annotated[EngineComparator, Depends(get_engine_comparator)],
        q: str = Query(..., min_length=1, max_length=500),
    ) -> list[EngineHitResponse]:
        hits = await comparator.search_engine(engine, q)
        return [EngineHitResponse.model_validate(h) for h in hits]

    search_engine.__doc__ = f"Search {engine.value} only; empty list when it is unavailable."
    return search_engine


for _path, _engine in _ENGINE_PATHS.items():
    router.add_api_route(
        f"/{_path}",
        _engine_route(_engine),
        methods=["GET"],
        response_model=list[EngineHitResponse],
        name=f"search_{_path}",
    )
