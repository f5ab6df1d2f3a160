"""Health endpoints: liveness, readiness, engine availability and search metrics."""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from docsearch.api.v1.dependencies import (
    get_metrics,
    get_query_frequency,
    get_search_clients,
)
from docsearch.application.services.query_frequency import QueryFrequencyAnalyzer
from docsearch.application.services.search_metrics import SearchMetricsCollector
from docsearch.domain.enums import HealthStatus, SearchEngine
from docsearch.infrastructure.persistence import database
from docsearch.infrastructure.search.base import HttpSearchClient
from docsearch.schemas.health import (
    HealthResponse,
    MetricsResponse,
    OperationMetricsResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
    SearchEnginesHealthResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers SELECT 1; 503 otherwise."""
    try:
        await database.ping()
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(message=f"Database unavailable: {e}").model_dump(),
        )
    return ReadinessResponse()


def overall_status(engines: dict[str, str]) -> HealthStatus:
    """UP when every engine is up, DOWN when none is, DEGRADED otherwise."""
    up = sum(1 for value in engines.values() if value == HealthStatus.UP.value)
    if engines and up == len(engines):
        return HealthStatus.UP
    if up == 0:
        return HealthStatus.DOWN
    return HealthStatus.DEGRADED


@router.get("/search-engines", response_model=SearchEnginesHealthResponse)
async def search_engines_health(
    clients: Annotated[dict[SearchEngine, HttpSearchClient], Depends(get_search_clients)],
) -> SearchEnginesHealthResponse:
    engines = list(clients)
    available = await asyncio.gather(*(clients[e].is_available() for e in engines))
    statuses = {
        engine.value: (HealthStatus.UP if ok else HealthStatus.DOWN).value
        for engine, ok in zip(engines, available, strict=True)
    }
    return SearchEnginesHealthResponse(status=overall_status(statuses).value, engines=statuses)


@router.get("/metrics", response_model=MetricsResponse)
def search_metrics(
    metrics: Annotated[SearchMetricsCollector, Depends(get_metrics)],
    query_frequency: Annotated[QueryFrequencyAnalyzer, Depends(get_query_frequency)],
) -> MetricsResponse:
    return MetricsResponse(
        operations={
            name: OperationMetricsResponse(
                count=stats.count,
                average_duration_ms=stats.average_duration_ms,
                total_duration_ms=stats.total_duration_ms,
                slow_count=stats.slow_count,
            )
            for name, stats in metrics.snapshot().items()
        },
        hot_queries=[s.query for s in query_frequency.hot_queries()],
        cache_candidates=[s.query for s in query_frequency.cache_candidates()],
    )
