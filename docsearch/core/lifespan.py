"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. No business logic here, only
wiring of infrastructure (database tables, search engine clients, metrics,
cache, telemetry) onto app.state.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from docsearch.application.services.permission_service import PermissionService
from docsearch.application.services.query_frequency import QueryFrequencyAnalyzer
from docsearch.application.services.search_metrics import SearchMetricsCollector
from docsearch.core.config import get_settings
from docsearch.infrastructure.persistence import database
from docsearch.infrastructure.search import build_search_clients, close_search_clients

logger = logging.getLogger(__name__)

QUERY_ANALYSIS_INTERVAL_SECONDS = 60


async def run_query_frequency_analysis(
    analyzer: QueryFrequencyAnalyzer, interval: float = QUERY_ANALYSIS_INTERVAL_SECONDS
) -> None:
    """Log hot/slow queries and reset the per-minute window, forever."""
    while True:
        await asyncio.sleep(interval)
        try:
            analyzer.analyze()
        except Exception:
            logger.exception("Query frequency analysis failed")


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: database tables (if database_auto_create), search engine
    clients, metrics and query frequency, permission filter, Redis cache (if
    enabled), telemetry (if enabled). Shutdown releases them in reverse.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.database_auto_create:
        await database.create_all()

    app.state.search_clients = build_search_clients(settings)
    app.state.metrics = SearchMetricsCollector(
        slow_threshold_ms=settings.slow_query_threshold_ms
    )
    app.state.query_frequency = QueryFrequencyAnalyzer(
        slow_threshold_ms=settings.slow_query_threshold_ms
    )
    app.state.permission_filter = PermissionService()
    analysis_task = asyncio.create_task(
        run_query_frequency_analysis(app.state.query_frequency)
    )

    if settings.redis_enabled:
        from docsearch.infrastructure.cache.redis_cache import CacheService

        cache = CacheService(settings=settings)
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    if settings.telemetry_enabled:
        from docsearch.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        if database.engine is not None:
            telemetry.instrument_sqlalchemy(database.engine)
        if settings.redis_enabled:
            telemetry.instrument_redis()
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    analysis_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await analysis_task

    await close_search_clients(app.state.search_clients)
    logger.info("Search engine clients closed")

    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    from docsearch.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
        set_telemetry(None)

    await database.dispose_engine()
