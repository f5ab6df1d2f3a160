"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready when ready."""

    status: str = Field(default="ok", description="Readiness status")


class ReadinessErrorResponse(BaseModel):
    """Response for GET /health/ready when the database is unreachable (503)."""

    status: str = Field(default="not_ready", description="Readiness status")
    message: str = Field(..., description="Reason")


class SearchEnginesHealthResponse(BaseModel):
    """Per-engine availability and an overall status (UP, DEGRADED or DOWN)."""

    status: str
    engines: dict[str, str]


class OperationMetricsResponse(BaseModel):
    count: int
    average_duration_ms: float
    total_duration_ms: float
    slow_count: int


class MetricsResponse(BaseModel):
    """Search metrics keyed by operation name (search, autocomplete, facets, *_error)."""

    operations: dict[str, OperationMetricsResponse]
    hot_queries: list[str] = []
    cache_candidates: list[str] = []
