"""Benchmark route comparing units against their community."""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_reading_store
from app.models.enums import UsageMetric
from app.schemas.consumption import BenchmarkResult
from app.services.benchmark import benchmark_community
from app.services.reading_store import SqlReadingStore

router = APIRouter(prefix="/benchmark", tags=["benchmark"])


@router.get("/{community_id}", response_model=BenchmarkResult)
def get_community_benchmark(
    community_id: int,
    metric: UsageMetric = Query(UsageMetric.WATER, description="Metric to compare"),
    store: SqlReadingStore = Depends(get_reading_store),
):
    """Classify each unit's 30-day average against the community average."""
    return benchmark_community(store, community_id, metric=metric)
