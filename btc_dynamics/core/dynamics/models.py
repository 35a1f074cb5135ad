"""Pydantic models for dynamics runs."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from btc_dynamics.core.analytics.models import FilterMode, MetricAnomaly, MetricSeries, WindowSummary


class FetchFailure(BaseModel):
    """A raw series that could not be fetched and the metrics it excluded."""

    series_key: str
    message: str
    excluded_metrics: list[str] = Field(default_factory=list)


class DynamicsRequest(BaseModel):
    """Request payload for analysing caller-supplied metric series."""

    metrics: list[MetricSeries]
    filter_mode: FilterMode = FilterMode.ALL
    include_time_series: bool = False


class DynamicsReport(BaseModel):
    """Ranked anomalies of one analysis run."""

    generated_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    filter_mode: FilterMode = FilterMode.ALL
    analyzed_count: int = 0
    anomalies: list[MetricAnomaly] = Field(default_factory=list)
    window_summary: dict[str, WindowSummary] = Field(default_factory=dict)
    failures: list[FetchFailure] = Field(default_factory=list)


__all__ = ["FetchFailure", "DynamicsRequest", "DynamicsReport"]
