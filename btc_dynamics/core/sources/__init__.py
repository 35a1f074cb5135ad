"""Raw data sources and the metric catalog."""

from btc_dynamics.core.sources.brk_client import BrkClient, MetricSource
from btc_dynamics.core.sources.catalog import (
    DYNAMICS_METRICS,
    EXPLORER_SOURCES,
    MetricDefinition,
    build_metric_series,
    daily_dates,
    required_series,
)

__all__ = [
    "BrkClient",
    "MetricSource",
    "DYNAMICS_METRICS",
    "EXPLORER_SOURCES",
    "MetricDefinition",
    "build_metric_series",
    "daily_dates",
    "required_series",
]
