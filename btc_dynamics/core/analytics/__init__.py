"""Analytics core modules for the dynamics backend."""

from btc_dynamics.core.analytics.analyzer import MultiWindowAnalyzer, analyze_metric
from btc_dynamics.core.analytics.config import AnalysisConfig, SeverityThresholds, WindowSpec
from btc_dynamics.core.analytics.models import (
    FilterMode,
    MetricAnomaly,
    MetricSeries,
    MetricUnit,
    RarityResult,
    Severity,
    WindowResult,
    WindowSummary,
    ZScoreSeries,
)
from btc_dynamics.core.analytics.ranking import filter_anomalies, rank_anomalies, summarize_windows
from btc_dynamics.core.analytics.rarity import classify_severity
from btc_dynamics.core.analytics.zscore import compute_zscore_series

__all__ = [
    "MultiWindowAnalyzer",
    "analyze_metric",
    "AnalysisConfig",
    "SeverityThresholds",
    "WindowSpec",
    "FilterMode",
    "MetricAnomaly",
    "MetricSeries",
    "MetricUnit",
    "RarityResult",
    "Severity",
    "WindowResult",
    "WindowSummary",
    "ZScoreSeries",
    "filter_anomalies",
    "rank_anomalies",
    "summarize_windows",
    "classify_severity",
    "compute_zscore_series",
]
