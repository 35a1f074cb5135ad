"""Multi-window Z-score analysis of a single metric."""

from __future__ import annotations

import logging
import math
from typing import Dict, Optional

from btc_dynamics.core.analytics.config import AnalysisConfig, WindowSpec
from btc_dynamics.core.analytics.describe import describe_window
from btc_dynamics.core.analytics.models import (
    MetricAnomaly,
    MetricSeries,
    Severity,
    WindowResult,
    ZScoreSeries,
    max_severity,
)
from btc_dynamics.core.analytics.rarity import classify_severity, zscore_band
from btc_dynamics.core.analytics.zscore import compute_zscore_series

logger = logging.getLogger(__name__)


class MultiWindowAnalyzer:
    """Compute Z-scores and rarity across every configured window of a metric."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or AnalysisConfig()

    def compute_window_series(self, metric: MetricSeries, spec: WindowSpec) -> ZScoreSeries:
        """Z-score series of ``metric`` for one window.

        Fixed windows trail over the full history; the expanding window runs
        over the baseline slice only.
        """

        if spec.window_size is None:
            dates = metric.baseline_dates or None
            return compute_zscore_series(metric.baseline_values, None, dates)
        return compute_zscore_series(metric.values, spec.window_size, metric.dates or None)

    def analyze_metric(
        self,
        metric: MetricSeries,
        metric_id: Optional[str] = None,
        include_time_series: bool = True,
    ) -> Optional[MetricAnomaly]:
        """Analyze one metric and return its anomaly record.

        Args:
            metric: Metric history plus its baseline slice.
            metric_id: Identifier for the record; defaults to the metric name.
            include_time_series: Attach per-window Z-score series to the record.

        Returns:
            MetricAnomaly when at least one window is non-normal, otherwise None.
            Metrics with fewer than ``config.min_history`` observations are
            skipped and also return None, as are metrics whose latest value is
            missing (NaN or infinite).
        """

        cfg = self.config
        if len(metric.values) < cfg.min_history:
            logger.debug("Metric skipped, insufficient history | name=%s points=%d", metric.name, len(metric.values))
            return None

        current_value = float(metric.values[-1])
        if not math.isfinite(current_value):
            logger.debug("Metric skipped, latest value missing | name=%s", metric.name)
            return None

        windows: Dict[str, WindowResult] = {}
        series_by_label: Dict[str, ZScoreSeries] = {}

        for spec in cfg.windows:
            series = self.compute_window_series(metric, spec)
            rarity = classify_severity(series.z_scores, cfg.thresholds, cfg.min_zscore_points)
            z_score = series.latest if series.latest is not None else 0.0
            windows[spec.label] = WindowResult(
                label=spec.label,
                window_size=spec.window_size,
                value=current_value,
                z_score=z_score,
                band=zscore_band(z_score),
                severity=rarity.severity,
                time_in_band_percent=rarity.time_in_band_percent,
            )
            series_by_label[spec.label] = series

        severities = [result.severity for result in windows.values()]
        top = max_severity(severities)
        if top is Severity.NORMAL:
            logger.debug("Metric within normal range | name=%s", metric.name)
            return None

        in_all = all(s.rank >= Severity.MODERATE.rank for s in severities)
        primary = windows[cfg.primary_window]
        anomaly = MetricAnomaly(
            id=metric_id or metric.name,
            name=metric.name,
            unit=metric.unit,
            current_value=current_value,
            windows=windows,
            time_series=series_by_label if include_time_series else {},
            description=describe_window(metric.name, metric.unit, current_value, primary),
            max_severity=top,
            is_anomaly_in_all_windows=in_all,
        )
        logger.info(
            "Metric analyzed | name=%s severity=%s all_windows=%s",
            metric.name,
            top.value,
            in_all,
        )
        return anomaly


def analyze_metric(
    metric: MetricSeries,
    config: Optional[AnalysisConfig] = None,
    metric_id: Optional[str] = None,
    include_time_series: bool = True,
) -> Optional[MetricAnomaly]:
    """Functional entry point for :meth:`MultiWindowAnalyzer.analyze_metric`."""

    return MultiWindowAnalyzer(config).analyze_metric(metric, metric_id, include_time_series)


__all__ = ["MultiWindowAnalyzer", "analyze_metric"]
