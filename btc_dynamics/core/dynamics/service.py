"""Dynamics service coordinating data fetching and multi-window analysis."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from typing import Mapping, Optional, Sequence

from btc_dynamics.core.analytics.analyzer import MultiWindowAnalyzer
from btc_dynamics.core.analytics.config import AnalysisConfig
from btc_dynamics.core.analytics.models import FilterMode, MetricAnomaly, MetricSeries
from btc_dynamics.core.analytics.ranking import filter_anomalies, rank_anomalies, summarize_windows
from btc_dynamics.core.dynamics.models import DynamicsReport, FetchFailure
from btc_dynamics.core.errors import UpstreamFetchError
from btc_dynamics.core.sources.brk_client import MetricSource
from btc_dynamics.core.sources.catalog import (
    DYNAMICS_METRICS,
    EXPLORER_SOURCES,
    MetricDefinition,
    build_metric_series,
    required_series,
)

logger = logging.getLogger(__name__)


class DynamicsService:
    """Fetch raw series, build metrics and produce ranked anomaly reports."""

    def __init__(
        self,
        source: Optional[MetricSource] = None,
        config: Optional[AnalysisConfig] = None,
        definitions: Sequence[MetricDefinition] = DYNAMICS_METRICS,
        max_workers: int = 6,
    ) -> None:
        self.source = source
        self.config = config or AnalysisConfig()
        self.definitions = list(definitions)
        self.max_workers = max_workers
        self.analyzer = MultiWindowAnalyzer(self.config)

    def _require_source(self) -> MetricSource:
        if self.source is None:
            raise RuntimeError("DynamicsService has no data source configured")
        return self.source

    def _fetch_keys(self, keys: Sequence[str], days: int) -> tuple[dict[str, list[float]], dict[str, str]]:
        source = self._require_source()
        raw: dict[str, list[float]] = {}
        errors: dict[str, str] = {}
        with ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(keys)))) as pool:
            futures = {key: pool.submit(source.fetch_series, key, days) for key in keys}
            for key, future in futures.items():
                try:
                    raw[key] = future.result()
                except UpstreamFetchError as exc:
                    logger.warning("Series fetch failed | key=%s error=%s", key, exc)
                    errors[key] = str(exc)
        return raw, errors

    def fetch_raw(self, days: int) -> tuple[dict[str, list[float]], dict[str, str]]:
        """Fetch every required series concurrently.

        Returns:
            Tuple of fetched series by key and error messages by key. A failed
            series does not abort the others.
        """

        return self._fetch_keys(required_series(self.definitions), days)

    def fetch_explorer_series(self, days: int) -> tuple[dict[str, list[float]], list[FetchFailure]]:
        """Fetch the Z-score explorer inputs, keyed by explorer name.

        Failed inputs are reported and later treated as zeros by the explorer
        frame; the price series is mandatory.
        """

        raw, errors = self._fetch_keys(list(EXPLORER_SOURCES.values()), days)
        price_key = EXPLORER_SOURCES["price"]
        if price_key in errors:
            raise UpstreamFetchError(f"Explorer price series unavailable: {errors[price_key]}")
        series = {name: raw[key] for name, key in EXPLORER_SOURCES.items() if key in raw}
        failures = [
            FetchFailure(series_key=key, message=errors[key], excluded_metrics=[])
            for key in EXPLORER_SOURCES.values()
            if key in errors
        ]
        return series, failures

    def build_metrics(self, raw: Mapping[str, Sequence[float]], as_of: Optional[date] = None) -> list[MetricSeries]:
        """Build metric series for every definition whose inputs are all present."""

        as_of = as_of or datetime.now(tz=timezone.utc).date()
        metrics: list[MetricSeries] = []
        for definition in self.definitions:
            if any(key not in raw for key in definition.inputs):
                continue
            values = definition.build(raw)
            metrics.append(
                build_metric_series(definition.name, definition.unit, values, as_of, self.config.baseline_start)
            )
        return metrics

    def analyze(
        self,
        metrics: Sequence[MetricSeries],
        filter_mode: FilterMode | str = FilterMode.ALL,
        include_time_series: bool = False,
        failures: Optional[list[FetchFailure]] = None,
    ) -> DynamicsReport:
        """Analyze metrics, rank the anomalies and apply the view filter."""

        filter_mode = FilterMode(filter_mode)
        found: list[MetricAnomaly] = []
        for index, metric in enumerate(metrics):
            anomaly = self.analyzer.analyze_metric(metric, metric_id=str(index), include_time_series=include_time_series)
            if anomaly is not None:
                found.append(anomaly)

        ranked = rank_anomalies(found)
        visible = filter_anomalies(ranked, filter_mode, self.config.primary_window, self.config.baseline_window)
        logger.info(
            "Dynamics analysis complete | metrics=%d anomalies=%d visible=%d filter=%s",
            len(metrics),
            len(ranked),
            len(visible),
            filter_mode.value,
        )
        return DynamicsReport(
            filter_mode=filter_mode,
            analyzed_count=len(metrics),
            anomalies=visible,
            window_summary=summarize_windows(ranked, [w.label for w in self.config.windows]),
            failures=failures or [],
        )

    def run(
        self,
        days: int,
        filter_mode: FilterMode | str = FilterMode.ALL,
        include_time_series: bool = False,
        as_of: Optional[date] = None,
    ) -> DynamicsReport:
        """Fetch, build and analyze in one call."""

        raw, errors = self.fetch_raw(days)
        failures = [
            FetchFailure(
                series_key=key,
                message=message,
                excluded_metrics=[d.name for d in self.definitions if key in d.inputs],
            )
            for key, message in errors.items()
        ]
        metrics = self.build_metrics(raw, as_of)
        return self.analyze(metrics, filter_mode, include_time_series, failures)


__all__ = ["DynamicsService"]
