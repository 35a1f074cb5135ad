"""Ordering, filtering and summarising of metric anomalies."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from btc_dynamics.core.analytics.models import FilterMode, MetricAnomaly, Severity, WindowSummary


def rank_anomalies(anomalies: Iterable[MetricAnomaly]) -> List[MetricAnomaly]:
    """Sort by max severity, then by the largest absolute Z-score, both descending."""

    return sorted(anomalies, key=lambda a: (-a.max_severity.rank, -a.max_abs_z_score))


def filter_anomalies(
    anomalies: Iterable[MetricAnomaly],
    mode: FilterMode | str = FilterMode.ALL,
    cycle_window: str = "four_year",
    baseline_window: str = "since_2015",
) -> List[MetricAnomaly]:
    """Select anomalies for a view.

    ``cycle_specific`` keeps metrics that are unusual in the cycle window but
    normal against the long baseline.
    """

    mode = FilterMode(mode)
    items = list(anomalies)
    if mode is FilterMode.ALL:
        return items
    if mode is FilterMode.ALL_WINDOWS:
        return [a for a in items if a.is_anomaly_in_all_windows]
    for anomaly in items:
        for label in (cycle_window, baseline_window):
            if label not in anomaly.windows:
                raise ValueError(f"window '{label}' missing from anomaly '{anomaly.name}' (have {list(anomaly.windows)})")
    return [
        a
        for a in items
        if a.windows[cycle_window].severity is not Severity.NORMAL
        and a.windows[baseline_window].severity is Severity.NORMAL
    ]


def summarize_windows(anomalies: Iterable[MetricAnomaly], labels: Optional[List[str]] = None) -> Dict[str, WindowSummary]:
    items = list(anomalies)
    if labels is None:
        labels = list(items[0].windows) if items else []

    summaries: Dict[str, WindowSummary] = {}
    for label in labels:
        severities = [a.windows[label].severity for a in items if label in a.windows]
        summaries[label] = WindowSummary(
            total=len(severities),
            extreme=severities.count(Severity.EXTREME),
            high=severities.count(Severity.HIGH),
            moderate=severities.count(Severity.MODERATE),
        )
    return summaries


__all__ = ["rank_anomalies", "filter_anomalies", "summarize_windows"]
