import pytest

from btc_dynamics.core.analytics.models import FilterMode, MetricAnomaly, MetricUnit, Severity, WindowResult
from btc_dynamics.core.analytics.ranking import filter_anomalies, rank_anomalies, summarize_windows


def _window(label: str, severity: Severity, z_score: float) -> WindowResult:
    return WindowResult(
        label=label,
        value=1.0,
        z_score=z_score,
        band=int(abs(z_score)),
        severity=severity,
        time_in_band_percent=10.0,
    )


def make_anomaly(
    name: str,
    four_year: Severity,
    two_year: Severity = Severity.NORMAL,
    since_2015: Severity = Severity.NORMAL,
    max_z: float = 1.0,
) -> MetricAnomaly:
    severities = [four_year, two_year, since_2015]
    return MetricAnomaly(
        id=name,
        name=name,
        unit=MetricUnit.RATIO,
        current_value=1.0,
        windows={
            "four_year": _window("four_year", four_year, max_z),
            "two_year": _window("two_year", two_year, max_z / 2),
            "since_2015": _window("since_2015", since_2015, -max_z / 3),
        },
        description=name,
        max_severity=max(severities, key=lambda s: s.rank),
        is_anomaly_in_all_windows=all(s is not Severity.NORMAL for s in severities),
    )


def test_rank_by_severity_then_peak_zscore() -> None:
    a = make_anomaly("a", Severity.HIGH, max_z=1.5)
    b = make_anomaly("b", Severity.EXTREME, max_z=0.9)
    c = make_anomaly("c", Severity.HIGH, max_z=3.0)

    ranked = rank_anomalies([a, b, c])

    assert [x.name for x in ranked] == ["b", "c", "a"]


def test_rank_uses_absolute_zscores() -> None:
    negative = make_anomaly("negative", Severity.MODERATE, max_z=-4.0)
    positive = make_anomaly("positive", Severity.MODERATE, max_z=2.0)

    assert negative.max_abs_z_score == pytest.approx(4.0)
    assert [x.name for x in rank_anomalies([positive, negative])] == ["negative", "positive"]


def test_rank_is_stable_for_ties() -> None:
    first = make_anomaly("first", Severity.HIGH, max_z=2.0)
    second = make_anomaly("second", Severity.HIGH, max_z=2.0)

    assert [x.name for x in rank_anomalies([first, second])] == ["first", "second"]


def test_filter_all_windows() -> None:
    everywhere = make_anomaly("everywhere", Severity.HIGH, Severity.MODERATE, Severity.MODERATE)
    partial = make_anomaly("partial", Severity.EXTREME)

    result = filter_anomalies([everywhere, partial], FilterMode.ALL_WINDOWS)

    assert [x.name for x in result] == ["everywhere"]
    assert len(filter_anomalies([everywhere, partial], "all")) == 2


def test_filter_cycle_specific() -> None:
    cycle_only = make_anomaly("cycle_only", Severity.HIGH, since_2015=Severity.NORMAL)
    both = make_anomaly("both", Severity.HIGH, since_2015=Severity.HIGH)
    short_term = make_anomaly("short_term", Severity.NORMAL, two_year=Severity.HIGH)

    result = filter_anomalies([cycle_only, both, short_term], FilterMode.CYCLE_SPECIFIC)

    assert [x.name for x in result] == ["cycle_only"]


def test_filter_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        filter_anomalies([], "sideways")


def test_filter_cycle_specific_names_missing_window() -> None:
    anomaly = make_anomaly("a", Severity.HIGH)

    with pytest.raises(ValueError, match="window 'cycle' missing from anomaly 'a'"):
        filter_anomalies([anomaly], FilterMode.CYCLE_SPECIFIC, cycle_window="cycle", baseline_window="history")


def test_filter_cycle_specific_with_custom_labels() -> None:
    cycle_only = make_anomaly("cycle_only", Severity.NORMAL, two_year=Severity.HIGH)

    result = filter_anomalies([cycle_only], FilterMode.CYCLE_SPECIFIC, cycle_window="two_year")

    assert [x.name for x in result] == ["cycle_only"]


def test_summarize_windows_counts_each_severity() -> None:
    anomalies = [
        make_anomaly("a", Severity.EXTREME, Severity.HIGH),
        make_anomaly("b", Severity.MODERATE, Severity.HIGH, Severity.EXTREME),
        make_anomaly("c", Severity.NORMAL, Severity.MODERATE),
    ]

    summary = summarize_windows(anomalies)

    assert summary["four_year"].total == 3
    assert (summary["four_year"].extreme, summary["four_year"].high, summary["four_year"].moderate) == (1, 0, 1)
    assert (summary["two_year"].extreme, summary["two_year"].high, summary["two_year"].moderate) == (0, 2, 1)
    assert summary["since_2015"].extreme == 1
    assert summarize_windows([]) == {}
