import pytest

from btc_dynamics.core.analytics.config import SeverityThresholds
from btc_dynamics.core.analytics.models import Severity
from btc_dynamics.core.analytics.rarity import classify_severity, severity_for_percent, zscore_band


def _history(common: float, rare: float, n_common: int, n_rare: int) -> list[float]:
    return [common] * n_common + [rare] * n_rare


def test_short_history_is_always_normal() -> None:
    result = classify_severity([9.0] * 29)

    assert result.severity is Severity.NORMAL
    assert result.time_in_band_percent == 100.0


def test_uniform_bands_give_moderate() -> None:
    history = [0.5] * 30 + [1.5] * 30 + [2.5] * 30

    result = classify_severity(history)

    assert result.band == 2
    assert result.time_in_band_percent == pytest.approx(100 / 3)
    assert result.severity is Severity.MODERATE


def test_rarely_occupied_band_is_extreme() -> None:
    result = classify_severity(_history(0.5, 3.5, 98, 2))

    assert result.time_in_band_percent == pytest.approx(2.0)
    assert result.severity is Severity.EXTREME


def test_threshold_boundaries_are_inclusive() -> None:
    assert classify_severity(_history(0.2, 2.2, 95, 5)).severity is Severity.EXTREME
    assert classify_severity(_history(0.2, 2.2, 80, 20)).severity is Severity.HIGH
    assert classify_severity(_history(0.2, 2.2, 50, 50)).severity is Severity.MODERATE
    assert classify_severity(_history(2.2, 0.2, 40, 60)).severity is Severity.NORMAL


def test_band_uses_absolute_value() -> None:
    history = [2.1] * 10 + [0.3] * 80 + [-2.7]

    result = classify_severity(history)

    assert zscore_band(-2.7) == 2
    assert result.band == 2
    assert result.time_in_band_percent == pytest.approx(100 * 11 / 91)
    assert result.severity is Severity.HIGH


def test_custom_thresholds_and_min_points() -> None:
    thresholds = SeverityThresholds(extreme=1.0, high=10.0, moderate=30.0)

    assert severity_for_percent(5.0, thresholds) is Severity.HIGH
    assert severity_for_percent(5.0) is Severity.EXTREME
    assert classify_severity([0.1] * 9 + [3.0], min_points=10).severity is Severity.HIGH


def test_thresholds_must_be_ordered() -> None:
    with pytest.raises(ValueError):
        SeverityThresholds(extreme=30.0, high=20.0, moderate=50.0)


def test_classification_is_deterministic() -> None:
    history = [((i * 13) % 7) / 2 for i in range(120)]

    assert classify_severity(history) == classify_severity(history)
