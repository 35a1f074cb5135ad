"""Rarity-based severity classification of the current Z-score."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from btc_dynamics.core.analytics.config import SeverityThresholds
from btc_dynamics.core.analytics.models import RarityResult, Severity

DEFAULT_MIN_POINTS = 30


def zscore_band(z_score: float) -> int:
    """Integer sigma band of a Z-score: 2.3 and -2.7 both fall in band 2."""

    return int(math.floor(abs(z_score)))


def severity_for_percent(time_in_band_percent: float, thresholds: Optional[SeverityThresholds] = None) -> Severity:
    thresholds = thresholds or SeverityThresholds()
    if time_in_band_percent <= thresholds.extreme:
        return Severity.EXTREME
    if time_in_band_percent <= thresholds.high:
        return Severity.HIGH
    if time_in_band_percent <= thresholds.moderate:
        return Severity.MODERATE
    return Severity.NORMAL


def classify_severity(
    z_history: Sequence[float],
    thresholds: Optional[SeverityThresholds] = None,
    min_points: int = DEFAULT_MIN_POINTS,
) -> RarityResult:
    """Classify the latest Z-score by how often its band occurred historically.

    The whole history, current point included, is the rarity universe. Fewer
    than ``min_points`` observations is treated as not enough evidence and
    returns a normal reading with 100% time in band.
    """

    if len(z_history) < min_points:
        return RarityResult(severity=Severity.NORMAL, time_in_band_percent=100.0)

    scores = np.asarray(z_history, dtype=float)
    bands = np.floor(np.abs(scores)).astype(int)
    current_band = int(bands[-1])
    count_in_band = int(np.count_nonzero(bands == current_band))
    time_in_band_percent = 100.0 * count_in_band / len(bands)

    return RarityResult(
        severity=severity_for_percent(time_in_band_percent, thresholds),
        time_in_band_percent=time_in_band_percent,
        band=current_band,
    )


__all__ = ["classify_severity", "severity_for_percent", "zscore_band", "DEFAULT_MIN_POINTS"]
