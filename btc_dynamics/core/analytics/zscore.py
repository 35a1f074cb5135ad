"""Rolling and expanding Z-score computation."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from btc_dynamics.core.analytics.models import ZScoreSeries


def _baseline_stats(values: pd.Series, window_size: Optional[int]) -> tuple[pd.Series, pd.Series]:
    if window_size is None:
        window = values.expanding(min_periods=1)
    else:
        window = values.rolling(window_size, min_periods=window_size)
    return window.mean(), window.std(ddof=0)


def compute_zscore_series(
    values: Sequence[float],
    window_size: Optional[int] = None,
    dates: Optional[Sequence[date]] = None,
) -> ZScoreSeries:
    """Convert raw values into a parallel series of Z-scores.

    Args:
        values: Observations ordered earliest first.
        window_size: Trailing window length. ``None`` uses an expanding window
            from the first observation up to each point.
        dates: Optional dates parallel to ``values``.

    Returns:
        ZScoreSeries starting at the first index with a complete window
        (``window_size - 1``, or ``0`` when expanding). A zero standard
        deviation yields a Z-score of 0.
    """

    if window_size is not None and window_size <= 0:
        raise ValueError("window_size must be positive")
    if dates is not None and len(dates) != len(values):
        raise ValueError(f"dates ({len(dates)}) must align with values ({len(values)})")

    start_index = 0 if window_size is None else window_size - 1
    if len(values) <= start_index:
        return ZScoreSeries(window_size=window_size, start_index=start_index)

    series = pd.Series(values, dtype=float)
    mean, std = _baseline_stats(series, window_size)

    arr = series.to_numpy()
    mean_arr = mean.to_numpy()[start_index:]
    std_arr = std.to_numpy()[start_index:]
    current = arr[start_index:]

    with np.errstate(divide="ignore", invalid="ignore"):
        z = (current - mean_arr) / std_arr
    degenerate = ~np.isfinite(std_arr) | (std_arr == 0.0)
    z = np.where(degenerate | ~np.isfinite(z), 0.0, z)

    return ZScoreSeries(
        window_size=window_size,
        start_index=start_index,
        dates=list(dates[start_index:]) if dates is not None else [],
        values=current.tolist(),
        z_scores=z.tolist(),
    )


__all__ = ["compute_zscore_series"]
