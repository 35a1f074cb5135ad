"""Human-readable descriptions of anomaly readings."""

from __future__ import annotations

import math

from btc_dynamics.core.analytics.models import MetricUnit, WindowResult

_SUFFIXES = ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K"))


def _compact(value: float) -> str:
    magnitude = abs(value)
    for scale, suffix in _SUFFIXES:
        if magnitude >= scale:
            return f"{value / scale:.2f}{suffix}"
    return f"{value:,.2f}"


def format_value(value: float, unit: MetricUnit) -> str:
    if not math.isfinite(value):
        return "n/a"
    if unit is MetricUnit.CURRENCY:
        formatted = _compact(value)
        return f"-${formatted[1:]}" if formatted.startswith("-") else f"${formatted}"
    if unit is MetricUnit.PERCENTAGE:
        return f"{value:.2f}%"
    if unit is MetricUnit.RATIO:
        return f"{value:.2f}"
    return f"{round(value):,}"


def describe_window(name: str, unit: MetricUnit, value: float, result: WindowResult) -> str:
    direction = "above" if result.z_score > 0 else "below"
    return (
        f"{name} is {format_value(value, unit)}. "
        f"Its Z-score of {result.z_score:.2f}σ ({direction} the mean) is in the "
        f"{result.band}σ-{result.band + 1}σ band, where it has historically spent only "
        f"{result.time_in_band_percent:.1f}% of its time."
    )


__all__ = ["format_value", "describe_window"]
