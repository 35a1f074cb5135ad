"""Shared analytics domain models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    NORMAL = "normal"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]


_SEVERITY_RANKS = {
    Severity.NORMAL: 1,
    Severity.MODERATE: 2,
    Severity.HIGH: 3,
    Severity.EXTREME: 4,
}


def max_severity(severities: List[Severity]) -> Severity:
    """Return the highest-ranked severity, or normal for an empty list."""

    return max(severities, key=lambda s: s.rank, default=Severity.NORMAL)


class MetricUnit(str, Enum):
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    RATIO = "ratio"
    COUNT = "count"


class FilterMode(str, Enum):
    ALL = "all"
    ALL_WINDOWS = "all_windows"
    CYCLE_SPECIFIC = "cycle_specific"


class MetricSeries(BaseModel):
    """Daily observations for one tracked metric, earliest first.

    ``baseline_values``/``baseline_dates`` hold the pre-filtered slice used by
    the expanding window (observations on or after the baseline start date).
    """

    name: str
    unit: MetricUnit = MetricUnit.COUNT
    values: List[float]
    dates: List[date] = Field(default_factory=list)
    baseline_values: List[float] = Field(default_factory=list)
    baseline_dates: List[date] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_alignment(self) -> "MetricSeries":
        if self.dates and len(self.dates) != len(self.values):
            raise ValueError(f"dates ({len(self.dates)}) and values ({len(self.values)}) must align for '{self.name}'")
        if self.baseline_dates and len(self.baseline_dates) != len(self.baseline_values):
            raise ValueError(
                f"baseline_dates ({len(self.baseline_dates)}) and baseline_values "
                f"({len(self.baseline_values)}) must align for '{self.name}'"
            )
        return self


class ZScoreSeries(BaseModel):
    """Z-scores parallel to a suffix of the source values."""

    window_size: Optional[int] = None
    start_index: int = 0
    dates: List[date] = Field(default_factory=list)
    values: List[float] = Field(default_factory=list)
    z_scores: List[float] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.z_scores)

    @property
    def latest(self) -> Optional[float]:
        return self.z_scores[-1] if self.z_scores else None


class RarityResult(BaseModel):
    """How rarely the current Z-score band was occupied historically."""

    severity: Severity
    time_in_band_percent: float
    band: int = 0


class WindowResult(BaseModel):
    """Snapshot of one metric in one analysis window."""

    model_config = ConfigDict(frozen=True)

    label: str
    window_size: Optional[int] = None
    value: float
    z_score: float
    band: int
    severity: Severity
    time_in_band_percent: float


class MetricAnomaly(BaseModel):
    """Per-metric anomaly record across all analysis windows."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    unit: MetricUnit
    current_value: float
    windows: Dict[str, WindowResult]
    time_series: Dict[str, ZScoreSeries] = Field(default_factory=dict)
    description: str
    max_severity: Severity
    is_anomaly_in_all_windows: bool

    @property
    def max_abs_z_score(self) -> float:
        return max((abs(result.z_score) for result in self.windows.values()), default=0.0)


class WindowSummary(BaseModel):
    """Count of anomalies per severity in one window."""

    total: int = 0
    extreme: int = 0
    high: int = 0
    moderate: int = 0


__all__ = [
    "Severity",
    "max_severity",
    "MetricUnit",
    "FilterMode",
    "MetricSeries",
    "ZScoreSeries",
    "RarityResult",
    "WindowResult",
    "MetricAnomaly",
    "WindowSummary",
]
