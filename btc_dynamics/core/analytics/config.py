"""Calibration settings for the multi-window analysis."""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _to_camel(string: str) -> str:
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class BaseConfigModel(BaseModel):
    """
    Base configuration model with shared validation rules.
    """

    model_config: ConfigDict = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )


class WindowSpec(BaseConfigModel):
    """One analysis window; ``window_size`` None means expanding from the baseline start."""

    label: str
    window_size: Optional[int] = Field(default=None, gt=0)


class SeverityThresholds(BaseConfigModel):
    """Upper bounds on time-in-band percentage for each severity tier."""

    extreme: float = 5.0
    high: float = 20.0
    moderate: float = 50.0

    @model_validator(mode="after")
    def _check_order(self) -> "SeverityThresholds":
        if not (0.0 <= self.extreme <= self.high <= self.moderate <= 100.0):
            raise ValueError("thresholds must satisfy 0 <= extreme <= high <= moderate <= 100")
        return self


DEFAULT_WINDOWS = [
    WindowSpec(label="four_year", window_size=1460),
    WindowSpec(label="two_year", window_size=730),
    WindowSpec(label="since_2015", window_size=None),
]


class AnalysisConfig(BaseConfigModel):
    windows: List[WindowSpec] = Field(default_factory=lambda: [w.model_copy() for w in DEFAULT_WINDOWS])
    thresholds: SeverityThresholds = Field(default_factory=SeverityThresholds)
    min_history: int = Field(default=730, gt=0)
    min_zscore_points: int = Field(default=30, gt=0)
    primary_window: str = "four_year"
    baseline_window: str = "since_2015"
    baseline_start: date = date(2015, 1, 1)

    @model_validator(mode="after")
    def _check_windows(self) -> "AnalysisConfig":
        labels = [w.label for w in self.windows]
        if not labels:
            raise ValueError("at least one analysis window is required")
        if len(set(labels)) != len(labels):
            raise ValueError(f"window labels must be unique: {labels}")
        for name in (self.primary_window, self.baseline_window):
            if name not in labels:
                raise ValueError(f"window '{name}' is not configured (have {labels})")
        return self

    def window(self, label: str) -> WindowSpec:
        for spec in self.windows:
            if spec.label == label:
                return spec
        raise KeyError(label)


def analysis_config_from_dict(data: dict[str, Any]) -> AnalysisConfig:
    return AnalysisConfig.model_validate(data.get("analysis", data))


__all__ = [
    "BaseConfigModel",
    "WindowSpec",
    "SeverityThresholds",
    "AnalysisConfig",
    "DEFAULT_WINDOWS",
    "analysis_config_from_dict",
]
