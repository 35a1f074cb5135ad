"""Z-score endpoints: single-series computation, rarity and the explorer snapshot."""

import math
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from btc_dynamics.app.api.dynamics import build_default_service
from btc_dynamics.core.analytics import RarityResult, ZScoreSeries, classify_severity, compute_zscore_series
from btc_dynamics.core.analytics.explorer import (
    EXPLORER_METRICS,
    EXPLORER_MIN_POINTS,
    EXPLORER_WINDOW,
    ZScoreZone,
    build_explorer_frame,
    rolling_zscores,
    zone_for,
    zscore_snapshot,
)
from btc_dynamics.core.dynamics import FetchFailure
from btc_dynamics.settings import get_settings

router = APIRouter(prefix="/zscores", tags=["zscores"])

_service = build_default_service()


class ZScoreSeriesRequest(BaseModel):
    values: List[float]
    window_size: Optional[int] = None
    dates: Optional[List[date]] = None


class ClassifyRequest(BaseModel):
    z_scores: List[float]
    min_points: int = Field(default=30, gt=0)


class SnapshotRequest(BaseModel):
    series: Dict[str, List[Optional[float]]]
    index: int = -1
    window: int = Field(default=EXPLORER_WINDOW, gt=0)
    min_points: int = Field(default=EXPLORER_MIN_POINTS, gt=0)


class MetricReading(BaseModel):
    key: str
    label: str
    raw_value: float
    z_score: float
    zone: ZScoreZone


class SnapshotResponse(BaseModel):
    index: int
    readings: List[MetricReading]
    failures: List[FetchFailure] = Field(default_factory=list)


@router.post("/series", response_model=ZScoreSeries)
def zscore_series(payload: ZScoreSeriesRequest) -> ZScoreSeries:
    """Compute a rolling or expanding Z-score series."""

    return compute_zscore_series(payload.values, payload.window_size, payload.dates)


@router.post("/classify", response_model=RarityResult)
def classify(payload: ClassifyRequest) -> RarityResult:
    """Classify the latest Z-score by historical band rarity."""

    return classify_severity(payload.z_scores, min_points=payload.min_points)


def _snapshot(series: Dict[str, List[Optional[float]]], index: int, window: int, min_points: int) -> SnapshotResponse:
    if not series.get("price"):
        raise ValueError("series must include a non-empty 'price' history")
    frame = build_explorer_frame(series)
    if not -len(frame) <= index < len(frame):
        raise ValueError(f"index {index} out of range for {len(frame)} points")

    zscores = zscore_snapshot(rolling_zscores(frame, window, min_points), index)
    raw_row = frame.iloc[index]
    readings = [
        MetricReading(
            key=key,
            label=label,
            raw_value=float(raw_row[key]) if math.isfinite(raw_row[key]) else 0.0,
            z_score=zscores[key],
            zone=zone_for(zscores[key]),
        )
        for key, label in EXPLORER_METRICS.items()
    ]
    return SnapshotResponse(index=index % len(frame), readings=readings)


@router.post("/snapshot", response_model=SnapshotResponse)
def snapshot(payload: SnapshotRequest) -> SnapshotResponse:
    """Z-scores of every explorer metric at one point of the price history."""

    return _snapshot(payload.series, payload.index, payload.window, payload.min_points)


@router.get("/snapshot", response_model=SnapshotResponse)
def live_snapshot(
    days: int = Query(default=get_settings().lookback_days, gt=0),
    index: int = -1,
    window: int = Query(default=EXPLORER_WINDOW, gt=0),
    min_points: int = Query(default=EXPLORER_MIN_POINTS, gt=0),
) -> SnapshotResponse:
    """Fetch the explorer inputs from the data source and snapshot them."""

    series, failures = _service.fetch_explorer_series(days)
    response = _snapshot(series, index, window, min_points)
    return response.model_copy(update={"failures": failures})


__all__ = ["router"]
