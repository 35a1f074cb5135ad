"""Dynamics endpoints: ranked multi-window anomalies."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query

from btc_dynamics.core.analytics.config import AnalysisConfig
from btc_dynamics.core.analytics.models import FilterMode
from btc_dynamics.core.config_loader import DynamicsConfigLoader
from btc_dynamics.core.dynamics import DynamicsReport, DynamicsRequest, DynamicsService
from btc_dynamics.core.sources import BrkClient
from btc_dynamics.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dynamics", tags=["dynamics"])


def _load_config() -> AnalysisConfig:
    settings = get_settings()
    if not settings.default_config_path.exists():
        logger.info("No dynamics config at %s, using built-in defaults", settings.default_config_path)
        return AnalysisConfig()
    return DynamicsConfigLoader(settings.config_root).load_analysis_config(settings.default_config_name)


def build_default_service() -> DynamicsService:
    settings = get_settings()
    return DynamicsService(source=BrkClient(), config=_load_config(), max_workers=settings.max_workers)


_service = build_default_service()


@router.post("/analyze", response_model=DynamicsReport)
def analyze(payload: DynamicsRequest) -> DynamicsReport:
    """Analyze caller-supplied metric series."""

    return _service.analyze(payload.metrics, payload.filter_mode, payload.include_time_series)


@router.get("", response_model=DynamicsReport)
def latest(
    filter_mode: FilterMode = FilterMode.ALL,
    days: int = Query(default=get_settings().lookback_days, gt=0),
    include_time_series: bool = False,
) -> DynamicsReport:
    """Fetch the tracked metrics from the data source and analyze them."""

    return _service.run(days, filter_mode, include_time_series)


__all__ = ["router", "build_default_service"]
