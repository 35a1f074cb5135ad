"""Dynamics run orchestration."""

from btc_dynamics.core.dynamics.models import DynamicsReport, DynamicsRequest, FetchFailure
from btc_dynamics.core.dynamics.service import DynamicsService

__all__ = ["DynamicsReport", "DynamicsRequest", "FetchFailure", "DynamicsService"]
