"""API router collection for the dynamics backend."""

from fastapi import APIRouter

from btc_dynamics.app.api import dynamics, health, zscores

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(dynamics.router)
api_router.include_router(zscores.router)

__all__ = ["api_router"]
