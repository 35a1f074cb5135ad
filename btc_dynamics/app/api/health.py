"""Health endpoint for the dynamics backend."""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    """Return a lightweight health status."""

    return {"status": "ok", "service": "btc_dynamics_backend"}


__all__ = ["router"]
