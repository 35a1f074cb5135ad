"""Global error handling utilities for the dynamics backend."""

from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from btc_dynamics.core.errors import UpstreamFetchError

logger = logging.getLogger("btc_dynamics")


class ErrorResponse(BaseModel):
    """Standardized error response envelope."""

    detail: str
    error_code: str
    request_id: str | None = None


def _error_code_from_status(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code == 400:
        return "bad_request"
    if status_code == 422:
        return "validation_error"
    if status_code == 502:
        return "upstream_error"
    return "http_error"


def _envelope(request: Request, status_code: int, detail: str, error_code: str) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    error = ErrorResponse(detail=detail, error_code=error_code, request_id=request_id)
    return JSONResponse(status_code=status_code, content=error.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers for standardized responses."""

    @app.exception_handler(HTTPException)
    async def _handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail if exc.detail else "HTTP error"
        if not isinstance(detail, str):
            detail = str(detail)
        logger.warning("HTTPException | status=%s detail=%s", exc.status_code, detail)
        return _envelope(request, exc.status_code, detail, _error_code_from_status(exc.status_code))

    @app.exception_handler(ValueError)
    async def _handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("Invalid request | error=%s", exc)
        return _envelope(request, 400, str(exc), "bad_request")

    @app.exception_handler(UpstreamFetchError)
    async def _handle_upstream_error(request: Request, exc: UpstreamFetchError) -> JSONResponse:
        logger.error("Upstream failure | error=%s", exc)
        return _envelope(request, 502, str(exc), "upstream_error")

    @app.exception_handler(Exception)
    async def _handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _envelope(request, 500, "Internal server error", "internal_error")


def get_request_id(request: Request) -> str:
    """Generate or retrieve a request correlation id."""

    if getattr(request.state, "request_id", None):
        return request.state.request_id
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    return request_id


__all__ = ["ErrorResponse", "register_exception_handlers", "get_request_id"]
