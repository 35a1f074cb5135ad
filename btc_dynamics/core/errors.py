"""Domain exceptions for the dynamics backend."""

from __future__ import annotations


class UpstreamFetchError(RuntimeError):
    """Raised when a raw series cannot be obtained from the data source."""


__all__ = ["UpstreamFetchError"]
