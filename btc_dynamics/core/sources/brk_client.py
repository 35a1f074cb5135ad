"""HTTP client for the BRK on-chain data service."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import requests

from btc_dynamics.core.errors import UpstreamFetchError
from btc_dynamics.settings import get_settings

logger = logging.getLogger(__name__)

# Series keys understood by the BRK ``/api/query`` endpoint.
CLOSE = "close"
MARKET_CAP = "marketcap"
REALIZED_PRICE = "realized-price"
REALIZED_CAP = "realized-cap"
STH_REALIZED_CAP = "sth-realized-cap"
STH_SUPPLY = "sth-supply"
LTH_SUPPLY = "lth-supply"
SOPR = "spent-output-profit-ratio"
SUPPLY_IN_PROFIT = "supply-in-profit"
SUPPLY_IN_LOSS = "supply-in-loss"


class MetricSource(Protocol):
    """Anything that can return a daily series, earliest first, for a lookback."""

    def fetch_series(self, key: str, days: int) -> list[float]:
        ...


class BrkClient:
    """Fetch daily metric series from a BRK instance."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.brk_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.session = session or requests.Session()

    def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise UpstreamFetchError(f"GET {url} failed: {exc}") from exc

    def fetch_series(self, key: str, days: int) -> list[float]:
        """Return the last ``days`` daily values of ``key``."""

        if days <= 0:
            raise ValueError("days must be positive")
        data = self._get_json("/api/query", {"index": "dateindex", "values": key, "from": f"-{days}"})
        if not isinstance(data, list):
            raise UpstreamFetchError(f"Unexpected payload for '{key}': {type(data).__name__}")
        try:
            values = [float(v) if v is not None else float("nan") for v in data]
        except (TypeError, ValueError) as exc:
            raise UpstreamFetchError(f"Non-numeric value in '{key}' payload: {exc}") from exc
        logger.debug("Series fetched | key=%s points=%d", key, len(values))
        return values


__all__ = [
    "BrkClient",
    "MetricSource",
    "CLOSE",
    "MARKET_CAP",
    "REALIZED_PRICE",
    "REALIZED_CAP",
    "STH_REALIZED_CAP",
    "STH_SUPPLY",
    "LTH_SUPPLY",
    "SOPR",
    "SUPPLY_IN_PROFIT",
    "SUPPLY_IN_LOSS",
]
