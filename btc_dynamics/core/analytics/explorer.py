"""Cross-metric Z-score explorer.

Derives the ratio metrics shown next to price (Mayer ratio, MVRV, STH market
value, sell-side risk) and computes a rolling four-year Z-score for each
metric at every date, so a caller can read off all Z-scores at any point.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

SATS_PER_BTC = 100_000_000
EXPLORER_WINDOW = 1460
EXPLORER_MIN_POINTS = 30

EXPLORER_METRICS: Dict[str, str] = {
    "price": "Price",
    "realized_price": "Realized Price",
    "mayer_ratio": "Mayer Ratio",
    "market_value": "Market Value",
    "realized_value": "Realized Value",
    "mvrv_ratio": "MVRV Ratio",
    "sopr": "SOPR",
    "sth_market_value": "STH Market Value",
    "sth_realized_value": "STH Realized Value",
    "sell_side_risk": "Sell Side Risk Ratio",
    "supply_in_profit": "Supply In Profit",
    "supply_in_loss": "Supply in Loss",
}


class ZScoreZone(str, Enum):
    NORMAL = "normal"
    ELEVATED = "elevated"
    EXTREME = "extreme"


def zone_for(z_score: float) -> ZScoreZone:
    magnitude = abs(z_score)
    if magnitude >= 2.0:
        return ZScoreZone.EXTREME
    if magnitude >= 1.0:
        return ZScoreZone.ELEVATED
    return ZScoreZone.NORMAL


def safe_divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Element-wise division where non-finite inputs or a zero denominator give 0."""

    num = numerator.astype(float)
    den = denominator.astype(float)
    valid = np.isfinite(num) & np.isfinite(den) & (den != 0)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = num / den.where(valid)
    return result.where(valid & np.isfinite(result), 0.0)


def _aligned(values: Optional[Sequence[float]], length: int) -> pd.Series:
    """Trailing ``length`` points of ``values``, zero-padded at the front when short."""

    tail = list(values)[-length:] if values is not None and length else []
    padded = [0.0] * (length - len(tail)) + [float(v) if v is not None else 0.0 for v in tail]
    return pd.Series(padded, dtype=float)


def build_explorer_frame(raw: Mapping[str, Sequence[float]]) -> pd.DataFrame:
    """Build the explorer's raw-value frame, aligned to the price history.

    Expected keys: ``price``, ``realized_price``, ``market_value``,
    ``realized_value``, ``sopr``, ``sth_supply`` (satoshis),
    ``sth_realized_value``, ``supply_in_profit``, ``supply_in_loss``. Missing
    series are treated as zeros.
    """

    prices = pd.Series(list(raw.get("price", [])), dtype=float)
    n = len(prices)
    col = {key: _aligned(raw.get(key), n) for key in raw if key != "price"}
    zeros = pd.Series(np.zeros(n), dtype=float)

    realized_price = col.get("realized_price", zeros)
    market_value = col.get("market_value", zeros)
    realized_value = col.get("realized_value", zeros)
    sth_btc = col.get("sth_supply", zeros) / SATS_PER_BTC
    sth_market_value = sth_btc * prices
    sth_realized_value = col.get("sth_realized_value", zeros)

    return pd.DataFrame(
        {
            "price": prices,
            "realized_price": realized_price,
            "mayer_ratio": safe_divide(prices, realized_price),
            "market_value": market_value,
            "realized_value": realized_value,
            "mvrv_ratio": safe_divide(market_value, realized_value),
            "sopr": col.get("sopr", zeros),
            "sth_market_value": sth_market_value,
            "sth_realized_value": sth_realized_value,
            "sell_side_risk": safe_divide(sth_market_value, sth_realized_value),
            "supply_in_profit": col.get("supply_in_profit", zeros),
            "supply_in_loss": col.get("supply_in_loss", zeros),
        }
    )


def rolling_zscores(
    frame: pd.DataFrame,
    window: int = EXPLORER_WINDOW,
    min_points: int = EXPLORER_MIN_POINTS,
) -> pd.DataFrame:
    """Rolling Z-score of every column at every row.

    Non-finite observations are ignored when forming the baseline; rows whose
    window holds fewer than ``min_points`` valid observations, a zero standard
    deviation, or a non-finite current value get 0.
    """

    if window <= 0:
        raise ValueError("window must be positive")

    numeric = frame.astype(float)
    clean = numeric.where(np.isfinite(numeric))
    rolling = clean.rolling(window, min_periods=min(min_points, window))
    mean = rolling.mean()
    std = rolling.std(ddof=0)
    with np.errstate(divide="ignore", invalid="ignore"):
        z = (clean - mean) / std.where(std > 0)
    return z.replace([np.inf, -np.inf], np.nan).fillna(0.0)


def zscore_snapshot(zscores: pd.DataFrame, index: int = -1) -> Dict[str, float]:
    """Z-score of every metric at one row (negative indexes count from the end)."""

    if zscores.empty:
        return {}
    row = zscores.iloc[index]
    return {str(key): float(value) for key, value in row.items()}


__all__ = [
    "EXPLORER_METRICS",
    "ZScoreZone",
    "zone_for",
    "safe_divide",
    "build_explorer_frame",
    "rolling_zscores",
    "zscore_snapshot",
]
