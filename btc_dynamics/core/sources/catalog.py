"""Metric catalog for the Dynamics view and helpers to build metric series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, List, Mapping, Sequence

import pandas as pd

from btc_dynamics.core.analytics.explorer import safe_divide
from btc_dynamics.core.analytics.models import MetricSeries, MetricUnit
from btc_dynamics.core.sources import brk_client as keys

SeriesBuilder = Callable[[Mapping[str, Sequence[float]]], List[float]]


def _passthrough(key: str) -> SeriesBuilder:
    return lambda raw: [float(v) for v in raw[key]]


def _supply_share(part_key: str) -> SeriesBuilder:
    def build(raw: Mapping[str, Sequence[float]]) -> List[float]:
        n = min(len(raw[keys.LTH_SUPPLY]), len(raw[keys.STH_SUPPLY]))
        lth = pd.Series(list(raw[keys.LTH_SUPPLY])[-n:] if n else [], dtype=float)
        sth = pd.Series(list(raw[keys.STH_SUPPLY])[-n:] if n else [], dtype=float)
        part = lth if part_key == keys.LTH_SUPPLY else sth
        return (safe_divide(part, lth + sth) * 100.0).tolist()

    return build


@dataclass(frozen=True)
class MetricDefinition:
    metric_id: str
    name: str
    unit: MetricUnit
    inputs: tuple[str, ...]
    build: SeriesBuilder


DYNAMICS_METRICS: List[MetricDefinition] = [
    MetricDefinition("price", "Bitcoin Price", MetricUnit.CURRENCY, (keys.CLOSE,), _passthrough(keys.CLOSE)),
    MetricDefinition("market_value", "Market Value", MetricUnit.CURRENCY, (keys.MARKET_CAP,), _passthrough(keys.MARKET_CAP)),
    MetricDefinition("realized_value", "Realized Value", MetricUnit.CURRENCY, (keys.REALIZED_CAP,), _passthrough(keys.REALIZED_CAP)),
    MetricDefinition("realized_price", "Realized Price", MetricUnit.CURRENCY, (keys.REALIZED_PRICE,), _passthrough(keys.REALIZED_PRICE)),
    MetricDefinition(
        "lth_supply_pct", "LTH Supply %", MetricUnit.PERCENTAGE, (keys.LTH_SUPPLY, keys.STH_SUPPLY), _supply_share(keys.LTH_SUPPLY)
    ),
    MetricDefinition(
        "sth_supply_pct", "STH Supply %", MetricUnit.PERCENTAGE, (keys.LTH_SUPPLY, keys.STH_SUPPLY), _supply_share(keys.STH_SUPPLY)
    ),
]


# Explorer input name -> BRK series key. ``sth_supply`` is in satoshis.
EXPLORER_SOURCES: Dict[str, str] = {
    "price": keys.CLOSE,
    "realized_price": keys.REALIZED_PRICE,
    "market_value": keys.MARKET_CAP,
    "realized_value": keys.REALIZED_CAP,
    "sopr": keys.SOPR,
    "sth_supply": keys.STH_SUPPLY,
    "sth_realized_value": keys.STH_REALIZED_CAP,
    "supply_in_profit": keys.SUPPLY_IN_PROFIT,
    "supply_in_loss": keys.SUPPLY_IN_LOSS,
}


def required_series(definitions: Sequence[MetricDefinition] = DYNAMICS_METRICS) -> List[str]:
    """Distinct raw series keys needed by ``definitions``, in first-use order."""

    seen: Dict[str, None] = {}
    for definition in definitions:
        for key in definition.inputs:
            seen.setdefault(key, None)
    return list(seen)


def daily_dates(length: int, as_of: date) -> List[date]:
    """Consecutive dates ending at ``as_of`` (inclusive), earliest first."""

    return [as_of - timedelta(days=length - 1 - i) for i in range(length)]


def build_metric_series(
    name: str,
    unit: MetricUnit,
    values: Sequence[float],
    as_of: date,
    baseline_start: date,
) -> MetricSeries:
    """Attach dates ending at ``as_of`` and slice the baseline from ``baseline_start``."""

    dates = daily_dates(len(values), as_of)
    first = next((i for i, d in enumerate(dates) if d >= baseline_start), len(dates))
    return MetricSeries(
        name=name,
        unit=unit,
        values=list(values),
        dates=dates,
        baseline_values=list(values[first:]),
        baseline_dates=dates[first:],
    )


__all__ = [
    "MetricDefinition",
    "DYNAMICS_METRICS",
    "EXPLORER_SOURCES",
    "required_series",
    "daily_dates",
    "build_metric_series",
]
