"""Central settings for the dynamics backend."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_BRK_URL = "https://brk.openonchain.dev"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


@dataclass
class DynamicsSettings:
    """Holds filesystem locations and upstream endpoints for the backend."""

    project_root: Path = Path(__file__).resolve().parents[1]
    config_root: Path = project_root / "configs" / "dynamics"
    default_config_name: str = "default"
    brk_base_url: str = field(default_factory=lambda: os.getenv("BTC_DYNAMICS_BRK_URL", DEFAULT_BRK_URL))
    request_timeout: float = field(default_factory=lambda: _env_float("BTC_DYNAMICS_TIMEOUT", 30.0))
    lookback_days: int = field(default_factory=lambda: _env_int("BTC_DYNAMICS_LOOKBACK_DAYS", 3650))
    max_workers: int = 6
    log_level: str = field(default_factory=lambda: os.getenv("BTC_DYNAMICS_LOG_LEVEL", "INFO"))

    @property
    def default_config_path(self) -> Path:
        return self.config_root / f"{self.default_config_name}.yaml"


def get_settings() -> DynamicsSettings:
    """Return backend settings."""

    return DynamicsSettings()


__all__ = ["DynamicsSettings", "get_settings", "DEFAULT_BRK_URL"]
