"""Multi-window Z-score anomaly detection for Bitcoin on-chain metrics."""

from btc_dynamics.settings import DynamicsSettings, get_settings

__all__ = ["get_settings", "DynamicsSettings"]
