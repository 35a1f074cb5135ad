"""Core services for the dynamics backend."""

from btc_dynamics.core.config_loader import DynamicsConfigLoader
from btc_dynamics.core.errors import UpstreamFetchError

__all__ = ["DynamicsConfigLoader", "UpstreamFetchError"]
