"""Dynamics configuration loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from btc_dynamics.core.analytics.config import AnalysisConfig, analysis_config_from_dict
from btc_dynamics.settings import get_settings

logger = logging.getLogger(__name__)


class DynamicsConfigLoader:
    """Loads YAML configurations from the dynamics config directory."""

    def __init__(self, base_path: str | Path | None = None) -> None:
        settings = get_settings()
        self.base_path: Path = Path(base_path) if base_path else settings.config_root

    def load_config(self, name: str) -> dict[str, Any]:
        """Load a YAML config by name without extension."""

        path = self.base_path / f"{name}.yaml"
        if not path.exists():
            raise FileNotFoundError(f"Dynamics config '{name}' not found at {path}")

        try:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            message = f"Invalid YAML in dynamics config '{name}': {exc}"
            logger.error(message)
            raise ValueError(message) from exc

        logger.debug("Dynamics config loaded | name=%s path=%s", name, path)
        return data

    def load_analysis_config(self, name: str) -> AnalysisConfig:
        """Load a config by name and validate its ``analysis`` section.

        Raises:
            ValueError: When the section fails validation; the message names
                the config file.
        """

        data = self.load_config(name)
        if not isinstance(data, dict):
            raise ValueError(f"Dynamics config '{name}' must be a mapping, got {type(data).__name__}")
        if "analysis" not in data:
            logger.warning("Dynamics config has no 'analysis' section, reading top level | name=%s", name)
        try:
            config = analysis_config_from_dict(data)
        except ValidationError as exc:
            message = f"Invalid analysis settings in dynamics config '{name}': {exc}"
            logger.error(message)
            raise ValueError(message) from exc

        logger.info(
            "Analysis config loaded | name=%s windows=%s primary=%s baseline=%s",
            name,
            [w.label for w in config.windows],
            config.primary_window,
            config.baseline_window,
        )
        return config

    def list_configs(self) -> list[str]:
        """Return all available config names (without extension)."""

        if not self.base_path.exists():
            return []

        return sorted([config.stem for config in self.base_path.glob("*.yaml")])


__all__ = ["DynamicsConfigLoader"]
