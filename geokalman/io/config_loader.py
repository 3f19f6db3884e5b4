"""
Filter Config Loader

YAML-based configuration parser for the geodetic Kalman filter.

File layout:
    filter:
      sensor_noise: 29.0
      acceleration_noise_sigma: 0.0625
      min_time_interval_s: 0.0001
    logging:
      level: INFO

Missing sections or keys fall back to the library defaults.

Usage:
    loader = ConfigLoader('configs/pedestrian.yaml')
    smoother = LocationSmoother(loader.get_config())
"""

import os
from typing import Any, Dict, Optional

import yaml

from ..constants import DEFAULT_ACCELERATION_NOISE_SIGMA, DEFAULT_SENSOR_NOISE, MIN_TIME_INTERVAL_S
from ..exceptions import InvalidConfiguration
from ..tracking.kalman import FilterConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigLoader:
    """
    Loads filter tuning from YAML files.

    Usage:
        loader = ConfigLoader('configs/pedestrian.yaml')
        config = loader.get_config()
    """

    def __init__(self, filepath: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            filepath: Path to YAML config file (optional)
        """
        self.filepath = filepath
        self.data: Dict[str, Any] = {}
        self._config: Optional[FilterConfig] = None

        if filepath:
            self.load(filepath)

    def load(self, filepath: str) -> FilterConfig:
        """
        Load configuration from YAML file.

        Args:
            filepath: Path to YAML config file

        Returns:
            Parsed and validated FilterConfig

        Raises:
            FileNotFoundError: If file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            InvalidConfiguration: If a value is missing a number or out of range
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Config file not found: {filepath}")

        self.filepath = filepath

        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"{filepath}: top level must be a mapping")

        self.data = data
        self._config = self._parse_filter()
        return self._config

    def _parse_filter(self) -> FilterConfig:
        """Parse the 'filter' section into FilterConfig."""
        section = self.data.get("filter") or {}
        if not isinstance(section, dict):
            raise InvalidConfiguration("'filter' section must be a mapping")

        try:
            config = FilterConfig(
                sensor_noise=float(section.get("sensor_noise", DEFAULT_SENSOR_NOISE)),
                acceleration_noise_sigma=float(
                    section.get("acceleration_noise_sigma", DEFAULT_ACCELERATION_NOISE_SIGMA)
                ),
                min_time_interval_s=float(
                    section.get("min_time_interval_s", MIN_TIME_INTERVAL_S)
                ),
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"'filter' section: {e}") from e

        return config.validate()

    def get_config(self) -> FilterConfig:
        """
        Get parsed filter configuration.

        Returns:
            FilterConfig, or library defaults if nothing was loaded
        """
        return self._config if self._config is not None else FilterConfig()

    def get_log_level(self) -> str:
        """Get the configured logging level name (default INFO)."""
        section = self.data.get("logging") or {}
        if not isinstance(section, dict):
            raise InvalidConfiguration("'logging' section must be a mapping")
        level = str(section.get("level", "INFO")).upper()
        if level not in LOG_LEVELS:
            raise InvalidConfiguration(f"Unknown logging level: {level}")
        return level


def load_filter_config(filepath: str) -> FilterConfig:
    """Load a FilterConfig from a YAML file."""
    return ConfigLoader(filepath).get_config()
