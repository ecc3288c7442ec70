"""Configuration manager with YAML override support."""

import copy
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from . import defaults

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager with YAML override support."""

    def __init__(self, config_file: Optional[Path] = None):
        self.settings = self.load_defaults()
        self.source_file: Optional[Path] = None

        if config_file is not None:
            # Explicit files are always honoured, also under pytest
            self.load_file(Path(config_file))
        elif not self._is_test_mode():
            discovered = self._find_config_file()
            if discovered is not None:
                self.load_file(discovered)
            else:
                logger.debug("No config.yml found - using defaults only")
        else:
            logger.debug("Test mode detected - ignoring discovered config.yml")

    def _find_config_file(self) -> Optional[Path]:
        """Find config.yml with multiple fallback locations."""
        potential_locations = [
            Path.cwd() / 'config.yml',
            defaults.PROJECT_ROOT / 'config.yml',
            Path.home() / '.listing_grid' / 'config.yml',
        ]

        for location in potential_locations:
            if location.exists() and location.is_file():
                return location

        return None

    def _is_test_mode(self) -> bool:
        """Detect if we're running under the test suite."""
        return (
            os.environ.get('FORCE_TEST_MODE', 'false').lower() == 'true' or
            os.environ.get('PYTEST_CURRENT_TEST') is not None
        )

    def load_defaults(self) -> Dict[str, Any]:
        """Load default configuration settings."""
        return {
            'paths': copy.deepcopy(defaults.PATHS),
            'grid': copy.deepcopy(defaults.GRID),
            'listings': copy.deepcopy(defaults.LISTINGS),
            'aggregation': copy.deepcopy(defaults.AGGREGATION),
            'output': copy.deepcopy(defaults.OUTPUT),
            'logging': copy.deepcopy(defaults.LOGGING),
        }

    def load_file(self, config_file: Path):
        """Load and merge configuration from a YAML file.

        Args:
            config_file: Path to a YAML document

        Raises:
            FileNotFoundError: If the file does not exist
            yaml.YAMLError: If the file is not valid YAML
        """
        with open(config_file, 'r', encoding='utf-8') as file:
            yaml_config = yaml.safe_load(file)

        if yaml_config:
            if not isinstance(yaml_config, dict):
                raise ValueError(f"Config file {config_file} must contain a mapping")
            self._deep_merge(self.settings, yaml_config)

        self.source_file = config_file
        logger.info(f"Loaded configuration from {config_file}")

    def _deep_merge(self, base: dict, override: dict):
        """Deep merge override into base dictionary."""
        for key, value in override.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any):
        """Set configuration value using dot notation."""
        keys = key.split(".")
        target = self.settings
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value

    @property
    def paths(self) -> Dict[str, Any]:
        return self.settings['paths']

    @property
    def grid(self) -> Dict[str, Any]:
        return self.settings['grid']

    @property
    def listings(self) -> Dict[str, Any]:
        return self.settings['listings']

    @property
    def aggregation(self) -> Dict[str, Any]:
        return self.settings['aggregation']

    @property
    def output(self) -> Dict[str, Any]:
        return self.settings['output']

    @property
    def logging(self) -> Dict[str, Any]:
        return self.settings['logging']


# Global configuration instance
config = Config()
