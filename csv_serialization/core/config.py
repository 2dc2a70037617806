"""Configuration management for the CSV serialization library."""

import dataclasses
import logging
import os
import yaml
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from csv_serialization.core.exceptions import ConfigurationError
from csv_serialization.core.models import CsvOptions


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"


class Config:
    """Configuration manager for serializer options and logging."""

    def __init__(self, config_path: Optional[str] = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file; None uses defaults only
        """
        load_dotenv()  # Load environment variables from .env file
        self.config_path = config_path
        self._config = self._load_config() if config_path else {}

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration: {e}")

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration must be a mapping: {self.config_path}")

        logger.debug(f"Loaded configuration from {self.config_path}")
        return self._process_env_variables(config)

    def _process_env_variables(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Process environment variable placeholders in configuration."""
        def process_value(value):
            if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                env_var = value[2:-1]
                env_value = os.getenv(env_var)
                if env_value is None:
                    raise ConfigurationError(f"Environment variable not set: {env_var}")
                return env_value
            elif isinstance(value, dict):
                return {k: process_value(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [process_value(item) for item in value]
            return value

        return process_value(config)  # type: ignore

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated key path (e.g., 'csv.separator')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def csv_config(self) -> Dict[str, Any]:
        """Get csv serializer configuration section."""
        return self._config.get('csv') or {}

    @property
    def logging_config(self) -> Dict[str, Any]:
        """Get logging configuration section."""
        return self._config.get('logging') or {}

    def get_all(self) -> Dict[str, Any]:
        """Get entire configuration as dictionary.

        Returns:
            Complete configuration dictionary
        """
        return self._config.copy()

    def build_options(self) -> CsvOptions:
        """Build serializer options from the csv section.

        Returns:
            CsvOptions with configured values over the defaults

        Raises:
            ConfigurationError: If the section holds unknown keys
        """
        known = {f.name for f in dataclasses.fields(CsvOptions)}
        unknown = sorted(set(self.csv_config) - known)
        if unknown:
            raise ConfigurationError(f"Unknown csv configuration keys: {unknown}")
        return CsvOptions(**self.csv_config)

    def validate(self) -> bool:
        """Validate configuration completeness.

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        options = self.build_options()

        if not isinstance(options.separator, str) or len(options.separator) != 1:
            raise ConfigurationError("Separator must be a single character")

        for name in ('newline_replacement', 'separator_replacement'):
            token = getattr(options, name)
            if not isinstance(token, str) or not token:
                raise ConfigurationError(f"{name} must be a non-empty string")
            if options.separator in token:
                raise ConfigurationError(f"{name} must not contain the separator")

        if options.newline_replacement == options.separator_replacement:
            raise ConfigurationError("Newline and separator replacements must differ")

        if options.max_workers is not None and options.max_workers <= 0:
            raise ConfigurationError("max_workers must be positive")

        level = self.logging_config.get('level', 'INFO')
        if not isinstance(getattr(logging, str(level).upper(), None), int):
            raise ConfigurationError(f"Unknown logging level: {level}")

        return True
