"""Configuration Management with Pydantic.

This module implements configuration models using Pydantic for parsing and
validation of YAML configuration files with environment variable overrides.
"""

import copy
import os
import threading
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

from dag.log_config import configure_logging

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILES = ("dag.yaml", "dag.yml")
TRUE_VALUES = ("true", "1", "yes")


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render log entries as JSON instead of console output
    """

    level: str = Field(
        default="INFO",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lower-case level names.

        Args:
            v: The raw level value

        Returns:
            The upper-cased level if v is a string, v unchanged otherwise
        """
        if isinstance(v, str):
            return v.strip().upper()
        return v


class DagConfig(BaseModel):
    """Top-level configuration.

    Attributes:
        logging: Logging configuration
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "DagConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed and validated DagConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If the file is empty, not valid YAML, or fails validation
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e

        if not config_data:
            msg = "Configuration file is empty"
            raise ValueError(msg)

        if not isinstance(config_data, dict):
            msg = "Configuration file must contain a mapping"
            raise ValueError(msg)

        config = cls.from_dict(config_data)

        logger.info(
            "configuration_loaded",
            logging_level=config.logging.level,
            json_logs=config.logging.json_logs,
        )

        return config

    @classmethod
    def from_dict(cls, config_data: dict) -> "DagConfig":
        """Build a configuration from a dictionary, applying environment overrides.

        The input dictionary is left unchanged.

        Raises:
            ValueError: If an overridden section is not a mapping
        """
        return cls(**cls._apply_env_overrides(copy.deepcopy(config_data)))

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: DAG_<SECTION>_<KEY>

        Args:
            config_data: Base configuration dictionary

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            ("logging", "level"): "DAG_LOGGING_LEVEL",
            ("logging", "json_logs"): "DAG_LOGGING_JSON",
        }

        for path, env_var in env_overrides.items():
            value: str | bool | None = os.environ.get(env_var)
            if value is None:
                continue

            current = config_data
            for key in path[:-1]:
                current = current.setdefault(key, {})
                if not isinstance(current, dict):
                    msg = f"Configuration section '{key}' must be a mapping"
                    raise ValueError(msg)

            if env_var.endswith("_JSON"):
                value = value.lower() in TRUE_VALUES

            current[path[-1]] = value
            logger.debug(
                "env_override_applied",
                env_var=env_var,
                config_path=".".join(path),
            )

        return config_data

    def validate_config(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of validation warning messages (empty if no warnings)
        """
        warnings = []

        if self.logging.level == "DEBUG":
            warnings.append(
                "DEBUG logging records every graph mutation - expect verbose output",
            )

        if self.logging.level in ("ERROR", "CRITICAL"):
            warnings.append(
                f"Logging level {self.logging.level} hides cycle and lookup warnings",
            )

        return warnings

    def configure(self) -> None:
        """Apply the logging section of this configuration."""
        configure_logging(level=self.logging.level, json_logs=self.logging.json_logs)


class ConfigManager:
    """Configuration manager using singleton pattern."""

    _instance: DagConfig | None = None
    _init_lock: threading.Lock = threading.Lock()

    @classmethod
    def load_config(cls, config_path: str | Path | None = None) -> DagConfig:
        """Load configuration from file.

        Args:
            config_path: Path to configuration file. If None, looks for dag.yaml or
                        dag.yml in the current directory and falls back to defaults.

        Returns:
            Loaded DagConfig instance

        Raises:
            FileNotFoundError: If an explicit config_path does not exist
            ValueError: If the config file is invalid
        """
        if config_path is None:
            for default_name in DEFAULT_CONFIG_FILES:
                default_path = Path(default_name)
                if default_path.exists():
                    config_path = default_path
                    break
            else:
                logger.debug("no_configuration_file_found", using="defaults")
                return DagConfig.from_dict({})

        return DagConfig.from_yaml(config_path)

    @classmethod
    def get_config(
        cls,
        config_path: str | Path | None = None,
        reload: bool = False,
    ) -> DagConfig:
        """Get configuration instance (singleton pattern).

        Uses double-checked locking so that concurrent first calls load the
        configuration only once.

        Args:
            config_path: Path to configuration file. Only used on first call or when reload=True.
            reload: If True, force reload configuration from file.

        Returns:
            DagConfig instance
        """
        if cls._instance is not None and not reload:
            return cls._instance

        with cls._init_lock:
            if cls._instance is None or reload:
                cls._instance = cls.load_config(config_path)

            return cls._instance

    @classmethod
    def reset_config(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


def load_config(config_path: str | Path | None = None) -> DagConfig:
    """Load configuration from file."""
    return ConfigManager.load_config(config_path)


def get_config(config_path: str | Path | None = None, reload: bool = False) -> DagConfig:
    """Get configuration instance (singleton pattern)."""
    return ConfigManager.get_config(config_path, reload)


def reset_config() -> None:
    """Reset the configuration instance."""
    ConfigManager.reset_config()


__all__ = [
    "ConfigManager",
    "DagConfig",
    "LoggingConfig",
    "get_config",
    "load_config",
    "reset_config",
]
