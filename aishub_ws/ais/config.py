"""AIS source configuration management.

Handles loading AIS source configuration from YAML files
and creating appropriate adapters based on environment.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from aishub_ws.ais.adapters.base import AISDataAdapter
from aishub_ws.ais.geo import box_size_or_default
from aishub_ws.config import Settings, get_settings

logger = logging.getLogger(__name__)

# AisHub rejects clients polling more often than once a minute
MIN_UPDATE_RATE_SECONDS = 61

# Configuration file path (relative to project root)
CONFIG_FILE_PATH = "config/aishub.yaml"


class AISConfigError(Exception):
    """Exception raised when AIS configuration loading fails."""

    pass


def _substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in string values.

    Supports ${VAR_NAME} syntax.

    Args:
        value: Value to process

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        return os.getenv(env_var, "")
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


def normalize_update_rate(rate: Optional[float]) -> int:
    """Clamp the polling interval to what AisHub accepts.

    Unset rates and rates of 60 seconds or less become 61 seconds.
    """
    if not rate or rate <= 60:
        return MIN_UPDATE_RATE_SECONDS
    return int(rate)


def normalize_box_size(box_size: Optional[float]) -> float:
    """Unset, non-finite, zero or negative box sizes fall back to 10 km."""
    return box_size_or_default(box_size)


def get_default_config(settings: Optional[Settings] = None) -> dict[str, Any]:
    """Get default AIS configuration from application settings.

    Returns:
        Default configuration dictionary
    """
    settings = settings or get_settings()

    return {
        "source": {
            "name": "AisHub",
            "type": "aishub",
            "enabled": True,
            "config": {
                "apikey": settings.aishub_api_key,
                "url": settings.aishub_url,
                "timeout_seconds": settings.aishub_timeout,
            },
        },
        "update_rate": settings.aishub_update_rate,
        "box_size": settings.aishub_box_size,
    }


def load_config(
    config_file: Optional[str] = None,
    environment: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> dict[str, Any]:
    """Load AIS configuration for specified environment.

    Args:
        config_file: Path to YAML config file (optional)
        environment: Environment name (development, testing, staging, production)
        settings: Settings providing the defaults

    Returns:
        Configuration dictionary for the environment

    Raises:
        AISConfigError: If configuration loading fails
    """
    settings = settings or get_settings()

    if environment is None:
        environment = settings.environment

    logger.info(f"Loading AIS configuration for environment: {environment}")

    defaults = get_default_config(settings)

    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    all_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.error(f"Failed to parse config file: {e}")
                raise AISConfigError(f"Invalid YAML in config file: {e}")

            if environment in all_config:
                config = _substitute_env_vars(all_config[environment]) or {}
                logger.info(f"Loaded configuration from {config_file}")
                return {**defaults, **config}

            logger.warning(
                f"Environment '{environment}' not found in {config_file}, "
                f"using defaults"
            )
        else:
            logger.warning(f"Config file {config_file} not found, using defaults")

    return defaults


def create_adapter(
    adapter_type: str,
    config: dict[str, Any],
) -> AISDataAdapter:
    """Factory function to create appropriate adapter.

    Args:
        adapter_type: Type of adapter ('aishub', 'file')
        config: Adapter configuration

    Returns:
        Initialized AISDataAdapter

    Raises:
        AISConfigError: If adapter type is unknown
    """
    adapter_type = adapter_type.lower()

    # Lazy imports to avoid circular imports
    if adapter_type == "aishub":
        from aishub_ws.ais.adapters.aishub import AISHubAdapter
        return AISHubAdapter(config)
    elif adapter_type == "file":
        from aishub_ws.ais.adapters.file import FileAdapter
        return FileAdapter(config)
    else:
        raise AISConfigError(f"Unknown adapter type: {adapter_type}")


def create_adapter_from_config(source_config: dict[str, Any]) -> AISDataAdapter:
    """Create the adapter described by a ``source`` configuration block.

    Raises:
        AISConfigError: If the source is missing, disabled or of unknown type
    """
    if not source_config:
        raise AISConfigError("No AIS source configured")

    if not source_config.get("enabled", True):
        raise AISConfigError(f"AIS source is disabled: {source_config.get('name')}")

    adapter_type = source_config.get("type", "")
    adapter_config = dict(source_config.get("config") or {})
    adapter_config["name"] = source_config.get("name", adapter_type)
    adapter_config["enabled"] = True

    adapter = create_adapter(adapter_type, adapter_config)
    logger.info(f"Created adapter: {adapter.name} ({adapter_type})")
    return adapter


def get_config_file_path() -> Path:
    """Get the path to the AIS configuration file.

    Returns:
        Path to config file
    """
    # Try relative to current directory first
    config_path = Path(CONFIG_FILE_PATH)
    if config_path.exists():
        return config_path

    # Try relative to project root
    project_config = Path(__file__).parent.parent.parent / CONFIG_FILE_PATH
    if project_config.exists():
        return project_config

    # Return default path even if it doesn't exist
    return config_path
