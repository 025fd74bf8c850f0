"""Configuration loading for CrowdFrame."""

from pathlib import Path

import yaml

from crowdframe.config.schema import (
    ClientConfig,
    CollectionConfig,
    CrowdFrameConfig,
    LoggingConfig,
    OutputConfig,
)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yml")


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> CrowdFrameConfig:
    """Load configuration from a YAML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the config file is invalid YAML
        pydantic.ValidationError: If the config data is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    return CrowdFrameConfig(**config_data)


__all__ = [
    "ClientConfig",
    "CollectionConfig",
    "CrowdFrameConfig",
    "DEFAULT_CONFIG_PATH",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
]
