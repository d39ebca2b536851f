"""Gerber export configuration loading and validation."""

from gerber_cam.configs.loader import (
    ApertureConfig,
    ConfigError,
    GenerationSoftwareConfig,
    GerberConfig,
    LoggingConfig,
    OutputConfig,
    default_config,
    load_config,
)

__all__ = [
    "ApertureConfig",
    "ConfigError",
    "GenerationSoftwareConfig",
    "GerberConfig",
    "LoggingConfig",
    "OutputConfig",
    "default_config",
    "load_config",
]
