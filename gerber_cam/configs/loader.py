"""Configuration loader for Gerber export.

Loads and validates ``gerber.yaml`` into typed, frozen dataclasses.
Only identity and housekeeping values live in the config; the coordinate
format, units and checksum rule are fixed by the file format and stay in
the generator.

Usage::

    from gerber_cam.configs.loader import load_config
    cfg = load_config()                      # default path
    cfg = load_config("/custom/gerber.yaml") # explicit path
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gerber_cam.utils.fs import load_yaml

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerationSoftwareConfig:
    """Values of the ``%TF.GenerationSoftware`` attribute."""

    vendor: str
    application: str
    version: str


@dataclass(frozen=True)
class ApertureConfig:
    """Aperture registry settings."""

    base_code: int = 10


@dataclass(frozen=True)
class OutputConfig:
    """File-level output settings.

    Parameters
    ----------
    part : str
        Value of the ``%TF.Part`` attribute.
    encoding : str
        Codec used when writing the file.  Must be single-byte.
    """

    part: str = "Single"
    encoding: str = "latin-1"


@dataclass(frozen=True)
class LoggingConfig:
    """Arguments for ``setup_logging`` in the CLI."""

    level: str = "INFO"
    file: str | None = None
    json: bool = False
    color: bool = True


@dataclass(frozen=True)
class GerberConfig:
    """Complete export configuration loaded from ``gerber.yaml``."""

    generation_software: GenerationSoftwareConfig
    apertures: ApertureConfig
    output: OutputConfig
    logging: LoggingConfig


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _is_single_byte(encoding: str) -> bool:
    try:
        codecs.lookup(encoding)
    except LookupError:
        return False
    sample = "".join(chr(i) for i in range(32, 127)) + "\xe9\xb0"
    return len(sample.encode(encoding, errors="replace")) == len(sample)


def _validate_config(cfg: GerberConfig) -> None:
    if cfg.apertures.base_code < 10:
        raise ConfigError(
            f"apertures.base_code must be >= 10 (D00-D09 are reserved), "
            f"got {cfg.apertures.base_code}"
        )
    if not _is_single_byte(cfg.output.encoding):
        raise ConfigError(
            f"output.encoding must be a single-byte codec, "
            f"got {cfg.output.encoding!r}"
        )
    if cfg.logging.level.upper() not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {_LOG_LEVELS}, got {cfg.logging.level!r}"
        )
    sw = cfg.generation_software
    for name, value in (
        ("vendor", sw.vendor),
        ("application", sw.application),
        ("version", sw.version),
    ):
        # Attribute fields are comma separated
        if not value or "," in value or "*" in value or "%" in value:
            raise ConfigError(
                f"generation_software.{name} must be non-empty without "
                f"',', '*' or '%', got {value!r}"
            )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def default_config() -> GerberConfig:
    """Built-in configuration, identical to the shipped ``gerber.yaml``."""
    from gerber_cam import __version__

    return GerberConfig(
        generation_software=GenerationSoftwareConfig(
            vendor="gerber_cam", application="gerber_cam", version=__version__,
        ),
        apertures=ApertureConfig(),
        output=OutputConfig(),
        logging=LoggingConfig(),
    )


def load_config(path: str | Path | None = None) -> GerberConfig:
    """Load and validate export configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``gerber.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    GerberConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation, or the file is not valid YAML.
    FileNotFoundError
        If *path* does not exist.
    """
    from gerber_cam import __version__

    if path is None:
        path = Path(__file__).parent / "gerber.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(str(exc)) from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")

    try:
        # -- generation software --------------------------------------------
        sw = data["generation_software"]
        version = sw.get("version")
        generation_software = GenerationSoftwareConfig(
            vendor=str(sw["vendor"]),
            application=str(sw["application"]),
            version=str(version) if version is not None else __version__,
        )

        # -- apertures ------------------------------------------------------
        ap = data.get("apertures", {})
        apertures = ApertureConfig(base_code=int(ap.get("base_code", 10)))

        # -- output ---------------------------------------------------------
        out = data.get("output", {})
        output = OutputConfig(
            part=str(out.get("part", "Single")),
            encoding=str(out.get("encoding", "latin-1")),
        )

        # -- logging --------------------------------------------------------
        lg = data.get("logging", {})
        log_file = lg.get("file")
        logging_cfg = LoggingConfig(
            level=str(lg.get("level", "INFO")),
            file=str(log_file) if log_file is not None else None,
            json=bool(lg.get("json", False)),
            color=bool(lg.get("color", True)),
        )
    except KeyError as exc:
        raise ConfigError(f"Missing required config key: {exc}") from exc
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    cfg = GerberConfig(
        generation_software=generation_software,
        apertures=apertures,
        output=output,
        logging=logging_cfg,
    )
    _validate_config(cfg)
    return cfg
