"""diskfs configuration."""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from diskfs.common.constants import CONFIG_DIR_NAME, CONFIG_ENV_VAR, ENV_PREFIX, LOG_FORMAT, LOGGER_NAME

logger = logging.getLogger("diskfs.config")


class FilesystemSettings(BaseSettings):
    """Filesystem settings loaded from environment or config file."""

    prefix: str = Field("", description="Root prefix for relative paths (empty = working directory)")
    backend: Literal["auto", "stream", "raw"] = Field(
        "auto", description="File handle backend: auto (platform default), stream, raw"
    )
    log_level: str = Field("INFO", description="Level of the 'diskfs' logger")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)


def _parse_yaml_to_settings_dict(config: dict) -> dict:
    """Convert a parsed YAML config dict into a flat settings dict."""
    d: dict = {}

    if "filesystem" in config:
        fs = config["filesystem"] or {}
        if "prefix" in fs:
            d["prefix"] = "" if fs["prefix"] is None else str(fs["prefix"])
        if "backend" in fs:
            d["backend"] = fs["backend"]
    if "logging" in config:
        lg = config["logging"] or {}
        if "level" in lg:
            d["log_level"] = lg["level"]

    return d


def _apply_env_overrides(settings_dict: dict) -> None:
    """Let environment variables win over values read from the config file (in-place)."""
    for field in ("prefix", "backend", "log_level"):
        value = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
        if value is not None:
            settings_dict[field] = value


# ── Config file auto-discovery ────────────────────────────────

# Paths searched in order when no explicit config is given.
_CONFIG_SEARCH_PATHS = [
    Path("./diskfs.yaml"),
    Path("./config/diskfs.yaml"),
    Path.home() / CONFIG_DIR_NAME / "config.yaml",
]


def discover_config_path() -> Optional[Path]:
    """Find a config file using auto-discovery.

    Search order:
      1. ``$DISKFS_CONFIG`` environment variable
      2. ``./diskfs.yaml``
      3. ``./config/diskfs.yaml``
      4. ``~/.diskfs/config.yaml``

    Returns:
        Path to the discovered config file, or None.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR, "")
    if env_path:
        p = Path(env_path)
        if p.exists():
            return p
        logger.warning("$%s=%s does not exist", CONFIG_ENV_VAR, env_path)

    for candidate in _CONFIG_SEARCH_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_settings(config_path: Optional[Path] = None) -> FilesystemSettings:
    """Load settings from config file + environment variables.

    Args:
        config_path: Explicit path to config file.  When ``None``,
            auto-discovery is used (see :func:`discover_config_path`).

    Returns:
        The merged FilesystemSettings.
    """
    import yaml

    resolved_path = config_path
    if resolved_path is None:
        resolved_path = discover_config_path()

    settings_dict: dict = {}

    if resolved_path and resolved_path.exists():
        with open(resolved_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        settings_dict = _parse_yaml_to_settings_dict(config)
        logger.info("Loaded config from %s", resolved_path.resolve())
    else:
        logger.info("No config file found, using defaults + environment variables")

    _apply_env_overrides(settings_dict)
    return FilesystemSettings(**settings_dict)


def configure_logging(level: str = "INFO") -> None:
    """Set the level of the diskfs loggers, installing a root handler if none exists."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger(LOGGER_NAME).setLevel(numeric_level)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
