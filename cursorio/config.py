"""cursorio configuration."""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cursorio.common.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_ENCODING,
    DEFAULT_FILE_MODE,
    DEFAULT_READ_FLAGS,
    DEFAULT_STRING_ERRORS,
    DEFAULT_WRITE_FLAGS,
)
from cursorio.common.fileutil import parse_flags

logger = logging.getLogger("cursorio.config")


class IOSettings(BaseSettings):
    """Handle defaults loaded from environment or config file."""

    model_config = SettingsConfigDict(env_prefix="CURSORIO_")

    # Open modes
    read_flags: str = Field(DEFAULT_READ_FLAGS, description="Default open mode for readers")
    write_flags: str = Field(DEFAULT_WRITE_FLAGS, description="Default open mode for writers")
    file_mode: int = Field(DEFAULT_FILE_MODE, description="Permission bits used when a file is created")

    # Text
    encoding: str = Field(DEFAULT_ENCODING, description="Default text encoding for read_string / write_string")
    string_errors: str = Field(DEFAULT_STRING_ERRORS, description="Codec error handler: strict, replace, ignore...")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "WARNING", description="Level of the 'cursorio' logger"
    )

    @field_validator("read_flags", "write_flags")
    @classmethod
    def _known_flags(cls, value: str) -> str:
        parse_flags(value)
        return value

    @field_validator("file_mode", mode="before")
    @classmethod
    def _octal_mode(cls, value: object) -> object:
        # "0o644" / "644" from YAML or the environment are octal
        if isinstance(value, str):
            return int(value, 8)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


def _parse_yaml_to_settings_dict(config: dict) -> dict:
    """Convert a parsed YAML config dict into a flat settings dict."""
    d: dict = {}

    io = config.get("io") or {}
    if "read_flags" in io:
        d["read_flags"] = io["read_flags"]
    if "write_flags" in io:
        d["write_flags"] = io["write_flags"]
    if "file_mode" in io:
        d["file_mode"] = io["file_mode"]

    text = config.get("text") or {}
    if "encoding" in text:
        d["encoding"] = text["encoding"]
    if "errors" in text:
        d["string_errors"] = text["errors"]

    log = config.get("logging") or {}
    if "level" in log:
        d["log_level"] = log["level"]

    return d


def _apply_env_overrides(settings_dict: dict) -> None:
    """Drop file values that an environment variable overrides (in-place).

    Init kwargs outrank the environment in pydantic-settings, so the file
    values must be removed for ``CURSORIO_*`` variables to win.
    """
    for field in list(settings_dict):
        if f"CURSORIO_{field.upper()}" in os.environ:
            del settings_dict[field]


# ── Config file auto-discovery ────────────────────────────────

# Paths searched in order when no explicit config is given.
_CONFIG_SEARCH_PATHS = [
    Path("./cursorio.yaml"),
    Path.home() / ".cursorio" / "config.yaml",
]


def discover_config_path() -> Optional[Path]:
    """Find a config file using auto-discovery.

    Search order:
      1. ``$CURSORIO_CONFIG`` environment variable
      2. ``./cursorio.yaml``
      3. ``~/.cursorio/config.yaml``

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


def load_settings(config_path: Optional[Path] = None) -> IOSettings:
    """Load settings from config file + environment variables.

    Args:
        config_path: Explicit path to config file.  When ``None``,
            auto-discovery is used (see :func:`discover_config_path`).

    Returns:
        The loaded IOSettings.
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
        logger.debug("No config file found, using defaults + environment variables")

    _apply_env_overrides(settings_dict)
    return IOSettings(**settings_dict)


_settings: Optional[IOSettings] = None


def get_settings() -> IOSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next :func:`get_settings` reloads them."""
    global _settings
    _settings = None


def configure_logging(settings: IOSettings) -> None:
    """Apply the configured level to the ``cursorio`` logger."""
    numeric_level = getattr(logging, settings.log_level, logging.WARNING)
    logging.getLogger("cursorio").setLevel(numeric_level)
    # Also set root handler if none configured
    if not logging.getLogger().handlers:
        logging.basicConfig(level=numeric_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
