"""
Configuration loader — reads config.yml into a Settings model.

The file is optional: with no file every setting takes its default.
Lookup order for the file:

    --config PATH  >  $BREWDECK_CONFIG  >  $XDG_CONFIG_HOME/brewdeck/config.yml

Environment overrides (applied after the file):
    BREWDECK_BREW       path to the brew binary
    BREWDECK_CACHE_DIR  directory holding the dataset cache files
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yml"
APP_DIR = "brewdeck"

FORMULA_URL = "https://formulae.brew.sh/api/formula.json"
CASK_URL = "https://formulae.brew.sh/api/cask.json"

# Apple Silicon prefix; Intel and Linuxbrew installs are found on PATH
DEFAULT_BREW = "/opt/homebrew/bin/brew"

_ENV_OVERRIDES = {
    "BREWDECK_BREW": "brew_path",
    "BREWDECK_CACHE_DIR": "cache_dir",
}


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


def _default_brew_path() -> str:
    if Path(DEFAULT_BREW).is_file():
        return DEFAULT_BREW
    return shutil.which("brew") or DEFAULT_BREW


def _default_cache_dir() -> Path:
    base = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(base) / APP_DIR


class Settings(BaseModel):
    """Runtime settings for every surface (CLI and web)."""

    brew_path: str = Field(default_factory=_default_brew_path)
    cache_dir: Path = Field(default_factory=_default_cache_dir)
    formula_url: str = FORMULA_URL
    cask_url: str = CASK_URL
    page_size: int = Field(default=50, ge=1)
    # Seconds per brew command; None waits for brew to finish
    brew_timeout: int | None = Field(default=None, ge=1)


def default_config_path() -> Path:
    """Where the config file lives when nothing points elsewhere."""
    explicit = os.environ.get("BREWDECK_CONFIG")
    if explicit:
        return Path(explicit)
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_DIR / CONFIG_FILE


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from YAML plus environment overrides.

    Args:
        path: Explicit config file. Must exist when given.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If an explicit file is missing, or any file holds
            invalid YAML or invalid values.
    """
    data: dict = {}

    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    config_path = path or default_config_path()
    if config_path.is_file():
        data = _read_yaml(config_path)
    else:
        logger.debug("No config file at %s — using defaults", config_path)

    for env_key, field in _ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            data[field] = value

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug("Settings: brew=%s cache=%s", settings.brew_path, settings.cache_dir)
    return settings


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading config from %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data
