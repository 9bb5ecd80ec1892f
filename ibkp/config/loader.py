"""YAML configuration loading, parsing, and validation."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from ..errors import ConfigError
from .protocol import Config

logger = logging.getLogger(__name__)


def find_config_file(config_path: str | None = None) -> Path | None:
    """Find the configuration file using search order.

    Order: explicit path > XDG_CONFIG_HOME > /etc/ibkp/

    Returns None when no implicit location holds a config file;
    an explicit path that does not exist is an error.
    """
    if config_path is not None:
        p = Path(config_path)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        else:
            return p
    else:
        xdg = os.environ.get(
            "XDG_CONFIG_HOME",
            os.path.expanduser("~/.config"),
        )
        xdg_path = Path(xdg) / "ibkp" / "config.yaml"
        etc_path = Path("/etc/ibkp/config.yaml")
        if xdg_path.is_file():
            return xdg_path
        elif etc_path.is_file():
            return etc_path
        else:
            return None


def load_config(config_path: str | None = None) -> Config:
    """Load and validate configuration, falling back to defaults."""
    path = find_config_file(config_path)
    if path is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Loading config from %s", path)
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if raw is None:
        return Config()
    elif not isinstance(raw, dict):
        raise ConfigError("Config file must be a YAML mapping")
    else:
        try:
            config = Config.model_validate(raw)
        except Exception as e:
            raise ConfigError(str(e)) from e
        return config
