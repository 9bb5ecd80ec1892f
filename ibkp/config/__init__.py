"""Configuration types and loading."""

from ..errors import ConfigError
from .loader import find_config_file, load_config
from .protocol import Config, RsyncOptions

__all__ = [
    "Config",
    "ConfigError",
    "RsyncOptions",
    "find_config_file",
    "load_config",
]
