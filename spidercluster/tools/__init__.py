"""Spider options and configuration profiles."""

from .options import OPTION_NAMES, SpiderClusterOptions
from .config_loader import ConfigLoader, load_options

__all__ = [
    "OPTION_NAMES",
    "SpiderClusterOptions",
    "ConfigLoader",
    "load_options",
]
