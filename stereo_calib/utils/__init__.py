"""Utility modules."""

from .config_loader import ConfigLoader, load_config
from .logger import setup_logger, get_logger
from .yaml_io import read_yaml, write_yaml

__all__ = [
    "ConfigLoader",
    "load_config",
    "setup_logger",
    "get_logger",
    "read_yaml",
    "write_yaml",
]
