"""Configuration loading and validation."""

from projector_mapping.config.config_manager import ConfigManager
from projector_mapping.config.loader import load_config_file

__all__ = [
    "ConfigManager",
    "load_config_file",
]
