"""
Storage Layer.

This package handles configuration persistence.
"""

from .config_manager import ConfigManager, get_config_dir

__all__ = ["ConfigManager", "get_config_dir"]
