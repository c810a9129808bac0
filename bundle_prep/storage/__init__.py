"""
Storage Layer.

This package handles all filesystem work: the INI configuration file and the
bundle folders created by acquisition jobs.
"""

from . import folders
from .config_manager import ConfigManager

__all__ = ["ConfigManager", "folders"]
