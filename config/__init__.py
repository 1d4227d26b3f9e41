"""
Configuration management for varsu

Handles defaults, environment overrides and loading of workspace schema
configurations.
"""

from .loader import ConfigurationLoader, ConfigurationError
from .defaults import DEFAULT_SETTINGS, SETTINGS_SECTION

__all__ = ["ConfigurationLoader", "ConfigurationError", "DEFAULT_SETTINGS", "SETTINGS_SECTION"]
