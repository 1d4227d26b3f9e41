"""
Default configuration values for varsu.

Centralized defaults that are not part of the validated settings models:
editor integration constants, the log record format and the environment
overrides applied to schema config files.
"""

from typing import Any, Dict

# Editor settings section holding sourceUrl and themes
SETTINGS_SECTION = "varsu"

# Global default settings
DEFAULT_SETTINGS = {
    # Editor integration
    "editor": {
        "completion_trigger_characters": ["(", "-"]
    },

    # Logging
    "logging": {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    }
}

# Environment overrides for schema config files (dot paths into the config)
ENV_VAR_MAPPING = {
    'VARSU_SOURCE_URL': 'sourceUrl',
    'VARSU_THEMES': 'themes'
}


def get_default_schema_config() -> Dict[str, Any]:
    """Get default schema configuration template"""
    return {
        'themes': []
    }
