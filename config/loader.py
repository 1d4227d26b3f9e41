"""
Configuration loading for CSS variable schemas.

Builds validated SchemaConfig objects from editor settings or JSON config
files, applies environment overrides and loads many workspaces at once.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union
import logging

from pydantic import ValidationError

from core.models.config import SchemaConfig
from .defaults import SETTINGS_SECTION, ENV_VAR_MAPPING, get_default_schema_config

logger = logging.getLogger(__name__)

SettingsFetcher = Callable[[str], Awaitable[Any]]


class ConfigurationError(ValueError):
    """Settings are missing or invalid"""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class ConfigurationLoader:
    """Load and validate schema configurations"""

    def __init__(self, section: str = SETTINGS_SECTION):
        self.section = section
        self.config_cache: Dict[str, SchemaConfig] = {}

    def from_settings(
        self,
        settings: Optional[Mapping[str, Any]],
        source: Optional[str] = None
    ) -> SchemaConfig:
        """
        Build a SchemaConfig from an editor settings object.

        Accepts the section content (`{"sourceUrl": ..., "themes": ...}`),
        the section nested under its name, or flat `varsu.`-prefixed keys.

        Raises:
            ConfigurationError: settings are null or fail validation
        """
        if settings is None:
            raise ConfigurationError(f"configuration for \"{source}\" is null", source)

        data = get_default_schema_config()
        data.update(self._unwrap_section(settings))
        return self._validate(data, source)

    def load_file(self, config_file: Union[str, Path]) -> SchemaConfig:
        """Load a JSON config file, with environment overrides applied"""
        config_file = Path(config_file).resolve()

        cache_key = str(config_file)
        if cache_key in self.config_cache:
            return self.config_cache[cache_key]

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                settings = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to read config from {config_file}: {e}", cache_key) from e

        if not isinstance(settings, dict):
            raise ConfigurationError(f"Config file {config_file} must contain a JSON object", cache_key)

        data = get_default_schema_config()
        data.update(self._unwrap_section(settings))
        data = self._apply_env_overrides(data)

        config = self._validate(data, cache_key)
        self.config_cache[cache_key] = config
        return config

    async def load_many(
        self,
        fetch_settings: SettingsFetcher,
        sources: List[str]
    ) -> Tuple[Dict[str, SchemaConfig], Dict[str, Exception]]:
        """
        Fetch and validate settings for several sources concurrently.

        One failing source never prevents the others from loading; each
        failure is logged as a warning.

        Args:
            fetch_settings: Coroutine function returning raw settings for a source
            sources: Source keys (workspace URIs)

        Returns:
            (configs by source, failures by source)
        """
        results = await asyncio.gather(
            *(fetch_settings(source) for source in sources),
            return_exceptions=True
        )

        configs: Dict[str, SchemaConfig] = {}
        failures: Dict[str, Exception] = {}

        for source, result in zip(sources, results):
            if isinstance(result, asyncio.CancelledError):
                raise result

            try:
                if isinstance(result, Exception):
                    raise ConfigurationError(
                        f"settings request failed: {result}", source
                    ) from result
                configs[source] = self.from_settings(result, source)
            except ConfigurationError as e:
                failures[source] = e
                logger.warning(f"Failed to load configuration from \"{source}\": {e}")

        return configs, failures

    def _unwrap_section(self, settings: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the section content whatever shape the settings come in"""
        nested = settings.get(self.section)
        if isinstance(nested, Mapping):
            return dict(nested)

        prefix = f"{self.section}."
        if any(key.startswith(prefix) for key in settings):
            return {
                key[len(prefix):]: value
                for key, value in settings.items()
                if key.startswith(prefix)
            }

        return dict(settings)

    def _validate(self, data: Dict[str, Any], source: Optional[str]) -> SchemaConfig:
        try:
            return SchemaConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {self.section} configuration: {e}", source) from e

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration"""
        for env_var, config_path in ENV_VAR_MAPPING.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                self._set_nested_value(config_data, config_path, env_value)

        return config_data

    def _set_nested_value(self, data: Dict[str, Any], path: str, value: str) -> None:
        """Set nested dictionary value using dot notation path"""
        keys = path.split('.')
        current = data

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = self._convert_env_value(value)

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type"""
        stripped = value.strip()

        # JSON lists/objects (e.g. themes)
        if stripped.startswith(('[', '{')):
            try:
                return json.loads(stripped)
            except json.JSONDecodeError:
                pass

        return value
