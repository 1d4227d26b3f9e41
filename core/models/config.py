"""
Configuration models for varsu.

Handles per-workspace theme settings, fetch settings and process-wide
settings read from the environment.
"""

from typing import Any, List
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..parser.base import normalize_selector


class ThemeConfig(BaseModel):
    """A named theme and the selector whose rule block defines it"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        frozen=True
    )

    name: str = Field(..., min_length=1)
    selector: str = Field(..., min_length=1)

    @field_validator('selector')
    @classmethod
    def validate_selector(cls, v: str) -> str:
        """Canonicalize the selector the same way parsed rules are"""
        return normalize_selector(v)


class SchemaConfig(BaseModel):
    """
    Workspace configuration for a CSS variable schema.

    Mirrors the editor settings section: `sourceUrl` and `themes`.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        populate_by_name=True
    )

    source_url: str = Field(..., alias="sourceUrl")
    themes: List[ThemeConfig] = Field(default_factory=list)

    @field_validator('source_url')
    @classmethod
    def validate_source_url(cls, v: str) -> str:
        """Require an absolute http(s) URL with an explicit scheme"""
        parsed = urlparse(v)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValueError(
                'sourceUrl must be an absolute URL with explicit scheme '
                '(e.g. https://cdn.example.com/theme.css)'
            )
        return v

    @field_validator('themes')
    @classmethod
    def validate_themes(cls, v: List[ThemeConfig]) -> List[ThemeConfig]:
        """Theme names key the schema, so they must be unique"""
        names = [theme.name for theme in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f'Theme names must be unique: {", ".join(duplicates)}')
        return v

    @property
    def theme_names(self) -> List[str]:
        return [theme.name for theme in self.themes]


class FetchConfig(BaseModel):
    """Remote stylesheet fetch settings"""
    model_config = ConfigDict(validate_assignment=True)

    timeout: float = Field(default=5.0, gt=0.0, le=120.0)  # seconds per attempt
    max_attempts: int = Field(default=3, ge=1, le=10)


DEFAULT_FETCH_CONFIG = FetchConfig()


class GlobalSettings(BaseSettings):
    """Global application settings with environment variable support"""
    model_config = SettingsConfigDict(
        env_prefix="VARSU_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Fetching
    fetch_timeout: float = Field(default=DEFAULT_FETCH_CONFIG.timeout, gt=0.0, le=120.0)
    fetch_attempts: int = Field(default=DEFAULT_FETCH_CONFIG.max_attempts, ge=1, le=10)

    # Editor integration
    uri_mapping_lifetime: float = Field(default=1800.0, gt=0.0)  # seconds

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    debug_mode: bool = False

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @property
    def fetch_config(self) -> FetchConfig:
        return FetchConfig(timeout=self.fetch_timeout, max_attempts=self.fetch_attempts)
