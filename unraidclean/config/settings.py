"""Configuration management for unraid-clean."""

import logging
from pathlib import Path
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_MIN_PERCENT = 1
DEFAULT_INACTIVITY_DAYS = 30
DEFAULT_NEVER_WATCHED_DAYS = 180


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""


class ServiceConfig(BaseModel):
    """Connection settings for a backing service."""
    base_url: str = ""
    api_key: str = ""

    @field_validator("base_url", "api_key", mode="before")
    @classmethod
    def _blank_is_empty(cls, value):
        return "" if value is None else value


class RulesConfig(BaseModel):
    """Thresholds that decide whether an item is flagged."""
    activity_min_percent: int = DEFAULT_ACTIVITY_MIN_PERCENT
    inactivity_days_after_watch: int = DEFAULT_INACTIVITY_DAYS
    never_watched_days_since_added: int = DEFAULT_NEVER_WATCHED_DAYS
    low_watch_min_added_days: int = Field(default=0, ge=0)
    low_watch_max_hours: float = Field(default=0.0, ge=0.0)
    low_watch_require: bool = False
    series_ended_only: bool = False

    @field_validator("activity_min_percent", mode="before")
    @classmethod
    def _default_min_percent(cls, value):
        return value or DEFAULT_ACTIVITY_MIN_PERCENT

    @field_validator("inactivity_days_after_watch", mode="before")
    @classmethod
    def _default_inactivity_days(cls, value):
        return value or DEFAULT_INACTIVITY_DAYS

    @field_validator("never_watched_days_since_added", mode="before")
    @classmethod
    def _default_never_watched_days(cls, value):
        return value or DEFAULT_NEVER_WATCHED_DAYS

    @field_validator(
        "low_watch_min_added_days", "low_watch_max_hours", "low_watch_require", "series_ended_only",
        mode="before",
    )
    @classmethod
    def _blank_is_off(cls, value):
        return 0 if value is None else value

    @model_validator(mode="after")
    def _check_thresholds(self) -> "RulesConfig":
        if self.activity_min_percent <= 0:
            raise ValueError("activity_min_percent must be positive")
        if self.inactivity_days_after_watch <= 0:
            raise ValueError("inactivity_days_after_watch must be positive")
        if self.never_watched_days_since_added <= 0:
            raise ValueError("never_watched_days_since_added must be positive")
        days_set = self.low_watch_min_added_days > 0
        hours_set = self.low_watch_max_hours > 0
        if days_set != hours_set:
            raise ValueError(
                "low_watch_min_added_days and low_watch_max_hours must both be set to enable"
            )
        return self

    @property
    def low_watch_enabled(self) -> bool:
        return self.low_watch_min_added_days > 0 and self.low_watch_max_hours > 0


class MovieExceptions(BaseModel):
    """Keep-rules for movies."""
    radarr_ids: list[int] = Field(default_factory=list)
    tmdb_ids: list[int] = Field(default_factory=list)
    imdb_ids: list[str] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    path_prefixes: list[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_empty(cls, value):
        return [] if value is None else value


class SeriesExceptions(BaseModel):
    """Keep-rules for series."""
    sonarr_ids: list[int] = Field(default_factory=list)
    tvdb_ids: list[int] = Field(default_factory=list)
    imdb_ids: list[str] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    path_prefixes: list[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_empty(cls, value):
        return [] if value is None else value


class ExceptionsConfig(BaseModel):
    """User-maintained exception list."""
    movies: MovieExceptions = Field(default_factory=MovieExceptions)
    series: SeriesExceptions = Field(default_factory=SeriesExceptions)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_default(cls, value):
        return {} if value is None else value


class CleanupConfig(BaseModel):
    """Main unraid-clean configuration."""
    tautulli: ServiceConfig = Field(default_factory=ServiceConfig)
    sonarr: ServiceConfig = Field(default_factory=ServiceConfig)
    radarr: ServiceConfig = Field(default_factory=ServiceConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    exceptions: ExceptionsConfig = Field(default_factory=ExceptionsConfig)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_default(cls, value):
        return {} if value is None else value

    def validate_services(self) -> None:
        """Check that every backing service has a usable URL and API key."""
        for name in ("tautulli", "sonarr", "radarr"):
            service: ServiceConfig = getattr(self, name)
            if not service.base_url:
                raise ConfigError(f"{name}: base_url is required")
            parsed = urlparse(service.base_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ConfigError(f"{name}: base_url is invalid: {service.base_url!r}")
            if not service.api_key:
                raise ConfigError(f"{name}: api_key is required")


class ConfigManager:
    """Manages configuration loading and saving."""

    DEFAULT_CONFIG_NAME = "config.yaml"

    def __init__(self, config_path: Path | None = None):
        """Initialize config manager."""
        self.config_path = config_path or Path.cwd() / self.DEFAULT_CONFIG_NAME
        self._config: CleanupConfig | None = None

    def load(self, validate_services: bool = True) -> CleanupConfig:
        """Load configuration from file. Missing or invalid files raise ConfigError."""
        if not self.config_path.exists():
            raise ConfigError(f"read config: {self.config_path} does not exist")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"parse config: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("parse config: top level must be a mapping")

        try:
            config = CleanupConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"invalid config: {e}") from e

        if validate_services:
            config.validate_services()

        logger.debug(f"Loaded configuration from {self.config_path}")
        self._config = config
        return config

    def save(self, config: CleanupConfig | None = None) -> None:
        """Save configuration to file."""
        config_to_save = config or self._config
        if config_to_save is None:
            raise ValueError("No configuration to save")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        data = config_to_save.model_dump()
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, indent=2, sort_keys=False)

        logger.info(f"Configuration saved to {self.config_path}")

    def get_config(self) -> CleanupConfig:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            self.load()
        return self._config


def load_config(config_path: Path | None = None, validate_services: bool = True) -> CleanupConfig:
    """Load configuration from a specific path."""
    return ConfigManager(config_path).load(validate_services=validate_services)


def add_unique(values: list, value) -> bool:
    """Append value if it is set and not already present. Returns True on change."""
    if not value or value in values:
        return False
    values.append(value)
    return True
