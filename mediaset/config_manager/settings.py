"""Pydantic models and helper utilities for configuration values."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from mediaset import logging_manager

from .constants import (
    CONFIG_PATH_ENV,
    DEFAULT_CONFIG_PATH,
    DEFAULT_GAME_PROVIDER,
    DEFAULT_GIANTBOMB_URL,
    DEFAULT_IGDB_TOKEN_URL,
    DEFAULT_IGDB_URL,
    DEFAULT_LOCAL_CONFIG_PATH,
    DEFAULT_MUSICBRAINZ_MIN_INTERVAL_SECONDS,
    DEFAULT_MUSICBRAINZ_URL,
    DEFAULT_OPENLIBRARY_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TMDB_URL,
    DEFAULT_UPC_MAX_REQUESTS_PER_DAY,
    DEFAULT_UPC_MAX_REQUESTS_PER_MINUTE,
    DEFAULT_UPC_MAX_RETRY_PAUSE_SECONDS,
    DEFAULT_UPC_MIN_DELAY_SECONDS,
    DEFAULT_UPCITEMDB_URL,
    DEFAULT_USER_AGENT,
    SENSITIVE_CONFIG_KEYS,
    VALID_GAME_PROVIDERS,
)

logger = logging_manager.get_logger().getChild("config")


class ConfigurationError(RuntimeError):
    """Raised when configuration files cannot be parsed or validated."""


class ProviderSettings(BaseModel):
    """Connection settings shared by every provider."""

    model_config = ConfigDict(extra="allow")

    base_url: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


class OpenLibrarySettings(ProviderSettings):
    base_url: str = DEFAULT_OPENLIBRARY_URL


class UpcItemDbSettings(ProviderSettings):
    base_url: str = DEFAULT_UPCITEMDB_URL
    min_delay_seconds: float = DEFAULT_UPC_MIN_DELAY_SECONDS
    max_requests_per_minute: Optional[int] = DEFAULT_UPC_MAX_REQUESTS_PER_MINUTE
    max_requests_per_day: Optional[int] = DEFAULT_UPC_MAX_REQUESTS_PER_DAY
    max_retry_pause_seconds: float = DEFAULT_UPC_MAX_RETRY_PAUSE_SECONDS


class TmdbSettings(ProviderSettings):
    base_url: str = DEFAULT_TMDB_URL
    api_key: Optional[SecretStr] = None


class GiantBombSettings(ProviderSettings):
    base_url: str = DEFAULT_GIANTBOMB_URL
    api_key: Optional[SecretStr] = None


class IgdbSettings(ProviderSettings):
    base_url: str = DEFAULT_IGDB_URL
    token_url: str = DEFAULT_IGDB_TOKEN_URL
    client_id: Optional[str] = None
    client_secret: Optional[SecretStr] = None


class MusicBrainzSettings(ProviderSettings):
    base_url: str = DEFAULT_MUSICBRAINZ_URL
    min_interval_seconds: float = DEFAULT_MUSICBRAINZ_MIN_INTERVAL_SECONDS
    user_agent: str = DEFAULT_USER_AGENT


class LookupSettings(BaseModel):
    """Typed representation of the lookup configuration."""

    model_config = ConfigDict(extra="allow")

    openlibrary: OpenLibrarySettings = Field(default_factory=OpenLibrarySettings)
    upcitemdb: UpcItemDbSettings = Field(default_factory=UpcItemDbSettings)
    tmdb: TmdbSettings = Field(default_factory=TmdbSettings)
    giantbomb: GiantBombSettings = Field(default_factory=GiantBombSettings)
    igdb: IgdbSettings = Field(default_factory=IgdbSettings)
    musicbrainz: MusicBrainzSettings = Field(default_factory=MusicBrainzSettings)
    game_provider: str = DEFAULT_GAME_PROVIDER
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"

    @field_validator("game_provider")
    @classmethod
    def _validate_game_provider(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        if normalized not in VALID_GAME_PROVIDERS:
            raise ValueError(
                f"game_provider must be one of {', '.join(sorted(VALID_GAME_PROVIDERS))}"
            )
        return normalized

    def redacted(self) -> Dict[str, Any]:
        """Return a dump of the settings with secret values masked."""

        return _redact(self.model_dump(mode="json"))


def _redact(payload: Any) -> Any:
    if isinstance(payload, dict):
        redacted: Dict[str, Any] = {}
        for key, value in payload.items():
            if key in SENSITIVE_CONFIG_KEYS and value:
                redacted[key] = "***"
            else:
                redacted[key] = _redact(value)
        return redacted
    if isinstance(payload, list):
        return [_redact(item) for item in payload]
    return payload


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", env_nested_delimiter="__", extra="ignore")

    tmdb_api_key: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("TMDB_API_KEY", "MEDIASET_TMDB_API_KEY")
    )
    giantbomb_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("GIANTBOMB_API_KEY", "MEDIASET_GIANTBOMB_API_KEY"),
    )
    igdb_client_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("IGDB_CLIENT_ID", "MEDIASET_IGDB_CLIENT_ID")
    )
    igdb_client_secret: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("IGDB_CLIENT_SECRET", "MEDIASET_IGDB_CLIENT_SECRET"),
    )
    musicbrainz_user_agent: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MUSICBRAINZ_USER_AGENT", "MEDIASET_MUSICBRAINZ_USER_AGENT"),
    )
    upcitemdb_max_requests_per_day: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("MEDIASET_UPCITEMDB_MAX_REQUESTS_PER_DAY")
    )
    game_provider: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("MEDIASET_GAME_PROVIDER")
    )
    user_agent: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("MEDIASET_USER_AGENT")
    )
    log_level: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("MEDIASET_LOG_LEVEL")
    )


_OVERRIDE_TARGETS: Dict[str, tuple[str, ...]] = {
    "tmdb_api_key": ("tmdb", "api_key"),
    "giantbomb_api_key": ("giantbomb", "api_key"),
    "igdb_client_id": ("igdb", "client_id"),
    "igdb_client_secret": ("igdb", "client_secret"),
    "musicbrainz_user_agent": ("musicbrainz", "user_agent"),
    "upcitemdb_max_requests_per_day": ("upcitemdb", "max_requests_per_day"),
    "game_provider": ("game_provider",),
    "user_agent": ("user_agent",),
    "log_level": ("log_level",),
}


def load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; using defaults.",
            extra={"event": "config.env.validation_error", "error": str(exc)},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def _read_json_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError:
        logger.debug("Configuration file %s not found", path, extra={"event": "config.file.missing"})
        return {}
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return payload


def _deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _nest_overrides(overrides: Dict[str, Any]) -> Dict[str, Any]:
    nested: Dict[str, Any] = {}
    for key, value in overrides.items():
        target = _OVERRIDE_TARGETS.get(key)
        if target is None:
            continue
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        cursor = nested
        for part in target[:-1]:
            cursor = cursor.setdefault(part, {})
        cursor[target[-1]] = value
    return nested


def resolve_config_path(path: Optional[Path] = None) -> Path:
    """Return the configuration file to read, honouring ``MEDIASET_CONFIG_FILE``."""

    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_settings(
    path: Optional[Path] = None,
    *,
    local_path: Optional[Path] = DEFAULT_LOCAL_CONFIG_PATH,
    apply_environment: bool = True,
) -> LookupSettings:
    """Load settings from JSON files and environment variables.

    Args:
        path: Primary configuration file. Defaults to ``conf/config.json``.
        local_path: Optional file merged over the primary file.
        apply_environment: Whether environment overrides are applied last.

    Returns:
        The validated settings.

    Raises:
        ConfigurationError: If a file is malformed or the merged values are invalid.
    """

    config_path = resolve_config_path(path)
    raw = _read_json_file(config_path)
    if local_path is not None and Path(local_path) != config_path:
        raw = _deep_merge(raw, _read_json_file(Path(local_path)))
    if apply_environment:
        raw = _deep_merge(raw, _nest_overrides(load_environment_overrides()))

    try:
        settings = LookupSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid lookup configuration: {exc}") from exc

    logger.debug(
        "Loaded lookup configuration",
        extra={"event": "config.loaded", "path": str(config_path), "settings": settings.redacted()},
    )
    return settings


_settings_cache: Optional[LookupSettings] = None


def get_settings() -> LookupSettings:
    """Return the cached settings, loading them on first use."""

    global _settings_cache
    if _settings_cache is None:
        _settings_cache = load_settings()
    return _settings_cache


def reset_settings_cache() -> None:
    """Forget cached settings so the next call reloads them."""

    global _settings_cache
    _settings_cache = None


def apply_settings_updates(settings: LookupSettings, updates: Dict[str, Any]) -> LookupSettings:
    """Return a validated copy of ``settings`` with ``updates`` deep-merged in."""

    merged = _deep_merge(settings.model_dump(), updates)
    try:
        return LookupSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid lookup configuration: {exc}") from exc


__all__ = [
    "ConfigurationError",
    "EnvironmentOverrides",
    "GiantBombSettings",
    "IgdbSettings",
    "LookupSettings",
    "MusicBrainzSettings",
    "OpenLibrarySettings",
    "ProviderSettings",
    "TmdbSettings",
    "UpcItemDbSettings",
    "apply_settings_updates",
    "get_settings",
    "load_environment_overrides",
    "load_settings",
    "reset_settings_cache",
    "resolve_config_path",
]
