"""Configuration loading for the lookup services."""
from __future__ import annotations

from .constants import CONF_DIR, DEFAULT_CONFIG_PATH, DEFAULT_LOCAL_CONFIG_PATH, DEFAULT_USER_AGENT
from .settings import (
    ConfigurationError,
    EnvironmentOverrides,
    GiantBombSettings,
    IgdbSettings,
    LookupSettings,
    MusicBrainzSettings,
    OpenLibrarySettings,
    TmdbSettings,
    UpcItemDbSettings,
    apply_settings_updates,
    get_settings,
    load_environment_overrides,
    load_settings,
    reset_settings_cache,
)

__all__ = [
    "CONF_DIR",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_USER_AGENT",
    "EnvironmentOverrides",
    "GiantBombSettings",
    "IgdbSettings",
    "LookupSettings",
    "MusicBrainzSettings",
    "OpenLibrarySettings",
    "TmdbSettings",
    "UpcItemDbSettings",
    "apply_settings_updates",
    "get_settings",
    "load_environment_overrides",
    "load_settings",
    "reset_settings_cache",
]
