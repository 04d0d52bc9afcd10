"""Shared constants for the configuration manager package."""
from __future__ import annotations

from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent
SCRIPT_DIR = MODULE_DIR.parent.parent.resolve()
CONF_DIR = SCRIPT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"
CONFIG_PATH_ENV = "MEDIASET_CONFIG_FILE"

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_USER_AGENT = "MediaSet/0.1.0 (media lookup service)"

DEFAULT_OPENLIBRARY_URL = "https://openlibrary.org/"
DEFAULT_UPCITEMDB_URL = "https://api.upcitemdb.com/"
DEFAULT_TMDB_URL = "https://api.themoviedb.org/3/"
DEFAULT_GIANTBOMB_URL = "https://www.giantbomb.com/api/"
DEFAULT_IGDB_URL = "https://api.igdb.com/v4/"
DEFAULT_IGDB_TOKEN_URL = "https://id.twitch.tv/oauth2/token"
DEFAULT_MUSICBRAINZ_URL = "https://musicbrainz.org/"

DEFAULT_UPC_MIN_DELAY_SECONDS = 1.0
DEFAULT_UPC_MAX_REQUESTS_PER_MINUTE = 5
DEFAULT_UPC_MAX_REQUESTS_PER_DAY = 90
DEFAULT_UPC_MAX_RETRY_PAUSE_SECONDS = 65.0
DEFAULT_MUSICBRAINZ_MIN_INTERVAL_SECONDS = 1.0

VALID_GAME_PROVIDERS = {"giantbomb", "igdb"}
DEFAULT_GAME_PROVIDER = "giantbomb"

SENSITIVE_CONFIG_KEYS = {"api_key", "client_secret"}

__all__ = [
    "CONF_DIR",
    "CONFIG_PATH_ENV",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_GAME_PROVIDER",
    "DEFAULT_GIANTBOMB_URL",
    "DEFAULT_IGDB_TOKEN_URL",
    "DEFAULT_IGDB_URL",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "DEFAULT_MUSICBRAINZ_MIN_INTERVAL_SECONDS",
    "DEFAULT_MUSICBRAINZ_URL",
    "DEFAULT_OPENLIBRARY_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_TMDB_URL",
    "DEFAULT_UPC_MAX_REQUESTS_PER_DAY",
    "DEFAULT_UPC_MAX_REQUESTS_PER_MINUTE",
    "DEFAULT_UPC_MAX_RETRY_PAUSE_SECONDS",
    "DEFAULT_UPC_MIN_DELAY_SECONDS",
    "DEFAULT_UPCITEMDB_URL",
    "DEFAULT_USER_AGENT",
    "SENSITIVE_CONFIG_KEYS",
    "VALID_GAME_PROVIDERS",
]
