from __future__ import annotations

import pytest

from mediaset import logging_manager as log_mgr
from mediaset.config_manager import reset_settings_cache
from tests.helpers.lookup_http import FakeClock

_PROVIDER_ENV_VARS = (
    "MEDIASET_CONFIG_FILE",
    "TMDB_API_KEY",
    "MEDIASET_TMDB_API_KEY",
    "GIANTBOMB_API_KEY",
    "MEDIASET_GIANTBOMB_API_KEY",
    "IGDB_CLIENT_ID",
    "MEDIASET_IGDB_CLIENT_ID",
    "IGDB_CLIENT_SECRET",
    "MEDIASET_IGDB_CLIENT_SECRET",
    "MUSICBRAINZ_USER_AGENT",
    "MEDIASET_MUSICBRAINZ_USER_AGENT",
    "MEDIASET_UPCITEMDB_MAX_REQUESTS_PER_DAY",
    "MEDIASET_GAME_PROVIDER",
    "MEDIASET_USER_AGENT",
    "MEDIASET_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch):
    for name in _PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    log_mgr.clear_log_context()
    yield
    reset_settings_cache()
    log_mgr.clear_log_context()


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()
