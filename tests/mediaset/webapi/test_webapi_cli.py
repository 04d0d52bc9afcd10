from __future__ import annotations

import json
from pathlib import Path

import pytest

from mediaset.webapi import __main__ as cli

pytestmark = pytest.mark.webapi


def test_print_settings_masks_secrets(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("MEDIASET_CONFIG_FILE", str(tmp_path / "unused.json"))
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"tmdb": {"api_key": "tmdb-secret"}}), encoding="utf-8")
    monkeypatch.setattr(cli.uvicorn, "run", lambda *args, **kwargs: pytest.fail("server started"))

    assert cli.main(["--config", str(config), "--print-settings"]) == 0

    printed = json.loads(capsys.readouterr().out)
    assert printed["tmdb"]["api_key"] == "***"
    assert "tmdb-secret" not in json.dumps(printed)


def test_invalid_config_exits_with_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("MEDIASET_CONFIG_FILE", str(tmp_path / "unused.json"))
    config = tmp_path / "config.json"
    config.write_text("{broken", encoding="utf-8")

    assert cli.main(["--config", str(config)]) == 2
    assert "Invalid JSON" in capsys.readouterr().err


def test_server_runs_application_factory(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = []
    monkeypatch.setenv("MEDIASET_CONFIG_FILE", str(tmp_path / "missing.json"))
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert cli.main(["--port", "9001"]) == 0

    app, kwargs = calls[0]
    assert app == "mediaset.webapi.application:create_app"
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9001
    assert kwargs["host"] == "127.0.0.1"
