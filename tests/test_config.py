"""Tests for engine settings loading."""

import json

import pytest
from pydantic import ValidationError

from commit_graph.config import CONFIG_ENV_VAR, DEFAULT_SETTINGS, EngineSettings, load_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    settings = load_settings()

    assert settings == DEFAULT_SETTINGS
    assert settings.column_spacing == 1
    assert settings.main_lineage == "main"
    assert settings.head_fallbacks == ["main", "master"]


def test_load_from_file(tmp_path):
    config_file = tmp_path / "engine.json"
    config_file.write_text(json.dumps({"column_spacing": 80, "remote_name": "upstream"}))

    settings = load_settings(config_file)

    assert settings.column_spacing == 80
    assert settings.remote_name == "upstream"
    assert settings.row_spacing == 1


def test_load_from_env(tmp_path, monkeypatch):
    config_file = tmp_path / "engine.json"
    config_file.write_text(json.dumps({"main_lineage": "trunk"}))
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

    assert load_settings().main_lineage == "trunk"


def test_invalid_spacing_rejected(tmp_path):
    config_file = tmp_path / "engine.json"
    config_file.write_text(json.dumps({"row_spacing": 0}))

    with pytest.raises(ValidationError):
        load_settings(config_file)


def test_settings_are_frozen():
    with pytest.raises(ValidationError):
        EngineSettings().column_spacing = 5
