"""Tests for backlog_relay.config.loader module."""

import json
from pathlib import Path

import pytest

from backlog_relay.config.loader import (
    CONFIG_ENV_VAR,
    LOCAL_CONFIG_NAME,
    load_config,
    resolve_config_path,
)
from backlog_relay.config.platforms import JiraConfig
from backlog_relay.utils.errors import InvalidConfigurationError


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data))
    return path


JIRA_CONFIG = {
    "type": "jira",
    "baseUrl": "https://company.atlassian.net",
    "projectKey": "PROJ",
    "auth": {"type": "jira", "email": "me@example.com", "apiToken": "${JIRA_TOKEN}"},
}


class TestLoadConfig:
    """Tests for load_config()."""

    def test_expands_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("JIRA_TOKEN", "from-env")
        path = _write(tmp_path / "relay.json", JIRA_CONFIG)

        config = load_config(path)

        assert isinstance(config, JiraConfig)
        assert config.auth.api_token == "from-env"

    def test_missing_variable_is_configuration_error(self, tmp_path, monkeypatch):
        monkeypatch.delenv("JIRA_TOKEN", raising=False)
        path = _write(tmp_path / "relay.json", JIRA_CONFIG)

        with pytest.raises(InvalidConfigurationError, match="JIRA_TOKEN"):
            load_config(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "relay.json"
        path.write_text("{not json")

        with pytest.raises(InvalidConfigurationError, match="not valid JSON"):
            load_config(path)

    def test_non_object(self, tmp_path):
        path = _write(tmp_path / "relay.json", ["github"])

        with pytest.raises(InvalidConfigurationError, match="JSON object"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigurationError, match="Cannot read"):
            load_config(tmp_path / "absent.json")


class TestResolveConfigPath:
    """Tests for resolve_config_path() precedence."""

    def test_explicit_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.json"))
        explicit = tmp_path / "explicit.json"

        assert resolve_config_path(explicit) == explicit

    def test_environment_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.json"))

        assert resolve_config_path() == tmp_path / "env.json"

    def test_local_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        local = tmp_path / LOCAL_CONFIG_NAME
        local.write_text("{}")

        assert resolve_config_path() == local

    def test_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(InvalidConfigurationError, match="No configuration found"):
            resolve_config_path()
