"""Tests for backlog_relay.utils.env_utils module."""

import pytest

from backlog_relay.utils.env_utils import (
    EnvVarExpansionError,
    expand_env_vars,
    expand_env_vars_strict,
    is_sensitive_key,
)


class TestExpandEnvVars:
    """Tests for expand_env_vars()."""

    def test_expands_nested_structures(self, monkeypatch):
        monkeypatch.setenv("RELAY_HOST", "gitlab.example.com")

        result = expand_env_vars({"url": "https://${RELAY_HOST}/api", "list": ["${RELAY_HOST}"]})

        assert result == {
            "url": "https://gitlab.example.com/api",
            "list": ["gitlab.example.com"],
        }

    def test_non_strings_unchanged(self):
        assert expand_env_vars({"projectId": 7, "enabled": True}) == {
            "projectId": 7,
            "enabled": True,
        }

    def test_missing_left_in_place(self, monkeypatch):
        monkeypatch.delenv("RELAY_MISSING", raising=False)

        assert expand_env_vars("${RELAY_MISSING}") == "${RELAY_MISSING}"

    def test_strict_raises(self, monkeypatch):
        monkeypatch.delenv("RELAY_MISSING", raising=False)

        with pytest.raises(EnvVarExpansionError, match="RELAY_MISSING"):
            expand_env_vars_strict({"owner": "${RELAY_MISSING}"})

    def test_strict_message_names_non_secret_key(self, monkeypatch):
        monkeypatch.delenv("RELAY_MISSING", raising=False)

        with pytest.raises(EnvVarExpansionError, match="in owner"):
            expand_env_vars_strict({"owner": "${RELAY_MISSING}"})

    def test_strict_message_hides_secret_key(self, monkeypatch):
        monkeypatch.delenv("RELAY_MISSING", raising=False)

        with pytest.raises(EnvVarExpansionError) as exc_info:
            expand_env_vars_strict({"auth": {"apiToken": "${RELAY_MISSING}"}})

        assert "apiToken" not in str(exc_info.value)


class TestIsSensitiveKey:
    @pytest.mark.parametrize("key", ["apiToken", "auth.password", "client_secret", "API_KEY"])
    def test_sensitive(self, key):
        assert is_sensitive_key(key)

    @pytest.mark.parametrize("key", ["owner", "repo", "baseUrl", "projectId"])
    def test_not_sensitive(self, key):
        assert not is_sensitive_key(key)
