"""Shared pytest fixtures for backlog-relay tests."""

import pytest

from backlog_relay.config.platforms import (
    BasicAuth,
    GitHubConfig,
    GitLabConfig,
    JiraAuth,
    JiraConfig,
    ServiceNowConfig,
    TokenAuth,
)
from tests.fakes import FakeTransport

# Enable pytest-asyncio for async test support
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def github_config() -> GitHubConfig:
    return GitHubConfig(owner="octo", repo="hello", auth=TokenAuth(token="ghp_test"))


@pytest.fixture
def gitlab_config() -> GitLabConfig:
    return GitLabConfig(
        project_id="42",
        auth=TokenAuth(token="glpat-test"),
        base_url="https://gitlab.example.com",
    )


@pytest.fixture
def servicenow_config() -> ServiceNowConfig:
    return ServiceNowConfig(
        instance="dev12345",
        auth=BasicAuth(username="admin", password="secret"),
    )


@pytest.fixture
def jira_config() -> JiraConfig:
    return JiraConfig(
        base_url="https://company.atlassian.net",
        project_key="PROJ",
        auth=JiraAuth(email="me@example.com", api_token="jira-token"),
    )


@pytest.fixture
def github_transport() -> FakeTransport:
    return FakeTransport("GitHub")


@pytest.fixture
def gitlab_transport() -> FakeTransport:
    return FakeTransport("GitLab")


@pytest.fixture
def servicenow_transport() -> FakeTransport:
    return FakeTransport("ServiceNow")


@pytest.fixture
def jira_transport() -> FakeTransport:
    return FakeTransport("Jira", update_returns_body=False)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables out of the tests."""
    for name in (
        "BACKLOG_RELAY_CONFIG",
        "BACKLOG_RELAY_LOG",
        "BACKLOG_RELAY_LOG_FILE",
        "BACKLOG_RELAY_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
