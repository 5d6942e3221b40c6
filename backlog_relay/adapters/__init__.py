"""Platform clients for backlog-relay.

This package provides:
- TicketPlatformClient, the interface shared by every client
- One client per platform, registered with ClientRegistry on import
- create_client(), the factory that picks the client for a configuration
"""

from backlog_relay.adapters.base import TicketPlatformClient, probe_then_fallback
from backlog_relay.adapters.registry import ClientRegistry, create_client

# Importing the client modules registers them with ClientRegistry
from backlog_relay.adapters.github import GitHubClient, GitHubRecord  # noqa: E402
from backlog_relay.adapters.gitlab import GitLabClient, GitLabRecord  # noqa: E402
from backlog_relay.adapters.jira import JiraClient, JiraRecord  # noqa: E402
from backlog_relay.adapters.servicenow import ServiceNowClient, ServiceNowRecord  # noqa: E402

__all__ = [
    "ClientRegistry",
    "TicketPlatformClient",
    "create_client",
    "probe_then_fallback",
    "GitHubClient",
    "GitHubRecord",
    "GitLabClient",
    "GitLabRecord",
    "JiraClient",
    "JiraRecord",
    "ServiceNowClient",
    "ServiceNowRecord",
]
