"""httpx transports for the supported platforms.

Each transport implements the RestTransport contract (fetch, list_records,
create, update) against one platform's REST API.
"""

from backlog_relay.transports.base import RestTransport
from backlog_relay.transports.github import GitHubTransport
from backlog_relay.transports.gitlab import GitLabTransport
from backlog_relay.transports.jira import JiraTransport
from backlog_relay.transports.servicenow import ServiceNowTransport

__all__ = [
    "RestTransport",
    "GitHubTransport",
    "GitLabTransport",
    "JiraTransport",
    "ServiceNowTransport",
]
