"""backlog-relay - one ticket model for GitHub, GitLab, ServiceNow and Jira.

This package normalizes issues, pull/merge requests and their ITSM/workflow
equivalents into a shared ticket model and dispatches CRUD and comment
operations to the matching platform.

Example usage:
    from backlog_relay import create_client

    client = create_client({
        "type": "github",
        "owner": "octo",
        "repo": "hello",
        "auth": {"type": "token", "apiToken": "ghp_..."},
    })
    ticket = await client.get_ticket("42")
"""

__version__ = "0.1.0"
SCRIPT_NAME = "backlog-relay"

from backlog_relay.adapters import (  # noqa: E402
    ClientRegistry,
    GitHubClient,
    GitLabClient,
    JiraClient,
    ServiceNowClient,
    TicketPlatformClient,
    create_client,
)
from backlog_relay.config import (  # noqa: E402
    BasicAuth,
    GitHubConfig,
    GitLabConfig,
    JiraAuth,
    JiraConfig,
    OAuthAuth,
    PlatformConfig,
    PlatformType,
    ServiceNowConfig,
    TokenAuth,
    parse_platform_config,
)
from backlog_relay.models import (  # noqa: E402
    CreateReviewRequest,
    CreateTicketOptions,
    Issue,
    Person,
    PRState,
    PullRequest,
    StandardTicket,
    TicketComment,
    TicketFilter,
    TicketKind,
    TicketUpdate,
)
from backlog_relay.utils.errors import (  # noqa: E402
    InvalidConfigurationError,
    NotFoundError,
    RelayError,
    TransportError,
)

__all__ = [
    "__version__",
    "SCRIPT_NAME",
    # Factory
    "create_client",
    "ClientRegistry",
    # Clients
    "TicketPlatformClient",
    "GitHubClient",
    "GitLabClient",
    "JiraClient",
    "ServiceNowClient",
    # Config
    "PlatformType",
    "PlatformConfig",
    "GitHubConfig",
    "GitLabConfig",
    "ServiceNowConfig",
    "JiraConfig",
    "TokenAuth",
    "BasicAuth",
    "OAuthAuth",
    "JiraAuth",
    "parse_platform_config",
    # Models
    "Person",
    "Issue",
    "PullRequest",
    "StandardTicket",
    "TicketComment",
    "TicketKind",
    "PRState",
    "CreateTicketOptions",
    "CreateReviewRequest",
    "TicketUpdate",
    "TicketFilter",
    # Errors
    "RelayError",
    "NotFoundError",
    "InvalidConfigurationError",
    "TransportError",
]
