"""GitHub client.

Issues and pull requests share one number space on GitHub. The issues
endpoint answers for both and marks pull requests with a ``pull_request``
linkage object; branch refs and the merge timestamp only come from the
pulls endpoint, so reading a pull request costs a second call.

API endpoints used (relative to /repos/{owner}/{repo}):
    GET   issues/{n}                        - any ticket
    GET   pulls/{n}                         - branch refs for a pull request
    GET   issues                            - listing (includes pull requests)
    POST  issues                            - create issue
    PATCH issues/{n}                        - partial update
    POST  issues/{n}/comments               - comment
    POST  pulls                             - open pull request
    POST  pulls/{n}/requested_reviewers     - request reviewers
    POST  issues/{n}/labels                 - label a pull request
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from backlog_relay.adapters.base import TicketPlatformClient, as_text, safe_nested_get
from backlog_relay.adapters.registry import ClientRegistry
from backlog_relay.config.platforms import GitHubConfig, PlatformType, TokenAuth, validate_auth
from backlog_relay.models import (
    CreateReviewRequest,
    CreateTicketOptions,
    Issue,
    Person,
    PullRequest,
    StandardTicket,
    TicketComment,
    TicketFilter,
    TicketUpdate,
)
from backlog_relay.normalization.branches import UNKNOWN_BRANCH
from backlog_relay.normalization.classification import is_github_pull_request
from backlog_relay.normalization.status import (
    github_pr_state,
    github_state_filter,
    map_github_status,
)
from backlog_relay.transports.base import RestTransport
from backlog_relay.transports.github import GitHubTransport
from backlog_relay.utils.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)


def _github_person(user: Any) -> Person:
    return Person(id=safe_nested_get(user, "id"), name=safe_nested_get(user, "login"))


@dataclass(frozen=True)
class GitHubRecord:
    """Typed view of an issue or pull request payload."""

    number: str
    title: str
    body: str
    state: str
    created_at: str
    updated_at: str
    user: Person
    assignee: Person | None
    is_pull_request: bool
    head_ref: str = UNKNOWN_BRANCH
    base_ref: str = UNKNOWN_BRANCH
    merged_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any], from_pulls: bool = False) -> GitHubRecord:
        """Decode a payload from the issues or pulls endpoint.

        Args:
            data: Issue or pull request JSON
            from_pulls: True when the payload came from the pulls endpoint,
                which makes it a pull request by origin
        """
        assignee = data.get("assignee")
        head_ref = safe_nested_get(data.get("head"), "ref")
        base_ref = safe_nested_get(data.get("base"), "ref")
        return cls(
            number=as_text(data.get("number")),
            title=as_text(data.get("title")),
            body=as_text(data.get("body")),
            state=as_text(data.get("state"), "open"),
            created_at=as_text(data.get("created_at")),
            updated_at=as_text(data.get("updated_at")),
            user=_github_person(data.get("user")),
            assignee=_github_person(assignee) if isinstance(assignee, dict) else None,
            is_pull_request=from_pulls or is_github_pull_request(data),
            head_ref=head_ref or UNKNOWN_BRANCH,
            base_ref=base_ref or UNKNOWN_BRANCH,
            # Issues listing rows nest the merge timestamp under the PR linkage
            merged_at=(
                data.get("merged_at")
                or safe_nested_get(data.get("pull_request"), "merged_at")
                or None
            ),
        )

    def to_ticket(self) -> StandardTicket:
        if self.is_pull_request:
            return PullRequest(
                id=self.number,
                title=self.title,
                description=self.body,
                created_at=self.created_at,
                updated_at=self.updated_at,
                status=map_github_status(self.state),
                author=self.user,
                assignee=self.assignee,
                source_branch=self.head_ref,
                target_branch=self.base_ref,
                state=github_pr_state(self.state, self.merged_at),
            )
        return Issue(
            id=self.number,
            title=self.title,
            description=self.body,
            created_at=self.created_at,
            updated_at=self.updated_at,
            status=map_github_status(self.state),
            author=self.user,
            assignee=self.assignee,
        )


@ClientRegistry.register
class GitHubClient(TicketPlatformClient):
    """Client for GitHub issues and pull requests.

    Class Attributes:
        PLATFORM: PlatformType.GITHUB for registry registration
    """

    PLATFORM = PlatformType.GITHUB

    def __init__(
        self,
        config: GitHubConfig,
        http_client: httpx.AsyncClient | None = None,
        transport: RestTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: GitHub connection settings
            http_client: Optional shared httpx client
            transport: Optional transport override (tests inject fakes here)

        Raises:
            InvalidConfigurationError: If the config is not a GitHubConfig or
                its auth is not token auth
        """
        if not isinstance(config, GitHubConfig):
            raise InvalidConfigurationError(
                f"GitHubClient requires a GitHubConfig, got {type(config).__name__}",
                platform=PlatformType.GITHUB.value,
            )
        validate_auth(PlatformType.GITHUB, config.auth)
        assert isinstance(config.auth, TokenAuth)
        self._config = config
        self._transport = transport or GitHubTransport(
            owner=config.owner,
            repo=config.repo,
            token=config.auth.token,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            http_client=http_client,
        )

    @property
    def name(self) -> str:
        return "GitHub"

    async def _read(self, ticket_id: str) -> StandardTicket:
        data = await self._transport.fetch("issues", ticket_id)
        if not is_github_pull_request(data):
            return GitHubRecord.from_api(data).to_ticket()
        pull = await self._transport.fetch("pulls", ticket_id)
        return GitHubRecord.from_api(pull, from_pulls=True).to_ticket()

    async def get_ticket(self, ticket_id: str) -> StandardTicket:
        return await self._read(ticket_id)

    async def get_tickets(self, filter: TicketFilter | None = None) -> list[StandardTicket]:
        """List issues and pull requests of the repository.

        Pull requests in the listing carry no branch refs; they are reported
        with "unknown" branches instead of costing one extra call each.
        """
        params: dict[str, Any] = {}
        if filter is not None:
            state = github_state_filter(filter.status)
            if state is not None:
                params["state"] = state
            elif filter.status:
                logger.debug(f"GitHub: dropping unsupported status filter {filter.status!r}")
            if filter.assignee_id:
                params["assignee"] = filter.assignee_id
        records = await self._transport.list_records("issues", params=params)
        return [GitHubRecord.from_api(record).to_ticket() for record in records]

    async def create_ticket(self, options: CreateTicketOptions) -> StandardTicket:
        payload: dict[str, Any] = {"title": options.title, "body": options.description}
        if options.assignee_id:
            payload["assignees"] = [options.assignee_id]
        if options.labels:
            payload["labels"] = list(options.labels)
        data = await self._transport.create("issues", payload)
        return GitHubRecord.from_api(data).to_ticket()

    async def update_ticket(self, ticket_id: str, updates: TicketUpdate) -> StandardTicket:
        payload: dict[str, Any] = {}
        if updates.title is not None:
            payload["title"] = updates.title
        if updates.description is not None:
            payload["body"] = updates.description
        if updates.assignee_id is not None:
            payload["assignees"] = [updates.assignee_id]
        if updates.labels is not None:
            payload["labels"] = list(updates.labels)
        data = await self._transport.update("issues", ticket_id, payload)
        if data is None or is_github_pull_request(data):
            # Refresh so a pull request keeps its branch refs
            return await self._read(ticket_id)
        return GitHubRecord.from_api(data).to_ticket()

    async def add_comment(self, ticket_id: str, comment: str) -> TicketComment:
        data = await self._transport.create(f"issues/{ticket_id}/comments", {"body": comment})
        return TicketComment(
            id=as_text(data.get("id")),
            content=as_text(data.get("body"), comment),
            author=_github_person(data.get("user")),
            created_at=as_text(data.get("created_at")),
        )

    async def create_review_request(self, options: CreateReviewRequest) -> PullRequest:
        data = await self._transport.create(
            "pulls",
            {
                "title": options.title,
                "body": options.description,
                "head": options.source_branch,
                "base": options.target_branch,
            },
        )
        record = GitHubRecord.from_api(data, from_pulls=True)

        if options.reviewers:
            await self._transport.create(
                f"pulls/{record.number}/requested_reviewers",
                {"reviewers": list(options.reviewers)},
            )
        if options.labels:
            await self._transport.create(
                f"issues/{record.number}/labels", {"labels": list(options.labels)}
            )

        ticket = record.to_ticket()
        assert isinstance(ticket, PullRequest)
        return ticket


__all__ = ["GitHubClient", "GitHubRecord"]
