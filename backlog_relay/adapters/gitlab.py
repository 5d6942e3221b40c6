"""GitLab client.

Issues and merge requests have separate iid spaces behind separate
endpoints, so an identifier alone is ambiguous. Reads, updates and comments
probe the merge request endpoint first and fall back to the issue endpoint
on "not found". The variant of the result is the endpoint that answered.

API endpoints used (relative to /api/v4/projects/{id}):
    GET  merge_requests/{iid}, issues/{iid}
    GET  issues                                 - listing
    POST issues, merge_requests                 - create
    PUT  merge_requests/{iid}, issues/{iid}     - partial update
    POST merge_requests/{iid}/notes, issues/{iid}/notes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from backlog_relay.adapters.base import (
    TicketPlatformClient,
    as_text,
    probe_then_fallback,
    safe_nested_get,
)
from backlog_relay.adapters.registry import ClientRegistry
from backlog_relay.config.platforms import GitLabConfig, PlatformType, TokenAuth, validate_auth
from backlog_relay.models import (
    CreateReviewRequest,
    CreateTicketOptions,
    Issue,
    Person,
    PullRequest,
    StandardTicket,
    TicketComment,
    TicketFilter,
    TicketKind,
    TicketUpdate,
)
from backlog_relay.normalization.branches import UNKNOWN_BRANCH
from backlog_relay.normalization.status import (
    gitlab_pr_state,
    gitlab_state_filter,
    map_gitlab_status,
)
from backlog_relay.transports.base import RestTransport
from backlog_relay.transports.gitlab import GitLabTransport
from backlog_relay.utils.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

MERGE_REQUESTS = "merge_requests"
ISSUES = "issues"


def _gitlab_person(user: Any) -> Person:
    return Person(id=safe_nested_get(user, "id"), name=safe_nested_get(user, "username"))


def _user_id(value: str) -> int | str:
    """GitLab expects numeric user ids; non-numeric values are sent as-is."""
    stripped = value.strip()
    return int(stripped) if stripped.isdigit() else stripped


@dataclass(frozen=True)
class GitLabRecord:
    """Typed view of an issue or merge request payload."""

    iid: str
    title: str
    description: str
    state: str
    created_at: str
    updated_at: str
    author: Person
    assignee: Person | None
    is_merge_request: bool
    source_branch: str = UNKNOWN_BRANCH
    target_branch: str = UNKNOWN_BRANCH

    @classmethod
    def from_api(cls, data: dict[str, Any], resource: str) -> GitLabRecord:
        """Decode a payload; ``resource`` is the endpoint that returned it."""
        assignee = data.get("assignee")
        return cls(
            iid=as_text(data.get("iid")),
            title=as_text(data.get("title")),
            description=as_text(data.get("description")),
            state=as_text(data.get("state"), "opened"),
            created_at=as_text(data.get("created_at")),
            updated_at=as_text(data.get("updated_at")),
            author=_gitlab_person(data.get("author")),
            assignee=_gitlab_person(assignee) if isinstance(assignee, dict) else None,
            is_merge_request=resource == MERGE_REQUESTS,
            source_branch=as_text(data.get("source_branch")) or UNKNOWN_BRANCH,
            target_branch=as_text(data.get("target_branch")) or UNKNOWN_BRANCH,
        )

    def to_ticket(self) -> StandardTicket:
        if self.is_merge_request:
            return PullRequest(
                id=self.iid,
                title=self.title,
                description=self.description,
                created_at=self.created_at,
                updated_at=self.updated_at,
                status=map_gitlab_status(self.state),
                author=self.author,
                assignee=self.assignee,
                source_branch=self.source_branch,
                target_branch=self.target_branch,
                state=gitlab_pr_state(self.state),
                kind=TicketKind.MERGE_REQUEST,
            )
        return Issue(
            id=self.iid,
            title=self.title,
            description=self.description,
            created_at=self.created_at,
            updated_at=self.updated_at,
            status=map_gitlab_status(self.state),
            author=self.author,
            assignee=self.assignee,
        )


@ClientRegistry.register
class GitLabClient(TicketPlatformClient):
    """Client for GitLab issues and merge requests.

    Probing cost: an identifier that names an issue costs one failed merge
    request lookup first; an identifier that names nothing costs two failed
    calls before NotFoundError is raised.

    Class Attributes:
        PLATFORM: PlatformType.GITLAB for registry registration
    """

    PLATFORM = PlatformType.GITLAB

    def __init__(
        self,
        config: GitLabConfig,
        http_client: httpx.AsyncClient | None = None,
        transport: RestTransport | None = None,
    ) -> None:
        if not isinstance(config, GitLabConfig):
            raise InvalidConfigurationError(
                f"GitLabClient requires a GitLabConfig, got {type(config).__name__}",
                platform=PlatformType.GITLAB.value,
            )
        validate_auth(PlatformType.GITLAB, config.auth)
        assert isinstance(config.auth, TokenAuth)
        self._config = config
        self._transport = transport or GitLabTransport(
            project_id=config.project_id,
            token=config.auth.token,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            http_client=http_client,
        )

    @property
    def name(self) -> str:
        return "GitLab"

    async def get_ticket(self, ticket_id: str) -> StandardTicket:
        async def read(resource: str) -> StandardTicket:
            data = await self._transport.fetch(resource, ticket_id)
            return GitLabRecord.from_api(data, resource).to_ticket()

        return await probe_then_fallback(
            [
                ("merge request", lambda: read(MERGE_REQUESTS)),
                ("issue", lambda: read(ISSUES)),
            ],
            platform_name=self.name,
            ticket_id=ticket_id,
        )

    async def get_tickets(self, filter: TicketFilter | None = None) -> list[StandardTicket]:
        """List project issues in GitLab's order (merge requests are not listed)."""
        params: dict[str, Any] = {}
        if filter is not None:
            state = gitlab_state_filter(filter.status)
            if state is not None:
                params["state"] = state
            elif filter.status:
                logger.debug(f"GitLab: dropping unsupported status filter {filter.status!r}")
            if filter.assignee_id:
                params["assignee_id"] = _user_id(filter.assignee_id)
        records = await self._transport.list_records(ISSUES, params=params)
        return [GitLabRecord.from_api(record, ISSUES).to_ticket() for record in records]

    async def create_ticket(self, options: CreateTicketOptions) -> StandardTicket:
        payload: dict[str, Any] = {"title": options.title, "description": options.description}
        if options.assignee_id:
            payload["assignee_ids"] = [_user_id(options.assignee_id)]
        if options.labels:
            payload["labels"] = ",".join(options.labels)
        data = await self._transport.create(ISSUES, payload)
        return GitLabRecord.from_api(data, ISSUES).to_ticket()

    async def update_ticket(self, ticket_id: str, updates: TicketUpdate) -> StandardTicket:
        payload: dict[str, Any] = {}
        if updates.title is not None:
            payload["title"] = updates.title
        if updates.description is not None:
            payload["description"] = updates.description
        if updates.assignee_id is not None:
            payload["assignee_ids"] = [_user_id(updates.assignee_id)]
        if updates.labels is not None:
            payload["labels"] = ",".join(updates.labels)

        async def edit(resource: str) -> StandardTicket:
            data = await self._transport.update(resource, ticket_id, payload, method="PUT")
            if data is None:
                data = await self._transport.fetch(resource, ticket_id)
            return GitLabRecord.from_api(data, resource).to_ticket()

        return await probe_then_fallback(
            [
                ("merge request", lambda: edit(MERGE_REQUESTS)),
                ("issue", lambda: edit(ISSUES)),
            ],
            platform_name=self.name,
            ticket_id=ticket_id,
        )

    async def add_comment(self, ticket_id: str, comment: str) -> TicketComment:
        async def note(resource: str) -> TicketComment:
            data = await self._transport.create(f"{resource}/{ticket_id}/notes", {"body": comment})
            return TicketComment(
                id=as_text(data.get("id")),
                content=as_text(data.get("body"), comment),
                author=_gitlab_person(data.get("author")),
                created_at=as_text(data.get("created_at")),
            )

        return await probe_then_fallback(
            [
                ("merge request", lambda: note(MERGE_REQUESTS)),
                ("issue", lambda: note(ISSUES)),
            ],
            platform_name=self.name,
            ticket_id=ticket_id,
        )

    async def create_review_request(self, options: CreateReviewRequest) -> PullRequest:
        """Open a merge request. Every reviewer is sent in ``reviewer_ids``."""
        payload: dict[str, Any] = {
            "source_branch": options.source_branch,
            "target_branch": options.target_branch,
            "title": options.title,
            "description": options.description,
        }
        if options.reviewers:
            payload["reviewer_ids"] = [_user_id(reviewer) for reviewer in options.reviewers]
        if options.labels:
            payload["labels"] = ",".join(options.labels)
        data = await self._transport.create(MERGE_REQUESTS, payload)
        ticket = GitLabRecord.from_api(data, MERGE_REQUESTS).to_ticket()
        assert isinstance(ticket, PullRequest)
        return ticket


__all__ = ["GitLabClient", "GitLabRecord"]
