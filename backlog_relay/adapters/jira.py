"""Jira client.

Jira issues have one key space, so no probing is needed. An issue whose
type is named "Review" stands in for a pull request; its branches are
carried as labeled lines in the description and its review state is
derived from the status name with a keyword heuristic (see
backlog_relay.normalization.status.jira_pr_state). Workflows name their
statuses freely, so that heuristic is approximate by nature.

Creates and updates answer with a key or no body at all, so both re-read
the issue afterwards. Each call is a separate request; a failure part-way
through (e.g., adding a watcher) leaves earlier steps in place.

API endpoints used (relative to /rest/api/2):
    GET  issue/{key}?fields=...
    POST search                         - JQL listing
    POST issue                          - create (Task or Review)
    PUT  issue/{key}                    - partial update, 204 No Content
    POST issue/{key}/comment
    POST issue/{key}/watchers           - body is a JSON string (account id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from backlog_relay.adapters.base import TicketPlatformClient, as_text, safe_nested_get
from backlog_relay.adapters.registry import ClientRegistry
from backlog_relay.config.platforms import JiraAuth, JiraConfig, PlatformType, validate_auth
from backlog_relay.models import (
    CreateReviewRequest,
    CreateTicketOptions,
    Issue,
    Person,
    PRState,
    PullRequest,
    StandardTicket,
    TicketComment,
    TicketFilter,
    TicketUpdate,
    as_pull_request,
)
from backlog_relay.normalization.branches import embed_branch_metadata, extract_branch_metadata
from backlog_relay.normalization.classification import (
    CODE_REVIEW_LABEL,
    REVIEW_ISSUE_TYPE,
    is_jira_review,
)
from backlog_relay.normalization.status import jira_pr_state, jira_status_filter, map_jira_status
from backlog_relay.transports.jira import JiraTransport
from backlog_relay.utils.errors import InvalidConfigurationError, TransportError

logger = logging.getLogger(__name__)

ISSUE = "issue"
DEFAULT_ISSUE_TYPE = "Task"

# Fields requested on every read
ISSUE_FIELDS = [
    "summary",
    "description",
    "status",
    "issuetype",
    "created",
    "updated",
    "assignee",
    "reporter",
]


def _jira_person(user: Any) -> Person:
    # Cloud identifies users by accountId, Server/Data Center by name
    user_id = safe_nested_get(user, "accountId") or safe_nested_get(user, "name")
    return Person(id=user_id, name=safe_nested_get(user, "displayName") or user_id)


def _jql_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class JiraRecord:
    """Typed view of an issue payload."""

    key: str
    summary: str
    description: str
    status_name: str
    issue_type: str
    created: str
    updated: str
    reporter: Person
    assignee: Person | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> JiraRecord:
        raw_fields = data.get("fields")
        fields: dict[str, Any] = raw_fields if isinstance(raw_fields, dict) else {}
        assignee = fields.get("assignee")
        return cls(
            key=as_text(data.get("key")),
            summary=as_text(fields.get("summary")),
            description=as_text(fields.get("description")),
            status_name=safe_nested_get(fields.get("status"), "name"),
            issue_type=safe_nested_get(fields.get("issuetype"), "name"),
            created=as_text(fields.get("created")),
            updated=as_text(fields.get("updated")),
            reporter=_jira_person(fields.get("reporter")),
            assignee=_jira_person(assignee) if isinstance(assignee, dict) else None,
        )

    def to_ticket(self) -> StandardTicket:
        if is_jira_review(self.issue_type):
            source_branch, target_branch = extract_branch_metadata(self.description)
            return PullRequest(
                id=self.key,
                title=self.summary,
                description=self.description,
                created_at=self.created,
                updated_at=self.updated,
                status=map_jira_status(self.status_name),
                author=self.reporter,
                assignee=self.assignee,
                source_branch=source_branch,
                target_branch=target_branch,
                state=jira_pr_state(self.status_name),
            )
        return Issue(
            id=self.key,
            title=self.summary,
            description=self.description,
            created_at=self.created,
            updated_at=self.updated,
            status=map_jira_status(self.status_name),
            author=self.reporter,
            assignee=self.assignee,
        )


@ClientRegistry.register
class JiraClient(TicketPlatformClient):
    """Client for Jira issues in one project.

    Reviewers: the first reviewer becomes the assignee of the Review issue;
    the others are added as watchers.

    Class Attributes:
        PLATFORM: PlatformType.JIRA for registry registration
    """

    PLATFORM = PlatformType.JIRA

    def __init__(
        self,
        config: JiraConfig,
        http_client: httpx.AsyncClient | None = None,
        transport: JiraTransport | None = None,
    ) -> None:
        if not isinstance(config, JiraConfig):
            raise InvalidConfigurationError(
                f"JiraClient requires a JiraConfig, got {type(config).__name__}",
                platform=PlatformType.JIRA.value,
            )
        validate_auth(PlatformType.JIRA, config.auth)
        assert isinstance(config.auth, JiraAuth)
        self._config = config
        self._transport = transport or JiraTransport(
            base_url=config.base_url,
            email=config.auth.email,
            api_token=config.auth.api_token,
            timeout_seconds=config.timeout_seconds,
            http_client=http_client,
        )

    @property
    def name(self) -> str:
        return "Jira"

    async def get_ticket(self, ticket_id: str) -> StandardTicket:
        data = await self._transport.fetch(
            ISSUE, ticket_id, params={"fields": ",".join(ISSUE_FIELDS)}
        )
        return JiraRecord.from_api(data).to_ticket()

    def build_jql(self, filter: TicketFilter | None = None) -> str:
        """Build the listing query for the configured project."""
        clauses = [f"project = {_jql_string(self._config.project_key)}"]
        if filter is not None:
            status_clause = jira_status_filter(filter.status)
            if status_clause is not None:
                clauses.append(status_clause)
            elif filter.status:
                logger.debug(f"Jira: dropping unsupported status filter {filter.status!r}")
            if filter.assignee_id:
                clauses.append(f"assignee = {_jql_string(filter.assignee_id)}")
        return " AND ".join(clauses)

    async def get_tickets(self, filter: TicketFilter | None = None) -> list[StandardTicket]:
        issues = await self._transport.search(self.build_jql(filter), ISSUE_FIELDS)
        return [JiraRecord.from_api(issue).to_ticket() for issue in issues]

    def _created_key(self, data: dict[str, Any]) -> str:
        key = as_text(data.get("key"))
        if not key:
            raise TransportError(
                platform_name=self.name,
                error_details="create response did not include an issue key",
            )
        return key

    async def create_ticket(self, options: CreateTicketOptions) -> StandardTicket:
        """Create a Task and return it as re-read from Jira."""
        fields: dict[str, Any] = {
            "project": {"key": self._config.project_key},
            "summary": options.title,
            "description": options.description,
            "issuetype": {"name": DEFAULT_ISSUE_TYPE},
        }
        if options.assignee_id:
            fields["assignee"] = {"accountId": options.assignee_id}
        if options.labels:
            fields["labels"] = list(options.labels)
        data = await self._transport.create(ISSUE, {"fields": fields})
        return await self.get_ticket(self._created_key(data))

    async def update_ticket(self, ticket_id: str, updates: TicketUpdate) -> StandardTicket:
        fields: dict[str, Any] = {}
        if updates.title is not None:
            fields["summary"] = updates.title
        if updates.description is not None:
            fields["description"] = updates.description
        if updates.assignee_id is not None:
            fields["assignee"] = {"accountId": updates.assignee_id}
        if updates.labels is not None:
            fields["labels"] = list(updates.labels)
        if fields:
            await self._transport.update(ISSUE, ticket_id, {"fields": fields}, method="PUT")
        return await self.get_ticket(ticket_id)

    async def add_comment(self, ticket_id: str, comment: str) -> TicketComment:
        data = await self._transport.create(f"{ISSUE}/{ticket_id}/comment", {"body": comment})
        return TicketComment(
            id=as_text(data.get("id")),
            content=as_text(data.get("body"), comment),
            author=_jira_person(data.get("author")),
            created_at=as_text(data.get("created")),
        )

    async def _add_watcher(self, issue_key: str, account_id: str) -> None:
        # The watchers endpoint takes a bare JSON string and answers 204
        await self._transport.request(
            "POST",
            self._transport.url_for(f"{ISSUE}/{issue_key}/watchers"),
            json_data=account_id,
            ticket_id=issue_key,
        )

    async def create_review_request(self, options: CreateReviewRequest) -> PullRequest:
        """Create a Review issue labeled ``code-review``.

        The project must define a "Review" issue type; otherwise Jira rejects
        the create call and TransportError is raised.
        """
        reviewers = list(options.reviewers or [])
        labels = list(options.labels or [])
        if CODE_REVIEW_LABEL not in labels:
            labels.append(CODE_REVIEW_LABEL)

        fields: dict[str, Any] = {
            "project": {"key": self._config.project_key},
            "summary": options.title,
            "description": embed_branch_metadata(
                options.description,
                options.source_branch,
                options.target_branch,
                reviewers,
            ),
            "issuetype": {"name": REVIEW_ISSUE_TYPE},
            "labels": labels,
        }
        if reviewers:
            fields["assignee"] = {"accountId": reviewers[0]}

        data = await self._transport.create(ISSUE, {"fields": fields})
        key = self._created_key(data)

        for watcher in reviewers[1:]:
            await self._add_watcher(key, watcher)

        ticket = await self.get_ticket(key)
        return as_pull_request(ticket, options.source_branch, options.target_branch, PRState.OPEN)


__all__ = ["JiraClient", "JiraRecord"]
