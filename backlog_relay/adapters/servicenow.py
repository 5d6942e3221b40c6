"""ServiceNow client.

Tickets live in two Table API tables: ``incident`` (issues) and
``change_request``. A change request with category "Code Review" stands in
for a pull request; its branches are carried as labeled lines in the
description (see backlog_relay.normalization.branches).

Identifiers are sys_ids, which do not say which table they belong to, so
reads, updates and comments probe ``change_request`` first and fall back to
``incident`` on "not found".

Comments are written to the ``work_notes`` journal field with a PATCH on
the record. ServiceNow appends the value to the record's journal; the API
has no separate comment resource, and the PATCH response does not always
echo the new entry back.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from backlog_relay.adapters.base import TicketPlatformClient, as_text, probe_then_fallback
from backlog_relay.adapters.registry import ClientRegistry
from backlog_relay.config.platforms import PlatformType, ServiceNowConfig, validate_auth
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
    as_pull_request,
)
from backlog_relay.normalization.branches import embed_branch_metadata, extract_branch_metadata
from backlog_relay.normalization.classification import (
    CODE_REVIEW_CATEGORY,
    SERVICENOW_CHANGE_REQUEST_TABLE,
    SERVICENOW_INCIDENT_TABLE,
    is_servicenow_review,
)
from backlog_relay.normalization.status import (
    map_servicenow_state,
    servicenow_pr_state,
    servicenow_state_filter,
)
from backlog_relay.transports.base import RestTransport
from backlog_relay.transports.servicenow import ServiceNowTransport
from backlog_relay.utils.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

# Change request type used for emulated review requests
STANDARD_CHANGE_TYPE = "normal"


def _reference(value: Any) -> Person | None:
    """Decode a reference field (``{"value": sys_id, "display_value": ...}``).

    Unset references come back as "" or null.
    """
    if isinstance(value, dict):
        ref_id = as_text(value.get("value"))
        if not ref_id:
            return None
        return Person(id=ref_id, name=as_text(value.get("display_value")) or ref_id)
    if value:
        text = str(value)
        return Person(id=text, name=text)
    return None


def _user_name_person(user_name: str) -> Person:
    # sys_created_by / sys_updated_by hold a user name, not a sys_id
    return Person(id=user_name, name=user_name)


@dataclass(frozen=True)
class ServiceNowRecord:
    """Typed view of an incident or change_request row."""

    sys_id: str
    short_description: str
    description: str
    state: str
    created_on: str
    updated_on: str
    created_by: str
    assigned_to: Person | None
    record_class: str
    category: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any], table: str) -> ServiceNowRecord:
        """Decode a row.

        Args:
            data: Row JSON (already unwrapped from the ``result`` envelope)
            table: Table the row was read from, used when the row carries
                no ``sys_class_name``
        """
        return cls(
            sys_id=as_text(data.get("sys_id")),
            short_description=as_text(data.get("short_description")),
            description=as_text(data.get("description")),
            state=as_text(data.get("state")),
            created_on=as_text(data.get("sys_created_on")),
            updated_on=as_text(data.get("sys_updated_on")),
            created_by=as_text(data.get("sys_created_by")),
            assigned_to=_reference(data.get("assigned_to")),
            record_class=as_text(data.get("sys_class_name")) or table,
            category=data.get("category") or None,
        )

    @property
    def is_review(self) -> bool:
        return is_servicenow_review(self.record_class, self.category)

    def to_ticket(self) -> StandardTicket:
        if self.is_review:
            source_branch, target_branch = extract_branch_metadata(self.description)
            return PullRequest(
                id=self.sys_id,
                title=self.short_description,
                description=self.description,
                created_at=self.created_on,
                updated_at=self.updated_on,
                status=map_servicenow_state(self.state),
                author=_user_name_person(self.created_by),
                assignee=self.assigned_to,
                source_branch=source_branch,
                target_branch=target_branch,
                state=servicenow_pr_state(self.state),
            )
        return Issue(
            id=self.sys_id,
            title=self.short_description,
            description=self.description,
            created_at=self.created_on,
            updated_at=self.updated_on,
            status=map_servicenow_state(self.state),
            author=_user_name_person(self.created_by),
            assignee=self.assigned_to,
        )


@ClientRegistry.register
class ServiceNowClient(TicketPlatformClient):
    """Client for ServiceNow incidents and change requests.

    Reviewers: the first reviewer becomes ``assigned_to``; the others go to
    the change request's ``watch_list``.

    Labels: ServiceNow has no labels. The first label is written to
    ``category`` on incidents; the rest are dropped.

    Class Attributes:
        PLATFORM: PlatformType.SERVICENOW for registry registration
    """

    PLATFORM = PlatformType.SERVICENOW

    def __init__(
        self,
        config: ServiceNowConfig,
        http_client: httpx.AsyncClient | None = None,
        transport: RestTransport | None = None,
    ) -> None:
        if not isinstance(config, ServiceNowConfig):
            raise InvalidConfigurationError(
                f"ServiceNowClient requires a ServiceNowConfig, got {type(config).__name__}",
                platform=PlatformType.SERVICENOW.value,
            )
        validate_auth(PlatformType.SERVICENOW, config.auth)
        self._config = config
        self._transport = transport or ServiceNowTransport(
            base_url=config.base_url,
            auth=config.auth,
            timeout_seconds=config.timeout_seconds,
            http_client=http_client,
        )

    @property
    def name(self) -> str:
        return "ServiceNow"

    async def _probe(self, ticket_id: str, operation: Any) -> Any:
        return await probe_then_fallback(
            [
                ("change request", lambda: operation(SERVICENOW_CHANGE_REQUEST_TABLE)),
                ("incident", lambda: operation(SERVICENOW_INCIDENT_TABLE)),
            ],
            platform_name=self.name,
            ticket_id=ticket_id,
        )

    async def get_ticket(self, ticket_id: str) -> StandardTicket:
        async def read(table: str) -> StandardTicket:
            data = await self._transport.fetch(table, ticket_id)
            return ServiceNowRecord.from_api(data, table).to_ticket()

        ticket: StandardTicket = await self._probe(ticket_id, read)
        return ticket

    def _list_query(self, filter: TicketFilter | None) -> dict[str, Any]:
        if filter is None:
            return {}
        terms: list[str] = []
        state = servicenow_state_filter(filter.status)
        if state is not None:
            terms.append(f"state={state}")
        elif filter.status:
            logger.debug(f"ServiceNow: dropping unsupported status filter {filter.status!r}")
        if filter.assignee_id:
            terms.append(f"assigned_to={filter.assignee_id}")
        if not terms:
            return {}
        return {"sysparm_query": "^".join(terms)}

    async def get_tickets(self, filter: TicketFilter | None = None) -> list[StandardTicket]:
        """List incidents followed by change requests.

        Both tables are queried in one task group; the result order does not
        depend on which query finishes first.
        """
        params = self._list_query(filter)
        try:
            async with asyncio.TaskGroup() as group:
                incident_rows = group.create_task(
                    self._transport.list_records(SERVICENOW_INCIDENT_TABLE, params=params)
                )
                change_rows = group.create_task(
                    self._transport.list_records(SERVICENOW_CHANGE_REQUEST_TABLE, params=params)
                )
        except ExceptionGroup as group_error:
            # Surface the first failing leg as-is; the other leg was cancelled
            raise group_error.exceptions[0]
        incidents, changes = incident_rows.result(), change_rows.result()
        tickets = [
            ServiceNowRecord.from_api(row, SERVICENOW_INCIDENT_TABLE).to_ticket()
            for row in incidents
        ]
        tickets.extend(
            ServiceNowRecord.from_api(row, SERVICENOW_CHANGE_REQUEST_TABLE).to_ticket()
            for row in changes
        )
        return tickets

    async def create_ticket(self, options: CreateTicketOptions) -> StandardTicket:
        """Create an incident."""
        payload: dict[str, Any] = {
            "short_description": options.title,
            "description": options.description,
        }
        if options.assignee_id:
            payload["assigned_to"] = options.assignee_id
        if options.labels:
            payload["category"] = options.labels[0]
        data = await self._transport.create(SERVICENOW_INCIDENT_TABLE, payload)
        return ServiceNowRecord.from_api(data, SERVICENOW_INCIDENT_TABLE).to_ticket()

    async def update_ticket(self, ticket_id: str, updates: TicketUpdate) -> StandardTicket:
        payload: dict[str, Any] = {}
        if updates.title is not None:
            payload["short_description"] = updates.title
        if updates.description is not None:
            payload["description"] = updates.description
        if updates.assignee_id is not None:
            payload["assigned_to"] = updates.assignee_id
        if updates.labels:
            payload["category"] = updates.labels[0]

        async def patch(table: str) -> StandardTicket:
            data = await self._transport.update(table, ticket_id, payload)
            if data is None:
                data = await self._transport.fetch(table, ticket_id)
            return ServiceNowRecord.from_api(data, table).to_ticket()

        ticket: StandardTicket = await self._probe(ticket_id, patch)
        return ticket

    async def add_comment(self, ticket_id: str, comment: str) -> TicketComment:
        """Write ``comment`` as a work note.

        The returned comment id is the record's sys_id, since work notes are
        not addressable on their own through the Table API.
        """

        async def note(table: str) -> TicketComment:
            data = await self._transport.update(table, ticket_id, {"work_notes": comment})
            data = data or {}
            updated_by = as_text(data.get("sys_updated_by"))
            return TicketComment(
                id=as_text(data.get("sys_id"), ticket_id),
                content=as_text(data.get("work_notes")) or comment,
                author=_user_name_person(updated_by),
                created_at=as_text(data.get("sys_updated_on")),
            )

        result: TicketComment = await self._probe(ticket_id, note)
        return result

    async def create_review_request(self, options: CreateReviewRequest) -> PullRequest:
        """Create a "Code Review" change request carrying the branch lines."""
        reviewers = list(options.reviewers or [])
        payload: dict[str, Any] = {
            "short_description": options.title,
            "description": embed_branch_metadata(
                options.description,
                options.source_branch,
                options.target_branch,
                reviewers,
            ),
            "type": STANDARD_CHANGE_TYPE,
            "category": CODE_REVIEW_CATEGORY,
        }
        if reviewers:
            payload["assigned_to"] = reviewers[0]
        if len(reviewers) > 1:
            payload["watch_list"] = ",".join(reviewers[1:])

        data = await self._transport.create(SERVICENOW_CHANGE_REQUEST_TABLE, payload)
        record = ServiceNowRecord.from_api(data, SERVICENOW_CHANGE_REQUEST_TABLE)
        return as_pull_request(
            record.to_ticket(),
            options.source_branch,
            options.target_branch,
            servicenow_pr_state(record.state),
        )


__all__ = ["ServiceNowClient", "ServiceNowRecord"]
