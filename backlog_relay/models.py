"""Shared ticket model for all platforms.

This module defines:
- TicketKind and PRState enums for the variant tag and review lifecycle
- Person, Issue, PullRequest and TicketComment snapshots returned by clients
- Request DTOs (CreateTicketOptions, TicketUpdate, CreateReviewRequest,
  TicketFilter) carrying caller intent into a client

Every client produces these shapes regardless of how rich the platform's
own schema is. Fields a platform cannot represent are left as None instead
of being invented; ``description`` and ``status`` are always present.
Timestamps are passed through exactly as the platform formats them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, TypeAlias


class TicketKind(Enum):
    """Variant tag of a normalized ticket.

    Derived by the client from platform signals, never supplied by callers.
    """

    ISSUE = "issue"
    PULL_REQUEST = "pullRequest"
    MERGE_REQUEST = "mergeRequest"  # GitLab naming of a pull request


class PRState(Enum):
    """Three-state lifecycle shared by every review request."""

    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"


@dataclass(frozen=True)
class Person:
    """A platform user.

    Attributes:
        id: Platform identifier (account id, numeric id or username)
        name: Human-displayable identity, not necessarily unique
    """

    id: str
    name: str


@dataclass(frozen=True)
class Issue:
    """A plain work item: GitHub/GitLab issue, ServiceNow incident or change
    request, or any non-review Jira issue type.

    Attributes:
        id: Platform-native identifier (issue number, sys_id or issue key)
        title: Ticket title/summary
        description: Body text, "" when the platform returned nothing
        created_at: Creation timestamp as returned by the platform
        updated_at: Last update timestamp as returned by the platform
        status: Shared-vocabulary status, never the raw platform value
        author: Creator/reporter
        assignee: Assigned user, None when unassigned
    """

    id: str
    title: str
    description: str
    created_at: str
    updated_at: str
    status: str
    author: Person
    assignee: Person | None = None
    kind: TicketKind = field(default=TicketKind.ISSUE, init=False)

    @property
    def is_review_request(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        result = asdict(self)
        result["kind"] = self.kind.value
        return result


@dataclass(frozen=True)
class PullRequest:
    """A review request: GitHub pull request, GitLab merge request, or a
    ServiceNow change request / Jira issue that emulates one by convention.

    Attributes:
        id: Platform-native identifier
        title: Title/summary
        description: Body text, "" when the platform returned nothing
        created_at: Creation timestamp as returned by the platform
        updated_at: Last update timestamp as returned by the platform
        status: Shared-vocabulary status
        author: Creator
        source_branch: Branch being merged ("unknown" if unrecoverable)
        target_branch: Branch merged into ("unknown" if unrecoverable)
        state: Review lifecycle state
        assignee: Assigned user, None when unassigned
        kind: PULL_REQUEST or MERGE_REQUEST
    """

    id: str
    title: str
    description: str
    created_at: str
    updated_at: str
    status: str
    author: Person
    source_branch: str
    target_branch: str
    state: PRState
    assignee: Person | None = None
    kind: TicketKind = TicketKind.PULL_REQUEST

    @property
    def is_review_request(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        result = asdict(self)
        result["kind"] = self.kind.value
        result["state"] = self.state.value
        return result


StandardTicket: TypeAlias = Issue | PullRequest


def as_pull_request(
    ticket: StandardTicket,
    source_branch: str,
    target_branch: str,
    state: PRState = PRState.OPEN,
) -> PullRequest:
    """Promote a freshly created ticket to the PullRequest variant.

    Used by clients that emulate review requests when the re-read record does
    not classify as one (e.g., a server-side rule rewrote the category). A
    ticket that already is a PullRequest is returned unchanged.
    """
    if isinstance(ticket, PullRequest):
        return ticket
    return PullRequest(
        id=ticket.id,
        title=ticket.title,
        description=ticket.description,
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
        status=ticket.status,
        author=ticket.author,
        assignee=ticket.assignee,
        source_branch=source_branch,
        target_branch=target_branch,
        state=state,
    )


@dataclass(frozen=True)
class TicketComment:
    """A comment/note as last written on the platform. No threading."""

    id: str
    content: str
    author: Person
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class CreateTicketOptions:
    """Caller intent for creating a ticket."""

    title: str
    description: str
    assignee_id: str | None = None
    labels: list[str] | None = None


@dataclass(frozen=True)
class TicketUpdate:
    """Partial update. Fields left as None are not sent to the platform."""

    title: str | None = None
    description: str | None = None
    assignee_id: str | None = None
    labels: list[str] | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and self.assignee_id is None
            and self.labels is None
        )


@dataclass(frozen=True)
class CreateReviewRequest:
    """Caller intent for opening a review request."""

    title: str
    description: str
    source_branch: str
    target_branch: str
    reviewers: list[str] | None = None
    labels: list[str] | None = None


@dataclass(frozen=True)
class TicketFilter:
    """Listing filter.

    ``status`` is a shared-vocabulary value. Values a platform cannot
    express are dropped from the remote query instead of failing.
    """

    status: str | None = None
    assignee_id: str | None = None


__all__ = [
    "TicketKind",
    "PRState",
    "Person",
    "Issue",
    "PullRequest",
    "StandardTicket",
    "as_pull_request",
    "TicketComment",
    "CreateTicketOptions",
    "TicketUpdate",
    "CreateReviewRequest",
    "TicketFilter",
]
