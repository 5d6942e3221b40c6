"""Client interface shared by all platforms.

This module defines:
- TicketPlatformClient, the abstract interface every platform client implements
- probe_then_fallback(), the lookup strategy for platforms whose review
  requests and issues live in separate identifier spaces
- Small helpers for defensive decoding of platform JSON

Clients are polymorphic over one capability set (read one, read many,
create, update, comment, create review request). They hold no mutable state
besides their transport, and every call re-fetches from the platform.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, ClassVar, TypeVar

from backlog_relay.config.platforms import PlatformType
from backlog_relay.models import (
    CreateReviewRequest,
    CreateTicketOptions,
    PullRequest,
    StandardTicket,
    TicketComment,
    TicketFilter,
    TicketUpdate,
)
from backlog_relay.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def safe_nested_get(obj: Any, key: str, default: str = "") -> str:
    """Safely get a nested key from an object that might not be a dict.

    Platform payloads use null where an object is expected (e.g., an
    unassigned ticket), so chained ``.get()`` calls are unsafe.

    Args:
        obj: The object to get the key from (may be None, dict, or other type)
        key: The key to retrieve
        default: Default value if key not found or obj is not a dict

    Returns:
        The value at key as a string, or the default
    """
    if isinstance(obj, dict):
        value = obj.get(key, default)
        return str(value) if value is not None else default
    return default


def as_text(value: Any, default: str = "") -> str:
    """Convert a scalar payload value to str, mapping None to ``default``."""
    if value is None:
        return default
    return str(value)


async def probe_then_fallback(
    attempts: Sequence[tuple[str, Callable[[], Awaitable[T]]]],
    *,
    platform_name: str,
    ticket_id: str,
) -> T:
    """Try each resource type in order until one does not answer "not found".

    Only NotFoundError moves on to the next attempt; any other failure is
    raised immediately. When every attempt answers "not found", the caller
    receives a NotFoundError after all of them have been made.

    Args:
        attempts: (resource type name, zero-argument coroutine factory) pairs,
            most specific resource type first
        platform_name: Platform name for the final error
        ticket_id: Identifier being looked up

    Returns:
        The result of the first attempt that succeeded

    Raises:
        NotFoundError: If every attempt answered "not found"
    """
    tried: list[str] = []
    for resource_type, attempt in attempts:
        try:
            return await attempt()
        except NotFoundError:
            tried.append(resource_type)
            logger.debug(f"{platform_name}: {ticket_id} is not a {resource_type}, trying next type")
    raise NotFoundError(
        platform_name=platform_name,
        ticket_id=ticket_id,
        message=f"{platform_name}: Ticket '{ticket_id}' not found (tried: {', '.join(tried)})",
    )


class TicketPlatformClient(ABC):
    """Abstract interface for ticketing platform clients.

    All platform-specific clients implement this interface, returning the
    shared ticket model and never raw platform values.

    Class Attributes:
        PLATFORM: Required class attribute of type ``PlatformType`` for
            registry registration. Must be set before using
            ``@ClientRegistry.register``.

    Failure semantics:
        Transport failures reach the caller unmodified (no retry). The only
        recovered failure is a "not found" answer while probing resource
        types, which just moves the lookup on to the next type.
    """

    PLATFORM: ClassVar[PlatformType]

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable platform name."""
        pass

    @abstractmethod
    async def get_ticket(self, ticket_id: str) -> StandardTicket:
        """Fetch and normalize one ticket.

        Raises:
            NotFoundError: If no probed resource type has the identifier
        """
        pass

    @abstractmethod
    async def get_tickets(self, filter: TicketFilter | None = None) -> list[StandardTicket]:
        """List tickets in the platform's native order.

        Unrecognized status filter values are dropped from the query.
        """
        pass

    @abstractmethod
    async def create_ticket(self, options: CreateTicketOptions) -> StandardTicket:
        """Create one record of the platform's primary ticket type."""
        pass

    @abstractmethod
    async def update_ticket(self, ticket_id: str, updates: TicketUpdate) -> StandardTicket:
        """Apply a partial update; fields left as None are not touched."""
        pass

    @abstractmethod
    async def add_comment(self, ticket_id: str, comment: str) -> TicketComment:
        """Add a comment/note to a ticket."""
        pass

    @abstractmethod
    async def create_review_request(self, options: CreateReviewRequest) -> PullRequest:
        """Open a review request using the platform's native or emulated form."""
        pass


__all__ = [
    "TicketPlatformClient",
    "as_text",
    "probe_then_fallback",
    "safe_nested_get",
]
