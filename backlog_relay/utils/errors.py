"""Custom exceptions and exit codes for backlog-relay.

This module defines the exit codes and exception hierarchy used throughout
the package:

- NotFoundError: identifier resolves to no record of any probed resource type
- InvalidConfigurationError: malformed or incomplete platform configuration
- TransportError: the platform rejected a call (auth, network, validation)
"""

from __future__ import annotations

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes used by the CLI.

    These codes are used for consistent error reporting and can be
    checked by calling scripts or CI systems.
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_CONFIGURATION = 2
    NOT_FOUND = 3
    TRANSPORT_FAILURE = 4


class RelayError(Exception):
    """Base exception for backlog-relay errors.

    All custom exceptions in this package inherit from this class.
    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class InvalidConfigurationError(RelayError):
    """Platform configuration is malformed or incomplete.

    Raised when:
    - The ``type`` tag names none of the supported platforms
    - A platform config is missing a required field (project id, token, ...)
    - The auth variant does not fit the platform
    - A config file cannot be read or parsed

    Attributes:
        platform: Platform tag the configuration declared (may be None)
        missing_fields: Names of required fields that were absent
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.INVALID_CONFIGURATION

    def __init__(
        self,
        message: str,
        platform: str | None = None,
        missing_fields: set[str] | frozenset[str] | None = None,
    ) -> None:
        self.platform = platform
        self.missing_fields = frozenset(missing_fields or ())
        super().__init__(message)


class TransportError(RelayError):
    """A remote call failed for any reason other than "not found".

    The underlying httpx exception is kept as ``__cause__`` and is not
    interpreted beyond recording the HTTP status code when there is one.

    Attributes:
        platform_name: Human-readable platform name (e.g., "GitLab")
        status_code: HTTP status code, or None for network-level failures
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.TRANSPORT_FAILURE

    def __init__(
        self,
        platform_name: str,
        error_details: str,
        status_code: int | None = None,
        message: str | None = None,
    ) -> None:
        self.platform_name = platform_name
        self.error_details = error_details
        self.status_code = status_code
        if message is None:
            message = f"{platform_name} API error: {error_details}"
        super().__init__(message)


class NotFoundError(TransportError):
    """No record exists for the identifier.

    Semantic subclass of TransportError for HTTP 404 responses. Adapters
    that probe several resource types only let this escape once every
    candidate type has answered "not found".

    Attributes:
        platform_name: The platform that was queried
        ticket_id: The identifier that was not found
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.NOT_FOUND

    def __init__(
        self,
        platform_name: str,
        ticket_id: str,
        message: str | None = None,
    ) -> None:
        self.ticket_id = ticket_id
        if message is None:
            message = f"{platform_name}: Ticket '{ticket_id}' not found"
        super().__init__(
            platform_name=platform_name,
            error_details="Ticket not found",
            status_code=404,
            message=message,
        )


__all__ = [
    "ExitCode",
    "RelayError",
    "InvalidConfigurationError",
    "TransportError",
    "NotFoundError",
]
