"""Client registry and the ``create_client`` factory.

Clients register themselves with ``@ClientRegistry.register``; the factory
looks the config's platform tag up in the registry and constructs the
matching client bound to that configuration.

Example usage:
    from backlog_relay.adapters import create_client

    client = create_client({"type": "gitlab", "projectId": 7, "apiToken": "glpat-..."})
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any, ClassVar

import httpx

from backlog_relay.adapters.base import TicketPlatformClient
from backlog_relay.config.platforms import (
    GitHubConfig,
    GitLabConfig,
    JiraConfig,
    PlatformConfig,
    PlatformType,
    ServiceNowConfig,
    parse_platform_config,
)
from backlog_relay.utils.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

_CONFIG_TYPES = (GitHubConfig, GitLabConfig, ServiceNowConfig, JiraConfig)


class ClientRegistry:
    """Registry mapping platform tags to client classes.

    All methods are class methods - no instance needed.
    Thread-safe: registry mutations are protected by a lock.
    """

    _clients: ClassVar[dict[PlatformType, type[TicketPlatformClient]]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def register(cls, client_class: type[TicketPlatformClient]) -> type[TicketPlatformClient]:
        """Decorator to register a client class.

        The class must subclass TicketPlatformClient and carry a PLATFORM
        class attribute holding a PlatformType.

        Raises:
            TypeError: If the class does not satisfy those requirements
        """
        if not isinstance(client_class, type) or not issubclass(
            client_class, TicketPlatformClient
        ):
            raise TypeError(
                f"Client class must be a subclass of TicketPlatformClient, "
                f"got {type(client_class).__name__}"
            )

        platform = getattr(client_class, "PLATFORM", None)
        if not isinstance(platform, PlatformType):
            raise TypeError(
                f"PLATFORM attribute of {client_class.__name__} must be a "
                f"PlatformType enum value, got {type(platform).__name__}"
            )

        with cls._lock:
            existing = cls._clients.get(platform)
            if existing is not None and existing is not client_class:
                logger.warning(
                    f"Replacing existing client {existing.__name__} "
                    f"with {client_class.__name__} for platform {platform.value}"
                )
            cls._clients[platform] = client_class

        return client_class

    @classmethod
    def get_client_class(cls, platform: PlatformType) -> type[TicketPlatformClient]:
        """Look up the client class for a platform.

        Raises:
            InvalidConfigurationError: If no client is registered for it
        """
        with cls._lock:
            client_class = cls._clients.get(platform)
            registered = sorted(p.value for p in cls._clients)
        if client_class is None:
            raise InvalidConfigurationError(
                f"No client registered for platform: {platform.value} "
                f"(registered: {', '.join(registered) or 'none'})",
                platform=platform.value,
            )
        return client_class

    @classmethod
    def list_platforms(cls) -> list[PlatformType]:
        """Registered platforms sorted by tag."""
        with cls._lock:
            return sorted(cls._clients, key=lambda p: p.value)

    @classmethod
    def unregister(cls, platform: PlatformType) -> None:
        """Remove a registration (used for test isolation)."""
        with cls._lock:
            cls._clients.pop(platform, None)


def create_client(
    config: PlatformConfig | Mapping[str, Any],
    http_client: httpx.AsyncClient | None = None,
) -> TicketPlatformClient:
    """Build the client for a platform configuration.

    Args:
        config: A PlatformConfig instance, or a raw mapping with a ``type``
            tag that is decoded with parse_platform_config()
        http_client: Optional shared httpx client for connection pooling

    Returns:
        A client bound to ``config``

    Raises:
        InvalidConfigurationError: If the type tag is unknown, a required
            field is missing, or the auth shape does not fit the platform
    """
    if isinstance(config, _CONFIG_TYPES):
        platform_config: PlatformConfig = config
    elif isinstance(config, Mapping):
        platform_config = parse_platform_config(config)
    else:
        raise InvalidConfigurationError(
            f"Unsupported configuration object: {type(config).__name__}"
        )

    client_class = ClientRegistry.get_client_class(platform_config.PLATFORM)
    logger.debug(f"Creating {client_class.__name__} for {platform_config.PLATFORM.value}")
    # Every registered client accepts (config, http_client=...)
    return client_class(platform_config, http_client=http_client)  # type: ignore[call-arg]


__all__ = [
    "ClientRegistry",
    "create_client",
]
