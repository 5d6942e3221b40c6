"""Base class for platform REST transports.

A transport turns resource-relative calls into authenticated HTTP requests
and hands back decoded JSON. It knows nothing about tickets; clients in
``backlog_relay.adapters`` do the normalization.

Collaborator contract used by the clients:

    fetch(resource, record_id)            -> record          (GET)
    list_records(resource, params)        -> list of records (GET)
    create(resource, payload)             -> record          (POST)
    update(resource, record_id, payload)  -> record | None   (PATCH/PUT)

``resource`` is a path relative to the platform root (e.g., "issues",
"merge_requests/12/notes"). HTTP 404 becomes NotFoundError; every other
HTTP or network failure becomes TransportError with the httpx exception as
its cause. Nothing is retried.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Literal

import httpx

from backlog_relay.config.platforms import DEFAULT_TIMEOUT_SECONDS
from backlog_relay.utils.errors import NotFoundError, TransportError
from backlog_relay.utils.logging import log_request

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404
HTTP_NO_CONTENT = 204

HttpMethod = Literal["GET", "POST", "PUT", "PATCH"]


class RestTransport(ABC):
    """Authenticated JSON-over-HTTP access to one platform.

    HTTP Client Sharing:
        A shared ``httpx.AsyncClient`` may be injected for connection
        pooling. Without one, a short-lived client is created per request.
        The configured timeout is applied per request in both cases.

    Subclasses provide the platform name, the API root and the auth
    material (headers and/or httpx auth).
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Human-readable platform name."""
        pass

    @property
    @abstractmethod
    def api_root(self) -> str:
        """URL that resource paths are appended to (no trailing slash)."""
        pass

    def _headers(self) -> dict[str, str]:
        """Request headers, including bearer auth where the platform uses it."""
        return {"Accept": "application/json"}

    def _auth(self) -> httpx.Auth | None:
        """httpx auth for platforms using HTTP basic auth."""
        return None

    def url_for(self, resource: str, record_id: str | None = None) -> str:
        """Build the absolute URL of a resource (and optional record)."""
        url = f"{self.api_root}/{resource.strip('/')}"
        if record_id is not None:
            url = f"{url}/{record_id}"
        return url

    # ------------------------------------------------------------------
    # Collaborator contract
    # ------------------------------------------------------------------

    async def fetch(
        self,
        resource: str,
        record_id: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """GET one record.

        Raises:
            NotFoundError: If the platform answers 404
            TransportError: For any other failure
        """
        data = await self.request(
            "GET", self.url_for(resource, record_id), params=params, ticket_id=record_id
        )
        return self._unwrap_record(data)

    async def list_records(
        self,
        resource: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """GET a collection in the platform's native order."""
        data = await self.request("GET", self.url_for(resource), params=params)
        return self._unwrap_list(data)

    async def create(self, resource: str, payload: Any) -> dict[str, Any]:
        """POST a new record (or sub-resource such as a comment)."""
        data = await self.request("POST", self.url_for(resource), json_data=payload)
        return self._unwrap_record(data)

    async def update(
        self,
        resource: str,
        record_id: str,
        payload: dict[str, Any],
        method: HttpMethod = "PATCH",
    ) -> dict[str, Any] | None:
        """Modify an existing record.

        Returns:
            The updated record, or None when the platform answers without a
            body (e.g., Jira's 204 No Content)
        """
        data = await self.request(
            method, self.url_for(resource, record_id), json_data=payload, ticket_id=record_id
        )
        if data is None:
            return None
        return self._unwrap_record(data)

    # ------------------------------------------------------------------
    # Response envelopes
    # ------------------------------------------------------------------

    def _unwrap_record(self, data: Any) -> dict[str, Any]:
        """Strip the platform envelope around a single record, if any."""
        if not isinstance(data, dict):
            raise TransportError(
                platform_name=self.platform_name,
                error_details=f"expected a JSON object, got {type(data).__name__}",
            )
        return data

    def _unwrap_list(self, data: Any) -> list[dict[str, Any]]:
        """Strip the platform envelope around a collection, if any."""
        if not isinstance(data, list):
            raise TransportError(
                platform_name=self.platform_name,
                error_details=f"expected a JSON array, got {type(data).__name__}",
            )
        return data

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def request(
        self,
        method: HttpMethod,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        ticket_id: str | None = None,
    ) -> Any:
        """Execute one HTTP request and decode the JSON body.

        Args:
            method: HTTP method
            url: Absolute request URL
            params: Optional query parameters
            json_data: Optional JSON body
            ticket_id: Identifier for "not found" error context

        Returns:
            Decoded JSON, or None for an empty body

        Raises:
            NotFoundError: If HTTP 404 is returned
            TransportError: For other HTTP status errors, network failures,
                timeouts and undecodable bodies
        """
        kwargs: dict[str, Any] = {
            "headers": self._headers(),
            "timeout": httpx.Timeout(self._timeout_seconds),
        }
        if params:
            kwargs["params"] = params
        if json_data is not None:
            kwargs["json"] = json_data
        auth = self._auth()
        if auth is not None:
            kwargs["auth"] = auth

        try:
            if self._http_client is not None:
                response = await self._http_client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log_request(self.platform_name, method, url, None)
            raise TransportError(
                platform_name=self.platform_name,
                error_details=f"{method} {url} failed: {e}",
            ) from e

        log_request(self.platform_name, method, url, response.status_code)
        self._check_not_found(response, ticket_id)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                platform_name=self.platform_name,
                error_details=f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            ) from e

        if response.status_code == HTTP_NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                platform_name=self.platform_name,
                error_details=f"{method} {url} returned a non-JSON body",
                status_code=response.status_code,
            ) from e

    def _check_not_found(self, response: httpx.Response, ticket_id: str | None) -> None:
        """Convert HTTP 404 into NotFoundError."""
        if response.status_code == HTTP_NOT_FOUND:
            raise NotFoundError(
                platform_name=self.platform_name,
                ticket_id=ticket_id or "unknown",
            )


__all__ = [
    "HTTP_NOT_FOUND",
    "HTTP_NO_CONTENT",
    "HttpMethod",
    "RestTransport",
]
