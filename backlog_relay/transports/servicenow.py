"""ServiceNow Table API transport."""

from __future__ import annotations

from typing import Any

import httpx

from backlog_relay.config.platforms import (
    DEFAULT_TIMEOUT_SECONDS,
    BasicAuth,
    OAuthAuth,
    PlatformAuth,
    PlatformType,
    validate_auth,
)
from backlog_relay.utils.errors import TransportError

from .base import RestTransport


class ServiceNowTransport(RestTransport):
    """Transport rooted at ``/api/now/v2/table``.

    Resources are table names (``incident``, ``change_request``). Every
    Table API response wraps its payload in ``{"result": ...}``; the
    envelope is removed here.

    Auth is either HTTP basic (username/password) or an OAuth bearer token.
    """

    def __init__(
        self,
        base_url: str,
        auth: PlatformAuth,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        validate_auth(PlatformType.SERVICENOW, auth)
        super().__init__(timeout_seconds=timeout_seconds, http_client=http_client)
        self._base_url = base_url.rstrip("/")
        self._auth_config = auth

    @property
    def platform_name(self) -> str:
        return "ServiceNow"

    @property
    def api_root(self) -> str:
        return f"{self._base_url}/api/now/v2/table"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if isinstance(self._auth_config, OAuthAuth):
            headers["Authorization"] = f"Bearer {self._auth_config.access_token}"
        return headers

    def _auth(self) -> httpx.Auth | None:
        if isinstance(self._auth_config, BasicAuth):
            return httpx.BasicAuth(self._auth_config.username, self._auth_config.password)
        return None

    def _result(self, data: Any) -> Any:
        if not isinstance(data, dict) or "result" not in data:
            raise TransportError(
                platform_name=self.platform_name,
                error_details="response is missing the 'result' envelope",
            )
        return data["result"]

    def _unwrap_record(self, data: Any) -> dict[str, Any]:
        return super()._unwrap_record(self._result(data))

    def _unwrap_list(self, data: Any) -> list[dict[str, Any]]:
        return super()._unwrap_list(self._result(data))
