"""Jira REST API v2 transport.

Version 2 of the API is used because it exchanges descriptions and
comments as plain text, which the branch metadata lines rely on.
"""

from __future__ import annotations

from typing import Any

import httpx

from backlog_relay.config.platforms import DEFAULT_TIMEOUT_SECONDS
from backlog_relay.utils.errors import TransportError

from .base import RestTransport


class JiraTransport(RestTransport):
    """Transport rooted at ``/rest/api/2`` with email + API token basic auth."""

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds, http_client=http_client)
        self._base_url = base_url.rstrip("/")
        self._email = email
        self._api_token = api_token

    @property
    def platform_name(self) -> str:
        return "Jira"

    @property
    def api_root(self) -> str:
        return f"{self._base_url}/rest/api/2"

    def _auth(self) -> httpx.Auth | None:
        return httpx.BasicAuth(self._email, self._api_token)

    async def search(self, jql: str, fields: list[str]) -> list[dict[str, Any]]:
        """Run a JQL search and return the matching issues in Jira's order.

        API endpoint: POST /rest/api/2/search
        """
        data = await self.request(
            "POST",
            self.url_for("search"),
            json_data={"jql": jql, "fields": fields},
        )
        issues = data.get("issues") if isinstance(data, dict) else None
        if not isinstance(issues, list):
            raise TransportError(
                platform_name=self.platform_name,
                error_details="search response is missing the 'issues' array",
            )
        return issues
