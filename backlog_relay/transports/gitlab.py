"""GitLab REST API v4 transport."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from backlog_relay.config.platforms import DEFAULT_GITLAB_URL, DEFAULT_TIMEOUT_SECONDS

from .base import RestTransport


class GitLabTransport(RestTransport):
    """Transport rooted at ``/api/v4/projects/{id}``.

    The project id may be numeric or a "group/project" path; paths are
    URL-encoded as GitLab requires.
    """

    def __init__(
        self,
        project_id: str,
        token: str,
        base_url: str = DEFAULT_GITLAB_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds, http_client=http_client)
        self._project_id = project_id
        self._token = token
        self._base_url = base_url.rstrip("/")

    @property
    def platform_name(self) -> str:
        return "GitLab"

    @property
    def api_root(self) -> str:
        return f"{self._base_url}/api/v4/projects/{quote(self._project_id, safe='')}"

    def _headers(self) -> dict[str, str]:
        return {
            "PRIVATE-TOKEN": self._token,
            "Accept": "application/json",
        }
