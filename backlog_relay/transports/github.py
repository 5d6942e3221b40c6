"""GitHub REST API v3 transport."""

from __future__ import annotations

import httpx

from backlog_relay.config.platforms import DEFAULT_GITHUB_API_URL, DEFAULT_TIMEOUT_SECONDS

from .base import RestTransport


class GitHubTransport(RestTransport):
    """Transport rooted at ``/repos/{owner}/{repo}``.

    Resources used by GitHubClient: ``issues``, ``pulls``,
    ``issues/{n}/comments``, ``issues/{n}/labels``,
    ``pulls/{n}/requested_reviewers``.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        base_url: str = DEFAULT_GITHUB_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds, http_client=http_client)
        self._owner = owner
        self._repo = repo
        self._token = token
        self._base_url = base_url.rstrip("/")

    @property
    def platform_name(self) -> str:
        return "GitHub"

    @property
    def api_root(self) -> str:
        return f"{self._base_url}/repos/{self._owner}/{self._repo}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
