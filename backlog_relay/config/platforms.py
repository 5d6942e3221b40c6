"""Platform configuration types.

A configuration is a tagged union discriminated by ``type`` (one of
``github``, ``gitlab``, ``servicenow``, ``jira``). Each variant carries its
connection parameters plus one of four authentication shapes, itself a
tagged union discriminated by ``type``:

    token   - bearer token (GitHub, GitLab)
    basic   - username/password (ServiceNow)
    oauth   - OAuth bearer access token (ServiceNow)
    jira    - email + API token (Jira)

Raw mappings (e.g., parsed JSON) are decoded with parse_platform_config().
Keys are accepted in camelCase or snake_case; see FIELD_ALIASES.

Validation is fail-fast: a missing required field, an unknown tag, or an
auth shape the platform does not accept raises InvalidConfigurationError.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypeAlias

from backlog_relay.utils.errors import InvalidConfigurationError

# HTTP timeout applied to every remote call unless the config or
# BACKLOG_RELAY_TIMEOUT overrides it
DEFAULT_TIMEOUT_SECONDS = 30.0
TIMEOUT_ENV_VAR = "BACKLOG_RELAY_TIMEOUT"

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITLAB_URL = "https://gitlab.com"


class PlatformType(Enum):
    """Supported ticketing platforms (the config ``type`` tag)."""

    GITHUB = "github"
    GITLAB = "gitlab"
    SERVICENOW = "servicenow"
    JIRA = "jira"


# ---------------------------------------------------------------------------
# Authentication variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenAuth:
    """Bearer token auth for code-hosting platforms."""

    AUTH_TYPE: ClassVar[str] = "token"

    token: str = field(repr=False)


@dataclass(frozen=True)
class BasicAuth:
    """Username/password auth for ServiceNow."""

    AUTH_TYPE: ClassVar[str] = "basic"

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class OAuthAuth:
    """OAuth bearer access token for ServiceNow."""

    AUTH_TYPE: ClassVar[str] = "oauth"

    access_token: str = field(repr=False)


@dataclass(frozen=True)
class JiraAuth:
    """Email + API token auth for Jira."""

    AUTH_TYPE: ClassVar[str] = "jira"

    email: str
    api_token: str = field(repr=False)


PlatformAuth: TypeAlias = TokenAuth | BasicAuth | OAuthAuth | JiraAuth


# ---------------------------------------------------------------------------
# Platform variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub repository connection.

    Attributes:
        owner: Repository owner (user or organization)
        repo: Repository name
        auth: Token auth
        base_url: REST API root (override for GitHub Enterprise)
        timeout_seconds: Per-request timeout
    """

    PLATFORM: ClassVar[PlatformType] = PlatformType.GITHUB

    owner: str
    repo: str
    auth: PlatformAuth
    base_url: str = DEFAULT_GITHUB_API_URL
    timeout_seconds: float = field(default_factory=lambda: default_timeout_seconds())


@dataclass(frozen=True)
class GitLabConfig:
    """GitLab project connection.

    Attributes:
        project_id: Numeric id or URL-path ("group/project") of the project
        auth: Token auth
        base_url: Instance root URL (e.g., https://gitlab.example.com)
        timeout_seconds: Per-request timeout
    """

    PLATFORM: ClassVar[PlatformType] = PlatformType.GITLAB

    project_id: str
    auth: PlatformAuth
    base_url: str = DEFAULT_GITLAB_URL
    timeout_seconds: float = field(default_factory=lambda: default_timeout_seconds())


@dataclass(frozen=True)
class ServiceNowConfig:
    """ServiceNow instance connection.

    Attributes:
        instance: Instance name; the base URL is https://<instance>.service-now.com
        auth: Basic or OAuth auth
        timeout_seconds: Per-request timeout
    """

    PLATFORM: ClassVar[PlatformType] = PlatformType.SERVICENOW

    instance: str
    auth: PlatformAuth
    timeout_seconds: float = field(default_factory=lambda: default_timeout_seconds())

    @property
    def base_url(self) -> str:
        return f"https://{self.instance}.service-now.com"


@dataclass(frozen=True)
class JiraConfig:
    """Jira project connection.

    Attributes:
        base_url: Instance URL (e.g., https://company.atlassian.net)
        project_key: Project key new issues are created in (e.g., "PROJ")
        auth: Email + API token auth
        timeout_seconds: Per-request timeout
    """

    PLATFORM: ClassVar[PlatformType] = PlatformType.JIRA

    base_url: str
    project_key: str
    auth: PlatformAuth
    timeout_seconds: float = field(default_factory=lambda: default_timeout_seconds())


PlatformConfig: TypeAlias = GitHubConfig | GitLabConfig | ServiceNowConfig | JiraConfig

# Auth shapes each platform accepts
ALLOWED_AUTH: dict[PlatformType, tuple[type, ...]] = {
    PlatformType.GITHUB: (TokenAuth,),
    PlatformType.GITLAB: (TokenAuth,),
    PlatformType.SERVICENOW: (BasicAuth, OAuthAuth),
    PlatformType.JIRA: (JiraAuth,),
}

# camelCase / legacy spellings -> canonical snake_case keys
FIELD_ALIASES: dict[str, str] = {
    "apiToken": "api_token",
    "apitoken": "api_token",
    "accessToken": "access_token",
    "baseUrl": "base_url",
    "baseURL": "base_url",
    "projectId": "project_id",
    "projectKey": "project_key",
    "timeoutSeconds": "timeout_seconds",
}

# Required top-level fields per platform (auth checked separately)
PLATFORM_REQUIRED_FIELDS: dict[PlatformType, frozenset[str]] = {
    PlatformType.GITHUB: frozenset({"owner", "repo"}),
    PlatformType.GITLAB: frozenset({"project_id"}),
    PlatformType.SERVICENOW: frozenset({"instance"}),
    PlatformType.JIRA: frozenset({"base_url", "project_key"}),
}

AUTH_REQUIRED_FIELDS: dict[str, frozenset[str]] = {
    TokenAuth.AUTH_TYPE: frozenset({"token"}),
    BasicAuth.AUTH_TYPE: frozenset({"username", "password"}),
    OAuthAuth.AUTH_TYPE: frozenset({"access_token"}),
    JiraAuth.AUTH_TYPE: frozenset({"email", "api_token"}),
}


def canonicalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with aliased keys renamed to canonical names."""
    return {FIELD_ALIASES.get(key, key): value for key, value in data.items()}


def parse_platform_type(value: Any) -> PlatformType:
    """Parse the ``type`` tag of a configuration.

    Raises:
        InvalidConfigurationError: If the tag names no supported platform
    """
    if isinstance(value, PlatformType):
        return value
    tag = str(value).strip().lower() if value is not None else ""
    try:
        return PlatformType(tag)
    except ValueError:
        valid = ", ".join(p.value for p in PlatformType)
        raise InvalidConfigurationError(
            f"Unknown platform type: {value!r}. Allowed values: {valid}",
            platform=str(value) if value is not None else None,
        ) from None


def _has_value(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    return value is not None and str(value).strip() != ""


def parse_auth(platform: PlatformType, data: Mapping[str, Any]) -> PlatformAuth:
    """Decode and validate the auth section of a configuration.

    Flat layouts used by older configs are folded in: a top-level
    ``api_token`` becomes token auth for code-hosting platforms, and a
    top-level ``email`` + ``api_token`` becomes Jira auth.

    Raises:
        InvalidConfigurationError: If auth is missing, incomplete, or of a
            shape the platform does not accept
    """
    raw_auth = data.get("auth")
    if raw_auth is None:
        if platform in (PlatformType.GITHUB, PlatformType.GITLAB) and _has_value(
            data, "api_token"
        ):
            raw_auth = {"type": "token", "token": data["api_token"]}
        elif platform is PlatformType.JIRA and (
            _has_value(data, "email") or _has_value(data, "api_token")
        ):
            raw_auth = {
                "type": "jira",
                "email": data.get("email"),
                "api_token": data.get("api_token"),
            }
        else:
            raise InvalidConfigurationError(
                f"Invalid {platform.value} configuration: missing auth",
                platform=platform.value,
                missing_fields={"auth"},
            )

    if not isinstance(raw_auth, Mapping):
        raise InvalidConfigurationError(
            f"Invalid {platform.value} configuration: auth must be a mapping",
            platform=platform.value,
        )

    auth_data = canonicalize_keys(raw_auth)
    # A token auth section may spell the secret as apiToken
    if "token" not in auth_data and "api_token" in auth_data and auth_data.get("type") == "token":
        auth_data["token"] = auth_data["api_token"]

    auth_type = str(auth_data.get("type", "")).strip().lower()
    if auth_type not in AUTH_REQUIRED_FIELDS:
        raise InvalidConfigurationError(
            f"Invalid {platform.value} configuration: unknown auth type {auth_data.get('type')!r}",
            platform=platform.value,
        )

    missing = {key for key in AUTH_REQUIRED_FIELDS[auth_type] if not _has_value(auth_data, key)}
    if missing:
        raise InvalidConfigurationError(
            f"Invalid {platform.value} configuration: {auth_type} auth missing {sorted(missing)}",
            platform=platform.value,
            missing_fields=missing,
        )

    auth: PlatformAuth
    if auth_type == TokenAuth.AUTH_TYPE:
        auth = TokenAuth(token=str(auth_data["token"]))
    elif auth_type == BasicAuth.AUTH_TYPE:
        auth = BasicAuth(username=str(auth_data["username"]), password=str(auth_data["password"]))
    elif auth_type == OAuthAuth.AUTH_TYPE:
        auth = OAuthAuth(access_token=str(auth_data["access_token"]))
    else:
        auth = JiraAuth(email=str(auth_data["email"]), api_token=str(auth_data["api_token"]))

    validate_auth(platform, auth)
    return auth


def validate_auth(platform: PlatformType, auth: Any) -> None:
    """Fail closed when an auth shape does not fit the platform.

    Raises:
        InvalidConfigurationError: If ``auth`` is not one of the platform's
            accepted auth variants
    """
    allowed = ALLOWED_AUTH[platform]
    if not isinstance(auth, allowed):
        names = ", ".join(a.AUTH_TYPE for a in allowed)
        got = getattr(auth, "AUTH_TYPE", type(auth).__name__)
        raise InvalidConfigurationError(
            f"Invalid {platform.value} configuration: auth type {got!r} not supported "
            f"(expected: {names})",
            platform=platform.value,
        )


def _coerce_timeout(raw: Any, source: str, platform: str | None) -> float:
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(
            f"{source} must be a number, got {raw!r}", platform=platform
        ) from None
    if timeout <= 0:
        raise InvalidConfigurationError(f"{source} must be positive", platform=platform)
    return timeout


def default_timeout_seconds() -> float:
    """Timeout used when a config does not set one.

    Read from BACKLOG_RELAY_TIMEOUT at call time, falling back to
    DEFAULT_TIMEOUT_SECONDS.

    Raises:
        InvalidConfigurationError: If the variable is not a positive number
    """
    raw = os.environ.get(TIMEOUT_ENV_VAR)
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_SECONDS
    return _coerce_timeout(raw, TIMEOUT_ENV_VAR, None)


def _parse_timeout(platform: PlatformType, data: Mapping[str, Any]) -> float:
    raw = data.get("timeout_seconds")
    if raw is None:
        return default_timeout_seconds()
    return _coerce_timeout(
        raw, f"Invalid {platform.value} configuration: timeout_seconds", platform.value
    )


def parse_platform_config(data: Mapping[str, Any]) -> PlatformConfig:
    """Decode a raw mapping into the matching PlatformConfig variant.

    Args:
        data: Mapping with a ``type`` tag plus platform fields, e.g.
            ``{"type": "gitlab", "baseUrl": "...", "apiToken": "...", "projectId": 7}``

    Returns:
        A validated, immutable PlatformConfig

    Raises:
        InvalidConfigurationError: For an unknown ``type`` tag, a missing
            required field, or an unsupported auth shape
    """
    if not isinstance(data, Mapping):
        raise InvalidConfigurationError(
            f"Platform configuration must be a mapping, got {type(data).__name__}"
        )

    fields = canonicalize_keys(data)
    platform = parse_platform_type(fields.get("type"))

    missing = {key for key in PLATFORM_REQUIRED_FIELDS[platform] if not _has_value(fields, key)}
    if missing:
        raise InvalidConfigurationError(
            f"Invalid {platform.value} configuration: missing {sorted(missing)}",
            platform=platform.value,
            missing_fields=missing,
        )

    auth = parse_auth(platform, fields)
    timeout = _parse_timeout(platform, fields)

    if platform is PlatformType.GITHUB:
        return GitHubConfig(
            owner=str(fields["owner"]),
            repo=str(fields["repo"]),
            auth=auth,
            base_url=str(fields.get("base_url") or DEFAULT_GITHUB_API_URL).rstrip("/"),
            timeout_seconds=timeout,
        )
    if platform is PlatformType.GITLAB:
        return GitLabConfig(
            project_id=str(fields["project_id"]),
            auth=auth,
            base_url=str(fields.get("base_url") or DEFAULT_GITLAB_URL).rstrip("/"),
            timeout_seconds=timeout,
        )
    if platform is PlatformType.SERVICENOW:
        return ServiceNowConfig(
            instance=str(fields["instance"]).strip(),
            auth=auth,
            timeout_seconds=timeout,
        )
    return JiraConfig(
        base_url=str(fields["base_url"]).rstrip("/"),
        project_key=str(fields["project_key"]).strip(),
        auth=auth,
        timeout_seconds=timeout,
    )


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "TIMEOUT_ENV_VAR",
    "default_timeout_seconds",
    "PlatformType",
    "TokenAuth",
    "BasicAuth",
    "OAuthAuth",
    "JiraAuth",
    "PlatformAuth",
    "GitHubConfig",
    "GitLabConfig",
    "ServiceNowConfig",
    "JiraConfig",
    "PlatformConfig",
    "FIELD_ALIASES",
    "canonicalize_keys",
    "parse_auth",
    "parse_platform_config",
    "parse_platform_type",
    "validate_auth",
]
