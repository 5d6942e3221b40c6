"""Configuration for backlog-relay.

This package provides:
- Platform configuration variants and auth shapes (platforms)
- JSON config file loading with environment expansion (loader)
"""

from backlog_relay.config.loader import (
    CONFIG_ENV_VAR,
    LOCAL_CONFIG_NAME,
    load_config,
    resolve_config_path,
)
from backlog_relay.config.platforms import (
    DEFAULT_TIMEOUT_SECONDS,
    BasicAuth,
    GitHubConfig,
    GitLabConfig,
    JiraAuth,
    JiraConfig,
    OAuthAuth,
    PlatformAuth,
    PlatformConfig,
    PlatformType,
    ServiceNowConfig,
    TIMEOUT_ENV_VAR,
    TokenAuth,
    default_timeout_seconds,
    parse_platform_config,
    validate_auth,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_TIMEOUT_SECONDS",
    "LOCAL_CONFIG_NAME",
    "PlatformType",
    "PlatformAuth",
    "PlatformConfig",
    "TokenAuth",
    "BasicAuth",
    "OAuthAuth",
    "JiraAuth",
    "GitHubConfig",
    "GitLabConfig",
    "ServiceNowConfig",
    "JiraConfig",
    "TIMEOUT_ENV_VAR",
    "default_timeout_seconds",
    "load_config",
    "parse_platform_config",
    "resolve_config_path",
    "validate_auth",
]
