"""Config file loading.

A config file is a JSON object holding one platform configuration:

    {
        "type": "jira",
        "baseUrl": "https://company.atlassian.net",
        "projectKey": "PROJ",
        "auth": {"type": "jira", "email": "me@example.com", "apiToken": "${JIRA_TOKEN}"}
    }

``${VAR}`` references are expanded from the environment in strict mode, so
a missing variable is a configuration error rather than a literal token.

The CLI resolves the file path with this precedence (highest first):
    1. --config option
    2. BACKLOG_RELAY_CONFIG environment variable
    3. ./.backlog-relay.json in the current directory
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from backlog_relay.config.platforms import PlatformConfig, parse_platform_config
from backlog_relay.utils.env_utils import EnvVarExpansionError, expand_env_vars_strict
from backlog_relay.utils.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BACKLOG_RELAY_CONFIG"
LOCAL_CONFIG_NAME = ".backlog-relay.json"


def resolve_config_path(explicit: Path | None = None) -> Path:
    """Find the config file to load.

    Args:
        explicit: Path given on the command line, if any

    Returns:
        Path of the config file

    Raises:
        InvalidConfigurationError: If no candidate path exists
    """
    if explicit is not None:
        return explicit
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    local = Path.cwd() / LOCAL_CONFIG_NAME
    if local.exists():
        return local
    raise InvalidConfigurationError(
        f"No configuration found. Pass --config, set {CONFIG_ENV_VAR}, "
        f"or create {LOCAL_CONFIG_NAME}"
    )


def load_config(path: Path) -> PlatformConfig:
    """Read, expand and validate a platform config file.

    Args:
        path: JSON config file

    Returns:
        Validated PlatformConfig

    Raises:
        InvalidConfigurationError: If the file is unreadable, not a JSON
            object, references unset environment variables, or fails
            platform validation
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidConfigurationError(f"Cannot read config file {path}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidConfigurationError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise InvalidConfigurationError(f"Config file {path} must contain a JSON object")

    try:
        expanded = expand_env_vars_strict(raw)
    except EnvVarExpansionError as e:
        raise InvalidConfigurationError(f"Config file {path}: {e}") from e

    config = parse_platform_config(expanded)
    logger.debug(f"Loaded {config.PLATFORM.value} configuration from {path}")
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "LOCAL_CONFIG_NAME",
    "load_config",
    "resolve_config_path",
]
