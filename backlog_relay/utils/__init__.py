"""Utility modules for backlog-relay.

This package contains:
- console: Rich-based terminal output utilities
- env_utils: Environment variable expansion for config files
- errors: Custom exceptions and exit codes
- logging: Logging configuration
"""

from backlog_relay.utils.env_utils import (
    SENSITIVE_KEY_PATTERNS,
    EnvVarExpansionError,
    expand_env_vars,
    expand_env_vars_strict,
    is_sensitive_key,
)
from backlog_relay.utils.errors import (
    ExitCode,
    InvalidConfigurationError,
    NotFoundError,
    RelayError,
    TransportError,
)
from backlog_relay.utils.logging import log_message, log_request, setup_logging

__all__ = [
    # Env Utils
    "EnvVarExpansionError",
    "SENSITIVE_KEY_PATTERNS",
    "expand_env_vars",
    "expand_env_vars_strict",
    "is_sensitive_key",
    # Errors
    "ExitCode",
    "RelayError",
    "InvalidConfigurationError",
    "NotFoundError",
    "TransportError",
    # Logging
    "log_message",
    "log_request",
    "setup_logging",
]
