"""Environment variable expansion for config files.

Config files reference secrets as ``${VAR}`` so tokens never have to be
written to disk. Keys that look like secrets are kept out of log and error
messages.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any

# Keys containing these substrings are considered sensitive and never logged
SENSITIVE_KEY_PATTERNS = ("TOKEN", "KEY", "SECRET", "PASSWORD", "CREDENTIAL", "AUTH")

_ENV_REFERENCE = re.compile(r"\$\{([^}]+)\}")

logger = logging.getLogger(__name__)


class EnvVarExpansionError(Exception):
    """Raised when a referenced environment variable is missing in strict mode."""

    pass


def is_sensitive_key(key: str) -> bool:
    """Check if a configuration key path names a secret.

    Args:
        key: Key or dotted key path (e.g., "auth.apiToken")

    Returns:
        True if the key is considered sensitive
    """
    key_upper = key.upper()
    return any(pattern in key_upper for pattern in SENSITIVE_KEY_PATTERNS)


def _describe(context: str) -> str:
    if context and not is_sensitive_key(context):
        return f" in {context}"
    return ""


def expand_env_vars(value: Any, strict: bool = False, context: str = "") -> Any:
    """Recursively expand ${VAR} references in strings, dicts and lists.

    Args:
        value: The value to expand
        strict: If True, raise for missing variables. If False, leave the
            ``${VAR}`` text in place and log a warning.
        context: Dotted key path of ``value``, used in messages

    Returns:
        The value with references replaced by environment values

    Raises:
        EnvVarExpansionError: If strict=True and a variable is not set
    """
    if isinstance(value, str):
        missing: list[str] = []

        def replace(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is None:
                missing.append(match.group(1))
                return match.group(0)
            return env_value

        result = _ENV_REFERENCE.sub(replace, value)
        if missing:
            names = ", ".join(missing)
            if strict:
                raise EnvVarExpansionError(
                    f"Missing environment variable(s): {names}{_describe(context)}"
                )
            logger.warning(f"Environment variable(s) {names} not set{_describe(context)}")
        return result
    if isinstance(value, dict):
        return {
            k: expand_env_vars(v, strict=strict, context=f"{context}.{k}" if context else str(k))
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [
            expand_env_vars(v, strict=strict, context=f"{context}[{i}]")
            for i, v in enumerate(value)
        ]
    return value


def expand_env_vars_strict(value: Any, context: str = "") -> Any:
    """Expand environment variables, failing on any missing variable."""
    return expand_env_vars(value, strict=True, context=context)


__all__ = [
    "EnvVarExpansionError",
    "SENSITIVE_KEY_PATTERNS",
    "expand_env_vars",
    "expand_env_vars_strict",
    "is_sensitive_key",
]
