"""Logging configuration for backlog-relay.

Logging is off by default and controlled by environment variables.

Environment Variables:
    BACKLOG_RELAY_LOG: Set to "true" to enable logging (default: "false")
    BACKLOG_RELAY_LOG_FILE: Path to log file (default: ~/.backlog-relay.log)
"""

import logging
import os
from pathlib import Path

# Environment variable configuration
LOG_ENABLED = os.environ.get("BACKLOG_RELAY_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("BACKLOG_RELAY_LOG_FILE", str(Path.home() / ".backlog-relay.log")))

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure logging based on environment variables.

    Creates the package logger that writes to the configured log file when
    BACKLOG_RELAY_LOG is set to "true". Otherwise, uses a NullHandler
    to suppress all log output. Module loggers created with
    ``logging.getLogger(__name__)`` propagate to this logger.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("backlog_relay")

    # Clear any existing handlers
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance.

    Returns:
        The configured logger, creating it if necessary
    """
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log a message if logging is enabled.

    Args:
        message: Message to log
    """
    logger = get_logger()
    logger.info(message)


def log_request(platform_name: str, method: str, url: str, status_code: int | None) -> None:
    """Log one remote call with its outcome.

    Only the method and URL are recorded; headers and bodies may carry
    credentials and are never logged.

    Args:
        platform_name: Human-readable platform name
        method: HTTP method
        url: Request URL
        status_code: Response status code, or None if no response arrived
    """
    outcome = status_code if status_code is not None else "no response"
    get_logger().info(f"{platform_name} {method} {url} | STATUS: {outcome}")


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "setup_logging",
    "get_logger",
    "log_message",
    "log_request",
]
