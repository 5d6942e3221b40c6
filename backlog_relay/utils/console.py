"""Rich-based console output utilities.

Status lines go through one tagged printer. Errors and warnings are written
to stderr so ``--json`` output on stdout stays machine-readable. Every
status line is mirrored to the log file when logging is enabled.
"""

from rich.console import Console
from rich.theme import Theme

from backlog_relay import __version__

custom_theme = Theme(
    {
        "error": "bold red",
        "success": "bold green",
        "warning": "bold yellow",
        "info": "bold blue",
        "header": "bold magenta",
        "highlight": "bold white",
    }
)

# Global console instances
console = Console(theme=custom_theme)
console_err = Console(theme=custom_theme, stderr=True)


def _status_line(target: Console, tag: str, color: str, message: str) -> None:
    from backlog_relay.utils.logging import log_message

    target.print(f"[{tag.lower()}][[{tag}]][/{tag.lower()}] [{color}]{message}[/{color}]")
    log_message(f"{tag}: {message}")


def print_error(message: str) -> None:
    """Print an error line to stderr."""
    _status_line(console_err, "ERROR", "red", message)


def print_success(message: str) -> None:
    _status_line(console, "SUCCESS", "green", message)


def print_warning(message: str) -> None:
    """Print a warning line to stderr."""
    _status_line(console_err, "WARNING", "yellow", message)


def print_info(message: str) -> None:
    _status_line(console, "INFO", "cyan", message)


def show_version() -> None:
    """Display version information."""
    console.print(f"[header]backlog-relay[/header] v{__version__}")


__all__ = [
    "console",
    "console_err",
    "custom_theme",
    "print_error",
    "print_success",
    "print_warning",
    "print_info",
    "show_version",
]
