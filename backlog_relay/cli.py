"""CLI interface for backlog-relay.

This module provides the Typer-based command-line interface. Every command
loads one platform configuration, builds the matching client and prints
the normalized result as a rich table or as JSON (--json).

Supports tickets from all 4 platforms: GitHub, GitLab, ServiceNow, Jira.
"""

import asyncio
import json
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from rich.table import Table

from backlog_relay import SCRIPT_NAME
from backlog_relay.adapters import TicketPlatformClient, create_client
from backlog_relay.config.loader import load_config, resolve_config_path
from backlog_relay.models import (
    CreateReviewRequest,
    CreateTicketOptions,
    PullRequest,
    StandardTicket,
    TicketComment,
    TicketFilter,
    TicketUpdate,
)
from backlog_relay.utils.console import console, print_error, print_success, show_version
from backlog_relay.utils.errors import ExitCode, RelayError
from backlog_relay.utils.logging import setup_logging

T = TypeVar("T")

app = typer.Typer(
    name=SCRIPT_NAME,
    help="backlog-relay - one ticket model for GitHub, GitLab, ServiceNow and Jira",
    add_completion=False,
    no_args_is_help=True,
)


class AsyncLoopAlreadyRunningError(RelayError):
    """Raised when trying to run async code while an event loop is already running."""

    pass


ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Platform config file (default: $BACKLOG_RELAY_CONFIG or ./.backlog-relay.json)",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print the result as JSON"),
]


def run_async(coro_factory: Callable[[], Coroutine[None, None, T]]) -> T:
    """Run an async coroutine, refusing to nest inside a running event loop.

    Args:
        coro_factory: A callable that returns the coroutine to run.
            Example: lambda: client.get_ticket("42")

    Returns:
        The result of the coroutine

    Raises:
        AsyncLoopAlreadyRunningError: If an event loop is already running
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        raise AsyncLoopAlreadyRunningError(
            "Cannot run async operation: an event loop is already running. "
            "Use the library API with 'await' instead."
        )

    return asyncio.run(coro_factory())


def _client(config_path: Path | None) -> TicketPlatformClient:
    return create_client(load_config(resolve_config_path(config_path)))


def _execute(
    config_path: Path | None,
    operation: Callable[[TicketPlatformClient], Coroutine[None, None, T]],
) -> T:
    """Load config, build the client and run one operation.

    Errors are printed and turned into the error's exit code.
    """
    setup_logging()
    try:
        client = _client(config_path)
        return run_async(lambda: operation(client))
    except RelayError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e


def _print_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def _print_ticket(ticket: StandardTicket) -> None:
    table = Table(title=f"{ticket.kind.value} {ticket.id}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Title", ticket.title)
    table.add_row("Status", ticket.status)
    table.add_row("Author", ticket.author.name)
    table.add_row("Assignee", ticket.assignee.name if ticket.assignee else "-")
    table.add_row("Created", ticket.created_at)
    table.add_row("Updated", ticket.updated_at)
    if isinstance(ticket, PullRequest):
        table.add_row("State", ticket.state.value)
        table.add_row("Source branch", ticket.source_branch)
        table.add_row("Target branch", ticket.target_branch)
    console.print(table)
    if ticket.description:
        console.print(ticket.description, markup=False)


def _print_tickets(tickets: list[StandardTicket]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Kind")
    table.add_column("Status")
    table.add_column("Title")
    table.add_column("Assignee")
    for ticket in tickets:
        table.add_row(
            ticket.id,
            ticket.kind.value,
            ticket.status,
            ticket.title,
            ticket.assignee.name if ticket.assignee else "-",
        )
    console.print(table)


def _emit_ticket(ticket: StandardTicket, as_json: bool) -> None:
    if as_json:
        _print_json(ticket.to_dict())
    else:
        _print_ticket(ticket)


def _emit_comment(comment: TicketComment, as_json: bool) -> None:
    if as_json:
        _print_json(comment.to_dict())
    else:
        print_success(f"Comment {comment.id} added by {comment.author.name or 'unknown'}")


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """backlog-relay - read and write tickets on any supported platform."""


@app.command("get")
def get_command(
    ticket_id: Annotated[str, typer.Argument(help="Ticket identifier (number, sys_id or key)")],
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Show one ticket."""
    ticket = _execute(config, lambda client: client.get_ticket(ticket_id))
    _emit_ticket(ticket, as_json)


@app.command("list")
def list_command(
    status: Annotated[
        str | None,
        typer.Option("--status", "-s", help="Shared status filter (e.g., open, closed)"),
    ] = None,
    assignee: Annotated[
        str | None,
        typer.Option("--assignee", "-a", help="Assignee identifier"),
    ] = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """List tickets."""
    ticket_filter = None
    if status is not None or assignee is not None:
        ticket_filter = TicketFilter(status=status, assignee_id=assignee)
    tickets = _execute(config, lambda client: client.get_tickets(ticket_filter))
    if as_json:
        _print_json([ticket.to_dict() for ticket in tickets])
    else:
        _print_tickets(tickets)


@app.command("create")
def create_command(
    title: Annotated[str, typer.Option("--title", "-t", help="Ticket title")],
    description: Annotated[
        str, typer.Option("--description", "-d", help="Ticket description")
    ] = "",
    assignee: Annotated[
        str | None, typer.Option("--assignee", "-a", help="Assignee identifier")
    ] = None,
    label: Annotated[
        list[str] | None, typer.Option("--label", "-l", help="Label (repeatable)")
    ] = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Create a ticket of the platform's primary type."""
    options = CreateTicketOptions(
        title=title,
        description=description,
        assignee_id=assignee,
        labels=label or None,
    )
    ticket = _execute(config, lambda client: client.create_ticket(options))
    _emit_ticket(ticket, as_json)


@app.command("update")
def update_command(
    ticket_id: Annotated[str, typer.Argument(help="Ticket identifier")],
    title: Annotated[str | None, typer.Option("--title", "-t", help="New title")] = None,
    description: Annotated[
        str | None, typer.Option("--description", "-d", help="New description")
    ] = None,
    assignee: Annotated[
        str | None, typer.Option("--assignee", "-a", help="New assignee identifier")
    ] = None,
    label: Annotated[
        list[str] | None, typer.Option("--label", "-l", help="Replacement label (repeatable)")
    ] = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Update a ticket. Only the given fields are changed."""
    updates = TicketUpdate(
        title=title,
        description=description,
        assignee_id=assignee,
        labels=label or None,
    )
    if updates.is_empty:
        print_error(
            "Nothing to update: pass at least one of --title, --description, --assignee, --label"
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    ticket = _execute(config, lambda client: client.update_ticket(ticket_id, updates))
    _emit_ticket(ticket, as_json)


@app.command("comment")
def comment_command(
    ticket_id: Annotated[str, typer.Argument(help="Ticket identifier")],
    text: Annotated[str, typer.Argument(help="Comment text")],
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Add a comment to a ticket."""
    comment = _execute(config, lambda client: client.add_comment(ticket_id, text))
    _emit_comment(comment, as_json)


@app.command("review")
def review_command(
    title: Annotated[str, typer.Option("--title", "-t", help="Review request title")],
    source: Annotated[str, typer.Option("--source", help="Branch being merged")],
    target: Annotated[str, typer.Option("--target", help="Branch merged into")],
    description: Annotated[
        str, typer.Option("--description", "-d", help="Review request description")
    ] = "",
    reviewer: Annotated[
        list[str] | None, typer.Option("--reviewer", "-r", help="Reviewer (repeatable)")
    ] = None,
    label: Annotated[
        list[str] | None, typer.Option("--label", "-l", help="Label (repeatable)")
    ] = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
) -> None:
    """Open a review request (pull/merge request or its platform equivalent)."""
    options = CreateReviewRequest(
        title=title,
        description=description,
        source_branch=source,
        target_branch=target,
        reviewers=reviewer or None,
        labels=label or None,
    )
    ticket = _execute(config, lambda client: client.create_review_request(options))
    _emit_ticket(ticket, as_json)


__all__ = ["AsyncLoopAlreadyRunningError", "app", "run_async"]
