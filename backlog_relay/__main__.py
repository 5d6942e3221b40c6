"""Entry point for running backlog-relay as a module.

Usage:
    python -m backlog_relay [OPTIONS] COMMAND [ARGS]...
"""

from backlog_relay.cli import app

if __name__ == "__main__":
    app()
