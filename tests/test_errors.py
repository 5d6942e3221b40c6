"""Tests for backlog_relay.utils.errors module."""

from backlog_relay.utils.errors import (
    ExitCode,
    InvalidConfigurationError,
    NotFoundError,
    RelayError,
    TransportError,
)


class TestExitCodes:
    def test_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.GENERAL_ERROR == 1
        assert ExitCode.INVALID_CONFIGURATION == 2
        assert ExitCode.NOT_FOUND == 3
        assert ExitCode.TRANSPORT_FAILURE == 4


class TestRelayError:
    def test_default_exit_code(self):
        assert RelayError("boom").exit_code == ExitCode.GENERAL_ERROR

    def test_explicit_exit_code(self):
        assert RelayError("boom", ExitCode.NOT_FOUND).exit_code == ExitCode.NOT_FOUND


class TestInvalidConfigurationError:
    def test_fields(self):
        error = InvalidConfigurationError("bad", platform="gitlab", missing_fields={"project_id"})

        assert error.platform == "gitlab"
        assert error.missing_fields == frozenset({"project_id"})
        assert error.exit_code == ExitCode.INVALID_CONFIGURATION
        assert isinstance(error, RelayError)


class TestTransportError:
    def test_default_message(self):
        error = TransportError("GitLab", "HTTP 500", status_code=500)

        assert str(error) == "GitLab API error: HTTP 500"
        assert error.status_code == 500
        assert error.exit_code == ExitCode.TRANSPORT_FAILURE


class TestNotFoundError:
    def test_message_and_fields(self):
        error = NotFoundError("ServiceNow", "999999")

        assert str(error) == "ServiceNow: Ticket '999999' not found"
        assert error.ticket_id == "999999"
        assert error.status_code == 404
        assert error.exit_code == ExitCode.NOT_FOUND

    def test_is_transport_error(self):
        assert isinstance(NotFoundError("Jira", "PROJ-1"), TransportError)
