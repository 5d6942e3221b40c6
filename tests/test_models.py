"""Tests for backlog_relay.models module."""

import dataclasses

import pytest

from backlog_relay.models import (
    Issue,
    Person,
    PRState,
    PullRequest,
    TicketComment,
    TicketKind,
    TicketUpdate,
    as_pull_request,
)


@pytest.fixture
def issue() -> Issue:
    return Issue(
        id="PROJ-1",
        title="Write docs",
        description="",
        created_at="2024-04-01T10:00:00.000+0000",
        updated_at="2024-04-02T10:00:00.000+0000",
        status="to_do",
        author=Person(id="u1", name="Ada"),
    )


class TestIssue:
    """Tests for the Issue variant."""

    def test_kind_is_issue(self, issue):
        assert issue.kind is TicketKind.ISSUE
        assert issue.is_review_request is False

    def test_assignee_defaults_to_none(self, issue):
        assert issue.assignee is None

    def test_is_frozen(self, issue):
        with pytest.raises(dataclasses.FrozenInstanceError):
            issue.title = "changed"

    def test_to_dict_uses_enum_values(self, issue):
        data = issue.to_dict()

        assert data["kind"] == "issue"
        assert data["author"] == {"id": "u1", "name": "Ada"}
        assert data["assignee"] is None
        assert data["description"] == ""


class TestPullRequest:
    """Tests for the PullRequest variant."""

    def test_to_dict_includes_branches_and_state(self):
        pr = PullRequest(
            id="7",
            title="Add retry",
            description="body",
            created_at="c",
            updated_at="u",
            status="closed",
            author=Person(id="1", name="octocat"),
            source_branch="feat/retry",
            target_branch="main",
            state=PRState.MERGED,
        )

        data = pr.to_dict()

        assert data["kind"] == "pullRequest"
        assert data["state"] == "merged"
        assert data["source_branch"] == "feat/retry"
        assert data["target_branch"] == "main"
        assert pr.is_review_request is True

    def test_merge_request_kind(self):
        pr = PullRequest(
            id="12",
            title="t",
            description="",
            created_at="c",
            updated_at="u",
            status="open",
            author=Person(id="5", name="jdoe"),
            source_branch="a",
            target_branch="b",
            state=PRState.OPEN,
            kind=TicketKind.MERGE_REQUEST,
        )

        assert pr.to_dict()["kind"] == "mergeRequest"


class TestAsPullRequest:
    """Tests for as_pull_request()."""

    def test_promotes_issue(self, issue):
        pr = as_pull_request(issue, "feat/x", "main")

        assert isinstance(pr, PullRequest)
        assert pr.id == issue.id
        assert pr.status == issue.status
        assert pr.source_branch == "feat/x"
        assert pr.target_branch == "main"
        assert pr.state is PRState.OPEN

    def test_returns_pull_request_unchanged(self, issue):
        pr = as_pull_request(issue, "feat/x", "main")

        assert as_pull_request(pr, "other", "other") is pr


class TestTicketUpdate:
    """Tests for TicketUpdate partial semantics."""

    def test_empty_update(self):
        assert TicketUpdate().is_empty is True

    def test_empty_string_is_not_empty(self):
        assert TicketUpdate(description="").is_empty is False

    def test_labels_only(self):
        assert TicketUpdate(labels=[]).is_empty is False


class TestTicketComment:
    """Tests for TicketComment."""

    def test_to_dict(self):
        comment = TicketComment(
            id="c1", content="LGTM", author=Person(id="1", name="a"), created_at="now"
        )

        assert comment.to_dict() == {
            "id": "c1",
            "content": "LGTM",
            "author": {"id": "1", "name": "a"},
            "created_at": "now",
        }
