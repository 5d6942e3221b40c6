"""Tests for backlog_relay.adapters.github module."""

import pytest

from backlog_relay.adapters.github import GitHubClient, GitHubRecord
from backlog_relay.config.platforms import GitHubConfig, JiraAuth
from backlog_relay.models import (
    CreateReviewRequest,
    CreateTicketOptions,
    Issue,
    PRState,
    PullRequest,
    TicketFilter,
    TicketKind,
    TicketUpdate,
)
from backlog_relay.utils.errors import InvalidConfigurationError, NotFoundError, TransportError
from tests.fakes.payloads import github_issue, github_pull, github_user


@pytest.fixture
def client(github_config, github_transport):
    return GitHubClient(github_config, transport=github_transport)


class TestConstruction:
    def test_rejects_wrong_auth(self):
        config = GitHubConfig(owner="o", repo="r", auth=JiraAuth(email="e", api_token="t"))

        with pytest.raises(InvalidConfigurationError):
            GitHubClient(config)

    def test_rejects_wrong_config_type(self, gitlab_config):
        with pytest.raises(InvalidConfigurationError, match="GitHubConfig"):
            GitHubClient(gitlab_config)

    def test_name(self, client):
        assert client.name == "GitHub"


class TestGitHubRecord:
    def test_pull_request_marker(self):
        record = GitHubRecord.from_api(github_issue(pull_request={"url": "..."}))

        assert record.is_pull_request is True
        assert record.head_ref == "unknown"

    def test_null_body_becomes_empty(self):
        ticket = GitHubRecord.from_api(github_issue(body=None)).to_ticket()

        assert ticket.description == ""

    def test_assignee(self):
        ticket = GitHubRecord.from_api(github_issue(assignee=github_user(9, "hubot"))).to_ticket()

        assert ticket.assignee is not None
        assert ticket.assignee.id == "9"
        assert ticket.assignee.name == "hubot"


class TestGetTicket:
    @pytest.mark.asyncio
    async def test_plain_issue(self, client, github_transport):
        github_transport.add_record("issues", "42", github_issue())

        ticket = await client.get_ticket("42")

        assert isinstance(ticket, Issue)
        assert ticket.kind is TicketKind.ISSUE
        assert ticket.id == "42"
        assert ticket.status == "open"
        assert ticket.author.id == "1"
        assert ticket.author.name == "octocat"
        assert ticket.assignee is None
        assert [c[1] for c in github_transport.calls] == ["issues"]

    @pytest.mark.asyncio
    async def test_pull_request_reads_branches(self, client, github_transport):
        github_transport.add_record("issues", "7", github_issue(7, pull_request={"url": "..."}))
        github_transport.add_record("pulls", "7", github_pull(7))

        ticket = await client.get_ticket("7")

        assert isinstance(ticket, PullRequest)
        assert ticket.kind is TicketKind.PULL_REQUEST
        assert ticket.source_branch == "feat/retry"
        assert ticket.target_branch == "main"
        assert ticket.state is PRState.OPEN

    @pytest.mark.asyncio
    async def test_merged_pull_request(self, client, github_transport):
        github_transport.add_record("issues", "7", github_issue(7, pull_request={}))
        github_transport.add_record(
            "pulls", "7", github_pull(7, state="closed", merged_at="2024-01-20T00:00:00Z")
        )

        ticket = await client.get_ticket("7")

        assert ticket.state is PRState.MERGED
        assert ticket.status == "closed"

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        with pytest.raises(NotFoundError):
            await client.get_ticket("999999")


class TestGetTickets:
    @pytest.mark.asyncio
    async def test_preserves_order_and_classifies(self, client, github_transport):
        github_transport.listings["issues"] = [
            github_issue(3),
            github_issue(2, pull_request={"url": "..."}),
            github_issue(1),
        ]

        tickets = await client.get_tickets()

        assert [t.id for t in tickets] == ["3", "2", "1"]
        assert isinstance(tickets[1], PullRequest)
        assert tickets[1].source_branch == "unknown"

    @pytest.mark.asyncio
    async def test_merged_pull_request_in_listing(self, client, github_transport):
        github_transport.listings["issues"] = [
            github_issue(
                5,
                state="closed",
                pull_request={"url": "...", "merged_at": "2024-01-02T00:00:00Z"},
            ),
            github_issue(6, state="closed", pull_request={"url": "...", "merged_at": None}),
        ]

        tickets = await client.get_tickets()

        assert tickets[0].state is PRState.MERGED
        assert tickets[0].status == "closed"
        assert tickets[1].state is PRState.CLOSED

    @pytest.mark.asyncio
    async def test_filter_translation(self, client, github_transport):
        await client.get_tickets(TicketFilter(status="closed", assignee_id="hubot"))

        params = github_transport.calls_for("list")[0][3]
        assert params == {"state": "closed", "assignee": "hubot"}

    @pytest.mark.asyncio
    async def test_unknown_status_is_omitted(self, client, github_transport):
        await client.get_tickets(TicketFilter(status="bogus"))

        assert github_transport.calls_for("list")[0][3] == {}


class TestCreateTicket:
    @pytest.mark.asyncio
    async def test_payload(self, client, github_transport):
        github_transport.queue_create("issues", github_issue(43, title="New"))

        ticket = await client.create_ticket(
            CreateTicketOptions(title="New", description="d", assignee_id="hubot", labels=["bug"])
        )

        assert ticket.id == "43"
        payload = github_transport.calls_for("create")[0][3]
        assert payload == {
            "title": "New",
            "body": "d",
            "assignees": ["hubot"],
            "labels": ["bug"],
        }


class TestUpdateTicket:
    @pytest.mark.asyncio
    async def test_only_set_fields_are_sent(self, client, github_transport):
        github_transport.add_record("issues", "42", github_issue())

        ticket = await client.update_ticket("42", TicketUpdate(title="Renamed"))

        assert github_transport.calls_for("update")[0][3] == {"title": "Renamed"}
        assert ticket.title == "Renamed"
        assert ticket.description == "Steps to reproduce..."

    @pytest.mark.asyncio
    async def test_pull_request_is_refreshed(self, client, github_transport):
        github_transport.add_record("issues", "7", github_issue(7, pull_request={}))
        github_transport.add_record("pulls", "7", github_pull(7))

        ticket = await client.update_ticket("7", TicketUpdate(labels=[]))

        assert isinstance(ticket, PullRequest)
        assert ticket.source_branch == "feat/retry"
        assert github_transport.calls_for("update")[0][3] == {"labels": []}


class TestAddComment:
    @pytest.mark.asyncio
    async def test_comment(self, client, github_transport):
        github_transport.queue_create(
            "issues/42/comments",
            {"id": 1001, "body": "LGTM", "user": github_user(), "created_at": "2024-01-17"},
        )

        comment = await client.add_comment("42", "LGTM")

        assert comment.id == "1001"
        assert comment.content == "LGTM"
        assert comment.author.name == "octocat"
        assert github_transport.calls_for("create")[0][3] == {"body": "LGTM"}


class TestCreateReviewRequest:
    @pytest.mark.asyncio
    async def test_pull_request_with_reviewers_and_labels(self, client, github_transport):
        github_transport.queue_create("pulls", github_pull(8))

        pr = await client.create_review_request(
            CreateReviewRequest(
                title="Add retry",
                description="Implements retry",
                source_branch="feat/retry",
                target_branch="main",
                reviewers=["alice", "bob"],
                labels=["enhancement"],
            )
        )

        assert isinstance(pr, PullRequest)
        assert pr.id == "8"
        assert pr.source_branch == "feat/retry"
        creates = github_transport.calls_for("create")
        assert creates[0][1:] == (
            "pulls",
            None,
            {
                "title": "Add retry",
                "body": "Implements retry",
                "head": "feat/retry",
                "base": "main",
            },
        )
        assert creates[1][1] == "pulls/8/requested_reviewers"
        assert creates[1][3] == {"reviewers": ["alice", "bob"]}
        assert creates[2][1] == "issues/8/labels"
        assert creates[2][3] == {"labels": ["enhancement"]}

    @pytest.mark.asyncio
    async def test_reviewer_failure_propagates(self, client, github_transport):
        github_transport.queue_create("pulls", github_pull(8))
        github_transport.fail(
            "create", "pulls/8/requested_reviewers", TransportError("GitHub", "HTTP 422", 422)
        )

        with pytest.raises(TransportError):
            await client.create_review_request(
                CreateReviewRequest(
                    title="t",
                    description="",
                    source_branch="a",
                    target_branch="b",
                    reviewers=["ghost"],
                )
            )
