"""Tests for backlog_relay.normalization.classification module."""

from backlog_relay.normalization.classification import (
    is_github_pull_request,
    is_jira_review,
    is_servicenow_review,
)


class TestGitHubClassification:
    def test_marker_present(self):
        assert is_github_pull_request({"pull_request": {"url": "https://..."}})

    def test_marker_absent(self):
        assert not is_github_pull_request({"number": 1})

    def test_null_marker(self):
        assert not is_github_pull_request({"pull_request": None})


class TestServiceNowClassification:
    def test_code_review_change_request(self):
        assert is_servicenow_review("change_request", "Code Review")

    def test_other_category(self):
        assert not is_servicenow_review("change_request", "Hardware")

    def test_incident_with_code_review_category(self):
        assert not is_servicenow_review("incident", "Code Review")

    def test_missing_category(self):
        assert not is_servicenow_review("change_request", None)


class TestJiraClassification:
    def test_review_type(self):
        assert is_jira_review("Review")

    def test_other_types(self):
        for name in ("Task", "Bug", "Story", "review", "", None):
            assert not is_jira_review(name)
