"""Normalization core shared by all platform clients.

This package provides:
- Status translation tables in both directions (status)
- Issue vs. review-request classification signals (classification)
- Branch metadata embedding/extraction for description-only platforms (branches)
"""

from backlog_relay.normalization.branches import (
    UNKNOWN_BRANCH,
    embed_branch_metadata,
    extract_branch_metadata,
)
from backlog_relay.normalization.classification import (
    CODE_REVIEW_CATEGORY,
    REVIEW_ISSUE_TYPE,
    is_github_pull_request,
    is_jira_review,
    is_servicenow_review,
)
from backlog_relay.normalization.status import (
    github_pr_state,
    github_state_filter,
    gitlab_pr_state,
    gitlab_state_filter,
    jira_pr_state,
    jira_status_filter,
    map_github_status,
    map_gitlab_status,
    map_jira_status,
    map_servicenow_state,
    servicenow_pr_state,
    servicenow_state_filter,
)

__all__ = [
    # Branches
    "UNKNOWN_BRANCH",
    "embed_branch_metadata",
    "extract_branch_metadata",
    # Classification
    "CODE_REVIEW_CATEGORY",
    "REVIEW_ISSUE_TYPE",
    "is_github_pull_request",
    "is_jira_review",
    "is_servicenow_review",
    # Status
    "map_github_status",
    "github_pr_state",
    "github_state_filter",
    "map_gitlab_status",
    "gitlab_pr_state",
    "gitlab_state_filter",
    "map_servicenow_state",
    "servicenow_pr_state",
    "servicenow_state_filter",
    "map_jira_status",
    "jira_pr_state",
    "jira_status_filter",
]
