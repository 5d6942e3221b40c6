"""Issue vs. review-request classification signals.

Each platform marks review requests differently:

- GitHub: issues and pull requests share one number space; a record is a
  pull request iff it carries the ``pull_request`` linkage object.
- GitLab: issues and merge requests live behind separate endpoints; the
  variant is decided by which endpoint answered, so there is no payload
  check here (see GitLabClient).
- ServiceNow: a ``change_request`` with category "Code Review".
- Jira: an issue whose type is named "Review".
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

GITHUB_PR_MARKER = "pull_request"

SERVICENOW_CHANGE_REQUEST_TABLE = "change_request"
SERVICENOW_INCIDENT_TABLE = "incident"
CODE_REVIEW_CATEGORY = "Code Review"

REVIEW_ISSUE_TYPE = "Review"
CODE_REVIEW_LABEL = "code-review"


def is_github_pull_request(raw: Mapping[str, Any]) -> bool:
    """True if a GitHub issue payload carries the PR linkage marker."""
    return raw.get(GITHUB_PR_MARKER) is not None


def is_servicenow_review(record_class: str, category: str | None) -> bool:
    """True for change requests tagged with the code review category.

    Incidents and change requests with any other category are issues.
    """
    return record_class == SERVICENOW_CHANGE_REQUEST_TABLE and category == CODE_REVIEW_CATEGORY


def is_jira_review(issue_type_name: str | None) -> bool:
    """True if the Jira issue type name is exactly "Review"."""
    return issue_type_name == REVIEW_ISSUE_TYPE


__all__ = [
    "CODE_REVIEW_CATEGORY",
    "CODE_REVIEW_LABEL",
    "GITHUB_PR_MARKER",
    "REVIEW_ISSUE_TYPE",
    "SERVICENOW_CHANGE_REQUEST_TABLE",
    "SERVICENOW_INCIDENT_TABLE",
    "is_github_pull_request",
    "is_jira_review",
    "is_servicenow_review",
]
