"""Status translation tables between platform vocabularies and the shared one.

Two directions with different guarantees:

- Forward (platform value -> shared status) is total. Every value the
  platform can return maps to something; values not in a table pass
  through unchanged. These functions never raise.
- Reverse (shared filter value -> platform query value) is partial. An
  unrecognized shared value returns None and the caller omits that filter
  term from the remote query instead of failing the request.

Review-request state is always reduced to PRState (open/closed/merged).
"""

from __future__ import annotations

from types import MappingProxyType

from backlog_relay.models import PRState

# =============================================================================
# GitHub
# =============================================================================

# Shared filter -> `state` query parameter of the issues listing
GITHUB_STATE_FILTER: MappingProxyType[str, str] = MappingProxyType(
    {
        "open": "open",
        "closed": "closed",
        "all": "all",
    }
)


def map_github_status(state: str | None) -> str:
    """GitHub already reports open/closed; anything else passes through."""
    return (state or "").lower() or "open"


def github_pr_state(state: str | None, merged_at: str | None) -> PRState:
    """Derive the PR state. A merge timestamp wins over ``closed``."""
    if merged_at:
        return PRState.MERGED
    if (state or "").lower() == "closed":
        return PRState.CLOSED
    return PRState.OPEN


def github_state_filter(status: str | None) -> str | None:
    if not status:
        return None
    return GITHUB_STATE_FILTER.get(status.strip().lower())


# =============================================================================
# GitLab
# =============================================================================

GITLAB_STATUS_MAPPING: MappingProxyType[str, str] = MappingProxyType(
    {
        "opened": "open",
    }
)

GITLAB_PR_STATE_MAPPING: MappingProxyType[str, PRState] = MappingProxyType(
    {
        "opened": PRState.OPEN,
        "locked": PRState.OPEN,  # transient lock while a merge is in progress
        "merged": PRState.MERGED,
        "closed": PRState.CLOSED,
    }
)

GITLAB_STATE_FILTER: MappingProxyType[str, str] = MappingProxyType(
    {
        "open": "opened",
        "opened": "opened",
        "closed": "closed",
        "all": "all",
    }
)


def map_gitlab_status(state: str | None) -> str:
    """Map a GitLab state to the shared vocabulary (``opened`` -> ``open``)."""
    value = (state or "").lower()
    return GITLAB_STATUS_MAPPING.get(value, value)


def gitlab_pr_state(state: str | None) -> PRState:
    return GITLAB_PR_STATE_MAPPING.get((state or "").lower(), PRState.OPEN)


def gitlab_state_filter(status: str | None) -> str | None:
    if not status:
        return None
    return GITLAB_STATE_FILTER.get(status.strip().lower())


# =============================================================================
# ServiceNow
# =============================================================================

# Numeric lifecycle codes shared by the incident and change_request tables
SERVICENOW_STATE_MAPPING: MappingProxyType[str, str] = MappingProxyType(
    {
        "1": "new",
        "2": "in_progress",
        "3": "on_hold",
        "6": "resolved",
        "7": "closed",
        "-5": "pending",
    }
)

SERVICENOW_STATE_FILTER: MappingProxyType[str, str] = MappingProxyType(
    {status: code for code, status in SERVICENOW_STATE_MAPPING.items()}
)

# Shared status -> review state for change requests emulating a PR
SERVICENOW_PR_STATE_MAPPING: MappingProxyType[str, PRState] = MappingProxyType(
    {
        "new": PRState.OPEN,
        "in_progress": PRState.OPEN,
        "on_hold": PRState.OPEN,
        "pending": PRState.OPEN,
        "resolved": PRState.MERGED,
        "closed": PRState.CLOSED,
    }
)


def map_servicenow_state(code: str | int | None) -> str:
    """Map a numeric state code; unknown codes are returned as-is.

    Examples:
        >>> map_servicenow_state("6")
        'resolved'
        >>> map_servicenow_state("42")
        '42'
    """
    value = "" if code is None else str(code).strip()
    return SERVICENOW_STATE_MAPPING.get(value, value)


def servicenow_pr_state(code: str | int | None) -> PRState:
    """Reduce a state code to open/closed/merged. Unknown codes are open."""
    return SERVICENOW_PR_STATE_MAPPING.get(map_servicenow_state(code), PRState.OPEN)


def servicenow_state_filter(status: str | None) -> str | None:
    if not status:
        return None
    return SERVICENOW_STATE_FILTER.get(status.strip().lower())


# =============================================================================
# Jira
# =============================================================================

# Keyword heuristic for Review issues. Jira workflows name their statuses
# freely, so a status containing none of these keywords is treated as open.
JIRA_MERGED_KEYWORDS = ("done", "merged")
JIRA_CLOSED_KEYWORDS = ("closed", "rejected")

# Shared filter -> JQL statusCategory name
JIRA_STATUS_CATEGORY_FILTER: MappingProxyType[str, str] = MappingProxyType(
    {
        "open": "To Do",
        "new": "To Do",
        "to_do": "To Do",
        "in_progress": "In Progress",
        "done": "Done",
        "closed": "Done",
        "resolved": "Done",
    }
)


def map_jira_status(status_name: str | None) -> str:
    """Lowercase the status name and use underscores ("In Progress" -> "in_progress")."""
    return "_".join((status_name or "").lower().split())


def jira_pr_state(status_name: str | None) -> PRState:
    """Keyword heuristic: "Done" -> merged, "Rejected" -> closed, "In Review" -> open."""
    lowered = (status_name or "").lower()
    if any(keyword in lowered for keyword in JIRA_MERGED_KEYWORDS):
        return PRState.MERGED
    if any(keyword in lowered for keyword in JIRA_CLOSED_KEYWORDS):
        return PRState.CLOSED
    return PRState.OPEN


def jira_status_filter(status: str | None) -> str | None:
    """Return the JQL clause for a shared status, or None to omit it."""
    if not status:
        return None
    category = JIRA_STATUS_CATEGORY_FILTER.get(map_jira_status(status))
    if category is None:
        return None
    return f'statusCategory = "{category}"'


__all__ = [
    "GITHUB_STATE_FILTER",
    "GITLAB_STATUS_MAPPING",
    "GITLAB_PR_STATE_MAPPING",
    "GITLAB_STATE_FILTER",
    "SERVICENOW_STATE_MAPPING",
    "SERVICENOW_STATE_FILTER",
    "SERVICENOW_PR_STATE_MAPPING",
    "JIRA_STATUS_CATEGORY_FILTER",
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
