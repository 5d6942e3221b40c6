"""Branch metadata embedded in free-text descriptions.

ServiceNow and Jira have no branch fields, so review requests created there
carry the branches as labeled lines appended to the description:

    <user description>

    Source Branch: feat/x
    Target Branch: main
    Reviewers: alice, bob

Reads recover the values with line-anchored patterns. Extraction is
tolerant: a missing or empty label line yields UNKNOWN_BRANCH instead of
failing the read. Values come back byte-for-byte apart from one trailing
whitespace trim. If a label occurs more than once, the last line wins,
since the generated block always comes after the user's text.
"""

from __future__ import annotations

import re

UNKNOWN_BRANCH = "unknown"

SOURCE_BRANCH_LABEL = "Source Branch"
TARGET_BRANCH_LABEL = "Target Branch"
REVIEWERS_LABEL = "Reviewers"
NO_REVIEWERS = "None assigned"

# Pre-compiled, line-anchored patterns
_SOURCE_BRANCH_PATTERN = re.compile(rf"^{SOURCE_BRANCH_LABEL}: (.+)$", re.MULTILINE)
_TARGET_BRANCH_PATTERN = re.compile(rf"^{TARGET_BRANCH_LABEL}: (.+)$", re.MULTILINE)


def embed_branch_metadata(
    description: str,
    source_branch: str,
    target_branch: str,
    reviewers: list[str] | None = None,
) -> str:
    """Append the branch label lines to a description.

    Both label lines are always emitted so a later read can recover them.

    Args:
        description: User-supplied description (may be empty)
        source_branch: Branch being merged
        target_branch: Branch merged into
        reviewers: Reviewer identifiers, listed for humans only

    Returns:
        The description with the labeled block appended
    """
    reviewer_text = ", ".join(reviewers) if reviewers else NO_REVIEWERS
    block = (
        f"{SOURCE_BRANCH_LABEL}: {source_branch}\n"
        f"{TARGET_BRANCH_LABEL}: {target_branch}\n"
        f"{REVIEWERS_LABEL}: {reviewer_text}"
    )
    if description.strip():
        return f"{description.rstrip()}\n\n{block}"
    return block


def _last_match(pattern: re.Pattern[str], text: str) -> str:
    matches = pattern.findall(text)
    if not matches:
        return UNKNOWN_BRANCH
    value: str = matches[-1].rstrip()
    return value or UNKNOWN_BRANCH


def extract_branch_metadata(description: str | None) -> tuple[str, str]:
    """Recover (source_branch, target_branch) from a description.

    Args:
        description: Description text, may be None

    Returns:
        Tuple of branch names, UNKNOWN_BRANCH for any that are absent
    """
    if not description:
        return UNKNOWN_BRANCH, UNKNOWN_BRANCH
    text = description.replace("\r\n", "\n")
    return _last_match(_SOURCE_BRANCH_PATTERN, text), _last_match(_TARGET_BRANCH_PATTERN, text)


__all__ = [
    "UNKNOWN_BRANCH",
    "embed_branch_metadata",
    "extract_branch_metadata",
]
