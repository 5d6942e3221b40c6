"""Tests for backlog_relay.normalization.branches module."""

import pytest

from backlog_relay.normalization.branches import (
    UNKNOWN_BRANCH,
    embed_branch_metadata,
    extract_branch_metadata,
)


class TestEmbedBranchMetadata:
    """Tests for embed_branch_metadata()."""

    def test_appends_labeled_block(self):
        result = embed_branch_metadata("Please review", "feat/x", "main", ["alice", "bob"])

        assert result == (
            "Please review\n\n"
            "Source Branch: feat/x\n"
            "Target Branch: main\n"
            "Reviewers: alice, bob"
        )

    def test_no_reviewers(self):
        result = embed_branch_metadata("d", "a", "b")

        assert result.endswith("Reviewers: None assigned")

    def test_blank_description(self):
        result = embed_branch_metadata("  ", "a", "b", [])

        assert result.startswith("Source Branch: a\n")


class TestExtractBranchMetadata:
    """Tests for extract_branch_metadata()."""

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("feat/x", "main"),
            ("release/2024.04", "develop"),
            ("user/ada/fix-#12", "hotfix/1.2"),
            ("feat/ünïcode", "main"),
        ],
    )
    def test_round_trip(self, source, target):
        description = embed_branch_metadata("Some text", source, target, ["r"])

        assert extract_branch_metadata(description) == (source, target)

    def test_missing_lines_yield_unknown(self):
        assert extract_branch_metadata("no metadata here") == (UNKNOWN_BRANCH, UNKNOWN_BRANCH)

    def test_none_description(self):
        assert extract_branch_metadata(None) == (UNKNOWN_BRANCH, UNKNOWN_BRANCH)

    def test_empty_value_yields_unknown(self):
        assert extract_branch_metadata("Source Branch:  \nTarget Branch: main") == (
            UNKNOWN_BRANCH,
            "main",
        )

    def test_trailing_whitespace_trimmed(self):
        assert extract_branch_metadata("Source Branch: feat/x  \r\nTarget Branch: main\t") == (
            "feat/x",
            "main",
        )

    def test_labels_must_start_a_line(self):
        text = "Note: the Source Branch: wrong line"

        assert extract_branch_metadata(text) == (UNKNOWN_BRANCH, UNKNOWN_BRANCH)

    def test_last_occurrence_wins(self):
        # A user description quoting the labels is followed by the generated block
        description = embed_branch_metadata(
            "Source Branch: quoted\nTarget Branch: quoted", "feat/real", "main"
        )

        assert extract_branch_metadata(description) == ("feat/real", "main")
