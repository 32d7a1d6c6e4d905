"""Tests for the porcelain blame parser"""
from pathlib import Path

import pytest

from gitscope.core import Repository
from gitscope.exceptions import MalformedInputError
from gitscope.models.blame import Actor
from gitscope.services.git.blame import group_blame, parse_blame

SHA_1 = "634396b2f541a9f2d58b00be1a07f0c358b999b3"
SHA_2 = "3e2c6b8f1a9d4e7c5b0a2f4d6e8c1a3b5d7f9e0a"

PORCELAIN = f"""{SHA_1} 1 1 2
author Ada Lovelace
author-mail <ada@example.com>
author-time 1191997100
author-tz -0700
committer Ada Lovelace
committer-mail <ada@example.com>
committer-time 1191997200
committer-tz -0700
summary initial setup
boundary
filename lib/scope.rb
\t$:.unshift File.dirname(__FILE__)
{SHA_1} 2 2
filename lib/scope.rb
\t
{SHA_2} 3 3 1
author Grace Hopper
author-mail <grace@example.com>
author-time 1192000000
author-tz -0700
committer Grace Hopper
committer-mail <grace@example.com>
committer-time 1192000100
committer-tz -0700
summary add require
previous {SHA_1} lib/scope.rb
filename lib/scope.rb
\trequire 'scope/actor'
{SHA_1} 3 4 1
\tmodule Scope
"""


class TestParseBlame:
    """Test the blame state machine."""

    def test_one_entry_per_line(self):
        """Test output has one entry per file line, in order."""
        entries = parse_blame(PORCELAIN)
        assert [entry.line for entry in entries] == [
            "$:.unshift File.dirname(__FILE__)",
            "",
            "require 'scope/actor'",
            "module Scope",
        ]
        assert [entry.final_line for entry in entries] == [1, 2, 3, 4]
        assert entries[3].orig_line == 3

    def test_commit_metadata(self):
        """Test the first occurrence builds a full commit."""
        commit = parse_blame(PORCELAIN)[0].commit
        assert commit.id == SHA_1
        assert commit.author == Actor("Ada Lovelace", "ada@example.com")
        assert commit.authored_date == 1191997100
        assert commit.committed_date == 1191997200
        assert commit.message == "initial setup"
        assert commit.authored_datetime.year == 2007

    def test_repeated_commit_is_shared(self):
        """Test repeats without metadata reuse the cached commit."""
        entries = parse_blame(PORCELAIN)
        first = entries[0].commit
        repeats = [entry for entry in entries if entry.commit.id == SHA_1]
        assert len(repeats) == 3
        assert all(entry.commit is first for entry in repeats)

    def test_second_commit(self):
        """Test a different commit gets its own record."""
        entries = parse_blame(PORCELAIN)
        assert entries[2].commit.id == SHA_2
        assert entries[2].commit.committer.email == "grace@example.com"

    def test_empty_stream(self):
        """Test empty input yields no entries."""
        assert parse_blame("") == []

    def test_content_without_header(self):
        """Test a content line before any header is malformed."""
        with pytest.raises(MalformedInputError) as exc_info:
            parse_blame("\torphan line\n")
        assert exc_info.value.line_number == 1

    def test_content_after_consumed_header(self):
        """Test two content lines for one header are malformed."""
        text = PORCELAIN + "\tsecond content line\n"
        with pytest.raises(MalformedInputError):
            parse_blame(text)

    def test_first_occurrence_without_metadata(self):
        """Test an unknown commit with no metadata is malformed."""
        with pytest.raises(MalformedInputError):
            parse_blame(f"{SHA_2} 1 1 1\nfilename a.txt\n\tline\n")

    def test_unknown_keys_ignored(self):
        """Test metadata keys outside the known set are skipped."""
        entries = parse_blame(PORCELAIN.replace("boundary\n", "unknown-key some value\n"))
        assert len(entries) == 4

    def test_group_blame(self):
        """Test consecutive lines of one commit fold into a run."""
        groups = group_blame(parse_blame(PORCELAIN))
        assert [(commit.id, lines) for commit, lines in groups] == [
            (SHA_1, ["$:.unshift File.dirname(__FILE__)", ""]),
            (SHA_2, ["require 'scope/actor'"]),
            (SHA_1, ["module Scope"]),
        ]


class TestBlameIntegration:
    """Test blame of a real repository."""

    def test_blame_two_commits(self, git_repo):
        """Test lines are attributed to the commits that wrote them."""
        path = Path(git_repo.working_dir) / "lib" / "app.py"
        path.write_text("def main():\n    return 1\n\n# added later\n")
        git_repo.git.commit("-am", "Add comment")
        second = git_repo.head.commit.hexsha
        first = git_repo.head.commit.parents[0].hexsha

        entries = Repository(git_repo.working_dir).blame("lib/app.py")
        assert len(entries) == 4
        assert [entry.commit.id for entry in entries] == [first, first, second, second]
        assert entries[0].commit is entries[1].commit
        assert entries[3].line == "# added later"
        assert entries[3].commit.message == "Add comment"
        assert entries[0].commit.author.email == "test@example.com"

    def test_blame_at_revision(self, git_repo):
        """Test blaming an older revision."""
        path = Path(git_repo.working_dir) / "README.md"
        path.write_text("# Changed\n")
        git_repo.git.commit("-am", "Change readme")

        entries = Repository(git_repo.working_dir).blame("README.md", "HEAD~1")
        assert [entry.line for entry in entries] == ["# Test Repository"]
