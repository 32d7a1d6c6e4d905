"""Pytest fixtures for gitscope tests"""
import tempfile
from pathlib import Path

import pytest
import git

from gitscope.services.git.command import transform_options
from gitscope.services.git.tree import Blob, Tree


class StubGit:
    """Gateway stand-in that answers from canned rules and counts calls."""

    def __init__(self):
        self.rules = []
        self.calls = []

    def on(self, subcommand, options=None, *args, returns="", raises=None):
        """Register an answer; an empty args tuple matches any arguments."""
        self.rules.append((subcommand, dict(options or {}), args, returns, raises))
        return self

    def invoke(self, subcommand, options=None, *args, quote_paths=None):
        # Same validation the real gateway applies
        transform_options(subcommand, options)
        options = dict(options or {})
        self.calls.append((subcommand, options, args))
        for rule_sub, rule_options, rule_args, returns, raises in self.rules:
            if rule_sub == subcommand and rule_options == options and (not rule_args or rule_args == args):
                if raises is not None:
                    raise raises
                return returns
        raise AssertionError(f"Unexpected git call: {subcommand} {options} {args}")

    def count(self, subcommand, *args):
        """Number of calls to a subcommand (optionally with exact args)."""
        return len([c for c in self.calls if c[0] == subcommand and (not args or c[2] == args)])


class StubRepository:
    """Minimal repository backed by a StubGit."""

    def __init__(self, stub_git=None, branches=("main",), working_dir="/fake/repo/path"):
        self.git = stub_git or StubGit()
        self._branches = list(branches)
        self.working_dir = working_dir
        self.files = {}

    def branches(self):
        return list(self._branches)

    def blob(self, id):
        return Blob.create(self, id)

    def tree(self, treeish="HEAD", paths=()):
        return Tree.construct(self, treeish, paths)

    def read_file(self, path):
        return self.files[path]


@pytest.fixture
def stub_git():
    """Create a gateway stub with no rules."""
    return StubGit()


@pytest.fixture
def stub_repo(stub_git):
    """Create a repository stub with one branch."""
    return StubRepository(stub_git)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _configure_identity(repo):
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    repo.config_writer().set_value("commit", "gpgsign", "false").release()


@pytest.fixture
def empty_git_repo(temp_dir):
    """Create a Git repository without any commits."""
    repo_path = temp_dir / "empty_repo"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)
    _configure_identity(repo)

    yield repo

    repo.close()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    _configure_identity(repo)

    (repo_path / "README.md").write_text("# Test Repository\n")
    (repo_path / "lib").mkdir()
    (repo_path / "lib" / "app.py").write_text("def main():\n    return 1\n")
    repo.git.add("README.md", "lib/app.py")
    repo.git.commit("-m", "Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    repo.close()


@pytest.fixture
def conflicted_git_repo(git_repo):
    """Create a repository stopped in a merge with one conflicted file."""
    repo = git_repo
    repo_path = Path(repo.working_dir)

    repo.git.checkout("-b", "feature")
    (repo_path / "README.md").write_text("# Feature title\n")
    repo.git.commit("-am", "Feature change")

    repo.git.checkout("main")
    (repo_path / "README.md").write_text("# Main title\n")
    repo.git.commit("-am", "Main change")

    with pytest.raises(git.exc.GitCommandError):
        repo.git.merge("feature")

    yield repo
