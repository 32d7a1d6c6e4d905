"""Tests for the git command gateway"""
import git
import pytest
from unittest.mock import patch

from gitscope.config import Config
from gitscope.exceptions import CommandFailedError, UnknownCommandError, UnknownOptionError
from gitscope.services.git.command import COMMAND_OPTIONS, GitCommand, transform_options


class TestTransformOptions:
    """Test option table translation."""

    def test_switch_option(self):
        """Test a switch is emitted for a truthy value."""
        assert transform_options("ls-files", {"stage": True}) == ["--stage"]

    def test_switch_option_false_is_omitted(self):
        """Test a switch is omitted for a falsy value."""
        assert transform_options("ls-files", {"stage": False}) == []

    def test_valued_option(self):
        """Test a template option is formatted with its value."""
        assert transform_options("diff-files", {"diff_filter": "M"}) == ["--diff-filter=M"]

    def test_valued_option_none_is_omitted(self):
        """Test a template option with None is omitted."""
        assert transform_options("for-each-ref", {"format": None}) == []

    def test_nul_terminated_listings(self):
        """Test every path listing accepts the -z switch."""
        for subcommand in ("ls-files", "ls-tree", "diff-files", "diff-index"):
            assert transform_options(subcommand, {"z": True}) == ["-z"]

    def test_flags_keep_option_order(self):
        """Test flags come out in the order the options were given."""
        flags = transform_options("ls-files", {"others": True, "exclude_standard": True})
        assert flags == ["--others", "--exclude-standard"]

    def test_no_options(self):
        """Test missing options produce no flags."""
        assert transform_options("ls-tree") == []
        assert transform_options("ls-tree", {}) == []

    def test_unknown_option_raises(self):
        """Test an option key outside the table fails."""
        with pytest.raises(UnknownOptionError) as exc_info:
            transform_options("ls-files", {"stages": True})
        assert exc_info.value.key == "stages"
        assert exc_info.value.subcommand == "ls-files"

    def test_unknown_command_raises(self):
        """Test a subcommand outside the table fails."""
        with pytest.raises(UnknownCommandError):
            transform_options("frobnicate", {})

    def test_table_lists_only_issued_commands(self):
        """Test history queries the package never runs are not accepted."""
        for subcommand in ("log", "rev-list", "rev-parse"):
            with pytest.raises(UnknownCommandError):
                transform_options(subcommand)
        with pytest.raises(UnknownOptionError):
            transform_options("ls-tree", {"recursive": True})

    def test_submodule_actions_are_separate_commands(self):
        """Test submodule actions have their own option tables."""
        assert "submodule update" in COMMAND_OPTIONS
        assert transform_options("submodule update", {"init": True}) == ["--init"]


class TestBuildCommand:
    """Test argument vector construction."""

    def test_default_quote_paths_off(self, temp_dir):
        """Test paths are unquoted unless configured otherwise."""
        gateway = GitCommand(str(temp_dir))
        command = gateway.build_command("ls-files", {"stage": True})
        assert command == ["git", "-c", "core.quotePath=false", "ls-files", "--stage"]

    def test_per_call_quote_paths(self, temp_dir):
        """Test quote_paths applies to the one call only."""
        gateway = GitCommand(str(temp_dir))
        quoted = gateway.build_command("ls-files", {}, (), quote_paths=True)
        unquoted = gateway.build_command("ls-files", {})
        assert "core.quotePath=true" in quoted
        assert "core.quotePath=false" in unquoted

    def test_configured_quote_paths(self, temp_dir):
        """Test the configured default is used when the call does not override it."""
        gateway = GitCommand(str(temp_dir), Config(quote_paths=True))
        assert "core.quotePath=true" in gateway.build_command("ls-files", {})

    def test_multiword_subcommand_and_args(self, temp_dir):
        """Test submodule actions split into words before the flags."""
        gateway = GitCommand(str(temp_dir), {"git_binary": "/usr/bin/git"})
        command = gateway.build_command("submodule update", {"init": True}, ("--", "vendor/lib"))
        assert command == [
            "/usr/bin/git", "-c", "core.quotePath=false",
            "submodule", "update", "--init", "--", "vendor/lib",
        ]


class TestInvoke:
    """Test running commands."""

    def test_invoke_returns_stdout(self, git_repo):
        """Test a successful command returns its raw output."""
        gateway = GitCommand(git_repo.working_dir)
        output = gateway.invoke("for-each-ref", {"format": "%(objectname)"}, "refs/heads/main")
        assert output.strip() == git_repo.head.commit.hexsha
        assert output.endswith("\n")

    def test_invoke_failure_raises(self, git_repo):
        """Test a nonzero exit raises CommandFailedError with details."""
        gateway = GitCommand(git_repo.working_dir)
        with pytest.raises(CommandFailedError) as exc_info:
            gateway.invoke("cat-file", {"size": True}, "no-such-object")
        error = exc_info.value
        assert error.exit_status != 0
        assert "cat-file" in error.command
        assert error.stderr

    def test_invoke_unknown_option_runs_nothing(self, git_repo):
        """Test option validation happens before anything runs."""
        gateway = GitCommand(git_repo.working_dir)
        with patch.object(git.Git, "execute") as mock_execute:
            with pytest.raises(UnknownOptionError):
                gateway.invoke("ls-files", {"bogus": True})
        mock_execute.assert_not_called()

    def test_invoke_passes_timeout(self, temp_dir):
        """Test the configured timeout reaches GitPython."""
        gateway = GitCommand(str(temp_dir), Config(timeout=5))
        with patch.object(git.Git, "execute", return_value=(0, "out\n", "")) as mock_execute:
            assert gateway.invoke("ls-files", {}) == "out\n"
        assert mock_execute.call_args.kwargs["kill_after_timeout"] == 5

    def test_invoke_missing_binary(self, temp_dir):
        """Test a missing git binary surfaces as CommandFailedError."""
        gateway = GitCommand(str(temp_dir), Config(git_binary="gitscope-no-such-binary"))
        with pytest.raises(CommandFailedError) as exc_info:
            gateway.invoke("ls-files", {})
        assert exc_info.value.exit_status is None
