"""Git command gateway.

Runs git plumbing subcommands through GitPython and returns their raw
output. Keyword options are translated into flags through an explicit
per-subcommand table, so a typo in an option key fails loudly instead of
being dropped.
"""

from typing import Dict, List, Mapping, Optional, Union, TYPE_CHECKING

import git

from gitscope.exceptions import CommandFailedError, UnknownCommandError, UnknownOptionError
from gitscope.logging_config import get_logger

if TYPE_CHECKING:
    from gitscope.config import Config

logger = get_logger(__name__)


# Subcommand -> option key -> flag template.
# A template containing "{}" is formatted with the option value; any other
# template is a switch emitted when the value is truthy.
# Listings that carry paths take "z" so names come back NUL-terminated and
# unquoted.
COMMAND_OPTIONS: Dict[str, Dict[str, str]] = {
    "add": {},
    "blame": {
        "porcelain": "--porcelain",
    },
    "cat-file": {
        "size": "-s",
        "pretty": "-p",
    },
    "diff-files": {
        "diff_filter": "--diff-filter={}",
        "z": "-z",
    },
    "diff-index": {
        "diff_filter": "--diff-filter={}",
        "z": "-z",
    },
    "for-each-ref": {
        "format": "--format={}",
    },
    "ls-files": {
        "stage": "--stage",
        "others": "--others",
        "exclude_standard": "--exclude-standard",
        "z": "-z",
    },
    "ls-tree": {
        "z": "-z",
    },
    "submodule init": {},
    "submodule status": {},
    "submodule update": {
        "init": "--init",
    },
    "symbolic-ref": {
        "short": "--short",
        "quiet": "--quiet",
    },
}


def transform_options(subcommand: str, options: Optional[Mapping[str, object]] = None) -> List[str]:
    """
    Translate keyword options into git command line flags.

    Args:
        subcommand: Subcommand the options belong to (e.g. "diff-files")
        options: Mapping of option key to value

    Returns:
        List of flags, e.g. ["--diff-filter=M"]

    Raises:
        UnknownCommandError: If the subcommand has no option table
        UnknownOptionError: If an option key is not in the subcommand's table
    """
    try:
        table = COMMAND_OPTIONS[subcommand]
    except KeyError:
        raise UnknownCommandError(subcommand) from None

    flags = []
    for key, value in (options or {}).items():
        if key not in table:
            raise UnknownOptionError(subcommand, key)
        template = table[key]
        if "{}" in template:
            if value is None or value is False:
                continue
            flags.append(template.format(value))
        elif value:
            flags.append(template)
    return flags


class GitCommand:
    """Runs git subcommands in a repository and returns their stdout."""

    def __init__(self, working_dir: str, config: Union["Config", dict, None] = None):
        """Initialize the gateway.

        Args:
            working_dir: Directory git runs in (work tree, or git dir of a bare repo)
            config: Configuration dictionary or Config object
        """
        config = config or {}
        self.working_dir = working_dir
        self.git_binary = config.get("git_binary", "git")
        self.timeout = config.get("timeout", None)
        self.quote_paths = config.get("quote_paths", False)
        self._git = git.Git(working_dir)

    def build_command(
        self,
        subcommand: str,
        options: Optional[Mapping[str, object]] = None,
        args: tuple = (),
        quote_paths: Optional[bool] = None,
    ) -> List[str]:
        """Build the full argument vector for one call."""
        if quote_paths is None:
            quote_paths = self.quote_paths
        flags = transform_options(subcommand, options)
        return [
            self.git_binary,
            "-c",
            f"core.quotePath={'true' if quote_paths else 'false'}",
            *subcommand.split(),
            *flags,
            *[str(arg) for arg in args],
        ]

    def invoke(
        self,
        subcommand: str,
        options: Optional[Mapping[str, object]] = None,
        *args,
        quote_paths: Optional[bool] = None,
    ) -> str:
        """Run a subcommand and return its raw stdout.

        Args:
            subcommand: Subcommand from COMMAND_OPTIONS (e.g. "ls-files", "submodule status")
            options: Keyword options translated through COMMAND_OPTIONS
            *args: Positional arguments appended after the flags
            quote_paths: core.quotePath for this call only (None = configured default)

        Returns:
            Raw stdout of the command

        Raises:
            CommandFailedError: If git exits with a nonzero status or cannot be run
        """
        command = self.build_command(subcommand, options, args, quote_paths)
        logger.debug(f"Running: {' '.join(command)}")

        try:
            status, stdout, stderr = self._git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                kill_after_timeout=self.timeout,
                strip_newline_in_stdout=False,
            )
        except git.exc.GitCommandNotFound as e:
            raise CommandFailedError(command, None, str(e)) from e

        if status != 0:
            logger.debug(f"Command exited with {status}: {stderr.strip()}")
            raise CommandFailedError(command, status, stderr)

        logger.debug(f"Command returned {len(stdout)} bytes")
        return stdout

    def __repr__(self) -> str:
        return f"GitCommand({self.working_dir!r})"
