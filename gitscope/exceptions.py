"""Custom exceptions for gitscope"""

from typing import Optional, Sequence, Union


class GitscopeError(Exception):
    """Base exception for all gitscope errors."""
    pass


class GitOperationError(GitscopeError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class CommandFailedError(GitOperationError):
    """Exception raised when a git command exits with a nonzero status."""

    def __init__(
        self,
        command: Union[str, Sequence[str]],
        exit_status: Optional[int] = None,
        stderr: str = "",
    ):
        if not isinstance(command, str):
            command = " ".join(str(part) for part in command)
        self.command = command
        self.exit_status = exit_status
        self.stderr = stderr or ""

        message = f"Command failed [{exit_status}]: {command}"
        if self.stderr.strip():
            message += f"\n\n{self.stderr.strip()}"
        super().__init__("invoke", message)


class UnknownCommandError(GitOperationError):
    """Exception raised for a subcommand missing from the option table."""

    def __init__(self, subcommand: str):
        self.subcommand = subcommand
        super().__init__(subcommand, "Unknown subcommand")


class UnknownOptionError(GitOperationError):
    """Exception raised for an option key the subcommand does not accept."""

    def __init__(self, subcommand: str, key: str):
        self.subcommand = subcommand
        self.key = key
        super().__init__(subcommand, f"Unknown option '{key}'")


class MalformedInputError(GitscopeError):
    """Exception raised when command output violates the expected grammar."""

    def __init__(self, source: str, line_number: Optional[int] = None, message: Optional[str] = None):
        self.source = source
        self.line_number = line_number
        self.message = message

        error_msg = f"Malformed {source} output"
        if line_number is not None:
            error_msg += f" at line {line_number}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class InvalidObjectKindError(GitscopeError):
    """Exception raised when a tree listing reports an unknown object type."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Invalid object kind '{kind}'")


class RepositoryError(GitscopeError):
    """Exception raised when a repository cannot be opened."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class NoSuchPathError(RepositoryError):
    """Exception raised when the repository path does not exist."""

    def __init__(self, path: str):
        super().__init__(path, "No such path")


class InvalidRepositoryError(RepositoryError):
    """Exception raised when the path exists but is not a git repository."""

    def __init__(self, path: str):
        super().__init__(path, "Not a git repository")
