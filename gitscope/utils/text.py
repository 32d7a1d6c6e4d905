"""Text helpers shared by the git output parsers."""

from typing import List, Optional


def split_lines(text: str) -> List[str]:
    """
    Split command output into lines.

    Lines are separated on "\\n" only; trailing empty lines are dropped so
    that output ending in a newline does not yield a phantom last line.

    Args:
        text: Raw command output

    Returns:
        List of lines without their terminators
    """
    if not text:
        return []
    lines = text.split("\n")
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def join_path(parent: Optional[str], name: Optional[str]) -> Optional[str]:
    """
    Join a walk's accumulated path with the next name.

    Args:
        parent: Path accumulated so far, or None at the top of a walk
        name: Name of the node being entered

    Returns:
        "parent/name", or name alone when there is no parent
    """
    if parent:
        return f"{parent}/{name}"
    return name


def split_records(text: str) -> List[str]:
    """Split ``-z`` output into its NUL-terminated records."""
    if not text:
        return []
    records = text.split("\0")
    if records[-1] == "":
        records.pop()
    return records
