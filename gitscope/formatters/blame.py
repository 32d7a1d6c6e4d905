"""Blame formatting utilities."""

from typing import List

from gitscope.formatters.date import format_date
from gitscope.models.blame import BlameEntry


def format_blame_line(entry: BlameEntry, name_width: int = 20) -> str:
    """
    Format one blame entry like ``git blame``'s default output.

    Example:
        "1a2b3c4 (Jane Doe             2024-01-15   12) return x"
    """
    author = entry.commit.author.name[:name_width].ljust(name_width)
    date = format_date(entry.commit.authored_date)
    return f"{entry.commit.short_id} ({author} {date} {entry.final_line:>4}) {entry.line}"


def format_blame(entries: List[BlameEntry]) -> str:
    """Format a whole blame, one line per entry."""
    return "\n".join(format_blame_line(entry) for entry in entries)
