"""Commit attribution models used by blame"""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

_ACTOR_RE = re.compile(r"^(.*?)\s*<(.*)>\s*$")


@dataclass(frozen=True)
class Actor:
    """An author or committer identity."""
    name: str
    email: Optional[str] = None

    @classmethod
    def from_string(cls, text: str) -> "Actor":
        """Parse "Name <email>"; text without an email becomes a bare name."""
        match = _ACTOR_RE.match(text.strip())
        if match:
            return cls(match.group(1), match.group(2))
        return cls(text.strip())

    def __str__(self) -> str:
        if self.email is None:
            return self.name
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class Commit:
    """Commit metadata as reported by blame. Dates are seconds since the epoch."""
    id: str
    author: Actor
    authored_date: int
    committer: Actor
    committed_date: int
    message: str = ""

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def authored_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.authored_date, tz=timezone.utc)

    @property
    def committed_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.committed_date, tz=timezone.utc)


@dataclass(frozen=True)
class BlameEntry:
    """One line of a file bound to the commit that last changed it."""
    commit: Commit
    line: str
    orig_line: int
    final_line: int
