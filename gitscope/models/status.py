"""Working tree status models"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional


class ChangeKind(Enum):
    """Change kind of a path in a status snapshot (git's change letters)."""
    UNMODIFIED = ""
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    CONFLICTED = "U"

    @classmethod
    def from_letter(cls, letter: Optional[str]) -> "ChangeKind":
        """Map a diff change-type letter to a ChangeKind."""
        if not letter:
            return cls.UNMODIFIED
        return cls(letter[0])


@dataclass(frozen=True)
class StatusRecord:
    """Status of a single path.

    The index side comes from ls-files; the repo side is the other end of
    the comparison that classified the path (the worktree for modified,
    deleted and conflicted paths, HEAD for added ones).
    """
    path: str
    kind: ChangeKind = ChangeKind.UNMODIFIED
    untracked: bool = False
    stage: Optional[int] = None
    mode_index: Optional[str] = None
    sha_index: Optional[str] = None
    mode_repo: Optional[str] = None
    sha_repo: Optional[str] = None

    @classmethod
    def untracked_path(cls, path: str) -> "StatusRecord":
        """Create the path-only record of an untracked file."""
        return cls(path=path, untracked=True)

    @property
    def type(self) -> str:
        """The change letter, empty for unmodified paths."""
        return self.kind.value

    def __str__(self) -> str:
        if self.untracked:
            return f"?? {self.path}"
        return f"{self.kind.value or ' '}  {self.path}"
