"""Typed models built from git command output."""

from .blame import Actor, BlameEntry, Commit
from .lazy import Lazy, LoadState
from .merge import ConflictParse, ConflictSection
from .status import ChangeKind, StatusRecord
from .submodule import SubmoduleStatus, SubmoduleVisit

__all__ = [
    "Actor",
    "BlameEntry",
    "ChangeKind",
    "Commit",
    "ConflictParse",
    "ConflictSection",
    "Lazy",
    "LoadState",
    "StatusRecord",
    "SubmoduleStatus",
    "SubmoduleVisit",
]
