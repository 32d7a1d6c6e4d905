"""Submodule traversal models"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class SubmoduleVisit:
    """What a submodule walk hands its visitor at each node.

    For the root repository name, path and submodule are None.
    """
    repo: Any  # gitscope.core.Repository, or any object with a submodules mapping
    name: Optional[str] = None
    path: Optional[str] = None
    submodule: Optional[Any] = None

    @property
    def is_root(self) -> bool:
        return self.path is None


@dataclass(frozen=True)
class SubmoduleStatus:
    """Parsed line of ``git submodule status``."""
    initialized: bool
    matches: Optional[bool]  # None when not initialized
    commit: Optional[str]
    ref: Optional[str] = None
    conflicted: bool = False
