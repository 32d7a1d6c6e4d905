"""Git-backed services for gitscope."""

from .command import GitCommand, COMMAND_OPTIONS, transform_options
from .status import Status
from .blame import parse_blame, group_blame
from .merge import parse_conflicts, ConflictedFile
from .tree import TreeEntry, Tree, Blob
from .submodules import Submodule, parse_gitmodules, walk_submodules

__all__ = [
    "GitCommand",
    "COMMAND_OPTIONS",
    "transform_options",
    "Status",
    "parse_blame",
    "group_blame",
    "parse_conflicts",
    "ConflictedFile",
    "TreeEntry",
    "Tree",
    "Blob",
    "Submodule",
    "parse_gitmodules",
    "walk_submodules",
]
