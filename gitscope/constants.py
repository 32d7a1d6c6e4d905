"""Shared constants for gitscope."""

from enum import Enum


class TraversalOrder(Enum):
    """Order in which recursive walks call their visitor."""

    PRE_ORDER = "pre-order"  # Node before its children
    POST_ORDER = "post-order"  # Children before the node


class WalkSignal(Enum):
    """Values a visitor may return to steer a walk."""

    SKIP_BRANCH = "skip-branch"


# Returned by a pre-order visitor to stop descent below the visited node
SKIP_BRANCH = WalkSignal.SKIP_BRANCH


# Conflict marker prefixes written by git during a merge
CONFLICT_START_MARKER = "<<<<<<<"
CONFLICT_SEPARATOR = "======="
CONFLICT_END_MARKER = ">>>>>>>"


# ls-tree type column values
TREE_KIND = "tree"
BLOB_KIND = "blob"
LINK_KIND = "link"
COMMIT_KIND = "commit"
TAG_KIND = "tag"


DEFAULT_MIME_TYPE = "text/plain"

GITMODULES_FILE = ".gitmodules"
