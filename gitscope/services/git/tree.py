"""Lazily loaded tree objects.

A Tree lists its children with ``git ls-tree -z`` the first time its contents
are needed and keeps that listing for the rest of its life. Trees built by
``Tree.construct`` are baked immediately against a revision; trees found
inside a listing start out unbaked and carry only id, mode and name.
"""

import mimetypes
from typing import Any, Callable, List, Optional, Sequence

from gitscope.constants import (
    BLOB_KIND,
    COMMIT_KIND,
    DEFAULT_MIME_TYPE,
    LINK_KIND,
    SKIP_BRANCH,
    TAG_KIND,
    TREE_KIND,
    TraversalOrder,
)
from gitscope.exceptions import InvalidObjectKindError, MalformedInputError
from gitscope.logging_config import get_logger
from gitscope.models.lazy import Lazy
from gitscope.utils.text import join_path, split_records

logger = get_logger(__name__)

# visitor(name, path, trees, blobs) -> optional SKIP_BRANCH
TreeVisitor = Callable[[Optional[str], Optional[str], List["Tree"], List["Blob"]], Any]


class TreeEntry:
    """Generic tree entry; base class for Tree and Blob.

    Plain TreeEntry instances stand for entries whose kind is listed but not
    modelled (gitlinks to submodule commits, tags).
    """

    def __init__(self, repo, id: Optional[str], mode: Optional[str] = None, name: Optional[str] = None):
        self.repo = repo
        self.id = id
        self.mode = mode
        self.name = name

    @classmethod
    def create(cls, repo, id: Optional[str], mode: Optional[str] = None, name: Optional[str] = None):
        """Create an unbaked entry holding just the given attributes."""
        return cls(repo, id, mode, name)

    @property
    def basename(self) -> Optional[str]:
        if self.name is None:
            return None
        return self.name.rsplit("/", 1)[-1]

    def __lt__(self, other: "TreeEntry") -> bool:
        return (self.name or "") < (other.name or "")

    def __repr__(self) -> str:
        return f'<{type(self).__name__} "{self.id}">'


class Blob(TreeEntry):
    """File content leaf. Size and data are fetched on first use."""

    def __init__(self, repo, id: Optional[str], mode: Optional[str] = None, name: Optional[str] = None):
        super().__init__(repo, id, mode, name)
        self._size: Lazy[int] = Lazy(self._fetch_size)
        self._data: Lazy[str] = Lazy(self._fetch_data)

    def _fetch_size(self) -> int:
        return int(self.repo.git.invoke("cat-file", {"size": True}, self.id).strip())

    def _fetch_data(self) -> str:
        return self.repo.git.invoke("cat-file", {"pretty": True}, self.id)

    @property
    def size(self) -> int:
        """Size of the blob in bytes."""
        return self._size.get()

    @property
    def data(self) -> str:
        """Contents of the blob."""
        return self._data.get()

    @property
    def mime_type(self) -> str:
        """Mime type guessed from the file name."""
        guess, _ = mimetypes.guess_type(self.name or "")
        return guess or DEFAULT_MIME_TYPE


class Tree(TreeEntry):
    """Directory node with lazily loaded, memoized contents."""

    def __init__(self, repo, id: Optional[str], mode: Optional[str] = None, name: Optional[str] = None):
        super().__init__(repo, id, mode, name)
        self._contents: Lazy[List[TreeEntry]] = Lazy(self._fetch_contents)

    @classmethod
    def construct(cls, repo, treeish: str, paths: Sequence[str] = ()) -> "Tree":
        """
        Build a baked tree for a revision.

        Args:
            repo: Repository whose gateway runs ls-tree
            treeish: Commit, tag, branch or tree id
            paths: Optional directory paths restricting the listing

        Returns:
            Tree whose contents are already loaded
        """
        args = [str(treeish)]
        if paths:
            args += ["--", *paths]
        output = repo.git.invoke("ls-tree", {"z": True}, *args, quote_paths=False)
        tree = cls(repo, str(treeish))
        tree._contents = Lazy.loaded(tree._parse_listing(output))
        return tree

    @property
    def baked(self) -> bool:
        """True once the contents have been loaded."""
        return self._contents.is_loaded

    @property
    def contents(self) -> List[TreeEntry]:
        return self._contents.get()

    def _fetch_contents(self) -> List[TreeEntry]:
        logger.debug(f"Loading contents of tree {self.id}")
        output = self.repo.git.invoke("ls-tree", {"z": True}, self.id, quote_paths=False)
        return self._parse_listing(output)

    def _parse_listing(self, output: str) -> List[TreeEntry]:
        return [
            self.content_from_string(self.repo, line, number)
            for number, line in enumerate(split_records(output), start=1)
        ]

    @staticmethod
    def content_from_string(repo, text: str, line_number: Optional[int] = None) -> TreeEntry:
        """
        Create the entry described by one ls-tree line.

        Args:
            repo: Repository the entry belongs to
            text: Line of the form ``<mode> <type> <id>\\t<name>``
            line_number: Position in the listing, for error messages

        Returns:
            Tree, Blob or plain TreeEntry depending on the type column

        Raises:
            InvalidObjectKindError: If the type column is not a known kind
        """
        info, sep, name = text.partition("\t")
        fields = info.split()
        if not sep or len(fields) != 3:
            raise MalformedInputError("ls-tree", line_number, f"unexpected line {text!r}")
        mode, kind, id = fields

        if kind == TREE_KIND:
            return Tree.create(repo, id, mode, name)
        if kind in (BLOB_KIND, LINK_KIND):
            return Blob.create(repo, id, mode, name)
        if kind in (COMMIT_KIND, TAG_KIND):
            return TreeEntry.create(repo, id, mode, name)
        raise InvalidObjectKindError(kind)

    def lookup(self, path: str) -> Optional[TreeEntry]:
        """
        Find an entry by slash-separated relative path.

        Examples:
            repo.tree("main").lookup("lib")        # => <Tree ...>
            repo.tree("main") / "lib/app.py"       # => <Blob ...>

        Returns:
            The entry, or None if any segment does not match
        """
        node: TreeEntry = self
        for segment in path.split("/"):
            if not isinstance(node, Tree):
                return None
            node = next((entry for entry in node.contents if entry.name == segment), None)
            if node is None:
                return None
        return node

    def __truediv__(self, path: str) -> Optional[TreeEntry]:
        return self.lookup(path)

    def trees(self) -> List["Tree"]:
        """Subtrees among the contents."""
        return [entry for entry in self.contents if isinstance(entry, Tree)]

    def blobs(self) -> List[Blob]:
        """Blobs among the contents."""
        return [entry for entry in self.contents if isinstance(entry, Blob)]

    def walk(self, visitor: TreeVisitor, order: TraversalOrder = TraversalOrder.PRE_ORDER) -> None:
        """
        Walk this tree and every subtree depth-first.

        The visitor is called as ``visitor(name, path, trees, blobs)``. In
        pre-order it may return SKIP_BRANCH to keep the walk out of the
        node's subtrees. In post-order the subtrees have already been walked
        when the visitor runs, so SKIP_BRANCH has no effect.
        """
        if visitor is None:
            raise ValueError("walk requires a visitor")
        if order is TraversalOrder.PRE_ORDER:
            self.walk_left(visitor)
        else:
            self.walk_right(visitor)

    def walk_left(self, visitor: TreeVisitor, path_name: Optional[str] = None) -> None:
        """Pre-order walk: node first, then subtrees."""
        trees = self.trees()
        path_name = join_path(path_name, self.name)
        result = visitor(self.name, path_name, trees, self.blobs())
        if result is SKIP_BRANCH:
            return
        for tree in trees:
            tree.walk_left(visitor, path_name)

    def walk_right(self, visitor: TreeVisitor, path_name: Optional[str] = None) -> None:
        """Post-order walk: subtrees first, then the node."""
        trees = self.trees()
        path_name = join_path(path_name, self.name)
        for tree in trees:
            tree.walk_right(visitor, path_name)
        if visitor(self.name, path_name, trees, self.blobs()) is SKIP_BRANCH:
            logger.debug(f"SKIP_BRANCH ignored in post-order walk at {path_name}")

