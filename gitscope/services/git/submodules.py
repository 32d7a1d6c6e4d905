"""Submodules and recursive traversal across nested repositories."""

import os
import re
import weakref
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from gitscope.constants import GITMODULES_FILE, SKIP_BRANCH, TraversalOrder
from gitscope.exceptions import InvalidRepositoryError, MalformedInputError, NoSuchPathError
from gitscope.logging_config import get_logger
from gitscope.models.submodule import SubmoduleStatus, SubmoduleVisit
from gitscope.services.git.tree import Blob, Tree
from gitscope.utils.text import join_path, split_lines

if TYPE_CHECKING:
    from gitscope.core import Repository

logger = get_logger(__name__)

SECTION_RE = re.compile(r'^\[submodule "(.+)"\]$')
KEY_RE = re.compile(r"^\s+([\w.-]+)\s*=\s*(.*?)\s*$")

SubmoduleVisitor = Callable[[SubmoduleVisit], Any]


def parse_gitmodules(text: str) -> Dict[str, Dict[str, str]]:
    """
    Parse the contents of a .gitmodules file.

    Args:
        text: File contents

    Returns:
        Mapping of submodule name to its settings, e.g.
        {"lib/vendor": {"path": "lib/vendor", "url": "https://..."}}
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    config: Dict[str, Dict[str, str]] = {}
    current: Optional[str] = None

    for line in split_lines(text):
        section = SECTION_RE.match(line.strip())
        if section:
            current = section.group(1)
            config[current] = {}
            continue
        setting = KEY_RE.match(line)
        if setting and current is not None:
            config[current][setting.group(1)] = setting.group(2)

    return config


class Submodule:
    """A submodule of a parent repository."""

    def __init__(
        self,
        path: str,
        url: Optional[str],
        parent: "Repository",
        id: Optional[str] = None,
        name: Optional[str] = None,
    ):
        """Initialize the submodule.

        Args:
            path: Path relative to the parent's working directory
            url: Remote url from .gitmodules
            parent: Parent repository (held weakly)
            id: Commit id the parent tree records for the submodule
            name: Section name in .gitmodules (defaults to path)
        """
        self.path = path
        self.url = url
        self.id = id
        self.name = name or path
        self._parent = weakref.ref(parent)
        self._repository: Optional["Repository"] = None

    @classmethod
    def config(cls, repo: "Repository", ref: str = "HEAD") -> Dict[str, Dict[str, str]]:
        """Read the .gitmodules settings recorded at a revision ({} if there is no file)."""
        return cls._config_from_tree(repo.tree(ref))

    @staticmethod
    def _config_from_tree(tree: Tree) -> Dict[str, Dict[str, str]]:
        entry = tree / GITMODULES_FILE
        if not isinstance(entry, Blob):
            return {}
        return parse_gitmodules(entry.data)

    @classmethod
    def create_submodules(cls, parent: "Repository", ref: str = "HEAD") -> Dict[str, "Submodule"]:
        """
        Create the submodules of a repository at a revision.

        Returns:
            Mapping of submodule path to Submodule, {} when there are none
        """
        tree = parent.tree(ref)
        submodules: Dict[str, Submodule] = {}
        for name, settings in cls._config_from_tree(tree).items():
            path = settings.get("path", name)
            entry = tree / path
            submodules[path] = cls(
                path,
                settings.get("url"),
                parent,
                id=entry.id if entry is not None else None,
                name=name,
            )
        logger.debug(f"Found {len(submodules)} submodules at {ref}")
        return submodules

    @property
    def parent(self) -> Optional["Repository"]:
        """The parent repository, or None once it has been released."""
        return self._parent()

    def _require_parent(self) -> "Repository":
        parent = self.parent
        if parent is None:
            raise RuntimeError(f"Parent repository of submodule '{self.path}' is gone")
        return parent

    @property
    def full_path(self) -> str:
        return os.path.join(self._require_parent().working_dir, self.path)

    @property
    def repository(self) -> Optional["Repository"]:
        """The submodule's own repository, or None while it is not checked out.

        A successful open is kept; a failed one is retried on the next access
        so that a walk can descend into a submodule initialised by its visitor.
        """
        if self._repository is None:
            parent = self._require_parent()
            try:
                self._repository = parent.open_nested(self.path)
            except (NoSuchPathError, InvalidRepositoryError) as e:
                logger.debug(f"Submodule {self.path} has no repository yet: {e}")
                return None
        return self._repository

    def _submodule(self, action: str, options: Optional[dict] = None) -> str:
        return self._require_parent().git.invoke(f"submodule {action}", options, "--", self.path)

    def _raw_status(self) -> str:
        return self._submodule("status")

    def status(self) -> SubmoduleStatus:
        """Parse ``git submodule status`` for this submodule."""
        lines = split_lines(self._raw_status())
        if not lines:
            raise MalformedInputError("submodule status", None, f"no status for {self.path}")
        line = lines[0]
        state = line[:1]
        fields = line[1:].split(None, 2)
        ref = fields[2].strip("()") if len(fields) > 2 else None
        initialized = state != "-"
        return SubmoduleStatus(
            initialized=initialized,
            matches=(state != "+") if initialized else None,
            commit=fields[0] if fields else None,
            ref=ref,
            conflicted=state == "U",
        )

    @property
    def initialized(self) -> bool:
        return self.status().initialized

    @property
    def commit_matches(self) -> Optional[bool]:
        """Whether the checked out commit matches the one recorded by the parent."""
        return self.status().matches

    @property
    def commit_sha(self) -> Optional[str]:
        return self.status().commit

    @property
    def ref(self) -> Optional[str]:
        return self.status().ref

    def init(self) -> None:
        self._submodule("init")

    def update(self, init: bool = False) -> None:
        """Run ``git submodule update`` for this submodule."""
        self._submodule("update", {"init": init})

    def has_file(self, path: str) -> bool:
        """True if a parent-relative path lies inside this submodule."""
        return path == self.path or path.startswith(self.path.rstrip("/") + "/")

    def __repr__(self) -> str:
        return f'<Submodule "{self.path}" -- "{self.url}">'


def walk_submodules(
    root: "Repository",
    visitor: SubmoduleVisitor,
    order: TraversalOrder = TraversalOrder.PRE_ORDER,
    include_root: bool = False,
) -> None:
    """
    Walk the submodule forest of a repository depth-first.

    The visitor receives a SubmoduleVisit for every submodule at any depth,
    and for the root itself when ``include_root`` is set. In pre-order a
    visitor may return SKIP_BRANCH to keep the walk out of that node's own
    submodules; in post-order the signal is ignored. A submodule that is not
    checked out is visited with ``repo=None`` and not descended into.

    There is no cycle detection; a self-referencing forest never terminates.
    """
    if visitor is None:
        raise ValueError("walk_submodules requires a visitor")
    if order is TraversalOrder.PRE_ORDER:
        _walk_left(root, visitor, include_self=include_root)
    else:
        _walk_right(root, visitor, include_self=include_root)


def _walk_left(
    repo: Optional["Repository"],
    visitor: SubmoduleVisitor,
    submodule: Optional[Submodule] = None,
    name: Optional[str] = None,
    path_name: Optional[str] = None,
    include_self: bool = False,
) -> None:
    if path_name is not None or include_self:
        if visitor(SubmoduleVisit(repo, name, path_name, submodule)) is SKIP_BRANCH:
            return
    if submodule is not None:
        # The visitor may have checked the submodule out
        repo = submodule.repository
    if repo is None:
        return
    for sub_name, child in repo.submodules.items():
        _walk_left(child.repository, visitor, child, sub_name, join_path(path_name, sub_name))


def _walk_right(
    repo: Optional["Repository"],
    visitor: SubmoduleVisitor,
    submodule: Optional[Submodule] = None,
    name: Optional[str] = None,
    path_name: Optional[str] = None,
    include_self: bool = False,
) -> None:
    if repo is not None:
        for sub_name, child in repo.submodules.items():
            _walk_right(child.repository, visitor, child, sub_name, join_path(path_name, sub_name))
    if path_name is not None or include_self:
        if visitor(SubmoduleVisit(repo, name, path_name, submodule)) is SKIP_BRANCH:
            logger.debug(f"SKIP_BRANCH ignored in post-order walk at {path_name}")
