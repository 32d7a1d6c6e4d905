"""Core repository API for gitscope"""

import os
from typing import Dict, List, Optional, Sequence, Union

import git

from gitscope.config import Config
from gitscope.constants import TraversalOrder
from gitscope.exceptions import CommandFailedError, InvalidRepositoryError, NoSuchPathError
from gitscope.logging_config import get_logger
from gitscope.models.blame import BlameEntry
from gitscope.models.lazy import Lazy
from gitscope.models.submodule import SubmoduleStatus, SubmoduleVisit
from gitscope.services.git import blame as blame_service
from gitscope.services.git import merge as merge_service
from gitscope.services.git.command import GitCommand
from gitscope.services.git.merge import ConflictedFile
from gitscope.services.git.status import Status
from gitscope.services.git.submodules import Submodule, SubmoduleVisitor, walk_submodules
from gitscope.services.git.tree import Blob, Tree
from gitscope.utils.text import split_lines

logger = get_logger(__name__)


class Repository:
    """Structured views over one git repository."""

    def __init__(self, path: str, config: Union[Config, dict, None] = None):
        """Open a repository.

        Args:
            path: Working directory or git directory of the repository
            config: Configuration dict or Config object

        Raises:
            NoSuchPathError: If the path does not exist
            InvalidRepositoryError: If the path is not a git repository
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config
        self.path = os.path.abspath(path)

        try:
            repo = git.Repo(self.path)
        except git.exc.NoSuchPathError:
            raise NoSuchPathError(self.path) from None
        except git.exc.InvalidGitRepositoryError:
            raise InvalidRepositoryError(self.path) from None

        try:
            self.bare = repo.bare
            self.git_dir = repo.git_dir
            self.working_dir = repo.working_tree_dir or repo.git_dir
        finally:
            repo.close()

        self.git = GitCommand(self.working_dir, self.config)
        self._submodules: Lazy[Dict[str, Submodule]] = Lazy(self._load_submodules)
        logger.debug(f"Opened repository at {self.working_dir}")

    # Snapshots

    def status(self) -> Status:
        """Take a fresh working tree status snapshot."""
        return Status(self)

    def blame(self, path: str, commit: str = "HEAD") -> List[BlameEntry]:
        """Attribute every line of a file at a revision to a commit."""
        return blame_service.blame(self, path, commit)

    def tree(self, treeish: str = "HEAD", paths: Sequence[str] = ()) -> Tree:
        """Baked tree of a revision, optionally restricted to paths."""
        return Tree.construct(self, treeish, paths)

    def blob(self, id: str) -> Blob:
        """Unbaked blob for an object id."""
        return Blob.create(self, id)

    def conflicted_files(self, other_branch: Optional[str] = None) -> Dict[str, ConflictedFile]:
        """Conflicted paths of the current merge, parsed into sections."""
        return merge_service.conflicted_files(self, other_branch)

    # Refs

    def branches(self) -> List[str]:
        """Names of the local branches."""
        output = self.git.invoke("for-each-ref", {"format": "%(refname:short)"}, "refs/heads")
        return split_lines(output)

    def head_name(self) -> Optional[str]:
        """Current branch name, or None when HEAD is detached."""
        try:
            return self.git.invoke("symbolic-ref", {"short": True, "quiet": True}, "HEAD").strip()
        except CommandFailedError:
            logger.debug("HEAD is detached")
            return None

    # Worktree

    def add(self, *paths: str) -> None:
        """Stage paths."""
        self.git.invoke("add", {}, "--", *paths)

    def read_file(self, path: str) -> str:
        """Read a worktree file relative to the working directory."""
        with open(os.path.join(self.working_dir, path), encoding="utf-8", newline="") as f:
            return f.read()

    # Submodules

    def _load_submodules(self) -> Dict[str, Submodule]:
        if not self.branches():
            return {}
        return Submodule.create_submodules(self, self.config.submodule_ref)

    @property
    def submodules(self) -> Dict[str, Submodule]:
        """Submodules keyed by path, read once per Repository instance."""
        return self._submodules.get()

    def open_nested(self, path: str) -> "Repository":
        """Open a repository nested in this working directory with the same config."""
        return Repository(os.path.join(self.working_dir, path), self.config)

    def walk_submodules(
        self,
        visitor: SubmoduleVisitor,
        order: TraversalOrder = TraversalOrder.PRE_ORDER,
        include_root: bool = False,
    ) -> None:
        """Walk every nested submodule depth-first. See walk_submodules."""
        walk_submodules(self, visitor, order, include_root)

    def submodules_status(self) -> Dict[str, SubmoduleStatus]:
        """Status of every submodule at any depth, keyed by accumulated path."""
        result: Dict[str, SubmoduleStatus] = {}

        def collect(visit: SubmoduleVisit):
            result[visit.path] = visit.submodule.status()

        self.walk_submodules(collect)
        return result

    def submodules_init_recursive(self) -> None:
        """Run ``git submodule init`` on every reachable submodule."""
        self.walk_submodules(lambda visit: visit.submodule.init())

    def submodules_update_recursive(self, init: bool = False) -> None:
        """Update every submodule, descending into each one after it is checked out."""
        self.walk_submodules(lambda visit: visit.submodule.update(init=init))

    def submodules_modified_names(self) -> Dict[str, List[str]]:
        """Modified and added paths of every checked out repository in the forest.

        Deepest repositories come first; the root is keyed by "".
        """
        result: Dict[str, List[str]] = {}

        def collect(visit: SubmoduleVisit):
            if visit.repo is None:
                return
            result[visit.path or ""] = visit.repo.status().modified_names()

        self.walk_submodules(collect, order=TraversalOrder.POST_ORDER, include_root=True)
        return result

    def __repr__(self) -> str:
        return f'<Repository "{self.working_dir}">'
