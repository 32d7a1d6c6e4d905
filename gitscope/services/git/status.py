"""Working tree status snapshot.

A snapshot is reconciled from several independent plumbing queries, applied
in a fixed order:

1. ``ls-files --stage -z``: every indexed path, the base set
2. ``ls-files --others --exclude-standard -z``: untracked paths
3. ``diff-files --diff-filter=M`` then ``D``: worktree changes
4. ``diff-files --diff-filter=U``: unmerged paths, overriding 3
5. ``diff-index --diff-filter=A HEAD``: paths added since HEAD

The queries are not atomic with respect to each other; a repository that
changes while the snapshot is built can produce an inconsistent result.
"""

from collections.abc import Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Dict, Iterator, List, TYPE_CHECKING

from gitscope.exceptions import CommandFailedError, MalformedInputError
from gitscope.logging_config import get_logger
from gitscope.models.status import ChangeKind, StatusRecord
from gitscope.services.git.tree import Blob
from gitscope.utils.text import split_records

if TYPE_CHECKING:
    from gitscope.core import Repository

logger = get_logger(__name__)


def parse_ls_files_stage(output: str) -> Dict[str, StatusRecord]:
    """Parse ``ls-files --stage -z`` records: ``<mode> <sha> <stage>\\t<path>\\0``."""
    records: Dict[str, StatusRecord] = {}
    for number, entry in enumerate(split_records(output), start=1):
        info, sep, path = entry.partition("\t")
        fields = info.split()
        if not sep or len(fields) != 3:
            raise MalformedInputError("ls-files", number, f"unexpected record {entry!r}")
        mode, sha, stage = fields
        # Unmerged paths appear once per stage; the last stage wins
        records[path] = StatusRecord(path=path, mode_index=mode, sha_index=sha, stage=int(stage))
    return records


def parse_raw_diff(output: str, source: str) -> Dict[str, dict]:
    """
    Parse raw diff summary records.

    With ``-z`` every entry is two NUL-terminated fields,
    ``:<mode_src> <mode_dst> <sha_src> <sha_dst> <letter>`` and then the
    path, so paths arrive verbatim.

    Args:
        output: Output of diff-files or diff-index
        source: Command name used in error messages

    Returns:
        Mapping of path to a dict of the parsed fields
    """
    entries: Dict[str, dict] = {}
    fields_and_paths = split_records(output)
    if len(fields_and_paths) % 2:
        raise MalformedInputError(source, None, "record without a path")
    for number in range(0, len(fields_and_paths), 2):
        info, path = fields_and_paths[number], fields_and_paths[number + 1]
        fields = info.split()
        if not info.startswith(":") or len(fields) != 5:
            raise MalformedInputError(source, number // 2 + 1, f"unexpected record {info!r}")
        mode_src, mode_dst, sha_src, sha_dst, letter = fields
        entries[path] = {
            "mode_src": mode_src.lstrip(":"),
            "mode_dst": mode_dst,
            "sha_src": sha_src,
            "sha_dst": sha_dst,
            "kind": ChangeKind.from_letter(letter),
        }
    return entries


class Status(Mapping):
    """Read-only mapping of path to StatusRecord for one point in time."""

    def __init__(self, repo: "Repository"):
        """Build the snapshot.

        Args:
            repo: Repository whose ``git`` gateway runs the queries

        Raises:
            CommandFailedError: If any query fails (except HEAD diff in an empty repo)
        """
        self.repo = repo
        self._files = MappingProxyType(self._construct_status())

    # Mapping interface

    def __getitem__(self, path: str) -> StatusRecord:
        return self._files[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    @property
    def files(self) -> Mapping:
        """All records keyed by path."""
        return self._files

    def records(self) -> Iterator[StatusRecord]:
        """Iterate over the records in path order of the index listing."""
        return iter(self._files.values())

    # Derived views

    def _select(self, kind: ChangeKind) -> Dict[str, StatusRecord]:
        return {path: record for path, record in self._files.items() if record.kind is kind}

    def changed(self) -> Dict[str, StatusRecord]:
        """Paths modified in the worktree."""
        return self._select(ChangeKind.MODIFIED)

    uncommitted = changed

    def conflicted(self) -> Dict[str, StatusRecord]:
        """Paths left unmerged by a merge."""
        return self._select(ChangeKind.CONFLICTED)

    unmerged = conflicted

    def added(self) -> Dict[str, StatusRecord]:
        """Paths added to the index since HEAD."""
        return self._select(ChangeKind.ADDED)

    def deleted(self) -> Dict[str, StatusRecord]:
        """Indexed paths missing from the worktree."""
        return self._select(ChangeKind.DELETED)

    def untracked(self) -> Dict[str, StatusRecord]:
        """Paths in the worktree that git does not track."""
        return {path: record for path, record in self._files.items() if record.untracked}

    def modified_names(self) -> List[str]:
        """Changed paths followed by added paths."""
        return list(self.changed()) + list(self.added())

    # Content access

    def blob(self, path: str, side: str = "index") -> Blob:
        """
        Get the blob recorded for a path.

        Args:
            path: Path in this snapshot
            side: "index" or "repo"; the index side falls back to the repo
                side when the index has no object id

        Returns:
            Unbaked Blob for the selected object id
        """
        record = self._files[path]
        if side == "repo":
            sha = record.sha_repo
        elif side == "index":
            sha = record.sha_index or record.sha_repo
        else:
            raise ValueError(f"side must be 'index' or 'repo', got '{side}'")
        if sha is None:
            raise KeyError(f"No {side} object recorded for '{path}'")
        return self.repo.blob(sha)

    def raw_data(self, path: str) -> str:
        """Read the worktree content of a path."""
        return self.repo.read_file(path)

    # Construction

    def _construct_status(self) -> Dict[str, StatusRecord]:
        files = self._ls_files()
        logger.debug(f"Index lists {len(files)} paths")

        for path in self._ls_files_untracked():
            # Tracked beats untracked
            if path not in files:
                files[path] = StatusRecord.untracked_path(path)

        self._overlay(files, self._diff_files("M"), side="dst")
        self._overlay(files, self._diff_files("D"), side="dst")
        # Conflicts override any worktree classification above
        self._overlay(files, self._diff_files("U"), side="dst")
        self._overlay(files, self._diff_index("HEAD", "A"), side="src")

        return files

    def _overlay(self, files: Dict[str, StatusRecord], entries: Dict[str, dict], side: str) -> None:
        """Merge diff entries into matching tracked records.

        ``side`` selects which end of the diff line is the repo side: "dst"
        for worktree comparisons, "src" for comparisons against a commit.
        """
        for path, entry in entries.items():
            record = files.get(path)
            if record is None or record.untracked:
                logger.debug(f"Skipping {entry['kind'].name} entry for unindexed path {path}")
                continue
            files[path] = replace(
                record,
                kind=entry["kind"],
                mode_repo=entry[f"mode_{side}"],
                sha_repo=entry[f"sha_{side}"],
            )

    def _ls_files(self) -> Dict[str, StatusRecord]:
        output = self.repo.git.invoke("ls-files", {"stage": True, "z": True}, quote_paths=False)
        return parse_ls_files_stage(output)

    def _ls_files_untracked(self) -> List[str]:
        output = self.repo.git.invoke(
            "ls-files", {"others": True, "exclude_standard": True, "z": True}, quote_paths=False
        )
        return split_records(output)

    def _diff_files(self, diff_filter: str) -> Dict[str, dict]:
        """Compare the index with the worktree."""
        output = self.repo.git.invoke(
            "diff-files", {"diff_filter": diff_filter, "z": True}, quote_paths=False
        )
        return parse_raw_diff(output, "diff-files")

    def _diff_index(self, treeish: str, diff_filter: str) -> Dict[str, dict]:
        """Compare the index with a commit."""
        try:
            output = self.repo.git.invoke(
                "diff-index", {"diff_filter": diff_filter, "z": True}, treeish, quote_paths=False
            )
        except CommandFailedError as e:
            # HEAD does not resolve before the first commit
            if self.repo.branches():
                raise
            logger.debug(f"Ignoring diff-index failure in empty repository: {e}")
            return {}
        return parse_raw_diff(output, "diff-index")

    def __repr__(self) -> str:
        return f"<Status {len(self._files)} paths>"
