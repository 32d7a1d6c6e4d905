"""Conflict marker parsing and conflicted files."""

import os
import re
from typing import Dict, List, Optional, TYPE_CHECKING

from gitscope.constants import CONFLICT_END_MARKER, CONFLICT_SEPARATOR, CONFLICT_START_MARKER
from gitscope.logging_config import get_logger
from gitscope.models.merge import ConflictParse, ConflictSection
from gitscope.utils.text import split_lines

if TYPE_CHECKING:
    from gitscope.core import Repository
    from gitscope.models.status import StatusRecord

logger = get_logger(__name__)

START_RE = re.compile(rf"^{re.escape(CONFLICT_START_MARKER)}(?: |$)")
END_RE = re.compile(rf"^{re.escape(CONFLICT_END_MARKER)}(?: |$)")


def parse_conflicts(
    text: str,
    ours: str = "ours",
    theirs: str = "theirs",
    common: str = "common",
) -> ConflictParse:
    """
    Split text containing conflict markers into sections.

    Lines outside any conflict are filed under ``common``; inside a conflict
    they go to ``ours`` until the separator and to ``theirs`` after it.
    Marker lines themselves are dropped. Each section keeps only the sides
    that received lines, and sections that received none are omitted.

    Example:
        parse_conflicts("a\\n<<<<<<< HEAD\\nb\\n=======\\nc\\n>>>>>>> br\\nd")
        # sections: {common: (a,)}, {ours: (b,), theirs: (c,)}, {common: (d,)}
        # conflicts: 1

    Returns:
        ConflictParse with the ordered sections and the number of conflicts
    """
    state = common
    section = 1
    conflicts = 0
    buckets: Dict[int, Dict[str, List[str]]] = {}

    for line in split_lines(text):
        # Markers written into CRLF files end in "\r"; content lines keep it
        marker = line[:-1] if line.endswith("\r") else line
        if START_RE.match(marker):
            state = ours
            conflicts += 1
            section += 1
        elif marker == CONFLICT_SEPARATOR:
            state = theirs
        elif END_RE.match(marker):
            state = common
            section += 1
        else:
            buckets.setdefault(section, {}).setdefault(state, []).append(line)

    sections = tuple(
        ConflictSection(index=index, sides={side: tuple(lines) for side, lines in sides.items()})
        for index, sides in buckets.items()
    )
    return ConflictParse(sections=sections, conflicts=conflicts)


class ConflictedFile:
    """A conflicted worktree file, parsed with real branch names as side labels."""

    def __init__(
        self,
        repo: "Repository",
        path: str,
        text: str,
        ours: str = "ours",
        theirs: str = "theirs",
        common: str = "common",
    ):
        self.repo = repo
        self.path = path
        self.ours = ours
        self.theirs = theirs
        self.common = common
        parsed = parse_conflicts(text, ours, theirs, common)
        self.sections = parsed.sections
        self.conflicts = parsed.conflicts

    @classmethod
    def from_status(
        cls,
        record: "StatusRecord",
        repo: "Repository",
        other_branch: Optional[str] = None,
    ) -> "ConflictedFile":
        """Build from a conflicted status record.

        Ours is the current branch and theirs is ``other_branch``; either
        falls back to the configured label when unknown.
        """
        ours = repo.head_name() or repo.config.ours_label
        theirs = other_branch or repo.config.theirs_label
        return cls(
            repo,
            record.path,
            repo.read_file(record.path),
            ours=ours,
            theirs=theirs,
            common=repo.config.common_label,
        )

    @property
    def full_path(self) -> str:
        return os.path.join(self.repo.working_dir, self.path)

    def write_content(self, text: str) -> None:
        """Overwrite the file with resolved content.

        A failed write is not retried and may leave partial content behind.
        """
        with open(self.full_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.debug(f"Wrote {len(text)} characters to {self.path}")

    def resolve(self) -> None:
        """Mark the conflict resolved by staging the file."""
        self.repo.add(self.path)

    def side(self, label: str) -> List[str]:
        """All lines of one side across every section, in order."""
        lines: List[str] = []
        for section in self.sections:
            lines.extend(section.get(label, ()))
        return lines

    def __repr__(self) -> str:
        return f'<ConflictedFile "{self.path}" conflicts={self.conflicts}>'


def conflicted_files(repo: "Repository", other_branch: Optional[str] = None) -> Dict[str, ConflictedFile]:
    """Map every conflicted path in a fresh status snapshot to a ConflictedFile."""
    return {
        path: ConflictedFile.from_status(record, repo, other_branch)
        for path, record in repo.status().conflicted().items()
    }
