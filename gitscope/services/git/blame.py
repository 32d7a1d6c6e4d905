"""Parser for ``git blame --porcelain`` output.

Every line of the blamed file is reported as a header line
(``<sha> <orig_line> <final_line> [<group_size>]``), zero or more metadata
lines, and the content line itself prefixed with a tab. Metadata is only
sent the first time a commit appears, so later headers for the same commit
resolve against the commits already seen in this parse.
"""

import re
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from gitscope.exceptions import MalformedInputError
from gitscope.logging_config import get_logger
from gitscope.models.blame import Actor, BlameEntry, Commit
from gitscope.utils.text import split_lines

if TYPE_CHECKING:
    from gitscope.core import Repository

logger = get_logger(__name__)

HEADER_RE = re.compile(r"^([0-9a-fA-F]{40}) (\d+) (\d+)(?: (\d+))?$")

# Metadata keys kept from the porcelain stream; anything else is ignored
METADATA_KEYS = {
    "author",
    "author-mail",
    "author-time",
    "committer",
    "committer-mail",
    "committer-time",
    "summary",
    "filename",
}


def _build_commit(info: dict, line_number: int) -> Commit:
    """Create a Commit from the metadata gathered for its first header."""
    missing = [key for key in ("author", "author-time", "committer", "committer-time") if key not in info]
    if missing:
        raise MalformedInputError(
            "blame", line_number, f"commit {info['id']} first seen without {', '.join(missing)}"
        )
    try:
        authored_date = int(info["author-time"])
        committed_date = int(info["committer-time"])
    except ValueError:
        raise MalformedInputError("blame", line_number, f"bad timestamp for commit {info['id']}") from None

    return Commit(
        id=info["id"],
        author=Actor.from_string(f"{info['author']} {info.get('author-mail', '')}"),
        authored_date=authored_date,
        committer=Actor.from_string(f"{info['committer']} {info.get('committer-mail', '')}"),
        committed_date=committed_date,
        message=info.get("summary", ""),
    )


def parse_blame(text: str) -> List[BlameEntry]:
    """
    Parse porcelain blame output.

    Args:
        text: Output of ``git blame -p <commit> -- <file>``

    Returns:
        One BlameEntry per line of the file, in file order. Entries of the
        same commit share one Commit instance.

    Raises:
        MalformedInputError: On a content line with no header before it, or
            a commit whose first header carries no metadata
    """
    commits: Dict[str, Commit] = {}
    entries: List[BlameEntry] = []
    info: Optional[dict] = None

    for number, line in enumerate(split_lines(text), start=1):
        if line.startswith("\t"):
            if info is None:
                raise MalformedInputError("blame", number, "content line without a header")
            commit = commits.get(info["id"])
            if commit is None:
                commit = _build_commit(info, number)
                commits[commit.id] = commit
            entries.append(BlameEntry(commit, line[1:], info["orig_line"], info["final_line"]))
            info = None
            continue

        match = HEADER_RE.match(line)
        if match:
            info = {
                "id": match.group(1),
                "orig_line": int(match.group(2)),
                "final_line": int(match.group(3)),
            }
            continue

        if info is None:
            logger.debug(f"Ignoring blame line {number} outside a header group: {line!r}")
            continue

        key, _, value = line.partition(" ")
        if key in METADATA_KEYS:
            info[key] = value

    logger.debug(f"Parsed {len(entries)} blame lines from {len(commits)} commits")
    return entries


def group_blame(entries: List[BlameEntry]) -> List[Tuple[Commit, List[str]]]:
    """Fold consecutive entries of the same commit into (commit, lines) runs."""
    groups: List[Tuple[Commit, List[str]]] = []
    for entry in entries:
        if groups and groups[-1][0] is entry.commit:
            groups[-1][1].append(entry.line)
        else:
            groups.append((entry.commit, [entry.line]))
    return groups


def blame(repo: "Repository", path: str, commit: str = "HEAD") -> List[BlameEntry]:
    """Blame a file at a revision."""
    output = repo.git.invoke("blame", {"porcelain": True}, commit, "--", path, quote_paths=False)
    return parse_blame(output)
