"""Status snapshot formatting utilities."""

from typing import TYPE_CHECKING

from rich.table import Table

from gitscope.models.status import ChangeKind, StatusRecord

if TYPE_CHECKING:
    from gitscope.services.git.status import Status

# Rich color per change kind
KIND_COLORS = {
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.ADDED: "green",
    ChangeKind.DELETED: "red",
    ChangeKind.CONFLICTED: "magenta",
    ChangeKind.UNMODIFIED: None,
}


def format_kind(record: StatusRecord) -> str:
    """Short status code for a record ("??" for untracked)."""
    if record.untracked:
        return "??"
    return record.kind.value or "-"


def format_status_report(status: "Status") -> str:
    """
    Format every record of a snapshot as an indented plain text report.

    Example:
        "lib/app.py\\n\\tsha(r) 0000... 100644\\n\\tsha(i) 71e9... 100644\\n..."
    """
    out = []
    for record in status.records():
        out.append(record.path)
        out.append(f"\tsha(r) {record.sha_repo or ''} {record.mode_repo or ''}")
        out.append(f"\tsha(i) {record.sha_index or ''} {record.mode_index or ''}")
        out.append(f"\ttype   {record.kind.value}")
        out.append(f"\tstage  {'' if record.stage is None else record.stage}")
        out.append(f"\tuntrac {record.untracked}")
    out.append("")
    return "\n".join(out) + "\n"


def status_table(status: "Status", include_unmodified: bool = False) -> Table:
    """
    Build a Rich table of a snapshot.

    Args:
        status: Status snapshot
        include_unmodified: Also list tracked paths without changes

    Returns:
        Table with one row per path
    """
    table = Table()
    table.add_column("Status")
    table.add_column("Path")
    table.add_column("Index")
    table.add_column("Repo")

    for record in status.records():
        if record.kind is ChangeKind.UNMODIFIED and not record.untracked and not include_unmodified:
            continue
        style = "dim" if record.untracked else KIND_COLORS.get(record.kind)
        table.add_row(
            format_kind(record),
            record.path,
            (record.sha_index or "")[:7],
            (record.sha_repo or "")[:7],
            style=style,
        )
    return table
