"""``interchange-fixtures status`` — show cache and fixture tree state."""

from __future__ import annotations

import typer
from rich.table import Table

from interchange_fixtures.cli.commands._common import console, get_controller
from interchange_fixtures.models.status import TreeStatus


def _yes_no(flag: bool) -> str:
    return "[green]yes[/green]" if flag else "[yellow]no[/yellow]"


def _tree_detail(tree: TreeStatus) -> str:
    if not tree.present:
        return "-"
    detail = f"{tree.file_count} files"
    if tree.digest:
        detail += f", sha256 {tree.digest[:16]}"
    return detail


def status_cmd(ctx: typer.Context) -> None:
    """Show whether the archive, extracted tests and generated tests exist."""
    snapshot = get_controller(ctx).status()

    table = Table(title=f"Interchange fixtures @ {snapshot.version_tag[:12]}")
    table.add_column("Item", style="cyan")
    table.add_column("Path")
    table.add_column("Present", justify="center")
    table.add_column("Detail")

    table.add_row(
        "archive",
        str(snapshot.archive_path),
        _yes_no(snapshot.archive_present),
        snapshot.archive_sha256[:16] or "-",
    )
    extracted_detail = _tree_detail(snapshot.extracted)
    if snapshot.extracted.present and not snapshot.extracted_is_current:
        extracted_detail += " [yellow](stale)[/yellow]"
    table.add_row(
        "extracted",
        str(snapshot.extracted.path),
        _yes_no(snapshot.extracted.present),
        extracted_detail,
    )
    table.add_row(
        "generated",
        str(snapshot.generated.path),
        _yes_no(snapshot.generated.present),
        _tree_detail(snapshot.generated),
    )
    console.print(table)

    if snapshot.other_cached_tags:
        console.print(
            "[dim]Other cached versions:[/dim] " + ", ".join(snapshot.other_cached_tags)
        )
