"""``clean``, ``clean-archives`` and ``clean-test-files`` commands.

All three are idempotent: removing something that is already absent
succeeds quietly.
"""

from __future__ import annotations

import typer

from interchange_fixtures.cli.commands._common import console, get_controller


def _report(removed: bool, what: str) -> None:
    if removed:
        console.print(f"[green]Removed[/green] {what}")
    else:
        console.print(f"[dim]Nothing to remove:[/dim] {what}")


def clean_test_files_cmd(ctx: typer.Context) -> None:
    """Remove the extracted interchange tests."""
    controller = get_controller(ctx)
    _report(controller.clean_extracted(), str(controller.config.output_dir))


def clean_archives_cmd(ctx: typer.Context) -> None:
    """Remove the cached archive for the pinned version."""
    controller = get_controller(ctx)
    _report(controller.clean_archives(), str(controller.config.archive_path))


def clean_cmd(ctx: typer.Context) -> None:
    """Remove the extracted interchange tests, then the cached archive."""
    clean_test_files_cmd(ctx)
    clean_archives_cmd(ctx)
