"""``interchange-fixtures acquire-fixtures`` — fetch and unpack the pinned tests.

Downloads the archive for the configured version tag unless it is already
cached, then extracts it unless the extracted tree is already current.
"""

from __future__ import annotations

import typer

from interchange_fixtures.cli.commands._common import (
    console,
    get_controller,
    stage_failures,
)
from interchange_fixtures.models.tasks import TaskOutcome


def acquire_cmd(ctx: typer.Context) -> None:
    """Ensure the interchange tests for the pinned version are extracted."""
    controller = get_controller(ctx)
    config = controller.config

    with stage_failures():
        report = controller.acquire()

    for name, outcome in report.outcomes.items():
        style = "green" if outcome is TaskOutcome.BUILT else "dim"
        console.print(f"  [{style}]{name}: {outcome.value.replace('_', ' ')}[/{style}]")
    console.print(
        f"[bold]Fixtures:[/bold] {config.output_dir} "
        f"[dim]({config.version_tag})[/dim]"
    )
