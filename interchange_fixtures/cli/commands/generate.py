"""``interchange-fixtures generate`` — rebuild the synthetic fixtures."""

from __future__ import annotations

import typer

from interchange_fixtures.cli.commands._common import (
    console,
    get_controller,
    stage_failures,
)


def generate_cmd(ctx: typer.Context) -> None:
    """Delete the generated tests and run the fixture generator again."""
    controller = get_controller(ctx)
    with stage_failures():
        target = controller.generate()
    console.print(f"[bold green]Generated[/bold green] {target}")
