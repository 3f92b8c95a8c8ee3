"""Shared helpers for CLI commands: controller lookup and failure reporting."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

import typer
from rich.console import Console
from rich.markup import escape

from interchange_fixtures.core.errors import ProvisioningError
from interchange_fixtures.core.lifecycle import LifecycleController

console = Console()


def get_controller(ctx: typer.Context) -> LifecycleController:
    """Return the controller built by the app callback."""
    controller = ctx.obj
    if not isinstance(controller, LifecycleController):
        raise RuntimeError("CLI context has no LifecycleController")
    return controller


@contextlib.contextmanager
def stage_failures() -> Iterator[None]:
    """Turn a :class:`ProvisioningError` into a red message and exit code 1."""
    try:
        yield
    except ProvisioningError as exc:
        console.print(f"[bold red]{exc.stage} failed:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
