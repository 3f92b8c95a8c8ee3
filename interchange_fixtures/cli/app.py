"""Main Typer application — imports and registers all CLI commands.

Entry point: ``interchange-fixtures`` (configured via pyproject.toml scripts).

Commands: acquire-fixtures, clean, clean-archives, clean-test-files,
generate, status.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from interchange_fixtures.cli.commands.acquire import acquire_cmd
from interchange_fixtures.cli.commands.clean import (
    clean_archives_cmd,
    clean_cmd,
    clean_test_files_cmd,
)
from interchange_fixtures.cli.commands.generate import generate_cmd
from interchange_fixtures.cli.commands.status import status_cmd
from interchange_fixtures.config import RuntimeSettings
from interchange_fixtures.core.lifecycle import LifecycleController
from interchange_fixtures.models.config import FixtureConfig

app = typer.Typer(
    name="interchange-fixtures",
    help="Fetch, extract and generate slashing-protection interchange test fixtures.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def setup_logging(level: str, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_controller(root: Path, settings: RuntimeSettings) -> LifecycleController:
    """Build the controller for a working root using the pinned constants."""
    return LifecycleController(FixtureConfig(working_root=root), settings=settings)


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-C",
        help="Working root holding the archive cache and fixture directories.",
        file_okay=False,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
) -> None:
    """Provision slashing-protection interchange test fixtures."""
    settings = RuntimeSettings()
    setup_logging(settings.log_level, verbose)
    ctx.obj = build_controller(root, settings)


# Register subcommands
app.command(name="acquire-fixtures", help="Download and extract the pinned interchange tests.")(acquire_cmd)
app.command(name="clean", help="Remove extracted tests and the cached archive.")(clean_cmd)
app.command(name="clean-archives", help="Remove the cached archive.")(clean_archives_cmd)
app.command(name="clean-test-files", help="Remove the extracted tests.")(clean_test_files_cmd)
app.command(name="generate", help="Regenerate synthetic fixtures with the generator.")(generate_cmd)
app.command(name="status", help="Show cache and fixture directory state.")(status_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
