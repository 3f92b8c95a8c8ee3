"""interchange-fixtures CLI — Typer-based command-line interface.

Provides the ``interchange-fixtures`` command with subcommands for
acquiring the pinned interchange tests, cleaning the cache and extracted
tree, regenerating synthetic fixtures, and reporting on-disk state.

All output uses Rich for formatted terminal display.
"""
