"""Pluggable fixture generator backends.

Defines the ``FixtureGenerator`` Protocol that generation backends must
satisfy, along with two implementations:

1. **SubprocessGenerator** — runs an external generator binary with the
   target directory as its single trailing argument.
2. **CallableGenerator** — wraps an in-process callable.

Neither backend parses or validates what the generator writes.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from interchange_fixtures.core.errors import GeneratorProcessError

logger = logging.getLogger(__name__)


@runtime_checkable
class FixtureGenerator(Protocol):
    """Protocol for fixture generation backends.

    Any object with a ``generate(output_dir)`` method satisfies this
    protocol. Implementations raise :class:`GeneratorProcessError` on
    failure; returning normally means success.
    """

    def generate(self, output_dir: Path) -> None:
        ...


class SubprocessGenerator:
    """Runs an external generator process and waits for it.

    Parameters
    ----------
    command:
        Program and leading arguments, e.g.
        ``["cargo", "run", "--release", "--bin", "test_generator", "--"]``.
        The output directory is appended as the last argument.
    cwd:
        Working directory for the process.
    """

    def __init__(self, command: Sequence[str], cwd: Path | None = None) -> None:
        if not command:
            raise ValueError("Generator command must not be empty")
        self.command = list(command)
        self.cwd = cwd

    def generate(self, output_dir: Path) -> None:
        argv = [*self.command, str(output_dir)]
        logger.info("Running generator: %s", " ".join(argv))
        try:
            result = subprocess.run(argv, cwd=self.cwd, check=False)
        except OSError as exc:
            raise GeneratorProcessError(
                f"Could not launch generator {self.command[0]!r}: {exc}"
            ) from exc

        if result.returncode != 0:
            raise GeneratorProcessError(
                f"Generator exited with status {result.returncode}",
                returncode=result.returncode,
            )


class CallableGenerator:
    """In-process generator backed by a plain callable.

    Any exception the callable raises is reported as a
    :class:`GeneratorProcessError`.
    """

    def __init__(self, func: Callable[[Path], object], name: str = "") -> None:
        self._func = func
        self.name = name or getattr(func, "__name__", "callable")

    def generate(self, output_dir: Path) -> None:
        logger.info("Running in-process generator %s", self.name)
        try:
            self._func(output_dir)
        except GeneratorProcessError:
            raise
        except Exception as exc:
            raise GeneratorProcessError(
                f"Generator {self.name} failed: {exc}"
            ) from exc
