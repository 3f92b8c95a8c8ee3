"""Provisioning failures — one exception kind per pipeline stage.

Every failure is terminal for the current invocation. The ``stage``
attribute names the step that failed so callers can report it.
"""

from __future__ import annotations


class ProvisioningError(RuntimeError):
    """Base for failures that stop the provisioning pipeline."""

    stage: str = "provision"


class FetchError(ProvisioningError):
    """Network or transport failure, or a non-success HTTP response."""

    stage = "fetch"


class ArchiveFormatError(ProvisioningError):
    """Corrupt or structurally unexpected fixture archive."""

    stage = "extract"


class GeneratorProcessError(ProvisioningError):
    """The fixture generator could not be launched or exited non-zero."""

    stage = "generate"

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
