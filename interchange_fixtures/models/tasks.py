"""Task graph models — build nodes and their evaluation outcomes."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TaskOutcome(str, Enum):
    """What happened to a task during one graph evaluation."""

    BUILT = "built"
    UP_TO_DATE = "up_to_date"


class Task(BaseModel):
    """A node in the provisioning graph.

    ``output`` is the file or directory the action produces. A task whose
    output exists and is at least as new as every input's output is up to
    date and is skipped. Tasks without an output always run.

    ``is_current`` optionally narrows the up-to-date check further; it is
    consulted only after the timestamp rule has passed.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    action: Callable[[], Any]
    output: Path | None = None
    inputs: tuple[str, ...] = ()
    is_current: Callable[[], bool] | None = None


class TaskReport(BaseModel):
    """Per-task outcomes of one ``TaskGraph.run`` call, in execution order."""

    model_config = ConfigDict(frozen=True)

    target: str
    outcomes: dict[str, TaskOutcome] = Field(default_factory=dict)

    @property
    def built(self) -> list[str]:
        return [n for n, o in self.outcomes.items() if o is TaskOutcome.BUILT]

    @property
    def skipped(self) -> list[str]:
        return [n for n, o in self.outcomes.items() if o is TaskOutcome.UP_TO_DATE]
