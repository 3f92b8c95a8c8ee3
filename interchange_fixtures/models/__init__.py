"""Interchange fixture data models — all Pydantic v2, all frozen (immutable)."""

from interchange_fixtures.models.config import FixtureConfig
from interchange_fixtures.models.status import FixtureStatus, TreeStatus
from interchange_fixtures.models.tasks import Task, TaskOutcome, TaskReport
from interchange_fixtures.models.versioning import DEFAULT_VERSION_TAG, VersionTag

__all__ = [
    # versioning
    "DEFAULT_VERSION_TAG",
    "VersionTag",
    # config
    "FixtureConfig",
    # tasks
    "Task",
    "TaskOutcome",
    "TaskReport",
    # status
    "FixtureStatus",
    "TreeStatus",
]
