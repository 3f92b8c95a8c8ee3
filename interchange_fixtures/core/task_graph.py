"""Task DAG with timestamp-driven incremental evaluation.

The graph enforces:
- No task runs before all of its inputs have been evaluated.
- A task whose output exists and is at least as new as all of its inputs'
  outputs is skipped, unless one of its inputs was rebuilt in this run.
- When a task fails, nothing downstream of it runs; the error propagates.
"""

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path

from interchange_fixtures.models.tasks import Task, TaskOutcome, TaskReport

logger = logging.getLogger(__name__)


class CyclicDependencyError(ValueError):
    """Raised when the task graph contains a cycle."""


class UnknownTaskError(KeyError):
    """Raised when a task name or input does not exist in the graph."""


class TaskGraph:
    """Directed acyclic graph of provisioning tasks.

    Parameters
    ----------
    tasks:
        The nodes. Every name listed in a task's ``inputs`` must be the name
        of another task in the list.
    """

    def __init__(self, tasks: list[Task]) -> None:
        self._tasks: dict[str, Task] = {}
        for task in tasks:
            if task.name in self._tasks:
                raise ValueError(f"Duplicate task name: {task.name!r}")
            self._tasks[task.name] = task

        # Reverse edges: task name -> tasks that consume its output
        self._dependents: dict[str, list[str]] = {name: [] for name in self._tasks}
        for task in tasks:
            for name in task.inputs:
                if name not in self._tasks:
                    raise UnknownTaskError(
                        f"Task {task.name!r} depends on unknown task {name!r}"
                    )
                self._dependents[name].append(task.name)

        self._order = self._topological_order()

    def _topological_order(self) -> list[str]:
        """Kahn's algorithm; ties broken by declaration order."""
        in_degree = {name: len(t.inputs) for name, t in self._tasks.items()}
        queue = deque(name for name, deg in in_degree.items() if deg == 0)
        order: list[str] = []

        while queue:
            node = queue.popleft()
            order.append(node)
            for dep in self._dependents[node]:
                in_degree[dep] -= 1
                if in_degree[dep] == 0:
                    queue.append(dep)

        if len(order) != len(self._tasks):
            raise CyclicDependencyError(
                f"Task graph has a cycle. "
                f"Ordered {len(order)}/{len(self._tasks)} tasks."
            )
        return order

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def get_task(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(f"Unknown task: {name!r}") from None

    def get_dependents(self, name: str) -> list[str]:
        """Return all transitive dependent task names (BFS)."""
        self.get_task(name)
        result = []
        queue = deque(self._dependents[name])
        visited: set[str] = set()
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            result.append(node)
            queue.extend(self._dependents[node])
        return result

    def closure(self, target: str) -> list[str]:
        """Return ``target`` and everything it depends on, in topological order."""
        needed: set[str] = set()
        queue = deque([target])
        while queue:
            node = queue.popleft()
            if node in needed:
                continue
            needed.add(node)
            queue.extend(self.get_task(node).inputs)
        return [name for name in self._order if name in needed]

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    @staticmethod
    def _mtime_ns(path: Path) -> int | None:
        try:
            return path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    def is_up_to_date(self, name: str, rebuilt: set[str] | frozenset[str] = frozenset()) -> bool:
        """Check whether a task can be skipped.

        A task is out of date when it has no output, its output is missing,
        any input was rebuilt in the current run, any input has no output or
        an output newer than this task's, or its ``is_current`` check fails.
        """
        task = self.get_task(name)
        if task.output is None:
            return False
        own = self._mtime_ns(task.output)
        if own is None:
            return False
        for input_name in task.inputs:
            if input_name in rebuilt:
                return False
            upstream = self._tasks[input_name].output
            if upstream is None:
                return False
            upstream_mtime = self._mtime_ns(upstream)
            if upstream_mtime is None or upstream_mtime > own:
                return False
        if task.is_current is not None and not task.is_current():
            return False
        return True

    def run(self, target: str) -> TaskReport:
        """Evaluate ``target`` and its dependency closure.

        Returns a report of what was built and what was skipped. Exceptions
        raised by an action propagate unchanged; tasks after it do not run.
        """
        outcomes: dict[str, TaskOutcome] = {}
        rebuilt: set[str] = set()

        order = self.closure(target)
        for name in order:
            if self.is_up_to_date(name, rebuilt):
                logger.debug("Task %s is up to date", name)
                outcomes[name] = TaskOutcome.UP_TO_DATE
                continue
            logger.debug("Running task %s", name)
            try:
                self._tasks[name].action()
            except Exception:
                blocked = [dep for dep in self.get_dependents(name) if dep in order]
                if blocked:
                    logger.error("Task %s failed; not running %s", name, ", ".join(blocked))
                raise
            rebuilt.add(name)
            outcomes[name] = TaskOutcome.BUILT

        return TaskReport(target=target, outcomes=outcomes)
