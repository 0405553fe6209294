from __future__ import annotations

import logging
import time
from typing import Iterable, Iterator

from .types import RunResult, Task, TaskError, TaskOutcome, TaskResult

logger = logging.getLogger(__name__)


class Pipeline:
    """Ordered list of tasks run one after the other.

    With ``fail_fast`` (the default) the run stops at the first failing task
    and every later task is reported as skipped without being executed.
    """

    def __init__(self, *, fail_fast: bool = True):
        self.fail_fast = fail_fast
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def add_task(self, task: Task) -> Pipeline:
        if not isinstance(task, Task):
            raise TypeError(f"Expected a Task, got {type(task)}")
        self._tasks.append(task)
        return self

    def add_task_list(self, tasks: Iterable[Task]) -> Pipeline:
        for task in tasks:
            self.add_task(task)
        return self

    def run(self) -> RunResult:
        order = [task.name for task in self._tasks]
        results: list[TaskResult] = []
        total = len(self._tasks)

        for index, task in enumerate(self._tasks):
            logger.debug("Running task %d/%d: %s", index + 1, total, task.name)

            start = time.monotonic()
            try:
                outcome = TaskOutcome.coerce(task.action())
            except TaskError as exc:
                outcome = TaskOutcome.failure(str(exc))
            duration = time.monotonic() - start

            results.append(TaskResult(index, task.name, outcome, duration))

            if outcome.ok:
                logger.debug("Task %s succeeded in %.3fs", task.name, duration)
                continue

            logger.info(
                "Task %s failed with exit code %d", task.name, outcome.returncode
            )
            if self.fail_fast:
                break

        skipped = order[len(results):]
        return RunResult(order, results, skipped)
