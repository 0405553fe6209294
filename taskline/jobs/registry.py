from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from taskline.config.types import ProjectConfig, TaskConfig
from taskline.executor import command_task, copy_task, mkdir_task
from taskline.graph import expand_job
from taskline.pipeline import Pipeline, RunResult, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Job:
    name: str
    build: Callable[[], Pipeline]
    description: str = ""

    def run(self) -> RunResult:
        pipeline = self.build()
        logger.debug("Job %s: %d task(s)", self.name, len(pipeline))
        return pipeline.run()


class JobRegistry:
    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, name: str) -> bool:
        return name in self._jobs

    def register(self, job: Job) -> Job:
        if job.name in self._jobs:
            raise ValueError(f"Duplicate job name: {job.name}")
        self._jobs[job.name] = job
        return job

    def job(
        self, name: str, description: str = ""
    ) -> Callable[[Callable[[], Pipeline]], Callable[[], Pipeline]]:
        """Register a function returning a Pipeline as a named job."""

        def decorator(build: Callable[[], Pipeline]) -> Callable[[], Pipeline]:
            self.register(Job(name, build, description or (build.__doc__ or "").strip()))
            return build

        return decorator

    def get(self, name: str) -> Job:
        if name not in self._jobs:
            raise KeyError(name)
        return self._jobs[name]

    def names(self) -> list[str]:
        return sorted(self._jobs)

    def run(self, name: str) -> RunResult:
        return self.get(name).run()


def build_task(config: TaskConfig, variables: Mapping[str, str]) -> Task:
    match config.kind:
        case "run":
            if config.command is None:
                raise AssertionError("Unreachable")
            return command_task(
                config.name,
                config.command,
                variables=variables,
                env=config.env,
                working_dir=config.working_dir,
            )
        case "mkdir":
            return mkdir_task(config.name, config.paths, variables=variables)
        case "copy":
            return copy_task(config.name, config.copies, variables=variables)
        case _:
            raise AssertionError(f"Unknown task kind: {config.kind}")


def build_pipeline(
    project: ProjectConfig,
    job_name: str,
    *,
    variables: Mapping[str, str] | None = None,
    fail_fast: bool | None = None,
) -> Pipeline:
    job = project.get_job(job_name)
    values = {**project.vars, **(variables or {})}

    if fail_fast is None:
        fail_fast = job.fail_fast if job.fail_fast is not None else project.fail_fast

    pipeline = Pipeline(fail_fast=fail_fast)
    pipeline.add_task_list(build_task(t, values) for t in expand_job(project, job_name))
    return pipeline


def registry_from_project(
    project: ProjectConfig,
    *,
    variables: Mapping[str, str] | None = None,
    fail_fast: bool | None = None,
) -> JobRegistry:
    registry = JobRegistry()
    for job in project:

        def build(name: str = job.name) -> Pipeline:
            return build_pipeline(project, name, variables=variables, fail_fast=fail_fast)

        registry.register(Job(job.name, build, job.description))
    return registry
