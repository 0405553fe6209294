from __future__ import annotations

from taskline.config.types import Entry, GroupRef, ProjectConfig, TaskConfig

from .types import CycleError


def expand_job(project: ProjectConfig, job_name: str) -> list[TaskConfig]:
    """Flatten a job into the ordered list of tasks it runs.

    Group references are replaced in place by the group's own entries,
    recursively. A group may be used several times; a group that reaches
    itself raises CycleError.
    """
    job = project.get_job(job_name)

    stack: list[str] = []
    out: list[TaskConfig] = []

    def visit(entries: list[Entry]) -> None:
        for entry in entries:
            if isinstance(entry, TaskConfig):
                out.append(entry)
                continue

            if not isinstance(entry, GroupRef):
                raise AssertionError("Unreachable")

            name = entry.group
            if name not in project.groups:
                raise KeyError(name)

            if name in stack:
                start = stack.index(name)
                raise CycleError(stack[start:] + [name])

            stack.append(name)
            visit(project.groups[name])
            stack.pop()

    visit(job.entries)
    return out
