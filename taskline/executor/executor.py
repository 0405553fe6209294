import logging
import os
import shutil
import string
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from taskline.pipeline import Task, TaskError, TaskOutcome

logger = logging.getLogger(__name__)

_FORMATTER = string.Formatter()


def render(template: str, variables: Mapping[str, str]) -> str:
    """Substitute ``{name}`` placeholders; ``{{``/``}}`` are literal braces.

    Only bare names are accepted: attribute, index, conversion and format
    spec syntax is rejected with TaskError.
    """
    try:
        parts = list(_FORMATTER.parse(template))
    except ValueError as exc:
        raise TaskError(f"Malformed placeholder in {template!r}: {exc}") from exc

    out: list[str] = []
    for literal, field, spec, conversion in parts:
        out.append(literal)
        if field is None:
            continue

        if not field.isidentifier() or spec or conversion:
            raise TaskError(f"Unsupported placeholder {{{field}}} in {template!r}")

        if field not in variables:
            raise TaskError(f"Unknown variable {field!r} in {template!r}")

        out.append(str(variables[field]))

    return "".join(out)


def command_task(
    name: str,
    command: str | Sequence[str],
    *,
    variables: Mapping[str, str] | None = None,
    env: Mapping[str, str] | None = None,
    working_dir: str | None = None,
) -> Task:
    vars_ = dict(variables or {})
    env_ = dict(env or {})

    def action() -> TaskOutcome:
        if isinstance(command, str):
            args: str | list[str] = render(command, vars_)
        else:
            args = [render(part, vars_) for part in command]
        cwd = render(working_dir, vars_) if working_dir else None
        child_env = {**os.environ, **{k: render(v, vars_) for k, v in env_.items()}}

        logger.debug("%s: exec %s (cwd=%s)", name, args, cwd)
        try:
            result = subprocess.run(
                args,
                shell=isinstance(args, str),
                cwd=cwd,
                env=child_env,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            return TaskOutcome.failure(f"{name}: could not start command: {exc}")

        output = result.stdout
        if result.returncode == 0:
            return TaskOutcome.success(output)

        detail = result.stderr.strip() or result.stdout.strip()
        if not detail:
            detail = f"{name}: exit code {result.returncode}"
        return TaskOutcome.failure(detail, result.returncode, output)

    return Task(name, action)


def mkdir_task(
    name: str,
    paths: str | Sequence[str],
    *,
    variables: Mapping[str, str] | None = None,
) -> Task:
    vars_ = dict(variables or {})
    targets = [paths] if isinstance(paths, str) else list(paths)

    def action() -> TaskOutcome:
        for target in targets:
            path = Path(render(target, vars_))
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                return TaskOutcome.failure(f"{name}: cannot create {path}: {exc}")
        return TaskOutcome.success()

    return Task(name, action)


def copy_task(
    name: str,
    copies: Mapping[str, str],
    *,
    variables: Mapping[str, str] | None = None,
) -> Task:
    vars_ = dict(variables or {})
    pairs = list(copies.items())

    def action() -> TaskOutcome:
        for src, dst in pairs:
            source = Path(render(src, vars_))
            destination = Path(render(dst, vars_))
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, destination)
            except OSError as exc:
                return TaskOutcome.failure(
                    f"{name}: cannot copy {source} to {destination}: {exc}"
                )
        return TaskOutcome.success()

    return Task(name, action)
