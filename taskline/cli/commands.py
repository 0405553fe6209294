from __future__ import annotations

import argparse
import logging
import os
import sys

from taskline.config import ConfigError, load_project
from taskline.graph import GraphError, expand_job
from taskline.jobs import registry_from_project
from taskline.pipeline import RunResult

from .args import build_parser


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        _setup_logging(args.verbose)

        match args.command:
            case "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case "show":
                return cmd_show(args)
            case _:
                return 2

    except KeyError as exc:
        print(f"Unknown job or group: {exc.args[0]}", file=sys.stderr)
        return 2

    except (ConfigError, GraphError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_run(args: argparse.Namespace) -> int:
    project = load_project(args.config)
    variables = {"cwd": os.getcwd(), **project.vars, **_parse_vars(args.vars)}
    fail_fast = False if args.no_fail_fast else None

    registry = registry_from_project(project, variables=variables, fail_fast=fail_fast)
    rr = registry.run(args.job)
    _print_result(rr)
    return rr.exit_code


def cmd_list(args: argparse.Namespace) -> int:
    project = load_project(args.config)
    for job in project:
        print(f"{job.name}  {job.description}".rstrip())
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    project = load_project(args.config)
    for index, task in enumerate(expand_job(project, args.job), start=1):
        print(f"{index}. {task.name}: {task.describe()}")
    return 0


def _parse_vars(pairs: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or len(key.strip()) < 1:
            raise ConfigError(f"Invalid --var {pair!r}, expected KEY=VALUE")
        out[key.strip()] = value
    return out


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_result(rr: RunResult) -> None:
    for result in rr.results:
        status = "OK" if result.ok else "FAIL"
        print(
            f"{status} {result.name}, {result.duration_s:.3f}s, exit code = {result.outcome.returncode}"
        )
    for name in rr.skipped:
        print(f"SKIP {name}")

    failure = rr.failure
    if failure is not None:
        print(f"Task '{failure.name}' failed:", file=sys.stderr)
        print(failure.outcome.detail, file=sys.stderr)
