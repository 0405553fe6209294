from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskline")

    parser.add_argument(
        "--config",
        default="taskline.yml",
        help="Path to config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each task as it runs",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # run
    run = subparsers.add_parser("run", help="Run a job")
    run.add_argument("job", help="Job name")
    run.add_argument(
        "--no-fail-fast",
        action="store_true",
        help="Keep running the remaining tasks after a failure",
    )
    run.add_argument(
        "--var",
        dest="vars",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a variable (repeatable)",
    )

    # list
    subparsers.add_parser("list", help="List jobs")

    # show
    show = subparsers.add_parser("show", help="Show the tasks of a job in order")
    show.add_argument("job", help="Job name")

    return parser
