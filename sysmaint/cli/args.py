from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sysmaint",
        description="Run the host maintenance pipeline and write a dated report.",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .yml/.yaml, .toml or .json config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print diagnostics to stderr",
    )

    subparsers = parser.add_subparsers(dest="command")

    # run
    run = subparsers.add_parser("run", help="Run the maintenance pipeline (default)")
    run.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="NAME",
        help="Leave out a task (repeatable)",
    )
    run.add_argument(
        "--enable",
        action="append",
        default=[],
        metavar="NAME",
        help="Include an opt-in task (repeatable)",
    )

    # list
    subparsers.add_parser("list", help="List tasks in pipeline order")

    parser.set_defaults(command="run", skip=[], enable=[])
    return parser
