from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from sysmaint.config import ConfigError, MaintenanceConfig, load_config
from sysmaint.executor import Orchestrator
from sysmaint.report import ReportError, ReportSink, report_path
from sysmaint.system import CommandRunner, PermissionDenied, PrivilegeGuard, detect_os
from sysmaint.tasks import build_pipeline, selected
from sysmaint.tasks.common import PACKAGE_ENV

from .args import build_parser

EXIT_PERMISSION = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        if args.verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format="%(asctime)s %(name)s %(levelname)s %(message)s",
                stream=sys.stderr,
            )

        match args.command:
            case "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case _:
                return EXIT_USAGE

    except PermissionDenied as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_PERMISSION

    except (ConfigError, ReportError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE

    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


def main() -> None:
    sys.exit(run_cli())


def cmd_run(args: argparse.Namespace) -> int:
    config = _config(args)
    tasks = build_pipeline(config)
    path = report_path(config.report.directory, config.report.prefix)

    with ReportSink(path, tag=config.report.tag) as sink:
        orchestrator = Orchestrator(
            tasks,
            sink=sink,
            guard=PrivilegeGuard(),
            runner=CommandRunner(env=PACKAGE_ENV),
            probe=detect_os,
        )
        orchestrator.run()

    # Task failures are in the report; they do not fail the run.
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    config = _config(args)
    for spec, enabled in selected(config):
        print(spec.name if enabled else f"{spec.name} (disabled)")
    return 0


def _config(args: argparse.Namespace) -> MaintenanceConfig:
    config = load_config(Path(args.config)) if args.config else MaintenanceConfig()
    config.skip = _merge(config.skip, args.skip)
    config.enable = _merge(config.enable, args.enable)
    return config


def _merge(first: list[str], extra: list[str]) -> list[str]:
    out = list(first)
    for name in extra:
        name = name.strip()
        if name and name not in out:
            out.append(name)
    return out
