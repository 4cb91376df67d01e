import shutil
from pathlib import Path
from typing import Callable

from sysmaint.executor import RunContext
from sysmaint.system import CommandResult

PACKAGE_ENV = {"LC_ALL": "C", "DEBIAN_FRONTEND": "noninteractive"}


def debian_family(context: RunContext) -> bool:
    return context.os.debian_family


def is_ubuntu(context: RunContext) -> bool:
    return context.os.name == "ubuntu"


def has_tool(tool: str) -> Callable[[RunContext], bool]:
    def check(context: RunContext) -> bool:
        return context.runner.available(tool)

    return check


def all_of(*checks: Callable[[RunContext], bool]) -> Callable[[RunContext], bool]:
    def check(context: RunContext) -> bool:
        return all(c(context) for c in checks)

    return check


def apt(context: RunContext, *args: str) -> CommandResult:
    return context.runner.run("apt-get", args)


def last_line(result: CommandResult) -> str:
    """Last non-empty line of stderr (or stdout), for failure details."""
    for text in (result.stderr_text, result.stdout_text):
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if lines:
            return lines[-1]
    return f"exit code {result.returncode}"


def clear_directory(
    directory: Path,
    keep: frozenset[str] = frozenset(),
    keep_paths: frozenset[Path] = frozenset(),
) -> tuple[int, int]:
    """
    Delete everything inside `directory`, leaving the directory itself.

    `keep_paths` must be resolved paths. Returns (removed, failed) counts
    of top-level entries.
    """
    removed = failed = 0
    base = directory.resolve()
    for entry in sorted(directory.iterdir()):
        if entry.name in keep or base / entry.name in keep_paths:
            continue
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError:
            failed += 1
        else:
            removed += 1
    return removed, failed
