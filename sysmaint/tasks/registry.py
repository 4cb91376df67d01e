from __future__ import annotations

from dataclasses import dataclass, replace
from functools import partial
from typing import Callable

from sysmaint.config import ConfigError, MaintenanceConfig, MaintenanceSettings
from sysmaint.executor import Outcome, RunContext, Task

from . import cleanup, packages, system
from .common import all_of, debian_family, has_tool, is_ubuntu

_NOT_DEBIAN = "OS not supported for {}."

Body = Callable[..., Outcome]
Check = Callable[[RunContext], bool]


@dataclass(frozen=True)
class TaskSpec:
    name: str
    build: Callable[[MaintenanceSettings], Task]
    opt_in: bool = False


def _apt_task(name: str, body: Body, what: str) -> TaskSpec:
    return TaskSpec(
        name,
        lambda _: Task(name, body, debian_family, _NOT_DEBIAN.format(what)),
    )


def _with_settings(
    name: str,
    body: Body,
    precondition: Check | None = None,
    reason: str | None = None,
) -> TaskSpec:
    def build(settings: MaintenanceSettings) -> Task:
        task = Task(name, partial(body, settings=settings), precondition)
        if reason is not None:
            task = replace(task, skip_reason=reason)
        return task

    return TaskSpec(name, build)


# Order matters: the cache is refreshed before upgrading and kernels are
# purged only once packages are consistent.
PIPELINE: tuple[TaskSpec, ...] = (
    _apt_task("update-cache", packages.update_cache, "package cache update"),
    _apt_task("dist-upgrade", packages.dist_upgrade, "upgrade"),
    TaskSpec(
        "install-linux-generic",
        lambda _: Task(
            "install-linux-generic",
            packages.install_linux_generic,
            is_ubuntu,
            "Not Ubuntu; linux-generic not installed.",
        ),
    ),
    _apt_task("remove-old-kernels", packages.remove_old_kernels, "kernel removal"),
    _apt_task("autoremove", packages.autoremove, "autoremove"),
    _apt_task("autoclean", packages.autoclean, "autoclean"),
    _apt_task(
        "remove-residual-configs",
        packages.remove_residual_configs,
        "residual config removal",
    ),
    TaskSpec(
        "remove-orphans",
        lambda _: Task(
            "remove-orphans",
            packages.remove_orphans,
            all_of(debian_family, has_tool("deborphan")),
            "deborphan not installed; skipping orphan removal.",
        ),
    ),
    _with_settings(
        "cleanup-snap",
        cleanup.cleanup_snap,
        has_tool("snap"),
        "Snap not installed; skipping.",
    ),
    _with_settings("cleanup-temp", cleanup.cleanup_temp),
    _with_settings("cleanup-user-caches", cleanup.cleanup_user_caches),
    _with_settings("cleanup-user-trash", cleanup.cleanup_user_trash),
    _with_settings(
        "vacuum-journal",
        system.vacuum_journal,
        has_tool("journalctl"),
        "journalctl not available.",
    ),
    _apt_task("repair-package-db", packages.repair_package_db, "package database repair"),
    _with_settings("clean-old-logs", cleanup.clean_old_logs),
    TaskSpec(
        "drop-caches",
        lambda _: Task(
            "drop-caches",
            system.drop_caches,
            system.drop_caches_writable,
            "No permission to drop memory caches.",
        ),
        opt_in=True,
    ),
    TaskSpec(
        "firmware-update",
        lambda _: Task(
            "firmware-update",
            system.firmware_update,
            has_tool("fwupdmgr"),
            "fwupd not installed.",
        ),
    ),
)

TASK_NAMES = tuple(spec.name for spec in PIPELINE)


def _check_names(where: str, names: list[str]) -> None:
    for name in names:
        if name not in TASK_NAMES:
            raise ConfigError(f"{where}: unknown task '{name}'")


def selected(config: MaintenanceConfig) -> list[tuple[TaskSpec, bool]]:
    """Every registered task, in order, paired with whether it will run."""
    _check_names("tasks.skip", config.skip)
    _check_names("tasks.enable", config.enable)

    out = []
    for spec in PIPELINE:
        enabled = spec.name in config.enable if spec.opt_in else True
        out.append((spec, enabled and spec.name not in config.skip))
    return out


def build_pipeline(config: MaintenanceConfig) -> list[Task]:
    return [
        spec.build(config.settings) for spec, enabled in selected(config) if enabled
    ]
