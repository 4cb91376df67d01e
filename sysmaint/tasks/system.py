import os
from pathlib import Path

from sysmaint.config import MaintenanceSettings
from sysmaint.executor import Outcome, RunContext

from .common import last_line

DROP_CACHES = Path("/proc/sys/vm/drop_caches")

# fwupdmgr exits with 2 when there is nothing to do.
_FWUPD_NOTHING_TO_DO = 2


def vacuum_journal(context: RunContext, settings: MaintenanceSettings) -> Outcome:
    retention = settings.journal_retention
    result = context.runner.run("journalctl", [f"--vacuum-time={retention}"])
    if result.ok:
        return Outcome.success(f"Journal logs older than {retention} vacuumed.")
    return Outcome.failure(f"Failed to vacuum journal logs: {last_line(result)}")


def drop_caches_writable(context: RunContext) -> bool:
    return os.access(DROP_CACHES, os.W_OK)


def drop_caches(context: RunContext) -> Outcome:
    os.sync()
    DROP_CACHES.write_text("3\n", encoding="ascii")
    return Outcome.success("Dropped memory caches.")


def firmware_update(context: RunContext) -> Outcome:
    refresh = context.runner.run("fwupdmgr", ["refresh"])
    if refresh.returncode not in (0, _FWUPD_NOTHING_TO_DO):
        return Outcome.failure(f"Failed to check firmware updates: {last_line(refresh)}")

    check = context.runner.run("fwupdmgr", ["get-updates"])
    if check.returncode == _FWUPD_NOTHING_TO_DO:
        return Outcome.success("No firmware updates available.")
    if not check.ok:
        return Outcome.failure(f"Failed to check firmware updates: {last_line(check)}")

    count = len([line for line in check.stdout_text.splitlines() if line.strip()])
    if count == 0:
        return Outcome.success("No firmware updates available.")

    update = context.runner.run("fwupdmgr", ["update", "-y"])
    if not update.ok:
        return Outcome.failure(f"Firmware update failed: {last_line(update)}")
    return Outcome.success(f"Firmware updated ({count} updates applied).")
