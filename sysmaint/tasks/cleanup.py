"""Filesystem cleanup: snap revisions, temp dirs, per-user caches and trash, old logs."""
from __future__ import annotations

import pwd
import time
from pathlib import Path

from sysmaint.config import MaintenanceSettings
from sysmaint.executor import Outcome, RunContext

from .common import clear_directory, last_line


def cleanup_snap(context: RunContext, settings: MaintenanceSettings) -> Outcome:
    # Best effort: a refused retain setting does not stop the cleanup.
    context.runner.run("snap", ["set", "system", f"refresh.retain={settings.snap_retain}"])

    listing = context.runner.run("snap", ["list", "--all"])
    if not listing.ok:
        return Outcome.failure(f"Failed to list snaps: {last_line(listing)}")

    disabled = []
    for line in listing.stdout_text.splitlines()[1:]:
        parts = line.split()
        if len(parts) >= 6 and "disabled" in parts[-1].split(","):
            disabled.append((parts[0], parts[2]))

    if not disabled:
        return Outcome.success("No disabled snap revisions to remove.")

    failed = []
    for name, revision in disabled:
        result = context.runner.run(
            "snap", ["remove", name, f"--revision={revision}", "--purge"]
        )
        if not result.ok:
            failed.append(f"{name} r{revision}")

    if failed:
        return Outcome.failure(
            f"Failed to remove some snap revisions: {', '.join(failed)}"
        )
    return Outcome.success(f"Removed {len(disabled)} old snap revision(s).")


def cleanup_temp(context: RunContext, settings: MaintenanceSettings) -> Outcome:
    keep = frozenset(settings.temp_keep)
    # Never remove the report being written, nor a directory holding it.
    report = context.report_path.resolve()
    keep_paths = frozenset({report, *report.parents})

    removed = failed = 0
    cleaned = []
    for name in settings.temp_dirs:
        directory = Path(name)
        if not directory.is_dir():
            continue
        r, f = clear_directory(directory, keep, keep_paths)
        removed += r
        failed += f
        cleaned.append(name)

    where = " and ".join(cleaned) or "no temp directories"
    if failed:
        return Outcome.failure(
            f"Cleaned {where}: {removed} removed, {failed} could not be removed."
        )
    return Outcome.success(f"Cleaned {where}: {removed} entries removed.")


def user_homes(settings: MaintenanceSettings) -> list[Path]:
    """Home directories of regular users, uid in [uid_min, uid_max)."""
    # Several accounts may share one home; clear it once.
    homes = [
        Path(entry.pw_dir)
        for entry in pwd.getpwall()
        if settings.uid_min <= entry.pw_uid < settings.uid_max
    ]
    return list(dict.fromkeys(homes))


def _clear_per_user(settings: MaintenanceSettings, relative: str) -> tuple[int, int]:
    cleaned = failed = 0
    for home in user_homes(settings):
        target = home / relative
        if not target.is_dir():
            continue
        _, errors = clear_directory(target)
        if errors:
            failed += 1
        else:
            cleaned += 1
    return cleaned, failed


def cleanup_user_caches(context: RunContext, settings: MaintenanceSettings) -> Outcome:
    cleaned, failed = _clear_per_user(settings, ".cache")
    if failed:
        return Outcome.failure(
            f"Cleared cache for {cleaned} user(s); failed for {failed} user(s)."
        )
    if cleaned:
        return Outcome.success(f"Cleared cache for {cleaned} user(s).")
    return Outcome.success("No user caches found to clean.")


def cleanup_user_trash(context: RunContext, settings: MaintenanceSettings) -> Outcome:
    cleaned, failed = _clear_per_user(settings, ".local/share/Trash/files")
    if failed:
        return Outcome.failure(
            f"Emptied trash for {cleaned} user(s); failed for {failed} user(s)."
        )
    if cleaned:
        return Outcome.success(f"Emptied trash for {cleaned} user(s).")
    return Outcome.success("No user trash found to empty.")


def clean_old_logs(context: RunContext, settings: MaintenanceSettings) -> Outcome:
    log_dir = Path(settings.log_dir)
    if not log_dir.is_dir():
        return Outcome.failure(f"Log directory {log_dir} not found.")

    now = time.time()
    rules = {
        ".log": now - settings.log_max_age_days * 86400,
        ".gz": now - settings.archive_max_age_days * 86400,
    }

    removed = failed = 0
    for path in sorted(log_dir.rglob("*")):
        cutoff = rules.get(path.suffix)
        if cutoff is None or path.is_symlink() or not path.is_file():
            continue
        try:
            if path.stat().st_mtime >= cutoff:
                continue
            path.unlink()
        except OSError:
            failed += 1
        else:
            removed += 1

    ages = f">{settings.log_max_age_days}d .log, >{settings.archive_max_age_days}d .gz"
    if failed:
        return Outcome.failure(
            f"Removed {removed} old log(s) ({ages}); {failed} could not be removed."
        )
    return Outcome.success(f"Removed {removed} old log(s) ({ages}).")
