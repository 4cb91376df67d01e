"""
APT / dpkg maintenance.

Each body runs its commands through the context's CommandRunner and turns
the exit status into an Outcome. Lists of packages are read from dpkg and
purged in one apt-get call.
"""
import re

from sysmaint.executor import Outcome, RunContext

from .common import apt, last_line

_KERNEL_IMAGE_RE = re.compile(r"^linux-image-[0-9]")


def _version_key(text: str) -> tuple[int, ...]:
    return tuple(int(n) for n in re.findall(r"\d+", text))


def update_cache(context: RunContext) -> Outcome:
    result = apt(context, "update")
    if result.ok:
        return Outcome.success("Package cache updated successfully.")
    return Outcome.failure(f"Failed to update package cache: {last_line(result)}")


def dist_upgrade(context: RunContext) -> Outcome:
    result = apt(context, "dist-upgrade", "-y")
    if result.ok:
        return Outcome.success("System upgraded successfully.")
    return Outcome.failure(f"System upgrade failed: {last_line(result)}")


def install_linux_generic(context: RunContext) -> Outcome:
    result = apt(context, "install", "-y", "linux-generic")
    if result.ok:
        return Outcome.success("linux-generic installed.")
    return Outcome.failure(f"Failed to install linux-generic: {last_line(result)}")


def installed_packages(context: RunContext, state: str) -> list[str] | None:
    """
    Package names in the given dpkg state ("ii", "rc", ...).

    Returns None when dpkg itself fails.
    """
    result = context.runner.run("dpkg", ["--list"])
    if not result.ok:
        return None

    names = []
    for line in result.stdout_text.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == state:
            # strip the ":arch" qualifier of multi-arch packages
            names.append(parts[1].split(":", 1)[0])
    return names


def _purge(context: RunContext, packages: list[str], what: str) -> Outcome:
    listed = " ".join(packages)
    result = apt(context, "purge", "-y", *packages)
    if result.ok:
        return Outcome.success(f"Removed {what}: {listed}")
    return Outcome.failure(f"Failed to remove some {what}: {listed}")


def remove_old_kernels(context: RunContext) -> Outcome:
    installed = installed_packages(context, "ii")
    if installed is None:
        return Outcome.failure("Failed to list installed kernels.")

    # Kernels newer than the running one (e.g. just installed by the
    # upgrade, not booted yet) are kept.
    current = _version_key(context.os.kernel)
    old = [
        p
        for p in installed
        if _KERNEL_IMAGE_RE.match(p) and _version_key(p) < current
    ]
    if not old:
        return Outcome.success("No old kernels to remove.")
    return _purge(context, old, "old kernels")


def autoremove(context: RunContext) -> Outcome:
    result = apt(context, "autoremove", "-y")
    if result.ok:
        return Outcome.success("Autoremove completed successfully.")
    return Outcome.failure(f"Autoremove encountered errors: {last_line(result)}")


def autoclean(context: RunContext) -> Outcome:
    result = apt(context, "autoclean", "-y")
    if result.ok:
        return Outcome.success("Autoclean completed successfully.")
    return Outcome.failure(f"Autoclean encountered errors: {last_line(result)}")


def remove_residual_configs(context: RunContext) -> Outcome:
    residual = installed_packages(context, "rc")
    if residual is None:
        return Outcome.failure("Failed to list residual config packages.")
    if not residual:
        return Outcome.success("No residual config files to remove.")
    return _purge(context, residual, "residual config files")


def remove_orphans(context: RunContext) -> Outcome:
    result = context.runner.run("deborphan")
    if not result.ok:
        return Outcome.failure(f"deborphan failed: {last_line(result)}")

    orphans = result.stdout_text.split()
    if not orphans:
        return Outcome.success("No orphaned packages found.")
    return _purge(context, orphans, "orphaned packages")


def repair_package_db(context: RunContext) -> Outcome:
    configure = context.runner.run("dpkg", ["--configure", "-a"])
    if not configure.ok:
        return Outcome.failure(
            f"Failed to repair package database: {last_line(configure)}"
        )

    fix = apt(context, "install", "-f", "-y")
    if not fix.ok:
        return Outcome.failure(f"Failed to repair package database: {last_line(fix)}")
    return Outcome.success("Package database repaired.")
