from __future__ import annotations

from dataclasses import replace

from sysmaint.executor import Outcome, OutcomeKind, RunContext
from sysmaint.tasks import packages

DPKG_LIST = """\
Desired=Unknown/Install/Remove/Purge/Hold
| Status=Not/Inst/Conf-files/Unpacked/halF-conf/Half-inst/trig-aWait/Trig-pend
||/ Name                              Version        Architecture Description
+++-=================================-==============-============-==========
ii  bash                              5.1-6ubuntu1   amd64        GNU Bourne Again SHell
ii  linux-image-5.15.0-88-generic     5.15.0-88.98   amd64        Signed kernel image generic
ii  linux-image-5.15.0-91-generic     5.15.0-91.101  amd64        Signed kernel image generic
ii  linux-image-5.15.0-94-generic     5.15.0-94.104  amd64        Signed kernel image generic
ii  linux-image-generic               5.15.0.91.88   amd64        Generic Linux kernel image
rc  libfoo1:amd64                     1.0-1          amd64        old library
rc  oldtool                           2.3-1          amd64        removed tool
"""


def test_update_cache_success(runner, context: RunContext) -> None:
    outcome = packages.update_cache(context)

    assert outcome == Outcome.success("Package cache updated successfully.")
    assert runner.calls == [("apt-get", "update")]


def test_upgrade_failure_is_reported(runner, context: RunContext) -> None:
    runner.script(
        "apt-get", "dist-upgrade", "-y", returncode=1, stderr="E: Broken packages\n"
    )

    outcome = packages.dist_upgrade(context)

    assert outcome.kind is OutcomeKind.FAILURE
    assert "upgrade failed" in outcome.detail
    assert "E: Broken packages" in outcome.detail


def test_install_linux_generic(runner, context: RunContext) -> None:
    packages.install_linux_generic(context)
    assert runner.calls == [("apt-get", "install", "-y", "linux-generic")]


def test_remove_old_kernels_keeps_running_and_newer(runner, context: RunContext) -> None:
    runner.script("dpkg", "--list", stdout=DPKG_LIST)

    outcome = packages.remove_old_kernels(context)

    assert outcome == Outcome.success(
        "Removed old kernels: linux-image-5.15.0-88-generic"
    )
    assert runner.calls[-1] == (
        "apt-get",
        "purge",
        "-y",
        "linux-image-5.15.0-88-generic",
    )


def test_remove_old_kernels_nothing_to_do(runner, context: RunContext) -> None:
    runner.script("dpkg", "--list", stdout="ii  linux-image-5.15.0-91-generic 1 amd64 x\n")

    outcome = packages.remove_old_kernels(context)

    assert outcome == Outcome.success("No old kernels to remove.")
    assert len(runner.calls) == 1


def test_remove_old_kernels_dpkg_failure(runner, context: RunContext) -> None:
    runner.script("dpkg", "--list", returncode=2)

    assert packages.remove_old_kernels(context).kind is OutcomeKind.FAILURE


def test_purge_failure_names_packages(runner, context: RunContext) -> None:
    runner.script("dpkg", "--list", stdout=DPKG_LIST)
    runner.script("apt-get", "purge", "-y", "libfoo1", "oldtool", returncode=100)

    outcome = packages.remove_residual_configs(context)

    assert outcome == Outcome.failure(
        "Failed to remove some residual config files: libfoo1 oldtool"
    )


def test_no_residual_configs(runner, context: RunContext) -> None:
    runner.script("dpkg", "--list", stdout="ii  bash 5.1 amd64 shell\n")

    outcome = packages.remove_residual_configs(context)

    assert outcome == Outcome.success("No residual config files to remove.")


def test_orphans_removed(runner, context: RunContext) -> None:
    runner.script("deborphan", stdout="libold1\nlibold2\n")

    outcome = packages.remove_orphans(context)

    assert outcome == Outcome.success("Removed orphaned packages: libold1 libold2")
    assert runner.calls[-1] == ("apt-get", "purge", "-y", "libold1", "libold2")


def test_no_orphans(runner, context: RunContext) -> None:
    outcome = packages.remove_orphans(context)
    assert outcome == Outcome.success("No orphaned packages found.")


def test_autoremove_and_autoclean(runner, context: RunContext) -> None:
    runner.script("apt-get", "autoclean", "-y", returncode=1)

    assert packages.autoremove(context).kind is OutcomeKind.SUCCESS
    assert packages.autoclean(context).kind is OutcomeKind.FAILURE


def test_repair_stops_after_dpkg_failure(runner, context: RunContext) -> None:
    runner.script("dpkg", "--configure", "-a", returncode=1, stderr="dpkg: error\n")

    outcome = packages.repair_package_db(context)

    assert outcome.kind is OutcomeKind.FAILURE
    assert runner.calls == [("dpkg", "--configure", "-a")]


def test_repair_runs_both_steps(runner, context: RunContext) -> None:
    outcome = packages.repair_package_db(context)

    assert outcome == Outcome.success("Package database repaired.")
    assert runner.calls == [
        ("dpkg", "--configure", "-a"),
        ("apt-get", "install", "-f", "-y"),
    ]


def test_pending_newer_kernel_is_not_purged(runner, context: RunContext) -> None:
    runner.script(
        "dpkg",
        "--list",
        stdout=(
            "ii  linux-image-5.15.0-88-generic 5.15.0-88.98 amd64 kernel\n"
            "ii  linux-image-5.15.0-91-generic 5.15.0-91.101 amd64 kernel\n"
            "ii  linux-image-6.2.0-39-generic 6.2.0-39.40 amd64 kernel\n"
        ),
    )

    outcome = packages.remove_old_kernels(context)

    assert outcome == Outcome.success(
        "Removed old kernels: linux-image-5.15.0-88-generic"
    )
    assert "linux-image-6.2.0-39-generic" not in runner.calls[-1]


def test_unknown_running_kernel_purges_nothing(runner, context: RunContext) -> None:
    runner.script("dpkg", "--list", stdout=DPKG_LIST)
    unknown = replace(context, os=replace(context.os, kernel=""))

    outcome = packages.remove_old_kernels(unknown)

    assert outcome == Outcome.success("No old kernels to remove.")
    assert runner.calls == [("dpkg", "--list")]
