from .command import CommandResult, CommandRunner
from .osinfo import UNKNOWN_OS, OsIdentity, detect_os
from .privilege import PermissionDenied, PrivilegeGuard

__all__ = [
    "CommandResult",
    "CommandRunner",
    "OsIdentity",
    "UNKNOWN_OS",
    "detect_os",
    "PermissionDenied",
    "PrivilegeGuard",
]
