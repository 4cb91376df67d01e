from __future__ import annotations

import logging
import platform
import shlex
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

_DEBIAN_IDS = {"debian", "ubuntu"}


@dataclass(frozen=True)
class OsIdentity:
    name: str
    version: str
    kernel: str
    like: tuple[str, ...] = ()

    @property
    def debian_family(self) -> bool:
        return self.name in _DEBIAN_IDS or "debian" in self.like

    def __str__(self) -> str:
        return f"{self.name} {self.version}".strip()


UNKNOWN_OS = OsIdentity(name="unknown", version="", kernel="")


def parse_os_release(text: str) -> dict[str, str]:
    """
    Parse the KEY=VALUE lines of an os-release file.

    Values may be quoted with shell quoting rules; comments and blank lines
    are ignored, as are lines that do not parse.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            logger.debug("unparsable os-release line: %r", line)
            continue
        fields[key.strip()] = parts[0] if parts else ""

    return fields


def detect_os(path: Path = OS_RELEASE) -> OsIdentity:
    kernel = platform.release()
    if path.is_file():
        fields = parse_os_release(path.read_text(encoding="utf-8"))
        return OsIdentity(
            name=fields.get("ID", "linux").lower(),
            version=fields.get("VERSION_ID", ""),
            kernel=kernel,
            like=tuple(fields.get("ID_LIKE", "").lower().split()),
        )

    return OsIdentity(name=platform.system().lower(), version=kernel, kernel=kernel)
