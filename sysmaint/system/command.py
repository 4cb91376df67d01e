import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

# Exit status used when the executable could not be started at all.
NOT_RUNNABLE = 127


@dataclass(frozen=True)
class CommandResult:
    command: str
    args: tuple[str, ...]
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


class CommandRunner:
    """
    Runs external commands to completion and hands back what they did.

    A non-zero exit status is returned, never raised. Output is captured so
    nothing reaches the terminal; callers decide what to surface.
    """

    def __init__(self, env: Mapping[str, str] | None = None):
        self.env = dict(env or {})

    def run(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        argv = [command, *args]
        logger.debug("exec %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                env={**os.environ, **self.env},
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            logger.debug("cannot start %s: %s", command, exc)
            return CommandResult(
                command, tuple(args), NOT_RUNNABLE, b"", str(exc).encode()
            )

        logger.debug("%s exited with %d", command, result.returncode)
        return CommandResult(
            command, tuple(args), result.returncode, result.stdout, result.stderr
        )

    def available(self, tool: str) -> bool:
        return shutil.which(tool) is not None
