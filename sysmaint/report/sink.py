from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Callable, TextIO

DEFAULT_DIRECTORY = Path("/tmp")
DEFAULT_PREFIX = "system_maintenance_report_"
DEFAULT_TAG = "system_maintenance"

SUMMARY_HEADER = "===== Maintenance Summary ====="


class Level(Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: Level
    process_id: int
    message: str

    def render(self, tag: str) -> str:
        return f"{self.timestamp} [{tag}] [{self.level.value}] PID {self.process_id} {self.message}"


@dataclass(frozen=True)
class SummaryEntry:
    timestamp: str
    message: str

    def render(self) -> str:
        return f"{self.timestamp} {self.message}"


class ReportError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


def report_path(
    directory: str | Path = DEFAULT_DIRECTORY,
    prefix: str = DEFAULT_PREFIX,
    day: date | None = None,
) -> Path:
    day = day or date.today()
    return Path(directory) / f"{prefix}{day:%Y%m%d}.log"


def _now() -> datetime:
    return datetime.now().astimezone()


class ReportSink:
    """
    Append-only report target.

    Every line goes to the report file and to the interactive stream. The
    file is opened in append mode on the first write and each write is
    flushed and fsynced before returning, so an interrupted run keeps
    everything written so far.
    """

    def __init__(
        self,
        path: Path,
        *,
        tag: str = DEFAULT_TAG,
        stream: TextIO | None = None,
        clock: Callable[[], datetime] = _now,
    ):
        self.path = path
        self.tag = tag
        self._stream = stream
        self._clock = clock
        self._fh: TextIO | None = None

    def __enter__(self) -> ReportSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def timestamp(self) -> str:
        return self._clock().isoformat(timespec="seconds")

    def append(self, line: str) -> None:
        fh = self._open()
        try:
            fh.write(line + "\n")
            fh.flush()
            os.fsync(fh.fileno())
        except OSError as exc:
            raise ReportError(f"Cannot write report {self.path}: {exc}") from exc

        stream = self._stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def log(self, level: Level, message: str) -> LogEntry:
        entry = LogEntry(self.timestamp(), level, os.getpid(), message)
        self.append(entry.render(self.tag))
        return entry

    def summary(self, message: str) -> SummaryEntry:
        entry = SummaryEntry(self.timestamp(), message)
        self.append(entry.render())
        return entry

    def summary_block(self, entries: list[SummaryEntry]) -> None:
        self.append("")
        self.append(SUMMARY_HEADER)
        for entry in entries:
            self.append(f"- {entry.message}")

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def _open(self) -> TextIO:
        if self._fh is None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._fh = self.path.open("a", encoding="utf-8")
            except OSError as exc:
                raise ReportError(f"Cannot open report {self.path}: {exc}") from exc
        return self._fh
