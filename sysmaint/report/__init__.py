from .sink import (
    Level,
    LogEntry,
    ReportError,
    ReportSink,
    SummaryEntry,
    report_path,
)

__all__ = [
    "Level",
    "LogEntry",
    "ReportError",
    "ReportSink",
    "SummaryEntry",
    "report_path",
]
