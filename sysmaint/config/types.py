from dataclasses import dataclass, field


@dataclass
class ReportConfig:
    directory: str = "/tmp"
    prefix: str = "system_maintenance_report_"
    tag: str = "system_maintenance"


@dataclass
class MaintenanceSettings:
    journal_retention: str = "7d"
    log_max_age_days: int = 30
    archive_max_age_days: int = 90
    snap_retain: int = 2
    uid_min: int = 1000
    uid_max: int = 65534
    temp_dirs: list[str] = field(default_factory=lambda: ["/tmp", "/var/tmp"])
    temp_keep: list[str] = field(default_factory=lambda: [".X11-unix", ".ICE-unix"])
    log_dir: str = "/var/log"


@dataclass
class MaintenanceConfig:
    report: ReportConfig = field(default_factory=ReportConfig)
    settings: MaintenanceSettings = field(default_factory=MaintenanceSettings)
    skip: list[str] = field(default_factory=list)
    enable: list[str] = field(default_factory=list)


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
