from .loader import build_config, load_config
from .types import (
    ConfigError,
    MaintenanceConfig,
    MaintenanceSettings,
    ReportConfig,
    UnsupportedConfigFormatError,
)

__all__ = [
    "build_config",
    "load_config",
    "MaintenanceConfig",
    "MaintenanceSettings",
    "ReportConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
