import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import (
    ConfigError,
    MaintenanceConfig,
    MaintenanceSettings,
    ReportConfig,
    UnsupportedConfigFormatError,
)

_INT_SETTINGS = {
    "log_max_age_days",
    "archive_max_age_days",
    "snap_retain",
    "uid_min",
    "uid_max",
}
_STR_SETTINGS = {"journal_retention", "log_dir"}
_LIST_SETTINGS = {"temp_dirs", "temp_keep"}


def load_config(path: str | Path) -> MaintenanceConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return build_config(raw_file)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")
    match fmt:
        case "yaml":
            try:
                raw_file = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
        case "toml":
            try:
                raw_file = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw_file = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    # An empty YAML document is an empty config.
    if raw_file is None and fmt == "yaml":
        return {}

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def build_config(raw: Mapping[str, Any]) -> MaintenanceConfig:
    _check_keys("config", raw, {"report", "tasks", "settings"})

    config = MaintenanceConfig()

    if "report" in raw:
        config.report = _build_report(_section(raw, "report"))

    if "tasks" in raw:
        tasks = _section(raw, "tasks")
        _check_keys("tasks", tasks, {"skip", "enable"})
        config.skip = _name_list("tasks.skip", tasks.get("skip", []))
        config.enable = _name_list("tasks.enable", tasks.get("enable", []))

    if "settings" in raw:
        config.settings = _build_settings(_section(raw, "settings"))

    return config


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw[name]
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value)}")
    return value


def _check_keys(where: str, fields: Mapping[str, Any], keys: set[str]) -> None:
    for field in fields.keys():
        if field not in keys:
            raise ConfigError(f"{where}: Can't process: {field}")


def _build_report(fields: Mapping[str, Any]) -> ReportConfig:
    _check_keys("report", fields, {"directory", "prefix", "tag"})
    report = ReportConfig()

    for key in ("directory", "prefix", "tag"):
        if key in fields:
            setattr(report, key, _non_empty_str(f"report.{key}", fields[key]))

    return report


def _build_settings(fields: Mapping[str, Any]) -> MaintenanceSettings:
    _check_keys("settings", fields, _INT_SETTINGS | _STR_SETTINGS | _LIST_SETTINGS)
    settings = MaintenanceSettings()

    for key, value in fields.items():
        where = f"settings.{key}"
        if key in _INT_SETTINGS:
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{where}: should be an integer")
            if value < 0:
                raise ConfigError(f"{where}: can't be negative")
            setattr(settings, key, value)
        elif key in _STR_SETTINGS:
            setattr(settings, key, _non_empty_str(where, value))
        else:
            setattr(settings, key, _name_list(where, value))

    if settings.uid_min >= settings.uid_max:
        raise ConfigError("settings: uid_min must be lower than uid_max")

    return settings


def _non_empty_str(where: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{where}: should be a string")

    if len(value.strip()) < 1:
        raise ConfigError(f"{where}: Please provide a string or remove this field")

    return value.strip()


def _name_list(where: str, value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ConfigError(f"{where}: should be a list")

    names: list[str] = []
    seen: set[str] = set()
    for item in value:
        name = _non_empty_str(where, item)

        # Allows to ignore duplicate names
        if name in seen:
            continue

        names.append(name)
        seen.add(name)

    return names
