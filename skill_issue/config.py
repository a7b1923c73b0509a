"""Configuration loading for skill-issue (.skill-issue.yaml) and the policy view used by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from .logging import get_logger
from .severity import Severity
from .utils import read_yaml_file

logger = get_logger("config")

CONFIG_FILENAME = ".skill-issue.yaml"
OUTPUT_FORMATS = ("table", "json", "sarif")
DEFAULT_FORMAT = "table"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be read or parsed."""


@dataclass(frozen=True)
class RuleOverride:
    """Per-rule settings from the ``rules:`` section."""

    severity: Optional[Severity] = None
    enabled: Optional[bool] = None


@dataclass(frozen=True)
class AllowlistEntry:
    """Suppress ``rule`` for files whose relative path contains ``file`` (any file if unset)."""

    rule: str
    file: Optional[str] = None
    reason: Optional[str] = None

    def matches(self, rule_id: str, file_path: str) -> bool:
        if self.rule != rule_id:
            return False
        return self.file is None or self.file in file_path


@dataclass(frozen=True)
class ConfigFile:
    """Parsed contents of a .skill-issue.yaml file."""

    severity: Optional[Severity] = None
    error_on: Optional[Severity] = None
    format: Optional[str] = None
    ignore: Tuple[str, ...] = ()
    rules: Mapping[str, RuleOverride] = field(default_factory=dict)
    allowlist: Tuple[AllowlistEntry, ...] = ()


@dataclass(frozen=True)
class Config:
    """Read-only policy consulted by the engine."""

    min_severity: Severity = Severity.INFO
    error_on: Severity = Severity.ERROR
    format: str = DEFAULT_FORMAT
    ignore: frozenset = frozenset()
    rule_overrides: Mapping[str, RuleOverride] = field(default_factory=dict)
    allowlist: Tuple[AllowlistEntry, ...] = ()

    @classmethod
    def from_sources(
        cls,
        file: Optional[ConfigFile] = None,
        *,
        severity: Optional[Severity] = None,
        error_on: Optional[Severity] = None,
        output_format: Optional[str] = None,
        ignore: Optional[Iterable[str]] = None,
    ) -> "Config":
        """Merge command-line values over file settings over defaults."""

        file = file or ConfigFile()
        ignore_ids = list(ignore) if ignore else list(file.ignore)
        return cls(
            min_severity=severity or file.severity or Severity.INFO,
            error_on=error_on or file.error_on or Severity.ERROR,
            format=output_format or file.format or DEFAULT_FORMAT,
            ignore=frozenset(ignore_ids),
            rule_overrides=dict(file.rules),
            allowlist=tuple(file.allowlist),
        )

    def is_rule_enabled(self, rule_id: str) -> bool:
        override = self.rule_overrides.get(rule_id)
        if override is None or override.enabled is None:
            return True
        return override.enabled

    def is_rule_ignored(self, rule_id: str) -> bool:
        return rule_id in self.ignore

    def is_allowlisted(self, rule_id: str, file_path: str) -> bool:
        return any(entry.matches(rule_id, file_path) for entry in self.allowlist)

    def effective_severity(self, rule_id: str, default: Severity) -> Severity:
        override = self.rule_overrides.get(rule_id)
        if override is None or override.severity is None:
            return default
        return override.severity


def find_config_file(scan_root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    """Return the config path to load, or ``None`` when there is nothing to load."""

    candidate = explicit if explicit is not None else scan_root / CONFIG_FILENAME
    candidate = candidate.expanduser()
    if explicit is not None and not candidate.exists():
        raise ConfigError(f"config file not found: {candidate}")
    return candidate if candidate.exists() else None


def load_config_file(path: Path) -> ConfigFile:
    """Load a .skill-issue.yaml file."""

    try:
        data = read_yaml_file(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse {path}: {exc}") from exc

    if data is None:
        return ConfigFile()
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the root")

    settings = _as_dict(data.get("settings"))
    output_format = _as_str(settings.get("format"))
    if output_format is not None and output_format not in OUTPUT_FORMATS:
        logger.warning("ignoring unknown output format %r in %s", output_format, path)
        output_format = None

    return ConfigFile(
        severity=_as_severity(settings.get("severity"), "settings.severity"),
        error_on=_as_severity(settings.get("error_on"), "settings.error_on"),
        format=output_format,
        ignore=tuple(_as_str_list(settings.get("ignore"))),
        rules=_parse_rule_overrides(_as_dict(data.get("rules"))),
        allowlist=tuple(_parse_allowlist(data.get("allowlist"))),
    )


def _parse_rule_overrides(data: Dict[str, Any]) -> Dict[str, RuleOverride]:
    overrides: Dict[str, RuleOverride] = {}
    for rule_id, value in data.items():
        value = _as_dict(value)
        enabled = value.get("enabled")
        overrides[str(rule_id)] = RuleOverride(
            severity=_as_severity(value.get("severity"), f"rules.{rule_id}.severity"),
            enabled=enabled if isinstance(enabled, bool) else None,
        )
    return overrides


def _parse_allowlist(value: Any) -> List[AllowlistEntry]:
    if not isinstance(value, list):
        return []
    entries: List[AllowlistEntry] = []
    for item in value:
        item = _as_dict(item)
        rule = _as_str(item.get("rule"))
        if not rule:
            logger.warning("ignoring allowlist entry without a rule id: %r", item)
            continue
        entries.append(
            AllowlistEntry(
                rule=rule,
                file=_as_str(item.get("file")),
                reason=_as_str(item.get("reason")),
            )
        )
    return entries


def _as_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item).strip() for item in value if str(item).strip()]
    text = str(value).strip()
    return [text] if text else []


def _as_severity(value: Any, label: str) -> Optional[Severity]:
    if value is None:
        return None
    try:
        return Severity.parse(value)
    except ValueError:
        logger.warning("ignoring invalid severity %r for %s", value, label)
        return None


__all__ = [
    "AllowlistEntry",
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "ConfigFile",
    "RuleOverride",
    "find_config_file",
    "load_config_file",
]
