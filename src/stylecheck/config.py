"""Checker configuration: which rules run, at what severity, over which files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

from stylecheck.model.diagnostic import Severity
from stylecheck.validation.rules import ALL_RULES, RULES_BY_ID, Rule

CONFIG_FILENAME = ".stylecheck.json"

# JSON keys -> CheckConfig fields
_KEYS = {
    "enable": "enabled",
    "disable": "disabled",
    "severity": "severity_overrides",
    "tab_width": "tab_width",
    "extensions": "extensions",
    "jobs": "jobs",
    "show_source": "show_source",
}


class ConfigError(Exception):
    """Raised when configuration names unknown rules or holds invalid values."""


def _rule_ids(ids: Any, key: str) -> frozenset[str]:
    if isinstance(ids, str) or not isinstance(ids, (list, tuple, set, frozenset)):
        raise ConfigError(f"'{key}' must be a list of rule ids.")
    unknown = sorted(set(ids) - RULES_BY_ID.keys())
    if unknown:
        raise ConfigError(f"Unknown rule id(s) in '{key}': {', '.join(unknown)}.")
    return frozenset(ids)


def _severity(value: Any) -> Severity:
    if isinstance(value, Severity):
        return value
    try:
        return Severity(str(value).lower())
    except ValueError:
        raise ConfigError(
            f"Invalid severity {value!r}; use one of: "
            f"{', '.join(s.value for s in Severity)}."
        ) from None


@dataclass(frozen=True)
class CheckConfig:
    """Settings for one run.

    Attributes:
        enabled: Rule ids to run; ``None`` runs every rule.
        disabled: Rule ids never to run, applied after ``enabled``.
        severity_overrides: Per-rule severity replacing the rule's default.
        tab_width: Display width of a tab in source excerpts (2 or 4). Cosmetic.
        extensions: File suffixes picked up when walking directories.
        jobs: Worker threads; ``None`` lets the executor decide.
        show_source: Include the offending source line in human reports.
    """

    enabled: frozenset[str] | None = None
    disabled: frozenset[str] = frozenset()
    severity_overrides: Mapping[str, Severity] = field(default_factory=dict)
    tab_width: int = 4
    extensions: tuple[str, ...] = (".scss", ".css")
    jobs: int | None = None
    show_source: bool = False

    def __post_init__(self) -> None:
        if self.enabled is not None:
            object.__setattr__(self, "enabled", _rule_ids(self.enabled, "enable"))
        object.__setattr__(self, "disabled", _rule_ids(self.disabled, "disable"))
        overrides = dict(self.severity_overrides)
        _rule_ids(list(overrides), "severity")
        object.__setattr__(
            self,
            "severity_overrides",
            {rule_id: _severity(level) for rule_id, level in overrides.items()},
        )
        if self.tab_width not in (2, 4):
            raise ConfigError(f"tab_width must be 2 or 4, not {self.tab_width!r}.")
        if self.jobs is not None and (not isinstance(self.jobs, int) or self.jobs < 1):
            raise ConfigError(f"jobs must be a positive integer, not {self.jobs!r}.")
        if isinstance(self.extensions, str):
            raise ConfigError("'extensions' must be a list of file suffixes.")
        object.__setattr__(
            self,
            "extensions",
            tuple(ext if ext.startswith(".") else f".{ext}" for ext in self.extensions),
        )

    # --- rule selection -------------------------------------------------------

    def is_enabled(self, rule_id: str) -> bool:
        if self.enabled is not None and rule_id not in self.enabled:
            return False
        return rule_id not in self.disabled

    def active_rules(self) -> list[Rule]:
        """Enabled rules, in registry order."""
        return [rule for rule in ALL_RULES if self.is_enabled(rule.id)]

    def severity_for(self, rule: Rule) -> Severity:
        return self.severity_overrides.get(rule.id, rule.severity)

    # --- construction ---------------------------------------------------------

    def merged(self, **overrides: Any) -> CheckConfig:
        """Copy with the given non-``None`` fields replaced (CLI options win)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "severity_overrides" in changes:
            changes["severity_overrides"] = {
                **self.severity_overrides,
                **changes["severity_overrides"],
            }
        if "disabled" in changes:
            changes["disabled"] = self.disabled | frozenset(changes["disabled"])
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CheckConfig:
        unknown = sorted(set(data) - _KEYS.keys())
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}.")
        kwargs = {_KEYS[key]: value for key, value in data.items()}
        if "severity_overrides" in kwargs and not isinstance(kwargs["severity_overrides"], dict):
            raise ConfigError("'severity' must map rule ids to severities.")
        if "extensions" in kwargs and isinstance(kwargs["extensions"], list):
            kwargs["extensions"] = tuple(kwargs["extensions"])
        return cls(**kwargs)

    @classmethod
    def load(cls, path: Path) -> CheckConfig:
        """Read a JSON configuration file at *path*."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {path} must be a JSON object.")
        return cls.from_dict(data)


def find_config(directory: Path) -> Path | None:
    """The ``.stylecheck.json`` in *directory*, if there is one."""
    candidate = directory / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


