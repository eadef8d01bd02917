"""Stylesheet validator: runs the enabled rules over one parsed file."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from stylecheck.model.diagnostic import Violation
from stylecheck.model.tree import RuleBlock
from stylecheck.validation.rules import ALL_RULES, Rule

if TYPE_CHECKING:
    from stylecheck.config import CheckConfig


def validate(
    root: RuleBlock,
    config: CheckConfig | None = None,
    path: str = "",
) -> list[Violation]:
    """Run the rules enabled by *config* (all rules by default) against *root*.

    Each violation gets the configured severity for its rule and *path*.
    The result is in rule order; the report sorts it.
    """
    rules: list[Rule] = config.active_rules() if config else list(ALL_RULES)
    violations: list[Violation] = []
    for rule in rules:
        severity = config.severity_for(rule) if config else rule.severity
        for violation in rule.check(root):
            violations.append(replace(violation, severity=severity, path=path))
    return violations
