"""Rule registry: compiles the declarative pattern corpus and the built-in rules."""

from __future__ import annotations

from importlib import resources
from typing import Any, Iterable, List, Set

import yaml

from skill_issue.logging import get_logger
from skill_issue.scanner import FileType

from .base import Rule
from .metadata_rule import MetadataValidationRule
from .mismatch_rule import DescriptionMismatchRule
from .regex_rule import RegexRule, RuleDefinition
from .unicode_rule import UnicodeRule

logger = get_logger("rules")

PATTERN_PACKAGE = "skill_issue.patterns"
DEFAULT_PATTERN_GROUPS = (
    "hidden",
    "secrets",
    "network",
    "filesystem",
    "execution",
    "injection",
    "social",
    "metadata",
)


class RuleRegistry:
    """Ordered collection of rules with unique ids."""

    def __init__(self) -> None:
        self._rules: List[Rule] = []
        self._ids: Set[str] = set()

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._ids

    def register(self, rule: Rule) -> None:
        if rule.id in self._ids:
            raise ValueError(f"duplicate rule id: {rule.id}")
        self._ids.add(rule.id)
        self._rules.append(rule)

    def all_rules(self) -> List[Rule]:
        return list(self._rules)

    def rules_for_file(self, file_type: FileType) -> List[Rule]:
        """Return rules applicable to ``file_type`` in registration order."""

        return [rule for rule in self._rules if not rule.applies_to or file_type in rule.applies_to]

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def with_defaults(cls) -> "RuleRegistry":
        registry = cls()
        registry.load_defaults()
        return registry

    def load_defaults(self, groups: Iterable[str] = DEFAULT_PATTERN_GROUPS) -> None:
        for group in groups:
            try:
                text = resources.files(PATTERN_PACKAGE).joinpath(f"{group}.yaml").read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("failed to read pattern group %s: %s", group, exc)
                continue
            self.load_pattern_text(text, group)

        self.register(UnicodeRule())
        self.register(MetadataValidationRule())
        self.register(DescriptionMismatchRule())

    def load_pattern_text(self, text: str, group: str = "<inline>") -> int:
        """Load one YAML pattern group, skipping bad entries. Returns the count registered."""

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            logger.warning("failed to parse pattern group %s: %s", group, exc)
            return 0

        entries = data.get("rules") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning("pattern group %s has no 'rules' list", group)
            return 0

        loaded = 0
        for entry in entries:
            if self._load_entry(entry, group):
                loaded += 1
        logger.debug("loaded %d rule(s) from pattern group %s", loaded, group)
        return loaded

    def _load_entry(self, entry: Any, group: str) -> bool:
        try:
            rule = RegexRule.from_definition(RuleDefinition.from_mapping(entry))
            self.register(rule)
        except ValueError as exc:
            logger.warning("skipping rule in pattern group %s: %s", group, exc)
            return False
        return True
