"""Apply registered rules to file snapshots under the configured policy."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from .config import Config
from .logging import get_logger
from .result import Finding
from .rules import RuleRegistry
from .scanner import FileSnapshot
from .severity import Severity

logger = get_logger("engine")


class Engine:
    """Run rules over files; neither the config nor the registry is modified."""

    def __init__(self, config: Config, registry: RuleRegistry) -> None:
        self._config = config
        self._registry = registry

    def run(self, files: Iterable[FileSnapshot]) -> List[Finding]:
        findings: List[Finding] = []
        for snapshot in files:
            findings.extend(self._check_file(snapshot))

        findings = [finding for finding in findings if finding.severity >= self._config.min_severity]
        findings.sort(key=Finding.sort_key)
        return findings

    def _check_file(self, snapshot: FileSnapshot) -> List[Finding]:
        config = self._config
        findings: List[Finding] = []
        for rule in self._registry.rules_for_file(snapshot.file_type):
            if self._is_suppressed(rule.id, snapshot):
                continue
            for finding in rule.check(snapshot):
                # A rule may report under a sibling id (SL-META-002) with its own policy.
                if finding.rule_id != rule.id and self._is_suppressed(finding.rule_id, snapshot):
                    continue
                severity = config.effective_severity(finding.rule_id, finding.severity)
                if severity is not finding.severity:
                    finding = replace(finding, severity=severity)
                findings.append(finding)
        return findings

    def _is_suppressed(self, rule_id: str, snapshot: FileSnapshot) -> bool:
        config = self._config
        if not config.is_rule_enabled(rule_id) or config.is_rule_ignored(rule_id):
            return True
        if config.is_allowlisted(rule_id, snapshot.relative_path):
            logger.debug("allowlisted %s for %s", rule_id, snapshot.relative_path)
            return True
        return False

    @staticmethod
    def max_severity(findings: Sequence[Finding]) -> Optional[Severity]:
        if not findings:
            return None
        return max(finding.severity for finding in findings)

    @staticmethod
    def exit_code(findings: Sequence[Finding], error_on: Severity) -> int:
        """Map the worst finding to a process exit code.

        0 when nothing (or only info below the threshold) was found, 2 when the
        worst finding reaches ``error_on``, 1 otherwise.
        """

        worst = Engine.max_severity(findings)
        if worst is None:
            return 0
        if worst >= error_on:
            return 2
        if worst is Severity.WARNING:
            return 1
        if worst is Severity.INFO:
            return 0
        return 1
