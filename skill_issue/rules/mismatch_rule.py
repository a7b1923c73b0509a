"""Heuristic check for skills whose description understates what they do."""

from __future__ import annotations

from typing import List, Tuple

from skill_issue.result import Finding, Location
from skill_issue.scanner import FileSnapshot, FileType
from skill_issue.severity import Severity

DESCRIPTION_WINDOW = 500

BENIGN_KEYWORDS: Tuple[str, ...] = (
    "calculator",
    "math",
    "text",
    "format",
    "convert",
    "simple",
    "basic",
    "helper",
    "utility",
)

SUSPICIOUS_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("curl ", "network access via curl"),
    ("wget ", "network access via wget"),
    ("fetch(", "network access via fetch"),
    ("http.get", "network access via HTTP"),
    ("requests.get", "network access via requests"),
    ("subprocess", "process execution via subprocess"),
    ("child_process", "process execution via child_process"),
    ("exec(", "dynamic code execution via exec"),
    ("eval(", "dynamic code execution via eval"),
    ("/etc/passwd", "system file access"),
    ("~/.ssh", "SSH key access"),
    ("/etc/shadow", "shadow password file access"),
)


class DescriptionMismatchRule:
    """Flag markdown that sounds harmless up front but reaches for dangerous capabilities."""

    id = "SL-META-006"
    name = "Description/Content Mismatch"
    default_severity = Severity.WARNING
    applies_to: Tuple[FileType, ...] = (FileType.MARKDOWN,)

    def check(self, snapshot: FileSnapshot) -> List[Finding]:
        lowered = snapshot.content.lower()
        window = lowered[:DESCRIPTION_WINDOW]
        if not any(keyword in window for keyword in BENIGN_KEYWORDS):
            return []

        findings: List[Finding] = []
        for pattern, description in SUSPICIOUS_PATTERNS:
            position = lowered.find(pattern)
            if position < 0:
                continue
            line = lowered.count("\n", 0, position) + 1
            findings.append(
                Finding(
                    rule_id=self.id,
                    rule_name=self.name,
                    severity=self.default_severity,
                    message=f"Skill has benign description but contains {description}",
                    location=Location(file=snapshot.relative_path, line=line, column=1),
                    matched_text=pattern,
                )
            )
        return findings
