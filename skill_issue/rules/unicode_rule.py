"""Detect invisible and direction-altering Unicode characters."""

from __future__ import annotations

from typing import List, Optional, Tuple

from skill_issue.result import Finding, Location
from skill_issue.scanner import FileSnapshot, FileType, iter_lines
from skill_issue.severity import Severity

BYTE_ORDER_MARK = "\ufeff"

SUSPICIOUS_RANGES: Tuple[Tuple[int, int, str], ...] = (
    (0x200B, 0x200F, "zero-width/directional character"),
    (0x202A, 0x202E, "bidirectional override character"),
    (0x2066, 0x2069, "bidirectional isolate character"),
    (0xFEFF, 0xFEFF, "byte order mark (not at start)"),
    (0x00AD, 0x00AD, "soft hyphen"),
    (0x034F, 0x034F, "combining grapheme joiner"),
    (0x2060, 0x2064, "invisible formatting character"),
    (0xFE00, 0xFE0F, "variation selector"),
    (0xE0100, 0xE01EF, "variation selector supplement"),
)


def describe_character(char: str) -> Optional[str]:
    """Return the suspicious-range description for ``char``, if it falls in one."""

    codepoint = ord(char)
    for start, end, description in SUSPICIOUS_RANGES:
        if start <= codepoint <= end:
            return description
    return None


class UnicodeRule:
    """Flag hidden characters that can smuggle instructions past a reviewer."""

    id = "SL-HID-001"
    name = "Suspicious Unicode Characters"
    default_severity = Severity.ERROR
    applies_to: Tuple[FileType, ...] = ()

    def check(self, snapshot: FileSnapshot) -> List[Finding]:
        findings: List[Finding] = []
        for line_number, line in iter_lines(snapshot.content):
            for index, char in enumerate(line):
                if line_number == 1 and index == 0 and char == BYTE_ORDER_MARK:
                    continue
                description = describe_character(char)
                if description is None:
                    continue
                codepoint = f"U+{ord(char):04X}"
                findings.append(
                    Finding(
                        rule_id=self.id,
                        rule_name=self.name,
                        severity=self.default_severity,
                        message=f"Found {description} ({codepoint}) in file content",
                        location=Location(file=snapshot.relative_path, line=line_number, column=index + 1),
                        matched_text=codepoint,
                    )
                )
        return findings
