"""Declarative regex rules compiled from pattern definitions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from skill_issue.result import Finding, Location, truncate_match
from skill_issue.scanner import FileSnapshot, FileType, iter_lines
from skill_issue.severity import Severity

MATCH_PLACEHOLDER = "{match}"

_FILE_TYPE_TAGS = {
    "markdown": FileType.MARKDOWN,
    "md": FileType.MARKDOWN,
    "script": FileType.SCRIPT,
    "sh": FileType.SCRIPT,
    "py": FileType.SCRIPT,
    "js": FileType.SCRIPT,
    "yaml": FileType.YAML,
    "yml": FileType.YAML,
    "toml": FileType.TOML,
    "json": FileType.JSON,
}


def parse_file_type(tag: str) -> Optional[FileType]:
    """Map a pattern-file applicability tag to a file type; unknown tags give ``None``."""

    return _FILE_TYPE_TAGS.get(str(tag).lower())


@dataclass(frozen=True)
class RuleDefinition:
    """One entry of a pattern group, as written in the YAML data files."""

    id: str
    name: str
    severity: str
    pattern: str
    message_template: str
    applies_to: Tuple[str, ...] = field(default_factory=tuple)
    multiline: bool = False

    @classmethod
    def from_mapping(cls, data: Any) -> "RuleDefinition":
        if not isinstance(data, Mapping):
            raise ValueError("rule entry must be a mapping")
        missing = [key for key in ("id", "name", "severity", "pattern", "message_template") if not data.get(key)]
        if missing:
            label = data.get("id") or "<unnamed>"
            raise ValueError(f"rule {label}: missing field(s) {', '.join(missing)}")
        multiline = data.get("multiline", False)
        if not isinstance(multiline, bool):
            raise ValueError(f"rule {data['id']}: multiline must be true or false, got {multiline!r}")
        applies_to = data.get("applies_to") or []
        if isinstance(applies_to, str):
            applies_to = [applies_to]
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            severity=str(data["severity"]),
            pattern=str(data["pattern"]),
            message_template=str(data["message_template"]),
            applies_to=tuple(str(tag) for tag in applies_to),
            multiline=multiline,
        )


class RegexRule:
    """Rule that reports every match of a compiled regular expression."""

    def __init__(
        self,
        id: str,
        name: str,
        severity: Severity,
        pattern: re.Pattern[str],
        applies_to: Tuple[FileType, ...],
        message_template: str,
        multiline: bool = False,
    ) -> None:
        self.id = id
        self.name = name
        self.default_severity = severity
        self.pattern = pattern
        self.applies_to = applies_to
        self.message_template = message_template
        self.multiline = multiline

    @classmethod
    def from_definition(cls, definition: RuleDefinition) -> "RegexRule":
        """Compile a definition, raising ``ValueError`` for a bad severity or regex."""

        try:
            severity = Severity.parse(definition.severity)
        except ValueError as exc:
            raise ValueError(f"rule {definition.id}: {exc}") from None

        flags = re.MULTILINE | re.DOTALL if definition.multiline else 0
        try:
            pattern = re.compile(definition.pattern, flags)
        except re.error as exc:
            raise ValueError(f"rule {definition.id}: invalid regex: {exc}") from None

        applies_to = tuple(
            file_type
            for file_type in (parse_file_type(tag) for tag in definition.applies_to)
            if file_type is not None
        )
        return cls(
            id=definition.id,
            name=definition.name,
            severity=severity,
            pattern=pattern,
            applies_to=applies_to,
            message_template=definition.message_template,
            multiline=definition.multiline,
        )

    def check(self, snapshot: FileSnapshot) -> List[Finding]:
        if self.multiline:
            return self._check_content(snapshot)
        return self._check_lines(snapshot)

    def _check_lines(self, snapshot: FileSnapshot) -> List[Finding]:
        findings: List[Finding] = []
        for line_number, line in iter_lines(snapshot.content):
            position, column = 0, 1
            for match in self.pattern.finditer(line):
                column += _byte_length(line[position : match.start()])
                position = match.start()
                findings.append(self._build_finding(snapshot, match.group(0), line_number, column))
        return findings

    def _check_content(self, snapshot: FileSnapshot) -> List[Finding]:
        findings: List[Finding] = []
        content = snapshot.content
        # Matches arrive in order, so line and column advance from the previous match.
        position, line_number, column = 0, 1, 1
        for match in self.pattern.finditer(content):
            start = match.start()
            newlines = content.count("\n", position, start)
            if newlines:
                line_number += newlines
                line_start = content.rfind("\n", position, start) + 1
                column = 1 + _byte_length(content[line_start:start])
            else:
                column += _byte_length(content[position:start])
            position = start
            findings.append(self._build_finding(snapshot, match.group(0), line_number, column))
        return findings

    def _build_finding(self, snapshot: FileSnapshot, matched: str, line: int, column: int) -> Finding:
        display = truncate_match(matched)
        return Finding(
            rule_id=self.id,
            rule_name=self.name,
            severity=self.default_severity,
            message=self.message_template.replace(MATCH_PLACEHOLDER, display),
            location=Location(file=snapshot.relative_path, line=line, column=column),
            matched_text=display,
        )

    def __repr__(self) -> str:
        return f"RegexRule(id={self.id!r}, pattern={self.pattern.pattern!r})"


def _byte_length(text: str) -> int:
    # Columns are byte offsets, so multi-byte characters widen them.
    return len(text.encode("utf-8"))
