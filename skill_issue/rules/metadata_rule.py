"""Validate the YAML frontmatter block of skill manifests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import yaml

from skill_issue.result import Finding, Location, truncate_match
from skill_issue.scanner import FileSnapshot, FileType
from skill_issue.severity import Severity

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
DESCRIPTION_PREVIEW_LENGTH = 50
FRONTMATTER_DELIMITER = "---"

MISSING_DESCRIPTION_ID = "SL-META-002"
MISSING_DESCRIPTION_NAME = "Missing Skill Description"


def extract_frontmatter(content: str) -> Optional[str]:
    """Return the raw text between the leading ``---`` and the next line-start ``---``."""

    content = content.lstrip()
    if not content.startswith(FRONTMATTER_DELIMITER):
        return None
    remainder = content[len(FRONTMATTER_DELIMITER):]
    end = remainder.find("\n" + FRONTMATTER_DELIMITER)
    if end < 0:
        return None
    return remainder[:end]


def parse_frontmatter(content: str) -> Optional[Dict[Any, Any]]:
    """Parse the frontmatter mapping, or ``None`` if absent, invalid or not a mapping."""

    raw = extract_frontmatter(content)
    if raw is None:
        return None
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict):
        return None
    return data


class MetadataValidationRule:
    """Check manifest metadata for a description and sane field lengths.

    Emits ``SL-META-002`` for a missing description and its own id for
    oversized name or description values.
    """

    id = "SL-META-001"
    name = "Metadata Validation"
    default_severity = Severity.WARNING
    applies_to: Tuple[FileType, ...] = (FileType.MARKDOWN, FileType.YAML)

    def check(self, snapshot: FileSnapshot) -> List[Finding]:
        metadata = parse_frontmatter(snapshot.content)
        if metadata is None:
            return []

        findings: List[Finding] = []
        if "description" not in metadata:
            findings.append(
                self._finding(
                    snapshot,
                    "Skill metadata missing description field",
                    FRONTMATTER_DELIMITER,
                    rule_id=MISSING_DESCRIPTION_ID,
                    rule_name=MISSING_DESCRIPTION_NAME,
                )
            )

        name = metadata.get("name")
        if isinstance(name, str) and len(name) > MAX_NAME_LENGTH:
            findings.append(
                self._finding(
                    snapshot,
                    f"Skill name exceeds {MAX_NAME_LENGTH} characters ({len(name)} chars)",
                    truncate_match(name),
                )
            )

        description = metadata.get("description")
        if isinstance(description, str) and len(description) > MAX_DESCRIPTION_LENGTH:
            findings.append(
                self._finding(
                    snapshot,
                    f"Skill description exceeds {MAX_DESCRIPTION_LENGTH} characters ({len(description)} chars)",
                    description[:DESCRIPTION_PREVIEW_LENGTH] + "...",
                )
            )
        return findings

    def _finding(
        self,
        snapshot: FileSnapshot,
        message: str,
        matched_text: str,
        rule_id: Optional[str] = None,
        rule_name: Optional[str] = None,
    ) -> Finding:
        return Finding(
            rule_id=rule_id or self.id,
            rule_name=rule_name or self.name,
            severity=self.default_severity,
            message=message,
            location=Location(file=snapshot.relative_path, line=1, column=1),
            matched_text=matched_text,
        )
