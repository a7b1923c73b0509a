"""Rule protocol shared by every rule variant."""

from __future__ import annotations

from typing import List, Protocol, Sequence

from skill_issue.result import Finding
from skill_issue.scanner import FileSnapshot, FileType
from skill_issue.severity import Severity


class Rule(Protocol):
    """Protocol implemented by all rule evaluators.

    ``applies_to`` lists the file types a rule inspects; an empty sequence
    means every file type. ``check`` must not have side effects.
    """

    id: str
    name: str
    default_severity: Severity
    applies_to: Sequence[FileType]

    def check(self, snapshot: FileSnapshot) -> List[Finding]:
        """Analyze one file and return its findings."""
