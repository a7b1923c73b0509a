"""Core result data structures for the scanner."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Tuple

from .severity import Severity

MAX_DISPLAY_LENGTH = 80
ELLIPSIS = "..."


def truncate_match(text: str, limit: int = MAX_DISPLAY_LENGTH) -> str:
    """Shorten matched text for display, keeping the result within ``limit`` characters."""

    if len(text) > limit:
        return text[: limit - len(ELLIPSIS)] + ELLIPSIS
    return text


@dataclass(frozen=True)
class Location:
    """Position of a finding inside a scanned file (1-based line and column)."""

    file: str
    line: int
    column: int


@dataclass
class Finding:
    """Capture a single rule match."""

    rule_id: str
    rule_name: str
    severity: Severity
    message: str
    location: Location
    matched_text: str

    def sort_key(self) -> Tuple[int, Tuple[str, ...], int, int]:
        """Order by severity descending, then file path, line and column ascending."""

        return (
            -self.severity.rank,
            tuple(self.location.file.split("/")),
            self.location.line,
            self.location.column,
        )

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


@dataclass
class Summary:
    """Aggregate finding counts by severity."""

    errors: int = 0
    warnings: int = 0
    info: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "Summary":
        summary = cls()
        for finding in findings:
            summary.increment(finding.severity)
        return summary

    def increment(self, severity: Severity) -> None:
        if severity is Severity.ERROR:
            self.errors += 1
        elif severity is Severity.WARNING:
            self.warnings += 1
        else:
            self.info += 1

    @property
    def total(self) -> int:
        return self.errors + self.warnings + self.info

    def to_dict(self) -> Dict[str, int]:
        data = {"total": self.total}
        data.update(asdict(self))
        return data


__all__ = [
    "Finding",
    "Location",
    "Summary",
    "truncate_match",
]
