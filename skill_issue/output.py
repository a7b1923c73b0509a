"""Render findings as a console table, JSON or SARIF."""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from . import DISTRIBUTION_NAME, __version__
from .result import Finding, Summary
from .rules import RuleRegistry
from .severity import Severity

TOOL_NAME = DISTRIBUTION_NAME
SARIF_SCHEMA = (
    "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json"
)
SARIF_VERSION = "2.1.0"

_SARIF_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}

_TABLE_LABELS = {
    Severity.ERROR: "ERROR",
    Severity.WARNING: "WARN",
    Severity.INFO: "INFO",
}

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def format_findings(
    output_format: str,
    findings: Sequence[Finding],
    skill_path: str,
    registry: Optional[RuleRegistry] = None,
    *,
    color: bool = False,
) -> str:
    if output_format == "json":
        return format_json(findings, skill_path)
    if output_format == "sarif":
        return format_sarif(findings, registry)
    return format_table(findings, color=color)


def format_table(findings: Sequence[Finding], *, color: bool = False) -> str:
    """Create a human-readable table for console output.

    With ``color`` the severity cells and the summary line carry ANSI styles.
    """

    text = build_table_text(findings)
    if not color:
        return text.plain
    console = Console(force_terminal=True, color_system="standard", soft_wrap=True, highlight=False)
    with console.capture() as capture:
        console.print(text, end="")
    return capture.get()


def build_table_text(findings: Sequence[Finding]) -> Text:
    if not findings:
        return Text("No issues found.", style="green")

    header = ("Severity", "Rule", "File", "Line", "Message")
    rows = [
        (
            _TABLE_LABELS[finding.severity],
            finding.rule_id,
            finding.location.file,
            f"{finding.location.line}:{finding.location.column}",
            finding.message,
        )
        for finding in findings
    ]
    # Message column is not padded.
    widths = [max(len(row[index]) for row in [header, *rows]) for index in range(4)]

    def render(row: Sequence[str], severity: Optional[Severity] = None) -> Text:
        line = Text()
        for index, (cell, width) in enumerate(zip(row[:4], widths)):
            style = _SEVERITY_STYLES[severity] if index == 0 and severity is not None else None
            line.append(cell, style=style)
            line.append(" " * (width - len(cell)) + " | ")
        line.append(row[4])
        return line

    text = Text("\n").join(
        [
            render(header),
            Text("-+-".join("-" * width for width in widths) + "-+-" + "-" * len(header[4])),
            *(render(row, finding.severity) for row, finding in zip(rows, findings)),
        ]
    )

    summary = Summary.from_findings(findings)
    if summary.errors:
        summary_style = "bold red"
    elif summary.warnings:
        summary_style = "bold yellow"
    else:
        summary_style = "cyan"
    text.append("\n\n")
    text.append(
        f"Found {summary.total} issue(s): {summary.errors} error(s), "
        f"{summary.warnings} warning(s), {summary.info} info(s)",
        style=summary_style,
    )
    return text


def format_json(findings: Sequence[Finding], skill_path: str) -> str:
    payload = {
        "version": __version__,
        "skill_path": skill_path,
        "findings": [finding.to_dict() for finding in findings],
        "summary": Summary.from_findings(findings).to_dict(),
    }
    return json.dumps(payload, indent=2)


def format_sarif(findings: Sequence[Finding], registry: Optional[RuleRegistry] = None) -> str:
    """Emit a SARIF 2.1.0 log; rule descriptors come from the registry when given."""

    descriptors: List[Dict[str, object]] = []
    seen = set()
    if registry is not None:
        for rule in registry.all_rules():
            seen.add(rule.id)
            descriptors.append(_rule_descriptor(rule.id, rule.name, rule.default_severity))
    # Ids emitted under a sibling id (SL-META-002) are not registered on their own.
    for finding in findings:
        if finding.rule_id in seen:
            continue
        seen.add(finding.rule_id)
        descriptors.append(_rule_descriptor(finding.rule_id, finding.rule_name, finding.severity))

    results = [
        {
            "ruleId": finding.rule_id,
            "level": _SARIF_LEVELS[finding.severity],
            "message": {"text": finding.message},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": finding.location.file},
                        "region": {
                            "startLine": finding.location.line,
                            "startColumn": finding.location.column,
                        },
                    }
                }
            ],
        }
        for finding in findings
    ]

    log = {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": TOOL_NAME,
                        "version": __version__,
                        "rules": descriptors,
                    }
                },
                "results": results,
            }
        ],
    }
    return json.dumps(log, indent=2)


def _rule_descriptor(rule_id: str, name: str, severity: Severity) -> Dict[str, object]:
    return {
        "id": rule_id,
        "name": name,
        "shortDescription": {"text": name},
        "defaultConfiguration": {"level": _SARIF_LEVELS[severity]},
    }
