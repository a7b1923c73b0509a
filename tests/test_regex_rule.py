import pytest

from skill_issue.rules import RegexRule, RuleDefinition
from skill_issue.scanner import FileType
from skill_issue.severity import Severity


def _rule(pattern, multiline=False, applies_to=(), template="found {match}"):
    definition = RuleDefinition(
        id="TEST-001",
        name="Test Rule",
        severity="warning",
        pattern=pattern,
        message_template=template,
        applies_to=tuple(applies_to),
        multiline=multiline,
    )
    return RegexRule.from_definition(definition)


def test_line_mode_reports_line_and_column(make_snapshot):
    rule = _rule("curl ")

    findings = rule.check(make_snapshot("a\ncurl http://x\n"))

    assert len(findings) == 1
    assert findings[0].location.line == 2
    assert findings[0].location.column == 1
    assert findings[0].message == "found curl "
    assert findings[0].severity is Severity.WARNING


def test_line_mode_reports_every_match(make_snapshot):
    rule = _rule(r"eval\(")

    findings = rule.check(make_snapshot("x = eval(a) + eval(b)\n"))

    assert [finding.location.column for finding in findings] == [5, 15]


def test_column_counts_utf8_bytes(make_snapshot):
    rule = _rule("token")

    findings = rule.check(make_snapshot("é token"))

    assert findings[0].location.column == 4


def test_multiline_mode_uses_cumulative_newlines(make_snapshot):
    rule = _rule(r"download\s*\n\s*execute", multiline=True)
    content = "intro\nfirst line\n  download\n    execute now\n"

    findings = rule.check(make_snapshot(content))

    assert len(findings) == 1
    assert findings[0].location.line == 3
    assert findings[0].location.column == 3
    assert findings[0].matched_text == "download\n    execute"


def test_multiline_match_at_content_start(make_snapshot):
    rule = _rule(r"a.b", multiline=True)

    findings = rule.check(make_snapshot("a\nb"))

    assert (findings[0].location.line, findings[0].location.column) == (1, 1)


def test_long_match_is_truncated(make_snapshot):
    rule = _rule(r"x+")

    findings = rule.check(make_snapshot("x" * 120))

    assert findings[0].matched_text == "x" * 77 + "..."
    assert len(findings[0].matched_text) == 80
    assert findings[0].message == "found " + "x" * 77 + "..."


def test_applies_to_tags_are_mapped_and_unknown_tags_dropped():
    rule = _rule("x", applies_to=["md", "py", "yml", "json", "toml", "bogus"])

    assert rule.applies_to == (
        FileType.MARKDOWN,
        FileType.SCRIPT,
        FileType.YAML,
        FileType.JSON,
        FileType.TOML,
    )


def test_invalid_regex_raises_value_error():
    with pytest.raises(ValueError, match="invalid regex"):
        _rule("(unclosed")


def test_invalid_severity_raises_value_error():
    definition = RuleDefinition(
        id="TEST-002",
        name="Bad",
        severity="critical",
        pattern="x",
        message_template="{match}",
    )

    with pytest.raises(ValueError, match="unknown severity"):
        RegexRule.from_definition(definition)


def test_definition_from_mapping_requires_fields():
    with pytest.raises(ValueError, match="missing field"):
        RuleDefinition.from_mapping({"id": "X-1", "name": "No pattern", "severity": "info"})


def test_repeated_matches_after_multibyte_text(make_snapshot):
    rule = _rule("x")

    findings = rule.check(make_snapshot("é x é x"))

    assert [finding.location.column for finding in findings] == [4, 9]


def test_multiline_mode_tracks_position_across_matches(make_snapshot):
    rule = _rule("ab", multiline=True)

    findings = rule.check(make_snapshot("ab ab\nxx ab\n\nλab"))

    assert [(f.location.line, f.location.column) for f in findings] == [(1, 1), (1, 4), (2, 4), (4, 3)]


@pytest.mark.parametrize("value", ["false", "yes", 1])
def test_definition_from_mapping_rejects_non_boolean_multiline(value):
    entry = {
        "id": "X-2",
        "name": "Quoted flag",
        "severity": "info",
        "pattern": "x",
        "message_template": "{match}",
        "multiline": value,
    }

    with pytest.raises(ValueError, match="multiline must be true or false"):
        RuleDefinition.from_mapping(entry)


def test_definition_from_mapping_accepts_boolean_multiline():
    entry = {
        "id": "X-3",
        "name": "Flag",
        "severity": "info",
        "pattern": "x",
        "message_template": "{match}",
        "multiline": True,
    }

    assert RuleDefinition.from_mapping(entry).multiline is True
