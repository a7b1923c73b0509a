import pytest

from skill_issue.config import AllowlistEntry, Config, RuleOverride
from skill_issue.engine import Engine
from skill_issue.result import Finding, Location
from skill_issue.rules import RuleRegistry
from skill_issue.severity import Severity

PATTERNS = """
rules:
  - id: T-ERR
    name: Error rule
    severity: error
    pattern: 'danger'
    message_template: 'danger: {match}'
  - id: T-WARN
    name: Warning rule
    severity: warning
    pattern: 'caution'
    message_template: 'caution: {match}'
  - id: T-INFO
    name: Info rule
    severity: info
    pattern: 'note'
    message_template: 'note: {match}'
"""


def _finding(severity, file="test.md", line=1, column=1):
    return Finding(
        rule_id="TEST-001",
        rule_name="Test Rule",
        severity=severity,
        message="test",
        location=Location(file=file, line=line, column=column),
        matched_text="test",
    )


@pytest.fixture
def registry():
    registry = RuleRegistry()
    registry.load_pattern_text(PATTERNS, "test")
    return registry


@pytest.fixture
def files(make_snapshot):
    return [
        make_snapshot("note\ncaution\n", "b.md"),
        make_snapshot("danger note\n", "a.md"),
        make_snapshot("caution danger\n", "sub/c.md"),
    ]


def test_run_sorts_by_severity_then_location(registry, files):
    findings = Engine(Config(), registry).run(files)

    keys = [(f.severity, f.location.file, f.location.line, f.location.column) for f in findings]
    assert keys == [
        (Severity.ERROR, "a.md", 1, 1),
        (Severity.ERROR, "sub/c.md", 1, 9),
        (Severity.WARNING, "b.md", 2, 1),
        (Severity.WARNING, "sub/c.md", 1, 1),
        (Severity.INFO, "a.md", 1, 8),
        (Severity.INFO, "b.md", 1, 1),
    ]


def test_min_severity_drops_lower_findings(registry, files):
    findings = Engine(Config(min_severity=Severity.WARNING), registry).run(files)

    assert {f.severity for f in findings} == {Severity.ERROR, Severity.WARNING}


def test_ignored_and_disabled_rules_produce_nothing(registry, files):
    config = Config(
        ignore=frozenset({"T-ERR"}),
        rule_overrides={"T-WARN": RuleOverride(enabled=False)},
    )

    findings = Engine(config, registry).run(files)

    assert {f.rule_id for f in findings} == {"T-INFO"}


def test_allowlist_without_file_filter_suppresses_everywhere(registry, files):
    config = Config(allowlist=(AllowlistEntry(rule="T-ERR"),))

    findings = Engine(config, registry).run(files)

    assert "T-ERR" not in {f.rule_id for f in findings}


def test_allowlist_file_filter_matches_by_substring(registry, files):
    config = Config(allowlist=(AllowlistEntry(rule="T-ERR", file="sub/"),))

    findings = Engine(config, registry).run(files)

    errors = [f for f in findings if f.rule_id == "T-ERR"]
    assert [f.location.file for f in errors] == ["a.md"]


def test_allowlist_with_non_matching_filter_keeps_finding(registry, files):
    config = Config(allowlist=(AllowlistEntry(rule="T-ERR", file="elsewhere/"),))

    findings = Engine(config, registry).run(files)

    assert len([f for f in findings if f.rule_id == "T-ERR"]) == 2


def test_severity_override_changes_only_severity(registry, files):
    baseline = Engine(Config(), registry).run(files)
    config = Config(rule_overrides={"T-INFO": RuleOverride(severity=Severity.ERROR)})

    findings = Engine(config, registry).run(files)

    overridden = [f for f in findings if f.rule_id == "T-INFO"]
    original = [f for f in baseline if f.rule_id == "T-INFO"]
    assert {f.severity for f in overridden} == {Severity.ERROR}
    assert sorted(f.message for f in overridden) == sorted(f.message for f in original)
    assert findings[0].severity is Severity.ERROR


def test_override_is_applied_before_min_severity_filter(registry, files):
    config = Config(
        min_severity=Severity.ERROR,
        rule_overrides={"T-INFO": RuleOverride(severity=Severity.ERROR)},
    )

    findings = Engine(config, registry).run(files)

    assert {f.rule_id for f in findings} == {"T-ERR", "T-INFO"}


def test_engine_does_not_mutate_inputs(registry, files):
    config = Config(rule_overrides={"T-WARN": RuleOverride(severity=Severity.INFO)})
    rules_before = registry.all_rules()

    Engine(config, registry).run(files)

    assert registry.all_rules() == rules_before
    assert registry.all_rules()[1].default_severity is Severity.WARNING


MISSING_DESCRIPTION = "---\nname: quiet-skill\n---\n\n# Quiet skill\n"


def _metadata_ids(config, make_snapshot, path="SKILL.md"):
    registry = RuleRegistry.with_defaults()
    findings = Engine(config, registry).run([make_snapshot(MISSING_DESCRIPTION, path)])
    return [finding.rule_id for finding in findings]


def test_missing_description_is_reported_by_default(make_snapshot):
    assert _metadata_ids(Config(), make_snapshot) == ["SL-META-002"]


def test_sibling_rule_id_can_be_ignored(make_snapshot):
    assert _metadata_ids(Config(ignore=frozenset({"SL-META-002"})), make_snapshot) == []


def test_sibling_rule_id_can_be_disabled(make_snapshot):
    config = Config(rule_overrides={"SL-META-002": RuleOverride(enabled=False)})

    assert _metadata_ids(config, make_snapshot) == []


def test_sibling_rule_id_can_be_allowlisted_per_file(make_snapshot):
    config = Config(allowlist=(AllowlistEntry(rule="SL-META-002", file="drafts/"),))

    assert _metadata_ids(config, make_snapshot, "drafts/SKILL.md") == []
    assert _metadata_ids(config, make_snapshot, "SKILL.md") == ["SL-META-002"]


def test_disabling_parent_rule_also_silences_sibling_id(make_snapshot):
    config = Config(rule_overrides={"SL-META-001": RuleOverride(enabled=False)})

    assert _metadata_ids(config, make_snapshot) == []


def test_exit_code_no_findings():
    assert Engine.exit_code([], Severity.ERROR) == 0


def test_exit_code_errors():
    assert Engine.exit_code([_finding(Severity.ERROR)], Severity.ERROR) == 2


def test_exit_code_warnings_only():
    assert Engine.exit_code([_finding(Severity.WARNING)], Severity.ERROR) == 1


def test_exit_code_info_only():
    assert Engine.exit_code([_finding(Severity.INFO)], Severity.ERROR) == 0


def test_exit_code_error_on_warning():
    assert Engine.exit_code([_finding(Severity.WARNING)], Severity.WARNING) == 2


def test_exit_code_error_on_info():
    assert Engine.exit_code([_finding(Severity.INFO)], Severity.INFO) == 2


def test_max_severity():
    assert Engine.max_severity([]) is None
    findings = [_finding(Severity.INFO), _finding(Severity.ERROR), _finding(Severity.WARNING)]
    assert Engine.max_severity(findings) is Severity.ERROR


def test_sort_key_orders_path_components():
    findings = [
        _finding(Severity.WARNING, file="a/b.md"),
        _finding(Severity.WARNING, file="a.md"),
        _finding(Severity.ERROR, file="z.md", line=9),
        _finding(Severity.WARNING, file="a.md", line=1, column=5),
    ]

    ordered = sorted(findings, key=Finding.sort_key)

    assert [(f.location.file, f.location.column) for f in ordered] == [
        ("z.md", 1),
        ("a/b.md", 1),
        ("a.md", 1),
        ("a.md", 5),
    ]
