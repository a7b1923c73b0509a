from pathlib import Path

import pytest

from skill_issue.scanner import FileSnapshot, FileType, ScanError, iter_lines, scan_directory


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("SKILL.md", FileType.MARKDOWN),
        ("docs/guide.MDX", FileType.MARKDOWN),
        ("scripts/run.sh", FileType.SCRIPT),
        ("tool.py", FileType.SCRIPT),
        ("index.ts", FileType.SCRIPT),
        ("config.yml", FileType.YAML),
        ("pyproject.toml", FileType.TOML),
        ("package.json", FileType.JSON),
        ("Makefile", FileType.UNKNOWN),
        ("image.png", FileType.UNKNOWN),
    ],
)
def test_file_type_from_path(path, expected):
    assert FileType.from_path(path) is expected


def test_snapshot_classifies_by_relative_path():
    snapshot = FileSnapshot.create("/tmp/skill/run.sh", "run.sh", "echo hi\n")

    assert snapshot.file_type is FileType.SCRIPT
    assert snapshot.path == "/tmp/skill/run.sh"


def test_iter_lines_strips_terminators():
    assert list(iter_lines("one\r\ntwo\nthree")) == [(1, "one"), (2, "two"), (3, "three")]


def test_iter_lines_trailing_newline_and_empty():
    assert list(iter_lines("a\n\nb\n")) == [(1, "a"), (2, ""), (3, "b")]
    assert list(iter_lines("")) == []


def _write(root: Path, relative: str, content) -> None:
    target = root / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        target.write_bytes(content)
    else:
        target.write_text(content, encoding="utf-8")


def test_scan_directory_walks_recursively_and_skips_noise(tmp_path):
    _write(tmp_path, "SKILL.md", "# skill\n")
    _write(tmp_path, "scripts/run.sh", "echo hi\n")
    _write(tmp_path, ".git/config", "[core]\n")
    _write(tmp_path, "node_modules/pkg/index.js", "eval('x')\n")
    _write(tmp_path, "__pycache__/mod.pyc", b"\x00\xff\xfe")
    _write(tmp_path, "logo.png", b"\x89PNG\r\n\x1a\n\xff\xfe\x00")

    snapshots = scan_directory(tmp_path)

    assert sorted(s.relative_path for s in snapshots) == ["SKILL.md", "scripts/run.sh"]
    run = next(s for s in snapshots if s.relative_path == "scripts/run.sh")
    assert run.path == str(tmp_path / "scripts" / "run.sh")
    assert run.content == "echo hi\n"


def test_scan_directory_missing_path(tmp_path):
    with pytest.raises(ScanError, match="does not exist"):
        scan_directory(tmp_path / "missing")


def test_scan_directory_rejects_file(tmp_path):
    _write(tmp_path, "SKILL.md", "# skill\n")

    with pytest.raises(ScanError, match="not a directory"):
        scan_directory(tmp_path / "SKILL.md")
