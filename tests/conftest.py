import logging
from pathlib import Path

import pytest

from skill_issue.scanner import FileSnapshot

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def make_snapshot():
    def _make(content: str, relative_path: str = "SKILL.md") -> FileSnapshot:
        return FileSnapshot.create(f"/skill/{relative_path}", relative_path, content)

    return _make


@pytest.fixture(autouse=True)
def _reset_skill_issue_logger():
    # The CLI detaches the package logger from the root; restore it so caplog sees records.
    yield
    logger = logging.getLogger("skill_issue")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
