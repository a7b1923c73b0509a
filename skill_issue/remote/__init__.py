"""Remote scanning of skills hosted on GitHub."""

from __future__ import annotations

from typing import List, Optional

import httpx

from skill_issue.logging import get_logger
from skill_issue.scanner import FileSnapshot

from .errors import (
    HttpError,
    NoSkillsFoundError,
    RateLimitedError,
    RemoteError,
    RepoNotFoundError,
    SkillNotFoundError,
    SpecifierError,
    TreeTruncatedError,
)
from .github import DiscoveredSkill, GitHubClient, TreeEntry, discover_skills, fetch_skill_files
from .parse import RemoteTarget

logger = get_logger("remote")


def fetch_remote_skill(
    spec: str,
    token: Optional[str] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[FileSnapshot]:
    """Parse ``spec``, fetch the matching skills and return their file snapshots.

    Raises a ``RemoteError`` subclass on any failure; nothing partial is returned.
    """

    target = RemoteTarget.parse(spec)
    logger.info("remote target: %s", target)
    with GitHubClient(token, transport=transport) as client:
        return fetch_skill_files(target, client)


__all__ = [
    "DiscoveredSkill",
    "GitHubClient",
    "HttpError",
    "NoSkillsFoundError",
    "RateLimitedError",
    "RemoteError",
    "RemoteTarget",
    "RepoNotFoundError",
    "SkillNotFoundError",
    "SpecifierError",
    "TreeEntry",
    "TreeTruncatedError",
    "discover_skills",
    "fetch_remote_skill",
    "fetch_skill_files",
]
