"""Parsing of remote GitHub skill specifiers.

Supported forms::

    owner/repo
    owner/repo@skill-name
    owner/repo:branch
    owner/repo:branch@skill-name
    https://github.com/owner/repo
    https://github.com/owner/repo/tree/branch/path/to/skill
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import SpecifierError

GITHUB_URL_PREFIXES = ("https://github.com/", "http://github.com/")


@dataclass(frozen=True)
class RemoteTarget:
    owner: str
    repo: str
    branch: Optional[str] = None
    skill_name: Optional[str] = None

    @classmethod
    def parse(cls, spec: str) -> "RemoteTarget":
        spec = spec.strip()
        if spec.startswith(("https://", "http://")):
            return cls._parse_url(spec)
        return cls._parse_shorthand(spec)

    @classmethod
    def _parse_url(cls, url: str) -> "RemoteTarget":
        trimmed = url.rstrip("/")
        for prefix in GITHUB_URL_PREFIXES:
            if trimmed.startswith(prefix):
                path = trimmed[len(prefix):]
                break
        else:
            raise SpecifierError(f"unsupported URL host (only github.com): {url}")

        parts = path.split("/", 3)
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise SpecifierError("invalid GitHub URL: must contain owner/repo")

        owner = parts[0]
        repo = parts[1][: -len(".git")] if parts[1].endswith(".git") else parts[1]
        if not repo:
            raise SpecifierError("invalid GitHub URL: must contain owner/repo")
        if len(parts) == 2:
            return cls(owner=owner, repo=repo)

        if parts[2] != "tree":
            raise SpecifierError(f"unsupported GitHub URL path segment '{parts[2]}' (expected 'tree')")
        if len(parts) < 4 or not parts[3]:
            raise SpecifierError("GitHub URL with /tree/ must include a branch name")

        branch, _, skill_path = parts[3].partition("/")
        skill_name = skill_path.rsplit("/", 1)[-1] if skill_path else None
        return cls(owner=owner, repo=repo, branch=branch, skill_name=skill_name or None)

    @classmethod
    def _parse_shorthand(cls, spec: str) -> "RemoteTarget":
        owner, slash, rest = spec.partition("/")
        if not slash:
            raise SpecifierError(f"'{spec}' must contain '/' (expected owner/repo)")
        if not owner:
            raise SpecifierError("owner cannot be empty")
        if not rest:
            raise SpecifierError("repo cannot be empty")

        skill_name = None
        if "@" in rest:
            rest, _, skill_name = rest.rpartition("@")
            if not skill_name:
                raise SpecifierError("skill name after '@' cannot be empty")

        repo, colon, branch = rest.partition(":")
        if colon and not branch:
            raise SpecifierError("branch after ':' cannot be empty")
        if not repo:
            raise SpecifierError("repo cannot be empty")

        return cls(owner=owner, repo=repo, branch=branch or None, skill_name=skill_name)

    def __str__(self) -> str:
        text = f"{self.owner}/{self.repo}"
        if self.branch:
            text += f":{self.branch}"
        if self.skill_name:
            text += f"@{self.skill_name}"
        return text
