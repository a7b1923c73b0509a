"""Fetch skill files from a GitHub repository over the REST and raw endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from skill_issue import DISTRIBUTION_NAME, __version__
from skill_issue.logging import get_logger
from skill_issue.scanner import FileSnapshot

from .errors import (
    HttpError,
    NoSkillsFoundError,
    RateLimitedError,
    RepoNotFoundError,
    SkillNotFoundError,
    TreeTruncatedError,
)
from .parse import RemoteTarget

logger = get_logger("remote")

API_BASE_URL = "https://api.github.com"
RAW_BASE_URL = "https://raw.githubusercontent.com"
USER_AGENT = f"{DISTRIBUTION_NAME}/{__version__}"
SKILL_MANIFEST = "SKILL.md"


@dataclass(frozen=True)
class TreeEntry:
    path: str
    type: str
    sha: str = ""

    @property
    def is_blob(self) -> bool:
        return self.type == "blob"


@dataclass(frozen=True)
class DiscoveredSkill:
    """A skill directory found in the tree: ``prefix`` keeps its trailing slash."""

    prefix: str
    name: str


class GitHubClient:
    """Thin synchronous wrapper over the three GitHub endpoints the scanner needs."""

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers = {"User-Agent": USER_AGENT}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(headers=headers, transport=transport, follow_redirects=True)

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def default_branch(self, target: RemoteTarget) -> str:
        url = f"{API_BASE_URL}/repos/{target.owner}/{target.repo}"
        logger.debug("fetching repository metadata: %s", url)
        body = self._get_json(url)
        branch = body.get("default_branch") if isinstance(body, dict) else None
        if not isinstance(branch, str) or not branch:
            raise HttpError("could not determine default branch")
        return branch

    def fetch_tree(self, target: RemoteTarget, branch: str) -> List[TreeEntry]:
        url = f"{API_BASE_URL}/repos/{target.owner}/{target.repo}/git/trees/{quote(branch)}?recursive=1"
        logger.debug("fetching tree: %s", url)
        body = self._get_json(url)
        if not isinstance(body, dict) or not isinstance(body.get("tree"), list):
            raise HttpError("failed to parse tree response")
        if body.get("truncated"):
            raise TreeTruncatedError()
        entries: List[TreeEntry] = []
        for item in body["tree"]:
            if not isinstance(item, dict) or "path" not in item or "type" not in item:
                raise HttpError("failed to parse tree response: malformed entry")
            entries.append(TreeEntry(path=str(item["path"]), type=str(item["type"]), sha=str(item.get("sha", ""))))
        return entries

    def fetch_file(self, target: RemoteTarget, branch: str, path: str) -> bytes:
        url = f"{RAW_BASE_URL}/{target.owner}/{target.repo}/{quote(branch)}/{quote(path)}"
        return self._get(url).content

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------
    def _get_json(self, url: str) -> Any:
        response = self._get(url, headers={"Accept": "application/vnd.github+json"})
        try:
            return response.json()
        except ValueError as exc:
            raise HttpError(f"invalid JSON from {url}: {exc}") from exc

    def _get(self, url: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        try:
            response = self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise HttpError(f"{url}: {exc}") from exc

        if response.status_code == 404:
            raise RepoNotFoundError(url)
        if _is_rate_limited(response):
            raise RateLimitedError(_reset_timestamp(response))
        if response.is_error:
            raise HttpError(f"{url}: status {response.status_code}")
        return response


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0"


def _reset_timestamp(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("x-ratelimit-reset")
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def discover_skills(tree: List[TreeEntry], target: RemoteTarget) -> List[DiscoveredSkill]:
    """Find every SKILL.md blob and derive the skill directory it anchors."""

    skills: List[DiscoveredSkill] = []
    for entry in tree:
        if not entry.is_blob or entry.path.rsplit("/", 1)[-1] != SKILL_MANIFEST:
            continue
        prefix = entry.path[: entry.path.rfind("/") + 1]
        name = prefix.rstrip("/").rsplit("/", 1)[-1] if prefix else target.repo
        skills.append(DiscoveredSkill(prefix=prefix, name=name))

    if not skills:
        raise NoSkillsFoundError()

    if target.skill_name is not None:
        skills = [skill for skill in skills if skill.name == target.skill_name]
        if not skills:
            raise SkillNotFoundError(target.skill_name)
    return skills


def fetch_skill_files(target: RemoteTarget, client: GitHubClient) -> List[FileSnapshot]:
    """Resolve ``target`` to file snapshots, rooted at each skill's directory."""

    branch = target.branch or client.default_branch(target)
    logger.info("using branch: %s", branch)

    tree = client.fetch_tree(target, branch)
    skills = discover_skills(tree, target)
    logger.info("found %d skill(s): %s", len(skills), ", ".join(skill.name for skill in skills))

    snapshots: List[FileSnapshot] = []
    for skill in skills:
        entries = [entry for entry in tree if entry.is_blob and entry.path.startswith(skill.prefix)]
        logger.debug("fetching %d file(s) for skill '%s'", len(entries), skill.name)
        for entry in entries:
            raw = client.fetch_file(target, branch, entry.path)
            try:
                content = raw.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("skipping non-text file %s", entry.path)
                continue
            relative = entry.path[len(skill.prefix):]
            snapshots.append(FileSnapshot.create(entry.path, relative, content))

    if not snapshots:
        raise NoSkillsFoundError()
    return snapshots
