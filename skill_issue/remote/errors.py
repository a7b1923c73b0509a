"""Failures surfaced while resolving a remote skill."""

from __future__ import annotations

from typing import Optional


class RemoteError(RuntimeError):
    """Base class for remote scan failures; ``str()`` is the user-facing message."""


class SpecifierError(RemoteError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid remote specifier: {detail}")
        self.detail = detail


class HttpError(RemoteError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"HTTP error: {detail}")
        self.detail = detail


class RateLimitedError(RemoteError):
    def __init__(self, reset_timestamp: Optional[int] = None) -> None:
        message = "GitHub API rate limit exceeded"
        if reset_timestamp is not None:
            message += f" (resets at {reset_timestamp})"
        message += "; set GITHUB_TOKEN or pass --github-token to raise the limit"
        super().__init__(message)
        self.reset_timestamp = reset_timestamp


class RepoNotFoundError(RemoteError):
    def __init__(self, url: str) -> None:
        super().__init__(f"repository not found: {url}")
        self.url = url


class TreeTruncatedError(RemoteError):
    def __init__(self) -> None:
        super().__init__(
            "repository tree is too large (truncated by GitHub API); try specifying a skill name with @"
        )


class NoSkillsFoundError(RemoteError):
    def __init__(self) -> None:
        super().__init__("no skills found (no SKILL.md files in repository)")


class SkillNotFoundError(RemoteError):
    def __init__(self, name: str) -> None:
        super().__init__(f"skill '{name}' not found in repository")
        self.name = name
