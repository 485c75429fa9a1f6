"""
Tag, branch and commit value objects for nexttag.

These mirror what the hosting platform returns, stripped down to the
fields version resolution needs. All of them are immutable.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import semver

from . import version as semver_policy


@dataclass(frozen=True)
class Tag:
    """
    A remote tag reference.

    Examples:
        Tag("v1.2.3", "abc123").version        -> Version(1, 2, 3)
        Tag("nightly", "abc123").version       -> None
        Tag("1.3.0-beta.2", "f00").belongs_to("beta") -> True

    Attributes:
        name: Tag name as stored on the remote (may carry a ``v`` prefix)
        commit_sha: Commit the tag points at
    """

    name: str
    commit_sha: str

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Tag':
        """Create from a ``GET /repos/{owner}/{repo}/tags`` item."""
        commit = data.get('commit') or {}
        return cls(name=data.get('name', ''), commit_sha=commit.get('sha', ''))

    @property
    def version(self) -> Optional[semver.Version]:
        """Cleaned semantic version, or None for non-version tags."""
        return semver_policy.clean(self.name)

    @property
    def is_version(self) -> bool:
        return self.version is not None

    def belongs_to(self, branch_name: str) -> bool:
        """A tag belongs to a branch when its name contains the branch name."""
        return bool(branch_name) and branch_name in self.name

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'commit_sha': self.commit_sha}

    def __str__(self) -> str:
        return self.name


HEADS_PREFIX = 'refs/heads/'


def channel_name(branch_name: str) -> str:
    """Last path segment of a branch: ``release/2.x`` -> ``2.x``."""
    return branch_name.rstrip('/').split('/')[-1]


@dataclass(frozen=True)
class Branch:
    """
    A branch and the commit at its head.

    ``name`` is the last path segment, used as the default pre-release
    channel. ``full_name`` is the whole branch name, which release-branch
    patterns are matched against.
    """

    name: str
    head_sha: str
    ref: str = ""

    @classmethod
    def from_ref(cls, ref: str, sha: str) -> 'Branch':
        """
        Build from a full ref name.

        ``refs/heads/feature/login`` becomes a branch named ``login`` with
        the full name ``feature/login``.
        """
        return cls(name=channel_name(ref), head_sha=sha, ref=ref)

    @property
    def full_name(self) -> str:
        if self.ref.startswith(HEADS_PREFIX):
            return self.ref[len(HEADS_PREFIX):]
        return self.ref or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'full_name': self.full_name,
            'head_sha': self.head_sha,
            'ref': self.ref,
        }


@dataclass(frozen=True)
class Commit:
    """A commit in newest-first history order."""

    sha: str
    message: str

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Commit':
        """Create from a ``GET /repos/{owner}/{repo}/commits`` item."""
        commit = data.get('commit') or {}
        return cls(sha=data.get('sha', ''), message=commit.get('message') or '')

    @property
    def subject(self) -> str:
        return self.message.splitlines()[0] if self.message else ''
