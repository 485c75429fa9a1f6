"""
Domain layer for nexttag.

Contains pure domain objects with no I/O or side effects:
- Tag, Branch, Commit: what the hosting platform knows about a repository
- BumpLevel: none < patch < minor < major, plus the wip marker
- ReleasePolicy: release branches and escalation labels
- VersionDecision: the outcome of a run

Semantic version handling lives in ``nexttag.domain.version``.
"""

from .bump import BumpLevel
from .tag import Tag, Branch, Commit
from .policy import ReleasePolicy, is_release_branch
from .decision import VersionDecision

__all__ = [
    'BumpLevel',
    'Tag',
    'Branch',
    'Commit',
    'ReleasePolicy',
    'is_release_branch',
    'VersionDecision',
]
