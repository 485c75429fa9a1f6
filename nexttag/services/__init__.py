"""
Service layer for nexttag.

Contains the version-resolution engine and the run orchestration:
- TagIndex: Sorted version tags, latest tag per branch and policy
- CommitDirectiveScanner: Bump level from commit message markers
- VersionResolver: Next version of a branch
- ReleaseService: Branch lookup, resolution and tag publication

Services are the primary API for commands to use.
"""

from .tag_index import TagIndex
from .directives import CommitDirectiveScanner, DIRECTIVES
from .resolver import ResolveRequest, VersionResolver
from .release_service import ReleaseOptions, ReleaseResult, ReleaseService

__all__ = [
    'TagIndex',
    'CommitDirectiveScanner',
    'DIRECTIVES',
    'ResolveRequest',
    'VersionResolver',
    'ReleaseOptions',
    'ReleaseResult',
    'ReleaseService',
]
