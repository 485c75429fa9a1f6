"""
Infrastructure layer for nexttag.

Contains abstractions for external systems:
- GitHubClient: GitHub REST API access (tags, commits, issues, refs)
- actions: GitHub Actions run context and step outputs

These provide clean interfaces that can be mocked for testing.
"""

from .github_client import GitHubClient, RateLimitStatus
from .actions import active_ref, branch_from_ref, write_outputs

__all__ = [
    'GitHubClient',
    'RateLimitStatus',
    'active_ref',
    'branch_from_ref',
    'write_outputs',
]
