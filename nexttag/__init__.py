"""
nexttag - Compute the next release tag of a repository.

nexttag combines a repository's version tags, the branch being built and
markers in commit messages into the next semantic version, then publishes
it as a tag. It is meant to run as a CI step.

Quick Start:
    from nexttag import GitHubClient, ReleasePolicy, ReleaseOptions, ReleaseService

    client = GitHubClient.for_repository("octo/widgets", token=token)
    policy = ReleasePolicy.from_options("^main$", "enhancement")
    result = ReleaseService(client, policy).run(
        ReleaseOptions(ref="refs/heads/main", dry_run=True)
    )
    print(result.decision.result)   # e.g. "1.3.0"

Commit markers (release branches only):
    #major, #minor, #patch    explicit bump
    fixes #N                  patch, or minor if issue N has an escalation label
    #wip                      commit is ignored

Other branches receive pre-release tags scoped to the branch name,
e.g. 1.3.0-beta.2 on branch "beta".
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    BumpLevel,
    Tag,
    Branch,
    Commit,
    ReleasePolicy,
    VersionDecision,
    is_release_branch,
)

# Services
from .services import (
    TagIndex,
    CommitDirectiveScanner,
    ResolveRequest,
    VersionResolver,
    ReleaseOptions,
    ReleaseResult,
    ReleaseService,
)

# Infrastructure
from .infra import GitHubClient

# Configuration
from .config import load_config

__all__ = [
    "__version__",
    "BumpLevel",
    "Tag",
    "Branch",
    "Commit",
    "ReleasePolicy",
    "VersionDecision",
    "is_release_branch",
    "TagIndex",
    "CommitDirectiveScanner",
    "ResolveRequest",
    "VersionResolver",
    "ReleaseOptions",
    "ReleaseResult",
    "ReleaseService",
    "GitHubClient",
    "load_config",
]
