"""
Version resolution for nexttag.

Combines the tag index, the release policy and the commit directive
scanner into a single decision: the next version of a branch.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..domain import version as semver_policy
from ..domain.bump import BumpLevel
from ..domain.decision import VersionDecision
from ..domain.policy import ReleasePolicy
from ..domain.tag import Branch, Tag
from ..exit_codes import InvalidVersionError, NoNewCommitsError, TagConflictError
from .directives import CommitDirectiveScanner
from .tag_index import TagIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolveRequest:
    """
    What to resolve.

    Attributes:
        branch: Branch being tagged
        bump: Fallback level for release branches without directives
        custom_tag: Literal tag that bypasses version computation
        prerelease_label: Pre-release channel, defaults to the last segment
            of the branch name
    """
    branch: Branch
    bump: BumpLevel = BumpLevel.PATCH
    custom_tag: Optional[str] = None
    prerelease_label: Optional[str] = None

    @property
    def channel(self) -> str:
        return self.prerelease_label or self.branch.name


class VersionResolver:
    """
    Decide the next version of a branch.

    The remote collaborator only needs three read methods:
    ``list_tags()``, ``iter_commits(sha)`` and ``get_issue_labels(number)``.
    Nothing is written; publishing the tag is the caller's job.

    Example:
        resolver = VersionResolver(ReleasePolicy.from_options("^main$"), client)
        decision = resolver.resolve(ResolveRequest(branch=Branch("main", sha)))
        print(decision.result)  # "1.3.0"
    """

    def __init__(self, policy: ReleasePolicy, remote):
        """
        Initialize VersionResolver.

        Args:
            policy: Release policy for the run
            remote: Collaborator that lists tags and commits and reads issues
        """
        self.policy = policy
        self.remote = remote
        self.scanner = CommitDirectiveScanner(
            issue_lookup=remote.get_issue_labels,
            escalation_labels=policy.issue_escalation_labels,
        )

    def resolve(
        self,
        request: ResolveRequest,
        tags: Optional[Iterable[Tag]] = None
    ) -> VersionDecision:
        """
        Resolve the next version.

        Args:
            request: Branch and options for this run
            tags: Pre-fetched remote tags; fetched from the remote if None

        Returns:
            VersionDecision for the branch

        Raises:
            TagConflictError: The custom tag already exists
            NoNewCommitsError: The branch head already carries the latest tag
            InvalidVersionError: The fallback level or channel is unusable
        """
        index = TagIndex(self.remote.list_tags() if tags is None else tags)
        branch = request.branch

        if request.custom_tag:
            return self._resolve_custom(request.custom_tag, index)

        latest_tag = index.latest(branch.full_name, self.policy)
        latest_main_tag = index.latest(branch.full_name, self.policy, include_prereleases=False)

        logger.info(f"the latest tag of the repository {latest_tag.name if latest_tag else None}")
        logger.info(f"the latest main tag of the repository {latest_main_tag.name if latest_main_tag else None}")

        if latest_tag and latest_tag.commit_sha == branch.head_sha:
            raise NoNewCommitsError(latest_tag.name, branch.head_sha)

        base = latest_tag.version if latest_tag else semver_policy.ZERO

        if not self.policy.is_release_branch(branch.full_name):
            next_version = semver_policy.increment(
                base, semver_policy.PRERELEASE, request.channel
            )
            logger.info(f"default to prerelease version {next_version}")
            return VersionDecision(
                result=str(next_version),
                base_version=str(base),
                bump_level=BumpLevel.NONE,
                is_prerelease=True,
                channel=request.channel,
                latest_tag=latest_tag,
            )

        logger.info(f"{branch.full_name} is a release branch")
        level = self.scan(branch, latest_main_tag)
        logger.info(f"commit messages suggest {level} upgrade")

        if level is BumpLevel.NONE:
            level = request.bump
        else:
            logger.info(f"commit messages force bump level to {level}")

        if not level.is_release_level:
            raise InvalidVersionError(str(base), f"cannot release with bump level {level}")

        next_version = semver_policy.increment(base, level)
        logger.info(f"bump tag {next_version}")
        return VersionDecision(
            result=str(next_version),
            base_version=str(base),
            bump_level=level,
            is_prerelease=False,
            latest_tag=latest_tag,
        )

    def scan(self, branch: Branch, latest_main_tag: Optional[Tag]) -> BumpLevel:
        """
        Scan commits between the branch head and the latest release tag.

        Without a previous release the whole available history is scanned.
        """
        stop_at = latest_main_tag.commit_sha if latest_main_tag else None
        return self.scanner.scan(self.remote.iter_commits(branch.head_sha), stop_at_sha=stop_at)

    def _resolve_custom(self, custom_tag: str, index: TagIndex) -> VersionDecision:
        if index.contains(custom_tag):
            raise TagConflictError(custom_tag)

        logger.info(f"using custom tag {custom_tag}")
        return VersionDecision(
            result=custom_tag,
            is_prerelease=False,
            custom=True,
        )
