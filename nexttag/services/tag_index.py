"""
Tag index for nexttag.

Built once per run from the full remote tag list. Answers the two
questions version resolution asks:
- what is the latest tag overall under a release policy
- what is the latest tag of this branch's pre-release channel
"""

import logging
from functools import cmp_to_key
from typing import Iterable, List, Optional, Tuple

import semver

from ..domain.policy import ReleasePolicy
from ..domain.tag import Tag, channel_name

logger = logging.getLogger(__name__)


class TagIndex:
    """
    Sorted view over the version tags of a repository.

    Tags whose names are not semantic versions are kept for existence
    checks but never take part in version computation.

    Example:
        index = TagIndex([Tag("1.0.0", "a1"), Tag("1.1.0-beta.0", "b2")])
        index.latest("beta", policy)                            # 1.1.0-beta.0
        index.latest("beta", policy, include_prereleases=False) # 1.0.0
    """

    def __init__(self, tags: Iterable[Tag]):
        self._tags: List[Tag] = list(tags)

        versioned: List[Tuple[semver.Version, Tag]] = []
        for tag in self._tags:
            version = tag.version
            if version is None:
                logger.debug(f"Ignoring non-version tag {tag.name}")
                continue
            versioned.append((version, tag))

        # sorted() is stable, so equal versions keep fetch order
        self._versioned = sorted(
            versioned,
            key=cmp_to_key(lambda a, b: a[0].compare(b[0]))
        )

    def __len__(self) -> int:
        return len(self._tags)

    def valid_tags(self) -> List[Tag]:
        """Version tags in ascending precedence order."""
        return [tag for _, tag in self._versioned]

    def contains(self, name: str) -> bool:
        """True if a tag with exactly this name exists."""
        return any(tag.name == name for tag in self._tags)

    def latest(
        self,
        branch_name: str,
        policy: ReleasePolicy,
        include_prereleases: bool = True
    ) -> Optional[Tag]:
        """
        Find the tag a branch should measure its next version against.

        Release branches always measure against the global latest tag, so
        release numbering stays monotone across channels. Other branches
        fall back to their own channel when the global latest is a
        pre-release, so one branch never continues another's counter.

        Args:
            branch_name: Full name of the branch being resolved, e.g.
                ``release/2.x``; its last segment is the channel
            policy: Release policy in effect
            include_prereleases: When False, only plain releases count

        Returns:
            The latest applicable Tag, or None if there is none
        """
        if not include_prereleases:
            releases = [tag for version, tag in self._versioned if version.prerelease is None]
            return releases[-1] if releases else None

        if not self._versioned:
            return None

        latest_version, latest_overall = self._versioned[-1]
        if policy.is_release_branch(branch_name) or latest_version.prerelease is None:
            return latest_overall

        channel = channel_name(branch_name)
        tags = [tag for _, tag in self._versioned if tag.belongs_to(channel)]
        if not tags:
            logger.debug(f"No tags found for channel {channel}")
            return None
        return tags[-1]
