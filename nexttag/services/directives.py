"""
Commit directive scanning for nexttag.

Commit messages steer the release level with markers:
- ``#wip``    ignore this commit
- ``#major``  major release; older commits are not consulted
- ``#minor``  at least a minor release
- ``#patch``  at least a patch release
- ``fix #N`` / ``fixes #N``  patch release, or minor when issue N carries
  one of the escalation labels

The markers live in an ordered table. For each commit the first matching
entry decides its effect, so precedence is the order of DIRECTIVES.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Pattern, Tuple

from ..domain.bump import BumpLevel
from ..domain.tag import Commit
from ..exit_codes import NextTagError

logger = logging.getLogger(__name__)

IssueLookup = Callable[[int], Iterable[str]]


@dataclass(frozen=True)
class Directive:
    """
    One row of the directive table.

    Attributes:
        name: Marker name, for logging
        pattern: Regex searched in the commit message
        level: Level the directive raises the scan to
        issue_reference: Group 1 of the match is an issue number that may
            escalate the level to minor
    """
    name: str
    pattern: Pattern
    level: BumpLevel
    issue_reference: bool = False

    def search(self, message: str) -> Optional[re.Match]:
        return self.pattern.search(message)


DIRECTIVES: Tuple[Directive, ...] = (
    Directive('wip', re.compile(r'#wip\b'), BumpLevel.WIP),
    Directive('major', re.compile(r'#major\b'), BumpLevel.MAJOR),
    Directive('minor', re.compile(r'#minor\b'), BumpLevel.MINOR),
    Directive('patch', re.compile(r'#patch\b'), BumpLevel.PATCH),
    Directive('fix', re.compile(r'fix(?:es)? #(\d+)\b'), BumpLevel.PATCH, issue_reference=True),
)


def match_directive(message: str) -> Optional[Tuple[Directive, re.Match]]:
    """Return the highest-precedence directive found in a message."""
    for directive in DIRECTIVES:
        match = directive.search(message)
        if match:
            return directive, match
    return None


class CommitDirectiveScanner:
    """
    Resolve a bump level from a newest-first commit history.

    Example:
        scanner = CommitDirectiveScanner(client.get_issue_labels, {"enhancement"})
        level = scanner.scan(client.iter_commits(head_sha), stop_at_sha=tag.commit_sha)
    """

    def __init__(
        self,
        issue_lookup: Optional[IssueLookup] = None,
        escalation_labels: Iterable[str] = ("enhancement",)
    ):
        """
        Initialize CommitDirectiveScanner.

        Args:
            issue_lookup: Returns the label names of an issue number. Any
                NextTagError it raises counts as "no escalation".
            escalation_labels: Labels that turn a fix into a minor release
        """
        self.issue_lookup = issue_lookup
        self.escalation_labels = frozenset(escalation_labels)

    def scan(
        self,
        commits: Optional[Iterable[Commit]],
        stop_at_sha: Optional[str] = None
    ) -> BumpLevel:
        """
        Fold commit directives into a single level.

        Commits are consumed lazily and in order; iteration stops at the
        commit whose sha is ``stop_at_sha`` (that commit is not evaluated)
        or as soon as a ``#major`` marker is found.

        Args:
            commits: Commits newest-first, or None when history is unavailable
            stop_at_sha: Commit of the reference tag, None to scan everything

        Returns:
            NONE, PATCH, MINOR or MAJOR
        """
        level = BumpLevel.NONE
        if commits is None:
            return level

        for commit in commits:
            if stop_at_sha is not None and commit.sha == stop_at_sha:
                logger.debug(f"Reached reference commit {stop_at_sha[:7]}, stop")
                break

            level = self.step(level, commit)
            if level is BumpLevel.MAJOR:
                logger.debug(f"Found major marker in {commit.sha[:7]}, stop")
                break

        return level

    def step(self, level: BumpLevel, commit: Commit) -> BumpLevel:
        """Level after evaluating one commit."""
        found = match_directive(commit.message)
        if found is None:
            return level

        directive, match = found
        if directive.level is BumpLevel.WIP:
            logger.debug(f"Skipping work-in-progress commit {commit.sha[:7]}")
            return level

        if directive.issue_reference:
            # a fix escalates at most to minor
            if level >= BumpLevel.MINOR:
                return level
            return level.join(self._issue_level(match.group(1)))

        if level >= directive.level:
            return level

        logger.debug(f"Commit {commit.sha[:7]} requests a {directive.name} bump")
        return level.join(directive.level)

    def _issue_level(self, reference: str) -> BumpLevel:
        """Level for a ``fixes #N`` reference: patch, escalated by issue labels."""
        number = int(reference)
        if number <= 0:
            return BumpLevel.NONE

        if self.issue_lookup is None or not self.escalation_labels:
            return BumpLevel.PATCH

        logger.info(f"check issue {number} for minor labels")
        try:
            labels = list(self.issue_lookup(number))
        except NextTagError as e:
            logger.warning(f"Could not read labels of issue #{number}: {e}")
            return BumpLevel.PATCH

        if any(label in self.escalation_labels for label in labels):
            logger.info(f"found enhancement issue #{number}")
            return BumpLevel.MINOR
        return BumpLevel.PATCH
