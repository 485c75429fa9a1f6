"""
Release policy for nexttag.

A release policy says which branches publish plain releases (everything
else gets pre-release tags scoped to the branch) and which issue labels
turn a ``fixes #N`` commit into a minor release.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Tuple, Union

from ..exit_codes import ConfigError

DEFAULT_ISSUE_LABELS = frozenset({"enhancement"})

Patterns = Union[str, Iterable[str], None]


def split_list(value: Patterns) -> List[str]:
    """Split a comma-separated option into trimmed, non-empty entries."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [item.strip() for item in value if item and item.strip()]


def is_release_branch(branch_name: str, patterns: Patterns) -> bool:
    """
    Check whether a branch matches any release-branch pattern.

    Patterns are regular expressions searched anywhere in the branch name,
    so ``main`` also matches ``maintenance``; anchor with ``^main$`` for an
    exact match. An empty pattern list never matches.

    Args:
        branch_name: Full branch name, e.g. ``release/2.x``
        patterns: Comma-separated string or iterable of regexes

    Raises:
        ConfigError: If a pattern is not a valid regular expression
    """
    for pattern in split_list(patterns):
        try:
            if re.search(pattern, branch_name):
                return True
        except re.error as e:
            raise ConfigError(f"invalid release branch pattern {pattern!r}: {e}") from e
    return False


@dataclass(frozen=True)
class ReleasePolicy:
    """
    Read-only configuration for one resolution run.

    Attributes:
        release_branch_patterns: Regexes naming release branches
        issue_escalation_labels: Issue labels that escalate a fix to minor
    """

    release_branch_patterns: Tuple[str, ...] = ()
    issue_escalation_labels: FrozenSet[str] = DEFAULT_ISSUE_LABELS

    @classmethod
    def from_options(
        cls,
        release_branches: Patterns = None,
        issue_labels: Patterns = None
    ) -> 'ReleasePolicy':
        """
        Build a policy from the comma-separated option values.

        An empty label list falls back to ``enhancement``. Patterns are
        compiled once here so a bad regex fails before any remote call.
        """
        patterns = tuple(split_list(release_branches))
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ConfigError(f"invalid release branch pattern {pattern!r}: {e}") from e

        labels = frozenset(split_list(issue_labels)) or DEFAULT_ISSUE_LABELS
        return cls(release_branch_patterns=patterns, issue_escalation_labels=labels)

    def is_release_branch(self, branch_name: str) -> bool:
        return is_release_branch(branch_name, self.release_branch_patterns)

    def escalates(self, labels: Iterable[str]) -> bool:
        """True if any label is one of the escalation labels."""
        return any(label in self.issue_escalation_labels for label in labels)

    def to_dict(self) -> dict:
        return {
            'release_branch_patterns': list(self.release_branch_patterns),
            'issue_escalation_labels': sorted(self.issue_escalation_labels),
        }
