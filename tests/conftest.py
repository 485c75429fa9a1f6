"""Shared fixtures: an in-memory stand-in for the GitHub client."""

import logging

import pytest

from nexttag.domain.tag import Branch, Commit, Tag
from nexttag.exit_codes import AlreadyExistsError, IssueNotFoundError


class FakeRemote:
    """
    Holds tags, commits, issues and branches in memory and records the
    calls version resolution makes.
    """

    def __init__(self, tags=(), commits=(), issues=None, branches=None):
        self.tags = [Tag(*t) if isinstance(t, tuple) else t for t in tags]
        self.commits = [Commit(*c) if isinstance(c, tuple) else c for c in commits]
        self.issues = issues or {}
        self.branches = branches or {}
        self.created = []
        self.issue_calls = []
        self.commits_read = 0

    def list_tags(self):
        return list(self.tags)

    def iter_commits(self, sha):
        started = False
        for commit in self.commits:
            if commit.sha == sha:
                started = True
            if started:
                self.commits_read += 1
                yield commit

    def list_commits(self, sha):
        return list(self.iter_commits(sha))

    def get_issue_labels(self, number):
        self.issue_calls.append(number)
        if number not in self.issues:
            raise IssueNotFoundError(number)
        return list(self.issues[number])

    def find_branch_ref(self, branch_name):
        sha = self.branches.get(branch_name)
        if sha is None:
            return None
        return Branch.from_ref(f"refs/heads/{branch_name}", sha)

    def create_tag_ref(self, tag_name, sha):
        if any(tag.name == tag_name for tag in self.tags):
            raise AlreadyExistsError(tag_name)
        self.tags.append(Tag(tag_name, sha))
        self.created.append((tag_name, sha))


@pytest.fixture(autouse=True)
def nexttag_logger():
    """Undo configure_logging() between tests so caplog sees records."""
    logger = logging.getLogger("nexttag")
    handlers, propagate, level = logger.handlers[:], logger.propagate, logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.propagate = propagate
    logger.setLevel(level)


@pytest.fixture
def fake_remote():
    """Factory for FakeRemote instances."""
    return FakeRemote
