"""Tests for commit directive scanning."""

from unittest.mock import MagicMock

import pytest
import requests

from nexttag.domain import BumpLevel, Commit
from nexttag.exit_codes import RemoteUnavailableError
from nexttag.infra.github_client import GitHubClient
from nexttag.services.directives import DIRECTIVES, CommitDirectiveScanner, match_directive


def commits(*messages):
    """Newest-first commits c0, c1, ... with the given messages."""
    return [Commit(f"c{i}", message) for i, message in enumerate(messages)]


class Lookup:
    """Issue lookup recording the issue numbers asked for."""

    def __init__(self, issues=None, error=None):
        self.issues = issues or {}
        self.error = error
        self.calls = []

    def __call__(self, number):
        self.calls.append(number)
        if self.error:
            raise self.error
        return self.issues.get(number, [])


class TestDirectiveTable:

    def test_precedence_is_table_order(self):
        """Test directive precedence follows table order"""
        assert [d.name for d in DIRECTIVES] == ["wip", "major", "minor", "patch", "fix"]

    def test_match_first_directive(self):
        """Test the highest precedence marker in a message wins"""
        directive, _ = match_directive("#patch #minor")
        assert directive.name == "minor"

    def test_markers_need_word_boundary(self):
        """Test markers must end at a word boundary"""
        assert match_directive("#majority rules") is None
        assert match_directive("#patches") is None

    def test_fix_reference(self):
        """Test fix and fixes references capture the issue number"""
        directive, match = match_directive("this fixes #42 for good")
        assert directive.name == "fix"
        assert match.group(1) == "42"

    def test_no_directive(self):
        """Test messages without markers"""
        assert match_directive("refactor the parser") is None


class TestScan:

    def test_empty_history(self):
        """Test missing or empty history gives NONE"""
        scanner = CommitDirectiveScanner()
        assert scanner.scan([]) is BumpLevel.NONE
        assert scanner.scan(None) is BumpLevel.NONE

    def test_no_directives(self):
        """Test history without markers gives NONE"""
        assert CommitDirectiveScanner().scan(commits("docs", "tidy")) is BumpLevel.NONE

    def test_minor_beats_patch_in_same_commit(self):
        """Test #minor wins over #patch in one message"""
        assert CommitDirectiveScanner().scan(commits("#minor and #patch")) is BumpLevel.MINOR

    def test_minor_not_downgraded(self):
        """Test a later #patch does not lower a minor level"""
        scanner = CommitDirectiveScanner()
        assert scanner.scan(commits("#minor", "#patch")) is BumpLevel.MINOR
        assert scanner.scan(commits("#patch", "#minor")) is BumpLevel.MINOR

    def test_major_is_absorbing_and_stops(self):
        """Test #major ends the scan"""
        consumed = []

        def history():
            for commit in commits("#patch", "#minor", "#major", "#patch"):
                consumed.append(commit.sha)
                yield commit

        assert CommitDirectiveScanner().scan(history()) is BumpLevel.MAJOR
        assert consumed == ["c0", "c1", "c2"]

    def test_wip_commit_ignored(self):
        """Test #wip commits are skipped entirely"""
        scanner = CommitDirectiveScanner()
        assert scanner.scan(commits("#wip #major", "#patch")) is BumpLevel.PATCH
        assert scanner.scan(commits("#wip", "#wip")) is BumpLevel.NONE

    def test_stops_at_reference_commit(self):
        """Test the scan stops before the reference commit"""
        history = commits("#patch", "#major", "#major")
        assert CommitDirectiveScanner().scan(history, stop_at_sha="c1") is BumpLevel.PATCH

    def test_reference_commit_is_head(self):
        """Test nothing is scanned when the head is the reference commit"""
        history = commits("#major")
        assert CommitDirectiveScanner().scan(history, stop_at_sha="c0") is BumpLevel.NONE

    def test_missing_reference_scans_everything(self):
        """Test an unknown reference sha scans the whole history"""
        history = commits("tidy", "#minor")
        assert CommitDirectiveScanner().scan(history, stop_at_sha="nope") is BumpLevel.MINOR


class TestIssueEscalation:

    def test_fix_is_patch(self):
        """Test a fix without escalation labels is a patch"""
        lookup = Lookup({7: ["bug"]})
        scanner = CommitDirectiveScanner(lookup, {"enhancement"})
        assert scanner.scan(commits("fix #7")) is BumpLevel.PATCH
        assert lookup.calls == [7]

    def test_fix_escalates_with_label(self):
        """Test a fix of an enhancement issue is a minor"""
        lookup = Lookup({42: ["enhancement"]})
        scanner = CommitDirectiveScanner(lookup, {"enhancement"})
        assert scanner.scan(commits("fixes #42")) is BumpLevel.MINOR

    def test_fix_after_patch_still_escalates(self):
        """Test a fix can escalate after an earlier #patch"""
        lookup = Lookup({3: ["feature"]})
        scanner = CommitDirectiveScanner(lookup, {"feature"})
        assert scanner.scan(commits("#patch", "fix #3")) is BumpLevel.MINOR

    def test_no_lookup_once_minor(self):
        """Test issues are not read once the level is minor"""
        lookup = Lookup({5: ["enhancement"]})
        scanner = CommitDirectiveScanner(lookup, {"enhancement"})
        assert scanner.scan(commits("#minor", "fixes #5")) is BumpLevel.MINOR
        assert lookup.calls == []

    def test_zero_issue_ignored(self):
        """Test fix #0 is ignored"""
        lookup = Lookup()
        scanner = CommitDirectiveScanner(lookup, {"enhancement"})
        assert scanner.scan(commits("fix #0")) is BumpLevel.NONE
        assert lookup.calls == []

    def test_malformed_reference_ignored(self):
        """Test malformed issue references are ignored"""
        lookup = Lookup()
        scanner = CommitDirectiveScanner(lookup, {"enhancement"})
        assert scanner.scan(commits("fix #12abc", "fixes#3")) is BumpLevel.NONE
        assert lookup.calls == []

    @pytest.mark.parametrize("error", [
        RemoteUnavailableError("boom"),
        RemoteUnavailableError("server error", status_code=502),
    ])
    def test_lookup_failure_degrades_to_patch(self, error):
        """Test lookup failures count as no escalation"""
        scanner = CommitDirectiveScanner(Lookup(error=error), {"enhancement"})
        assert scanner.scan(commits("fixes #9", "docs")) is BumpLevel.PATCH

    def test_without_lookup(self):
        """Test a scanner without lookup treats fixes as patches"""
        assert CommitDirectiveScanner().scan(commits("fixes #9")) is BumpLevel.PATCH

    def test_unreadable_issue_response_degrades_to_patch(self):
        """An issue body that is not JSON counts as no escalation."""
        response = MagicMock(status_code=200, headers={}, links={})
        response.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        session = requests.Session()
        session.request = MagicMock(return_value=response)
        client = GitHubClient("octo", "widgets", token="x", session=session)

        scanner = CommitDirectiveScanner(client.get_issue_labels, {"enhancement"})

        assert scanner.scan([Commit("c0", "fixes #9")]) is BumpLevel.PATCH
        assert session.request.call_count == 1
