"""Tests for TagIndex: sorting, filtering and latest-tag selection."""

from nexttag.domain import ReleasePolicy, Tag
from nexttag.services.tag_index import TagIndex

POLICY = ReleasePolicy.from_options("^main$,^master$")


def index_of(*names):
    return TagIndex([Tag(name, f"sha-{name}") for name in names])


class TestValidTags:

    def test_filters_and_sorts(self):
        """Test invalid tags are dropped and the rest sorted by precedence"""
        index = index_of("v1.10.0", "nightly", "1.2.0", "v1.2.0-rc.1", "release-1")
        assert [t.name for t in index.valid_tags()] == ["v1.2.0-rc.1", "1.2.0", "v1.10.0"]

    def test_ties_keep_fetch_order(self):
        """Test equal versions keep fetch order"""
        index = TagIndex([Tag("v1.0.0", "a"), Tag("1.0.0", "b"), Tag("0.9.0", "c")])
        assert [t.commit_sha for t in index.valid_tags()] == ["c", "a", "b"]

    def test_contains_includes_non_version_tags(self):
        """Test existence checks include non-version tags"""
        index = index_of("nightly", "1.0.0")
        assert index.contains("nightly")
        assert index.contains("1.0.0")
        assert not index.contains("v1.0.0")
        assert len(index) == 2


class TestLatest:

    def test_empty_index(self):
        """Test an empty index has no latest tag"""
        assert TagIndex([]).latest("main", POLICY) is None
        assert TagIndex([]).latest("beta", POLICY, include_prereleases=False) is None

    def test_all_invalid(self):
        """Test an index of non-version tags has no latest tag"""
        index = index_of("nightly", "latest")
        assert index.latest("main", POLICY) is None
        assert index.latest("feature", POLICY) is None

    def test_release_branch_gets_global_latest(self):
        """Test release branches get the global latest tag"""
        index = index_of("1.0.0", "1.1.0-beta.0")
        assert index.latest("main", POLICY).name == "1.1.0-beta.0"

    def test_latest_release_is_returned_to_any_branch(self):
        """Test a latest plain release applies to any branch"""
        index = index_of("1.0.0-beta.3", "1.0.0")
        assert index.latest("beta", POLICY).name == "1.0.0"

    def test_non_release_branch_uses_own_channel(self):
        """Test other branches use their own channel"""
        index = index_of("1.0.0", "1.1.0-beta.0", "1.2.0-alpha.0")
        assert index.latest("beta", POLICY).name == "1.1.0-beta.0"
        assert index.latest("alpha", POLICY).name == "1.2.0-alpha.0"

    def test_channel_without_tags(self):
        """Test a channel without tags"""
        index = index_of("1.0.0", "1.1.0-beta.0")
        assert index.latest("gamma", POLICY) is None

    def test_exclude_prereleases(self):
        """Test the latest plain release"""
        index = index_of("1.0.0", "v1.1.0", "1.2.0-beta.0")
        assert index.latest("beta", POLICY, include_prereleases=False).name == "v1.1.0"

    def test_exclude_prereleases_none_left(self):
        """Test no plain release among pre-releases"""
        index = index_of("0.1.0-beta.0")
        assert index.latest("main", POLICY, include_prereleases=False) is None

    def test_beta_scenario(self):
        """Test the beta channel scenario"""
        index = index_of("1.0.0", "1.1.0-beta.0")
        assert index.latest("beta", POLICY) == Tag("1.1.0-beta.0", "sha-1.1.0-beta.0")

    def test_nested_branch_uses_last_segment_as_channel(self):
        """Test nested branches use their last segment as channel"""
        index = index_of("1.0.0", "1.1.0-beta.0", "1.2.0-alpha.0")
        assert index.latest("feature/beta", POLICY).name == "1.1.0-beta.0"

    def test_release_pattern_matches_full_branch_name(self):
        """Test release patterns see the full branch name"""
        policy = ReleasePolicy.from_options("^main$,^release/.*$")
        index = index_of("1.0.0", "1.1.0-beta.0")
        assert index.latest("release/2.x", policy).name == "1.1.0-beta.0"
        # Without the prefix, 2.x is a channel with no tags of its own
        assert index.latest("2.x", policy) is None
