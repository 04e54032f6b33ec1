"""Tests for version parsing and ordering rules."""

import pytest

from versioning.ordering import compare_versions, is_prerelease, parse_version, version_key


class TestParseVersion:
    """Parsing tags into core/prerelease/build parts."""

    def test_full_version(self):
        parsed = parse_version("v1.2.3-rc.1+build.7")

        assert parsed.text == "1.2.3-rc.1+build.7"
        assert parsed.core == ("1", "2", "3")
        assert parsed.prerelease == "rc.1"
        assert parsed.build == "build.7"
        assert parsed.is_prerelease is True

    def test_plain_and_short_versions(self):
        assert parse_version("2.0.0").core == ("2", "0", "0")
        assert parse_version("v3").core == ("3",)
        assert parse_version("1.0").is_prerelease is False

    @pytest.mark.parametrize("tag", ["", "latest", "vnext", "release-1.0", "1.2.3-", "1.2.3+", ".1.2"])
    def test_unversioned_tags(self, tag):
        assert parse_version(tag) is None


class TestIsPrerelease:
    """Prerelease detection after stripping a leading v."""

    def test_dash_marks_prerelease(self):
        assert is_prerelease("v2.0.0-rc.1")
        assert is_prerelease("1.5.0-beta")

    def test_stable(self):
        assert not is_prerelease("v2.0.0")
        assert not is_prerelease("1.0.0+build-5")


class TestSimpleOrdering:
    """Default segment-wise comparison."""

    def test_numeric_segments_compare_as_numbers(self):
        assert compare_versions("1.10.0", "1.9.0") == 1
        assert compare_versions("1.9.0", "1.10.0") == -1
        assert compare_versions("2.0.0", "2.0.0") == 0

    def test_non_numeric_segments_compare_lexically(self):
        assert compare_versions("1.0.a", "1.0.b") == -1
        assert compare_versions("1.0.10a", "1.0.9a") == -1

    def test_more_segments_is_greater(self):
        assert compare_versions("1.0", "1.0.0") == -1
        assert compare_versions("1.0.0.1", "1.0.0") == 1

    def test_prerelease_not_ranked_below_release(self):
        assert compare_versions("2.0.0-rc.1", "2.0.0") == 0
        assert compare_versions("2.0.0-rc.1", "1.9.9") == 1
        assert compare_versions("2.0.0-rc.1", "2.0.1") == -1

    def test_prerelease_identifiers_compared_when_both_present(self):
        assert compare_versions("2.0.0-rc.2", "2.0.0-rc.1") == 1
        assert compare_versions("2.0.0-rc.10", "2.0.0-rc.9") == 1
        assert compare_versions("2.0.0-rc.1", "2.0.0-rc.1") == 0
        assert compare_versions("2.0.0-alpha", "2.0.0-beta") == -1
        assert compare_versions("2.0.0-rc", "2.0.0-rc.1") == -1

    def test_release_core_decides_before_prerelease(self):
        assert compare_versions("2.0.1-alpha", "2.0.0-rc.9") == 1

    def test_build_metadata_ignored(self):
        assert compare_versions("1.0.0+abc", "1.0.0") == 0

    def test_v_prefix_ignored(self):
        assert compare_versions("v1.2.0", "1.2.0") == 0

    def test_invalid_version_raises(self):
        with pytest.raises(ValueError):
            compare_versions("latest", "1.0.0")

    def test_sort_key(self):
        tags = ["1.2.0", "1.10.0", "1.9.1", "0.9.0"]
        assert sorted(tags, key=version_key(), reverse=True) == ["1.10.0", "1.9.1", "1.2.0", "0.9.0"]


class TestSemverOrdering:
    """Opt-in full semantic-version precedence."""

    def test_prerelease_below_release(self):
        assert compare_versions("2.0.0-rc.1", "2.0.0", "semver") == -1

    def test_prerelease_identifiers(self):
        assert compare_versions("2.0.0-rc.1", "2.0.0-rc.2", "semver") == -1
        assert compare_versions("2.0.0-rc.10", "2.0.0-rc.2", "semver") == 1

    def test_core_versions(self):
        assert compare_versions("1.10.0", "1.9.0", "semver") == 1
        assert compare_versions("1.0", "1.0.0", "semver") == 0

    def test_unknown_ordering_rejected(self):
        with pytest.raises(ValueError):
            compare_versions("1.0.0", "1.0.0", "calendar")
