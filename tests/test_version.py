"""Tests for dotted version comparison."""

import itertools

import pytest

from update_svc.extension.version import compare_versions, is_newer


class TestCompareVersions:
    @pytest.mark.parametrize("v1, v2, expected", [
        ("1.0.0", "1.0.0", 0),
        ("1.1", "1.2", -1),
        ("1.2", "1.1", 1),
        ("0.5", "1.0.0", -1),
        ("1.0.10", "1.0.9", 1),
        ("2", "10", -1),
        ("4.7.0.90", "4.7.0.100", -1),
    ])
    def test_numeric_ordering(self, v1, v2, expected):
        assert compare_versions(v1, v2) == expected

    def test_trailing_components_are_ignored(self):
        """Only the shared prefix is compared; clients depend on this."""
        assert compare_versions("1.2.0", "1.2") == 0
        assert compare_versions("1.0.1", "1.0") == 0
        assert compare_versions("1.0", "1.0.1") == 0
        assert compare_versions("1", "1.9.9.9") == 0

    def test_non_numeric_components_count_as_zero(self):
        assert compare_versions("1.x", "1.0") == 0
        assert compare_versions("abc", "0") == 0
        assert compare_versions("1.beta", "1.1") == -1
        assert compare_versions("", "1.0.0") == -1
        assert compare_versions("2\n", "1") == -1
        assert compare_versions("1.2 ", "1.1") == -1

    def test_signed_components(self):
        assert compare_versions("+1", "1") == 0
        assert compare_versions("-1", "0") == -1

    def test_antisymmetric(self):
        versions = ["0", "0.5", "1.0.0", "1.0", "1.1", "1.2.0", "2.0.0.1", "junk", "10.0"]
        for a, b in itertools.product(versions, repeat=2):
            assert compare_versions(a, b) == -compare_versions(b, a)


class TestIsNewer:
    def test_strictly_newer(self):
        assert is_newer("1.0.0", "0.5")
        assert not is_newer("1.0.0", "1.0.0")
        assert not is_newer("1.0.0", "2.0")
