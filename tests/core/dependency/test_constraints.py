"""Tests for semantic versions, version constraints and library identities."""

from __future__ import annotations

import pytest

from depwalk.core.dependency import (
    LibraryIdentity,
    LibraryRange,
    VersionConstraint,
    is_version,
    normalize_version,
    parse_version,
)


class TestParseVersion:
    """SemVer 2.0.0 precedence rules."""

    def test_numeric_ordering_not_lexical(self) -> None:
        assert parse_version("10.0.0") > parse_version("9.0.0")

    def test_prerelease_sorts_below_release(self) -> None:
        assert parse_version("1.0.0-alpha") < parse_version("1.0.0")

    def test_prerelease_identifiers(self) -> None:
        assert parse_version("1.0.0-alpha.1") < parse_version("1.0.0-alpha.beta")
        assert parse_version("1.0.0-alpha.2") < parse_version("1.0.0-alpha.10")

    def test_build_metadata_ignored(self) -> None:
        assert parse_version("1.0.0+build.5") == parse_version("1.0.0")

    def test_invalid_version_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid semantic version"):
            parse_version("1.0.x")

    def test_is_version(self) -> None:
        assert is_version("2.0.0")
        assert not is_version(">=2.0.0")
        assert not is_version("latest")

    def test_short_versions_fill_missing_parts(self) -> None:
        assert is_version("1.0")
        assert is_version("2")
        assert parse_version("1.0") == parse_version("1.0.0")
        assert normalize_version("1.0") == "1.0.0"
        assert normalize_version("2") == "2.0.0"
        assert normalize_version("1.2-beta+7") == "1.2.0-beta+7"
        assert normalize_version("1.2.3") == "1.2.3"

    def test_normalize_rejects_non_versions(self) -> None:
        with pytest.raises(ValueError, match="Invalid semantic version"):
            normalize_version("v1")


class TestVersionConstraint:
    """Operator semantics and manifest value normalization."""

    @pytest.mark.parametrize(
        ("raw", "version", "expected"),
        [
            ("==1.0.0", "1.0.0", True),
            ("==1.0.0", "1.0.1", False),
            ("!=1.0.0", "1.0.1", True),
            (">=1.2.0", "1.10.0", True),
            ("<2.0.0", "2.0.0", False),
            (">=1.0.0,<2.0.0", "1.9.9", True),
            (">=1.0.0,<2.0.0", "2.0.0", False),
            ("^1.2.0", "1.9.0", True),
            ("^1.2.0", "2.0.0", False),
            ("^0.2.0", "0.3.0", False),
            ("~1.2.0", "1.2.5", True),
            ("~1.2.0", "1.3.0", False),
            ("*", "0.0.1", True),
        ],
    )
    def test_satisfies(self, raw: str, version: str, expected: bool) -> None:
        assert VersionConstraint(raw).satisfies(version) is expected

    def test_bare_version_is_minimum(self) -> None:
        constraint = VersionConstraint.from_spec("2.0.0")
        assert constraint.raw == ">=2.0.0"
        assert constraint.satisfies("2.5.0")
        assert not constraint.satisfies("1.9.0")

    def test_two_part_bare_version_is_normalized(self) -> None:
        constraint = VersionConstraint.from_spec("2.0")
        assert constraint.raw == ">=2.0.0"
        assert constraint.satisfies("2.0.0")
        assert not constraint.satisfies("1.9.9")

    def test_empty_spec_is_wildcard(self) -> None:
        assert VersionConstraint.from_spec(None).raw == "*"
        assert VersionConstraint.from_spec("  ").raw == "*"

    def test_malformed_spec_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid constraint atom"):
            VersionConstraint.from_spec("about 2")

    def test_exact(self) -> None:
        assert VersionConstraint.exact("1.0.0").satisfies("1.0.0")
        assert not VersionConstraint.exact("1.0.0").satisfies("1.0.1")

    def test_floor_picks_lowest_lower_bound(self) -> None:
        assert VersionConstraint(">=1.5.0,<2.0.0").floor() == "1.5.0"
        assert VersionConstraint("^3.1.0").floor() == "3.1.0"
        assert VersionConstraint("^2.0").floor() == "2.0.0"

    def test_floor_absent_for_upper_bounds_only(self) -> None:
        assert VersionConstraint("<2.0.0").floor() is None
        assert VersionConstraint("*").floor() is None


class TestLibraryIdentity:
    """Identity equality and ordering."""

    def test_ordering_by_name_then_version(self) -> None:
        ids = [
            LibraryIdentity("Lib", "10.0.0"),
            LibraryIdentity("Abc", "3.0.0"),
            LibraryIdentity("Lib", "9.0.0"),
        ]
        assert [str(i) for i in sorted(ids)] == ["Abc@3.0.0", "Lib@9.0.0", "Lib@10.0.0"]

    def test_equality_and_hash(self) -> None:
        assert LibraryIdentity("Lib", "1.0.0") == LibraryIdentity("Lib", "1.0.0")
        assert len({LibraryIdentity("Lib", "1.0.0"), LibraryIdentity("Lib", "1.0.0")}) == 1

    def test_range_str(self) -> None:
        assert str(LibraryRange("Lib", VersionConstraint(">=2.0.0"))) == "Lib >=2.0.0"
        assert str(LibraryRange("Lib")) == "Lib"
