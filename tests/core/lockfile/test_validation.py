"""Tests for LockSnapshot internal consistency checks and diffing."""

from __future__ import annotations

from depwalk.core.lockfile import LockedLibrary, LockSnapshot

from tests.helpers import make_snapshot


class TestValidate:
    """Internal consistency checks."""

    def test_consistent_snapshot(self) -> None:
        snap = make_snapshot(libraries={"Lib": ("2.0.0", {"Core": "*"}), "Core": ("1.0.0", {})})
        assert snap.validate() == []

    def test_cycles_are_not_errors(self) -> None:
        snap = make_snapshot(libraries={"A": ("1.0.0", {"B": "*"}), "B": ("1.0.0", {"A": "*"})})
        assert snap.validate() == []

    def test_dangling_dependency(self) -> None:
        snap = make_snapshot(libraries={"Lib": ("2.0.0", {"Core": "*"})})
        [error] = snap.validate()
        assert "'Core' which is not in the snapshot" in error

    def test_bad_versions_and_sources(self) -> None:
        snap = LockSnapshot()
        snap.add_library(LockedLibrary(name="Empty", version=""))
        snap.add_library(LockedLibrary(name="Bad", version="latest"))
        snap.add_library(LockedLibrary(name="Odd", version="1.0.0", source="ftp"))
        errors = snap.validate()
        assert "Library 'Empty' has empty version string" in errors
        assert "Library 'Bad' has invalid version 'latest'" in errors
        assert "Library 'Odd' has unknown source 'ftp'" in errors


class TestDiff:
    """Structured comparison of two snapshots."""

    def test_identical(self) -> None:
        snap = make_snapshot(libraries={"Lib": ("2.0.0", {})})
        assert snap.diff(snap) == {"added": [], "removed": [], "changed": []}

    def test_added_removed_changed(self) -> None:
        old = make_snapshot(libraries={"Lib": ("2.0.0", {}), "Gone": ("1.0.0", {})})
        new = make_snapshot(libraries={"Lib": ("2.1.0", {"Core": "*"}), "New": ("1.0.0", {})})
        diff = old.diff(new)
        assert diff["added"] == ["New"]
        assert diff["removed"] == ["Gone"]
        assert [(c["name"], c["field"]) for c in diff["changed"]] == [
            ("Lib", "version"),
            ("Lib", "dependencies"),
        ]
        assert diff["changed"][0]["old"] == "2.0.0"
        assert diff["changed"][0]["new"] == "2.1.0"
