"""Versions, version constraints, library identities and dependency edges.

This module provides the foundational data types for declaring version
requirements and inter-library relationships in the dependency graph.

Constraint semantics follow SemVer conventions with support for exact match
(``==``), range (``>=``, ``<=``, ``>``, ``<``), not-equal (``!=``), caret
(``^``), tilde (``~``), wildcard (``*``), and compound comma-separated
constraints. A bare version as written in a manifest (``2.0.0``) is a
minimum version, equivalent to ``>=2.0.0``.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Version comparison utilities
# ---------------------------------------------------------------------------

# Minor and patch may be omitted ("1.0", "2"); they default to zero.
_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)(?:\.(?P<minor>0|[1-9]\d*)(?:\.(?P<patch>0|[1-9]\d*))?)?"
    r"(?:-(?P<pre>[0-9A-Za-z\-.]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-.]+))?$"
)

_VERSION_FRAGMENT = (
    r"(?:0|[1-9]\d*)(?:\.(?:0|[1-9]\d*)(?:\.(?:0|[1-9]\d*))?)?"
    r"(?:-[0-9A-Za-z\-.]+)?(?:\+[0-9A-Za-z\-.]+)?"
)

VersionKey = tuple


def is_version(text: str) -> bool:
    """Return True if *text* is a well-formed semantic version."""
    return _SEMVER_RE.match(text.strip()) is not None


def parse_version(version: str) -> VersionKey:
    """Parse a semantic version string into a totally ordered key.

    Follows SemVer 2.0.0 precedence (section 11): build metadata is ignored,
    a pre-release version sorts below the associated normal version, and
    pre-release identifiers compare numerically when numeric and lexically
    otherwise, numeric identifiers sorting first.

    Args:
        version: Semantic version string (e.g., "1.2.3", "0.1.0-alpha.1").

    Returns:
        A tuple usable with the ordinary comparison operators.

    Raises:
        ValueError: If the string does not match semantic version format.
    """
    m = _SEMVER_RE.match(version.strip())
    if not m:
        raise ValueError(f"Invalid semantic version: {version!r}")
    core = (
        int(m.group("major")),
        int(m.group("minor") or 0),
        int(m.group("patch") or 0),
    )
    pre = m.group("pre")
    if pre is None:
        return core + (1, ())
    idents = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in pre.split(".")
    )
    return core + (0, idents)


def normalize_version(version: str) -> str:
    """Return *version* with omitted minor and patch parts filled in.

    ``"1.0"`` becomes ``"1.0.0"`` and ``"2"`` becomes ``"2.0.0"``; pre-release
    and build suffixes are kept.

    Raises:
        ValueError: If the string is not a version.
    """
    m = _SEMVER_RE.match(version.strip())
    if not m:
        raise ValueError(f"Invalid semantic version: {version!r}")
    text = f"{m.group('major')}.{m.group('minor') or 0}.{m.group('patch') or 0}"
    if m.group("pre"):
        text += f"-{m.group('pre')}"
    if m.group("build"):
        text += f"+{m.group('build')}"
    return text


# ---------------------------------------------------------------------------
# VersionConstraint: Declarative version requirement
# ---------------------------------------------------------------------------

# Regex to tokenize a single constraint atom like ">=1.2.3" or "==0.1.0"
_CONSTRAINT_ATOM_RE = re.compile(
    r"^\s*(?P<op>==|!=|>=|<=|>|<|\^|~)\s*(?P<ver>" + _VERSION_FRAGMENT + r")\s*$"
)

# Operators whose version is a lower bound the constraint admits
_FLOOR_OPS = frozenset({"==", ">=", "^", "~"})


@dataclass(frozen=True)
class VersionConstraint:
    """A version constraint specification.

    Supports:
    - Exact match: ``==1.0.0``
    - Not-equal: ``!=1.0.0``
    - Minimum (inclusive): ``>=1.0.0``
    - Maximum (inclusive): ``<=2.0.0``
    - Minimum (exclusive): ``>1.0.0``
    - Maximum (exclusive): ``<2.0.0``
    - Caret / tilde: ``^1.2.0`` / ``~1.2.0``
    - Wildcard (any version): ``*``
    - Compound (comma-separated, all must hold): ``>=1.0.0,<2.0.0``

    Attributes:
        raw: The normalized constraint string (e.g., ">=1.0.0,<2.0.0").
    """

    raw: str

    @classmethod
    def from_spec(cls, spec: str | None) -> VersionConstraint:
        """Build a constraint from a manifest dependency value.

        ``None`` and the empty string mean "any version"; a bare version
        means "this version or newer".

        Raises:
            ValueError: If *spec* is neither a version nor a valid constraint.
        """
        if spec is None or not str(spec).strip():
            return cls("*")
        text = str(spec).strip()
        if is_version(text):
            return cls(f">={normalize_version(text)}")
        constraint = cls(text)
        constraint.atoms()  # validate eagerly
        return constraint

    @classmethod
    def exact(cls, version: str) -> VersionConstraint:
        """Return a constraint admitting only *version*."""
        return cls(f"=={version}")

    def atoms(self) -> list[tuple[str, str]]:
        """Split the constraint into ``(operator, version)`` pairs.

        Raises:
            ValueError: If any atom is malformed.
        """
        stripped = self.raw.strip()
        if stripped == "*":
            return []
        result: list[tuple[str, str]] = []
        for atom in (a.strip() for a in stripped.split(",")):
            if not atom:
                continue
            m = _CONSTRAINT_ATOM_RE.match(atom)
            if not m:
                raise ValueError(f"Invalid constraint atom: {atom!r}")
            result.append((m.group("op"), m.group("ver")))
        return result

    def satisfies(self, version: str) -> bool:
        """Check whether a version string satisfies this constraint.

        For compound constraints (comma-separated), ALL atoms must be satisfied
        (conjunction semantics).

        Raises:
            ValueError: If *version* is not a valid semantic version.
        """
        ver_key = parse_version(version)
        return all(
            self._atom_satisfies(op, parse_version(target), ver_key)
            for op, target in self.atoms()
        )

    def floor(self) -> str | None:
        """Return the lowest version named as a lower bound, if any."""
        floors = [ver for op, ver in self.atoms() if op in _FLOOR_OPS]
        if not floors:
            return None
        return normalize_version(min(floors, key=parse_version))

    @staticmethod
    def _atom_satisfies(op: str, target: VersionKey, ver: VersionKey) -> bool:
        """Evaluate a single constraint atom against a parsed version key."""
        if op == "==":
            return ver == target
        elif op == "!=":
            return ver != target
        elif op == ">=":
            return ver >= target
        elif op == "<=":
            return ver <= target
        elif op == ">":
            return ver > target
        elif op == "<":
            return ver < target
        elif op == "^":
            # Caret: same major, >= target. If major is 0, same major.minor.
            if target[0] == 0:
                return ver[:2] == target[:2] and ver >= target
            return ver[0] == target[0] and ver >= target
        elif op == "~":
            # Tilde: same major.minor, patch >= target patch.
            return ver[:2] == target[:2] and ver >= target
        else:  # pragma: no cover
            raise ValueError(f"Unknown operator: {op!r}")

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"VersionConstraint({self.raw!r})"


# ---------------------------------------------------------------------------
# LibraryIdentity & LibraryRange: Nodes and edges of the dependency graph
# ---------------------------------------------------------------------------


@functools.total_ordering
@dataclass(frozen=True)
class LibraryIdentity:
    """A concrete library: a name at one semantic version.

    Ordering is by name, then by SemVer precedence of the version, so that
    ``Lib@10.0.0`` sorts after ``Lib@9.0.0``.
    """

    name: str
    version: str

    @property
    def sort_key(self) -> tuple[str, VersionKey]:
        return (self.name, parse_version(self.version))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LibraryIdentity):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class LibraryRange:
    """A directed dependency edge: "requires ``name`` satisfying ``constraint``".

    Attributes:
        name: The name of the required library.
        constraint: Version constraint the resolved library should satisfy.
    """

    name: str
    constraint: VersionConstraint = VersionConstraint("*")

    def __str__(self) -> str:
        if self.constraint.raw == "*":
            return self.name
        return f"{self.name} {self.constraint.raw}"
