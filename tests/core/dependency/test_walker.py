"""Tests for the breadth-first DependencyWalker."""

from __future__ import annotations

from depwalk.core.dependency import LibrarySource
from depwalk.core.dependency.walker import DependencyWalker
from depwalk.core.providers import ProviderChain

from tests.helpers import StaticProvider


def _walk(*providers, root=("App", "1.0.0"), profile="py312"):
    chain = ProviderChain(providers)
    return DependencyWalker(chain).walk(root[0], root[1], profile)


class TestWalk:
    """Basic breadth-first resolution."""

    def test_linear_chain(self) -> None:
        provider = StaticProvider({
            "App": ("1.0.0", {"Lib": ">=2.0.0"}),
            "Lib": ("2.1.0", {"Core": "*"}),
            "Core": ("0.5.0", {}),
        })
        graph = _walk(provider)
        assert [n.name for n in graph] == ["App", "Lib", "Core"]
        assert graph.get("Lib").version == "2.1.0"
        assert graph.cycles == []
        assert graph.conflicts == []

    def test_breadth_first_order(self) -> None:
        provider = StaticProvider({
            "App": ("1.0.0", {"A": "*", "B": "*"}),
            "A": ("1.0.0", {"A1": "*"}),
            "B": ("1.0.0", {}),
            "A1": ("1.0.0", {}),
        })
        assert [n.name for n in _walk(provider)] == ["App", "A", "B", "A1"]

    def test_missing_library_becomes_placeholder(self) -> None:
        provider = StaticProvider({"App": ("1.0.0", {"Lib": ">=2.0.0"})})
        graph = _walk(provider)
        lib = graph.get("Lib")
        assert lib.source is LibrarySource.UNRESOLVED
        assert lib.version == "2.0.0"
        assert [n.name for n in graph.unresolved()] == ["Lib"]

    def test_first_provider_wins(self) -> None:
        first = StaticProvider({"Lib": ("2.0.0", {})}, source=LibrarySource.PROJECT)
        second = StaticProvider(
            {"App": ("1.0.0", {"Lib": "*"}), "Lib": ("3.0.0", {})},
            source=LibrarySource.CACHE,
        )
        graph = _walk(first, second)
        assert graph.get("Lib").source is LibrarySource.PROJECT
        assert graph.get("Lib").version == "2.0.0"


class TestSharedNodes:
    """Names requested by several libraries."""

    def test_diamond_resolves_once(self) -> None:
        provider = StaticProvider({
            "App": ("1.0.0", {"A": "*", "B": "*"}),
            "A": ("1.0.0", {"D": "*"}),
            "B": ("1.0.0", {"D": "*"}),
            "D": ("1.0.0", {}),
        })
        graph = _walk(provider)
        assert provider.calls.count("D") == 1
        assert sorted(n.name for n in graph.dependents_of("D")) == ["A", "B"]

    def test_conflicting_constraints_keep_first_resolution(self) -> None:
        """Later requesters link to the node already chosen; a warning is recorded."""
        provider = StaticProvider({
            "App": ("1.0.0", {"A": "*", "B": "*"}),
            "A": ("1.0.0", {"Lib": "^1.0.0"}),
            "B": ("1.0.0", {"Lib": ">=2.0.0"}),
            "Lib": ("1.4.0", {}),
        })
        graph = _walk(provider)
        assert graph.get("Lib").version == "1.4.0"
        assert provider.calls.count("Lib") == 1
        assert len(graph.conflicts) == 1
        conflict = graph.conflicts[0]
        assert conflict.requester == "B"
        assert str(conflict.selected) == "Lib@1.4.0"

    def test_no_conflict_for_version_agnostic_sources(self) -> None:
        provider = StaticProvider(
            {
                "App": ("1.0.0", {"A": "*", "Lib": "^1.0.0"}),
                "A": ("1.0.0", {"Lib": ">=5.0.0"}),
                "Lib": ("1.0.0", {}),
            },
            source=LibrarySource.RUNTIME,
            honor_constraints=False,
        )
        assert _walk(provider).conflicts == []


class TestCycles:
    """Cyclic declarations terminate and are reported."""

    def test_self_dependency_recorded_not_recursed(self) -> None:
        provider = StaticProvider({"App": ("1.0.0", {"App": "*"})}, source=LibrarySource.PROJECT)
        graph = _walk(provider)
        assert len(graph) == 1
        assert provider.calls == ["App"]
        assert graph.cycles == [["App", "App"]]

    def test_mutual_cycle_terminates(self) -> None:
        provider = StaticProvider({
            "App": ("1.0.0", {"A": "*"}),
            "A": ("1.0.0", {"B": "*"}),
            "B": ("1.0.0", {"A": "*"}),
        })
        graph = _walk(provider)
        assert [n.name for n in graph] == ["App", "A", "B"]
        assert graph.cycles == [["A", "B", "A"]]

    def test_cycle_through_unresolved_root_dependency(self) -> None:
        provider = StaticProvider({"App": ("1.0.0", {"Ghost": "*", "App": "*"})})
        graph = _walk(provider)
        assert graph.get("Ghost").source is LibrarySource.UNRESOLVED
        assert graph.get("Ghost").version == "0.0.0"
        assert graph.cycles == [["App", "App"]]

    def test_deep_chain_walks_without_recursion_limit(self) -> None:
        depth = 2500
        libraries = {"App": ("1.0.0", {"Lib0": "*"})}
        for i in range(depth):
            deps = {f"Lib{i + 1}": "*"} if i + 1 < depth else {}
            libraries[f"Lib{i}"] = ("1.0.0", deps)
        graph = _walk(StaticProvider(libraries))
        assert len(graph) == depth + 1
        assert graph.cycles == []
