"""
Unit tests for the custom property dependency graph.

Tests resolution, edges, duplicate handling and circular dependency detection.
"""

import logging

import pytest

from core.graph.dependency_graph import DependencyGraph
from core.models.variables import CircularDependency, PropertyMetadata


def make_graph(*declarations):
    """Build a graph from (name, value) pairs"""
    return DependencyGraph([
        PropertyMetadata(name=name, raw_value=value, line=index + 1)
        for index, (name, value) in enumerate(declarations)
    ])


class TestResolution:
    """Test value resolution"""

    def test_plain_values_resolve_to_themselves(self):
        """Test properties without references keep their raw value"""
        graph = make_graph(("--a", "#111"), ("--b", "1px solid red"))

        for node in graph.nodes.values():
            assert node.resolved_value == node.raw_value
            assert node.is_substituted is False

    def test_single_reference(self):
        """Test a direct reference is substituted"""
        graph = make_graph(("--base", "#111"), ("--text", "var(--base)"))

        assert graph.get("--text").resolved_value == "#111"
        assert graph.get("--text").is_substituted is True

    def test_transitive_chain(self):
        """Test P -> Q -> R resolves transitively"""
        graph = make_graph(
            ("--p", "0 0 var(--q)"),
            ("--q", "calc(var(--r) * 2)"),
            ("--r", "4px"),
        )

        assert graph.get("--q").resolved_value == "calc(4px * 2)"
        assert graph.get("--p").resolved_value == "0 0 calc(4px * 2)"

    def test_forward_references(self):
        """Test references to properties declared later"""
        graph = make_graph(("--a", "var(--b)"), ("--b", "var(--c)"), ("--c", "red"))

        assert graph.get("--a").resolved_value == "red"

    def test_undeclared_reference_stays_literal(self):
        """Test references to unknown properties are not substituted"""
        graph = make_graph(("--a", "var(--missing) var(--b)"), ("--b", "2px"))

        node = graph.get("--a")
        assert node.resolved_value == "var(--missing) 2px"
        assert node.depends_on == ["--b"]
        assert graph.circular_dependencies == []

    def test_fallback_reference_substituted(self):
        """Test var(--x, fallback) is replaced by the resolved value"""
        graph = make_graph(("--gap", "8px"), ("--pad", "var(--gap, 4px)"))

        assert graph.get("--pad").resolved_value == "8px"

    def test_repeated_reference(self):
        """Test every occurrence of the same reference is replaced"""
        graph = make_graph(("--u", "2px"), ("--box", "var(--u) var(--u)"))

        assert graph.get("--box").resolved_value == "2px 2px"
        assert graph.get("--box").depends_on == ["--u"]

    def test_long_chain_does_not_recurse(self):
        """Test deep chains resolve without hitting the recursion limit"""
        depth = 5000
        declarations = [(f"--v{i}", f"var(--v{i + 1})") for i in range(depth)]
        declarations.append((f"--v{depth}", "1px"))

        graph = make_graph(*declarations)

        assert graph.get("--v0").resolved_value == "1px"


class TestEdges:
    """Test depends_on and dependents edges"""

    def test_edges_are_names(self):
        """Test edges point into the node map by name"""
        graph = make_graph(("--a", "var(--b) var(--c)"), ("--b", "1"), ("--c", "var(--b)"))

        assert graph.get("--a").depends_on == ["--b", "--c"]
        assert graph.get("--c").depends_on == ["--b"]
        assert graph.get("--b").dependents == {"--a", "--c"}
        assert graph.get("--c").dependents == {"--a"}

    def test_nodes_keep_declaration_order(self):
        """Test node map order follows declarations"""
        graph = make_graph(("--z", "var(--y)"), ("--y", "var(--x)"), ("--x", "0"))

        assert list(graph.nodes) == ["--z", "--y", "--x"]

    def test_names_with_prefix(self):
        """Test prefix lookup"""
        graph = make_graph(("--color-a", "1"), ("--space", "2"), ("--color-b", "3"))

        assert graph.names_with_prefix("--color") == ["--color-a", "--color-b"]
        assert graph.names_with_prefix("--") == ["--color-a", "--space", "--color-b"]

    def test_container_protocol(self):
        """Test len and membership"""
        graph = make_graph(("--a", "1"), ("--b", "2"))

        assert len(graph) == 2
        assert "--a" in graph
        assert "--c" not in graph
        assert graph.get("--c") is None


class TestDuplicates:
    """Test repeated declarations"""

    def test_last_declaration_wins(self):
        """Test a redeclared property keeps the last value"""
        graph = make_graph(("--a", "red"), ("--b", "var(--a)"), ("--a", "blue"))

        assert graph.get("--a").raw_value == "blue"
        assert graph.get("--b").resolved_value == "blue"
        assert len(graph) == 2


class TestCircularDependencies:
    """Test cycle detection"""

    def test_self_reference(self, caplog):
        """Test a self reference is one cycle and stays unresolved"""
        with caplog.at_level(logging.WARNING, logger="core.graph.dependency_graph"):
            graph = make_graph(("--a", "var(--a)"))

        assert graph.get("--a").resolved_value == "var(--a)"
        assert graph.circular_dependencies == [CircularDependency("--a", "--a")]
        assert graph.circular_dependencies[0].is_self_reference

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1

    def test_mutual_cycle(self, caplog):
        """Test a two-node cycle warns once and keeps var() text"""
        with caplog.at_level(logging.WARNING, logger="core.graph.dependency_graph"):
            graph = make_graph(("--a", "var(--b)"), ("--b", "var(--a)"))

        assert graph.get("--b").resolved_value == "var(--a)"
        assert graph.get("--a").resolved_value == "var(--a)"
        assert graph.circular_dependencies == [CircularDependency("--b", "--a")]

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "--a" in warnings[0].getMessage()
        assert "--b" in warnings[0].getMessage()

    def test_cycle_does_not_stop_other_references(self):
        """Test resolution continues past the cyclic reference"""
        graph = make_graph(("--a", "var(--a) var(--b)"), ("--b", "3px"))

        assert graph.get("--a").resolved_value == "var(--a) 3px"
        assert graph.get("--a").depends_on == ["--b"]

    def test_cycle_edge_is_not_linked(self):
        """Test no edge is added for the reference closing a cycle"""
        graph = make_graph(("--a", "var(--b)"), ("--b", "var(--a)"))

        assert graph.get("--b").depends_on == []
        assert graph.get("--a").depends_on == ["--b"]
        assert graph.get("--b").dependents == {"--a"}

    def test_three_node_cycle(self):
        """Test a longer cycle is reported once"""
        graph = make_graph(("--a", "var(--b)"), ("--b", "var(--c)"), ("--c", "var(--a)"))

        assert graph.circular_dependencies == [CircularDependency("--c", "--a")]
        assert graph.get("--c").resolved_value == "var(--a)"
        assert graph.get("--a").resolved_value == "var(--a)"


class TestPropertyMetadata:
    """Test property metadata validation"""

    def test_name_must_be_custom_property(self):
        """Test names without -- are rejected"""
        with pytest.raises(ValueError):
            PropertyMetadata(name="color", raw_value="red")
