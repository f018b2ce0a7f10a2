"""
Dependency graph analysis (kestrel.di.graph)
"""

import pytest

from kestrel.di import (
    CircularDependencyError,
    ComponentDescriptor,
    ComponentScope,
    DependencyGraph,
    token_of,
)


class A:
    pass


class B:
    pass


class C:
    pass


class D:
    pass


def _descriptors(*classes, scope=ComponentScope.SINGLETON):
    return {cls: ComponentDescriptor(identity=cls, scope=scope) for cls in classes}


class TestCycleDetection:

    def test_acyclic(self):
        graph = DependencyGraph({A: [B], B: [C], C: []})
        assert graph.find_cycle() is None
        graph.validate()

    def test_diamond_is_not_a_cycle(self):
        graph = DependencyGraph({A: [B, C], B: [D], C: [D], D: []})
        assert graph.find_cycle() is None

    def test_two_node_cycle(self):
        graph = DependencyGraph({A: [B], B: [A]})
        assert graph.find_cycle() == [A, B, A]

    def test_cycle_reported_with_full_path(self):
        graph = DependencyGraph({D: [A], A: [B], B: [C], C: [A]})
        with pytest.raises(CircularDependencyError) as exc_info:
            graph.validate()

        error = exc_info.value
        assert error.cycle == [token_of(A), token_of(B), token_of(C), token_of(A)]
        assert error.path == [token_of(D)] + error.cycle
        assert "Full path" in str(error)

    def test_self_loop(self):
        graph = DependencyGraph({A: [A]})
        assert graph.find_cycle() == [A, A]

    def test_cycle_reachable_only_from_later_root(self):
        graph = DependencyGraph({A: [], B: [C], C: [B]})
        assert graph.find_cycle() == [B, C, B]

    def test_deep_chain_does_not_recurse(self):
        nodes = [type(f"N{i}", (), {}) for i in range(5000)]
        edges = {nodes[i]: [nodes[i + 1]] for i in range(len(nodes) - 1)}
        graph = DependencyGraph(edges)
        assert graph.find_cycle() is None

        edges[nodes[-1]] = [nodes[0]]
        assert len(DependencyGraph(edges).find_cycle()) == 5001


class TestGraphViews:

    def test_nodes_include_unbound_descriptors(self):
        graph = DependencyGraph({A: [B]}, _descriptors(A, B, C))
        assert graph.nodes() == [A, B, C]

    def test_resolution_order(self):
        graph = DependencyGraph({A: [B, C], B: [C], C: []})
        assert graph.get_resolution_order() == [C, B, A]

    def test_resolution_order_rejects_cycles(self):
        with pytest.raises(CircularDependencyError):
            DependencyGraph({A: [B], B: [A]}).get_resolution_order()

    def test_resolution_order_from_roots(self):
        graph = DependencyGraph({A: [B], B: [], C: []})
        assert graph.get_resolution_order([C, A]) == [C, B, A]

    def test_lenient_resolution_order_skips_cycle_edges(self):
        graph = DependencyGraph({A: [B], B: [C, A], C: []})
        assert graph.get_resolution_order(strict=False) == [C, B, A]

    def test_export_dot(self):
        descriptors = _descriptors(A)
        descriptors.update(_descriptors(B, scope=ComponentScope.PROTOTYPE))
        dot = DependencyGraph({A: [B]}, descriptors).export_dot()

        assert dot.startswith("digraph DependencyGraph {")
        assert f'"{token_of(A)}" -> "{token_of(B)}";' in dot
        assert "lightblue" in dot
        assert "lightyellow" in dot
        assert dot.endswith("}")

    def test_tree_view(self):
        graph = DependencyGraph({A: [B], B: [C], C: []}, _descriptors(A, B, C))
        tree = graph.get_tree_view()

        lines = tree.splitlines()
        assert lines[0] == "├── A (singleton)"
        assert "B (singleton)" in lines[1]
        assert "C (singleton)" in lines[2]

    def test_tree_view_marks_cycles(self):
        graph = DependencyGraph({A: [B], B: [A]})
        assert "(circular)" in graph.get_tree_view(root=A)
