"""
Graph analysis and cycle detection for the container.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Set

from .core import ComponentDescriptor, token_of
from .errors import CircularDependencyError

_DONE = object()


class DependencyGraph:
    """
    Analyse the dependency edges recorded during binding.

    Uses an iterative depth-first search with ``visited`` and ``in_stack``
    marker sets, so deep graphs never hit the recursion limit.
    """

    def __init__(
        self,
        edges: Mapping[type, Iterable[type]],
        descriptors: Optional[Mapping[type, ComponentDescriptor]] = None,
    ):
        self.adj_list: Dict[type, List[type]] = {
            node: list(deps) for node, deps in edges.items()
        }
        self.descriptors: Dict[type, ComponentDescriptor] = dict(descriptors or {})

    def nodes(self) -> List[type]:
        """Every node: recorded sources, their targets, then unbound descriptors."""
        seen: Dict[type, None] = {}
        for node, deps in self.adj_list.items():
            seen[node] = None
            for dep in deps:
                seen[dep] = None
        for node in self.descriptors:
            seen[node] = None
        return list(seen)

    def find_cycle(self) -> Optional[List[type]]:
        """
        Find one cycle.

        Every recorded node is a traversal root, not only singletons.

        Returns:
            The full DFS path ending on the repeated node, or None
        """
        visited: Set[type] = set()
        in_stack: Set[type] = set()

        for root in self.adj_list:
            if root in visited:
                continue

            path = [root]
            pending = [iter(self.adj_list.get(root, ()))]
            visited.add(root)
            in_stack.add(root)

            while pending:
                dep = next(pending[-1], _DONE)

                if dep is _DONE:
                    # Subtree drained: leaves the stack, stays visited
                    in_stack.discard(path.pop())
                    pending.pop()
                    continue

                if dep in in_stack:
                    return path + [dep]

                if dep in visited:
                    continue

                visited.add(dep)
                in_stack.add(dep)
                path.append(dep)
                pending.append(iter(self.adj_list.get(dep, ())))

        return None

    def validate(self) -> None:
        """
        Raises:
            CircularDependencyError: If any cycle exists
        """
        path = self.find_cycle()
        if path is None:
            return

        start = path.index(path[-1])
        raise CircularDependencyError(
            cycle=[token_of(t) for t in path[start:]],
            path=[token_of(t) for t in path],
        )

    def get_resolution_order(
        self,
        roots: Optional[Iterable[type]] = None,
        *,
        strict: bool = True,
    ) -> List[type]:
        """
        Dependencies-first (post-order) listing of the graph.

        Args:
            roots: Traversal roots, in order; defaults to every node
            strict: Validate first; when False, an edge closing a cycle is
                skipped and the order is only dependencies-first outside it

        Raises:
            CircularDependencyError: If strict and a cycle exists
        """
        if strict:
            self.validate()

        order: List[type] = []
        entered: Set[type] = set()

        for root in (self.nodes() if roots is None else roots):
            if root in entered:
                continue

            entered.add(root)
            stack = [(root, iter(self.adj_list.get(root, ())))]
            while stack:
                current, deps = stack[-1]
                dep = next(deps, _DONE)
                if dep is _DONE:
                    stack.pop()
                    order.append(current)
                elif dep not in entered:
                    entered.add(dep)
                    stack.append((dep, iter(self.adj_list.get(dep, ()))))

        return order

    def export_dot(self) -> str:
        """
        Export graph as Graphviz DOT format.

        Returns:
            DOT string
        """
        lines = ["digraph DependencyGraph {"]
        lines.append("  rankdir=LR;")
        lines.append("  node [shape=box];")

        # Add nodes
        for node in self.nodes():
            descriptor = self.descriptors.get(node)
            label = node.__name__
            scope = descriptor.scope.value if descriptor else "unknown"
            if descriptor and descriptor.qualifier:
                label += f" [{descriptor.qualifier}]"
            color = self._scope_color(scope)
            lines.append(
                f'  "{token_of(node)}" [label="{label}\\n({scope})" fillcolor="{color}" style=filled];'
            )

        # Add edges
        for node, deps in self.adj_list.items():
            for dep in deps:
                lines.append(f'  "{token_of(node)}" -> "{token_of(dep)}";')

        lines.append("}")
        return "\n".join(lines)

    def _scope_color(self, scope: str) -> str:
        """Get color for scope visualization."""
        colors = {
            "singleton": "lightblue",
            "prototype": "lightyellow",
        }
        return colors.get(scope, "white")

    def get_tree_view(self, root: Optional[type] = None) -> str:
        """
        Get tree view of dependencies.

        Args:
            root: Optional root identity (if None, show all roots)

        Returns:
            Tree view as string
        """
        if root:
            return self._tree_view_recursive(root, "", set())

        # Find roots (no incoming edges)
        all_deps = set()
        for deps in self.adj_list.values():
            all_deps.update(deps)

        roots = [n for n in self.nodes() if n not in all_deps]

        lines = []
        for root_node in roots:
            lines.append(self._tree_view_recursive(root_node, "", set()))

        return "\n".join(lines)

    def _tree_view_recursive(
        self,
        node: type,
        prefix: str,
        visited: Set[type],
    ) -> str:
        """Recursive helper for tree view."""
        if node in visited:
            return f"{prefix}├── {node.__name__} (circular)"

        visited.add(node)

        descriptor = self.descriptors.get(node)
        scope = descriptor.scope.value if descriptor else "unregistered"
        lines = [f"{prefix}├── {node.__name__} ({scope})"]

        deps = self.adj_list.get(node, [])
        for i, dep in enumerate(deps):
            is_last = i == len(deps) - 1
            new_prefix = prefix + ("    " if is_last else "│   ")
            lines.append(self._tree_view_recursive(dep, new_prefix, visited.copy()))

        return "\n".join(lines)
