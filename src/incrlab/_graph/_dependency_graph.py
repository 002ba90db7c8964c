"""Generic directed graph with insertion-ordered adjacency."""

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class DependencyGraph[T]:
    """A directed graph whose adjacency lists keep the order edges were added in.

    Engine graphs record which location allocated or forced which other
    location. The order matters when the graph is rendered as a tree, so
    neighbours are tuples rather than sets. Duplicate edges are collapsed.

    Attributes:
        _successors: Mapping from every node to the targets of its edges.

    """

    _successors: dict[T, tuple[T, ...]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[T, T]]) -> "DependencyGraph[T]":
        """Build a graph from (source, target) edges.

        Example:
            >>> graph = DependencyGraph.from_edges([("f", "g"), ("f", "h"), ("f", "g")])
            >>> graph.successors("f")
            ('g', 'h')

        """
        successors: dict[T, dict[T, None]] = {}
        for src, dst in edges:
            successors.setdefault(src, {})[dst] = None
            successors.setdefault(dst, {})
        return cls({node: tuple(targets) for node, targets in successors.items()})

    @property
    def nodes(self) -> tuple[T, ...]:
        """All nodes in the graph, in order of first appearance."""
        return tuple(self._successors)

    def successors(self, node: T) -> tuple[T, ...]:
        """Get the targets of edges out of a node, in insertion order."""
        return self._successors.get(node, ())

    def reachable(self, node: T) -> frozenset[T]:
        """Every node reachable from ``node`` by one or more edges.

        ``node`` itself is included only when it lies on a cycle.
        """
        seen: set[T] = set()
        pending = list(self.successors(node))
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            pending.extend(self.successors(current))
        return frozenset(seen)

    def on_cycle(self, node: T) -> bool:
        return node in self.reachable(node)

    def __len__(self) -> int:
        return len(self._successors)

    def __contains__(self, node: object) -> bool:
        return node in self._successors
