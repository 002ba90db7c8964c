"""Reflected views of an incremental engine: its trace log and graph snapshots.

These are plain, immutable values. The engine produces them; the harness and
the trace reflector only read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from incrlab._enums import Effect, EffectKind
from incrlab._graph import DependencyGraph

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from ._names import Loc


@dataclass(frozen=True, slots=True)
class TraceEdge:
    """The edge a traced operation acted on.

    ``source`` is None for operations performed at the root of demand, outside
    of any thunk.
    """

    source: Loc | None
    target: Loc
    kind: EffectKind
    dirty: bool = False


@dataclass(frozen=True, slots=True)
class Trace:
    """One engine operation, with the operations it caused nested in ``extent``."""

    effect: Effect
    edge: TraceEdge
    extent: tuple[Trace, ...] = ()

    def walk(self) -> Iterator[Trace]:
        """Yield this trace and every nested trace, in pre-order."""
        stack: list[Trace] = [self]
        while stack:
            trace = stack.pop()
            yield trace
            stack.extend(reversed(trace.extent))


def walk_traces(traces: tuple[Trace, ...]) -> Iterator[Trace]:
    """Yield every trace of a log, nested ones included, in pre-order."""
    for trace in traces:
        yield from trace.walk()


@dataclass(frozen=True, slots=True)
class SuccSnapshot:
    """An outgoing edge of a graph node."""

    target: Loc
    kind: EffectKind
    dirty: bool


@dataclass(frozen=True, slots=True)
class NodeSnapshot:
    """A node of the incremental graph.

    Attributes:
        kind: Whether the node is a cell or a thunk.
        value: The cell's value, or the thunk's cached result.
        has_value: False for a thunk that has not produced a result yet.
        succs: Outgoing edges, in the order they were recorded.

    """

    kind: Literal["cell", "thunk"]
    value: Any
    has_value: bool
    succs: tuple[SuccSnapshot, ...] = ()


@dataclass(frozen=True, slots=True)
class GraphSnapshot:
    """A copy of the incremental graph at one point in time."""

    table: Mapping[Loc, NodeSnapshot] = field(default_factory=dict)
    stack: tuple[Loc, ...] = ()

    def graph(self, kind: EffectKind) -> DependencyGraph[Loc]:
        """Project the edges of one kind into a dependency graph.

        An edge ``(a, b)`` means ``a`` allocated (or forced) ``b``.
        """
        return DependencyGraph.from_edges(
            [(loc, succ.target) for loc, node in self.table.items() for succ in node.succs if succ.kind is kind],
        )

    @property
    def edge_count(self) -> int:
        return sum(len(node.succs) for node in self.table.values())

    def __len__(self) -> int:
        return len(self.table)

    def __contains__(self, loc: object) -> bool:
        return loc in self.table
