"""Allocation and force trees reconstructed from a trace log and a graph snapshot.

For every location that a trace allocated or forced, two trees are built
from the snapshot: one following only allocation edges and one following
only force edges. A location whose node has no outgoing edges of the
requested kind, or that is not in the snapshot at all, becomes a leaf.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from incrlab._engine import walk_traces
from incrlab._enums import EffectKind
from incrlab._errors import DanglingLocationError

from ._div import Div, div_of_loc

if TYPE_CHECKING:
    from incrlab._engine import GraphSnapshot, Loc, Trace
    from incrlab._graph import DependencyGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TraceTrees:
    """The allocation and force trees rooted at one traced location."""

    root: Loc
    alloc: Div
    force: Div


def trace_roots(traces: tuple[Trace, ...]) -> tuple[Loc, ...]:
    """Locations allocated or forced anywhere in a trace log.

    Nested extents are included. Each location appears once, at its first
    occurrence.
    """
    seen: dict[Loc, None] = {}
    for trace in walk_traces(traces):
        if trace.effect.kind is not None:
            seen.setdefault(trace.edge.target, None)
    return tuple(seen)


def _tree(snapshot: GraphSnapshot, graph: DependencyGraph[Loc], root: Loc, kind: EffectKind) -> Div:
    tag = f"{kind.value}-tree"
    visited: set[Loc] = set()

    def visit(loc: Loc) -> Div:
        node = snapshot.table.get(loc)
        if node is None:
            return Div(tag, ("leaf", "absent"), children=(div_of_loc(loc),))
        if loc in visited:
            shape = "cycle" if graph.on_cycle(loc) else "shared"
            logger.warning("Location %s reached twice in its %s tree (%s)", loc, kind, shape)
            return Div(tag, ("leaf", "revisit", shape), children=(div_of_loc(loc),))
        visited.add(loc)
        succs = graph.successors(loc)
        if not succs:
            return Div(tag, (node.kind, "leaf"), children=(div_of_loc(loc),))
        return Div(
            tag,
            (node.kind,),
            children=(div_of_loc(loc), Div("extent", children=tuple(visit(s) for s in succs))),
        )

    return visit(root)


def alloc_tree(snapshot: GraphSnapshot, root: Loc) -> Div:
    """The tree of allocations made by ``root`` and, recursively, by what it allocated.

    Raises:
        DanglingLocationError: If ``root`` is not in the snapshot.

    """
    if root not in snapshot:
        raise DanglingLocationError(root)
    return _tree(snapshot, snapshot.graph(EffectKind.ALLOC), root, EffectKind.ALLOC)


def force_tree(snapshot: GraphSnapshot, root: Loc) -> Div:
    """The tree of forces made by ``root`` and, recursively, by what it forced.

    Raises:
        DanglingLocationError: If ``root`` is not in the snapshot.

    """
    if root not in snapshot:
        raise DanglingLocationError(root)
    return _tree(snapshot, snapshot.graph(EffectKind.FORCE), root, EffectKind.FORCE)


def reflect_trees(traces: tuple[Trace, ...], snapshot: GraphSnapshot) -> tuple[TraceTrees, ...]:
    """Build both trees for every location of a trace log.

    Raises:
        DanglingLocationError: If a traced location is not in the snapshot.

    """
    alloc_graph = snapshot.graph(EffectKind.ALLOC)
    force_graph = snapshot.graph(EffectKind.FORCE)
    trees: list[TraceTrees] = []
    for root in trace_roots(traces):
        if root not in snapshot:
            raise DanglingLocationError(root)
        trees.append(
            TraceTrees(
                root,
                _tree(snapshot, alloc_graph, root, EffectKind.ALLOC),
                _tree(snapshot, force_graph, root, EffectKind.FORCE),
            ),
        )
    return tuple(trees)
