"""Tests for reflecting traces into allocation and force trees."""

import logging

import pytest

from incrlab import (
    DanglingLocationError,
    Div,
    Effect,
    EffectKind,
    GenerateParams,
    GraphSnapshot,
    LabParams,
    Loc,
    Name,
    SampleHarness,
    SampleParams,
    Trace,
    TraceEdge,
    alloc_tree,
    force_tree,
    reflect_trees,
)
from incrlab._catalog import EagerMap, UniformPrepend
from incrlab._catalog._lists import square
from incrlab._engine import NodeSnapshot, SuccSnapshot
from incrlab._reflect import div_of_loc, div_of_trace, trace_roots

X = Loc((), Name.of_str("x"))
Y = Loc((), Name.of_str("y"))
GHOST = Loc((), Name.of_str("ghost"))


def _loc_text(loc_div: Div) -> str:
    path, name = loc_div.children
    return "/".join([*(n.text or "" for n in path.children), name.text or ""])


def _tree_edges(tree: Div) -> list[tuple[str, str]]:
    """(parent, child) pairs of a reflected tree, as location strings."""
    if len(tree.children) == 1:
        return []
    loc_div, extent = tree.children
    edges = []
    for child in extent.children:
        edges.append((_loc_text(loc_div), _loc_text(child.children[0])))
        edges.extend(_tree_edges(child))
    return edges


def _snapshot_edges(snapshot: GraphSnapshot, kind: EffectKind) -> set[tuple[str, str]]:
    return {(str(loc), str(s.target)) for loc, node in snapshot.table.items() for s in node.succs if s.kind is kind}


def _traced_compute() -> tuple[tuple[Trace, ...], GraphSnapshot]:
    params = LabParams(SampleParams(generate_params=GenerateParams(size=4, gauge=1)), change_batch_loop_count=1)
    sample = SampleHarness(UniformPrepend(), EagerMap(square), params).run().samples[-1]
    metrics = sample.incremental.compute_output
    assert metrics.graph is not None
    return metrics.traces, metrics.graph


def _force(source: Loc | None, target: Loc) -> Trace:
    return Trace(Effect.FORCE_MISS, TraceEdge(source, target, EffectKind.FORCE))


class TestTraceRoots:
    """Tests for collecting the locations of a trace log."""

    def test_roots_are_unique_and_ordered(self) -> None:
        traces = (
            Trace(Effect.FORCE_MISS, TraceEdge(None, X, EffectKind.FORCE), (_force(X, Y),)),
            _force(None, X),
        )

        assert trace_roots(traces) == (X, Y)

    def test_dirty_and_clean_effects_are_not_roots(self) -> None:
        traces = (Trace(Effect.DIRTY, TraceEdge(X, Y, EffectKind.FORCE, dirty=True)),)

        assert trace_roots(traces) == ()


class TestTrees:
    """Tests for the allocation and force trees."""

    def test_trees_follow_only_their_own_edge_kind(self) -> None:
        traces, snapshot = _traced_compute()
        alloc_edges = _snapshot_edges(snapshot, EffectKind.ALLOC)
        force_edges = _snapshot_edges(snapshot, EffectKind.FORCE)

        trees = reflect_trees(traces, snapshot)

        assert trees
        for t in trees:
            assert set(_tree_edges(t.alloc)) <= alloc_edges
            assert set(_tree_edges(t.force)) <= force_edges
            assert all(d.tag == "alloc-tree" for d in t.alloc.iter_divs() if d.tag.endswith("-tree"))
            assert all(d.tag == "force-tree" for d in t.force.iter_divs() if d.tag.endswith("-tree"))

    def test_force_tree_reaches_every_forced_edge(self) -> None:
        traces, snapshot = _traced_compute()
        root = next(t.edge.target for t in traces if t.effect is Effect.FORCE_MISS)

        tree = force_tree(snapshot, root)

        reachable = snapshot.graph(EffectKind.FORCE).reachable(root)
        assert {child for _, child in _tree_edges(tree)} == {str(loc) for loc in reachable}

    def test_leaf(self) -> None:
        snapshot = GraphSnapshot({X: NodeSnapshot("cell", 1, has_value=True)})

        tree = alloc_tree(snapshot, X)

        assert tree.classes == ("cell", "leaf")
        assert tree.children == (div_of_loc(X),)

    def test_absent_successor(self) -> None:
        snapshot = GraphSnapshot(
            {X: NodeSnapshot("thunk", None, has_value=False, succs=(SuccSnapshot(GHOST, EffectKind.FORCE, dirty=False),))},
        )

        tree = force_tree(snapshot, X)

        (ghost,) = tree.children[1].children
        assert ghost.classes == ("leaf", "absent")

    def test_revisit_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        snapshot = GraphSnapshot(
            {
                X: NodeSnapshot("thunk", None, has_value=False, succs=(SuccSnapshot(Y, EffectKind.FORCE, dirty=False),)),
                Y: NodeSnapshot("thunk", None, has_value=False, succs=(SuccSnapshot(X, EffectKind.FORCE, dirty=False),)),
            },
        )

        with caplog.at_level(logging.WARNING):
            tree = force_tree(snapshot, X)

        revisits = [d for d in tree.iter_divs() if "revisit" in d.classes]
        assert [d.classes for d in revisits] == [("leaf", "revisit", "cycle")]
        assert "reached twice" in caplog.text

    def test_shared_node_is_not_a_cycle(self) -> None:
        z = Loc((), Name.of_str("z"))
        snapshot = GraphSnapshot(
            {
                X: NodeSnapshot(
                    "thunk",
                    None,
                    has_value=False,
                    succs=(SuccSnapshot(Y, EffectKind.FORCE, dirty=False), SuccSnapshot(z, EffectKind.FORCE, dirty=False)),
                ),
                Y: NodeSnapshot("thunk", None, has_value=False, succs=(SuccSnapshot(z, EffectKind.FORCE, dirty=False),)),
                z: NodeSnapshot("cell", 1, has_value=True),
            },
        )

        tree = force_tree(snapshot, X)

        revisits = [d for d in tree.iter_divs() if "revisit" in d.classes]
        assert [d.classes for d in revisits] == [("leaf", "revisit", "shared")]

    def test_dangling_root(self) -> None:
        with pytest.raises(DanglingLocationError) as exc_info:
            reflect_trees((_force(None, GHOST),), GraphSnapshot())

        assert exc_info.value.loc == GHOST
        assert "ghost" in str(exc_info.value)

    def test_dangling_single_tree(self) -> None:
        with pytest.raises(DanglingLocationError):
            alloc_tree(GraphSnapshot(), GHOST)


class TestDivs:
    """Tests for the div representation of traces."""

    def test_div_of_trace(self) -> None:
        trace = Trace(Effect.FORCE_MISS, TraceEdge(None, X, EffectKind.FORCE), (_force(X, Y),))

        div = div_of_trace(trace)

        assert div.tag == "trace"
        assert div.classes == ("force-miss",)
        assert len(div.find_all("trace")) == 2
        (root,) = div.find_all("root")
        assert root.text == "root"
        assert [d.text for d in div.find_all("effect")] == ["force-miss", "force-miss"]

    def test_dirty_edge_class(self) -> None:
        div = div_of_trace(Trace(Effect.DIRTY, TraceEdge(X, Y, EffectKind.FORCE, dirty=True)))

        (edge,) = div.find_all("edge")
        assert edge.classes == ("force", "dirty")
