"""The incremental engine: a demanded computation graph with change propagation.

Every allocation and every force performed while a thunk runs is recorded as
an outgoing edge of that thunk. Overwriting a cell with a different value
marks the force edges into it dirty, transitively up to the root of demand.
Forcing a thunk with dirty edges cleans them in order: an edge whose target
still produces the value it produced before is cleaned, otherwise the thunk
is re-evaluated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from incrlab._enums import Effect, EffectKind, EngineKind

from ._core import Art, Engine
from ._trace import GraphSnapshot, NodeSnapshot, SuccSnapshot, Trace, TraceEdge

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._names import Loc, Name

logger = logging.getLogger(__name__)


class _NoResult:
    def __repr__(self) -> str:
        return "<no result>"


_NO_RESULT: Final = _NoResult()


@dataclass(slots=True)
class _Succ:
    target: Loc
    kind: EffectKind
    observed: Any = None
    dirty: bool = False


@dataclass(slots=True, eq=False)
class _CellNode:
    value: Any
    preds: dict[Loc, None] = field(default_factory=dict)


@dataclass(slots=True, eq=False)
class _ThunkNode:
    fn: Callable[..., Any]
    args: tuple[Any, ...]
    result: Any = _NO_RESULT
    succs: list[_Succ] = field(default_factory=list)
    preds: dict[Loc, None] = field(default_factory=dict)


class CycleError(RuntimeError):
    """A thunk forced itself, directly or through other thunks."""


class IncrementalEngine(Engine):
    """Demanded computation graph engine."""

    kind = EngineKind.INCREMENTAL

    def __init__(self) -> None:
        super().__init__()
        self._table: dict[Loc, _CellNode | _ThunkNode] = {}
        self._stack: list[Loc] = []
        self._extents: list[list[Trace]] | None = None

    # Tracing

    def trace_begin(self) -> None:
        self._extents = [[]]

    def trace_end(self) -> tuple[Trace, ...]:
        if self._extents is None:
            return ()
        roots = self._extents[0]
        self._extents = None
        return tuple(roots)

    def _open(self) -> list[Trace] | None:
        if self._extents is None:
            return None
        extent: list[Trace] = []
        self._extents.append(extent)
        return extent

    def _close(self, effect: Effect, edge: TraceEdge, extent: list[Trace] | None) -> None:
        self._counter[effect] += 1
        if extent is None or self._extents is None:
            return
        while len(self._extents) > 1:
            if self._extents.pop() is extent:
                break
        self._extents[-1].append(Trace(effect, edge, tuple(extent)))

    # Allocation

    def cell[T](self, name: Name, value: T) -> Art[T]:
        loc = self._loc(name)
        source = self._current()
        extent = self._open()
        node = self._table.get(loc)
        if node is None:
            self._table[loc] = _CellNode(value)
            effect = Effect.ALLOC_FRESH
        else:
            effect = Effect.ALLOC_EXISTS
            if isinstance(node, _ThunkNode):
                logger.debug("Location %s changes from a thunk to a cell", loc)
                self._remove_succs(loc, node)
                self._table[loc] = _CellNode(value, node.preds)
                self._dirty(loc)
            elif node.value != value:
                node.value = value
                self._dirty(loc)
        if source is not None:
            self._add_edge(source, loc, EffectKind.ALLOC, None)
        self._close(effect, TraceEdge(source, loc, EffectKind.ALLOC), extent)
        return Art(loc, self.id)

    def thunk[T](self, name: Name, fn: Callable[..., T], args: tuple[Any, ...]) -> Art[T]:
        loc = self._loc(name)
        source = self._current()
        extent = self._open()
        node = self._table.get(loc)
        if node is None:
            self._table[loc] = _ThunkNode(fn, args)
            effect = Effect.ALLOC_FRESH
        else:
            effect = Effect.ALLOC_EXISTS
            if isinstance(node, _CellNode):
                logger.debug("Location %s changes from a cell to a thunk", loc)
                self._table[loc] = _ThunkNode(fn, args, preds=node.preds)
                self._dirty(loc)
            elif node.fn != fn or node.args != args:
                node.fn = fn
                node.args = args
                node.result = _NO_RESULT
                self._dirty(loc)
        if source is not None:
            self._add_edge(source, loc, EffectKind.ALLOC, None)
        self._close(effect, TraceEdge(source, loc, EffectKind.ALLOC), extent)
        return Art(loc, self.id)

    # Demand

    def force[T](self, art: Art[T]) -> T:
        self._check_owner(art)
        loc = art.loc
        node = self._table[loc]
        source = self._current()
        extent = self._open()
        if isinstance(node, _CellNode):
            effect = Effect.FORCE_READ
            value = node.value
        else:
            if loc in self._stack:
                msg = f"Thunk {loc} forced itself"
                raise CycleError(msg)
            if node.result is _NO_RESULT:
                self._evaluate(loc, node)
                effect = Effect.FORCE_MISS
            elif any(succ.dirty for succ in node.succs):
                effect = Effect.FORCE_MISS if self._clean(loc, node) else Effect.FORCE_HIT
            else:
                effect = Effect.FORCE_HIT
            value = node.result
        if source is not None:
            self._add_edge(source, loc, EffectKind.FORCE, value)
        self._close(effect, TraceEdge(source, loc, EffectKind.FORCE), extent)
        return value

    def peek(self, art: Art[Any]) -> tuple[bool, Any]:
        node = self._table.get(art.loc)
        match node:
            case _CellNode(value):
                return True, value
            case _ThunkNode(result=result, succs=succs) if result is not _NO_RESULT and not any(s.dirty for s in succs):
                return True, result
            case _:
                return False, None

    def snapshot(self) -> GraphSnapshot:
        table: dict[Loc, NodeSnapshot] = {}
        for loc, node in self._table.items():
            if isinstance(node, _CellNode):
                table[loc] = NodeSnapshot("cell", node.value, has_value=True)
            else:
                table[loc] = NodeSnapshot(
                    "thunk",
                    None if node.result is _NO_RESULT else node.result,
                    has_value=node.result is not _NO_RESULT,
                    succs=tuple(SuccSnapshot(s.target, s.kind, s.dirty) for s in node.succs),
                )
        return GraphSnapshot(table, tuple(self._stack))

    def __len__(self) -> int:
        return len(self._table)

    # Graph maintenance

    def _current(self) -> Loc | None:
        return self._stack[-1] if self._stack else None

    def _add_edge(self, source: Loc, target: Loc, kind: EffectKind, observed: Any) -> None:
        node = self._table[source]
        assert isinstance(node, _ThunkNode)  # only thunks run code
        node.succs.append(_Succ(target, kind, observed))
        self._table[target].preds[source] = None

    def _remove_succs(self, loc: Loc, node: _ThunkNode) -> None:
        for succ in node.succs:
            extent = self._open()
            target = self._table.get(succ.target)
            if target is not None:
                target.preds.pop(loc, None)
            self._close(Effect.REMOVE, TraceEdge(loc, succ.target, succ.kind, succ.dirty), extent)
        node.succs = []

    def _dirty(self, loc: Loc) -> None:
        """Mark force edges into ``loc`` dirty, then those into their sources."""
        for pred_loc in list(self._table[loc].preds):
            pred = self._table.get(pred_loc)
            if not isinstance(pred, _ThunkNode):
                continue
            for succ in pred.succs:
                if succ.target != loc or succ.kind is not EffectKind.FORCE or succ.dirty:
                    continue
                extent = self._open()
                succ.dirty = True
                self._dirty(pred_loc)
                self._close(Effect.DIRTY, TraceEdge(pred_loc, loc, EffectKind.FORCE, dirty=True), extent)

    def _clean(self, loc: Loc, node: _ThunkNode) -> bool:
        """Bring a thunk's dirty edges up to date.

        Returns True if the thunk had to be re-evaluated.
        """
        while any(succ.dirty for succ in node.succs):
            for succ in node.succs:
                if not succ.dirty:
                    continue
                edge = TraceEdge(loc, succ.target, succ.kind, dirty=True)
                target = self._table[succ.target]
                if isinstance(target, _ThunkNode):
                    extent = self._open()
                    self._refresh(succ.target, target)
                    self._close(Effect.CLEAN_REC, edge, extent)
                    current = target.result
                else:
                    current = target.value
                if current == succ.observed:
                    succ.dirty = False
                    self._close(Effect.CLEAN_EDGE, edge, self._open())
                else:
                    extent = self._open()
                    self._evaluate(loc, node)
                    self._close(Effect.CLEAN_EVAL, edge, extent)
                    return True
        return False

    def _refresh(self, loc: Loc, node: _ThunkNode) -> None:
        if node.result is _NO_RESULT:
            self._evaluate(loc, node)
        elif any(succ.dirty for succ in node.succs):
            self._clean(loc, node)

    def _evaluate(self, loc: Loc, node: _ThunkNode) -> None:
        self._remove_succs(loc, node)
        saved = self._path
        self._path = loc.path
        self._stack.append(loc)
        try:
            node.result = node.fn(*node.args)
        finally:
            self._stack.pop()
            self._path = saved
