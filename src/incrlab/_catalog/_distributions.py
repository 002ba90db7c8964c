"""Randomized input distributions over checkpointed lists."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from incrlab._engine import Art, Name
from incrlab._enums import NominalStrategy
from incrlab._errors import UnimplementedScenario

from ._lists import NIL, Checkpoint, Cons, List, Nil

if TYPE_CHECKING:
    from incrlab._context import BackendContext
    from incrlab._params import GenerateParams
    from incrlab._rng import Rng

logger = logging.getLogger(__name__)


def _check_strategy(params: GenerateParams) -> None:
    if params.nominal_strategy is not NominalStrategy.REGULAR:
        what = f"list distributions with the {params.nominal_strategy} nominal strategy"
        raise UnimplementedScenario(what)


def element_bound(params: GenerateParams) -> int:
    """Exclusive upper bound for randomly drawn list elements."""
    return max(params.size, 1) * 100


def _prepend(ctx: BackendContext, lst: List[int], i: int, rng: Rng, params: GenerateParams) -> List[int]:
    if i % params.gauge == 0:
        name = Name.of_int(i)
        lst = Checkpoint(name, ctx.cell(name, lst))
    return Cons(rng.below(element_bound(params)), lst)


@dataclass(frozen=True, slots=True)
class UniformPrepend:
    """Random elements, each edit prepending one more.

    Element ``i`` is preceded by a checkpoint named ``i`` whenever ``i`` is a
    multiple of the gauge. The edit state is the next unused index.
    """

    def generate(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> List[int]:
        _check_strategy(params)
        lst: List[int] = NIL
        for i in range(params.size):
            lst = _prepend(ctx, lst, i, rng, params)
        return lst

    def edit_init(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> int:  # noqa: ARG002
        return params.size

    def edit(
        self,
        ctx: BackendContext,
        input: List[int],  # noqa: A002
        edit_state: int,
        rng: Rng,
        params: GenerateParams,
    ) -> tuple[List[int], int]:
        return _prepend(ctx, input, edit_state, rng, params), edit_state + 1


@dataclass(slots=True)
class _Segment:
    name: Name | None
    elements: list[int]


def _segments(ctx: BackendContext, lst: List[int]) -> list[_Segment]:
    """Split a list at its checkpoints; the first segment is the unnamed head."""
    segments = [_Segment(None, [])]
    while True:
        match lst:
            case Cons(head, tail):
                segments[-1].elements.append(head)
                lst = tail
            case Checkpoint(name, Art() as art):
                segments.append(_Segment(name, []))
                lst = ctx.force(art)
            case Nil():
                return segments
            case _:
                msg = f"Expected a list node, got {type(lst).__name__}"
                raise TypeError(msg)


def _assemble(ctx: BackendContext, segments: list[_Segment]) -> List[int]:
    lst: List[int] = NIL
    for segment in reversed(segments):
        for element in reversed(segment.elements):
            lst = Cons(element, lst)
        if segment.name is not None:
            lst = Checkpoint(segment.name, ctx.cell(segment.name, lst))
    return lst


@dataclass(frozen=True, slots=True)
class UniformInsert:
    """Like ``UniformPrepend``, but each edit inserts at a random checkpoint.

    The edit re-allocates every checkpoint cell of the list. Only the cell at
    the insertion point gets different content, so the incremental engine
    dirties exactly the computations that observed it.
    """

    def generate(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> List[int]:
        return UniformPrepend().generate(ctx, rng, params)

    def edit_init(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> int:  # noqa: ARG002
        return params.size

    def edit(
        self,
        ctx: BackendContext,
        input: List[int],  # noqa: A002
        edit_state: int,
        rng: Rng,
        params: GenerateParams,
    ) -> tuple[List[int], int]:
        segments = _segments(ctx, input)
        pos = rng.below(len(segments))
        element = rng.below(element_bound(params))
        target = segments[pos]
        if edit_state % params.gauge == 0:
            segments.insert(pos + 1, _Segment(Name.of_int(edit_state), target.elements))
            target.elements = [element]
        else:
            target.elements.insert(0, element)
        logger.debug("Inserted %d at segment %d of %d", element, pos, len(segments))
        return _assemble(ctx, segments), edit_state + 1
