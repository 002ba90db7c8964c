"""Small hand-written scenarios that illustrate dirtying and cleaning.

``CleanDirty``
    Input cell ``a`` cycles through 2, -2, 3, 2, ... Thunk ``f`` forces
    thunk ``g``, which squares ``a`` into cell ``b``, and thunk ``h``, which
    caps ``b`` at 100 into cell ``c``. Changing ``a`` from 2 to -2 re-runs
    ``g`` but leaves ``b`` holding 4, so ``h`` is never dirtied and ``f`` is
    cleaned without re-running. Changing it to 3 reaches ``h`` as well.

``NamedListEditor`` / ``NamedListMap``
    A three-element list where every element carries a name and a cell, and
    a single edit that inserts a fourth element in the middle. Mapping over
    it memoizes on each element's name, so after the insertion only the new
    element and its predecessor are recomputed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from incrlab._engine import Name
from incrlab._errors import UnimplementedScenario

from ._lists import square

if TYPE_CHECKING:
    from collections.abc import Callable

    from incrlab._context import BackendContext
    from incrlab._engine import Art
    from incrlab._params import GenerateParams
    from incrlab._rng import Rng


# Clean/dirty

_CLEAN_DIRTY_CYCLE = (-2, 3, 2)


def _f(ctx: BackendContext, inp: Art[int]) -> Art[int]:
    b = ctx.memo(Name.of_str("g"), _g, inp)
    return ctx.memo(Name.of_str("h"), _h, b)


def _g(ctx: BackendContext, inp: Art[int]) -> Art[int]:
    x = ctx.force(inp)
    return ctx.cell(Name.of_str("b"), x * x)


def _h(ctx: BackendContext, b: Art[int]) -> Art[int]:
    x = ctx.force(b)
    return ctx.cell(Name.of_str("c"), min(x, 100))


@dataclass(frozen=True, slots=True)
class CleanDirty:
    def generate(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> Art[int]:  # noqa: ARG002
        return ctx.cell(Name.of_str("a"), 2)

    def edit_init(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> int:  # noqa: ARG002
        return 0

    def edit(
        self,
        ctx: BackendContext,
        input: Art[int],  # noqa: A002, ARG002
        edit_state: int,
        rng: Rng,  # noqa: ARG002
        params: GenerateParams,  # noqa: ARG002
    ) -> tuple[Art[int], int]:
        value = _CLEAN_DIRTY_CYCLE[edit_state]
        return ctx.cell(Name.of_str("a"), value), (edit_state + 1) % len(_CLEAN_DIRTY_CYCLE)

    def compute(self, ctx: BackendContext, input: Art[int]) -> Art[int]:  # noqa: A002
        return ctx.memo(Name.of_str("f"), _f, input)


# Named list


@dataclass(frozen=True, slots=True)
class NamedNil:
    pass


@dataclass(frozen=True, slots=True)
class NamedCons[X]:
    """A cons cell carrying its own name and a cell for the rest of the list."""

    head: X
    name: Name
    tail: Art[NamedList[X]] | NamedList[X]


type NamedList[X] = NamedNil | NamedCons[X]


def _named_cons(ctx: BackendContext, head: int, name: str, cell: str, tail: NamedList[int]) -> NamedList[int]:
    return NamedCons(head, Name.of_str(name), ctx.cell(Name.of_str(cell), tail))


def named_list_map[X, Y](ctx: BackendContext, lst: NamedList[X], f: Callable[[X], Y]) -> NamedList[Y]:
    match lst:
        case NamedCons(head, name, tail):
            return ctx.memo(name, _named_list_map_cons, head, name, tail, f)
        case _:
            return NamedNil()


def _named_list_map_cons[X, Y](
    ctx: BackendContext,
    head: X,
    name: Name,
    tail: Art[NamedList[X]],
    f: Callable[[X], Y],
) -> NamedList[Y]:
    left, right = name.fork()
    rest = named_list_map(ctx, ctx.force(tail), f)
    return NamedCons(f(head), left, ctx.cell(right, rest))


@dataclass(frozen=True, slots=True)
class NamedListEditor:
    """Generates ``[0, 1, 3]`` and then inserts 2 before 3, once."""

    def generate(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> NamedList[int]:  # noqa: ARG002
        lst: NamedList[int] = NamedNil()
        lst = _named_cons(ctx, 3, "delta", "d", lst)
        lst = _named_cons(ctx, 1, "beta", "b", lst)
        return _named_cons(ctx, 0, "alpha", "a", lst)

    def edit_init(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> int:  # noqa: ARG002
        return 0

    def edit(
        self,
        ctx: BackendContext,
        input: NamedList[int],  # noqa: A002
        edit_state: int,
        rng: Rng,  # noqa: ARG002
        params: GenerateParams,  # noqa: ARG002
    ) -> tuple[NamedList[int], int]:
        if edit_state != 0:
            return input, edit_state
        match input:
            case NamedCons(_, _, a):
                after_a = ctx.force(a)
            case _:
                msg = "The named list lost its first element"
                raise ValueError(msg)
        match after_a:
            case NamedCons(_, _, b):
                after_b = ctx.force(b)
            case _:
                msg = "The named list lost its second element"
                raise ValueError(msg)
        # Re-allocating "b" with new content is the mutation. The prefix is
        # rebuilt for the baseline engine, which keeps no store.
        lst = _named_cons(ctx, 2, "gamma", "c", after_b)
        lst = NamedCons(1, Name.of_str("beta"), ctx.cell(Name.of_str("b"), lst))
        return _named_cons(ctx, 0, "alpha", "a", lst), 1


@dataclass(frozen=True, slots=True)
class NamedListMap:
    def compute(self, ctx: BackendContext, input: NamedList[int]) -> NamedList[int]:  # noqa: A002
        return named_list_map(ctx, input, square)


# Plain tuples


@dataclass(frozen=True, slots=True)
class VecMaxInput:
    """A tuple of random 64-bit words; edits leave it unchanged."""

    def generate(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> tuple[int, ...]:  # noqa: ARG002
        return tuple(rng.word() for _ in range(params.size))

    def edit_init(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> int:  # noqa: ARG002
        return 0

    def edit(
        self,
        ctx: BackendContext,  # noqa: ARG002
        input: tuple[int, ...],  # noqa: A002
        edit_state: int,
        rng: Rng,  # noqa: ARG002
        params: GenerateParams,  # noqa: ARG002
    ) -> tuple[tuple[int, ...], int]:
        return input, edit_state + 1


@dataclass(frozen=True, slots=True)
class VecMax:
    def compute(self, ctx: BackendContext, input: tuple[int, ...]) -> int:  # noqa: A002, ARG002
        return max(input, default=0)


# Exercises left for students


@dataclass(frozen=True, slots=True)
class Unimplemented:
    """A declared stub: computing anything raises ``UnimplementedScenario``."""

    what: str

    def compute(self, ctx: BackendContext, input: object) -> object:  # noqa: A002, ARG002
        raise UnimplementedScenario(self.what)
