"""Checkpointed cons-lists and the list programs the catalog measures.

A list is ``Nil``, a ``Cons`` cell, or a ``Checkpoint``: a name plus an
articulation holding the rest of the list. Checkpoints are where the
incremental engine can cut the list into independently reusable pieces;
every list program below memoizes at checkpoints, forking the checkpoint's
name into a name for its thunk and a name for the output it allocates.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from incrlab._engine import Art, Name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from incrlab._context import BackendContext


@dataclass(frozen=True, slots=True)
class Nil:
    def __repr__(self) -> str:
        return "NIL"

    def __str__(self) -> str:
        return format_list(self)


NIL = Nil()


@dataclass(frozen=True, slots=True)
class Cons[X]:
    head: X
    tail: List[X]

    def __str__(self) -> str:
        return format_list(self)


@dataclass(frozen=True, slots=True)
class Checkpoint[X]:
    """A named cut point; ``rest`` is an articulation (or, once materialized, a list)."""

    name: Name
    rest: Art[List[X]] | List[X]

    def __str__(self) -> str:
        return format_list(self)


type List[X] = Nil | Cons[X] | Checkpoint[X]


def _not_a_list(value: object) -> TypeError:
    return TypeError(f"Expected a list node, got {type(value).__name__}")


def square(x: int) -> int:
    return x * x


def divisible_by_three(x: int) -> bool:
    return x % 3 == 0


def iter_list[X](ctx: BackendContext, lst: List[X]) -> Iterator[X]:
    """Yield the elements of a list, forcing checkpoints as they are reached."""
    while True:
        match lst:
            case Cons(head, tail):
                yield head
                lst = tail
            case Checkpoint(_, Art() as art):
                lst = ctx.force(art)
            case Checkpoint(_, rest):
                lst = rest
            case _:
                return


def format_list(lst: Any) -> str:
    """Render a list compactly, e.g. ``[3, 1, #0, @compute/0.R]``.

    Checkpoints show as ``#name``; an articulation ends the rendering.
    """
    parts: list[str] = []
    while True:
        match lst:
            case Cons(head, tail):
                parts.append(str(head))
                lst = tail
            case Checkpoint(name, rest):
                parts.append(f"#{name}")
                lst = rest
            case Nil():
                break
            case other:
                parts.append(str(other))
                break
    return f"[{', '.join(parts)}]"


def list_elements(lst: Any) -> list[Any]:
    """Elements of a materialized or reflected list.

    Stops at the first ``Nil`` or at anything that is not a list node, such
    as an ``Unforced`` marker.
    """
    out: list[Any] = []
    while True:
        match lst:
            case Cons(head, tail):
                out.append(head)
                lst = tail
            case Checkpoint(_, rest):
                lst = rest
            case _:
                return out


def count_checkpoints(lst: Any) -> int:
    """Number of checkpoints in a materialized or reflected list."""
    n = 0
    while True:
        match lst:
            case Cons(_, tail):
                lst = tail
            case Checkpoint(_, rest):
                n += 1
                lst = rest
            case _:
                return n


def list_demand(ctx: BackendContext, lst: List[Any], demand: int) -> int:
    """Force a list until ``demand`` elements are available; return how many were."""
    if demand <= 0:
        return 0
    n = 0
    for _ in iter_list(ctx, lst):
        n += 1
        if n >= demand:
            break
    return n


# Map


def list_map_eager[X, Y](ctx: BackendContext, lst: List[X], f: Callable[[X], Y]) -> List[Y]:
    match lst:
        case Cons(head, tail):
            return Cons(f(head), list_map_eager(ctx, tail, f))
        case Checkpoint(name, rest):
            left, right = name.fork()
            mapped = ctx.memo(left, _map_eager_rest, rest, f)
            return Checkpoint(right, ctx.cell(right, mapped))
        case Nil():
            return NIL
        case _:
            raise _not_a_list(lst)


def _map_eager_rest[X, Y](ctx: BackendContext, rest: Art[List[X]], f: Callable[[X], Y]) -> List[Y]:
    return list_map_eager(ctx, ctx.force(rest), f)


def list_map_lazy[X, Y](ctx: BackendContext, lst: List[X], f: Callable[[X], Y]) -> List[Y]:
    match lst:
        case Cons(head, tail):
            return Cons(f(head), list_map_lazy(ctx, tail, f))
        case Checkpoint(name, rest):
            left, right = name.fork()
            return Checkpoint(right, ctx.thunk(left, _map_lazy_rest, rest, f))
        case Nil():
            return NIL
        case _:
            raise _not_a_list(lst)


def _map_lazy_rest[X, Y](ctx: BackendContext, rest: Art[List[X]], f: Callable[[X], Y]) -> List[Y]:
    return list_map_lazy(ctx, ctx.force(rest), f)


# Filter


def list_filter_eager[X](ctx: BackendContext, lst: List[X], keep: Callable[[X], bool]) -> List[X]:
    match lst:
        case Cons(head, tail) if keep(head):
            return Cons(head, list_filter_eager(ctx, tail, keep))
        case Cons(_, tail):
            return list_filter_eager(ctx, tail, keep)
        case Checkpoint(name, rest):
            left, right = name.fork()
            filtered = ctx.memo(left, _filter_eager_rest, rest, keep)
            return Checkpoint(right, ctx.cell(right, filtered))
        case Nil():
            return NIL
        case _:
            raise _not_a_list(lst)


def _filter_eager_rest[X](ctx: BackendContext, rest: Art[List[X]], keep: Callable[[X], bool]) -> List[X]:
    return list_filter_eager(ctx, ctx.force(rest), keep)


def list_filter_lazy[X](ctx: BackendContext, lst: List[X], keep: Callable[[X], bool]) -> List[X]:
    match lst:
        case Cons(head, tail) if keep(head):
            return Cons(head, list_filter_lazy(ctx, tail, keep))
        case Cons(_, tail):
            return list_filter_lazy(ctx, tail, keep)
        case Checkpoint(name, rest):
            left, right = name.fork()
            return Checkpoint(right, ctx.thunk(left, _filter_lazy_rest, rest, keep))
        case Nil():
            return NIL
        case _:
            raise _not_a_list(lst)


def _filter_lazy_rest[X](ctx: BackendContext, rest: Art[List[X]], keep: Callable[[X], bool]) -> List[X]:
    return list_filter_lazy(ctx, ctx.force(rest), keep)


# Reverse


def list_reverse[X](ctx: BackendContext, lst: List[X], acc: List[X] = NIL) -> List[X]:
    while True:
        match lst:
            case Cons(head, tail):
                acc = Cons(head, acc)
                lst = tail
            case Checkpoint(name, rest):
                left, right = name.fork()
                acc = Checkpoint(right, ctx.cell(right, acc))
                return ctx.memo(left, _reverse_rest, rest, acc)
            case _:
                return acc


def _reverse_rest[X](ctx: BackendContext, rest: Art[List[X]], acc: List[X]) -> List[X]:
    return list_reverse(ctx, ctx.force(rest), acc)


# Folds


def list_fold[X, A](ctx: BackendContext, lst: List[X], acc: A, op: Callable[[A, X], A]) -> A:
    """Left fold, memoized at every checkpoint on the accumulator reached so far."""
    while True:
        match lst:
            case Cons(head, tail):
                acc = op(acc, head)
                lst = tail
            case Checkpoint(name, rest):
                left, _ = name.fork()
                return ctx.memo(left, _fold_rest, rest, acc, op)
            case _:
                return acc


def _fold_rest[X, A](ctx: BackendContext, rest: Art[List[X]], acc: A, op: Callable[[A, X], A]) -> A:
    return list_fold(ctx, ctx.force(rest), acc, op)


def list_sum(ctx: BackendContext, lst: List[int]) -> int:
    return list_fold(ctx, lst, 0, operator.add)


def list_max(ctx: BackendContext, lst: List[int]) -> int:
    return list_fold(ctx, lst, 0, max)
