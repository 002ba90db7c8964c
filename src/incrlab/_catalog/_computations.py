"""Computations over checkpointed lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ._lists import (
    List,
    list_demand,
    list_filter_eager,
    list_filter_lazy,
    list_map_eager,
    list_map_lazy,
    list_max,
    list_reverse,
    list_sum,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from incrlab._context import BackendContext


@dataclass(frozen=True, slots=True)
class EagerMap:
    f: Callable[[int], int]

    def compute(self, ctx: BackendContext, input: List[int]) -> List[int]:  # noqa: A002
        return list_map_eager(ctx, input, self.f)


@dataclass(frozen=True, slots=True)
class LazyMap:
    """Maps lazily, then forces only as many output elements as demanded."""

    f: Callable[[int], int]

    def compute_with_demand(self, ctx: BackendContext, input: List[int], demand: int) -> List[int]:  # noqa: A002
        output = list_map_lazy(ctx, input, self.f)
        list_demand(ctx, output, demand)
        return output


@dataclass(frozen=True, slots=True)
class EagerFilter:
    keep: Callable[[int], bool]

    def compute(self, ctx: BackendContext, input: List[int]) -> List[int]:  # noqa: A002
        return list_filter_eager(ctx, input, self.keep)


@dataclass(frozen=True, slots=True)
class LazyFilter:
    """Filters lazily, then forces only as many output elements as demanded."""

    keep: Callable[[int], bool]

    def compute_with_demand(self, ctx: BackendContext, input: List[int], demand: int) -> List[int]:  # noqa: A002
        output = list_filter_lazy(ctx, input, self.keep)
        list_demand(ctx, output, demand)
        return output


@dataclass(frozen=True, slots=True)
class Reverse:
    def compute(self, ctx: BackendContext, input: List[int]) -> List[int]:  # noqa: A002
        return list_reverse(ctx, input)


@dataclass(frozen=True, slots=True)
class Sum:
    def compute(self, ctx: BackendContext, input: List[int]) -> int:  # noqa: A002
        return list_sum(ctx, input)


@dataclass(frozen=True, slots=True)
class Max:
    def compute(self, ctx: BackendContext, input: List[int]) -> int:  # noqa: A002
        return list_max(ctx, input)
