"""Contracts a scenario implements: an input distribution and a computation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ._context import BackendContext
    from ._params import GenerateParams
    from ._rng import Rng


class InputDistribution[I, S](Protocol):
    """Generates an input and then edits it, step by step.

    All randomness must come from the ``rng`` argument; both backends
    replay the same draws.
    """

    def generate(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> I:
        """Produce the initial input."""
        ...

    def edit_init(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> S:
        """Produce the initial edit state."""
        ...

    def edit(self, ctx: BackendContext, input: I, edit_state: S, rng: Rng, params: GenerateParams) -> tuple[I, S]:  # noqa: A002
        """Apply one edit, returning the new input and edit state."""
        ...


class Computation[I, O](Protocol):
    """A computation that consumes its whole input."""

    def compute(self, ctx: BackendContext, input: I) -> O: ...  # noqa: A002


@runtime_checkable
class DemandComputation[I, O](Protocol):
    """A computation that is told how much of its output will be observed."""

    def compute_with_demand(self, ctx: BackendContext, input: I, demand: int) -> O: ...  # noqa: A002


@dataclass(frozen=True, slots=True)
class _IgnoreDemand[I, O]:
    computation: Computation[I, O]

    def compute_with_demand(self, ctx: BackendContext, input: I, demand: int) -> O:  # noqa: A002, ARG002
        return self.computation.compute(ctx, input)


def with_demand[I, O](computation: Computation[I, O] | DemandComputation[I, O]) -> DemandComputation[I, O]:
    """Lift a computation to the demand-aware interface.

    Demand-aware computations are returned as they are; plain ones ignore the
    demand.
    """
    if isinstance(computation, DemandComputation):
        return computation
    return _IgnoreDemand(computation)
