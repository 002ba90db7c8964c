"""The sample harness: drives a scenario under both backends, step by step.

Each step hands the baseline and the incremental backend their own fork of
the same master generator, lets each one generate or edit its input and then
compute its output, and records what every phase cost. The master generator
then advances to the incremental fork, and the two forks must agree.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._context import BackendContext
from ._contracts import with_demand
from ._engine import IncrementalEngine, NaiveEngine, Name, matches_forced
from ._enums import EngineKind
from ._errors import ReplayDivergenceError
from ._results import EngineMetrics, EngineSample, LabResults, Sample
from ._rng import Rng

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from ._contracts import Computation, DemandComputation, InputDistribution
    from ._engine import Engine
    from ._params import LabParams, SampleParams

logger = logging.getLogger(__name__)

COMPUTE_NAMESPACE = Name.of_str("compute")


@dataclass(slots=True)
class EngineState[I, S]:
    """A backend's engine plus its current input and edit state.

    ``current`` is None until the first step has generated an input.
    """

    engine: Engine
    current: tuple[I, S] | None = None


def measure[X](ctx: BackendContext, params: SampleParams, thunk: Callable[[], X]) -> tuple[X, EngineMetrics]:
    """Run ``thunk`` under the active engine, timing it and counting engine operations.

    Trace logs and graph snapshots are only taken from the incremental
    engine, and only when ``params`` asks for them.
    """
    engine = ctx.active
    incremental = engine.kind is EngineKind.INCREMENTAL
    tracing = params.reflect_trace and incremental
    if tracing:
        engine.trace_begin()
    before = engine.counts()
    start = time.perf_counter_ns()
    try:
        value = thunk()
        elapsed = time.perf_counter_ns() - start
    finally:
        traces = engine.trace_end() if tracing else ()
    graph = engine.snapshot() if params.reflect_graph and incremental else None
    return value, EngineMetrics(elapsed, engine.counts() - before, traces, graph)


class SampleHarness[I, S, O]:
    """Collects samples of a scenario, one step at a time.

    The first step generates the input; every later step applies
    ``change_batch_size`` edits to it. After ``change_batch_loop_count``
    change batches the harness is exhausted.
    """

    def __init__(
        self,
        distribution: InputDistribution[I, S],
        computation: Computation[I, O] | DemandComputation[I, O],
        params: LabParams,
    ) -> None:
        self.params = params
        self.distribution = distribution
        self.computation = with_demand(computation)
        self.ctx = BackendContext()

        self.ctx.install(IncrementalEngine())
        self.ctx.expect(EngineKind.INCREMENTAL)
        incremental_engine = self.ctx.install(NaiveEngine())
        self.ctx.expect(EngineKind.BASELINE)
        assert incremental_engine is not None

        self.incremental: EngineState[I, S] = EngineState(incremental_engine)
        self.baseline: EngineState[I, S] = EngineState(self.ctx.active)
        self.rng = Rng.from_seeds(params.sample_params.input_seeds)
        self.batch_index = 0

    @property
    def exhausted(self) -> bool:
        return self.batch_index > self.params.change_batch_loop_count

    def sample(self) -> Sample | None:
        """Collect the next sample, or return None when the run is over.

        Raises:
            ReplayDivergenceError: If the backends consumed different randomness.
            BackendDesyncError: If the active backend is not the expected one.

        """
        if self.exhausted:
            return None
        sample_params = self.params.sample_params
        logger.debug("Collecting sample %d", self.batch_index)

        self._switch_to(self.baseline.engine, EngineKind.BASELINE)
        baseline_rng = self.rng.fork()
        baseline_output, baseline = self._engine_sample(self.baseline, baseline_rng)

        self._switch_to(self.incremental.engine, EngineKind.INCREMENTAL)
        incremental_rng = self.rng.fork()
        incremental_output, incremental = self._engine_sample(self.incremental, incremental_rng)

        if baseline_rng != incremental_rng:
            msg = (
                f"Backends drew different randomness at step {self.batch_index}: "
                f"baseline at {baseline_rng!r}, incremental at {incremental_rng!r}"
            )
            raise ReplayDivergenceError(msg)
        self.rng = incremental_rng

        output_valid = None
        if sample_params.validate_output:
            # Only what the incremental backend already forced is compared.
            incremental_value = self.ctx.reflect_value(incremental_output)
            self._switch_to(self.baseline.engine, EngineKind.BASELINE)
            baseline_value = self.ctx.materialize(baseline_output)
            output_valid = matches_forced(incremental_value, baseline_value)
            if not output_valid:
                logger.warning(
                    "Outputs differ at step %d: baseline %r, incremental %r",
                    self.batch_index,
                    baseline_value,
                    incremental_value,
                )
        else:
            self._switch_to(self.baseline.engine, EngineKind.BASELINE)

        sample = Sample(self.batch_index, baseline, incremental, output_valid)
        self.batch_index += 1
        return sample

    def __iter__(self) -> Iterator[Sample]:
        while (sample := self.sample()) is not None:
            yield sample

    def run(self) -> LabResults:
        """Collect every remaining sample."""
        return LabResults(tuple(self))

    def _switch_to(self, engine: Engine, kind: EngineKind) -> None:
        self.ctx.install(engine)
        self.ctx.expect(kind)

    def _engine_sample(self, state: EngineState[I, S], rng: Rng) -> tuple[Any, EngineSample]:
        sample_params = self.params.sample_params
        generate_params = sample_params.generate_params
        distribution = self.distribution
        ctx = self.ctx

        if state.current is None:

            def process() -> tuple[I, S]:
                input_ = distribution.generate(ctx, rng, generate_params)
                return input_, distribution.edit_init(ctx, rng, generate_params)

        else:
            previous = state.current

            def process() -> tuple[I, S]:
                input_, edit_state = previous
                for _ in range(sample_params.change_batch_size):
                    input_, edit_state = distribution.edit(ctx, input_, edit_state, rng, generate_params)
                return input_, edit_state

        state.current, process_metrics = measure(ctx, sample_params, process)
        input_ = state.current[0]
        captured_input = ctx.reflect_value(input_) if sample_params.reflect_graph else None

        with ctx.namespace(COMPUTE_NAMESPACE):
            output, compute_metrics = measure(
                ctx,
                sample_params,
                lambda: self.computation.compute_with_demand(ctx, input_, sample_params.demand),
            )
        captured_output = ctx.reflect_value(output) if sample_params.reflect_graph else None

        return output, EngineSample(process_metrics, compute_metrics, captured_input, captured_output)
