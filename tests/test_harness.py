"""Tests for the sample harness."""

from typing import Any

import pytest

from incrlab import (
    BackendContext,
    ConfigurationError,
    GenerateParams,
    LabParams,
    NominalStrategy,
    ReplayDivergenceError,
    Rng,
    SampleHarness,
    SampleParams,
    UnimplementedScenario,
)
from incrlab._catalog import EagerMap, LazyFilter, LazyMap, Sum, UniformPrepend, count_checkpoints, list_elements
from incrlab._catalog._lists import square
from incrlab._catalog._scenarios import Unimplemented


def _params(
    size: int = 4,
    gauge: int = 1,
    loops: int = 0,
    **sample_changes: Any,
) -> LabParams:
    return LabParams(
        SampleParams(generate_params=GenerateParams(size=size, gauge=gauge), **sample_changes),
        change_batch_loop_count=loops,
    )


class TestEndToEnd:
    """A single step of the square map over four prepended elements."""

    def test_square_map(self) -> None:
        params = _params(size=4, gauge=1, loops=0, input_seeds=(0,))

        results = SampleHarness(UniformPrepend(), EagerMap(square), params).run()

        assert len(results) == 1
        sample = results.samples[0]
        assert sample.batch_index == 0
        assert sample.output_valid is True
        elements = list_elements(sample.baseline.input)
        assert len(elements) == 4
        expected = [x * x for x in elements]
        assert list_elements(sample.baseline.output) == expected
        assert list_elements(sample.incremental.output) == expected
        assert results.all_valid is True


class TestDeterminism:
    """Runs with the same seeds replay the same inputs and edit states."""

    @staticmethod
    def _run(params: LabParams) -> list[tuple[Any, Any, int, int]]:
        harness = SampleHarness(UniformPrepend(), EagerMap(square), params)
        steps = []
        while (sample := harness.sample()) is not None:
            assert harness.baseline.current is not None
            assert harness.incremental.current is not None
            steps.append(
                (
                    sample.baseline.input,
                    sample.incremental.input,
                    harness.baseline.current[1],
                    harness.incremental.current[1],
                ),
            )
        return steps

    def test_same_seeds_same_steps(self) -> None:
        params = _params(size=5, gauge=2, loops=4, input_seeds=(3, 4))

        assert self._run(params) == self._run(params)

    def test_backends_see_equal_inputs(self) -> None:
        params = _params(size=5, gauge=2, loops=4, change_batch_size=2)

        for baseline_input, incremental_input, baseline_state, incremental_state in self._run(params):
            assert baseline_input == incremental_input
            assert baseline_state == incremental_state

    def test_different_seeds_different_inputs(self) -> None:
        first = self._run(_params(size=5, input_seeds=(0,)))
        second = self._run(_params(size=5, input_seeds=(1,)))

        assert first[0][0] != second[0][0]


class TestSteps:
    """Tests for stepping through change batches."""

    def test_sample_count(self) -> None:
        results = SampleHarness(UniformPrepend(), Sum(), _params(loops=3)).run()

        assert [s.batch_index for s in results.samples] == [0, 1, 2, 3]

    def test_exhausted(self) -> None:
        harness = SampleHarness(UniformPrepend(), Sum(), _params(loops=0))

        assert harness.sample() is not None
        assert harness.exhausted
        assert harness.sample() is None

    def test_batch_size(self) -> None:
        harness = SampleHarness(UniformPrepend(), EagerMap(square), _params(size=4, loops=1, change_batch_size=3))

        samples = list(harness)

        assert len(list_elements(samples[1].baseline.input)) == 7
        assert harness.baseline.current is not None
        assert harness.baseline.current[1] == 7

    def test_baseline_is_left_installed(self) -> None:
        harness = SampleHarness(UniformPrepend(), Sum(), _params())
        harness.sample()

        assert harness.ctx.is_baseline()

    def test_every_step_is_valid(self) -> None:
        results = SampleHarness(UniformPrepend(), LazyMap(square), _params(size=6, gauge=2, loops=5, demand=3)).run()

        assert results.all_valid is True
        assert results.mismatches == ()


class TestGauge:
    """Checkpoint density of the initial generation."""

    @staticmethod
    def _initial_input(size: int, gauge: int) -> Any:
        results = SampleHarness(UniformPrepend(), Sum(), _params(size=size, gauge=gauge)).run()
        return results.samples[0].baseline.input

    def test_gauge_one_checkpoints_every_element(self) -> None:
        assert count_checkpoints(self._initial_input(size=6, gauge=1)) == 6

    def test_gauge_equal_to_size_gives_one_checkpoint(self) -> None:
        assert count_checkpoints(self._initial_input(size=6, gauge=6)) == 1

    def test_gauge_zero_is_rejected_before_generation(self) -> None:
        with pytest.raises(ConfigurationError):
            _params(gauge=0)


class TestCapture:
    """What is captured depends on the sample parameters."""

    def test_traces_and_graph_only_for_incremental(self) -> None:
        sample = SampleHarness(UniformPrepend(), EagerMap(square), _params()).run().samples[0]

        assert sample.incremental.compute_output.traces
        assert sample.incremental.compute_output.graph is not None
        assert sample.incremental.process_input.traces
        assert sample.baseline.compute_output.traces == ()
        assert sample.baseline.compute_output.graph is None

    def test_reflection_disabled(self) -> None:
        params = _params(reflect_trace=False, reflect_graph=False)

        sample = SampleHarness(UniformPrepend(), EagerMap(square), params).run().samples[0]

        assert sample.incremental.compute_output.traces == ()
        assert sample.incremental.compute_output.graph is None
        assert sample.incremental.input is None
        assert sample.baseline.output is None

    def test_validation_disabled(self) -> None:
        results = SampleHarness(UniformPrepend(), Sum(), _params(loops=2, validate_output=False)).run()

        assert all(s.output_valid is None for s in results.samples)
        assert results.all_valid is None

    def test_counts_are_always_measured(self) -> None:
        params = _params(reflect_trace=False, reflect_graph=False)

        sample = SampleHarness(UniformPrepend(), EagerMap(square), params).run().samples[0]

        assert sample.baseline.process_input.counts.alloc_fresh == 4
        assert sample.incremental.process_input.counts.alloc_fresh == 4
        assert sample.incremental.compute_output.counts.force_miss == 4
        assert sample.baseline.compute_output.counts.total > 0

    def test_incremental_reuses_work_after_a_prepend(self) -> None:
        results = SampleHarness(UniformPrepend(), EagerMap(square), _params(size=8, loops=1)).run()
        step = results.samples[1]

        assert step.incremental.compute_output.counts.force_miss == 1
        assert step.incremental.compute_output.counts.force_hit == 1
        assert step.baseline.compute_output.counts.force_miss == 9


class TestFailures:
    """Errors raised while sampling."""

    def test_unimplemented_computation_yields_no_samples(self) -> None:
        harness = SampleHarness(UniformPrepend(), Unimplemented("exercise"), _params(loops=3))

        with pytest.raises(UnimplementedScenario, match="exercise"):
            harness.run()
        assert harness.batch_index == 0

    def test_unimplemented_nominal_strategy(self) -> None:
        params = LabParams(
            SampleParams(generate_params=GenerateParams(size=3, nominal_strategy=NominalStrategy.BY_CONTENT)),
            change_batch_loop_count=0,
        )

        with pytest.raises(UnimplementedScenario, match="by_content"):
            SampleHarness(UniformPrepend(), Sum(), params).run()

    def test_backends_drawing_different_randomness(self) -> None:
        class Greedy:
            """Draws one extra number under the incremental backend."""

            def generate(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> int:  # noqa: ARG002
                if ctx.is_incremental():
                    rng.below(10)
                return rng.below(10)

            def edit_init(self, ctx: BackendContext, rng: Rng, params: GenerateParams) -> int:  # noqa: ARG002
                return 0

            def edit(self, ctx: BackendContext, input: int, edit_state: int, rng: Rng, params: GenerateParams) -> tuple[int, int]:  # noqa: A002, ARG002, E501
                return input, edit_state

        with pytest.raises(ReplayDivergenceError, match="step 0"):
            SampleHarness(Greedy(), Sum(), _params()).run()


class Disagrees:
    """Returns a different answer under each backend."""

    def compute(self, ctx: BackendContext, input: Any) -> int:  # noqa: A002, ARG002
        return 1 if ctx.is_incremental() else 0


class TestValidation:
    """Comparing the outputs of the two backends."""

    @staticmethod
    def _incremental_steps(validate_output: bool) -> list[tuple[Any, int]]:
        params = _params(size=20, gauge=1, loops=2, demand=2, validate_output=validate_output)
        results = SampleHarness(UniformPrepend(), LazyMap(square), params).run()
        steps = []
        for sample in results.samples:
            metrics = sample.incremental.compute_output
            assert metrics.graph is not None
            steps.append((metrics.counts, len(metrics.graph)))
        return steps

    def test_validation_does_not_touch_the_incremental_graph(self) -> None:
        assert self._incremental_steps(validate_output=True) == self._incremental_steps(validate_output=False)

    def test_lazy_output_beyond_demand_is_not_forced(self) -> None:
        results = SampleHarness(UniformPrepend(), LazyMap(square), _params(size=20, gauge=1, loops=2, demand=2)).run()

        assert results.all_valid is True
        for sample in results.samples[1:]:
            assert sample.incremental.compute_output.counts.force_miss <= 2

    def test_mismatch_is_recorded_and_the_run_continues(self) -> None:
        results = SampleHarness(UniformPrepend(), Disagrees(), _params(loops=2)).run()

        assert len(results) == 3
        assert [s.output_valid for s in results.samples] == [False, False, False]
        assert results.mismatches == (0, 1, 2)
        assert results.all_valid is False

    def test_mismatch_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="incrlab._harness"):
            SampleHarness(UniformPrepend(), Disagrees(), _params()).run()

        assert "Outputs differ at step 0" in caplog.text


class TestDemand:
    """Demand bounds how much of a lazy output is forced."""

    def test_zero_demand_forces_nothing(self) -> None:
        params = _params(size=6, gauge=1, demand=0)

        sample = SampleHarness(UniformPrepend(), LazyFilter(lambda _: False), params).run().samples[0]

        counts = sample.incremental.compute_output.counts
        assert counts.force_miss == 0
        assert counts.force_read == 0
        assert sample.output_valid is True
