"""Measurements produced by the sample harness."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ._engine import EngineCounts, GraphSnapshot, Trace


@dataclass(frozen=True, slots=True)
class EngineMetrics:
    """What one timed scope cost one backend.

    Attributes:
        time_ns: Wall-clock duration in nanoseconds.
        counts: Engine operations performed inside the scope.
        traces: Incremental trace log of the scope, when requested.
        graph: Incremental graph snapshot taken at the end of the scope, when
            requested.

    """

    time_ns: int
    counts: EngineCounts
    traces: tuple[Trace, ...] = ()
    graph: GraphSnapshot | None = None


@dataclass(frozen=True, slots=True)
class EngineSample:
    """One backend's part of a sample."""

    process_input: EngineMetrics
    compute_output: EngineMetrics
    input: Any = None
    output: Any = None


@dataclass(frozen=True, slots=True)
class Sample:
    """The measurements taken at one step of a run.

    ``output_valid`` is None when output validation is disabled.
    """

    batch_index: int
    baseline: EngineSample
    incremental: EngineSample
    output_valid: bool | None = None

    @property
    def speedup(self) -> float | None:
        """Baseline compute time over incremental compute time."""
        incremental_ns = self.incremental.compute_output.time_ns
        if incremental_ns == 0:
            return None
        return self.baseline.compute_output.time_ns / incremental_ns


@dataclass(frozen=True, slots=True)
class LabResults:
    """All samples of one run, in step order."""

    samples: tuple[Sample, ...] = field(default_factory=tuple)

    @property
    def all_valid(self) -> bool | None:
        """False if any sample mismatched, None if nothing was validated."""
        checked = [s.output_valid for s in self.samples if s.output_valid is not None]
        if not checked:
            return None
        return all(checked)

    @property
    def mismatches(self) -> tuple[int, ...]:
        """Batch indices whose outputs differed between the backends."""
        return tuple(s.batch_index for s in self.samples if s.output_valid is False)

    def __len__(self) -> int:
        return len(self.samples)
