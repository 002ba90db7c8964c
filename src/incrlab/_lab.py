"""Lab definitions and batch execution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._errors import UnimplementedScenario
from ._harness import SampleHarness

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ._contracts import Computation, DemandComputation, InputDistribution
    from ._params import LabParams
    from ._results import LabResults

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LabDef:
    """A named scenario: an input distribution paired with a computation.

    Attributes:
        name: Unique identifier, used in reports and on the command line.
        distribution: How inputs are generated and edited.
        computation: What is computed from each input.
        url: Optional link to documentation about the scenario.

    """

    name: str
    distribution: InputDistribution[Any, Any]
    computation: Computation[Any, Any] | DemandComputation[Any, Any]
    url: str | None = None

    def run(self, params: LabParams) -> LabResults:
        """Collect every sample of this lab under ``params``.

        Raises:
            UnimplementedScenario: If the scenario is a declared stub.

        """
        logger.info("Running lab %s", self.name)
        results = SampleHarness(self.distribution, self.computation, params).run()
        logger.info("Lab %s collected %d samples", self.name, len(results))
        return results


@dataclass(frozen=True, slots=True)
class LabOutcome:
    """The result of running one lab in a batch.

    Exactly one of ``results`` and ``error`` is set.
    """

    lab: LabDef
    params: LabParams
    results: LabResults | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.results is not None

    @property
    def name(self) -> str:
        return self.lab.name


def run_labs(
    labs: Iterable[LabDef],
    params: LabParams,
    *,
    on_outcome: Callable[[LabOutcome], None] | None = None,
) -> list[LabOutcome]:
    """Run labs in order.

    A lab that turns out to be unimplemented is recorded as failed and the
    batch moves on. Any other error aborts the batch.
    """
    outcomes: list[LabOutcome] = []
    for lab in labs:
        try:
            outcome = LabOutcome(lab, params, results=lab.run(params))
        except UnimplementedScenario as e:
            logger.warning("Skipping lab %s: %s", lab.name, e)
            outcome = LabOutcome(lab, params, error=str(e))
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
    return outcomes
