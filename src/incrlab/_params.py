"""Parameters for generating inputs, collecting samples and running labs.

All parameter types are frozen dataclasses validated on construction, so a
malformed value is rejected before any input is generated. Loading from TOML
goes through pydantic ``TypeAdapter``s over the same dataclasses.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ._enums import NominalStrategy
from ._errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GenerateParams:
    """Shape of a synthetic input.

    Attributes:
        size: Number of elements to generate.
        gauge: Every ``gauge``-th element is wrapped in a named checkpoint.
        nominal_strategy: How checkpoint names are derived.

    """

    size: int = 10
    gauge: int = 1
    nominal_strategy: NominalStrategy = NominalStrategy.REGULAR

    def __post_init__(self) -> None:
        if self.size < 0:
            msg = f"size must be non-negative, got {self.size}"
            raise ConfigurationError(msg)
        if self.gauge < 1:
            msg = f"gauge must be at least 1, got {self.gauge}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class SampleParams:
    """Parameters that fully determine the randomness and reporting of one run.

    Attributes:
        input_seeds: Seeds for the run's pseudo-random generator.
        generate_params: Shape of the generated input.
        demand: For lazy computations, how many output elements to force.
            Eager computations ignore it.
        validate_output: Compare baseline and incremental outputs after every step.
        change_batch_size: Number of edits applied per step after the first.
        reflect_trace: Capture the incremental engine's trace log while computing.
        reflect_graph: Capture a snapshot of the incremental graph and of the
            input/output values after computing.

    """

    input_seeds: tuple[int, ...] = (0,)
    generate_params: GenerateParams = field(default_factory=GenerateParams)
    demand: int = 10
    validate_output: bool = True
    change_batch_size: int = 1
    reflect_trace: bool = True
    reflect_graph: bool = True

    def __post_init__(self) -> None:
        if not self.input_seeds:
            msg = "input_seeds must contain at least one seed"
            raise ConfigurationError(msg)
        if any(seed < 0 for seed in self.input_seeds):
            msg = f"input_seeds must be non-negative, got {self.input_seeds}"
            raise ConfigurationError(msg)
        if self.demand < 0:
            msg = f"demand must be non-negative, got {self.demand}"
            raise ConfigurationError(msg)
        if self.change_batch_size < 1:
            msg = f"change_batch_size must be at least 1, got {self.change_batch_size}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class LabParams:
    """Parameters for running a single lab.

    Attributes:
        sample_params: Parameters shared by every sample of the run.
        change_batch_loop_count: Number of change batches after the initial
            generation; a run yields ``change_batch_loop_count + 1`` samples.

    """

    sample_params: SampleParams = field(default_factory=SampleParams)
    change_batch_loop_count: int = 10

    def __post_init__(self) -> None:
        if self.change_batch_loop_count < 0:
            msg = f"change_batch_loop_count must be non-negative, got {self.change_batch_loop_count}"
            raise ConfigurationError(msg)


def default_lab_params() -> LabParams:
    """Return the built-in lab parameters."""
    return LabParams()


_LAB_PARAMS_ADAPTER: TypeAdapter[LabParams] = TypeAdapter(LabParams)


def lab_params_from_dict(data: dict[str, Any]) -> LabParams:
    """Validate a mapping (e.g. parsed TOML) into ``LabParams``.

    Missing keys take their defaults.

    Raises:
        ConfigurationError: If a value has the wrong type or violates a constraint.

    """
    try:
        return _LAB_PARAMS_ADAPTER.validate_python(data, strict=False)
    except ValidationError as e:
        msg = f"Invalid lab parameters: {e}"
        raise ConfigurationError(msg) from e


def lab_params_to_dict(params: LabParams) -> dict[str, Any]:
    """Serialize ``LabParams`` into TOML-compatible primitives."""
    return _LAB_PARAMS_ADAPTER.dump_python(params, mode="json")


def load_lab_params(path: Path) -> LabParams:
    """Load lab parameters from a TOML file.

    Raises:
        ConfigurationError: If the file is not valid TOML or holds invalid parameters.

    """
    logger.debug("Loading lab parameters from %s", path)
    with path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {path}: {e}"
            raise ConfigurationError(msg) from e
    return lab_params_from_dict(data)
