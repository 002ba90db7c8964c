"""Differential benchmarks of incremental computation."""

__all__ = [
    "Art",
    "BackendContext",
    "BackendDesyncError",
    "Computation",
    "ConfigurationError",
    "DanglingLocationError",
    "DemandComputation",
    "DependencyGraph",
    "Div",
    "Effect",
    "EffectKind",
    "Engine",
    "EngineCounts",
    "EngineKind",
    "EngineMetrics",
    "EngineSample",
    "GenerateParams",
    "GraphSnapshot",
    "IncrementalEngine",
    "InputDistribution",
    "LabDef",
    "LabError",
    "LabOutcome",
    "LabParams",
    "LabResults",
    "Loc",
    "NaiveEngine",
    "Name",
    "NominalStrategy",
    "ReplayDivergenceError",
    "Rng",
    "Sample",
    "SampleHarness",
    "SampleParams",
    "StrEnumWithDoc",
    "Trace",
    "TraceEdge",
    "TraceTrees",
    "UnimplementedScenario",
    "all_labs",
    "alloc_tree",
    "default_lab_params",
    "export_results_to_toml",
    "find_lab",
    "force_tree",
    "generate_site",
    "lab_params_from_dict",
    "lab_params_to_dict",
    "load_lab_params",
    "reflect_trees",
    "render_lab_html",
    "results_to_dict",
    "run_labs",
    "run_with_large_stack",
    "with_demand",
    "write_runtimes_csv",
]

from ._catalog import all_labs, find_lab
from ._context import BackendContext
from ._contracts import Computation, DemandComputation, InputDistribution, with_demand
from ._engine import (
    Art,
    Engine,
    EngineCounts,
    GraphSnapshot,
    IncrementalEngine,
    Loc,
    NaiveEngine,
    Name,
    Trace,
    TraceEdge,
)
from ._enums import Effect, EffectKind, EngineKind, NominalStrategy, StrEnumWithDoc
from ._errors import (
    BackendDesyncError,
    ConfigurationError,
    DanglingLocationError,
    LabError,
    ReplayDivergenceError,
    UnimplementedScenario,
)
from ._export import generate_site, render_lab_html
from ._graph import DependencyGraph
from ._harness import SampleHarness
from ._io import export_results_to_toml, results_to_dict, write_runtimes_csv
from ._lab import LabDef, LabOutcome, run_labs
from ._params import (
    GenerateParams,
    LabParams,
    SampleParams,
    default_lab_params,
    lab_params_from_dict,
    lab_params_to_dict,
    load_lab_params,
)
from ._reflect import Div, TraceTrees, alloc_tree, force_tree, reflect_trees
from ._results import EngineMetrics, EngineSample, LabResults, Sample
from ._rng import Rng
from ._worker import run_with_large_stack
