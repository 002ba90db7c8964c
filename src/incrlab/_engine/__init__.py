"""Bundled engines: a from-scratch baseline and an incremental graph engine."""

from ._core import Art, Engine, EngineCounts, Unforced, matches_forced, materialize, reflect_value
from ._incremental import CycleError, IncrementalEngine
from ._naive import NaiveEngine
from ._names import Loc, Name
from ._trace import GraphSnapshot, NodeSnapshot, SuccSnapshot, Trace, TraceEdge, walk_traces

__all__ = [
    "Art",
    "CycleError",
    "Engine",
    "EngineCounts",
    "GraphSnapshot",
    "IncrementalEngine",
    "Loc",
    "NaiveEngine",
    "Name",
    "NodeSnapshot",
    "SuccSnapshot",
    "Trace",
    "TraceEdge",
    "Unforced",
    "matches_forced",
    "materialize",
    "reflect_value",
    "walk_traces",
]
