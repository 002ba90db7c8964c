"""Reflection of engine traces and graphs into renderable trees."""

from ._div import Div, div_of_edge, div_of_loc, div_of_name, div_of_trace
from ._trees import TraceTrees, alloc_tree, force_tree, reflect_trees, trace_roots

__all__ = [
    "Div",
    "TraceTrees",
    "alloc_tree",
    "div_of_edge",
    "div_of_loc",
    "div_of_name",
    "div_of_trace",
    "force_tree",
    "reflect_trees",
    "trace_roots",
]
