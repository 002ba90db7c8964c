"""Ordered directed graphs over engine locations."""

from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph"]
