"""A small tagged-tree representation of traces, locations and names.

A ``Div`` is what the HTML renderer draws: a tag, some CSS classes, optional
text and children. Building divs is separate from rendering them so the
reflection can be inspected and tested without HTML.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

    from incrlab._engine import Loc, Name, Trace, TraceEdge


@dataclass(frozen=True, slots=True)
class Div:
    """A node of a reflected tree.

    Attributes:
        tag: What the node represents, e.g. ``"trace"`` or ``"loc"``.
        classes: Extra CSS classes, in display order.
        text: Text content, if any.
        children: Child nodes.

    """

    tag: str
    classes: tuple[str, ...] = ()
    text: str | None = None
    children: tuple[Div, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def iter_divs(self) -> Generator[Div]:
        """Iterate over this div and all of its descendants, in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_divs()

    def find_all(self, tag: str) -> list[Div]:
        """All descendants (and self) with the given tag."""
        return [div for div in self.iter_divs() if div.tag == tag]


def div_of_name(name: Name) -> Div:
    return Div("name", text=str(name))


def div_of_loc(loc: Loc) -> Div:
    return Div(
        "loc",
        children=(
            Div("path", children=tuple(div_of_name(n) for n in loc.path)),
            div_of_name(loc.name),
        ),
    )


def div_of_edge(edge: TraceEdge) -> Div:
    classes = [edge.kind.value]
    if edge.dirty:
        classes.append("dirty")
    source = div_of_loc(edge.source) if edge.source is not None else Div("root", text="root")
    return Div("edge", tuple(classes), children=(source, div_of_loc(edge.target)))


def div_of_trace(trace: Trace) -> Div:
    """Reflect a trace, and every trace in its extent, into a div tree."""
    return Div(
        "trace",
        (trace.effect.value,),
        children=(
            Div("effect", text=trace.effect.value),
            div_of_edge(trace.edge),
            Div("extent", children=tuple(div_of_trace(t) for t in trace.extent)),
        ),
    )
