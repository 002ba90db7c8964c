"""Reusable htpy components for incrlab HTML export."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from htpy import Element, Node, a, code, details, div, em, h4, p, span, summary, table, tbody, td, th, thead, tr

from incrlab._errors import DanglingLocationError
from incrlab._reflect import Div, div_of_trace, reflect_trees

from ._urls import url_for_sample

if TYPE_CHECKING:
    from incrlab._results import EngineMetrics, Sample

logger = logging.getLogger(__name__)

_MAX_VALUE_LENGTH = 200


def validity_badge(output_valid: bool | None) -> Element:  # noqa: FBT001
    """Render the output validation result of a sample."""
    if output_valid is None:
        return span(".status.unchecked")["– UNCHECKED"]
    if output_valid:
        return span(".status.pass")["✓ PASS"]
    return span(".status.fail")["✗ FAIL"]


def format_ns(time_ns: int) -> str:
    """Format a duration in nanoseconds with a readable unit."""
    if time_ns < 1_000:
        return f"{time_ns} ns"
    if time_ns < 1_000_000:
        return f"{time_ns / 1_000:.1f} µs"
    if time_ns < 1_000_000_000:
        return f"{time_ns / 1_000_000:.2f} ms"
    return f"{time_ns / 1_000_000_000:.3f} s"


def format_speedup(speedup: float | None) -> str:
    if speedup is None:
        return "-"
    return f"{speedup:.2f}×"


def render_value(value: Any) -> Node:
    """Render a captured input or output value."""
    if value is None:
        return em["not captured"]
    text = str(value)
    if len(text) > _MAX_VALUE_LENGTH:
        text = text[: _MAX_VALUE_LENGTH - 3] + "..."
    return code[text]


def samples_table(lab_name: str, samples: tuple[Sample, ...]) -> Element:
    """Render one row per sample with timings and validity, linking to sample pages."""
    rows: list[Element] = [
        tr[
            td[a(href=url_for_sample(lab_name, s.batch_index))[str(s.batch_index)]],
            td(".number")[format_ns(s.baseline.process_input.time_ns)],
            td(".number")[format_ns(s.baseline.compute_output.time_ns)],
            td(".number")[format_ns(s.incremental.process_input.time_ns)],
            td(".number")[format_ns(s.incremental.compute_output.time_ns)],
            td(".number")[format_speedup(s.speedup)],
            td[validity_badge(s.output_valid)],
        ]
        for s in samples
    ]
    return table(".data-table")[
        thead[
            tr[
                th["Step"],
                th["Baseline edit"],
                th["Baseline compute"],
                th["Incremental edit"],
                th["Incremental compute"],
                th["Speedup"],
                th["Output"],
            ],
        ],
        tbody[rows],
    ]


def counts_table(baseline: EngineMetrics, incremental: EngineMetrics) -> Element:
    """Render the engine operation counts of both backends side by side."""
    base_counts = baseline.counts.as_dict()
    incr_counts = incremental.counts.as_dict()
    return table(".data-table")[
        thead[tr[th["Operation"], th["Baseline"], th["Incremental"]]],
        tbody[
            (
                tr[td[code[name.replace("_", "-")]], td(".number")[str(base_counts[name])], td(".number")[str(n)]]
                for name, n in incr_counts.items()
            ),
        ],
    ]


def render_div(d: Div) -> Element:
    """Render a reflected div tree as nested HTML divs."""
    selector = "." + ".".join((d.tag, *d.classes))
    return div(selector)[d.text, (render_div(child) for child in d.children)]


def trace_section(metrics: EngineMetrics) -> Node:
    """Render the trace log and the allocation and force trees of a scope.

    A trace that references a location missing from the graph snapshot is
    reported in place of the trees; the trace log itself is still shown.
    """
    if not metrics.traces:
        return p[em["No trace captured."]]

    log = details[
        summary[f"Trace log ({len(metrics.traces)} top-level operations)"],
        div(".sample-content")[(render_div(div_of_trace(t)) for t in metrics.traces)],
    ]
    if metrics.graph is None:
        return log

    try:
        trees = reflect_trees(metrics.traces, metrics.graph)
    except DanglingLocationError as e:
        logger.warning("Cannot reflect trees: %s", e)
        return [log, div(".error-note")[f"Trees unavailable: {e}"]]

    return [
        log,
        details[
            summary[f"Allocation and force trees ({len(trees)} roots)"],
            div(".sample-content")[
                (
                    div[
                        h4[code[str(t.root)]],
                        render_div(t.alloc),
                        render_div(t.force),
                    ]
                    for t in trees
                ),
            ],
        ],
    ]
