"""HTML rendering for incrlab labs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from htpy import Element, Node, a, code, div, h2, h3, li, main, nav, p, section, span, strong, table, tbody, td, th, tr, ul

from ._components import (
    counts_table,
    format_ns,
    render_value,
    samples_table,
    trace_section,
    validity_badge,
)
from ._layout import base_page

if TYPE_CHECKING:
    from incrlab._lab import LabOutcome
    from incrlab._params import LabParams
    from incrlab._results import Sample


def render_lab_html(outcome: LabOutcome) -> str:
    """Render a single lab, with every sample inline, as an HTML document."""
    return base_page(
        page_title=outcome.name,
        sidebar=_render_sidebar(outcome),
        content=main(".content")[
            render_lab_overview(outcome, link_samples=False),
            section(id="samples")[
                h2["Samples"],
                [render_sample_detail(outcome.name, s) for s in outcome.results.samples] if outcome.results else None,
            ],
        ],
    )


def _render_sidebar(outcome: LabOutcome) -> Element:
    samples = outcome.results.samples if outcome.results else ()
    return nav(".sidebar")[
        h2["Navigation"],
        ul[
            li[a(href="#overview")["Overview"]],
            li[a(href="#samples")["Samples"]],
            ul[(li[a(href=f"#sample-{s.batch_index}")[f"Step {s.batch_index}"]] for s in samples)],
        ],
    ]


def render_lab_overview(outcome: LabOutcome, *, link_samples: bool = True) -> Element:
    """Render the summary of one lab: parameters, validity and the samples table."""
    header: list[Node] = [h2[outcome.name]]
    if outcome.lab.url:
        header.append(p[a(href=outcome.lab.url)[outcome.lab.url]])

    if outcome.results is None:
        return section(id="overview")[
            header,
            div(".error-note")[outcome.error],
            params_table(outcome.params),
        ]

    results = outcome.results
    return section(id="overview")[
        header,
        div(".summary-panel")[
            span[f"Samples: {len(results)}"],
            span["Outputs: ", validity_badge(results.all_valid)],
            span[f"Mismatched steps: {', '.join(map(str, results.mismatches)) or 'none'}"],
        ],
        params_table(outcome.params),
        samples_table(outcome.name, results.samples) if link_samples else _unlinked_samples_table(results.samples),
    ]


def _unlinked_samples_table(samples: tuple[Sample, ...]) -> Element:
    return table(".data-table")[
        tbody[
            tr[th["Step"], th["Baseline compute"], th["Incremental compute"], th["Output"]],
            (
                tr[
                    td[a(href=f"#sample-{s.batch_index}")[str(s.batch_index)]],
                    td(".number")[format_ns(s.baseline.compute_output.time_ns)],
                    td(".number")[format_ns(s.incremental.compute_output.time_ns)],
                    td[validity_badge(s.output_valid)],
                ]
                for s in samples
            ),
        ],
    ]


def params_table(params: LabParams) -> Element:
    sample_params = params.sample_params
    generate_params = sample_params.generate_params
    rows = [
        ("size", generate_params.size),
        ("gauge", generate_params.gauge),
        ("nominal_strategy", generate_params.nominal_strategy),
        ("input_seeds", ", ".join(map(str, sample_params.input_seeds))),
        ("demand", sample_params.demand),
        ("validate_output", sample_params.validate_output),
        ("change_batch_size", sample_params.change_batch_size),
        ("change_batch_loop_count", params.change_batch_loop_count),
        ("reflect_trace", sample_params.reflect_trace),
        ("reflect_graph", sample_params.reflect_graph),
    ]
    return table(".data-table")[tbody[(tr[th[code[k]], td[str(v)]] for k, v in rows)]]


def render_sample_detail(lab_name: str, sample: Sample) -> Element:
    """Render everything captured for one sample."""
    base = sample.baseline
    incr = sample.incremental
    return section(id=f"sample-{sample.batch_index}")[
        h3[f"{lab_name}: step {sample.batch_index} ", validity_badge(sample.output_valid)],
        table(".data-table")[
            tbody[
                tr[th[""], th["Baseline"], th["Incremental"]],
                tr[
                    th["Edit"],
                    td(".number")[format_ns(base.process_input.time_ns)],
                    td(".number")[format_ns(incr.process_input.time_ns)],
                ],
                tr[
                    th["Compute"],
                    td(".number")[format_ns(base.compute_output.time_ns)],
                    td(".number")[format_ns(incr.compute_output.time_ns)],
                ],
                tr[th["Input"], td[render_value(base.input)], td[render_value(incr.input)]],
                tr[th["Output"], td[render_value(base.output)], td[render_value(incr.output)]],
            ],
        ],
        h3["Edit operations"],
        counts_table(base.process_input, incr.process_input),
        h3["Compute operations"],
        counts_table(base.compute_output, incr.compute_output),
        h3["Incremental edit trace"],
        trace_section(incr.process_input),
        h3["Incremental compute trace"],
        trace_section(incr.compute_output),
        _graph_summary(sample),
    ]


def _graph_summary(sample: Sample) -> Node:
    graph = sample.incremental.compute_output.graph
    if graph is None:
        return None
    return p[
        strong["Graph: "],
        f"{len(graph)} nodes, {graph.edge_count} edges",
    ]
