"""Console rendering of lab outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from incrlab._export._components import format_ns, format_speedup

if TYPE_CHECKING:
    from rich.console import Console

    from incrlab._lab import LabDef, LabOutcome


def _format_validity(outcome: LabOutcome) -> str:
    if outcome.results is None:
        return f"[red]✗ {escape(outcome.error or 'failed')}[/red]"
    match outcome.results.all_valid:
        case True:
            return "[green]✓ valid[/green]"
        case False:
            steps = ", ".join(map(str, outcome.results.mismatches))
            return f"[red]✗ mismatch at {steps}[/red]"
        case _:
            return "[yellow]- unchecked[/yellow]"


def render_summary_table(outcomes: list[LabOutcome], console: Console) -> None:
    """Render one row per lab with total compute times and the validation result."""
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Lab")
    table.add_column("Samples", justify="right")
    table.add_column("Baseline", justify="right")
    table.add_column("Incremental", justify="right")
    table.add_column("Speedup", justify="right")
    table.add_column("Outputs")

    for outcome in outcomes:
        if outcome.results is None:
            table.add_row(escape(outcome.name), "-", "-", "-", "-", _format_validity(outcome))
            continue
        samples = outcome.results.samples
        baseline_ns = sum(s.baseline.compute_output.time_ns for s in samples)
        incremental_ns = sum(s.incremental.compute_output.time_ns for s in samples)
        table.add_row(
            escape(outcome.name),
            str(len(samples)),
            format_ns(baseline_ns),
            format_ns(incremental_ns),
            format_speedup(baseline_ns / incremental_ns if incremental_ns else None),
            _format_validity(outcome),
        )

    console.print(table)


def render_run_summary(outcomes: list[LabOutcome], console: Console) -> None:
    """Render a panel counting valid, mismatched and failed labs."""
    valid = sum(1 for o in outcomes if o.results is not None and o.results.all_valid is True)
    mismatched = sum(1 for o in outcomes if o.results is not None and o.results.all_valid is False)
    unchecked = sum(1 for o in outcomes if o.results is not None and o.results.all_valid is None)
    failed = sum(1 for o in outcomes if o.results is None)

    summary_lines = [
        f"Total labs: {len(outcomes)}",
        f"[green]✓ Valid:[/green] {valid}",
        f"[red]✗ Mismatched:[/red] {mismatched}",
        f"[yellow]- Unchecked:[/yellow] {unchecked}",
        f"[red]✗ Failed:[/red] {failed}",
    ]
    console.print(Panel("\n".join(summary_lines), title="Summary", border_style="cyan"))


def render_lab_list(labs: list[LabDef], console: Console) -> None:
    """Render the registered labs."""
    if not labs:
        console.print("[dim]No labs registered[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Lab")
    table.add_column("Input")
    table.add_column("Computation")
    table.add_column("Documentation", style="dim")
    for lab in labs:
        table.add_row(
            escape(lab.name),
            type(lab.distribution).__name__,
            type(lab.computation).__name__,
            escape(lab.url or "-"),
        )
    console.print(table)
