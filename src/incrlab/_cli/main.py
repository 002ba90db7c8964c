import dataclasses
import logging
from pathlib import Path
from typing import Annotated

import tomli_w
import typer
from rich.console import Console
from rich.logging import RichHandler

from incrlab._catalog import all_labs
from incrlab._errors import ConfigurationError
from incrlab._export import generate_site
from incrlab._io import export_results_to_toml, write_runtimes_csv
from incrlab._lab import LabDef, LabOutcome, run_labs
from incrlab._params import LabParams, default_lab_params, lab_params_to_dict, load_lab_params
from incrlab._worker import run_with_large_stack

from .config import get_config
from .render_summary import render_lab_list, render_run_summary, render_summary_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """incrlab: differential benchmarks of incremental computation."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
        force=True,
    )


@app.command("list")
def list_labs() -> None:
    """List the registered labs."""
    render_lab_list(all_labs(), out_console)


def _select_labs(names: list[str]) -> list[LabDef]:
    labs = all_labs()
    if not names:
        return labs
    by_name = {lab.name: lab for lab in labs}
    unknown = [name for name in names if name not in by_name]
    if unknown:
        msg = f"Unknown lab(s): {', '.join(unknown)}. Run 'incrlab list' to see the registered labs."
        raise typer.BadParameter(msg)
    return [by_name[name] for name in names]


def _override(  # noqa: PLR0913
    params: LabParams,
    *,
    size: int | None,
    gauge: int | None,
    seeds: list[int] | None,
    demand: int | None,
    loops: int | None,
    batch_size: int | None,
    validate: bool | None,
    trace: bool | None,
    graph: bool | None,
) -> LabParams:
    """Apply command-line overrides; unset options keep their configured values."""
    sample_params = params.sample_params
    generate_params = sample_params.generate_params

    generate_changes = {k: v for k, v in {"size": size, "gauge": gauge}.items() if v is not None}
    sample_changes = {
        k: v
        for k, v in {
            "input_seeds": tuple(seeds) if seeds else None,
            "demand": demand,
            "change_batch_size": batch_size,
            "validate_output": validate,
            "reflect_trace": trace,
            "reflect_graph": graph,
        }.items()
        if v is not None
    }
    generate_params = dataclasses.replace(generate_params, **generate_changes)
    sample_params = dataclasses.replace(sample_params, generate_params=generate_params, **sample_changes)
    if loops is not None:
        return dataclasses.replace(params, sample_params=sample_params, change_batch_loop_count=loops)
    return dataclasses.replace(params, sample_params=sample_params)


@app.command()
def run(  # noqa: PLR0913
    labs: Annotated[
        list[str] | None,
        typer.Argument(help="Names of the labs to run (default: all, or [tool.incrlab].labs)"),
    ] = None,
    *,
    params_file: Annotated[
        Path | None,
        typer.Option("-p", "--params", help="Path to a lab parameters TOML file"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Directory for the HTML site, runtimes CSV and results TOML"),
    ] = None,
    size: Annotated[int | None, typer.Option("--size", help="Number of input elements")] = None,
    gauge: Annotated[int | None, typer.Option("--gauge", help="Checkpoint every N elements")] = None,
    seed: Annotated[list[int] | None, typer.Option("--seed", help="Input seed (repeatable)")] = None,
    demand: Annotated[int | None, typer.Option("--demand", help="Output elements forced by lazy labs")] = None,
    loops: Annotated[int | None, typer.Option("--loops", help="Number of change batches")] = None,
    batch_size: Annotated[int | None, typer.Option("--batch-size", help="Edits per change batch")] = None,
    no_validate: Annotated[
        bool,
        typer.Option("--no-validate", help="Skip comparing baseline and incremental outputs"),
    ] = False,
    no_trace: Annotated[
        bool,
        typer.Option("--no-trace", help="Do not capture incremental trace logs"),
    ] = False,
    no_graph: Annotated[
        bool,
        typer.Option("--no-graph", help="Do not capture incremental graph snapshots and values"),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with status 1 if any output mismatches"),
    ] = False,
    worker: Annotated[
        bool,
        typer.Option("--worker/--no-worker", help="Run labs on a thread with a large stack"),
    ] = True,
) -> None:
    """Run labs under both backends and report the differences."""
    err_console.print()

    try:
        config = get_config()
        if params_file is not None:
            err_console.print(f"[cyan]Loading parameters from:[/cyan] {params_file}")
            params = load_lab_params(params_file)
        else:
            params = config.params or default_lab_params()
        params = _override(
            params,
            size=size,
            gauge=gauge,
            seeds=seed,
            demand=demand,
            loops=loops,
            batch_size=batch_size,
            validate=False if no_validate else None,
            trace=False if no_trace else None,
            graph=False if no_graph else None,
        )
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    selected = _select_labs(labs or list(config.labs))
    output_dir = output if output is not None else config.output

    def on_outcome(outcome: LabOutcome) -> None:
        if outcome.ok:
            err_console.print(f"[green]✓[/green] {outcome.name}")
        else:
            err_console.print(f"[yellow]![/yellow] {outcome.name}: {outcome.error}")

    def run_all() -> list[LabOutcome]:
        return run_labs(selected, params, on_outcome=on_outcome)

    err_console.print(f"[cyan]Running {len(selected)} lab(s)...[/cyan]")
    outcomes = run_with_large_stack(run_all) if worker else run_all()
    err_console.print()

    render_summary_table(outcomes, out_console)
    render_run_summary(outcomes, out_console)

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        generate_site(outcomes, output_dir / "site")
        write_runtimes_csv(outcomes, output_dir / "runtimes.csv")
        export_results_to_toml(outcomes, output_dir / "results.toml")
        err_console.print(f"[cyan]Reports written to:[/cyan] {output_dir}")

    if strict and any(o.results is not None and o.results.all_valid is False for o in outcomes):
        err_console.print("[red]✗ Some outputs did not match[/red]")
        raise typer.Exit(code=1)


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ] = Path("incrlab.toml"),
) -> None:
    """Write the default lab parameters to a TOML file."""
    err_console.print()
    err_console.print(f"[cyan]Writing default parameters to:[/cyan] {output}")
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("wb") as f:
        tomli_w.dump(lab_params_to_dict(default_lab_params()), f)

    err_console.print()
    err_console.print("[green]✓ Parameters file generated[/green]")
    err_console.print()


def main() -> None:
    app()
