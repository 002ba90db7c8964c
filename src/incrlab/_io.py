from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w

from ._params import lab_params_to_dict

if TYPE_CHECKING:
    from ._lab import LabOutcome
    from ._results import EngineMetrics, EngineSample, Sample

logger = logging.getLogger(__name__)


RUNTIME_COLUMNS = (
    "lab",
    "batch_index",
    "baseline_process_ns",
    "baseline_compute_ns",
    "incremental_process_ns",
    "incremental_compute_ns",
    "output_valid",
)


def write_runtimes_csv(outcomes: list[LabOutcome], output_path: Path | str) -> int:
    """Write one CSV row per sample with the wall-clock time of every phase.

    Labs that failed contribute no rows. ``output_valid`` is empty when
    validation was disabled.

    Returns:
        The number of rows written.

    """
    output_path = Path(output_path)
    rows = 0
    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(RUNTIME_COLUMNS)
        for outcome in outcomes:
            if outcome.results is None:
                continue
            for sample in outcome.results.samples:
                writer.writerow(
                    [
                        outcome.name,
                        sample.batch_index,
                        sample.baseline.process_input.time_ns,
                        sample.baseline.compute_output.time_ns,
                        sample.incremental.process_input.time_ns,
                        sample.incremental.compute_output.time_ns,
                        "" if sample.output_valid is None else str(sample.output_valid).lower(),
                    ],
                )
                rows += 1
    logger.debug("Wrote %d runtime rows to %s", rows, output_path)
    return rows


def _metrics_to_dict(metrics: EngineMetrics) -> dict[str, Any]:
    data: dict[str, Any] = {"time_ns": metrics.time_ns, "counts": metrics.counts.as_dict()}
    if metrics.traces:
        data["trace_count"] = len(metrics.traces)
    if metrics.graph is not None:
        data["graph_nodes"] = len(metrics.graph)
        data["graph_edges"] = metrics.graph.edge_count
    return data


def _engine_sample_to_dict(sample: EngineSample) -> dict[str, Any]:
    return {
        "process_input": _metrics_to_dict(sample.process_input),
        "compute_output": _metrics_to_dict(sample.compute_output),
    }


def _sample_to_dict(sample: Sample) -> dict[str, Any]:
    data: dict[str, Any] = {"batch_index": sample.batch_index}
    # TOML has no null; an absent key means validation was disabled
    if sample.output_valid is not None:
        data["output_valid"] = sample.output_valid
    data["baseline"] = _engine_sample_to_dict(sample.baseline)
    data["incremental"] = _engine_sample_to_dict(sample.incremental)
    return data


def results_to_dict(outcomes: list[LabOutcome]) -> dict[str, Any]:
    """Convert lab outcomes into a TOML-compatible nested dictionary.

    Captured input and output values are not exported; only parameters,
    timings and operation counts are.
    """
    labs: dict[str, Any] = {}
    for outcome in outcomes:
        entry: dict[str, Any] = {"params": lab_params_to_dict(outcome.params)}
        if outcome.lab.url:
            entry["url"] = outcome.lab.url
        if outcome.results is None:
            entry["error"] = outcome.error or ""
        else:
            if outcome.results.all_valid is not None:
                entry["all_valid"] = outcome.results.all_valid
            entry["samples"] = [_sample_to_dict(s) for s in outcome.results.samples]
        labs[outcome.name] = entry
    return {"labs": labs}


def export_results_to_toml(outcomes: list[LabOutcome], output_path: Path | str) -> None:
    """Export lab outcomes to a TOML file."""
    toml_data = results_to_dict(outcomes)

    output_path = Path(output_path)
    with output_path.open("wb") as f:
        tomli_w.dump(toml_data, f)

    logger.debug(f"Exported results to {output_path}")
