"""Tests for CSV and TOML export of lab outcomes."""

import csv
import tomllib
from pathlib import Path

import pytest

from incrlab import (
    GenerateParams,
    LabDef,
    LabOutcome,
    LabParams,
    SampleParams,
    export_results_to_toml,
    lab_params_from_dict,
    results_to_dict,
    run_labs,
    write_runtimes_csv,
)
from incrlab._catalog import Sum, UniformPrepend
from incrlab._catalog._scenarios import Unimplemented, VecMax, VecMaxInput
from incrlab._io import RUNTIME_COLUMNS


@pytest.fixture
def outcomes() -> list[LabOutcome]:
    params = LabParams(SampleParams(generate_params=GenerateParams(size=3)), change_batch_loop_count=2)
    labs = [
        LabDef("sum", UniformPrepend(), Sum(), url="https://example.org/sum"),
        LabDef("stub", UniformPrepend(), Unimplemented("stub computation")),
    ]
    return run_labs(labs, params)


class TestRuntimesCsv:
    """Tests for write_runtimes_csv."""

    def test_one_row_per_sample(self, outcomes: list[LabOutcome], tmp_path: Path) -> None:
        path = tmp_path / "runtimes.csv"

        rows = write_runtimes_csv(outcomes, path)

        with path.open(newline="") as f:
            records = list(csv.DictReader(f))
        assert rows == 3
        assert tuple(records[0]) == RUNTIME_COLUMNS
        assert [r["batch_index"] for r in records] == ["0", "1", "2"]
        assert {r["lab"] for r in records} == {"sum"}
        assert all(r["output_valid"] == "true" for r in records)
        assert all(int(r["incremental_compute_ns"]) >= 0 for r in records)

    def test_unvalidated_samples_leave_the_column_empty(self, tmp_path: Path) -> None:
        params = LabParams(SampleParams(generate_params=GenerateParams(size=2), validate_output=False), change_batch_loop_count=0)
        outcomes = run_labs([LabDef("sum", UniformPrepend(), Sum())], params)
        path = tmp_path / "runtimes.csv"

        write_runtimes_csv(outcomes, path)

        with path.open(newline="") as f:
            (record,) = list(csv.DictReader(f))
        assert record["output_valid"] == ""


class TestResultsToml:
    """Tests for the TOML results export."""

    def test_results_to_dict(self, outcomes: list[LabOutcome]) -> None:
        data = results_to_dict(outcomes)

        sum_lab = data["labs"]["sum"]
        assert sum_lab["url"] == "https://example.org/sum"
        assert sum_lab["all_valid"] is True
        assert len(sum_lab["samples"]) == 3
        first = sum_lab["samples"][0]
        assert first["output_valid"] is True
        assert set(first["incremental"]["compute_output"]["counts"]) >= {"force_miss", "clean_eval"}
        assert "graph_nodes" in first["incremental"]["compute_output"]
        assert "graph_nodes" not in first["baseline"]["compute_output"]
        assert data["labs"]["stub"]["error"] == "Scenario is not implemented: stub computation"
        assert "samples" not in data["labs"]["stub"]

    def test_export_round_trips_through_toml(self, outcomes: list[LabOutcome], tmp_path: Path) -> None:
        path = tmp_path / "results.toml"

        export_results_to_toml(outcomes, path)

        with path.open("rb") as f:
            data = tomllib.load(f)
        assert data == results_to_dict(outcomes)
        assert lab_params_from_dict(data["labs"]["sum"]["params"]) == outcomes[0].params

    def test_large_values_are_not_exported(self, tmp_path: Path) -> None:
        params = LabParams(SampleParams(generate_params=GenerateParams(size=8)), change_batch_loop_count=0)
        outcomes = run_labs([LabDef("vec-max", VecMaxInput(), VecMax())], params)
        path = tmp_path / "results.toml"

        export_results_to_toml(outcomes, path)

        assert "samples" in tomllib.loads(path.read_text())["labs"]["vec-max"]
