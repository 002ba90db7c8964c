"""Tests for the incrlab command line."""

import csv
import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from incrlab import BackendContext, LabDef, default_lab_params, load_lab_params
from incrlab._catalog import UniformPrepend
from incrlab._cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command from an empty project directory."""
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'bench'\n")
    monkeypatch.chdir(tmp_path)


class TestListCommand:
    """Tests for `incrlab list`."""

    def test_lists_registered_labs(self) -> None:
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "list-eager-map" in result.stdout
        assert "eg-clean-dirty" in result.stdout


class TestRunCommand:
    """Tests for `incrlab run`."""

    def test_run_writes_reports(self, tmp_path: Path) -> None:
        out = tmp_path / "out"

        result = runner.invoke(
            app,
            ["run", "list-sum", "vec-max", "--size", "4", "--loops", "2", "-o", str(out), "--no-worker"],
        )

        assert result.exit_code == 0, result.output
        assert "list-sum" in result.stdout
        assert (out / "site" / "index.html").exists()
        assert (out / "site" / "labs" / "vec-max" / "samples" / "2.html").exists()
        with (out / "runtimes.csv").open(newline="") as f:
            assert len(list(csv.DictReader(f))) == 6
        with (out / "results.toml").open("rb") as f:
            data = tomllib.load(f)
        assert data["labs"]["list-sum"]["params"]["sample_params"]["generate_params"]["size"] == 4

    def test_run_on_worker_thread(self) -> None:
        result = runner.invoke(app, ["run", "list-reverse", "--size", "3", "--loops", "1"])

        assert result.exit_code == 0, result.output

    def test_unknown_lab(self) -> None:
        result = runner.invoke(app, ["run", "no-such-lab", "--no-worker"])

        assert result.exit_code != 0

    def test_invalid_override(self) -> None:
        result = runner.invoke(app, ["run", "list-sum", "--gauge", "0", "--no-worker"])

        assert result.exit_code == 1

    def test_stub_lab_is_reported(self) -> None:
        result = runner.invoke(app, ["run", "hammer-s17-hw0-filter", "--size", "2", "--loops", "0", "--strict", "--no-worker"])

        assert result.exit_code == 0, result.output
        assert "Failed" in result.stdout

    def test_params_file(self, tmp_path: Path) -> None:
        params = tmp_path / "params.toml"
        params.write_text("change_batch_loop_count = 0\n\n[sample_params.generate_params]\nsize = 2\n")
        out = tmp_path / "out"

        result = runner.invoke(app, ["run", "list-max", "-p", str(params), "-o", str(out), "--no-worker"])

        assert result.exit_code == 0, result.output
        with (out / "runtimes.csv").open(newline="") as f:
            assert len(list(csv.DictReader(f))) == 1

    def test_labs_from_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            """
[tool.incrlab]
labs = ["vec-max"]
output = "reports"

[tool.incrlab.params]
change_batch_loop_count = 0
""",
        )

        result = runner.invoke(app, ["run", "--no-worker", "--no-trace", "--no-graph", "--no-validate"])

        assert result.exit_code == 0, result.output
        with (tmp_path / "reports" / "results.toml").open("rb") as f:
            data = tomllib.load(f)
        assert list(data["labs"]) == ["vec-max"]
        assert "all_valid" not in data["labs"]["vec-max"]


class Disagrees:
    """Returns a different answer under each backend."""

    def compute(self, ctx: BackendContext, input: object) -> int:  # noqa: A002, ARG002
        return 1 if ctx.is_incremental() else 0


class TestStrict:
    """Tests for `incrlab run --strict`."""

    @pytest.fixture(autouse=True)
    def _mismatching_lab(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("incrlab._cli.main.all_labs", lambda: [LabDef("disagrees", UniformPrepend(), Disagrees())])

    def test_mismatch_exits_with_status_1(self) -> None:
        result = runner.invoke(app, ["run", "disagrees", "--size", "2", "--loops", "1", "--strict", "--no-worker"])

        assert result.exit_code == 1

    def test_mismatch_without_strict_succeeds(self, tmp_path: Path) -> None:
        out = tmp_path / "out"

        result = runner.invoke(app, ["run", "disagrees", "--size", "2", "--loops", "1", "-o", str(out), "--no-worker"])

        assert result.exit_code == 0, result.output
        with (out / "runtimes.csv").open(newline="") as f:
            assert [r["output_valid"] for r in csv.DictReader(f)] == ["false", "false"]


class TestInitCommand:
    """Tests for `incrlab init`."""

    def test_writes_default_params(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0, result.output
        assert load_lab_params(tmp_path / "incrlab.toml") == default_lab_params()

    def test_custom_output(self, tmp_path: Path) -> None:
        target = tmp_path / "conf" / "lab.toml"

        result = runner.invoke(app, ["init", "-o", str(target)])

        assert result.exit_code == 0, result.output
        assert target.exists()
