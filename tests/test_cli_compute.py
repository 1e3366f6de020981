"""Tests for the sfs-compute command."""

from pathlib import Path

import h5py
import numpy as np
import pytest
from click.testing import CliRunner

from sfs_mono.cli.compute import main
from sfs_mono.cli.progress import SynthesisProgress, format_time

SCRIPT = """
import numpy as np
from sfs_mono import SynthesisConfig

n = 8
secondary_sources = np.zeros((n, 7))
secondary_sources[:, 0] = np.linspace(-1, 1, n)
secondary_sources[:, 1] = 1.5
secondary_sources[:, 4] = -1.0
secondary_sources[:, 6] = 2.0 / (n - 1)

X, Y, Z = [-1, 1], [-1, 1], 0
driving_signals = np.ones(n)
source_model = "point"
frequency = 500
config = SynthesisConfig(resolution=16, plot=True)
"""


@pytest.fixture
def runner():
    return CliRunner()


def write_script(path, content=SCRIPT):
    script = path / "sim.py"
    script.write_text(content)
    return script


def test_compute_writes_results(runner, tmp_path):
    script = write_script(tmp_path)
    output = tmp_path / "out.h5"

    result = runner.invoke(main, [str(script), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "Simulation complete" in result.output
    with h5py.File(output, "r") as f:
        assert f["fields/pressure"].shape == (16, 16)
        assert f["metadata"].attrs["script_content"] == SCRIPT
        assert f["metadata"].attrs["n_jobs"] == 1
        assert "total_runtime_seconds" in f["metadata"].attrs


def test_compute_threaded(runner, tmp_path):
    script = write_script(tmp_path)
    output = tmp_path / "out.h5"

    result = runner.invoke(main, [str(script), "-o", str(output), "--n-jobs", "2"])

    assert result.exit_code == 0, result.output
    with h5py.File(output, "r") as f:
        assert np.all(np.isfinite(f["fields/pressure"][()]))


def test_compute_default_output_name(runner, tmp_path):
    script = write_script(tmp_path)

    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, [str(script)])
        assert result.exit_code == 0, result.output
        assert "results_" in result.output


def test_compute_dry_run(runner, tmp_path):
    script = write_script(tmp_path)

    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, [str(script), "-o", "out.h5", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry run" in result.output
        assert "16 × 16" in result.output
        assert not Path("out.h5").exists()


@pytest.mark.parametrize(
    "old, new",
    [
        ("np.ones(n)", "np.ones(n - 1)"),
        ("frequency = 500", "frequency = -5"),
        ('source_model = "point"', 'source_model = "dipole"'),
    ],
    ids=["count_mismatch", "negative_frequency", "unknown_model"],
)
def test_compute_dry_run_rejects_invalid_inputs(runner, tmp_path, old, new):
    """A dry run applies the same input checks as a full run."""
    script = write_script(tmp_path, SCRIPT.replace(old, new))

    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, [str(script), "-o", "out.h5", "--dry-run"])

        assert result.exit_code == 1
        assert "Dry run" not in result.output
        assert not Path("out.h5").exists()


def test_compute_restricted_import(runner, tmp_path):
    script = write_script(tmp_path, "import os\n")

    result = runner.invoke(main, [str(script)])

    assert result.exit_code == 1
    assert "Security Error" in result.output


def test_compute_syntax_error(runner, tmp_path):
    script = write_script(tmp_path, "X = [\n")

    result = runner.invoke(main, [str(script)])

    assert result.exit_code == 1
    assert "Syntax Error" in result.output


def test_compute_missing_names(runner, tmp_path):
    script = write_script(tmp_path, "X = 0\n")

    result = runner.invoke(main, [str(script)])

    assert result.exit_code == 1
    assert "Script must define" in result.output


def test_compute_invalid_inputs(runner, tmp_path):
    script = write_script(tmp_path, SCRIPT.replace("np.ones(n)", "np.ones(n + 1)"))
    output = tmp_path / "out.h5"

    result = runner.invoke(main, [str(script), "-o", str(output)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert not output.exists()


def test_compute_missing_script(runner, tmp_path):
    result = runner.invoke(main, [str(tmp_path / "missing.py")])

    assert result.exit_code == 2


def test_version(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "sfs-compute" in result.output


class TestFormatTime:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(5, "5s"), (83, "1m 23s"), (8100, "2h 15m")],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected


class TestSynthesisProgress:
    def test_update_counts_sources(self):
        from rich.console import Console

        console = Console(quiet=True)
        with SynthesisProgress(console, num_sources=5, num_points=100) as progress:
            for i in range(5):
                progress.update(i, 5)

        assert progress.completed == 5
        assert progress.peak_memory > 0

    def test_finish_is_idempotent(self):
        from rich.console import Console

        progress = SynthesisProgress(Console(quiet=True), 1, 1)
        progress.finish()
        progress.finish()
