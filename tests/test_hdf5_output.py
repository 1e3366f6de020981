"""Tests for HDF5 output format."""

import tempfile
from pathlib import Path

import h5py
import numpy as np
import pytest

from sfs_mono import SourceModel, SynthesisConfig, sound_field_mono
from sfs_mono.io.hdf5 import SoundFieldReader, SoundFieldWriter, write_sound_field


@pytest.fixture
def output_path():
    with tempfile.NamedTemporaryFile(suffix=".h5", delete=False) as f:
        path = Path(f.name)
    yield path
    if path.exists():
        path.unlink()


@pytest.fixture
def simulation(circular_array):
    conf = SynthesisConfig(resolution=12, normalize=True, xref=(0.2, 0, 0))
    D = np.exp(1j * np.linspace(0, np.pi, 32))
    result = sound_field_mono([-1, 1], [-1, 1], 0, circular_array, "point", D, 800, conf)
    return result, circular_array, D, conf


def test_hdf5_writer_basic(output_path, simulation):
    """Test basic HDF5 writer functionality."""
    result, table, D, conf = simulation
    script_content = "# Test script"

    writer = SoundFieldWriter(output_path, result, table, D, conf, script_content)
    writer.finalize(runtime=1.5)

    assert output_path.exists()

    with h5py.File(output_path, "r") as f:
        # Check groups exist
        assert "metadata" in f
        assert "grid" in f
        assert "simulation" in f
        assert "secondary_sources" in f
        assert "fields/pressure" in f

        # Check metadata
        assert f["metadata"].attrs["script_content"] == script_content
        assert len(f["metadata"].attrs["script_hash"]) == 64
        assert f["metadata"].attrs["total_runtime_seconds"] == 1.5

        # Check grid and simulation parameters
        assert list(f["grid"].attrs["shape"]) == [12, 12]
        assert list(f["grid"].attrs["active"]) == [True, True, False]
        assert f["simulation"].attrs["frequency"] == 800.0
        assert f["simulation"].attrs["source_model"] == "point"
        assert f["simulation"].attrs["normalized"]
        np.testing.assert_allclose(f["simulation"].attrs["xref"], [0.2, 0, 0])

        # Check sources
        assert f["secondary_sources"].attrs["count"] == 32
        assert f["secondary_sources/positions"].shape == (32, 3)

        # Check field
        assert f["fields/pressure"].dtype == np.complex128
        assert f["fields/pressure"].compression == "gzip"


def test_hdf5_reader(output_path, simulation):
    """Test HDF5 reader functionality."""
    result, table, D, conf = simulation
    write_sound_field(output_path, result, table, D, conf)

    with SoundFieldReader(output_path) as reader:
        metadata = reader.get_metadata()
        assert metadata["simulation"]["speed_of_sound"] == 343.0
        assert metadata["secondary_sources"]["count"] == 32

        np.testing.assert_array_equal(reader.load_pressure(), result.pressure)
        np.testing.assert_array_equal(reader.load_driving_signals(), D)

        sources = reader.load_secondary_sources()
        np.testing.assert_array_equal(sources.to_table(), table)

        loaded = reader.load_sound_field()
        assert loaded.source_model is SourceModel.POINT
        assert loaded.frequency == 800.0
        assert loaded.normalized is True
        assert loaded.grid.active == (True, True, False)
        np.testing.assert_array_equal(loaded.grid.x, result.grid.x)
        np.testing.assert_array_equal(loaded.xx, result.xx)


def test_hdf5_customized_grid(output_path, circular_array):
    """Customized grids have no axis vectors."""
    x = np.array([0.0, 0.3, -0.2])
    y = np.array([0.1, 0.1, 0.5])
    result = sound_field_mono(x, y, 0.0, circular_array, "line", np.ones(32), 500)

    write_sound_field(output_path, result, circular_array, np.ones(32))

    with h5py.File(output_path, "r") as f:
        assert f["grid"].attrs["customized"]
        assert "x" not in f["grid"]

    with SoundFieldReader(output_path) as reader:
        loaded = reader.load_sound_field()
        assert loaded.grid.customized is True
        assert loaded.grid.x is None
        assert loaded.source_model is SourceModel.LINE
        np.testing.assert_array_equal(loaded.pressure, result.pressure)


def test_hdf5_single_point(output_path):
    """A single evaluation point round trips with shape (1,)."""
    table = np.array([[0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 1.0]])
    result = sound_field_mono(1, 0, 0, table, "point", [1.0], 1000)

    write_sound_field(output_path, result, table, [1.0], compression=None)

    with SoundFieldReader(output_path) as reader:
        assert reader.load_pressure().shape == (1,)
        assert reader.load_grid().shape == (1,)


def test_hdf5_no_script_content(output_path, simulation):
    result, table, D, conf = simulation

    with SoundFieldWriter(output_path, result, table, D) as writer:
        assert writer.config == SynthesisConfig()

    with h5py.File(output_path, "r") as f:
        assert "script_hash" not in f["metadata"].attrs
        assert "created_at" in f["metadata"].attrs


def test_hdf5_extra_metadata(output_path, simulation):
    result, table, D, conf = simulation

    writer = SoundFieldWriter(output_path, result, table, D, conf)
    writer.finalize(n_jobs=4, note="array test")
    writer.finalize()

    with SoundFieldReader(output_path) as reader:
        meta = reader.get_metadata()["metadata"]
        assert meta["n_jobs"] == 4
        assert meta["note"] == "array test"


def test_write_sound_field_returns_path(output_path, simulation):
    result, table, D, conf = simulation

    assert write_sound_field(str(output_path), result, table, D, conf) == output_path
