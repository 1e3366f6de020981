"""HDF5 output format for simulated sound fields.

This module provides a writer and a reader for monochromatic sound field
results in a standardized HDF5 layout:

    /metadata            created_at, package version, script hash/content
    /grid                xx, yy, zz datasets; attrs active, customized, shape
    /simulation          attrs frequency, source_model, speed_of_sound, ...
    /secondary_sources   positions, orientations, weights, driving_signals
    /fields/pressure     complex pressure (gzip compressed)
"""

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import h5py
import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..config import SynthesisConfig
from ..core.grid import Grid
from ..core.sources import SecondarySources, SourceModel, as_driving_signals
from ..core.synthesis import SoundField


class SoundFieldWriter:
    """Writer for one sound field simulation result.

    Example:
        >>> result = sound_field_mono(X, Y, Z, x0, "point", D, f, conf)
        >>> with SoundFieldWriter("field.h5", result, x0, D, conf) as writer:
        ...     writer.finalize(runtime=1.2)
    """

    def __init__(
        self,
        filename: str | Path,
        sound_field: SoundField,
        secondary_sources: ArrayLike | SecondarySources,
        driving_signals: ArrayLike,
        config: SynthesisConfig | None = None,
        script_content: str | None = None,
        compression: str | None = "gzip",
        compression_level: int = 4,
    ):
        """Open the file and write the complete result.

        Args:
            filename: Output file path
            sound_field: Simulation result
            secondary_sources: Secondary sources used for the simulation
            driving_signals: Driving signals used for the simulation
            config: Settings used for the simulation
            script_content: Source script for reproducibility
            compression: Compression algorithm ('gzip', 'lzf', None)
            compression_level: Compression level (0-9 for gzip)
        """
        self.filename = Path(filename)
        self.sound_field = sound_field
        self.config = config if config is not None else SynthesisConfig()
        self.compression = compression
        self.compression_opts = compression_level if compression == "gzip" else None
        self._closed = False

        sources = SecondarySources.from_table(secondary_sources)
        D = as_driving_signals(driving_signals)

        self.file = h5py.File(filename, "w")
        try:
            self._write_metadata(script_content)
            self._write_grid(sound_field.grid)
            self._write_simulation()
            self._write_sources(sources, D)
            self._write_field()
        except Exception:
            self.file.close()
            raise

    def _dataset(self, group: h5py.Group, name: str, data: NDArray) -> h5py.Dataset:
        # Compression filters need chunked storage, which scalars cannot have
        if np.ndim(data) == 0 or self.compression is None:
            return group.create_dataset(name, data=data)
        return group.create_dataset(
            name,
            data=data,
            compression=self.compression,
            compression_opts=self.compression_opts,
        )

    def _write_metadata(self, script_content: str | None):
        from .. import __version__

        meta = self.file.create_group("metadata")
        if script_content:
            script_hash = hashlib.sha256(script_content.encode()).hexdigest()
            meta.attrs["script_hash"] = script_hash
            meta.attrs["script_content"] = script_content
        meta.attrs["created_at"] = datetime.now(timezone.utc).isoformat()
        meta.attrs["version"] = __version__

    def _write_grid(self, grid: Grid):
        grid_group = self.file.create_group("grid")
        grid_group.attrs["shape"] = list(grid.shape)
        grid_group.attrs["active"] = [bool(a) for a in grid.active]
        grid_group.attrs["customized"] = bool(grid.customized)
        self._dataset(grid_group, "xx", grid.xx)
        self._dataset(grid_group, "yy", grid.yy)
        self._dataset(grid_group, "zz", grid.zz)
        if not grid.customized:
            grid_group.create_dataset("x", data=grid.x)
            grid_group.create_dataset("y", data=grid.y)
            grid_group.create_dataset("z", data=grid.z)

    def _write_simulation(self):
        sim_group = self.file.create_group("simulation")
        sim_group.attrs["frequency"] = self.sound_field.frequency
        sim_group.attrs["source_model"] = self.sound_field.source_model.value
        sim_group.attrs["speed_of_sound"] = self.config.speed_of_sound
        sim_group.attrs["time_convention"] = self.config.time_convention
        sim_group.attrs["resolution"] = self.config.resolution
        sim_group.attrs["normalized"] = bool(self.sound_field.normalized)
        sim_group.attrs["xref"] = list(self.config.xref)

    def _write_sources(self, sources: SecondarySources, D: NDArray[np.complex128]):
        src_group = self.file.create_group("secondary_sources")
        src_group.attrs["count"] = len(sources)
        src_group.create_dataset("positions", data=sources.positions)
        src_group.create_dataset("orientations", data=sources.orientations)
        src_group.create_dataset("weights", data=sources.weights)
        src_group.create_dataset("driving_signals", data=D)

    def _write_field(self):
        fields_group = self.file.create_group("fields")
        dataset = self._dataset(fields_group, "pressure", self.sound_field.pressure)
        dataset.attrs["units"] = "Pa"

    def finalize(self, runtime: float | None = None, **extra_metadata):
        """Write final metadata and close file.

        Args:
            runtime: Total simulation runtime in seconds
            **extra_metadata: Additional metadata to store
        """
        if self._closed:
            return
        if runtime is not None:
            self.file["metadata"].attrs["total_runtime_seconds"] = runtime

        for key, value in extra_metadata.items():
            self.file["metadata"].attrs[key] = value

        self.file.flush()
        self.file.close()
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()


def write_sound_field(
    filename: str | Path,
    sound_field: SoundField,
    secondary_sources: ArrayLike | SecondarySources,
    driving_signals: ArrayLike,
    config: SynthesisConfig | None = None,
    **kwargs,
) -> Path:
    """Write a result in one call and return the output path."""
    with SoundFieldWriter(
        filename, sound_field, secondary_sources, driving_signals, config, **kwargs
    ) as writer:
        path = writer.filename
    return path


class SoundFieldReader:
    """Reader for sound field results written by :class:`SoundFieldWriter`.

    Example:
        >>> with SoundFieldReader("field.h5") as reader:
        ...     result = reader.load_sound_field()
        ...     x0 = reader.load_secondary_sources()
    """

    def __init__(self, filename: str | Path):
        """Initialize reader.

        Args:
            filename: Path to HDF5 results file
        """
        self.filename = Path(filename)
        self.file = h5py.File(filename, "r")

    def get_metadata(self) -> dict[str, Any]:
        """Extract all metadata.

        Returns:
            Dict with metadata, grid attributes and simulation parameters
        """
        metadata = {}
        for group in ("metadata", "grid", "simulation", "secondary_sources"):
            if group in self.file:
                metadata[group] = dict(self.file[group].attrs)
        return metadata

    def load_pressure(self) -> NDArray[np.complex128]:
        """Load the complex pressure field."""
        if "fields/pressure" not in self.file:
            raise ValueError("No pressure field data in file")
        return self.file["fields/pressure"][()]

    def load_grid(self) -> Grid:
        """Reconstruct the evaluation grid."""
        grid_group = self.file["grid"]
        customized = bool(grid_group.attrs["customized"])
        vectors = {}
        if not customized:
            vectors = {name: grid_group[name][()] for name in ("x", "y", "z")}
        return Grid(
            xx=grid_group["xx"][()],
            yy=grid_group["yy"][()],
            zz=grid_group["zz"][()],
            active=tuple(bool(a) for a in grid_group.attrs["active"]),
            customized=customized,
            **vectors,
        )

    def load_sound_field(self) -> SoundField:
        """Reconstruct the :class:`SoundField`."""
        sim = self.file["simulation"].attrs
        return SoundField(
            pressure=self.load_pressure(),
            grid=self.load_grid(),
            frequency=float(sim["frequency"]),
            source_model=SourceModel.parse(str(sim["source_model"])),
            normalized=bool(sim["normalized"]),
        )

    def load_secondary_sources(self) -> SecondarySources:
        """Load the secondary sources used for the simulation."""
        group = self.file["secondary_sources"]
        return SecondarySources(
            positions=group["positions"][()],
            orientations=group["orientations"][()],
            weights=group["weights"][()],
        )

    def load_driving_signals(self) -> NDArray[np.complex128]:
        """Load the driving signals used for the simulation."""
        return self.file["secondary_sources/driving_signals"][()]

    def close(self):
        """Close the HDF5 file."""
        if self.file:
            self.file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
