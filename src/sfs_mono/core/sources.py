"""
Secondary source tables and source models.

A secondary source array is given as an N x 7 table, one row per source:

    [x, y, z, nx, ny, nz, w]

with the position (m), the orientation/normal vector and an integration
weight (tapering window, quadrature weight on a sphere, ...). Tables with six
columns are accepted and get unit weights.

Example:
    >>> import numpy as np
    >>> from sfs_mono import SecondarySources, SourceModel
    >>>
    >>> phi = np.linspace(0, 2 * np.pi, 64, endpoint=False)
    >>> table = np.zeros((64, 7))
    >>> table[:, 0], table[:, 1] = 1.5 * np.cos(phi), 1.5 * np.sin(phi)
    >>> table[:, 3], table[:, 4] = -np.cos(phi), -np.sin(phi)
    >>> table[:, 6] = 2 * np.pi * 1.5 / 64
    >>> x0 = SecondarySources.from_table(table)
    >>> SourceModel.parse("ps")
    <SourceModel.POINT: 'point'>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import InvalidParameterError, UnknownSourceModelError


class SourceModel(Enum):
    """Model of the secondary sources, selecting the Green's function.

    - POINT: 3D free-field Green's function (monopole)
    - LINE: 2D free-field Green's function, line along the z-axis
    - PLANE_WAVE: plane wave, unit amplitude
    """

    POINT = "point"
    LINE = "line"
    PLANE_WAVE = "plane_wave"

    @classmethod
    def parse(cls, tag: str | SourceModel) -> SourceModel:
        """Resolve a model tag.

        Accepts the enum itself, its value (``"point"``, ``"line"``,
        ``"plane_wave"``) or the short tags ``"ps"``, ``"ls"``, ``"pw"``.

        Raises:
            UnknownSourceModelError: For any other tag
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            key = tag.strip().lower()
            if key in _SHORT_TAGS:
                return _SHORT_TAGS[key]
            for model in cls:
                if model.value == key:
                    return model
        valid = ", ".join([m.value for m in cls] + list(_SHORT_TAGS))
        raise UnknownSourceModelError(f"Unknown source model {tag!r}. Valid models: {valid}")


_SHORT_TAGS = {
    "ps": SourceModel.POINT,
    "ls": SourceModel.LINE,
    "pw": SourceModel.PLANE_WAVE,
}


@dataclass(frozen=True, eq=False)
class SecondarySources:
    """Positions, orientations and integration weights of N secondary sources.

    Args:
        positions: (N, 3) source positions in meters
        orientations: (N, 3) orientation (normal) vectors
        weights: (N,) integration weights

    All arrays are stored read-only.
    """

    positions: NDArray[np.float64]
    orientations: NDArray[np.float64]
    weights: NDArray[np.float64]

    def __post_init__(self):
        positions = _as_float_array(self.positions, "positions")
        orientations = _as_float_array(self.orientations, "orientations")
        weights = _as_float_array(self.weights, "weights").ravel()

        if positions.ndim != 2 or positions.shape[1] != 3:
            raise InvalidParameterError(
                f"positions must be an (N, 3) array, got shape {positions.shape}"
            )
        if positions.shape[0] == 0:
            raise InvalidParameterError("At least one secondary source is required")
        if orientations.shape != positions.shape:
            raise InvalidParameterError(
                f"orientations must have shape {positions.shape}, got {orientations.shape}"
            )
        if weights.shape != (positions.shape[0],):
            raise InvalidParameterError(
                f"weights must have {positions.shape[0]} entries, got {weights.size}"
            )
        if not np.all(np.isfinite(positions)):
            raise InvalidParameterError("Secondary source positions must be finite")
        if not np.all(np.isfinite(orientations)):
            raise InvalidParameterError("Secondary source orientations must be finite")
        if not np.all(np.isfinite(weights)):
            raise InvalidParameterError("Secondary source weights must be finite")

        for name, arr in (
            ("positions", positions),
            ("orientations", orientations),
            ("weights", weights),
        ):
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    @classmethod
    def from_table(cls, table: ArrayLike | SecondarySources) -> SecondarySources:
        """Create from an N x 7 (or N x 6) table ``[x, y, z, nx, ny, nz, w]``.

        A single row may be given as a 1D array.
        """
        if isinstance(table, cls):
            return table
        arr = _as_float_array(table, "secondary source table")
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        if arr.ndim != 2 or arr.shape[1] not in (6, 7):
            raise InvalidParameterError(
                f"Secondary source table must be N x 7 (or N x 6), got shape {arr.shape}"
            )
        weights = arr[:, 6] if arr.shape[1] == 7 else np.ones(arr.shape[0])
        return cls(
            positions=arr[:, 0:3].copy(),
            orientations=arr[:, 3:6].copy(),
            weights=np.array(weights, dtype=np.float64),
        )

    def to_table(self) -> NDArray[np.float64]:
        """Return the N x 7 table representation."""
        return np.column_stack([self.positions, self.orientations, self.weights])

    def __len__(self) -> int:
        return self.positions.shape[0]

    def __getitem__(self, index) -> SecondarySources:
        """Subset of the sources (slice, index array or boolean mask)."""
        index = np.atleast_1d(np.arange(len(self))[index])
        return SecondarySources(
            positions=self.positions[index].copy(),
            orientations=self.orientations[index].copy(),
            weights=self.weights[index].copy(),
        )

    def __repr__(self) -> str:
        return f"SecondarySources(n={len(self)})"


def _as_float_array(values: ArrayLike, name: str) -> NDArray[np.float64]:
    try:
        arr = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be numeric") from e
    return arr


def as_driving_signals(driving_signals: ArrayLike) -> NDArray[np.complex128]:
    """Validate driving signals and return them as a 1D complex array.

    Row and column vectors are accepted.

    Raises:
        InvalidParameterError: If the signals are not a finite numeric vector
    """
    try:
        D = np.array(driving_signals, dtype=np.complex128)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError("Driving signals must be numeric") from e
    if D.ndim == 2 and 1 in D.shape:
        D = D.ravel()
    if D.ndim != 1:
        raise InvalidParameterError(
            f"Driving signals must be a vector, got shape {D.shape}"
        )
    if not np.all(np.isfinite(D)):
        raise InvalidParameterError("Driving signals must be finite")
    D.setflags(write=False)
    return D
