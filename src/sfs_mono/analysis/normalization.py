"""
Normalization and level helpers for simulated sound fields.

Typical usage:
    >>> P, xx, yy, zz = sound_field_mono(...)
    >>> P_norm = normalize_at_reference(P, grid, xref=(0, 0, 0))
    >>> L = level_db(P_norm)  # 0 dB at the reference point
"""

import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..core.grid import Grid

# Reference sound pressure (20 µPa)
P_REF = 2e-5


def nearest_grid_index(grid: Grid, point: ArrayLike) -> int:
    """Flat index of the grid point closest to ``point``.

    Args:
        grid: Evaluation grid
        point: (x, y, z) position in meters

    Returns:
        Index into the flattened grid arrays
    """
    point = np.asarray(point, dtype=np.float64).ravel()
    if point.shape != (3,):
        raise ValueError(f"point must be a 3D position, got shape {point.shape}")
    distance = (
        (grid.xx.ravel() - point[0]) ** 2
        + (grid.yy.ravel() - point[1]) ** 2
        + (grid.zz.ravel() - point[2]) ** 2
    )
    return int(np.argmin(distance))


def normalize_at_reference(
    pressure: NDArray[np.complexfloating],
    grid: Grid,
    xref: ArrayLike = (0.0, 0.0, 0.0),
) -> NDArray[np.complexfloating]:
    """Scale a field to unit magnitude at the grid point nearest to ``xref``.

    Args:
        pressure: Complex field shaped like the grid
        grid: Grid the field was computed on
        xref: Reference position in meters

    Returns:
        Normalized copy of the field. If the magnitude at the reference point
        is zero or not finite, a warning is issued and ``pressure`` itself is
        returned unchanged.
    """
    pressure = np.asarray(pressure)
    if pressure.size != grid.num_points:
        raise ValueError(
            f"Field has {pressure.size} values but the grid has {grid.num_points} points"
        )
    idx = nearest_grid_index(grid, xref)
    ref = np.abs(pressure.ravel()[idx])

    if ref == 0 or not np.isfinite(ref):
        warnings.warn(
            f"Cannot normalize: field magnitude at reference point is {ref}",
            UserWarning,
            stacklevel=2,
        )
        return pressure

    return pressure / ref


def level_db(pressure: ArrayLike, p_ref: float = 1.0) -> NDArray[np.floating]:
    """Level 20*log10(|P| / p_ref) in dB.

    Zero pressure maps to -inf. Use ``p_ref=P_REF`` for sound pressure level
    of a field in Pa.
    """
    with np.errstate(divide="ignore"):
        return 20 * np.log10(np.abs(np.asarray(pressure)) / p_ref)
