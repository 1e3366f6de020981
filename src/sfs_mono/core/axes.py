"""Selection of the active (non-squeezed) axes of an evaluation grid."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..errors import ShapeMismatchError
from .grid import AXIS_NAMES, Grid


def select_active_axes(
    xx: NDArray[np.floating],
    yy: NDArray[np.floating],
    zz: NDArray[np.floating],
    active: tuple[bool, bool, bool] | None = None,
) -> tuple[tuple[bool, bool, bool], tuple[int, ...]]:
    """Determine the active axes and the shape of the field to allocate.

    The flags recorded while building the grid are authoritative; pass them
    as ``active``. Without them an axis counts as active when its
    coordinates are not all identical.

    Args:
        xx, yy, zz: Coordinate arrays of identical shape
        active: Optional per axis flags from the grid specification

    Returns:
        Tuple ``(active_dims, shape)``. ``shape`` is (1,) for a single
        evaluation point.

    Raises:
        ShapeMismatchError: If the coordinate arrays differ in shape
    """
    xx, yy, zz = np.asarray(xx), np.asarray(yy), np.asarray(zz)
    if not (xx.shape == yy.shape == zz.shape):
        raise ShapeMismatchError(
            f"Coordinate arrays must have identical shapes, got "
            f"{xx.shape}, {yy.shape}, {zz.shape}"
        )

    if active is None:
        active = tuple(
            bool(arr.size > 1 and np.any(arr != arr.flat[0])) for arr in (xx, yy, zz)
        )
    else:
        active = tuple(bool(a) for a in active)

    if any(active) or xx.size != 1:
        shape = xx.shape
    else:
        shape = (1,)
    return active, shape


def squeeze_axes(grid: Grid) -> list[tuple[str, NDArray[np.float64]]]:
    """Axis vectors of the active dimensions of a regular grid.

    Args:
        grid: Regular (non-customized) grid

    Returns:
        List of ``(name, vector)`` pairs in x, y, z order

    Raises:
        ValueError: For customized grids, which have no axis vectors
    """
    if grid.customized:
        raise ValueError("Customized grids have no regular axis vectors")
    vectors = (grid.x, grid.y, grid.z)
    return [
        (name, vec)
        for name, vec, is_active in zip(AXIS_NAMES, vectors, grid.active)
        if is_active
    ]
