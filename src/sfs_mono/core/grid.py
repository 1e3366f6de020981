"""
Evaluation grids for monochromatic sound field simulation.

Each of the three axes is described by an axis specification:

- ``FixedAxis``: a single coordinate. The axis is squeezed, i.e. the
  simulated field has one dimension less.
- ``RangeAxis``: a ``[min, max]`` pair, expanded to ``resolution`` uniformly
  spaced points (both ends included).
- ``ExplicitAxis``: an n-dimensional array of coordinates. The other axes
  must be explicit arrays of the same shape or fixed values. Every triple is
  one evaluation point of a *customized* grid, for which plotting and
  normalization are disabled.

Raw user input (numbers, lists, arrays) is turned into a specification by
:func:`parse_axis_spec`, so most callers simply pass plain values.

Example:
    >>> import numpy as np
    >>> from sfs_mono import build_grid
    >>>
    >>> # 2D grid in the xy-plane at z = 0
    >>> grid = build_grid([-2, 2], [-2, 2], 0, resolution=200)
    >>> grid.shape
    (200, 200)
    >>> grid.active
    (True, True, False)
    >>>
    >>> # Customized grid from scattered points
    >>> pts = np.random.uniform(-1, 1, size=(50, 2))
    >>> grid = build_grid(pts[:, 0], pts[:, 1], 0.0)
    >>> grid.customized
    True
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import InvalidParameterError, InvalidSpecError, ShapeMismatchError

AXIS_NAMES = ("x", "y", "z")


def _coordinate(value, label: str) -> float:
    try:
        coordinate = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidSpecError(f"{label} must be a real number, got {value!r}") from e
    if not np.isfinite(coordinate):
        raise InvalidSpecError(f"{label} must be finite, got {value!r}")
    return coordinate


@dataclass(frozen=True)
class FixedAxis:
    """Single fixed coordinate; the axis is inactive."""

    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", _coordinate(self.value, "Fixed axis value"))


@dataclass(frozen=True)
class RangeAxis:
    """Closed interval ``[start, stop]`` expanded to a linear grid."""

    start: float
    stop: float

    def __post_init__(self):
        object.__setattr__(self, "start", _coordinate(self.start, "Range start"))
        object.__setattr__(self, "stop", _coordinate(self.stop, "Range stop"))
        if self.stop <= self.start:
            raise InvalidSpecError(
                f"Range must satisfy min < max, got [{self.start}, {self.stop}]"
            )

    def expand(self, resolution: int) -> NDArray[np.float64]:
        """Uniformly spaced coordinates from start to stop inclusive."""
        return np.linspace(self.start, self.stop, resolution)


@dataclass(frozen=True, eq=False)
class ExplicitAxis:
    """Explicit n-dimensional array of coordinates."""

    values: NDArray[np.float64]

    def __post_init__(self):
        values = np.asarray(self.values, dtype=np.float64)
        if values.size == 0:
            raise InvalidSpecError("Explicit axis must not be empty")
        if not np.all(np.isfinite(values)):
            raise InvalidSpecError("Explicit axis coordinates must be finite")
        object.__setattr__(self, "values", values)

    @property
    def shape(self) -> tuple[int, ...]:
        return self.values.shape


AxisSpec = FixedAxis | RangeAxis | ExplicitAxis


def parse_axis_spec(spec: ArrayLike | AxisSpec, name: str = "x") -> AxisSpec:
    """Turn user input into an axis specification.

    A single number becomes a :class:`FixedAxis`, a two element 1D sequence a
    :class:`RangeAxis`, anything else an :class:`ExplicitAxis`. Already
    tagged specifications are returned unchanged; wrap a two point array in
    :class:`ExplicitAxis` to keep it from being read as a range.

    Args:
        spec: Number, ``[min, max]`` pair, n-D array or axis specification
        name: Axis name used in error messages

    Returns:
        The parsed axis specification

    Raises:
        InvalidSpecError: If the input is empty, non-numeric or non-finite
    """
    if isinstance(spec, (FixedAxis, RangeAxis, ExplicitAxis)):
        return spec

    try:
        raw = np.asarray(spec)
    except (TypeError, ValueError) as e:
        raise InvalidSpecError(f"{name} axis must be numeric, got {spec!r}") from e
    if raw.dtype == object or not (
        np.issubdtype(raw.dtype, np.number) or np.issubdtype(raw.dtype, np.bool_)
    ):
        raise InvalidSpecError(f"{name} axis must be numeric, got {spec!r}")
    if np.iscomplexobj(raw):
        raise InvalidSpecError(f"{name} axis must be real valued, got {spec!r}")

    values = raw.astype(np.float64)
    if values.size == 0:
        raise InvalidSpecError(f"{name} axis must not be empty")
    if not np.all(np.isfinite(values)):
        raise InvalidSpecError(f"{name} axis must be finite, got {spec!r}")

    if values.size == 1:
        return FixedAxis(float(values.ravel()[0]))
    if values.ndim == 1 and values.size == 2:
        return RangeAxis(float(values[0]), float(values[1]))
    return ExplicitAxis(values)


@dataclass(frozen=True, eq=False)
class Grid:
    """Evaluation points of a sound field simulation.

    Attributes:
        xx, yy, zz: Read-only coordinate arrays of identical shape, one entry
            per evaluation point
        active: Per axis flag, True if the axis was not given as a single
            value
        customized: True if the grid was built from explicit coordinate
            arrays
        x, y, z: 1D axis vectors of a regular grid (a single element for
            fixed axes). None for customized grids.
    """

    xx: NDArray[np.float64]
    yy: NDArray[np.float64]
    zz: NDArray[np.float64]
    active: tuple[bool, bool, bool]
    customized: bool = False
    x: NDArray[np.float64] | None = None
    y: NDArray[np.float64] | None = None
    z: NDArray[np.float64] | None = None

    def __post_init__(self):
        for arr in (self.xx, self.yy, self.zz, self.x, self.y, self.z):
            if arr is not None:
                arr.setflags(write=False)

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape of the coordinate arrays (and of the simulated field)."""
        return self.xx.shape

    @property
    def num_points(self) -> int:
        """Total number of evaluation points."""
        return int(self.xx.size)

    @property
    def dimensions(self) -> int:
        """Number of active axes (0 to 3)."""
        return sum(self.active)

    def as_tuple(self):
        """Return ``(xx, yy, zz, active)``."""
        return self.xx, self.yy, self.zz, self.active

    def points(self) -> NDArray[np.float64]:
        """Evaluation points as an (M, 3) array in flattened grid order."""
        return np.column_stack([self.xx.ravel(), self.yy.ravel(), self.zz.ravel()])

    def __repr__(self) -> str:
        kind = "customized" if self.customized else "regular"
        return f"Grid(shape={self.shape}, active={self.active}, {kind})"


def build_grid(
    X: ArrayLike | AxisSpec,
    Y: ArrayLike | AxisSpec,
    Z: ArrayLike | AxisSpec,
    resolution: int = 300,
) -> Grid:
    """Create the evaluation grid from three axis specifications.

    Args:
        X: x-axis / m; single value, [xmin, xmax] or n-D array
        Y: y-axis / m; single value, [ymin, ymax] or n-D array
        Z: z-axis / m; single value, [zmin, zmax] or n-D array
        resolution: Number of points for every axis given as a range

    Returns:
        Grid with coordinate arrays whose dimensions follow the active axes
        in x, y, z order. A grid without active axes holds a single point
        and has shape (1,).

    Raises:
        InvalidParameterError: If resolution is not a positive integer
        InvalidSpecError: For malformed or mixed range/array specifications
        ShapeMismatchError: If explicit arrays differ in shape
    """
    if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)):
        raise InvalidParameterError(f"resolution must be an integer, got {resolution!r}")
    if resolution <= 0:
        raise InvalidParameterError(f"resolution must be positive, got {resolution}")

    specs = [parse_axis_spec(s, name) for s, name in zip((X, Y, Z), AXIS_NAMES)]

    if any(isinstance(s, ExplicitAxis) for s in specs):
        return _customized_grid(specs)
    return _regular_grid(specs, int(resolution))


def _regular_grid(specs: list[AxisSpec], resolution: int) -> Grid:
    """Outer product of the expanded ranges, fixed axes broadcast."""
    vectors = []
    for spec in specs:
        if isinstance(spec, RangeAxis):
            vectors.append(spec.expand(resolution))
        else:
            vectors.append(np.array([spec.value], dtype=np.float64))

    active = tuple(isinstance(s, RangeAxis) for s in specs)
    active_vectors = [v for v, is_active in zip(vectors, active) if is_active]

    if active_vectors:
        mesh = iter(np.meshgrid(*active_vectors, indexing="ij"))
        shape = tuple(len(v) for v in active_vectors)
        coords = [
            next(mesh) if is_active else np.full(shape, spec.value, dtype=np.float64)
            for spec, is_active in zip(specs, active)
        ]
    else:
        coords = [np.array([spec.value], dtype=np.float64) for spec in specs]

    xx, yy, zz = (np.ascontiguousarray(c, dtype=np.float64) for c in coords)
    return Grid(
        xx=xx,
        yy=yy,
        zz=zz,
        active=active,
        customized=False,
        x=vectors[0],
        y=vectors[1],
        z=vectors[2],
    )


def _customized_grid(specs: list[AxisSpec]) -> Grid:
    """Elementwise grid from explicit arrays, fixed axes broadcast."""
    for spec, name in zip(specs, AXIS_NAMES):
        if isinstance(spec, RangeAxis):
            raise InvalidSpecError(
                f"{name} axis is a [min, max] range, which cannot be combined with "
                "explicit coordinate arrays on other axes"
            )

    explicit = [(name, s) for s, name in zip(specs, AXIS_NAMES) if isinstance(s, ExplicitAxis)]
    shape = explicit[0][1].shape
    for name, spec in explicit[1:]:
        if spec.shape != shape:
            raise ShapeMismatchError(
                f"{name} axis has shape {spec.shape}, expected {shape} "
                f"to match the {explicit[0][0]} axis"
            )

    coords = []
    for spec in specs:
        if isinstance(spec, ExplicitAxis):
            coords.append(np.array(spec.values, dtype=np.float64))
        else:
            coords.append(np.full(shape, spec.value, dtype=np.float64))

    active = tuple(isinstance(s, ExplicitAxis) for s in specs)
    return Grid(xx=coords[0], yy=coords[1], zz=coords[2], active=active, customized=True)
