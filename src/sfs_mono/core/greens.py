"""
Monochromatic Green's functions of the secondary source models.

With the default time convention exp(+i*omega*t) the models are:

    point source:  G(x - x0) = exp(-i*k*|x - x0|) / (4*pi*|x - x0|)
    line source:   G(x - x0) = -i/4 * H0^(2)(k*|x - x0|_xy)
    plane wave:    G(x)      = exp(-i*k * n.(x - x_ref))

where k = 2*pi*f/c and |.|_xy is the distance in the xy-plane (the line
source extends along z). The opposite convention exp(-i*omega*t) returns the
complex conjugate of each expression.

Evaluating a point or line source exactly at its own position divides by
zero. The resulting inf/nan values are returned as they are, mirroring the
physical singularity.

References:
    H. Wierstorf, J. Ahrens, F. Winter, F. Schultz, S. Spors (2015),
    "Theory of Sound Field Synthesis"
    E. G. Williams (1999), "Fourier Acoustics", Academic Press
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.special import hankel1, hankel2

from ..config import SynthesisConfig, resolve_config
from ..errors import InvalidFrequencyError, InvalidParameterError
from .sources import SourceModel


def check_frequency(frequency: float) -> float:
    """Validate a frequency in Hz.

    Raises:
        InvalidFrequencyError: If frequency is not a positive finite number
    """
    try:
        f = float(frequency)
    except (TypeError, ValueError) as e:
        raise InvalidFrequencyError(f"Frequency must be a number, got {frequency!r}") from e
    if not np.isfinite(f) or f <= 0:
        raise InvalidFrequencyError(f"Frequency must be positive, got {frequency}")
    return f


def _point_like(position: ArrayLike, name: str) -> NDArray[np.float64]:
    point = np.asarray(position, dtype=np.float64).ravel()
    if point.shape != (3,) or not np.all(np.isfinite(point)):
        raise InvalidParameterError(f"{name} must be a finite 3D vector, got {position!r}")
    return point


def greens_function(
    xx: ArrayLike,
    yy: ArrayLike,
    zz: ArrayLike,
    x0: ArrayLike,
    source_model: str | SourceModel,
    frequency: float,
    config: SynthesisConfig | None = None,
    orientation: ArrayLike | None = None,
) -> NDArray[np.complex128]:
    """Evaluate the Green's function of one secondary source on a grid.

    Args:
        xx, yy, zz: Coordinates of the evaluation points (same shape)
        x0: Position of the secondary source (m)
        source_model: "point", "line" or "plane_wave" (or "ps", "ls", "pw")
        frequency: Frequency in Hz
        config: Speed of sound and time convention (defaults if None)
        orientation: Propagation direction of a plane wave. If given, the
            phase is referenced to ``x0``. If None, the direction of ``x0``
            itself is used and the phase is referenced to the origin.
            Ignored by point and line sources.

    Returns:
        Complex transfer function with the shape of ``xx``

    Raises:
        UnknownSourceModelError: For an unknown model tag
        InvalidFrequencyError: For a non-positive frequency
        InvalidParameterError: For a malformed position or a zero length
            plane wave direction
    """
    model = SourceModel.parse(source_model)
    f = check_frequency(frequency)
    config = resolve_config(config)
    x0 = _point_like(x0, "Source position")
    if orientation is not None:
        orientation = _point_like(orientation, "Orientation")

    xx = np.asarray(xx, dtype=np.float64)
    yy = np.asarray(yy, dtype=np.float64)
    zz = np.asarray(zz, dtype=np.float64)

    k = config.wavenumber(f)
    # Sign of the spatial phase; flipped together with the time convention
    sign = -config.time_convention

    if model is SourceModel.POINT:
        r = np.sqrt((xx - x0[0]) ** 2 + (yy - x0[1]) ** 2 + (zz - x0[2]) ** 2)
        return np.exp(sign * 1j * k * r) / (4 * np.pi * r)

    elif model is SourceModel.LINE:
        r = np.sqrt((xx - x0[0]) ** 2 + (yy - x0[1]) ** 2)
        if config.time_convention > 0:
            return -1j / 4 * hankel2(0, k * r)
        return 1j / 4 * hankel1(0, k * r)

    elif model is SourceModel.PLANE_WAVE:
        if orientation is None:
            direction, reference = x0, np.zeros(3)
        else:
            direction, reference = orientation, x0
        norm = np.linalg.norm(direction)
        if norm == 0:
            raise InvalidParameterError("Plane wave direction must not be the zero vector")
        n = direction / norm
        phase = (
            n[0] * (xx - reference[0])
            + n[1] * (yy - reference[1])
            + n[2] * (zz - reference[2])
        )
        return np.exp(sign * 1j * k * phase)

    # SourceModel.parse only yields the members handled above
    raise AssertionError(f"Unhandled source model {model}")
