"""
Configuration for monochromatic sound field simulations.

A single immutable :class:`SynthesisConfig` value is passed explicitly into
every component. There is no module level default that components read
implicitly; use :func:`dataclasses.replace` to derive variants.

Example:
    >>> from dataclasses import replace
    >>> from sfs_mono import SynthesisConfig
    >>> conf = SynthesisConfig(resolution=200)
    >>> hires = replace(conf, resolution=800)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InvalidParameterError

#: Speed of sound in air at 20 degrees Celsius (m/s)
SPEED_OF_SOUND = 343.0


@dataclass(frozen=True)
class SynthesisConfig:
    """Settings shared by grid construction, Green's functions and integration.

    Args:
        resolution: Number of points per axis when a ``[min, max]`` range is
            expanded to a linear grid
        speed_of_sound: Propagation speed c in m/s, used in k = 2*pi*f/c
        time_convention: Sign of the temporal exponential exp(+/- i*omega*t).
            ``+1`` (default) selects exp(+i*omega*t), for which outgoing
            waves carry exp(-i*k*r) and line sources use the Hankel function
            of the second kind. ``-1`` flips every imaginary exponent (and
            switches to the Hankel function of the first kind).
        show_progress: Show a progress bar while integrating over secondary
            sources (ignored when an explicit callback is supplied)
        normalize: Normalize the field to unit magnitude at ``xref``
            (regular grids only)
        xref: Reference point used for normalization (m)
        plot: Hand the result to the plotting collaborator after computing
        usedb: Plot the level in dB instead of the real part
    """

    resolution: int = 300
    speed_of_sound: float = SPEED_OF_SOUND
    time_convention: int = 1
    show_progress: bool = False
    normalize: bool = False
    xref: tuple[float, float, float] = (0.0, 0.0, 0.0)
    plot: bool = False
    usedb: bool = False

    def __post_init__(self):
        if isinstance(self.resolution, bool) or not isinstance(
            self.resolution, (int, np.integer)
        ):
            raise InvalidParameterError(
                f"resolution must be an integer, got {self.resolution!r}"
            )
        if self.resolution <= 0:
            raise InvalidParameterError(
                f"resolution must be positive, got {self.resolution}"
            )
        if not np.isfinite(self.speed_of_sound) or self.speed_of_sound <= 0:
            raise InvalidParameterError(
                f"speed_of_sound must be positive, got {self.speed_of_sound}"
            )
        if self.time_convention not in (1, -1):
            raise InvalidParameterError(
                f"time_convention must be +1 or -1, got {self.time_convention!r}"
            )
        xref = np.asarray(self.xref, dtype=np.float64).ravel()
        if xref.shape != (3,) or not np.all(np.isfinite(xref)):
            raise InvalidParameterError(f"xref must be a finite 3D point, got {self.xref!r}")
        # Store as a plain tuple so the config stays hashable
        object.__setattr__(self, "xref", tuple(float(v) for v in xref))

    def wavenumber(self, frequency: float) -> float:
        """Wavenumber k = 2*pi*f/c for the configured speed of sound."""
        return 2.0 * np.pi * frequency / self.speed_of_sound


def resolve_config(config: SynthesisConfig | None) -> SynthesisConfig:
    """Return ``config``, or the default settings if it is None.

    Raises:
        InvalidParameterError: If ``config`` is not a SynthesisConfig
    """
    if config is None:
        return SynthesisConfig()
    if not isinstance(config, SynthesisConfig):
        raise InvalidParameterError(
            f"config must be a SynthesisConfig instance, got {type(config).__name__}"
        )
    return config
