"""
Plotting of simulated sound fields (requires matplotlib).

One dimensional fields are drawn as a line over the active axis, two
dimensional fields as a color map over the two active axes with the secondary
sources marked. Customized grids and 3D fields are not plotted.

Example:
    >>> import matplotlib.pyplot as plt
    >>> from sfs_mono.plotting import plot_sound_field
    >>> result = sound_field_mono([-2, 2], [-2, 2], 0, x0, "point", D, 1000)
    >>> ax = plot_sound_field(result, x0, usedb=True)
    >>> plt.show()
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike

from .analysis.normalization import level_db
from .core.axes import squeeze_axes
from .core.sources import SecondarySources

if TYPE_CHECKING:
    from matplotlib.axes import Axes

    from .core.synthesis import SoundField

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


def plot_sound_field(
    sound_field: SoundField,
    secondary_sources: ArrayLike | SecondarySources | None = None,
    *,
    usedb: bool = False,
    ax: Axes | None = None,
    cmap: str | None = None,
) -> Axes | None:
    """Plot the real part (or level in dB) of a simulated sound field.

    Args:
        sound_field: Result of :func:`sound_field_mono`
        secondary_sources: Optional sources to mark in 2D plots
        usedb: Plot 20*log10(|P|) instead of Re(P)
        ax: Axes to draw into (a new figure is created if None)
        cmap: Matplotlib colormap name

    Returns:
        The axes drawn into, or None if the field cannot be plotted
        (customized grid or a single evaluation point)

    Raises:
        ValueError: For three dimensional fields
    """
    import matplotlib.pyplot as plt

    grid = sound_field.grid
    if grid.customized:
        warnings.warn("Plotting is disabled for customized grids", UserWarning, stacklevel=2)
        return None

    axes = squeeze_axes(grid)
    if len(axes) == 3:
        raise ValueError("Plotting of 3D sound fields is not supported")
    if len(axes) == 0:
        warnings.warn("Nothing to plot for a single evaluation point", UserWarning, stacklevel=2)
        return None

    P = sound_field.pressure
    values = level_db(P) if usedb else np.real(P)
    label = "Level / dB" if usedb else "Sound pressure (real part)"

    if ax is None:
        _, ax = plt.subplots()

    if len(axes) == 1:
        name, vec = axes[0]
        ax.plot(vec, values)
        ax.set_xlabel(f"{name} / m")
        ax.set_ylabel(label)
        ax.grid(linestyle="--")
        return ax

    (name1, vec1), (name2, vec2) = axes
    if cmap is None:
        cmap = "viridis" if usedb else "RdBu_r"
    if usedb:
        finite = values[np.isfinite(values)]
        vmax = float(finite.max()) if finite.size else 0.0
        vmin = vmax - 45.0
    else:
        vmin, vmax = -1.0, 1.0
    # Fields are stored in (axis1, axis2) order; pcolormesh expects rows along axis2
    mesh = ax.pcolormesh(vec1, vec2, values.T, shading="auto", cmap=cmap, vmin=vmin, vmax=vmax)
    plt.colorbar(mesh, ax=ax, label=label)
    ax.set_xlabel(f"{name1} / m")
    ax.set_ylabel(f"{name2} / m")
    ax.set_aspect("equal")

    if secondary_sources is not None:
        sources = SecondarySources.from_table(secondary_sources)
        i1, i2 = _AXIS_INDEX[name1], _AXIS_INDEX[name2]
        ax.plot(
            sources.positions[:, i1],
            sources.positions[:, i2],
            "k.",
            markersize=4,
            label="secondary sources",
        )
        ax.set_xlim(vec1[0], vec1[-1])
        ax.set_ylim(vec2[0], vec2[-1])

    ax.set_title(f"{sound_field.frequency:g} Hz, {sound_field.source_model.value}")
    return ax
