"""
Monochromatic sound field synthesis by secondary source superposition.

The synthesized field is the single-layer potential

    P(x, omega) = integral D(x0, omega) G(x - x0, omega) dx0

discretized into a weighted sum over the N secondary sources:

    P(x) = sum_i D_i * G(x - x0_i) * w_i

where w_i is the integration weight of source i (tapering window, quadrature
weight, ...). See Wierstorf et al. (2015), eq. (single-layer), or Williams
(1999), p. 36.

Example:
    >>> import numpy as np
    >>> from sfs_mono import SynthesisConfig, sound_field_mono
    >>>
    >>> # Linear array of 32 point sources along x at y = 1.5 m
    >>> n = 32
    >>> table = np.zeros((n, 7))
    >>> table[:, 0] = np.linspace(-2, 2, n)
    >>> table[:, 1] = 1.5
    >>> table[:, 4] = -1.0
    >>> table[:, 6] = 4 / (n - 1)
    >>> D = np.ones(n)
    >>> result = sound_field_mono(
    ...     [-2, 2], [-2, 2], 0, table, "point", D, 1000,
    ...     SynthesisConfig(resolution=200),
    ... )
    >>> P, xx, yy, zz = result
    >>> P.shape
    (200, 200)
"""

from __future__ import annotations

import threading
import warnings
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from joblib import Parallel, cpu_count, delayed
from numpy.typing import ArrayLike, NDArray

from ..config import SynthesisConfig, resolve_config
from ..errors import CountMismatchError, InvalidParameterError, SynthesisCancelled
from .axes import select_active_axes
from .greens import check_frequency, greens_function
from .grid import AxisSpec, Grid, build_grid
from .sources import SecondarySources, SourceModel, as_driving_signals

ProgressCallback = Callable[[int, int], None]


class CancelToken(Protocol):
    """Anything with an ``is_set()`` method, e.g. :class:`threading.Event`."""

    def is_set(self) -> bool: ...


@dataclass(frozen=True, eq=False)
class SoundField:
    """Result of a sound field simulation.

    Iterating yields ``(pressure, xx, yy, zz)``, so the result can be
    unpacked like ``P, xx, yy, zz = sound_field_mono(...)``.

    Attributes:
        pressure: Read-only complex pressure, shaped like the grid
        grid: Evaluation grid the field was computed on
        frequency: Frequency in Hz
        source_model: Secondary source model used
        normalized: True if the field was normalized at the reference point
    """

    pressure: NDArray[np.complex128]
    grid: Grid
    frequency: float
    source_model: SourceModel
    normalized: bool = False

    def __post_init__(self):
        self.pressure.setflags(write=False)

    @property
    def xx(self) -> NDArray[np.float64]:
        return self.grid.xx

    @property
    def yy(self) -> NDArray[np.float64]:
        return self.grid.yy

    @property
    def zz(self) -> NDArray[np.float64]:
        return self.grid.zz

    @property
    def shape(self) -> tuple[int, ...]:
        return self.pressure.shape

    def __iter__(self):
        return iter((self.pressure, self.grid.xx, self.grid.yy, self.grid.zz))

    def __repr__(self) -> str:
        return (
            f"SoundField(shape={self.shape}, frequency={self.frequency:g} Hz, "
            f"source_model={self.source_model.value})"
        )


def validate_inputs(
    secondary_sources: ArrayLike | SecondarySources,
    driving_signals: ArrayLike,
    source_model: str | SourceModel,
    frequency: float,
) -> tuple[SecondarySources, NDArray[np.complex128], SourceModel, float]:
    """Validate everything the integration loop relies on.

    Returns:
        Tuple (sources, driving_signals, source_model, frequency) in
        canonical form

    Raises:
        CountMismatchError, UnknownSourceModelError, InvalidFrequencyError,
        InvalidParameterError: On invalid input
    """
    sources = SecondarySources.from_table(secondary_sources)
    D = as_driving_signals(driving_signals)
    if len(sources) != len(D):
        raise CountMismatchError(
            f"The number of secondary sources ({len(sources)}) and driving "
            f"signals ({len(D)}) does not correspond"
        )
    model = SourceModel.parse(source_model)
    f = check_frequency(frequency)
    if model is SourceModel.PLANE_WAVE and np.any(
        np.linalg.norm(sources.positions, axis=1) == 0
    ):
        raise InvalidParameterError(
            "Plane wave secondary sources encode their direction in the position "
            "and must not be placed at the origin"
        )
    return sources, D, model, f


def _partial_sum(
    grid: Grid,
    sources: SecondarySources,
    D: NDArray[np.complex128],
    model: SourceModel,
    frequency: float,
    config: SynthesisConfig,
    indices: NDArray[np.intp],
    shape: tuple[int, ...],
    notify: Callable[[int], None] | None,
    cancel: CancelToken | None,
) -> NDArray[np.complex128]:
    """Sum the contributions of ``indices`` in ascending order."""
    P = np.zeros(shape, dtype=np.complex128)
    xx = grid.xx.reshape(shape)
    yy = grid.yy.reshape(shape)
    zz = grid.zz.reshape(shape)
    # Singular points are reported once by the caller
    with np.errstate(divide="ignore", invalid="ignore"):
        for ii in indices:
            if cancel is not None and cancel.is_set():
                raise SynthesisCancelled(f"Integration cancelled at secondary source {ii}")
            G = greens_function(xx, yy, zz, sources.positions[ii], model, frequency, config)
            P += D[ii] * G * sources.weights[ii]
            if notify is not None:
                notify(int(ii))
    return P


def integrate(
    grid: Grid,
    secondary_sources: ArrayLike | SecondarySources,
    driving_signals: ArrayLike,
    source_model: str | SourceModel,
    frequency: float,
    config: SynthesisConfig | None = None,
    *,
    callback: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
    n_jobs: int = 1,
) -> NDArray[np.complex128]:
    """Integrate the driving signals over the secondary sources.

    Args:
        grid: Evaluation grid from :func:`build_grid`
        secondary_sources: N x 7 table or :class:`SecondarySources`
        driving_signals: N complex driving signals, order-aligned with the
            sources
        source_model: Green's function used for the secondary sources
        frequency: Frequency in Hz
        config: Speed of sound, time convention, progress display
        callback: Called as ``callback(index, total)`` after each source
        cancel: Checked once per source; if set, the integration stops
        n_jobs: Number of worker threads. Sources are split into contiguous
            chunks whose partial sums are added in chunk order, so the result
            does not depend on scheduling.

    Returns:
        Complex pressure with the active shape of the grid

    Raises:
        CountMismatchError: If sources and driving signals differ in number
        UnknownSourceModelError: For an unknown model tag
        InvalidFrequencyError: For a non-positive frequency
        InvalidParameterError: For malformed sources, signals or n_jobs
        SynthesisCancelled: If ``cancel`` is set during integration
    """
    config = resolve_config(config)
    sources, D, model, f = validate_inputs(
        secondary_sources, driving_signals, source_model, frequency
    )
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, (int, np.integer)) or n_jobs == 0:
        raise InvalidParameterError(f"n_jobs must be a non-zero integer, got {n_jobs!r}")

    _, shape = select_active_axes(grid.xx, grid.yy, grid.zz, grid.active)
    total = len(sources)

    bar = None
    if callback is None and config.show_progress:
        from tqdm import tqdm

        bar = tqdm(total=total, desc="Secondary sources")
        callback = lambda index, total: bar.update(1)  # noqa: E731

    notify = None
    if callback is not None:
        lock = threading.Lock()

        def notify(index):
            with lock:
                callback(index, total)

    # joblib semantics: -1 means all cores, -2 all but one, ...
    workers = n_jobs if n_jobs > 0 else max(1, cpu_count() + 1 + n_jobs)
    workers = min(workers, total)

    try:
        if workers == 1:
            P = _partial_sum(
                grid, sources, D, model, f, config, np.arange(total), shape, notify, cancel
            )
        else:
            chunks = np.array_split(np.arange(total), workers)
            partials = Parallel(n_jobs=workers, prefer="threads")(
                delayed(_partial_sum)(
                    grid, sources, D, model, f, config, chunk, shape, notify, cancel
                )
                for chunk in chunks
            )
            P = np.zeros(shape, dtype=np.complex128)
            for partial in partials:
                P += partial
    finally:
        if bar is not None:
            bar.close()

    if not np.all(np.isfinite(P)):
        warnings.warn(
            "Sound field contains non-finite values; evaluation points coincide "
            "with secondary source positions",
            RuntimeWarning,
            stacklevel=2,
        )
    return P


def sound_field_mono(
    X: ArrayLike | AxisSpec,
    Y: ArrayLike | AxisSpec,
    Z: ArrayLike | AxisSpec,
    x0: ArrayLike | SecondarySources,
    source_model: str | SourceModel,
    D: ArrayLike,
    f: float,
    config: SynthesisConfig | None = None,
    *,
    callback: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
    n_jobs: int = 1,
) -> SoundField:
    """Simulate a monochromatic sound field for given driving signals.

    For each of X, Y, Z:

    - a single value squeezes the axis, lowering the field's dimensionality
    - ``[min, max]`` creates a linear grid with ``config.resolution`` points
    - an n-D array (with the other axes of the same shape or single values)
      gives a customized grid of evaluation points, for which plotting and
      normalization are disabled

    Args:
        X, Y, Z: Axis specifications in meters
        x0: Secondary sources, N x 7 table or :class:`SecondarySources`
        source_model: "point", "line" or "plane_wave" ("ps", "ls", "pw")
        D: Driving signals of the secondary sources (N,)
        f: Frequency in Hz
        config: Simulation settings (defaults if None)
        callback: Progress callback ``callback(index, total)``
        cancel: Cooperative cancellation token
        n_jobs: Number of worker threads for the integration

    Returns:
        SoundField holding the pressure and the grid

    Raises:
        CountMismatchError, InvalidSpecError, ShapeMismatchError,
        UnknownSourceModelError, InvalidFrequencyError,
        InvalidParameterError: On invalid input, before any computation
    """
    config = resolve_config(config)
    sources, D, model, f = validate_inputs(x0, D, source_model, f)

    grid = build_grid(X, Y, Z, config.resolution)

    P = integrate(
        grid, sources, D, model, f, config,
        callback=callback, cancel=cancel, n_jobs=n_jobs,
    )

    normalized = False
    if config.normalize:
        if grid.customized:
            warnings.warn(
                "Normalization is disabled for customized grids",
                UserWarning,
                stacklevel=2,
            )
        else:
            from ..analysis.normalization import normalize_at_reference

            P_norm = normalize_at_reference(P, grid, config.xref)
            normalized = P_norm is not P
            P = P_norm

    result = SoundField(
        pressure=P, grid=grid, frequency=f, source_model=model, normalized=normalized
    )

    if config.plot:
        from ..plotting import plot_sound_field

        plot_sound_field(result, sources, usedb=config.usedb)

    return result
