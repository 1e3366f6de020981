"""Core synthesis components: grids, Green's functions and integration."""

from sfs_mono.core.axes import select_active_axes, squeeze_axes
from sfs_mono.core.greens import check_frequency, greens_function
from sfs_mono.core.grid import (
    AxisSpec,
    ExplicitAxis,
    FixedAxis,
    Grid,
    RangeAxis,
    build_grid,
    parse_axis_spec,
)
from sfs_mono.core.sources import SecondarySources, SourceModel, as_driving_signals
from sfs_mono.core.synthesis import SoundField, integrate, sound_field_mono, validate_inputs

__all__ = [
    "AxisSpec",
    "FixedAxis",
    "RangeAxis",
    "ExplicitAxis",
    "Grid",
    "build_grid",
    "parse_axis_spec",
    "select_active_axes",
    "squeeze_axes",
    "SourceModel",
    "SecondarySources",
    "as_driving_signals",
    "check_frequency",
    "greens_function",
    "SoundField",
    "integrate",
    "sound_field_mono",
    "validate_inputs",
]
