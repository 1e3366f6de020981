"""
sfs-mono - monochromatic sound field synthesis.

Simulates the sound field synthesized by an array of secondary sources
(loudspeakers) driven by complex driving signals, by superposition of the
secondary sources' Green's functions.

Main exports:
- sound_field_mono: Grid construction, integration and optional
  normalization/plotting in one call
- build_grid: Evaluation grid from scalar / range / array axis specs
- greens_function: Point source, line source and plane wave models
- integrate: Weighted sum over secondary sources
- SecondarySources, SourceModel: Input descriptions
- SynthesisConfig: Immutable simulation settings
"""

__version__ = "0.1.0"

from sfs_mono.config import SPEED_OF_SOUND, SynthesisConfig
from sfs_mono.core import (
    ExplicitAxis,
    FixedAxis,
    Grid,
    RangeAxis,
    SecondarySources,
    SoundField,
    SourceModel,
    build_grid,
    greens_function,
    integrate,
    parse_axis_spec,
    select_active_axes,
    sound_field_mono,
)
from sfs_mono.errors import (
    CountMismatchError,
    InvalidFrequencyError,
    InvalidParameterError,
    InvalidSpecError,
    SFSError,
    ShapeMismatchError,
    SynthesisCancelled,
    UnknownSourceModelError,
)

# Submodules for more specific imports
from . import analysis, io

__all__ = [
    # Synthesis
    "sound_field_mono",
    "integrate",
    "greens_function",
    "SoundField",
    # Grid
    "build_grid",
    "parse_axis_spec",
    "select_active_axes",
    "Grid",
    "FixedAxis",
    "RangeAxis",
    "ExplicitAxis",
    # Inputs
    "SecondarySources",
    "SourceModel",
    "SynthesisConfig",
    "SPEED_OF_SOUND",
    # Errors
    "SFSError",
    "InvalidSpecError",
    "ShapeMismatchError",
    "CountMismatchError",
    "UnknownSourceModelError",
    "InvalidParameterError",
    "InvalidFrequencyError",
    "SynthesisCancelled",
    # Submodules
    "analysis",
    "io",
]
