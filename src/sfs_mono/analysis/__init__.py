"""Post-processing of simulated sound fields."""

from sfs_mono.analysis.normalization import (
    P_REF,
    level_db,
    nearest_grid_index,
    normalize_at_reference,
)

__all__ = [
    "P_REF",
    "level_db",
    "nearest_grid_index",
    "normalize_at_reference",
]
