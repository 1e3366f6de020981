"""I/O for simulated sound fields."""

from sfs_mono.io.hdf5 import (
    SoundFieldReader,
    SoundFieldWriter,
    write_sound_field,
)

__all__ = [
    "SoundFieldWriter",
    "SoundFieldReader",
    "write_sound_field",
]
