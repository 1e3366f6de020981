"""
Example: Virtual Point Source Behind a Linear Array
===================================================
A linear array of 64 loudspeakers synthesizes a point source placed 1 m
behind the array. The driving signals are delayed and attenuated copies of
the virtual source signal (delay-and-sum), restricted to the loudspeakers
the virtual source illuminates.

Run with:
    sfs-compute examples/linear_array_point_source.py -o point_source.h5

Grid: 300 × 300 points in front of the array, z = 0
Array: 64 point sources on y = 2 m, x from -2 m to 2 m, facing -y
Virtual source: (0, 3, 0), 1 kHz
"""

import numpy as np

from sfs_mono import SynthesisConfig

frequency = 1000.0  # Hz
config = SynthesisConfig(resolution=300, normalize=True, xref=(0.0, 0.0, 0.0))

# Evaluation plane
X = [-2.0, 2.0]
Y = [-2.0, 1.75]  # stop short of the array line
Z = 0.0

# Secondary sources [x, y, z, nx, ny, nz, w]
n = 64
secondary_sources = np.zeros((n, 7))
secondary_sources[:, 0] = np.linspace(-2.0, 2.0, n)
secondary_sources[:, 1] = 2.0
secondary_sources[:, 4] = -1.0  # facing the listening area
secondary_sources[:, 6] = 4.0 / (n - 1)  # spacing as integration weight

# Virtual point source behind the array
xs = np.array([0.0, 3.0, 0.0])
k = config.wavenumber(frequency)

diff = secondary_sources[:, :3] - xs
r = np.linalg.norm(diff, axis=1)
# Only loudspeakers whose normal points away from the virtual source radiate
active = np.einsum("ij,ij->i", diff, secondary_sources[:, 3:6]) > 0
driving_signals = active * np.exp(-1j * k * r) / r

source_model = "point"
