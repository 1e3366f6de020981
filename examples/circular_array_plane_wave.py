"""
Example: Plane Wave From a Circular Array
=========================================
A circular array of 56 loudspeakers (radius 1.5 m) synthesizes a plane wave
travelling in the direction (0, -1, 0). Only the half of the array facing
the propagation direction is driven; its contributions are weighted by the
arc length per loudspeaker.

Run with:
    sfs-compute examples/circular_array_plane_wave.py -o plane_wave.h5 -j -1

Grid: 250 × 250 points in the xy-plane at z = 0
Array: 56 point sources on a circle of radius 1.5 m, facing the center
Plane wave: direction (0, -1, 0), 800 Hz
"""

import math

import numpy as np

from sfs_mono import SynthesisConfig

frequency = 800.0  # Hz
config = SynthesisConfig(resolution=250)

X = [-1.75, 1.75]
Y = [-1.75, 1.75]
Z = 0.0

radius = 1.5
n = 56
phi = np.linspace(0.0, 2 * math.pi, n, endpoint=False)

secondary_sources = np.zeros((n, 7))
secondary_sources[:, 0] = radius * np.cos(phi)
secondary_sources[:, 1] = radius * np.sin(phi)
secondary_sources[:, 3] = -np.cos(phi)
secondary_sources[:, 4] = -np.sin(phi)
secondary_sources[:, 6] = 2 * math.pi * radius / n

# Plane wave driving function: selected loudspeakers radiate the
# spatial derivative of the plane wave along their normal
direction = np.array([0.0, -1.0, 0.0])
k = config.wavenumber(frequency)
cos_angle = secondary_sources[:, 3:6] @ direction
selected = cos_angle > 0
phase = secondary_sources[:, :3] @ direction
driving_signals = selected * 2j * k * cos_angle * np.exp(-1j * k * phase)

source_model = "point"
