"""
Example: Line Sources at Scattered Measurement Points
=====================================================
Eight line sources (2D free field) driven in phase, evaluated only at a
set of microphone positions instead of a regular grid. Explicit coordinate
arrays give a customized grid: every (x, y) pair is one evaluation point.

Run with:
    sfs-compute examples/line_sources_measurement_points.py --dry-run

Array: 8 line sources on x = -1.5 m, y from -1 m to 1 m
Microphones: 5 × 4 positions on a jittered grid
"""

import numpy as np

from sfs_mono import SynthesisConfig

frequency = 500.0  # Hz
config = SynthesisConfig()

n = 8
secondary_sources = np.zeros((n, 7))
secondary_sources[:, 0] = -1.5
secondary_sources[:, 1] = np.linspace(-1.0, 1.0, n)
secondary_sources[:, 3] = 1.0
secondary_sources[:, 6] = 2.0 / (n - 1)

# Microphone positions on a slightly jittered 5 x 4 grid
rng = np.random.default_rng(7)
mx, my = np.meshgrid(np.linspace(-0.5, 1.0, 5), np.linspace(-0.6, 0.6, 4), indexing="ij")
X = mx + rng.uniform(-0.05, 0.05, mx.shape)
Y = my + rng.uniform(-0.05, 0.05, my.shape)
Z = 0.0

driving_signals = np.ones(n)
source_model = "line"
