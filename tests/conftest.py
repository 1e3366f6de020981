"""Pytest configuration for sfs-mono test suite.

This conftest.py handles initialization that must occur before any test
imports, and provides shared secondary source fixtures.
"""

import os

import numpy as np
import pytest

# =============================================================================
# Headless Plotting
# =============================================================================
# The plotting tests create figures. Selecting the non-interactive Agg
# backend before matplotlib is first imported keeps them from opening
# windows or failing on machines without a display.
# =============================================================================
os.environ.setdefault("MPLBACKEND", "Agg")


def pytest_configure(config):
    """Called after command line options have been parsed and all plugins
    and initial conftest files been loaded.
    """
    os.environ["MPLBACKEND"] = "Agg"


@pytest.fixture
def linear_array():
    """16 point sources on the line y = 1 between x = -1.5 and 1.5, facing -y."""
    n = 16
    table = np.zeros((n, 7))
    table[:, 0] = np.linspace(-1.5, 1.5, n)
    table[:, 1] = 1.0
    table[:, 4] = -1.0
    table[:, 6] = 3.0 / (n - 1)
    return table


@pytest.fixture
def circular_array():
    """32 sources on a circle of radius 1.5 m, facing the center."""
    n = 32
    phi = np.linspace(0, 2 * np.pi, n, endpoint=False)
    table = np.zeros((n, 7))
    table[:, 0] = 1.5 * np.cos(phi)
    table[:, 1] = 1.5 * np.sin(phi)
    table[:, 3] = -np.cos(phi)
    table[:, 4] = -np.sin(phi)
    table[:, 6] = 2 * np.pi * 1.5 / n
    return table
