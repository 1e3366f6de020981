"""
Unit tests for evaluation grid construction.

Tests verify:
- Parsing of scalar, range and array axis specifications
- Regular grids with ij-ordered dimensions
- Customized grids from explicit coordinate arrays
- Rejection of malformed and mixed specifications
"""

import numpy as np
import pytest

from sfs_mono import (
    ExplicitAxis,
    FixedAxis,
    InvalidParameterError,
    InvalidSpecError,
    RangeAxis,
    ShapeMismatchError,
    build_grid,
    parse_axis_spec,
)

# =============================================================================
# Axis Specification Parsing
# =============================================================================


class TestParseAxisSpec:
    def test_scalar_is_fixed(self):
        """A single number squeezes the axis."""
        assert parse_axis_spec(0.5) == FixedAxis(0.5)

    def test_single_element_list_is_fixed(self):
        assert parse_axis_spec([2]) == FixedAxis(2.0)

    def test_pair_is_range(self):
        """A two element 1D sequence is a [min, max] range."""
        assert parse_axis_spec([-2, 2]) == RangeAxis(-2.0, 2.0)

    def test_longer_array_is_explicit(self):
        spec = parse_axis_spec(np.array([0.0, 0.5, 1.0]))
        assert isinstance(spec, ExplicitAxis)
        assert spec.shape == (3,)

    def test_2d_pair_is_explicit(self):
        """Only 1D pairs are ranges; a (2, 1) array lists two points."""
        spec = parse_axis_spec(np.array([[0.0], [1.0]]))
        assert isinstance(spec, ExplicitAxis)
        assert spec.shape == (2, 1)

    def test_tagged_spec_passes_through(self):
        spec = ExplicitAxis(np.array([0.0, 1.0]))
        assert parse_axis_spec(spec) is spec

    def test_descending_range_raises(self):
        with pytest.raises(InvalidSpecError, match="min < max"):
            parse_axis_spec([2, -2])

    def test_degenerate_range_raises(self):
        with pytest.raises(InvalidSpecError):
            parse_axis_spec([1, 1])

    def test_empty_raises(self):
        with pytest.raises(InvalidSpecError, match="empty"):
            parse_axis_spec([])

    def test_non_numeric_raises(self):
        with pytest.raises(InvalidSpecError, match="numeric"):
            parse_axis_spec("abc", "y")

    def test_complex_raises(self):
        with pytest.raises(InvalidSpecError, match="real"):
            parse_axis_spec([1j, 2])

    def test_non_finite_raises(self):
        with pytest.raises(InvalidSpecError, match="finite"):
            parse_axis_spec([0, np.inf])


class TestAxisSpecConstruction:
    @pytest.mark.parametrize("value", ["a", None, 1j, [1.0, 2.0]])
    def test_fixed_axis_non_numeric_raises(self, value):
        with pytest.raises(InvalidSpecError, match="real number"):
            FixedAxis(value)

    def test_fixed_axis_non_finite_raises(self):
        with pytest.raises(InvalidSpecError, match="finite"):
            FixedAxis(np.nan)

    @pytest.mark.parametrize("start, stop", [("a", 1.0), (0.0, None), (0.0, 1j)])
    def test_range_axis_non_numeric_raises(self, start, stop):
        with pytest.raises(InvalidSpecError, match="real number"):
            RangeAxis(start, stop)

    def test_range_axis_non_finite_raises(self):
        with pytest.raises(InvalidSpecError, match="finite"):
            RangeAxis(-np.inf, 1.0)

    def test_values_stored_as_float(self):
        axis = RangeAxis(np.int64(-1), 2)

        assert isinstance(axis.start, float)
        assert axis == RangeAxis(-1.0, 2.0)
        assert isinstance(FixedAxis(np.float32(0.5)).value, float)


# =============================================================================
# Regular Grids
# =============================================================================


class TestRegularGrid:
    def test_2d_xy_plane(self):
        """Two ranges and a fixed z give a 2D grid."""
        grid = build_grid([-2, 2], [-1, 1], 0, resolution=50)

        assert grid.shape == (50, 50)
        assert grid.active == (True, True, False)
        assert grid.customized is False
        assert grid.dimensions == 2
        assert np.all(grid.zz == 0)

    def test_ij_indexing(self):
        """The first field dimension runs along x, the second along y."""
        grid = build_grid([0, 1], [10, 20], 0, resolution=11)

        np.testing.assert_allclose(grid.xx[:, 0], np.linspace(0, 1, 11))
        np.testing.assert_allclose(grid.yy[0, :], np.linspace(10, 20, 11))
        assert np.all(grid.xx[3, :] == grid.xx[3, 0])

    def test_range_endpoints_included(self):
        grid = build_grid([-2, 2], 0, 0, resolution=5)

        np.testing.assert_allclose(grid.x, [-2, -1, 0, 1, 2])
        assert grid.shape == (5,)

    def test_xz_plane_dimension_order(self):
        """Squeezing y keeps x before z."""
        grid = build_grid([0, 1], 0.3, [-1, 0], resolution=7)

        assert grid.shape == (7, 7)
        assert grid.active == (True, False, True)
        np.testing.assert_allclose(grid.zz[0, :], np.linspace(-1, 0, 7))
        assert np.all(grid.yy == 0.3)

    def test_3d_grid(self):
        grid = build_grid([0, 1], [0, 1], [0, 1], resolution=4)

        assert grid.shape == (4, 4, 4)
        assert grid.dimensions == 3

    def test_single_point(self):
        """All axes fixed gives one evaluation point with shape (1,)."""
        grid = build_grid(1, 0, 0)

        assert grid.shape == (1,)
        assert grid.active == (False, False, False)
        assert grid.num_points == 1
        np.testing.assert_allclose(grid.points(), [[1, 0, 0]])

    def test_axis_vectors(self):
        grid = build_grid([-1, 1], 0.5, 0, resolution=3)

        np.testing.assert_allclose(grid.x, [-1, 0, 1])
        np.testing.assert_allclose(grid.y, [0.5])
        np.testing.assert_allclose(grid.z, [0.0])

    def test_arrays_are_read_only(self):
        grid = build_grid([-1, 1], [-1, 1], 0, resolution=4)

        with pytest.raises(ValueError):
            grid.xx[0, 0] = 5.0

    def test_as_tuple(self):
        grid = build_grid([-1, 1], [-1, 1], 0, resolution=4)
        xx, yy, zz, active = grid.as_tuple()

        assert xx is grid.xx
        assert active == (True, True, False)

    @pytest.mark.parametrize("resolution", [0, -3, 2.5, True])
    def test_invalid_resolution_raises(self, resolution):
        with pytest.raises(InvalidParameterError, match="resolution"):
            build_grid([-1, 1], 0, 0, resolution=resolution)


# =============================================================================
# Customized Grids
# =============================================================================


class TestCustomizedGrid:
    def test_explicit_arrays(self):
        """Explicit arrays are used point by point without expansion."""
        x = np.array([0.0, 0.5, 1.0, 1.5])
        y = np.array([1.0, 1.0, 2.0, 2.0])
        grid = build_grid(x, y, 0.0, resolution=300)

        assert grid.customized is True
        assert grid.shape == (4,)
        assert grid.active == (True, True, False)
        np.testing.assert_allclose(grid.xx, x)
        np.testing.assert_allclose(grid.zz, 0.0)
        assert grid.x is None

    def test_2d_explicit_arrays(self):
        xx, yy = np.meshgrid(np.linspace(0, 1, 5), np.linspace(0, 2, 3))
        grid = build_grid(xx, yy, 1.0)

        assert grid.shape == (3, 5)
        np.testing.assert_allclose(grid.yy, yy)

    def test_wrapped_pair_is_explicit(self):
        """ExplicitAxis keeps a two point array from becoming a range."""
        grid = build_grid(ExplicitAxis(np.array([0.0, 3.0])), 0, 0)

        assert grid.customized is True
        np.testing.assert_allclose(grid.xx, [0.0, 3.0])

    def test_shape_mismatch_raises(self):
        with pytest.raises(ShapeMismatchError):
            build_grid(np.zeros(4), np.zeros(5), 0)

    def test_shape_mismatch_is_spec_error(self):
        with pytest.raises(InvalidSpecError):
            build_grid(np.zeros((2, 3)), np.zeros((3, 2)), 0)

    def test_range_with_explicit_raises(self):
        """A [min, max] range cannot be combined with explicit arrays."""
        with pytest.raises(InvalidSpecError, match="range"):
            build_grid(np.linspace(0, 1, 5), [-1, 1], 0)
