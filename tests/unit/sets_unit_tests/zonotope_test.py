# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Unit Tests for Zonotopes and Cartesian Products
===============================================

Covers:
- make_zonotope normalization of centers and generators
- Shape validation and immutability
- Cartesian products (dimensions, block structure, associativity)
- Projection and interval hull helpers
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from ddreach.exceptions import DimensionMismatchError
from ddreach.sets.zonotope import Zonotope, cartesian_product, make_zonotope

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def process_noise():
    """W of the planar chain of integrators."""
    return make_zonotope([0.1, 0.1], 0.2 * np.eye(2))


@pytest.fixture
def measurement_noise():
    """V of the planar chain of integrators."""
    return make_zonotope([-0.05, -0.05], 0.1 * np.hstack([np.eye(2), np.ones((2, 1))]))


# ============================================================================
# Construction
# ============================================================================


class TestMakeZonotope:
    """Test normalization rules of make_zonotope"""

    def test_vector_center_and_matrix_generators(self):
        """Test the canonical (n,) center and (n, g) generators"""
        Z = make_zonotope([1.0, 2.0], [[1.0, 0.0, 0.5], [0.0, 1.0, 0.5]])

        assert Z.dim == 2
        assert Z.n_generators == 3
        assert_array_equal(Z.center, [1.0, 2.0])

    def test_no_generators_is_point(self):
        """Test that omitting generators gives a point"""
        Z = make_zonotope(np.zeros(4))

        assert Z.is_point
        assert Z.generators.shape == (4, 0)

    def test_empty_generators_is_point(self):
        """Test that an empty generator list gives a point"""
        Z = make_zonotope([1.0, 2.0], [])

        assert Z.is_point
        assert Z.generators.shape == (2, 0)

    def test_scalar_center_and_generator(self):
        """Test one-dimensional sets given as scalars"""
        Z = make_zonotope(10, 0.25)

        assert Z.dim == 1
        assert_array_equal(Z.generators, [[0.25]])

    def test_column_center_is_flattened(self):
        """Test that an (n, 1) center is accepted"""
        Z = make_zonotope(np.ones((3, 1)), np.eye(3))

        assert Z.center.shape == (3,)

    def test_1d_generators_single_column(self):
        """Test that a 1-D generator array is one generator for n > 1"""
        Z = make_zonotope([0.0, 0.0], [1.0, 2.0])

        assert Z.generators.shape == (2, 1)

    def test_1d_generators_row_for_scalar_set(self):
        """Test that a 1-D generator array is a row of generators for n == 1"""
        Z = make_zonotope([0.0], [1.0, 2.0, 3.0])

        assert Z.generators.shape == (1, 3)

    def test_zero_dimensional_zonotope(self):
        """Test the empty-space zonotope used as a placeholder"""
        Z = make_zonotope(np.zeros(0))

        assert Z.dim == 0
        assert Z.n_generators == 0

    def test_row_mismatch_raises(self):
        """Test that rows(G) != len(c) is rejected"""
        with pytest.raises(DimensionMismatchError):
            make_zonotope([1.0, 2.0], np.eye(3))

    def test_empty_generators_with_wrong_rows_raise(self):
        """Test that an empty matrix with the wrong row count is rejected"""
        with pytest.raises(DimensionMismatchError):
            make_zonotope([1.0, 2.0], np.zeros((3, 0)))

    @pytest.mark.parametrize("shape", [(0, 3), (2, 0), (0, 1)])
    def test_empty_generators_row_count_checked(self, shape):
        """Test that an empty generator matrix must still have one row per center entry"""
        with pytest.raises(DimensionMismatchError):
            make_zonotope(np.zeros(4), np.zeros(shape))

    @pytest.mark.parametrize("generators", [[], np.zeros((0, 0)), np.zeros((4, 0))])
    def test_empty_generators_accepted(self, generators):
        Z = make_zonotope(np.zeros(4), generators)

        assert Z.generators.shape == (4, 0)
        assert Z.is_point

    def test_matrix_center_raises(self):
        """Test that a genuine matrix is not accepted as a center"""
        with pytest.raises(DimensionMismatchError):
            make_zonotope(np.ones((2, 2)))

    def test_dataclass_validates_shapes(self):
        """Test that the constructor itself checks shapes"""
        with pytest.raises(DimensionMismatchError):
            Zonotope(np.zeros(2), np.zeros((3, 1)))
        with pytest.raises(DimensionMismatchError):
            Zonotope(np.zeros(2), np.zeros(2))


class TestImmutability:
    """Test that zonotopes do not share or expose mutable state"""

    def test_arrays_are_read_only(self):
        """Test that center and generators cannot be written"""
        Z = make_zonotope([1.0, 2.0], np.eye(2))

        with pytest.raises(ValueError):
            Z.center[0] = 5.0
        with pytest.raises(ValueError):
            Z.generators[0, 0] = 5.0

    def test_input_arrays_are_copied(self):
        """Test that mutating the inputs does not change the zonotope"""
        c = np.array([1.0, 2.0])
        G = np.eye(2)
        Z = make_zonotope(c, G)

        c[0] = 100.0
        G[0, 0] = 100.0

        assert_array_equal(Z.center, [1.0, 2.0])
        assert_array_equal(Z.generators, np.eye(2))

    def test_equality_by_value(self):
        """Test value equality on center and generators"""
        a = make_zonotope([1.0, 2.0], np.eye(2))
        b = make_zonotope(np.array([1.0, 2.0]), np.eye(2).tolist())

        assert a == b
        assert a != make_zonotope([1.0, 2.0], 2 * np.eye(2))
        assert a != make_zonotope([1.0, 2.0])


# ============================================================================
# Cartesian Product
# ============================================================================


class TestCartesianProduct:
    """Test cartesian_product"""

    def test_dimensions_and_generator_counts(self, process_noise, measurement_noise):
        """Test dim and generator count add up"""
        U = cartesian_product(process_noise, measurement_noise)

        assert U.dim == 4
        assert U.n_generators == 5

    def test_center_concatenation(self, process_noise, measurement_noise):
        """Test the center is [c_A; c_B]"""
        U = cartesian_product(process_noise, measurement_noise)

        assert_allclose(U.center, [0.1, 0.1, -0.05, -0.05])

    def test_block_diagonal_generators(self, process_noise, measurement_noise):
        """Test the generator matrix is blockdiag(G_A, G_B)"""
        U = cartesian_product(process_noise, measurement_noise)

        assert_allclose(U.generators[:2, :2], 0.2 * np.eye(2))
        assert_allclose(U.generators[2:, 2:], measurement_noise.generators)
        assert_array_equal(U.generators[:2, 2:], np.zeros((2, 3)))
        assert_array_equal(U.generators[2:, :2], np.zeros((2, 2)))

    def test_projection_recovers_factor(self, process_noise, measurement_noise):
        """Test projecting onto the first block recovers A up to zero generators"""
        U = cartesian_product(process_noise, measurement_noise)
        first = U.project(range(2))

        assert_allclose(first.center, process_noise.center)
        assert_allclose(first.generators[:, :2], process_noise.generators)
        assert not np.any(first.generators[:, 2:])

    def test_operand_order_fixes_coordinates(self, process_noise, measurement_noise):
        """Test B × A puts B's coordinates first"""
        U = cartesian_product(measurement_noise, process_noise)

        assert_allclose(U.center, [-0.05, -0.05, 0.1, 0.1])

    def test_associativity(self):
        """Test (A × B) × C == A × (B × C)"""
        A = make_zonotope([1.0], [[1.0, 2.0]])
        B = make_zonotope([2.0, 3.0], np.eye(2))
        C = make_zonotope([4.0], 0.5)

        assert cartesian_product(cartesian_product(A, B), C) == cartesian_product(
            A, cartesian_product(B, C)
        )

    def test_product_with_empty_zonotope(self, process_noise):
        """Test that a zero-dimensional factor leaves the set unchanged"""
        empty = make_zonotope(np.zeros(0))

        assert cartesian_product(process_noise, empty) == process_noise

    def test_product_of_points(self):
        """Test that two points give a point"""
        U = cartesian_product(make_zonotope([1.0]), make_zonotope([2.0, 3.0]))

        assert U.is_point
        assert_array_equal(U.center, [1.0, 2.0, 3.0])


# ============================================================================
# Helpers
# ============================================================================


class TestHelpers:
    """Test projection and interval hull"""

    def test_interval_bounds(self):
        """Test c -/+ sum |G|"""
        Z = make_zonotope([0.0, 1.0], [[1.0, -2.0], [0.5, 0.0]])
        lower, upper = Z.interval_bounds()

        assert_allclose(lower, [-3.0, 0.5])
        assert_allclose(upper, [3.0, 1.5])

    def test_project_out_of_range_raises(self):
        """Test projection indices are validated"""
        Z = make_zonotope([0.0, 1.0], np.eye(2))

        with pytest.raises(DimensionMismatchError):
            Z.project([2])

    def test_repr(self):
        """Test repr mentions dimension and generator count"""
        assert repr(make_zonotope([0.0, 1.0], np.eye(2))) == "Zonotope(dim=2, n_generators=2)"
