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
Unit Tests for Matrix Zonotopes
===============================
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from ddreach.exceptions import DimensionMismatchError
from ddreach.sets.matrix_zonotope import MatrixZonotope, make_matrix_zonotope


class TestMakeMatrixZonotope:
    """Test construction and validation"""

    def test_basic_construction(self):
        """Test shape and generator count"""
        M = make_matrix_zonotope(np.zeros((2, 3)), [np.ones((2, 3)), 2 * np.ones((2, 3))])

        assert M.shape == (2, 3)
        assert M.n_generators == 2
        assert isinstance(M.generators, tuple)

    def test_no_generators(self):
        """Test a matrix zonotope without generators"""
        M = make_matrix_zonotope(np.ones((4, 2)))

        assert M.n_generators == 0
        assert M.generator_tensor().shape == (0, 4, 2)

    def test_generator_shape_mismatch_raises(self):
        """Test that generators must share the center's shape"""
        with pytest.raises(DimensionMismatchError):
            make_matrix_zonotope(np.zeros((2, 3)), [np.zeros((3, 2))])

    def test_center_must_be_matrix(self):
        """Test that a vector center is rejected"""
        with pytest.raises(DimensionMismatchError):
            make_matrix_zonotope(np.zeros(3))

    def test_generators_accept_any_iterable(self):
        """Test that a generator expression is consumed in order"""
        M = make_matrix_zonotope(np.zeros((1, 2)), (k * np.ones((1, 2)) for k in range(3)))

        assert M.n_generators == 3
        assert_array_equal(M.generators[2], [[2.0, 2.0]])


class TestMatrixZonotopeBehavior:
    """Test immutability, equality and stacking"""

    def test_arrays_are_read_only(self):
        """Test center and generators cannot be written"""
        M = make_matrix_zonotope(np.zeros((2, 2)), [np.eye(2)])

        with pytest.raises(ValueError):
            M.center[0, 0] = 1.0
        with pytest.raises(ValueError):
            M.generators[0][0, 0] = 1.0

    def test_generator_tensor_order(self):
        """Test stacking keeps generator order"""
        G1 = np.array([[1.0, 0.0]])
        G2 = np.array([[0.0, 1.0]])
        M = make_matrix_zonotope(np.zeros((1, 2)), [G1, G2])

        tensor = M.generator_tensor()
        assert tensor.shape == (2, 1, 2)
        assert_array_equal(tensor[0], G1)
        assert_array_equal(tensor[1], G2)

    def test_equality_depends_on_order(self):
        """Test equality compares generators position by position"""
        G1 = np.array([[1.0, 0.0]])
        G2 = np.array([[0.0, 1.0]])
        a = make_matrix_zonotope(np.zeros((1, 2)), [G1, G2])
        b = MatrixZonotope(np.zeros((1, 2)), (G1, G2))
        c = make_matrix_zonotope(np.zeros((1, 2)), [G2, G1])

        assert a == b
        assert a != c

    def test_repr(self):
        """Test repr mentions shape and generator count"""
        M = make_matrix_zonotope(np.zeros((2, 3)))
        assert repr(M) == "MatrixZonotope(shape=(2, 3), n_generators=0)"
