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
Unit Tests for SymPy to NumPy Code Generation
=============================================

Tests generate_numpy_function and generate_dynamics_function:

- Return type convention (flat float arrays)
- Min/Max handling
- Vector-argument unpacking and length checks
"""

import numpy as np
import pytest
import sympy as sp
from numpy.testing import assert_allclose

from ddreach.exceptions import DimensionMismatchError
from ddreach.systems.base.codegen_utils import (
    generate_dynamics_function,
    generate_numpy_function,
)


@pytest.fixture
def xyz():
    return sp.symbols("x y z", real=True)


class TestGenerateNumpyFunction:
    """Test compilation of scalar, list and matrix expressions"""

    def test_scalar_expression_returns_shape_one(self, xyz):
        """Test a scalar expression gives a length-1 array"""
        x, _, _ = xyz
        f = generate_numpy_function(x**2, [x])

        result = f(3.0)

        assert isinstance(result, np.ndarray)
        assert result.shape == (1,)
        assert_allclose(result, [9.0])

    def test_list_expression(self, xyz):
        x, y, _ = xyz
        f = generate_numpy_function([x + y, x * y], [x, y])

        assert_allclose(f(2.0, 3.0), [5.0, 6.0])

    def test_matrix_expression_is_flattened(self, xyz):
        """Test a column Matrix comes back as a flat vector"""
        x, y, _ = xyz
        f = generate_numpy_function(sp.Matrix([x, sp.sin(y), x - y]), [x, y])

        result = f(1.0, 0.0)

        assert result.shape == (3,)
        assert_allclose(result, [1.0, 0.0, 1.0])

    def test_result_dtype_is_float(self, xyz):
        x, _, _ = xyz
        f = generate_numpy_function([2 * x], [x])

        assert f(1).dtype == np.float64

    def test_max_clips(self, xyz):
        """Test Max(x, 0) evaluates elementwise as a clip"""
        x, _, _ = xyz
        f = generate_numpy_function(sp.sqrt(sp.Max(x, 0)), [x])

        assert_allclose(f(-4.0), [0.0])
        assert_allclose(f(4.0), [2.0])

    def test_min_of_three(self, xyz):
        x, y, z = xyz
        f = generate_numpy_function(sp.Min(x, y, z), [x, y, z])

        assert_allclose(f(3.0, -1.0, 2.0), [-1.0])


class TestGenerateDynamicsFunction:
    """Test the vector-argument wrapper"""

    @pytest.fixture
    def oscillator(self):
        x0, x1, u0 = sp.symbols("x0 x1 u0", real=True)
        return generate_dynamics_function([x1, -x0 + u0], [x0, x1], [u0])

    def test_evaluation(self, oscillator):
        """Test states and inputs are unpacked in order"""
        assert_allclose(oscillator(np.array([1.0, 2.0]), np.array([0.5])), [2.0, -0.5])

    def test_accepts_lists_and_columns(self, oscillator):
        """Test inputs are flattened before unpacking"""
        assert_allclose(oscillator([[1.0], [2.0]], [0.5]), [2.0, -0.5])

    def test_wrong_state_length_raises(self, oscillator):
        with pytest.raises(DimensionMismatchError):
            oscillator(np.zeros(3), np.zeros(1))

    def test_wrong_input_length_raises(self, oscillator):
        with pytest.raises(DimensionMismatchError):
            oscillator(np.zeros(2), np.zeros(2))

    def test_unused_inputs_are_accepted(self):
        """Test trailing input symbols may not appear in the expression"""
        x0 = sp.Symbol("x0", real=True)
        u = sp.symbols("u0:3", real=True)
        f = generate_dynamics_function([x0 + u[0]], [x0], u)

        assert_allclose(f([1.0], [1.0, 100.0, 100.0]), [2.0])
