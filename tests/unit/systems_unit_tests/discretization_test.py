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
Unit Tests for Linear Discretization
====================================

Tests zero-order-hold and Euler sampling against closed-form results.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from ddreach.exceptions import DimensionMismatchError
from ddreach.systems.base.discretization import discretize_linear

DOUBLE_INTEGRATOR_A = [[0.0, 1.0], [0.0, 0.0]]
DOUBLE_INTEGRATOR_B = [[0.0], [1.0]]


class TestZeroOrderHold:
    """Test the exact (augmented exponential) method"""

    @pytest.mark.parametrize("dt", [0.01, 0.1, 0.5])
    def test_double_integrator(self, dt):
        """Test the singular Ac case against the closed form"""
        Ad, Bd = discretize_linear(DOUBLE_INTEGRATOR_A, DOUBLE_INTEGRATOR_B, dt)

        assert_allclose(Ad, [[1.0, dt], [0.0, 1.0]], atol=1e-12)
        assert_allclose(Bd, [[dt**2 / 2], [dt]], atol=1e-12)

    def test_scalar_decay(self):
        """Test ẋ = -x + u: Ad = e^(-dt), Bd = 1 - e^(-dt)"""
        Ad, Bd = discretize_linear([[-1.0]], [[1.0]], 0.5)

        assert_allclose(Ad, [[np.exp(-0.5)]])
        assert_allclose(Bd, [[1.0 - np.exp(-0.5)]])

    def test_output_shapes(self):
        Ad, Bd = discretize_linear(-np.eye(3), np.ones((3, 2)), 0.1)

        assert Ad.shape == (3, 3)
        assert Bd.shape == (3, 2)

    def test_zero_dynamics_is_identity(self):
        Ad, Bd = discretize_linear(np.zeros((2, 2)), np.eye(2), 0.2)

        assert_allclose(Ad, np.eye(2))
        assert_allclose(Bd, 0.2 * np.eye(2))


class TestEuler:
    """Test forward-difference sampling"""

    def test_euler_matrices(self):
        """Test Ad = I + dt Ac, Bd = dt Bc"""
        Ad, Bd = discretize_linear(DOUBLE_INTEGRATOR_A, DOUBLE_INTEGRATOR_B, 0.1, method="euler")

        assert_allclose(Ad, [[1.0, 0.1], [0.0, 1.0]])
        assert_allclose(Bd, [[0.0], [0.1]])


class TestValidation:
    """Test argument checks"""

    def test_non_square_raises(self):
        with pytest.raises(DimensionMismatchError):
            discretize_linear(np.ones((2, 3)), np.ones((2, 1)), 0.1)

    def test_row_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            discretize_linear(np.eye(2), np.ones((3, 1)), 0.1)

    @pytest.mark.parametrize("dt", [0.0, -1.0])
    def test_non_positive_dt_raises(self, dt):
        with pytest.raises(ValueError, match="positive"):
            discretize_linear(np.eye(2), np.ones((2, 1)), dt)

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError, match="Unknown discretization method"):
            discretize_linear(np.eye(2), np.ones((2, 1)), 0.1, method="tustin")
