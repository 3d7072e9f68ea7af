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
Trajectory-level Noise Lifting
==============================

Data-driven identification stacks T consecutive samples into data matrices
of shape n × T. The disturbance acting on such a data matrix is not a single
draw from the per-step noise set W but T independent draws, one per column.
This module builds the matrix zonotope describing that set.

Mathematical Background
----------------------
Let W = ⟨c_W, [g₁ ... g_g]⟩ ⊂ ℝⁿ be the per-step noise zonotope. The set of
noise sequences (w₀, ..., w_{T-1}) with every wₜ ∈ W - c_W, stacked as
columns, is the matrix zonotope

    M_W = {0 + Σᵢ Σₜ βᵢₜ Gᵢₜ : βᵢₜ ∈ [-1, 1]}

where Gᵢₜ ∈ ℝⁿˣᵀ is zero except column t, which equals gᵢ. The g·T
generators give every (direction, time slot) pair its own coefficient:

- Sharing one coefficient per direction across all slots would force the
  same noise realization at every step and under-approximate M_W.
- One dense generator per slot would not reproduce the shape of W inside
  a column.

The center of W is not lifted. Callers with a non-centered W track the
offset c_W · 1ᵀ separately.

Examples
--------
>>> W = make_zonotope(np.zeros(2), np.eye(2))
>>> M = lift_noise(W, horizon=3)
>>> M.shape, M.n_generators
((2, 3), 6)
>>> M.generators[0]
array([[1., 0., 0.],
       [0., 0., 0.]])
"""

import logging
import operator
from typing import Optional

import numpy as np

from ddreach.exceptions import DimensionMismatchError, InvalidTrajectoryLengthError
from ddreach.sets.matrix_zonotope import MatrixZonotope
from ddreach.sets.zonotope import Zonotope
from ddreach.types.core import IntegerLike

logger = logging.getLogger(__name__)


def lift_noise(
    W: Zonotope,
    horizon: IntegerLike,
    state_dim: Optional[IntegerLike] = None,
) -> MatrixZonotope:
    """
    Lift a per-step noise zonotope to a matrix zonotope over a horizon.

    Generators are emitted generator-major, slot-minor: all T slots of
    W's first generator, then all slots of the second one, and so on.

    Args:
        W: Per-step noise zonotope (n dimensions, g generators)
        horizon: Number of time steps T (≥ 0)
        state_dim: Expected noise dimension; checked against W.dim if given

    Returns:
        MatrixZonotope with an n × T zero center and g·T generators

    Raises:
        InvalidTrajectoryLengthError: If horizon < 0
        DimensionMismatchError: If state_dim is given and differs from W.dim
        TypeError: If horizon is not an integer

    Examples:
        >>> lift_noise(make_zonotope(np.zeros(2), np.eye(2)), 0).shape
        (2, 0)
        >>> lift_noise(make_zonotope(np.zeros(3)), 5).n_generators
        0
    """
    T = operator.index(horizon)
    if T < 0:
        raise InvalidTrajectoryLengthError(f"Trajectory length must be non-negative, got {T}")

    n = W.dim
    if state_dim is not None and operator.index(state_dim) != n:
        raise DimensionMismatchError(
            f"Noise zonotope has dimension {n} but the state dimension is {state_dim}"
        )

    if np.any(W.center != 0):
        logger.warning(
            "Lifting a noise zonotope with non-zero center %s; the center is not "
            "part of the lifted set and must be tracked separately",
            W.center,
        )

    generators = []
    for i in range(W.n_generators):
        vec = W.generators[:, i]
        for t in range(T):
            G = np.zeros((n, T))
            G[:, t] = vec
            generators.append(G)

    logger.debug(
        "Lifted %d generator(s) over %d step(s) into %d matrix generator(s) of shape %s",
        W.n_generators,
        T,
        len(generators),
        (n, T),
    )
    return MatrixZonotope(np.zeros((n, T)), tuple(generators))


__all__ = ["lift_noise"]
