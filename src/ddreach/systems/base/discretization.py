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
Continuous-to-discrete conversion of linear systems.

Several catalog fixtures are specified as continuous-time state-space
models and sampled with a zero-order hold before use.

**Discretization Methods:**

1. **Euler (Forward Difference)** - First order approximation
   Ad = I + dt * Ac
   Bd = dt * Bc

2. **Zero-Order Hold (exact)** - Exact for piecewise-constant inputs
   Ad = expm(Ac * dt)
   Bd = ∫[0,dt] expm(Ac*τ) dτ * Bc

   Both blocks come from one exponential of the augmented matrix

       expm([[Ac, Bc],      [[Ad, Bd],
             [0,  0 ]] dt) =  [0,  I ]]

   which stays valid when Ac is singular (e.g. integrator chains).
"""

from typing import Tuple

import numpy as np
from scipy.linalg import expm

from ddreach.exceptions import DimensionMismatchError
from ddreach.types.core import ArrayLike, InputMatrix, StateMatrix


def discretize_linear(
    Ac: ArrayLike,
    Bc: ArrayLike,
    dt: float,
    method: str = "zoh",
) -> Tuple[StateMatrix, InputMatrix]:
    """
    Discretize ẋ = Ac x + Bc u with sampling period dt.

    Output and feedthrough matrices are unchanged by sampling, so only
    (Ad, Bd) are returned.

    Args:
        Ac: Continuous state matrix (nx, nx)
        Bc: Continuous input matrix (nx, nu)
        dt: Sampling period
        method: 'zoh' (exact, default) or 'euler'

    Returns:
        (Ad, Bd)

    Raises:
        DimensionMismatchError: If the matrices do not fit together
        ValueError: For an unknown method or non-positive dt

    Examples:
        >>> Ad, Bd = discretize_linear([[0.0, 1.0], [0.0, 0.0]], [[0.0], [1.0]], 0.1)
        >>> np.allclose(Bd, [[0.005], [0.1]])
        True
    """
    Ac = np.atleast_2d(np.asarray(Ac, dtype=float))
    Bc = np.atleast_2d(np.asarray(Bc, dtype=float))
    nx = Ac.shape[0]
    if Ac.shape != (nx, nx):
        raise DimensionMismatchError(f"Ac must be square, got shape {Ac.shape}")
    if Bc.shape[0] != nx:
        raise DimensionMismatchError(f"Bc must have {nx} rows, got shape {Bc.shape}")
    if dt <= 0:
        raise ValueError(f"Sampling period must be positive, got {dt}")
    nu = Bc.shape[1]

    if method == "euler":
        return np.eye(nx) + dt * Ac, dt * Bc
    if method == "zoh":
        M = np.zeros((nx + nu, nx + nu))
        M[:nx, :nx] = Ac
        M[:nx, nx:] = Bc
        Phi = expm(M * dt)
        return Phi[:nx, :nx], Phi[:nx, nx:]

    raise ValueError(f"Unknown discretization method '{method}'. Choose from: 'zoh', 'euler'")


__all__ = ["discretize_linear"]
