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
Lorenz benchmark dynamics, Euler-discretized with additive parameter noise.

Physical System:
---------------
A simplified model of atmospheric convection (Lorenz, 1963):

    ẋ₀ = σ (x₁ - x₀)
    ẋ₁ = ρ x₀ - x₁ - x₀ x₂
    ẋ₂ = x₀ x₁ - β x₂

In the identification benchmarks the inputs act as perturbations of the
parameters rather than as forces, so each parameter is replaced by
(p_i + u_i):

    ẋ₀ = (σ + u₀)(x₁ - x₀)
    ẋ₁ = (ρ + u₁) x₀ - x₁ - x₀ x₂
    ẋ₂ = x₀ x₁ - (β + u₂) x₂

and one step of explicit Euler gives the discrete map

    x[k+1] = x[k] + Δt · ẋ(x[k], u[k])

The planar variant keeps the first two coordinates and drops the
vertical temperature; its second equation reads

    ẋ₁ = (ρ + u₁) x₀ - x₁ - x₀

with the product term x₀ x₂ replaced by the linear term x₀.

Default Parameters:
------------------
p = [σ, ρ, β] = [10, 28, 8/3] (chaotic regime), Δt = 0.01
"""

import numpy as np
import sympy as sp

from ddreach.systems.base.codegen_utils import generate_dynamics_function
from ddreach.systems.base.system_model import as_parameter_vector
from ddreach.types.core import ArrayLike, DynamicsFunction

LORENZ_PARAMETERS = np.array([10.0, 28.0, 8.0 / 3.0])
LORENZ_2D_PARAMETERS = np.array([10.0, 28.0])
LORENZ_PARAMETERS.setflags(write=False)
LORENZ_2D_PARAMETERS.setflags(write=False)


def lorenz_dynamics(params: ArrayLike, dt: float) -> DynamicsFunction:
    """
    Build the discrete Lorenz map x[k+1] = f(x[k], u[k]).

    Args:
        params: [σ, ρ, β]
        dt: Euler step

    Returns:
        f(x, u) with x ∈ ℝ³, u ∈ ℝ³

    Examples:
        >>> f = lorenz_dynamics(LORENZ_PARAMETERS, 0.01)
        >>> f(np.array([1.0, 1.0, 1.0]), np.zeros(3))
        array([1.        , 1.26      , 0.98333333])
    """
    sigma, rho, beta = map(float, as_parameter_vector(params, 3, "Lorenz parameters"))

    x0, x1, x2 = sp.symbols("x0 x1 x2", real=True)
    u0, u1, u2 = sp.symbols("u0 u1 u2", real=True)

    x0_dot = (sigma + u0) * (x1 - x0)
    x1_dot = (rho + u1) * x0 - x1 - x0 * x2
    x2_dot = x0 * x1 - (beta + u2) * x2

    x_next = [x0 + dt * x0_dot, x1 + dt * x1_dot, x2 + dt * x2_dot]
    return generate_dynamics_function(x_next, [x0, x1, x2], [u0, u1, u2])


def lorenz_2d_dynamics(params: ArrayLike, dt: float) -> DynamicsFunction:
    """
    Build the planar Lorenz map on (x₀, x₁).

    Args:
        params: [σ, ρ]
        dt: Euler step

    Returns:
        f(x, u) with x ∈ ℝ², u ∈ ℝ²
    """
    sigma, rho = map(float, as_parameter_vector(params, 2, "Lorenz 2D parameters"))

    x0, x1 = sp.symbols("x0 x1", real=True)
    u0, u1 = sp.symbols("u0 u1", real=True)

    x0_dot = (sigma + u0) * (x1 - x0)
    x1_dot = (rho + u1) * x0 - x1 - x0

    x_next = [x0 + dt * x0_dot, x1 + dt * x1_dot]
    return generate_dynamics_function(x_next, [x0, x1], [u0, u1])


__all__ = [
    "LORENZ_PARAMETERS",
    "LORENZ_2D_PARAMETERS",
    "lorenz_dynamics",
    "lorenz_2d_dynamics",
]
