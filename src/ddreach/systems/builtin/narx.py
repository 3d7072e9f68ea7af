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
Small two-output nonlinear maps used as identification benchmarks.

Each factory captures its parameter vector and returns a plain NumPy
closure. ARX maps take the stacked histories

    y_hist = [y(k-1); ...; y(k-n_p)],   u_hist = [u(k); u(k-1); ...; u(k-n_p)]

and return y(k); state-space maps take (x, u) and return x[k+1]. The
"fully observable" benchmarks share one formula between an ARX and a
state-space rendering (y = x).
"""

import numpy as np

from ddreach.systems.base.system_model import as_parameter_vector
from ddreach.types.core import ArrayLike, ARXFunction, DynamicsFunction

# ============================================================================
# ARX maps
# ============================================================================


def kroll_narx(params: ArrayLike) -> ARXFunction:
    """
    Rational NARX benchmark with n_p = 2, after Kroll & Schulte (2014).

        y₀(k) = y₀(k-1) / (1 + y₁(k-1)²) + p₀ u₀(k-1)
        y₁(k) = y₀(k-1) y₁(k-1) / (1 + y₁(k-1)²) + p₁ u₁(k-2)

    Expects u_hist of length 6 (two inputs, three samples).
    """
    p = as_parameter_vector(params, 2, "NARX parameters")

    def f(y_hist, u_hist):
        y0, y1 = y_hist[0], y_hist[1]
        denominator = 1.0 + y1**2
        return np.array(
            [
                y0 / denominator + p[0] * u_hist[2],
                y0 * y1 / denominator + p[1] * u_hist[5],
            ]
        )

    return f


def square_narx(params: ArrayLike) -> ARXFunction:
    """
    Quadratic NARX benchmark with n_p = 1.

        y₀(k) = y₀(k-1)² + p₀ u₀(k-1)
        y₁(k) = y₁(k-1)² + p₁ u₁(k)
    """
    p = as_parameter_vector(params, 2, "Square parameters")

    def f(y_hist, u_hist):
        return np.array([y_hist[0] ** 2 + p[0] * u_hist[2], y_hist[1] ** 2 + p[1] * u_hist[1]])

    return f


def example_narx(params: ArrayLike) -> ARXFunction:
    """y(k) = [p₀ tanh(y₀(k-1)) + u₀(k), p₁ sin(y₁(k-1)) + u₁(k)]"""
    p = as_parameter_vector(params, 2, "example NARX parameters")

    def f(y_hist, u_hist):
        return np.array(
            [p[0] * np.tanh(y_hist[0]) + u_hist[0], p[1] * np.sin(y_hist[1]) + u_hist[1]]
        )

    return f


def _lipschitz_map(p: np.ndarray, z: np.ndarray, u: np.ndarray) -> np.ndarray:
    return np.array(
        [
            p[0] * np.tanh(z[0]) + 0.1 * np.log(1.0 + np.abs(z[1])) + u[0],
            p[1] * np.tanh(z[1]) + 0.05 * z[0] + u[1],
        ]
    )


def lipschitz_narx(params: ArrayLike) -> ARXFunction:
    """
    Globally Lipschitz NARX benchmark with n_p = 1.

        y₀(k) = p₀ tanh(y₀) + 0.1 log(1 + |y₁|) + u₀(k)
        y₁(k) = p₁ tanh(y₁) + 0.05 y₀ + u₁(k)

    with y = y(k-1) on the right-hand side.
    """
    p = as_parameter_vector(params, 2, "Lipschitz NARX parameters")

    def f(y_hist, u_hist):
        return _lipschitz_map(p, y_hist, u_hist)

    return f


# ============================================================================
# State-space maps
# ============================================================================


def polynomial_dynamics(params: ArrayLike) -> DynamicsFunction:
    """x[k+1] = [p₀ x₀² + u₀, p₁ x₁² + u₁]"""
    p = as_parameter_vector(params, 2, "polynomial parameters")

    def f(x, u):
        return np.array([p[0] * x[0] ** 2 + u[0], p[1] * x[1] ** 2 + u[1]])

    return f


def lipschitz_dynamics(params: ArrayLike) -> DynamicsFunction:
    """State-space rendering of lipschitz_narx: x[k+1] = f(x[k], u[k])."""
    p = as_parameter_vector(params, 2, "Lipschitz parameters")

    def f(x, u):
        return _lipschitz_map(p, x, u)

    return f


def linear_arx_map(A: ArrayLike, B: ArrayLike, ny: int) -> ARXFunction:
    """
    Linear map written as a nonlinear ARX model with n_p = 1.

        y(k) = A y(k-1) + B u(k)

    Used to check that nonlinear ARX tooling reproduces a known linear
    system.
    """
    A = np.array(A, dtype=float)
    B = np.array(B, dtype=float).reshape(ny, -1)
    nu = B.shape[1]

    def f(y_hist, u_hist):
        return A @ y_hist[:ny] + B @ u_hist[:nu]

    return f


__all__ = [
    "kroll_narx",
    "square_narx",
    "example_narx",
    "lipschitz_narx",
    "polynomial_dynamics",
    "lipschitz_dynamics",
    "linear_arx_map",
]
