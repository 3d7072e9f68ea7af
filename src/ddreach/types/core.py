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
Core Types - Fundamental Building Blocks

Defines the basic types used throughout the package:
- Semantic vector types (state, control, output, parameters)
- Matrix types (dynamics, input, output, feedthrough)
- Set-representation types (centers and generators of zonotopes)
- Function signatures for state-space and autoregressive dynamics
- The uncertainty-mode literal and the injected random source protocol

These are the foundation upon which the set primitives, system models and
the system catalog build.

Design Philosophy
----------------
- **Semantic Clarity**: Names convey mathematical meaning
- **NumPy First**: All fixtures are plain float64 NumPy arrays
- **Composition Ready**: Types compose into higher-level structures

Usage
-----
>>> from ddreach.types.core import (
...     StateVector,
...     ControlVector,
...     GeneratorMatrix,
... )
>>>
>>> def shift(x: StateVector, u: ControlVector) -> StateVector:
...     return x + u
"""

from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from typing_extensions import Literal, Protocol

# ============================================================================
# Basic Array Types
# ============================================================================

ArrayLike = Union[np.ndarray, Sequence[float], float]
"""
Anything NumPy can turn into a float array.

Set and model constructors accept ArrayLike and normalize to np.ndarray.

Examples
--------
>>> center: ArrayLike = [0.1, 0.1]
>>> center: ArrayLike = np.zeros(2)
>>> center: ArrayLike = 10.0   # 1-dimensional set
"""

ScalarLike = Union[float, int, np.number]
"""
Scalar value.

Examples
--------
>>> dt: ScalarLike = 0.01
"""

IntegerLike = Union[int, np.integer]
"""
Integer value (for dimensions, horizons, history lengths).

Examples
--------
>>> horizon: IntegerLike = 10
"""


# ============================================================================
# Vector Types - Semantic Naming by Role
# ============================================================================

StateVector = np.ndarray
"""
State vector x ∈ ℝⁿˣ.

For autoregressive models the "state" is the stacked output history
[y(k-1); ...; y(k-n_p)] ∈ ℝⁿʸ·ⁿᵖ.

Examples
--------
>>> x: StateVector = np.array([1.2, 0.5, 0.0, 0.0, 0.0, 0.0])
"""

ControlVector = np.ndarray
"""
Input vector u ∈ ℝⁿᵘ.

In the catalog the input collects every exogenous signal of a model:
control inputs, process noise and measurement noise. For models whose
input set is a Cartesian product W × V, the process-noise coordinates come
first, followed by the measurement-noise coordinates.

Examples
--------
>>> u: ControlVector = np.array([0.1, 0.1, -0.05, -0.05])
"""

OutputVector = np.ndarray
"""
Output/measurement vector y ∈ ℝⁿʸ.

Examples
--------
>>> y: OutputVector = np.array([1.0, 0.0])
"""

ParameterVector = np.ndarray
"""
Model parameter vector p.

Catalog entries with an identifiable parameter vector return it as the
ground truth p_true; callers may pass a perturbed vector to rebuild the
dynamics.

Examples
--------
>>> p_true: ParameterVector = np.array([10.0, 28.0, 8.0 / 3.0])
"""

HistoryVector = np.ndarray
"""
Stacked history used by ARX/NARX models.

Output history (the ARX state), most recent first:
    [y(k-1); y(k-2); ...; y(k-n_p)] ∈ ℝⁿʸ·ⁿᵖ

Input history, current input first:
    [u(k); u(k-1); ...; u(k-n_p)] ∈ ℝⁿᵘ·⁽ⁿᵖ⁺¹⁾
"""


# ============================================================================
# Matrix Types
# ============================================================================

StateMatrix = np.ndarray
"""State matrix A ∈ ℝⁿˣˣⁿˣ of x[k+1] = A x[k] + B u[k]."""

InputMatrix = np.ndarray
"""Input matrix B ∈ ℝⁿˣˣⁿᵘ."""

OutputMatrix = np.ndarray
"""Output matrix C ∈ ℝⁿʸˣⁿˣ of y[k] = C x[k] + D u[k]."""

FeedthroughMatrix = np.ndarray
"""Feedthrough matrix D ∈ ℝⁿʸˣⁿᵘ."""

CoefficientSequence = Sequence[np.ndarray]
"""
Lag-indexed ARX coefficients.

A_bar[i] multiplies y(k-1-i) and B_bar[i] multiplies u(k-i):

    y(k) = Σᵢ A_bar[i] y(k-1-i) + Σᵢ B_bar[i] u(k-i)

Examples
--------
>>> A_bar = [2.0 * np.eye(2), -1.0 * np.eye(2)]   # n_p = 2
>>> B_bar = [B0, B1, B2]                           # n_p + 1 entries
"""


# ============================================================================
# Set Representation Types
# ============================================================================

CenterVector = np.ndarray
"""
Zonotope center c ∈ ℝⁿ.

A zero-length center describes the zero-dimensional zonotope, used as
an explicit "no measurement noise" placeholder.
"""

GeneratorMatrix = np.ndarray
"""
Zonotope generator matrix G ∈ ℝⁿˣᵍ (one generator per column).

g = 0 is allowed and makes the zonotope a single point.

Examples
--------
>>> G: GeneratorMatrix = 0.2 * np.eye(2)
>>> G_point: GeneratorMatrix = np.zeros((4, 0))
"""

CenterMatrix = np.ndarray
"""Matrix zonotope center C ∈ ℝⁿˣᵀ."""

GeneratorList = Tuple[np.ndarray, ...]
"""Ordered generator matrices G₁, ..., G_g of a matrix zonotope, each ∈ ℝⁿˣᵀ."""

SetParameters = Tuple[CenterVector, GeneratorMatrix]
"""A (center, generators) pair produced by the uncertainty generator."""


# ============================================================================
# Uncertainty Modes and Random Sources
# ============================================================================

UncertaintyMode = Literal["standard", "diag", "rand"]
"""
Uncertainty-generation policy.

- 'standard': hand-specified literal sets, bit-for-bit reproducible
- 'diag': axis-aligned boxes with randomly scaled diagonal generators
- 'rand': dense, arbitrarily oriented generator matrices
"""


class RandomSource(Protocol):
    """
    Random source used by the 'diag' and 'rand' uncertainty modes.

    ``numpy.random.Generator`` satisfies this protocol, so tests can pass
    ``np.random.default_rng(seed)`` and assert exact values.
    """

    def random(self, size=None) -> np.ndarray:
        """Uniform samples on [0, 1)."""
        ...

    def standard_normal(self, size=None) -> np.ndarray:
        """Standard normal samples."""
        ...


# ============================================================================
# Function Types - Dynamics
# ============================================================================

DynamicsFunction = Callable[[StateVector, ControlVector], StateVector]
"""
Discrete-time state update f(x, u) → x[k+1].

Examples
--------
>>> def f(x: StateVector, u: ControlVector) -> StateVector:
...     return x + dt * np.array([x[1], -np.sin(x[0]) + u[0]])
"""

OutputFunction = Callable[[StateVector, ControlVector], OutputVector]
"""
Output map g(x, u) → y[k].

Takes the input as well so that measurement noise carried in u can enter
the output additively.
"""

ARXFunction = Callable[[HistoryVector, HistoryVector], OutputVector]
"""
Autoregressive map f(y_hist, u_hist) → y(k).

See HistoryVector for the stacking convention.
"""

ParameterOverride = Optional[ArrayLike]
"""Optional replacement for a catalog entry's true parameter vector."""


# ============================================================================
# Export All
# ============================================================================

__all__ = [
    # Basic arrays
    "ArrayLike",
    "ScalarLike",
    "IntegerLike",
    # Vectors
    "StateVector",
    "ControlVector",
    "OutputVector",
    "ParameterVector",
    "HistoryVector",
    # Matrices
    "StateMatrix",
    "InputMatrix",
    "OutputMatrix",
    "FeedthroughMatrix",
    "CoefficientSequence",
    # Sets
    "CenterVector",
    "GeneratorMatrix",
    "CenterMatrix",
    "GeneratorList",
    "SetParameters",
    # Modes and randomness
    "UncertaintyMode",
    "RandomSource",
    # Functions
    "DynamicsFunction",
    "OutputFunction",
    "ARXFunction",
    "ParameterOverride",
]
