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
Discrete-time System Models
===========================

This module provides the system descriptions handed to reachability and
identification engines. Four variants share one abstract base:

    SystemModel (abstract)
    ├── LinearDT       x[k+1] = A x[k] + B u[k] + c,   y[k] = C x[k] + D u[k]
    ├── NonlinearDT    x[k+1] = f(x[k], u[k]),         y[k] = g(x[k], u[k])
    ├── LinearARX      y(k) = Σᵢ A_bar[i] y(k-1-i) + Σᵢ B_bar[i] u(k-i)
    └── NonlinearARX   y(k) = f(y_hist, u_hist)

Every model declares its sampling interval and dimensions. For the ARX
variants the "state" is the stacked output history, so

    state_dim = ny · n_p

and the initial set R0 of an ARX catalog entry lives in that space rather
than in a physical state space.

Key Design Principles
--------------------
1. **Immutable**: Matrices are copied and frozen at construction
2. **Validated**: Linear models check every matrix shape up front;
   function-based models check the shape of each evaluation
3. **Minimal Interface**: step() for the update, output() for
   measurement, nothing that propagates sets

Mathematical Notation
--------------------
- x[k] ∈ ℝⁿˣ: State at discrete time k
- u[k] ∈ ℝⁿᵘ: Input (controls and noise) at time k
- y[k] ∈ ℝⁿʸ: Output at time k
- n_p: Number of past output samples kept by an ARX model
- Δt: Sampling period (dt property)

Examples
--------
>>> sys = LinearDT(A=np.eye(2), B=np.ones((2, 1)), dt=0.1)
>>> sys.step(np.zeros(2), np.array([1.0]))
array([1., 1.])
>>> arx = LinearARX([0.5 * np.eye(2)], [np.zeros((2, 1)), np.ones((2, 1))], dt=0.1)
>>> arx.n_p, arx.state_dim
(1, 2)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from ddreach.exceptions import DimensionMismatchError
from ddreach.types.core import (
    ARXFunction,
    ArrayLike,
    CoefficientSequence,
    ControlVector,
    DynamicsFunction,
    FeedthroughMatrix,
    HistoryVector,
    OutputFunction,
    OutputMatrix,
    OutputVector,
    ParameterVector,
    ScalarLike,
    StateVector,
)


class SystemKind(Enum):
    """Tag identifying the system-model variant."""

    LINEAR_DT = "linearSysDT"
    NONLINEAR_DT = "nonlinearSysDT"
    LINEAR_ARX = "linearARX"
    NONLINEAR_ARX = "nonlinearARX"


def _matrix(value: ArrayLike, name: str) -> np.ndarray:
    M = np.atleast_2d(np.array(value, dtype=float, copy=True))
    if M.ndim != 2:
        raise DimensionMismatchError(f"{name} must be a matrix, got shape {M.shape}")
    M.setflags(write=False)
    return M


def _vector(value: ArrayLike, length: int, name: str) -> np.ndarray:
    v = np.asarray(value, dtype=float).ravel()
    if v.shape[0] != length:
        raise DimensionMismatchError(f"{name} must have length {length}, got {v.shape[0]}")
    return v


def as_parameter_vector(
    value: ArrayLike, length: int, name: str = "parameters"
) -> ParameterVector:
    """
    Normalize a model parameter vector and check its length.

    Returns a read-only float copy.

    Raises:
        DimensionMismatchError: If the vector does not have `length` entries
    """
    p = np.array(_vector(value, length, name), copy=True)
    p.setflags(write=False)
    return p


class SystemModel(ABC):
    """
    Abstract base class for catalog system models.

    Subclasses set the class attribute ``kind`` and implement state_dim
    and step(). All models are discrete-time with a positive sampling
    period.

    Attributes
    ----------
    name : str
        Human-readable model name
    nu : int
        Input dimension (controls and noise channels)
    ny : int
        Output dimension

    Notes
    -----
    This is an abstract base class and cannot be instantiated directly.
    """

    kind: SystemKind

    def __init__(self, name: str, dt: ScalarLike, nu: int, ny: int):
        dt = float(dt)
        if not np.isfinite(dt) or dt <= 0:
            raise ValueError(f"Sampling interval must be positive and finite, got {dt}")
        if nu < 0 or ny < 0:
            raise DimensionMismatchError(f"Dimensions must be non-negative, got nu={nu}, ny={ny}")
        self.name = name
        self._dt = dt
        self.nu = int(nu)
        self.ny = int(ny)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def dt(self) -> float:
        """Sampling period Δt between consecutive updates."""
        return self._dt

    @property
    @abstractmethod
    def state_dim(self) -> int:
        """
        Dimension of the space the initial set R0 lives in.

        nx for state-space models, ny · n_p for ARX models.
        """
        pass

    @property
    def input_dim(self) -> int:
        """Effective input dimension, i.e. the dimension of the input set U."""
        return self.nu

    @property
    def output_dim(self) -> int:
        return self.ny

    @property
    def dims(self) -> Tuple[int, int, int]:
        """(state_dim, input_dim, output_dim)"""
        return self.state_dim, self.input_dim, self.output_dim

    # =========================================================================
    # Dynamics
    # =========================================================================

    @abstractmethod
    def step(self, x: StateVector, u: ControlVector) -> np.ndarray:
        """
        Apply the dynamics once.

        State-space models return x[k+1]; ARX models take the stacked
        histories and return y(k).
        """
        pass

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, dt={self.dt}, "
            f"state_dim={self.state_dim}, nu={self.nu}, ny={self.ny})"
        )


# ============================================================================
# State-space Models
# ============================================================================


class LinearDT(SystemModel):
    """
    Linear discrete-time state-space model.

        x[k+1] = A x[k] + B u[k] + c
        y[k]   = C x[k] + D u[k]

    Parameters
    ----------
    A : ArrayLike
        State matrix (nx, nx)
    B : ArrayLike
        Input matrix (nx, nu)
    dt : float
        Sampling period
    c : Optional[ArrayLike]
        Constant offset (nx,), zero if omitted
    C : Optional[ArrayLike]
        Output matrix (ny, nx), identity if omitted
    D : Optional[ArrayLike]
        Feedthrough matrix (ny, nu), zero if omitted
    name : str
        Model name

    Raises
    ------
    DimensionMismatchError
        If any matrix disagrees with nx, nu or ny
    """

    kind = SystemKind.LINEAR_DT

    def __init__(
        self,
        A: ArrayLike,
        B: ArrayLike,
        dt: ScalarLike,
        c: Optional[ArrayLike] = None,
        C: Optional[ArrayLike] = None,
        D: Optional[ArrayLike] = None,
        name: str = "linearSysDT",
    ):
        A = _matrix(A, "A")
        B = _matrix(B, "B")
        nx = A.shape[0]
        if A.shape != (nx, nx):
            raise DimensionMismatchError(f"A must be square, got shape {A.shape}")
        if B.shape[0] != nx:
            raise DimensionMismatchError(f"B must have {nx} rows, got shape {B.shape}")
        nu = B.shape[1]

        C = _matrix(np.eye(nx) if C is None else C, "C")
        if C.shape[1] != nx:
            raise DimensionMismatchError(f"C must have {nx} columns, got shape {C.shape}")
        ny = C.shape[0]

        D = _matrix(np.zeros((ny, nu)) if D is None else D, "D")
        if D.shape != (ny, nu):
            # Scalar 0 means no feedthrough
            if D.size == 1 and D.item() == 0:
                D = _matrix(np.zeros((ny, nu)), "D")
            else:
                raise DimensionMismatchError(f"D must have shape {(ny, nu)}, got {D.shape}")

        offset = np.zeros(nx) if c is None else _vector(c, nx, "c")
        offset = offset.copy()
        offset.setflags(write=False)

        super().__init__(name, dt, nu, ny)
        self.A = A
        self.B = B
        self.c = offset
        self.C: OutputMatrix = C
        self.D: FeedthroughMatrix = D

    @property
    def nx(self) -> int:
        return self.A.shape[0]

    @property
    def state_dim(self) -> int:
        return self.nx

    def step(self, x: StateVector, u: ControlVector) -> StateVector:
        """x[k+1] = A x[k] + B u[k] + c"""
        x = _vector(x, self.nx, "x")
        u = _vector(u, self.nu, "u")
        return self.A @ x + self.B @ u + self.c

    def output(self, x: StateVector, u: ControlVector) -> OutputVector:
        """y[k] = C x[k] + D u[k]"""
        x = _vector(x, self.nx, "x")
        u = _vector(u, self.nu, "u")
        return self.C @ x + self.D @ u


class NonlinearDT(SystemModel):
    """
    Nonlinear discrete-time state-space model.

        x[k+1] = f(x[k], u[k])
        y[k]   = g(x[k], u[k])

    The dynamics and output maps are plain callables, typically closures
    over the model parameters built once by a catalog entry.

    Parameters
    ----------
    name : str
        Model name
    fun : DynamicsFunction
        State update f(x, u) → x[k+1]
    dt : float
        Sampling period
    nx, nu : int
        State and input dimensions
    out_fun : Optional[OutputFunction]
        Output map g(x, u) → y; the full state if omitted
    ny : Optional[int]
        Output dimension (required with out_fun, nx otherwise)
    """

    kind = SystemKind.NONLINEAR_DT

    def __init__(
        self,
        name: str,
        fun: DynamicsFunction,
        dt: ScalarLike,
        nx: int,
        nu: int,
        out_fun: Optional[OutputFunction] = None,
        ny: Optional[int] = None,
    ):
        if not callable(fun):
            raise TypeError("fun must be callable")
        if out_fun is not None and not callable(out_fun):
            raise TypeError("out_fun must be callable")
        if ny is None:
            if out_fun is not None:
                raise DimensionMismatchError("ny is required when an output function is given")
            ny = nx
        super().__init__(name, dt, nu, ny)
        self.nx = int(nx)
        self.fun = fun
        self.out_fun = out_fun

    @property
    def state_dim(self) -> int:
        return self.nx

    def step(self, x: StateVector, u: ControlVector) -> StateVector:
        """x[k+1] = f(x[k], u[k]); the result must have length nx."""
        x = _vector(x, self.nx, "x")
        u = _vector(u, self.nu, "u")
        return _vector(self.fun(x, u), self.nx, f"{self.name} dynamics result")

    def output(self, x: StateVector, u: ControlVector) -> OutputVector:
        """y[k] = g(x[k], u[k]); the result must have length ny."""
        x = _vector(x, self.nx, "x")
        u = _vector(u, self.nu, "u")
        if self.out_fun is None:
            return x.copy()
        return _vector(self.out_fun(x, u), self.ny, f"{self.name} output result")


# ============================================================================
# Autoregressive Models
# ============================================================================


class _ARXHistory:
    """History bookkeeping shared by the ARX variants (ny, nu, n_p)."""

    ny: int
    nu: int
    n_p: int

    @property
    def state_dim(self) -> int:
        return self.ny * self.n_p

    @property
    def input_history_dim(self) -> int:
        """Length of the stacked input history [u(k); ...; u(k-n_p)]."""
        return self.nu * (self.n_p + 1)

    def update_history(self, y_hist: HistoryVector, y_new: OutputVector) -> HistoryVector:
        """
        Shift the output window by one step.

        Returns [y_new; y(k-1); ...; y(k-n_p+1)], dropping the oldest sample.
        """
        y_hist = _vector(y_hist, self.state_dim, "y_hist")
        y_new = _vector(y_new, self.ny, "y_new")
        return np.concatenate([y_new, y_hist[: self.state_dim - self.ny]])


class LinearARX(_ARXHistory, SystemModel):
    """
    Linear ARX model with lag-indexed coefficient sequences.

        y(k) = Σ_{i=1}^{n_p} A_bar[i-1] y(k-i) + Σ_{i=0}^{n_p} B_bar[i] u(k-i)

    n_p = len(A_bar) = len(B_bar) - 1.

    Parameters
    ----------
    A_bar : Sequence[ArrayLike]
        Output coefficients, each (ny, ny)
    B_bar : Sequence[ArrayLike]
        Input coefficients, each (ny, nu), n_p + 1 of them
    dt : float
        Sampling period
    name : str
        Model name
    """

    kind = SystemKind.LINEAR_ARX

    def __init__(
        self,
        A_bar: Sequence[ArrayLike],
        B_bar: Sequence[ArrayLike],
        dt: ScalarLike,
        name: str = "linearARX",
    ):
        A_bar = tuple(_matrix(A, f"A_bar[{i}]") for i, A in enumerate(A_bar))
        B_bar = tuple(_matrix(B, f"B_bar[{i}]") for i, B in enumerate(B_bar))
        if not A_bar:
            raise DimensionMismatchError("A_bar must contain at least one coefficient")
        if len(B_bar) != len(A_bar) + 1:
            raise DimensionMismatchError(
                f"B_bar must have len(A_bar) + 1 = {len(A_bar) + 1} entries, got {len(B_bar)}"
            )
        ny = A_bar[0].shape[0]
        nu = B_bar[0].shape[1]
        for i, A in enumerate(A_bar):
            if A.shape != (ny, ny):
                raise DimensionMismatchError(
                    f"A_bar[{i}] must have shape {(ny, ny)}, got {A.shape}"
                )
        for i, B in enumerate(B_bar):
            if B.shape != (ny, nu):
                raise DimensionMismatchError(
                    f"B_bar[{i}] must have shape {(ny, nu)}, got {B.shape}"
                )

        super().__init__(name, dt, nu, ny)
        self.A_bar: CoefficientSequence = A_bar
        self.B_bar: CoefficientSequence = B_bar
        self.n_p = len(A_bar)

    def step(self, y_hist: HistoryVector, u_hist: HistoryVector) -> OutputVector:
        """y(k) from the stacked output and input histories."""
        y_hist = _vector(y_hist, self.state_dim, "y_hist")
        u_hist = _vector(u_hist, self.input_history_dim, "u_hist")
        y = np.zeros(self.ny)
        for i, A in enumerate(self.A_bar):
            y += A @ y_hist[i * self.ny : (i + 1) * self.ny]
        for i, B in enumerate(self.B_bar):
            y += B @ u_hist[i * self.nu : (i + 1) * self.nu]
        return y


class NonlinearARX(_ARXHistory, SystemModel):
    """
    Nonlinear ARX model.

        y(k) = f([y(k-1); ...; y(k-n_p)], [u(k); u(k-1); ...; u(k-n_p)])

    Parameters
    ----------
    name : str
        Model name
    fun : ARXFunction
        Map from stacked histories to y(k)
    dt : float
        Sampling period
    ny, nu : int
        Output and (per-step) input dimensions
    n_p : int
        Number of past output samples, n_p ≥ 1
    """

    kind = SystemKind.NONLINEAR_ARX

    def __init__(
        self, name: str, fun: ARXFunction, dt: ScalarLike, ny: int, nu: int, n_p: int
    ):
        if not callable(fun):
            raise TypeError("fun must be callable")
        if int(n_p) < 1:
            raise ValueError(f"History length n_p must be positive, got {n_p}")
        super().__init__(name, dt, nu, ny)
        self.fun = fun
        self.n_p = int(n_p)

    def step(self, y_hist: HistoryVector, u_hist: HistoryVector) -> OutputVector:
        """y(k) = f(y_hist, u_hist); the result must have length ny."""
        y_hist = _vector(y_hist, self.state_dim, "y_hist")
        u_hist = _vector(u_hist, self.input_history_dim, "u_hist")
        return _vector(self.fun(y_hist, u_hist), self.ny, f"{self.name} dynamics result")


__all__ = [
    "SystemKind",
    "SystemModel",
    "LinearDT",
    "NonlinearDT",
    "LinearARX",
    "NonlinearARX",
    "as_parameter_vector",
]
