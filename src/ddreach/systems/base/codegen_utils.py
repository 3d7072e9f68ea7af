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
Compile symbolic benchmark equations into NumPy callables.

Benchmark dynamics are written with SymPy, close to the equations in the
literature, and compiled once when a catalog entry is built. System
models only ever store and call the compiled functions.

Every compiled function returns a flat float vector; a scalar expression
gives a vector of length one.
"""

from typing import Callable, Sequence, Union

import numpy as np
import sympy as sp

from ddreach.exceptions import DimensionMismatchError
from ddreach.types.core import DynamicsFunction

SymbolicMap = Union[sp.Expr, Sequence[sp.Expr], sp.MatrixBase]


def _elementwise(reduce: Callable) -> Callable:
    """Variadic wrapper around a binary NumPy ufunc (SymPy's Min/Max are n-ary)."""

    def fold(first, *rest):
        result = first
        for value in rest:
            result = reduce(result, value)
        return result

    return fold


# Names looked up before the "numpy" module when lambdify resolves calls
SYMPY_TO_NUMPY_LAMBDIFY = {
    "Min": _elementwise(np.minimum),
    "Max": _elementwise(np.maximum),
}


def _as_column(expr: SymbolicMap) -> sp.MatrixBase:
    if isinstance(expr, sp.MatrixBase):
        return expr.reshape(len(expr), 1)
    if isinstance(expr, (list, tuple)):
        return sp.Matrix(list(expr))
    return sp.Matrix([expr])


def generate_numpy_function(expr: SymbolicMap, symbols: Sequence[sp.Symbol]) -> Callable:
    """
    Lambdify an expression, list or Matrix of expressions.

    Args:
        expr: Expression(s) to compile
        symbols: Positional arguments of the compiled function, in order

    Returns:
        Function of len(symbols) scalars returning a 1-D float array

    Examples:
        >>> x, y = sp.symbols("x y")
        >>> f = generate_numpy_function([x + y, x * y], [x, y])
        >>> f(2.0, 3.0)
        array([5., 6.])
    """
    column = _as_column(expr)
    compiled = sp.lambdify(list(symbols), column, modules=[SYMPY_TO_NUMPY_LAMBDIFY, "numpy"])

    def evaluate(*args):
        values = compiled(*args)
        if isinstance(values, sp.MatrixBase):
            values = list(values)
        return np.asarray(values, dtype=float).reshape(-1)

    return evaluate


def generate_dynamics_function(
    expr: SymbolicMap,
    state_symbols: Sequence[sp.Symbol],
    input_symbols: Sequence[sp.Symbol],
) -> DynamicsFunction:
    """
    Compile a symbolic map of (x, u) into a vector-argument function.

    The result has the f(x, u) signature expected by NonlinearDT: x and u
    are flattened, checked for length and unpacked onto the state and
    input symbols.

    Args:
        expr: Expressions in the state and input symbols
        state_symbols: Symbols bound to x[0], x[1], ...
        input_symbols: Symbols bound to u[0], u[1], ...

    Returns:
        f(x, u) → np.ndarray

    Examples:
        >>> x0, x1, u0 = sp.symbols("x0 x1 u0")
        >>> f = generate_dynamics_function([x1, -x0 + u0], [x0, x1], [u0])
        >>> f(np.array([1.0, 2.0]), np.array([0.5]))
        array([ 2. , -0.5])
    """
    nx = len(state_symbols)
    nu = len(input_symbols)
    evaluate = generate_numpy_function(expr, list(state_symbols) + list(input_symbols))

    def dynamics(x, u):
        x = np.asarray(x, dtype=float).ravel()
        u = np.asarray(u, dtype=float).ravel()
        if x.shape[0] != nx or u.shape[0] != nu:
            raise DimensionMismatchError(
                f"Expected state of length {nx} and input of length {nu}, "
                f"got {x.shape[0]} and {u.shape[0]}"
            )
        return evaluate(*x, *u)

    return dynamics


__all__ = [
    "SYMPY_TO_NUMPY_LAMBDIFY",
    "generate_numpy_function",
    "generate_dynamics_function",
]
