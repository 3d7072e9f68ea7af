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
Zonotopes and Cartesian Products
================================

A zonotope is a center-symmetric polytope given by a center c ∈ ℝⁿ and a
generator matrix G ∈ ℝⁿˣᵍ:

    Z = {c + G β : β ∈ [-1, 1]ᵍ}

Each column of G is one generator, contributing an independent ±1-scaled
offset. g = 0 is allowed (Z is the single point c), and so is n = 0 (the
zero-dimensional zonotope, which the catalog uses as an explicit "no
measurement noise" factor of a Cartesian product).

Zonotopes are immutable: the constructor copies its arrays and marks them
read-only. No operation in this module reduces the number of generators;
order reduction belongs to the reachability engine that consumes the sets.

Examples
--------
>>> W = make_zonotope([0.1, 0.1], 0.2 * np.eye(2))
>>> V = make_zonotope([-0.05, -0.05], 0.1 * np.hstack([np.eye(2), np.ones((2, 1))]))
>>> U = cartesian_product(W, V)
>>> U.dim, U.n_generators
(4, 5)
>>> U.project(range(2)) == make_zonotope([0.1, 0.1], np.hstack([0.2 * np.eye(2), np.zeros((2, 3))]))
True
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from ddreach.exceptions import DimensionMismatchError
from ddreach.types.core import ArrayLike, CenterVector, GeneratorMatrix


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Zonotope:
    """
    Immutable zonotope {c + Gβ : β ∈ [-1, 1]ᵍ}.

    Use make_zonotope() to build one from loosely shaped input; the
    dataclass constructor expects a 1-D center and a 2-D generator matrix
    and only validates them.

    Attributes
    ----------
    center : CenterVector
        Center c, shape (n,)
    generators : GeneratorMatrix
        Generator matrix G, shape (n, g)

    Raises
    ------
    DimensionMismatchError
        If the center is not 1-D, the generators are not 2-D, or
        G.shape[0] != len(c)
    """

    center: CenterVector
    generators: GeneratorMatrix

    def __post_init__(self):
        center = np.asarray(self.center, dtype=float)
        generators = np.asarray(self.generators, dtype=float)
        if center.ndim != 1:
            raise DimensionMismatchError(
                f"Zonotope center must be a vector, got shape {center.shape}"
            )
        if generators.ndim != 2:
            raise DimensionMismatchError(
                f"Zonotope generators must be a matrix, got shape {generators.shape}"
            )
        if generators.shape[0] != center.shape[0]:
            raise DimensionMismatchError(
                f"Generator matrix has {generators.shape[0]} rows but center has "
                f"{center.shape[0]} entries"
            )
        object.__setattr__(self, "center", _frozen(center))
        object.__setattr__(self, "generators", _frozen(generators))

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def dim(self) -> int:
        """Dimension n of the ambient space."""
        return self.center.shape[0]

    @property
    def n_generators(self) -> int:
        """Number of generators g (the order of the set, up to scaling by n)."""
        return self.generators.shape[1]

    @property
    def is_point(self) -> bool:
        """True when the zonotope has no generators."""
        return self.n_generators == 0

    # ========================================================================
    # Queries
    # ========================================================================

    def project(self, indices: Iterable[int]) -> "Zonotope":
        """
        Project onto a subset of coordinates.

        Keeps every generator (including ones that become zero in the
        selected coordinates), so projecting a Cartesian product onto one
        factor's block returns that factor's generators zero-padded by the
        other factor's generators.

        Args:
            indices: Coordinates to keep, in the order they should appear

        Returns:
            Projected zonotope
        """
        idx = np.asarray(list(indices), dtype=int)
        if idx.size and (idx.min() < 0 or idx.max() >= self.dim):
            raise DimensionMismatchError(
                f"Projection indices {idx.tolist()} out of range for dimension {self.dim}"
            )
        generators = self.generators[idx, :].reshape(idx.size, self.n_generators)
        return Zonotope(self.center[idx], generators)

    def interval_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Interval hull of the zonotope.

        Returns:
            (lower, upper) with lower = c - Σ|Gᵢ| and upper = c + Σ|Gᵢ|
        """
        radius = np.abs(self.generators).sum(axis=1)
        return self.center - radius, self.center + radius

    def __eq__(self, other) -> bool:
        if not isinstance(other, Zonotope):
            return NotImplemented
        return (
            self.center.shape == other.center.shape
            and self.generators.shape == other.generators.shape
            and np.array_equal(self.center, other.center)
            and np.array_equal(self.generators, other.generators)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Zonotope(dim={self.dim}, n_generators={self.n_generators})"


# ============================================================================
# Construction
# ============================================================================


def make_zonotope(center: ArrayLike, generators: Optional[ArrayLike] = None) -> Zonotope:
    """
    Build a zonotope from a center and a generator matrix.

    Normalization rules:
    - A scalar center becomes a 1-dimensional center
    - generators=None or an empty array gives a point (n × 0 generators)
    - A scalar generator becomes a 1 × 1 matrix
    - A 1-D generator array is a single generator column, except for
      1-dimensional centers where it is read as a row of g generators

    Args:
        center: Center vector c (length n)
        generators: Generator matrix G (n × g)

    Returns:
        Zonotope

    Raises:
        DimensionMismatchError: If rows(G) != len(c)

    Examples:
        >>> make_zonotope(10, 0.25).n_generators
        1
        >>> make_zonotope(np.zeros(4)).is_point
        True
        >>> make_zonotope([1.0, 2.0], np.eye(3))
        Traceback (most recent call last):
        ...
        ddreach.exceptions.DimensionMismatchError: ...
    """
    c = np.atleast_1d(np.asarray(center, dtype=float))
    if c.ndim > 1:
        if c.ndim == 2 and c.shape[1] == 1:
            c = c[:, 0]
        else:
            raise DimensionMismatchError(f"Zonotope center must be a vector, got shape {c.shape}")
    n = c.shape[0]

    if generators is None:
        G = np.zeros((n, 0))
    else:
        G = np.asarray(generators, dtype=float)
        if G.ndim > 2:
            raise DimensionMismatchError(
                f"Zonotope generators must be a matrix, got shape {G.shape}"
            )
        if G.size == 0:
            # [] and an n x 0 matrix both mean "no generators"
            if G.ndim == 2 and G.shape != (0, 0) and G.shape[0] != n:
                raise DimensionMismatchError(
                    f"Generator matrix has {G.shape[0]} rows but center has {n} entries"
                )
            G = np.zeros((n, 0))
        elif G.ndim == 0:
            G = G.reshape(1, 1)
        elif G.ndim == 1:
            G = G.reshape(1, -1) if n == 1 else G.reshape(-1, 1)

    return Zonotope(c, G)


def cartesian_product(a: Zonotope, b: Zonotope) -> Zonotope:
    """
    Cartesian product A × B of two zonotopes.

    The result lives in the concatenated coordinates (A's first):

        c = [c_A; c_B]          G = [[G_A, 0  ],
                                     [0,   G_B]]

    dim = dim(A) + dim(B) and n_generators = n_generators(A) + n_generators(B).
    The operation is associative and never fails for well-formed operands.

    Args:
        a: First factor (its coordinates come first)
        b: Second factor

    Returns:
        Product zonotope
    """
    na, nb = a.dim, b.dim
    ga, gb = a.n_generators, b.n_generators
    G = np.zeros((na + nb, ga + gb))
    G[:na, :ga] = a.generators
    G[na:, ga:] = b.generators
    return Zonotope(np.concatenate([a.center, b.center]), G)


__all__ = [
    "Zonotope",
    "make_zonotope",
    "cartesian_product",
]
