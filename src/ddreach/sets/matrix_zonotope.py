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
Matrix zonotopes: the matrix-valued analogue of a zonotope.

    M = {C + Σᵢ βᵢ Gᵢ : βᵢ ∈ [-1, 1]}

with center C ∈ ℝⁿˣᵀ and an ordered tuple of generators Gᵢ of the same
shape. The generator order carries no meaning for the set itself but is
kept stable so that downstream results are reproducible.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from ddreach.exceptions import DimensionMismatchError
from ddreach.sets.zonotope import _frozen
from ddreach.types.core import ArrayLike, CenterMatrix, GeneratorList


@dataclass(frozen=True, eq=False)
class MatrixZonotope:
    """
    Immutable matrix zonotope {C + Σᵢ βᵢ Gᵢ : βᵢ ∈ [-1, 1]}.

    Attributes
    ----------
    center : CenterMatrix
        Center matrix C, shape (n, T)
    generators : GeneratorList
        Tuple of generator matrices, each of shape (n, T)

    Raises
    ------
    DimensionMismatchError
        If the center is not 2-D or a generator's shape differs from it
    """

    center: CenterMatrix
    generators: GeneratorList = ()

    def __post_init__(self):
        center = np.asarray(self.center, dtype=float)
        if center.ndim != 2:
            raise DimensionMismatchError(
                f"Matrix zonotope center must be a matrix, got shape {center.shape}"
            )
        generators = []
        for i, G in enumerate(self.generators):
            G = np.asarray(G, dtype=float)
            if G.shape != center.shape:
                raise DimensionMismatchError(
                    f"Generator {i} has shape {G.shape}, expected {center.shape}"
                )
            generators.append(_frozen(G))
        object.__setattr__(self, "center", _frozen(center))
        object.__setattr__(self, "generators", tuple(generators))

    @property
    def shape(self) -> Tuple[int, int]:
        """Shape (n, T) shared by the center and every generator."""
        return self.center.shape

    @property
    def n_generators(self) -> int:
        return len(self.generators)

    def generator_tensor(self) -> np.ndarray:
        """
        Generators stacked into one array of shape (g, n, T).

        Returns an empty (0, n, T) array when there are no generators.
        """
        if not self.generators:
            return np.zeros((0,) + self.shape)
        return np.stack(self.generators, axis=0)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MatrixZonotope):
            return NotImplemented
        return (
            self.shape == other.shape
            and self.n_generators == other.n_generators
            and np.array_equal(self.center, other.center)
            and all(np.array_equal(a, b) for a, b in zip(self.generators, other.generators))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"MatrixZonotope(shape={self.shape}, n_generators={self.n_generators})"


def make_matrix_zonotope(center: ArrayLike, generators: Iterable[ArrayLike] = ()) -> MatrixZonotope:
    """
    Build a matrix zonotope from a center matrix and a list of generators.

    Args:
        center: Center matrix C (n × T)
        generators: Generator matrices, each n × T

    Returns:
        MatrixZonotope

    Raises:
        DimensionMismatchError: If any generator's shape differs from C's

    Examples:
        >>> M = make_matrix_zonotope(np.zeros((2, 3)), [np.ones((2, 3))])
        >>> M.shape, M.n_generators
        ((2, 3), 1)
    """
    return MatrixZonotope(center, tuple(generators))


__all__ = [
    "MatrixZonotope",
    "make_matrix_zonotope",
]
