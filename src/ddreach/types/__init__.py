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
Types Module - Type Definitions for ddreach

Central import point for the type aliases used across the package.

Usage
-----
>>> from ddreach.types import (
...     StateVector,
...     GeneratorMatrix,
...     UncertaintyMode,
... )
"""

from .core import (
    # Basic arrays
    ArrayLike,
    ScalarLike,
    IntegerLike,
    # Vectors
    StateVector,
    ControlVector,
    OutputVector,
    ParameterVector,
    HistoryVector,
    # Matrices
    StateMatrix,
    InputMatrix,
    OutputMatrix,
    FeedthroughMatrix,
    CoefficientSequence,
    # Sets
    CenterVector,
    GeneratorMatrix,
    CenterMatrix,
    GeneratorList,
    SetParameters,
    # Modes and randomness
    UncertaintyMode,
    RandomSource,
    # Functions
    DynamicsFunction,
    OutputFunction,
    ARXFunction,
    ParameterOverride,
)

__all__ = [
    "ArrayLike",
    "ScalarLike",
    "IntegerLike",
    "StateVector",
    "ControlVector",
    "OutputVector",
    "ParameterVector",
    "HistoryVector",
    "StateMatrix",
    "InputMatrix",
    "OutputMatrix",
    "FeedthroughMatrix",
    "CoefficientSequence",
    "CenterVector",
    "GeneratorMatrix",
    "CenterMatrix",
    "GeneratorList",
    "SetParameters",
    "UncertaintyMode",
    "RandomSource",
    "DynamicsFunction",
    "OutputFunction",
    "ARXFunction",
    "ParameterOverride",
]
