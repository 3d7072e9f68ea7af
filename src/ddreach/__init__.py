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
ddreach: benchmark systems and uncertainty sets for data-driven
reachability analysis and safety filtering.

Quick start
-----------
>>> from ddreach import load_dynamics, lift_noise
>>> system, sets, p_true = load_dynamics("chain_of_integrators")
>>> system.dims
(4, 4, 2)
>>> M = lift_noise(sets.W, horizon=10)
>>> M.n_generators
20
"""

from .catalog import (
    LoadedSystem,
    UncertaintySpec,
    available_systems,
    load_dynamics,
    register_system,
    supported_modes,
)
from .exceptions import (
    DimensionMismatchError,
    InvalidTrajectoryLengthError,
    UnknownSystemError,
    UnsupportedModeError,
)
from .logging_config import setup_logging
from .sets import (
    MatrixZonotope,
    Zonotope,
    cartesian_product,
    lift_noise,
    make_matrix_zonotope,
    make_zonotope,
)
from .systems import LinearARX, LinearDT, NonlinearARX, NonlinearDT, SystemKind, SystemModel

__version__ = "0.1.0"

__all__ = [
    # Catalog
    "load_dynamics",
    "LoadedSystem",
    "UncertaintySpec",
    "available_systems",
    "supported_modes",
    "register_system",
    # Sets
    "Zonotope",
    "make_zonotope",
    "cartesian_product",
    "MatrixZonotope",
    "make_matrix_zonotope",
    "lift_noise",
    # Systems
    "SystemKind",
    "SystemModel",
    "LinearDT",
    "NonlinearDT",
    "LinearARX",
    "NonlinearARX",
    # Errors
    "UnknownSystemError",
    "UnsupportedModeError",
    "DimensionMismatchError",
    "InvalidTrajectoryLengthError",
    # Logging
    "setup_logging",
]
