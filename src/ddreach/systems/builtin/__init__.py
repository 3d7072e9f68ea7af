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
Benchmark dynamics for the system catalog.

Symbolic benchmarks (Lorenz, vehicles, CSTR, tank cascades) are compiled
from SymPy to NumPy on each call; the small NARX maps are plain NumPy
closures.
"""

# Chaotic systems
from .chaotic import (
    LORENZ_2D_PARAMETERS,
    LORENZ_PARAMETERS,
    lorenz_2d_dynamics,
    lorenz_dynamics,
)

# NARX maps
from .narx import (
    example_narx,
    kroll_narx,
    linear_arx_map,
    lipschitz_dynamics,
    lipschitz_narx,
    polynomial_dynamics,
    square_narx,
)

# Reactor systems
from .reactors import cstr_dynamics, tank_cascade_dynamics, tank_inflow_positions

# Vehicles
from .vehicles import VEHICLE_PARAMETERS, bicycle_dynamics, bicycle_high_order_dynamics

__all__ = [
    # Chaotic systems
    "LORENZ_PARAMETERS",
    "LORENZ_2D_PARAMETERS",
    "lorenz_dynamics",
    "lorenz_2d_dynamics",
    # NARX maps
    "kroll_narx",
    "square_narx",
    "example_narx",
    "lipschitz_narx",
    "polynomial_dynamics",
    "lipschitz_dynamics",
    "linear_arx_map",
    # Reactor systems
    "cstr_dynamics",
    "tank_cascade_dynamics",
    "tank_inflow_positions",
    # Vehicles
    "VEHICLE_PARAMETERS",
    "bicycle_dynamics",
    "bicycle_high_order_dynamics",
]
