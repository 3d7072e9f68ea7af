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

from .codegen_utils import generate_dynamics_function, generate_numpy_function
from .discretization import discretize_linear
from .system_model import (
    LinearARX,
    LinearDT,
    NonlinearARX,
    NonlinearDT,
    SystemKind,
    SystemModel,
    as_parameter_vector,
)

__all__ = [
    "SystemKind",
    "SystemModel",
    "LinearDT",
    "NonlinearDT",
    "LinearARX",
    "NonlinearARX",
    "as_parameter_vector",
    "discretize_linear",
    "generate_numpy_function",
    "generate_dynamics_function",
]
