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
System catalog: named discrete-time models with their uncertainty sets.
"""

from .registry import (
    BuildContext,
    CatalogEntry,
    LoadedSystem,
    UncertaintySpec,
    available_systems,
    load_dynamics,
    register_system,
    supported_modes,
)
from .uncertainty import (
    DenseDraw,
    DiagonalDraw,
    FixedSet,
    SetRule,
    UncertaintyModes,
    generate,
)

# Register the built-in entries
from . import entries  # noqa: E402

__all__ = [
    # Loading
    "load_dynamics",
    "LoadedSystem",
    "UncertaintySpec",
    "available_systems",
    "supported_modes",
    # Extending
    "register_system",
    "BuildContext",
    "CatalogEntry",
    # Uncertainty modes
    "generate",
    "UncertaintyModes",
    "SetRule",
    "FixedSet",
    "DiagonalDraw",
    "DenseDraw",
]
