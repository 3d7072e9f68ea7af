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
Shared literal fixtures of the catalog.

The pedestrian-type entries share one family of initial, process-noise
and measurement-noise sets; several test entries share one continuous
five-state system sampled at 50 ms.
"""

from typing import Tuple

import numpy as np

from ddreach.catalog.uncertainty import DenseDraw, DiagonalDraw, FixedSet, UncertaintyModes
from ddreach.systems.base.discretization import discretize_linear

# ============================================================================
# Pedestrian-type sets (4 states, 2 process-noise and 2 measurement channels)
# ============================================================================

_R0_RAND_CENTER = np.array([-0.76, -9.68, 0.21, -5.42])
_W_RAND_CENTER = np.array([-0.16, -8.93])
_V_RAND_CENTER = np.array([1.48, -7.06])


def pedestrian_r0_modes(n: int = 4) -> UncertaintyModes:
    """
    R0 of the pedestrian-type entries.

    The 'standard' set is the origin of ℝⁿ; the 'diag' and 'rand'
    fixtures are four-dimensional literals.
    """
    return UncertaintyModes(
        standard=FixedSet(np.zeros(n)),
        diag=FixedSet(0.1 * _R0_RAND_CENTER, np.diag([0.22, 0.13, 0.10, 0.06])),
        rand=FixedSet(
            _R0_RAND_CENTER,
            [
                [-0.02, 0.13, 0.10, 0.06],
                [0.30, -0.24, 0.21, -0.16],
                [0.28, 0.14, 0.15, 0.18],
                [0.28, 0.33, -0.06, -0.23],
            ],
        ),
    )


PEDESTRIAN_W_MODES = UncertaintyModes(
    standard=FixedSet(0.1 + np.zeros(2), 0.2 * np.eye(2)),
    diag=FixedSet(0.1 * _W_RAND_CENTER, np.diag([0.07, 0.25])),
    rand=FixedSet(_W_RAND_CENTER, [[0.07, -0.25], [-0.28, -0.11]]),
)

PEDESTRIAN_V_MODES = UncertaintyModes(
    standard=FixedSet(-0.05 + np.zeros(2), 0.1 * np.hstack([np.eye(2), np.ones((2, 1))])),
    diag=FixedSet(0.1 * _V_RAND_CENTER, np.diag([0.08, 0.01])),
    rand=FixedSet(_V_RAND_CENTER, [[-0.08, 0.01], [-0.00, -0.03]]),
)


# ============================================================================
# Small identification fixtures
# ============================================================================


def small_system_modes(n_states: int, n_inputs: int) -> Tuple[UncertaintyModes, UncertaintyModes]:
    """
    (R0, U) records of the small identification entries.

    R0 is a 0.05-box around the origin in every mode; U is a 0.2-box
    around the origin for 'standard' and a random draw otherwise.
    """
    R0_modes = UncertaintyModes.fixed(FixedSet(np.zeros(n_states), 0.05 * np.eye(n_states)))
    U_modes = UncertaintyModes.with_draws(
        FixedSet(np.zeros(n_inputs), 0.2 * np.eye(n_inputs)),
        diag=DiagonalDraw(0.1, 0.1),
        rand=DenseDraw(1.0, 1.0),
    )
    return R0_modes, U_modes


# ============================================================================
# Five-state test system
# ============================================================================

FIVE_STATE_DT = 0.05

FIVE_STATE_AC = np.array(
    [
        [-1.0, -4.0, 0.0, 0.0, 0.0],
        [4.0, -1.0, 0.0, 0.0, 0.0],
        [0.0, 0.0, -3.0, 1.0, 0.0],
        [0.0, 0.0, -1.0, -3.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, -2.0],
    ]
)
FIVE_STATE_BC = np.ones((5, 1))

# Same sets in every mode
FIVE_STATE_R0_MODES = UncertaintyModes.fixed(FixedSet(np.ones(5), 0.1 * np.eye(5)))
FIVE_STATE_U_MODES = UncertaintyModes.fixed(FixedSet(10.0, 0.25))


def five_state_matrices() -> Tuple[np.ndarray, np.ndarray]:
    """Zero-order-hold samples (Ad, Bd) of the five-state test system."""
    return discretize_linear(FIVE_STATE_AC, FIVE_STATE_BC, FIVE_STATE_DT)


__all__ = [
    "pedestrian_r0_modes",
    "PEDESTRIAN_W_MODES",
    "PEDESTRIAN_V_MODES",
    "small_system_modes",
    "FIVE_STATE_DT",
    "FIVE_STATE_AC",
    "FIVE_STATE_BC",
    "FIVE_STATE_R0_MODES",
    "FIVE_STATE_U_MODES",
    "five_state_matrices",
]
