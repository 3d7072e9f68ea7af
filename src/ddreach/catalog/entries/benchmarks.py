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
Nonlinear state-space benchmarks: Lorenz, vehicles, CSTR and tanks.

Entries that separate process and measurement noise build U as W × V.
The output maps add the measurement-noise channels of u to the measured
states.
"""

import numpy as np

from ddreach.catalog.registry import BuildContext, CatalogEntry, UncertaintySpec, register_system
from ddreach.catalog.uncertainty import FixedSet, UncertaintyModes
from ddreach.systems.base.system_model import NonlinearDT
from ddreach.systems.builtin.chaotic import (
    LORENZ_2D_PARAMETERS,
    LORENZ_PARAMETERS,
    lorenz_2d_dynamics,
    lorenz_dynamics,
)
from ddreach.systems.builtin.reactors import cstr_dynamics, tank_cascade_dynamics
from ddreach.systems.builtin.vehicles import bicycle_dynamics, bicycle_high_order_dynamics

# Fixed seeds for the initial-set centers of the large tank cascades
TANK30_R0_SEED = 30
TANK60_R0_SEED = 60

NO_MEASUREMENT_NOISE = UncertaintyModes.fixed(FixedSet(np.zeros(0)))


def _standard_only(R0, W, V):
    """Records of entries that define only the 'standard' sets."""
    return (
        UncertaintyModes(standard=FixedSet(*R0)),
        UncertaintyModes(standard=FixedSet(*W)),
        UncertaintyModes(standard=FixedSet(*V)),
    )


# ============================================================================
# Lorenz
# ============================================================================

LORENZ_R0_MODES = UncertaintyModes(
    standard=FixedSet([2.0, -1.0, 4.0], 0.2 * np.eye(3)),
    diag=FixedSet(0.1 * np.array([6.01, 9.36, -3.73]), 0.03 * np.diag([0.11, 0.11, 0.24])),
    rand=FixedSet(
        [6.01, 9.36, -3.73],
        [
            [-0.11, -0.11, 0.04],
            [-0.07, 0.08, 0.14],
            [0.02, 0.0, 0.02],
        ],
    ),
)

LORENZ_W_MODES = UncertaintyModes(
    standard=FixedSet([0.5, 0.1, -0.2], np.diag([0.1, 2.0, 0.2])),
    diag=FixedSet(0.1 * np.array([7.56, -8.03, -1.57]), np.diag([0.06, -0.02, 0.04])),
    rand=FixedSet(
        [7.56, -8.03, -1.57],
        [
            [0.06, -0.02, 0.04],
            [-0.04, 0.08, -0.09],
            [-0.07, 0.20, -0.10],
        ],
    ),
)

LORENZ_2D_R0_MODES = UncertaintyModes(
    standard=FixedSet([2.0, -1.0], 0.2 * np.eye(2)),
    diag=FixedSet(0.1 * np.array([6.01, 9.36]), 0.03 * np.diag([0.11, 0.11])),
    rand=FixedSet([6.01, 9.36], [[-0.11, -0.11], [-0.07, 0.08]]),
)

LORENZ_2D_W_MODES = UncertaintyModes(
    standard=FixedSet([0.5, 0.1], np.diag([0.1, 2.0])),
    diag=FixedSet(0.1 * np.array([7.56, -8.03]), np.diag([0.06, -0.02])),
    rand=FixedSet([7.56, -8.03], [[0.06, -0.02], [-0.04, 0.08]]),
)


@register_system("lorenz")
def _lorenz(ctx: BuildContext) -> CatalogEntry:
    """Lorenz system with parameter noise, measuring (x₀, x₁); V is empty."""
    p = ctx.parameters(LORENZ_PARAMETERS)
    system = NonlinearDT(
        "lorenz",
        lorenz_dynamics(p, 0.01),
        dt=0.01,
        nx=3,
        nu=3,
        out_fun=lambda x, u: np.array(x[:2]),
        ny=2,
    )
    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(LORENZ_R0_MODES, 3),
        W=ctx.zonotope(LORENZ_W_MODES, 3),
        V=ctx.zonotope(NO_MEASUREMENT_NOISE, 0),
    )
    return CatalogEntry(system, uncertainty, LORENZ_PARAMETERS)


@register_system("lorenz_2D")
def _lorenz_2d(ctx: BuildContext) -> CatalogEntry:
    """Planar Lorenz variant, fully measured; V is empty."""
    p = ctx.parameters(LORENZ_2D_PARAMETERS)
    system = NonlinearDT(
        "lorenz_2D",
        lorenz_2d_dynamics(p, 0.01),
        dt=0.01,
        nx=2,
        nu=2,
        out_fun=lambda x, u: np.array(x[:2]),
        ny=2,
    )
    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(LORENZ_2D_R0_MODES, 2),
        W=ctx.zonotope(LORENZ_2D_W_MODES, 2),
        V=ctx.zonotope(NO_MEASUREMENT_NOISE, 0),
    )
    return CatalogEntry(system, uncertainty, LORENZ_2D_PARAMETERS)


# ============================================================================
# Vehicles
# ============================================================================


def _bicycle_rand_process_noise() -> np.ndarray:
    G_W = 0.01 * np.diag([0.55, 0.17, -0.19, 0.58, -0.85, 0.81])
    G_W[0, 1] = 0.2
    G_W[1, 4] = 1.0
    G_W[5, 0] = -0.5
    return G_W


BICYCLE_R0_MODES = UncertaintyModes(
    standard=FixedSet([1.2, 0.5, 0.0, 0.0, 0.0, 0.0], np.eye(6)),
    rand=FixedSet(
        [1.86, 3.46, 3.97, 5.39, 4.19, 6.85],
        0.01
        * np.array(
            [
                [1.78, -1.37, 0.79, 0.60, -1.17, -1.48],
                [1.77, -0.29, 0.93, -0.54, -0.69, 0.26],
                [-1.87, 1.27, -0.49, -0.16, 0.93, -2.02],
                [-1.05, 0.07, 1.80, 0.61, -1.48, 0.20],
                [-0.42, 0.45, 0.59, -1.04, -0.56, 0.43],
                [1.40, -0.32, -0.64, -0.35, -0.03, -1.27],
            ]
        ),
    ),
)

BICYCLE_W_MODES = UncertaintyModes(
    standard=FixedSet(np.zeros(6), np.eye(6)),
    rand=FixedSet([2.04, 8.78, 0.27, 6.70, 4.17, 5.59], _bicycle_rand_process_noise()),
)

BICYCLE_V_MODES = UncertaintyModes(
    standard=FixedSet(np.zeros(2), np.eye(2)),
    rand=FixedSet([-0.02, 0.06], 0.002 * np.eye(2)),
)


@register_system("bicycle", modes=("standard", "rand"))
def _bicycle(ctx: BuildContext) -> CatalogEntry:
    """
    Dynamic bicycle model (Δt = 1 ms), measuring (v_x, v_y).

    u = [w₀..w₅, v₀, v₁]; defines 'standard' and 'rand' only.
    """
    system = NonlinearDT(
        "bicycle",
        bicycle_dynamics(0.001),
        dt=0.001,
        nx=6,
        nu=8,
        out_fun=lambda x, u: x[3:5] + u[6:8],
        ny=2,
    )
    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(BICYCLE_R0_MODES, 6),
        W=ctx.zonotope(BICYCLE_W_MODES, 6),
        V=ctx.zonotope(BICYCLE_V_MODES, 2),
    )
    return CatalogEntry(system, uncertainty)


@register_system("bicycleHO", modes=("standard",))
def _bicycle_high_order(ctx: BuildContext) -> CatalogEntry:
    """Higher-order bicycle model (18 states), measuring (v_y, r)."""
    system = NonlinearDT(
        "bicycleHO",
        bicycle_high_order_dynamics(0.001),
        dt=0.001,
        nx=18,
        nu=4,
        out_fun=lambda x, u: x[4:6] + u[2:4],
        ny=2,
    )
    R0_modes, W_modes, V_modes = _standard_only(
        R0=(np.concatenate([[1.2, 0.5, 0.0, 5.0], np.zeros(14)]), 0.01 * np.eye(18)),
        W=(np.zeros(2), 0.004 * np.eye(2)),
        V=(np.zeros(2), 0.002 * np.eye(2)),
    )
    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(R0_modes, 18),
        W=ctx.zonotope(W_modes, 2),
        V=ctx.zonotope(V_modes, 2),
    )
    return CatalogEntry(system, uncertainty)


# ============================================================================
# Process Systems
# ============================================================================


@register_system("cstrDiscr", modes=("standard",))
def _cstr(ctx: BuildContext) -> CatalogEntry:
    """Closed-loop stirred-tank reactor (Δt = 0.015), fully measured."""
    system = NonlinearDT(
        "cstrDiscr",
        cstr_dynamics(0.015),
        dt=0.015,
        nx=2,
        nu=4,
        out_fun=lambda x, u: x[:2] + u[2:4],
        ny=2,
    )
    R0_modes, W_modes, V_modes = _standard_only(
        R0=([-0.15, -45.0], np.diag([0.005, 3.0])),
        W=(np.zeros(2), np.diag([0.1, 2.0])),
        V=(np.zeros(2), 0.002 * np.eye(2)),
    )
    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(R0_modes, 2),
        W=ctx.zonotope(W_modes, 2),
        V=ctx.zonotope(V_modes, 2),
    )
    return CatalogEntry(system, uncertainty)


@register_system("tank", modes=("standard",))
def _tank6(ctx: BuildContext) -> CatalogEntry:
    """Six-tank cascade (Δt = 0.5), measuring the first two levels."""
    system = NonlinearDT(
        "tank6",
        tank_cascade_dynamics(6, 2, 0.5, n_inputs=4),
        dt=0.5,
        nx=6,
        nu=4,
        out_fun=lambda x, u: x[:2] + u[2:4],
        ny=2,
    )
    R0_modes, W_modes, V_modes = _standard_only(
        R0=([2.0, 4.0, 4.0, 2.0, 10.0, 4.0], 0.2 * np.eye(6)),
        W=(np.zeros(2), np.diag([0.1, 2.0])),
        V=(np.zeros(2), 0.002 * np.eye(2)),
    )
    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(R0_modes, 6),
        W=ctx.zonotope(W_modes, 2),
        V=ctx.zonotope(V_modes, 2),
    )
    return CatalogEntry(system, uncertainty)


def _large_tank_cascade(
    ctx: BuildContext, name: str, n_tanks: int, n_inputs: int, n_outputs: int, seed: int
) -> CatalogEntry:
    """
    Large tank cascade: n_inputs - n_outputs disturbance inflows followed
    by one measurement-noise channel per measured level.

    The initial levels are drawn once from a fixed seed, uniformly on
    [0, 12), so every build returns the same R0.
    """
    n_inflows = n_inputs - n_outputs
    system = NonlinearDT(
        name,
        tank_cascade_dynamics(n_tanks, n_inflows, 0.5, n_inputs=n_inputs),
        dt=0.5,
        nx=n_tanks,
        nu=n_inputs,
        out_fun=lambda x, u: x[:n_outputs] + u[n_inflows:],
        ny=n_outputs,
    )
    c_R0 = 12.0 * np.random.default_rng(seed).random(n_tanks)
    R0_modes, W_modes, V_modes = _standard_only(
        R0=(c_R0, 0.2 * np.eye(n_tanks)),
        W=(np.zeros(n_inflows), 0.01 * np.eye(n_inflows)),
        V=(np.zeros(n_outputs), 0.002 * np.eye(n_outputs)),
    )
    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(R0_modes, n_tanks),
        W=ctx.zonotope(W_modes, n_inflows),
        V=ctx.zonotope(V_modes, n_outputs),
    )
    return CatalogEntry(system, uncertainty)


@register_system("tank30", modes=("standard",))
def _tank30(ctx: BuildContext) -> CatalogEntry:
    """30-tank cascade with 9 inflows, measuring the first six levels."""
    return _large_tank_cascade(ctx, "tank30", 30, 15, 6, TANK30_R0_SEED)


@register_system("tank60", modes=("standard",))
def _tank60(ctx: BuildContext) -> CatalogEntry:
    """60-tank cascade with 28 inflows, measuring the first two levels."""
    return _large_tank_cascade(ctx, "tank60", 60, 30, 2, TANK60_R0_SEED)
