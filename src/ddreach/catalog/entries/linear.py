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
Linear catalog entries: state-space (LinearDT) and ARX (LinearARX).
"""

import numpy as np

from ddreach.catalog.registry import BuildContext, CatalogEntry, UncertaintySpec, register_system
from ddreach.catalog.uncertainty import FixedSet, UncertaintyModes
from ddreach.exceptions import DimensionMismatchError
from ddreach.systems.base.system_model import LinearARX, LinearDT

from .fixtures import (
    FIVE_STATE_DT,
    FIVE_STATE_R0_MODES,
    FIVE_STATE_U_MODES,
    PEDESTRIAN_V_MODES,
    PEDESTRIAN_W_MODES,
    five_state_matrices,
    pedestrian_r0_modes,
    small_system_modes,
)

PEDESTRIAN_P_TRUE = np.array([1.0, 0.01, 5e-5, 0.01])
PEDESTRIAN_ARX_P_TRUE = np.array([2.0, -1.0, 5e-5, -2.0])
PEDESTRIAN_P_TRUE.setflags(write=False)
PEDESTRIAN_ARX_P_TRUE.setflags(write=False)


# ============================================================================
# Pedestrian-type models
# ============================================================================


@register_system("chain_of_integrators")
def _chain_of_integrators(ctx: BuildContext) -> CatalogEntry:
    """
    Planar chain of integrators, n states (n even, default 4).

    Two identical integrator chains of length n/2, one per axis. Each
    chain is driven at its last state by one process-noise channel; the
    outputs are the first state of each chain plus measurement noise:

        u = [w₀, w₁, v₀, v₁],   y = [x₀, x_{n/2}] + v
    """
    n = ctx.scalable_dim()
    if n < 2 or n % 2:
        raise DimensionMismatchError(
            f"chain_of_integrators needs an even state dimension, got {n}"
        )
    m = n // 2

    shift = np.diag(np.ones(m - 1), 1)
    A = np.kron(np.eye(2), shift)
    B = np.zeros((n, 4))
    B[m - 1, 0] = 1.0
    B[n - 1, 1] = 1.0
    C = np.zeros((2, n))
    C[0, 0] = 1.0
    C[1, m] = 1.0
    D = np.hstack([np.zeros((2, 2)), np.eye(2)])
    system = LinearDT(A, B, dt=0.05, C=C, D=D, name="chain_of_integrators")

    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(pedestrian_r0_modes(n), n),
        W=ctx.zonotope(PEDESTRIAN_W_MODES, 2),
        V=ctx.zonotope(PEDESTRIAN_V_MODES, 2),
    )
    return CatalogEntry(system, uncertainty)


@register_system("pedestrian")
def _pedestrian(ctx: BuildContext) -> CatalogEntry:
    """
    Pedestrian motion as a state-space model.

    State [p_x, p_y, v_x, v_y] with p = [a, τ, b_p, b_v]:

        A = [[a, 0, τ, 0], [0, a, 0, τ], [0, 0, a, 0], [0, 0, 0, a]]
        B = [[b_p, 0, 0, 0], [0, b_p, 0, 0], [b_v, 0, 0, 0], [0, b_v, 0, 0]]
        y = [p_x, p_y] + [v₀, v₁]
    """
    p = ctx.parameters(PEDESTRIAN_P_TRUE)
    A = np.array(
        [
            [p[0], 0, p[1], 0],
            [0, p[0], 0, p[1]],
            [0, 0, p[0], 0],
            [0, 0, 0, p[0]],
        ]
    )
    B = np.array(
        [
            [p[2], 0, 0, 0],
            [0, p[2], 0, 0],
            [p[3], 0, 0, 0],
            [0, p[3], 0, 0],
        ]
    )
    C = np.array([[1, 0, 0, 0], [0, 1, 0, 0]])
    D = np.array([[0, 0, 1, 0], [0, 0, 0, 1]])
    system = LinearDT(A, B, dt=0.01, C=C, D=D, name="pedestrian")

    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(pedestrian_r0_modes(), 4),
        W=ctx.zonotope(PEDESTRIAN_W_MODES, 2),
        V=ctx.zonotope(PEDESTRIAN_V_MODES, 2),
    )
    return CatalogEntry(system, uncertainty, PEDESTRIAN_P_TRUE)


@register_system("pedestrianARX")
def _pedestrian_arx(ctx: BuildContext) -> CatalogEntry:
    """
    Pedestrian motion as an ARX model with n_p = 2.

        y(k) = p₀ y(k-1) + p₁ y(k-2) + B₀ u(k) + B₁ u(k-1) + B₂ u(k-2)

    R0 is the origin of the stacked history [y(k-1); y(k-2)] in every
    mode.
    """
    p = ctx.parameters(PEDESTRIAN_ARX_P_TRUE)
    I2 = np.eye(2)
    A_bar = [p[0] * I2, p[1] * I2]
    B_bar = [
        np.array([[0, 0, 1, 0], [0, 0, 0, 1]]),
        np.array([[p[2], 0, p[3], 0], [0, p[2], 0, p[3]]]),
        np.array([[p[2], 0, 1, 0], [0, p[2], 0, 1]]),
    ]
    system = LinearARX(A_bar, B_bar, dt=0.01, name="pedestrianARX")

    uncertainty = UncertaintySpec.from_noise(
        R0=ctx.zonotope(UncertaintyModes.fixed(FixedSet(np.zeros(4))), 4),
        W=ctx.zonotope(PEDESTRIAN_W_MODES, 2),
        V=ctx.zonotope(PEDESTRIAN_V_MODES, 2),
    )
    return CatalogEntry(system, uncertainty, PEDESTRIAN_ARX_P_TRUE)


# ============================================================================
# Test and mock systems
# ============================================================================


@register_system("testSys")
def _test_sys(ctx: BuildContext) -> CatalogEntry:
    """Five-state test system, ZOH-sampled, measuring the first state."""
    Ad, Bd = five_state_matrices()
    C = np.array([[1.0, 0.0, 0.0, 0.0, 0.0]])
    system = LinearDT(Ad, Bd, dt=FIVE_STATE_DT, C=C, D=0, name="testSys")
    uncertainty = UncertaintySpec(
        R0=ctx.zonotope(FIVE_STATE_R0_MODES, 5),
        U=ctx.zonotope(FIVE_STATE_U_MODES, 1),
    )
    return CatalogEntry(system, uncertainty)


@register_system("testSys2")
def _test_sys2(ctx: BuildContext) -> CatalogEntry:
    """Five-state test system, ZOH-sampled, measuring the full state."""
    Ad, Bd = five_state_matrices()
    system = LinearDT(Ad, Bd, dt=FIVE_STATE_DT, C=np.eye(5), D=np.zeros((5, 1)), name="testSys2")
    uncertainty = UncertaintySpec(
        R0=ctx.zonotope(FIVE_STATE_R0_MODES, 5),
        U=ctx.zonotope(FIVE_STATE_U_MODES, 1),
    )
    return CatalogEntry(system, uncertainty)


def _mock_matrices(n: int):
    A = np.eye(n) + 1.01 * np.diag(np.ones(n - 1), 1)
    B = np.ones((n, 1))
    return A, B


@register_system("mockSys")
def _mock_sys(ctx: BuildContext) -> CatalogEntry:
    """
    Scalable mock system (default n = 4), fully measured.

        A = I + 1.01 · superdiag(1),   B = 1
    """
    n = ctx.scalable_dim()
    A, B = _mock_matrices(n)
    system = LinearDT(A, B, dt=0.1, C=np.eye(n), D=np.zeros((n, 1)), name="mockSys")

    R0_modes, U_modes = small_system_modes(n, 1)
    uncertainty = UncertaintySpec(R0=ctx.zonotope(R0_modes, n), U=ctx.zonotope(U_modes, 1))
    return CatalogEntry(system, uncertainty)


@register_system("mockSysARX")
def _mock_sys_arx(ctx: BuildContext) -> CatalogEntry:
    """
    mockSys as an ARX model with n_p = 1.

        y(k) = A y(k-1) + 0 · u(k) + B u(k-1)
    """
    n = ctx.scalable_dim()
    A, B = _mock_matrices(n)
    system = LinearARX([A], [np.zeros((n, 1)), B], dt=0.1, name="mockSysARX")

    R0_modes, U_modes = small_system_modes(n, 1)
    uncertainty = UncertaintySpec(R0=ctx.zonotope(R0_modes, n), U=ctx.zonotope(U_modes, 1))
    return CatalogEntry(system, uncertainty)
