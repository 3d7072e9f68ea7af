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
Nonlinear identification entries: NARX models and their state-space
counterparts.

ARX entries define R0 over the stacked output history (ny · n_p
dimensions). None of these entries separate process and measurement
noise; U is a plain input set.
"""

import numpy as np

from ddreach.catalog.registry import BuildContext, CatalogEntry, UncertaintySpec, register_system
from ddreach.catalog.uncertainty import FixedSet, UncertaintyModes
from ddreach.systems.base.system_model import NonlinearARX, NonlinearDT
from ddreach.systems.builtin.narx import (
    example_narx,
    kroll_narx,
    linear_arx_map,
    lipschitz_dynamics,
    lipschitz_narx,
    polynomial_dynamics,
    square_narx,
)

from .fixtures import (
    FIVE_STATE_DT,
    FIVE_STATE_R0_MODES,
    FIVE_STATE_U_MODES,
    five_state_matrices,
    small_system_modes,
)

NARX_P_TRUE = np.array([0.8, 1.2])
EXAMPLE_NARX_P_TRUE = np.array([1.0, -0.5])
POLY_NARX_P_TRUE = np.array([1.5, -0.8])
LIPSCHITZ_P_TRUE = np.array([0.6, -1.2])
for _p_true in (NARX_P_TRUE, EXAMPLE_NARX_P_TRUE, POLY_NARX_P_TRUE, LIPSCHITZ_P_TRUE):
    _p_true.setflags(write=False)
del _p_true

# Shared by NARX and Square
KROLL_U_MODES = UncertaintyModes(
    standard=FixedSet([0.0, 0.05], 0.2 * np.eye(2)),
    diag=FixedSet(0.1 * np.array([-1.66, 4.41]), 0.7 * np.diag([0.1, 0.13])),
    rand=FixedSet([-1.66, 4.41], [[-0.1, 0.13], [0.25, -0.09]]),
)


def _origin(n: int) -> UncertaintyModes:
    return UncertaintyModes.fixed(FixedSet(np.zeros(n)))


def _identity_output(x, u):
    return np.array(x[:2], copy=True)


# ============================================================================
# Kroll-type NARX
# ============================================================================


@register_system("NARX")
def _narx(ctx: BuildContext) -> CatalogEntry:
    """Rational NARX benchmark (n_p = 2); R0 is the origin of ℝ⁴."""
    system = NonlinearARX(
        "NARX", kroll_narx(ctx.parameters(NARX_P_TRUE)), dt=0.1, ny=2, nu=2, n_p=2
    )
    uncertainty = UncertaintySpec(
        R0=ctx.zonotope(_origin(4), 4),
        U=ctx.zonotope(KROLL_U_MODES, 2),
    )
    return CatalogEntry(system, uncertainty, NARX_P_TRUE)


@register_system("Square")
def _square(ctx: BuildContext) -> CatalogEntry:
    """Quadratic NARX benchmark (n_p = 1); R0 is the origin of ℝ²."""
    system = NonlinearARX(
        "Square", square_narx(ctx.parameters(NARX_P_TRUE)), dt=0.1, ny=2, nu=2, n_p=1
    )
    uncertainty = UncertaintySpec(
        R0=ctx.zonotope(_origin(2), 2),
        U=ctx.zonotope(KROLL_U_MODES, 2),
    )
    return CatalogEntry(system, uncertainty, NARX_P_TRUE)


# ============================================================================
# Fully observable benchmarks (y = x)
# ============================================================================


@register_system("example_NARX")
def _example_narx(ctx: BuildContext) -> CatalogEntry:
    """Saturating NARX map (tanh and sin channels) with n_p = 1."""
    system = NonlinearARX(
        "customNARX", example_narx(ctx.parameters(EXAMPLE_NARX_P_TRUE)), dt=0.1, ny=2, nu=2, n_p=1
    )
    R0_modes, U_modes = small_system_modes(2, 2)
    uncertainty = UncertaintySpec(R0=ctx.zonotope(R0_modes, 2), U=ctx.zonotope(U_modes, 2))
    return CatalogEntry(system, uncertainty, EXAMPLE_NARX_P_TRUE)


@register_system("polyNARX")
def _poly_narx(ctx: BuildContext) -> CatalogEntry:
    """Quadratic map written as a state-space model with identity output."""
    system = NonlinearDT(
        "polyNARX",
        polynomial_dynamics(ctx.parameters(POLY_NARX_P_TRUE)),
        dt=0.1,
        nx=2,
        nu=2,
        out_fun=_identity_output,
        ny=2,
    )
    R0_modes, U_modes = small_system_modes(2, 2)
    uncertainty = UncertaintySpec(R0=ctx.zonotope(R0_modes, 2), U=ctx.zonotope(U_modes, 2))
    return CatalogEntry(system, uncertainty, POLY_NARX_P_TRUE)


@register_system("lipschitzNARX")
def _lipschitz_narx(ctx: BuildContext) -> CatalogEntry:
    """Globally Lipschitz NARX map; its state-space twin is lipschitzSysDT."""
    system = NonlinearARX(
        "lipschitzNARX", lipschitz_narx(ctx.parameters(LIPSCHITZ_P_TRUE)), dt=0.1, ny=2, nu=2, n_p=1
    )
    R0_modes, U_modes = small_system_modes(2, 2)
    uncertainty = UncertaintySpec(R0=ctx.zonotope(R0_modes, 2), U=ctx.zonotope(U_modes, 2))
    return CatalogEntry(system, uncertainty, LIPSCHITZ_P_TRUE)


@register_system("lipschitzSysDT")
def _lipschitz_sys_dt(ctx: BuildContext) -> CatalogEntry:
    """State-space rendering of lipschitzNARX with identity output."""
    system = NonlinearDT(
        "lipschitzSysDT",
        lipschitz_dynamics(ctx.parameters(LIPSCHITZ_P_TRUE)),
        dt=0.1,
        nx=2,
        nu=2,
        out_fun=_identity_output,
        ny=2,
    )
    R0_modes, U_modes = small_system_modes(2, 2)
    uncertainty = UncertaintySpec(R0=ctx.zonotope(R0_modes, 2), U=ctx.zonotope(U_modes, 2))
    return CatalogEntry(system, uncertainty, LIPSCHITZ_P_TRUE)


# ============================================================================
# Linear test system in nonlinear clothing
# ============================================================================


@register_system("test_nlARX")
def _test_nl_arx(ctx: BuildContext) -> CatalogEntry:
    """Five-state test system as a nonlinear ARX model: y(k) = Ad y(k-1) + Bd u(k)."""
    Ad, Bd = five_state_matrices()
    system = NonlinearARX(
        "lin2nonlinSys_ARX", linear_arx_map(Ad, Bd, 5), dt=FIVE_STATE_DT, ny=5, nu=1, n_p=1
    )
    uncertainty = UncertaintySpec(
        R0=ctx.zonotope(FIVE_STATE_R0_MODES, 5),
        U=ctx.zonotope(FIVE_STATE_U_MODES, 1),
    )
    return CatalogEntry(system, uncertainty)


@register_system("test_nlSysDT")
def _test_nl_sys_dt(ctx: BuildContext) -> CatalogEntry:
    """Five-state test system as a nonlinear state-space model, fully measured."""
    Ad, Bd = five_state_matrices()

    def f(x, u):
        return Ad @ x + Bd @ u

    def g(x, u):
        return np.array(x, copy=True)

    system = NonlinearDT("lin2nonlinSys", f, dt=FIVE_STATE_DT, nx=5, nu=1, out_fun=g, ny=5)
    uncertainty = UncertaintySpec(
        R0=ctx.zonotope(FIVE_STATE_R0_MODES, 5),
        U=ctx.zonotope(FIVE_STATE_U_MODES, 1),
    )
    return CatalogEntry(system, uncertainty)
