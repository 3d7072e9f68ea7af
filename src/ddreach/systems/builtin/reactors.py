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
Process-engineering benchmarks: a closed-loop CSTR and tank cascades.

Both are written symbolically with their physical parameters held in a
substitution dictionary, then compiled to NumPy. Process noise enters
additively on the state derivatives; measurement noise is handled by the
output maps of the catalog entries.
"""

import logging
from typing import Dict, List, Optional

import sympy as sp

from ddreach.exceptions import DimensionMismatchError
from ddreach.systems.base.codegen_utils import generate_dynamics_function
from ddreach.types.core import DynamicsFunction

logger = logging.getLogger(__name__)


# ============================================================================
# Continuous Stirred-Tank Reactor
# ============================================================================


def cstr_dynamics(dt: float) -> DynamicsFunction:
    """
    Closed-loop exothermic CSTR in deviation coordinates.

    Physical System:
    ---------------
    A → B, first order, Arrhenius kinetics, cooled by a jacket whose
    temperature is set by a fixed linear feedback law:

        C_A = x₀ + C_A0,   T = x₁ + T₀
        r   = k₀ C_A exp(-E/T)
        T_c = T_c0 + k₁ x₀ + k₂ x₁

        Ċ_A = (q/V)(C_Af - C_A) - r + w₀
        Ṫ   = (q/V)(T_f - T) + (-ΔH)/(ρ C_p) r + UA/(V ρ C_p)(T_c - T) + w₁

    State:  x = [x₀, x₁] (deviation of concentration and temperature)
    Input:  u = [w₀, w₁, v₀, v₁] (process noise, then measurement noise;
            only w enters the state update)

    Args:
        dt: Euler step [min]

    Returns:
        f(x, u) with x ∈ ℝ², u ∈ ℝ⁴
    """
    x0, x1 = sp.symbols("x0 x1", real=True)
    u = sp.symbols("u0:4", real=True)

    q, V, C_Af, T_f = sp.symbols("q V C_Af T_f", real=True, positive=True)
    k0, E, delta_H, rho, Cp, UA = sp.symbols("k0 E delta_H rho Cp UA", real=True)
    C_A0, T_0, T_c0, k1, k2 = sp.symbols("C_A0 T_0 T_c0 k1 k2", real=True)

    parameters: Dict[sp.Symbol, float] = {
        q: 100.0,  # Flow rate [L/min]
        V: 100.0,  # Volume [L]
        C_Af: 1.0,  # Feed concentration [mol/L]
        T_f: 350.0,  # Feed temperature [K]
        k0: 7.2e10,  # Pre-exponential [1/min]
        E: 8750.0,  # Activation energy over R [K]
        delta_H: -5e4,  # Heat of reaction [J/mol]
        rho: 1000.0,  # Density [g/L]
        Cp: 0.239,  # Heat capacity [J/(g*K)]
        UA: 5e4,  # Heat transfer coef [J/(min*K)]
        C_A0: 0.5,  # Operating point concentration [mol/L]
        T_0: 350.0,  # Operating point temperature [K]
        T_c0: 300.0,  # Nominal coolant temperature [K]
        k1: -3.0,  # Feedback gain on concentration
        k2: -6.9,  # Feedback gain on temperature
    }

    C_A = x0 + C_A0
    T = x1 + T_0
    T_c = T_c0 + k1 * x0 + k2 * x1

    # Reaction rate (Arrhenius kinetics)
    r = k0 * C_A * sp.exp(-E / T)

    # Material balance
    C_A_dot = (q / V) * (C_Af - C_A) - r + u[0]

    # Energy balance
    T_dot = (
        (q / V) * (T_f - T)
        + ((-delta_H) / (rho * Cp)) * r
        + (UA / (V * rho * Cp)) * (T_c - T)
        + u[1]
    )

    x_next = sp.Matrix([x0 + dt * C_A_dot, x1 + dt * T_dot]).subs(parameters)
    return generate_dynamics_function(x_next, [x0, x1], u)


# ============================================================================
# Tank Cascade
# ============================================================================


def tank_inflow_positions(n_tanks: int, n_inflows: int) -> List[int]:
    """
    Tanks receiving the process-disturbance inflows.

    Inflow j enters tank j·n_tanks // n_inflows, spreading the
    disturbances evenly along the cascade.

    Examples:
        >>> tank_inflow_positions(6, 2)
        [0, 3]
    """
    if n_inflows < 1 or n_inflows > n_tanks:
        raise DimensionMismatchError(
            f"Number of inflows must be between 1 and {n_tanks}, got {n_inflows}"
        )
    return [j * n_tanks // n_inflows for j in range(n_inflows)]


def tank_cascade_dynamics(
    n_tanks: int, n_inflows: int, dt: float, n_inputs: Optional[int] = None
) -> DynamicsFunction:
    """
    Cascade of gravity-drained tanks with level feedback on the first tank.

    Physical System:
    ---------------
    Water flows from tank i into tank i+1 through an orifice (Torricelli):

        q_i = k √(2g) √max(h_i, 0)

        ḣ₀ = 0.1 + k₂ (4 - h_{n-1}) - q₀ + Σ w_j   (inflows into tank 0)
        ḣ_i = q_{i-1} - q_i + Σ w_j                 (inflows into tank i)

    The constant feed of the first tank is corrected by a proportional
    term on the level of the last tank. Levels are clipped at zero inside
    the square root so the map stays real when a set leaves the physical
    region.

    Args:
        n_tanks: Number of tanks (state dimension)
        n_inflows: Number of disturbance inflows, i.e. input channels that
            enter the dynamics
        dt: Euler step [s]
        n_inputs: Total input length (≥ n_inflows); trailing channels are
            measurement noise and do not enter the state update.
            Defaults to n_inflows.

    Returns:
        f(x, u) with x ∈ ℝⁿ_tanks, u ∈ ℝⁿ_inputs
    """
    n_inputs = n_inflows if n_inputs is None else n_inputs
    if n_inputs < n_inflows:
        raise DimensionMismatchError(
            f"Input length {n_inputs} cannot hold {n_inflows} disturbance inflows"
        )
    positions = tank_inflow_positions(n_tanks, n_inflows)

    h = sp.symbols(f"x0:{n_tanks}", real=True)
    u = sp.symbols(f"u0:{n_inputs}", real=True)

    k, k2, g = sp.symbols("k k2 g", real=True, positive=True)
    parameters: Dict[sp.Symbol, float] = {
        k: 0.015,  # Outflow coefficient
        k2: 0.01,  # Level feedback gain
        g: 9.81,  # Gravity [m/s²]
    }

    outflow = [k * sp.sqrt(2 * g) * sp.sqrt(sp.Max(h_i, 0)) for h_i in h]

    h_dot = [0.1 + k2 * (4 - h[-1]) - outflow[0]]
    for i in range(1, n_tanks):
        h_dot.append(outflow[i - 1] - outflow[i])
    for j, position in enumerate(positions):
        h_dot[position] = h_dot[position] + u[j]

    h_next = sp.Matrix([h_i + dt * h_dot_i for h_i, h_dot_i in zip(h, h_dot)]).subs(parameters)
    logger.debug("Compiled tank cascade: %d tanks, inflows at %s", n_tanks, positions)
    return generate_dynamics_function(h_next, h, u)


__all__ = [
    "cstr_dynamics",
    "tank_inflow_positions",
    "tank_cascade_dynamics",
]
