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
Closed-loop vehicle benchmarks: a dynamic bicycle model and a
higher-order variant with actuator, wheel and tire-relaxation states.

Both vehicles drive along the X axis under a fixed speed controller and
a lane-keeping steering law; the benchmarks therefore have no control
inputs, only noise channels. Tire forces are linear in the slip angle.
The forward speed entering the slip angles is regularized,

    V = √(v_x² + ε²)

so the models stay smooth at standstill.

Vehicle Parameters (shared):
---------------------------
- m = 1500 kg, I_z = 2250 kg·m²
- l_f = 1.2 m, l_r = 1.6 m (CG to front / rear axle)
- C_f = 5.5e4 N/rad, C_r = 6.0e4 N/rad (axle cornering stiffness)
- v_ref = 5 m/s, k_v = 1 1/s (speed loop)
- k_y = 0.2 rad/m, k_ψ = 1 (steering law δ = -k_y Y - k_ψ ψ)
"""

from typing import Dict

import sympy as sp

from ddreach.systems.base.codegen_utils import generate_dynamics_function
from ddreach.types.core import DynamicsFunction

VEHICLE_PARAMETERS: Dict[str, float] = {
    "m": 1500.0,
    "Iz": 2250.0,
    "lf": 1.2,
    "lr": 1.6,
    "Cf": 5.5e4,
    "Cr": 6.0e4,
    "v_ref": 5.0,
    "k_v": 1.0,
    "k_y": 0.2,
    "k_psi": 1.0,
    "v_eps": 0.5,
}


def _parameter_symbols() -> Dict[sp.Symbol, float]:
    return {sp.Symbol(name, real=True): value for name, value in VEHICLE_PARAMETERS.items()}


def bicycle_dynamics(dt: float) -> DynamicsFunction:
    """
    Dynamic bicycle model, Euler-discretized.

    State:  x = [X, Y, ψ, v_x, v_y, r]
        - X, Y: Position [m]
        - ψ: Heading [rad]
        - v_x, v_y: Body-frame velocities [m/s]
        - r: Yaw rate [rad/s]

    Input:  u = [w₀, ..., w₅, v₀, v₁]
        - w: Additive process noise on each state derivative
        - v: Measurement noise (not used by the state update)

    Dynamics:
    --------
        δ   = -k_y Y - k_ψ ψ
        α_f = δ - (v_y + l_f r)/V,   α_r = -(v_y - l_r r)/V
        F_f = C_f α_f,               F_r = C_r α_r

        Ẋ   = v_x cos ψ - v_y sin ψ + w₀
        Ẏ   = v_x sin ψ + v_y cos ψ + w₁
        ψ̇   = r + w₂
        v̇_x = k_v (v_ref - v_x) + v_y r + w₃
        v̇_y = (F_f cos δ + F_r)/m - v_x r + w₄
        ṙ   = (l_f F_f cos δ - l_r F_r)/I_z + w₅

    Args:
        dt: Euler step [s]

    Returns:
        f(x, u) with x ∈ ℝ⁶, u ∈ ℝ⁸
    """
    X, Y, psi, vx, vy, r = x = sp.symbols("X Y psi v_x v_y r", real=True)
    u = sp.symbols("u0:8", real=True)

    parameters = _parameter_symbols()
    p = {symbol.name: symbol for symbol in parameters}

    V = sp.sqrt(vx**2 + p["v_eps"] ** 2)
    delta = -p["k_y"] * Y - p["k_psi"] * psi
    alpha_f = delta - (vy + p["lf"] * r) / V
    alpha_r = -(vy - p["lr"] * r) / V
    F_f = p["Cf"] * alpha_f
    F_r = p["Cr"] * alpha_r

    x_dot = [
        vx * sp.cos(psi) - vy * sp.sin(psi) + u[0],
        vx * sp.sin(psi) + vy * sp.cos(psi) + u[1],
        r + u[2],
        p["k_v"] * (p["v_ref"] - vx) + vy * r + u[3],
        (F_f * sp.cos(delta) + F_r) / p["m"] - vx * r + u[4],
        (p["lf"] * F_f * sp.cos(delta) - p["lr"] * F_r) / p["Iz"] + u[5],
    ]

    x_next = sp.Matrix([xi + dt * fi for xi, fi in zip(x, x_dot)]).subs(parameters)
    return generate_dynamics_function(x_next, x, u)


def bicycle_high_order_dynamics(dt: float) -> DynamicsFunction:
    """
    Higher-order bicycle model with 18 states, Euler-discretized.

    State:
        x[0:6]   = [X, Y, ψ, v_x, v_y, r]    (rigid body, as bicycle_dynamics)
        x[6:8]   = [δ, δ̇]                    (second-order steering actuator)
        x[8:10]  = [F_x, Ḟ_x]                (second-order drive actuator)
        x[10:14] = [ω_fl, ω_fr, ω_rl, ω_rr]  (wheel speeds [rad/s])
        x[14:18] = [F_fl, F_fr, F_rl, F_rr]  (lateral tire forces [N])

    Input:  u = [w_δ, w_a, v₀, v₁]
        - w_δ: Noise on the steering command [rad]
        - w_a: Noise on the acceleration command [m/s²]
        - v: Measurement noise (not used by the state update)

    Dynamics:
    --------
    Actuators track their commands as damped second-order lags
    (ω_s = 20 rad/s, ω_d = 10 rad/s, ζ = 0.7):

        δ_cmd = -k_y Y - k_ψ ψ + w_δ
        F_cmd = m (k_v (v_ref - v_x) + w_a)

    Wheel speeds relax toward the rolling speed of their corner
    (τ_w = 0.05 s, wheel radius R_w = 0.3 m, track t_w = 1.6 m), and the
    lateral tire forces relax toward C α with a relaxation length
    σ = 0.5 m:

        Ḟ_i = (V/σ)(C_i α_i - F_i)

    The rigid body is driven by the drive force and the four tire forces.

    Args:
        dt: Euler step [s]

    Returns:
        f(x, u) with x ∈ ℝ¹⁸, u ∈ ℝ⁴
    """
    x = sp.symbols("x0:18", real=True)
    u = sp.symbols("u0:4", real=True)
    X, Y, psi, vx, vy, r = x[0:6]
    delta, delta_rate, Fx, Fx_rate = x[6:10]
    omega = x[10:14]
    F_lat = x[14:18]

    parameters = _parameter_symbols()
    p = {symbol.name: symbol for symbol in parameters}
    wn_s, wn_d, zeta = 20.0, 10.0, 0.7
    tau_w, R_w, track, sigma = 0.05, 0.3, 1.6, 0.5

    V = sp.sqrt(vx**2 + p["v_eps"] ** 2)

    # Actuators
    delta_cmd = -p["k_y"] * Y - p["k_psi"] * psi + u[0]
    F_cmd = p["m"] * (p["k_v"] * (p["v_ref"] - vx) + u[1])
    delta_acc = wn_s**2 * (delta_cmd - delta) - 2 * zeta * wn_s * delta_rate
    Fx_acc = wn_d**2 * (F_cmd - Fx) - 2 * zeta * wn_d * Fx_rate

    # Wheels: front-left, front-right, rear-left, rear-right
    v_left = vx - track / 2 * r
    v_right = vx + track / 2 * r
    corner_speed = [v_left, v_right, v_left, v_right]
    omega_dot = [(v_i / R_w - w_i) / tau_w for v_i, w_i in zip(corner_speed, omega)]

    # Tire relaxation
    alpha_f = delta - (vy + p["lf"] * r) / V
    alpha_r = -(vy - p["lr"] * r) / V
    target = [
        p["Cf"] / 2 * alpha_f,
        p["Cf"] / 2 * alpha_f,
        p["Cr"] / 2 * alpha_r,
        p["Cr"] / 2 * alpha_r,
    ]
    F_lat_dot = [V / sigma * (t_i - F_i) for t_i, F_i in zip(target, F_lat)]

    F_front = F_lat[0] + F_lat[1]
    F_rear = F_lat[2] + F_lat[3]

    x_dot = [
        vx * sp.cos(psi) - vy * sp.sin(psi),
        vx * sp.sin(psi) + vy * sp.cos(psi),
        r,
        Fx / p["m"] + vy * r,
        (F_front * sp.cos(delta) + F_rear) / p["m"] - vx * r,
        (p["lf"] * F_front * sp.cos(delta) - p["lr"] * F_rear) / p["Iz"],
        delta_rate,
        delta_acc,
        Fx_rate,
        Fx_acc,
        *omega_dot,
        *F_lat_dot,
    ]

    x_next = sp.Matrix([xi + dt * fi for xi, fi in zip(x, x_dot)]).subs(parameters)
    return generate_dynamics_function(x_next, x, u)


__all__ = [
    "VEHICLE_PARAMETERS",
    "bicycle_dynamics",
    "bicycle_high_order_dynamics",
]
