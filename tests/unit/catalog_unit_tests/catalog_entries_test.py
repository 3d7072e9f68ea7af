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
Unit Tests for the Catalog Entries
==================================

Checks every registered system:

- Declared dimensions and model kind
- Uncertainty sets agree with the model in every supported mode
- 'standard' builds are deterministic
- One step of the dynamics from the set centers is finite
- Entry-specific fixtures (chain of integrators, pedestrian, tanks, ...)
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from ddreach import available_systems, load_dynamics, supported_modes
from ddreach.catalog.entries.benchmarks import TANK30_R0_SEED
from ddreach.catalog.entries.fixtures import five_state_matrices
from ddreach.catalog.entries.linear import PEDESTRIAN_ARX_P_TRUE, PEDESTRIAN_P_TRUE
from ddreach.catalog.entries.narx import LIPSCHITZ_P_TRUE, NARX_P_TRUE
from ddreach.exceptions import DimensionMismatchError
from ddreach.systems.base.system_model import SystemKind

# (state_dim, input_dim, output_dim), kind
EXPECTED = {
    "chain_of_integrators": ((4, 4, 2), SystemKind.LINEAR_DT),
    "pedestrian": ((4, 4, 2), SystemKind.LINEAR_DT),
    "pedestrianARX": ((4, 4, 2), SystemKind.LINEAR_ARX),
    "testSys": ((5, 1, 1), SystemKind.LINEAR_DT),
    "testSys2": ((5, 1, 5), SystemKind.LINEAR_DT),
    "mockSys": ((4, 1, 4), SystemKind.LINEAR_DT),
    "mockSysARX": ((4, 1, 4), SystemKind.LINEAR_ARX),
    "lorenz": ((3, 3, 2), SystemKind.NONLINEAR_DT),
    "lorenz_2D": ((2, 2, 2), SystemKind.NONLINEAR_DT),
    "bicycle": ((6, 8, 2), SystemKind.NONLINEAR_DT),
    "bicycleHO": ((18, 4, 2), SystemKind.NONLINEAR_DT),
    "cstrDiscr": ((2, 4, 2), SystemKind.NONLINEAR_DT),
    "tank": ((6, 4, 2), SystemKind.NONLINEAR_DT),
    "tank30": ((30, 15, 6), SystemKind.NONLINEAR_DT),
    "tank60": ((60, 30, 2), SystemKind.NONLINEAR_DT),
    "NARX": ((4, 2, 2), SystemKind.NONLINEAR_ARX),
    "Square": ((2, 2, 2), SystemKind.NONLINEAR_ARX),
    "example_NARX": ((2, 2, 2), SystemKind.NONLINEAR_ARX),
    "polyNARX": ((2, 2, 2), SystemKind.NONLINEAR_DT),
    "lipschitzNARX": ((2, 2, 2), SystemKind.NONLINEAR_ARX),
    "lipschitzSysDT": ((2, 2, 2), SystemKind.NONLINEAR_DT),
    "test_nlARX": ((5, 1, 5), SystemKind.NONLINEAR_ARX),
    "test_nlSysDT": ((5, 1, 5), SystemKind.NONLINEAR_DT),
}

MODE_CASES = [
    (identifier, mode) for identifier in EXPECTED for mode in supported_modes(identifier)
]


def _load(identifier, mode="standard", **kwargs):
    return load_dynamics(identifier, mode=mode, rng=np.random.default_rng(0), **kwargs)


# ============================================================================
# Catalog-wide Properties
# ============================================================================


class TestCatalogContents:
    """Test the set of registered identifiers"""

    def test_all_entries_registered(self):
        assert set(available_systems()) == set(EXPECTED)
        assert len(available_systems()) == len(EXPECTED)


class TestEntryDimensions:
    """Test every entry in every mode it defines"""

    @pytest.mark.parametrize("identifier,mode", MODE_CASES)
    def test_dimensions_and_kind(self, identifier, mode):
        dims, kind = EXPECTED[identifier]

        system, uncertainty, _ = _load(identifier, mode)

        assert system.dims == dims
        assert system.kind is kind
        assert uncertainty.R0.dim == system.state_dim
        assert uncertainty.U.dim == system.input_dim

    @pytest.mark.parametrize("identifier,mode", MODE_CASES)
    def test_noise_factors_compose_input_set(self, identifier, mode):
        """Test U = W x V wherever the entry separates the noise"""
        _, uncertainty, _ = _load(identifier, mode)

        if uncertainty.separates_noise:
            assert uncertainty.U.dim == uncertainty.W.dim + uncertainty.V.dim
            assert_array_equal(
                uncertainty.U.center,
                np.concatenate([uncertainty.W.center, uncertainty.V.center]),
            )

    @pytest.mark.parametrize("identifier", list(EXPECTED))
    def test_standard_is_deterministic(self, identifier):
        """Test two 'standard' builds give identical sets, whatever the rng"""
        first = load_dynamics(identifier, rng=np.random.default_rng(1))
        second = load_dynamics(identifier, rng=np.random.default_rng(2))

        assert first.uncertainty.R0 == second.uncertainty.R0
        assert first.uncertainty.U == second.uncertainty.U


class TestEntryDynamics:
    """Test one update of every entry from the set centers"""

    @pytest.mark.parametrize("identifier", list(EXPECTED))
    def test_one_step_is_finite(self, identifier):
        system, uncertainty, _ = _load(identifier)
        x = uncertainty.R0.center
        u = uncertainty.U.center

        if system.kind in (SystemKind.LINEAR_ARX, SystemKind.NONLINEAR_ARX):
            result = system.step(x, np.tile(u, system.n_p + 1))
            assert result.shape == (system.output_dim,)
        else:
            result = system.step(x, u)
            assert result.shape == (system.state_dim,)
            assert system.output(x, u).shape == (system.output_dim,)

        assert np.all(np.isfinite(result))


# ============================================================================
# Entry-specific Fixtures
# ============================================================================


class TestChainOfIntegrators:
    """Test the scalable pedestrian-type chain"""

    def test_standard_sets(self):
        """Test R0 is the origin and U = W x V with the pedestrian noise boxes"""
        _, uncertainty, p_true = _load("chain_of_integrators")

        assert_array_equal(uncertainty.R0.center, np.zeros(4))
        assert uncertainty.R0.generators.shape == (4, 0)
        assert uncertainty.R0.is_point

        assert_allclose(uncertainty.W.center, [0.1, 0.1])
        assert_allclose(uncertainty.W.generators, 0.2 * np.eye(2))
        assert_allclose(uncertainty.V.center, [-0.05, -0.05])
        assert_allclose(uncertainty.V.generators, [[0.1, 0.0, 0.1], [0.0, 0.1, 0.1]])

        assert_allclose(uncertainty.U.center, [0.1, 0.1, -0.05, -0.05])
        assert uncertainty.U.generators.shape == (4, 5)
        assert_allclose(uncertainty.U.generators[:2, :2], 0.2 * np.eye(2))
        assert_allclose(uncertainty.U.generators[2:, 2:], uncertainty.V.generators)
        assert_array_equal(uncertainty.U.generators[:2, 2:], np.zeros((2, 3)))
        assert p_true is None

    def test_structure(self):
        system = _load("chain_of_integrators").system

        assert_array_equal(system.A, [[0, 1, 0, 0], [0, 0, 0, 0], [0, 0, 0, 1], [0, 0, 0, 0]])
        assert_array_equal(system.C, [[1, 0, 0, 0], [0, 0, 1, 0]])
        assert_array_equal(system.D, [[0, 0, 1, 0], [0, 0, 0, 1]])

    def test_dimension_override(self):
        system, uncertainty, _ = _load("chain_of_integrators", dim=6)

        assert system.dims == (6, 4, 2)
        assert uncertainty.R0.dim == 6
        assert system.B[2, 0] == 1.0
        assert system.B[5, 1] == 1.0
        assert system.C[1, 3] == 1.0

    def test_odd_dimension_raises(self):
        with pytest.raises(DimensionMismatchError):
            _load("chain_of_integrators", dim=5)

    def test_literal_sets_do_not_scale(self):
        """Test the four-dimensional 'diag' literal is rejected for n = 6"""
        with pytest.raises(DimensionMismatchError):
            _load("chain_of_integrators", mode="diag", dim=6)


class TestPedestrian:
    """Test the pedestrian state-space and ARX models"""

    def test_p_true(self):
        assert_allclose(_load("pedestrian").p_true, [1.0, 0.01, 5e-5, 0.01])
        assert_allclose(_load("pedestrianARX").p_true, [2.0, -1.0, 5e-5, -2.0])

    def test_p_true_is_read_only(self):
        p_true = _load("pedestrian").p_true

        with pytest.raises(ValueError):
            p_true[0] = 0.0

    def test_matrices_follow_parameters(self):
        system = _load("pedestrian").system

        assert system.A[0, 0] == 1.0
        assert system.A[0, 2] == 0.01
        assert system.B[0, 0] == 5e-5
        assert system.B[2, 0] == 0.01

    def test_parameter_override(self):
        """Test params change the model while p_true keeps the ground truth"""
        system, _, p_true = _load("pedestrian", params=[0.9, 0.02, 0.0, 0.5])

        assert system.A[0, 0] == 0.9
        assert system.A[1, 3] == 0.02
        assert system.B[3, 1] == 0.5
        assert_allclose(p_true, [1.0, 0.01, 5e-5, 0.01])

    def test_parameter_override_length_checked(self):
        with pytest.raises(DimensionMismatchError):
            _load("pedestrian", params=[1.0, 2.0])

    def test_arx_history_origin_in_every_mode(self):
        for mode in ("standard", "diag", "rand"):
            R0 = _load("pedestrianARX", mode).uncertainty.R0

            assert_array_equal(R0.center, np.zeros(4))
            assert R0.is_point

    def test_arx_coefficients(self):
        system = _load("pedestrianARX").system

        assert system.n_p == 2
        assert_array_equal(system.A_bar[0], 2.0 * np.eye(2))
        assert_array_equal(system.A_bar[1], -1.0 * np.eye(2))
        assert_array_equal(system.B_bar[0], [[0, 0, 1, 0], [0, 0, 0, 1]])

    def test_rand_literal(self):
        """Test 'rand' returns the hand-written fixture, not a draw"""
        first = load_dynamics("pedestrian", mode="rand", rng=np.random.default_rng(1))
        second = load_dynamics("pedestrian", mode="rand", rng=np.random.default_rng(2))

        assert_allclose(first.uncertainty.R0.center, [-0.76, -9.68, 0.21, -5.42])
        assert first.uncertainty.U == second.uncertainty.U


class TestFiveStateSystems:
    """Test the shared five-state test system and its renderings"""

    def test_sets_identical_in_every_mode(self):
        for mode in ("standard", "diag", "rand"):
            _, uncertainty, _ = _load("testSys", mode)

            assert_array_equal(uncertainty.R0.center, np.ones(5))
            assert_allclose(uncertainty.R0.generators, 0.1 * np.eye(5))
            assert_array_equal(uncertainty.U.center, [10.0])
            assert_array_equal(uncertainty.U.generators, [[0.25]])

    def test_zero_feedthrough(self):
        system = _load("testSys").system

        assert system.C.shape == (1, 5)
        assert_array_equal(system.D, [[0.0]])

    def test_renderings_agree(self):
        """Test testSys2, test_nlSysDT and test_nlARX take the same step"""
        Ad, Bd = five_state_matrices()
        x = np.linspace(-1.0, 1.0, 5)
        u = np.array([0.3])
        expected = Ad @ x + Bd @ u

        assert_allclose(_load("testSys2").system.step(x, u), expected)
        assert_allclose(_load("test_nlSysDT").system.step(x, u), expected)
        assert_allclose(_load("test_nlARX").system.step(x, np.array([0.3, 99.0])), expected)

    def test_dimension_override_ignored(self):
        """Test dim only affects scalable entries"""
        assert _load("testSys", dim=9).system.dims == (5, 1, 1)


class TestMockSystems:
    """Test the scalable mock systems"""

    def test_dimension_override(self):
        system, uncertainty, _ = _load("mockSys", dim=7)

        assert system.dims == (7, 1, 7)
        assert uncertainty.R0.dim == 7
        assert_allclose(system.A[0, 1], 1.01)

    def test_arx_matches_state_space(self):
        """Test y(k) = A y(k-1) + B u(k-1) reproduces the state update"""
        x = np.array([0.1, -0.2, 0.3, 0.0])
        u_prev = np.array([0.5])
        sys = _load("mockSys").system
        arx = _load("mockSysARX").system

        assert_allclose(arx.step(x, np.concatenate([[7.0], u_prev])), sys.step(x, u_prev))

    def test_standard_input_box(self):
        _, uncertainty, _ = _load("mockSys")

        assert_array_equal(uncertainty.U.center, [0.0])
        assert_allclose(uncertainty.U.generators, [[0.2]])
        assert_allclose(uncertainty.R0.generators, 0.05 * np.eye(4))


class TestBenchmarkEntries:
    """Test the nonlinear benchmark fixtures"""

    @pytest.mark.parametrize("identifier", ["lorenz", "lorenz_2D"])
    def test_lorenz_has_empty_measurement_noise(self, identifier):
        _, uncertainty, _ = _load(identifier)

        assert uncertainty.V.dim == 0
        assert uncertainty.U == uncertainty.W

    def test_lorenz_p_true(self):
        assert_allclose(_load("lorenz").p_true, [10.0, 28.0, 8.0 / 3.0])
        assert_allclose(_load("lorenz_2D").p_true, [10.0, 28.0])

    def test_lorenz_standard_sets(self):
        _, uncertainty, _ = _load("lorenz")

        assert_allclose(uncertainty.R0.center, [2.0, -1.0, 4.0])
        assert_allclose(uncertainty.R0.generators, 0.2 * np.eye(3))
        assert_allclose(uncertainty.W.generators, np.diag([0.1, 2.0, 0.2]))

    def test_lorenz_parameter_override_changes_dynamics(self):
        x = np.array([1.0, 2.0, 3.0])
        nominal = _load("lorenz").system.step(x, np.zeros(3))
        perturbed = _load("lorenz", params=[11.0, 28.0, 8.0 / 3.0]).system.step(x, np.zeros(3))

        assert_allclose(perturbed - nominal, [0.01 * (2.0 - 1.0), 0.0, 0.0], atol=1e-12)

    @pytest.mark.parametrize("identifier", ["lorenz", "lorenz_2D"])
    def test_lorenz_output_does_not_alias_state(self, identifier):
        system = _load(identifier).system
        x = np.ones(system.state_dim)

        y = system.output(x, np.zeros(system.input_dim))
        y[0] = 5.0

        assert_array_equal(x, np.ones(system.state_dim))

    @pytest.mark.parametrize(
        "defaults", [PEDESTRIAN_P_TRUE, PEDESTRIAN_ARX_P_TRUE, NARX_P_TRUE, LIPSCHITZ_P_TRUE]
    )
    def test_ground_truth_parameters_are_read_only(self, defaults):
        with pytest.raises(ValueError):
            defaults[0] = 0.0

    def test_bicycle_output_adds_measurement_noise(self):
        system = _load("bicycle").system
        x = np.array([0.0, 0.0, 0.0, 5.0, 0.2, 0.0])
        u = np.concatenate([np.zeros(6), [0.1, -0.1]])

        assert_allclose(system.output(x, u), [5.1, 0.1])

    def test_tank_cascade_r0_is_reproducible(self):
        """Test the large cascades draw their initial levels from a fixed seed"""
        expected = 12.0 * np.random.default_rng(TANK30_R0_SEED).random(30)

        R0 = _load("tank30").uncertainty.R0

        assert_allclose(R0.center, expected)
        assert np.all((R0.center >= 0.0) & (R0.center < 12.0))

    def test_tank30_noise_split(self):
        _, uncertainty, _ = _load("tank30")

        assert uncertainty.W.dim == 9
        assert uncertainty.V.dim == 6

    @pytest.mark.parametrize("identifier", ["cstrDiscr", "tank", "bicycleHO", "tank30", "tank60"])
    def test_standard_only_entries(self, identifier):
        assert supported_modes(identifier) == ("standard",)


class TestNARXEntries:
    """Test the identification entries"""

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("NARX", [0.8, 1.2]),
            ("Square", [0.8, 1.2]),
            ("example_NARX", [1.0, -0.5]),
            ("polyNARX", [1.5, -0.8]),
            ("lipschitzNARX", [0.6, -1.2]),
            ("lipschitzSysDT", [0.6, -1.2]),
        ],
    )
    def test_p_true(self, identifier, expected):
        assert_allclose(_load(identifier).p_true, expected)

    @pytest.mark.parametrize(
        "identifier", ["chain_of_integrators", "testSys", "test_nlARX", "tank"]
    )
    def test_entries_without_ground_truth(self, identifier):
        assert _load(identifier).p_true is None

    def test_narx_history_lengths(self):
        assert _load("NARX").system.n_p == 2
        assert _load("Square").system.n_p == 1

    def test_narx_r0_is_history_origin(self):
        _, uncertainty, _ = _load("NARX")

        assert_array_equal(uncertainty.R0.center, np.zeros(4))
        assert uncertainty.R0.is_point

    def test_narx_parameter_override(self):
        y_hist = np.array([2.0, 1.0, 0.0, 0.0])
        u_hist = np.array([0.0, 0.0, 1.0, 0.0, 0.0, 1.0])

        result = _load("NARX", params=[0.0, 0.0]).system.step(y_hist, u_hist)

        assert_allclose(result, [1.0, 1.0])

    def test_example_narx_model_name(self):
        assert _load("example_NARX").system.name == "customNARX"

    def test_lipschitz_renderings_agree(self):
        z = np.array([0.4, -0.3])
        u = np.array([0.1, 0.2])

        arx = _load("lipschitzNARX").system.step(z, np.concatenate([u, np.zeros(2)]))
        state_space = _load("lipschitzSysDT").system.step(z, u)

        assert_allclose(arx, state_space)
