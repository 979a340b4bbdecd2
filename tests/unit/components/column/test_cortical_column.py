"""
Unit tests for the cortical column SRK4 integrator.

Test Coverage:
- Resting initial state and reset
- Determinism under identical seeds
- Reduction to classical RK4 without noise (independent reference integrator)
- Net noise increment and per-step noise variance
- Noise consumption per step
- Firing-rate bounds, near-equilibrium at rest, sodium relaxation
- Nonlinear response to input scaling
"""

import logging
import math

import numpy as np
import pytest
import torch

from neuralmass import ColumnAccess, ColumnConfig, CorticalColumn, STATE_VARIABLES
from neuralmass.components.column import DRAWS_PER_STEP, E_L_I, E_L_P, NA_EQ, QI_MAX, QP_MAX
from neuralmass.errors import ConfigurationError, NumericalInstabilityError
from neuralmass.utils.rng import NormalStream, SequenceStream


# =============================================================================
# Independent reference implementation (plain floats)
# =============================================================================


def reference_rhs(y, sigma_p, g_KNa, I):
    Vp, Vi, Na, s_ep, s_ei, s_gp, s_gi, x_ep, x_ei, x_gp, x_gi = y
    c1 = math.pi / math.sqrt(3.0)
    Qp = 30e-3 / (1.0 + math.exp(-c1 * (Vp + 58.5) / sigma_p))
    Qi = 60e-3 / (1.0 + math.exp(-c1 * (Vi + 58.5) / 6.0))
    w_KNa = 0.37 / (1.0 + (38.7 / Na) ** 3.5)
    pump = 0.09 * (Na ** 3 / (Na ** 3 + 3375.0) - 9.5 ** 3 / (9.5 ** 3 + 3375.0))
    ge, gg = 70e-3, 58.6e-3
    return [
        -((Vp + 66.0) + s_ep * Vp + s_gp * (Vp + 70.0)) / 30.0 - g_KNa * w_KNa * (Vp + 100.0),
        -((Vi + 64.0) + s_ei * Vi + s_gi * (Vi + 70.0)) / 30.0,
        2.0 * Qp - pump,
        x_ep,
        x_ei,
        x_gp,
        x_gi,
        ge ** 2 * (120.0 * Qp + I - s_ep) - 2.0 * ge * x_ep,
        ge ** 2 * (72.0 * Qp - s_ei) - 2.0 * ge * x_ei,
        gg ** 2 * (90.0 * Qi - s_gp) - 2.0 * gg * x_gp,
        gg ** 2 * (90.0 * Qi - s_gi) - 2.0 * gg * x_gi,
    ]


def reference_rk4_step(y, dt, sigma_p, g_KNa, I):
    def shifted(base, k, h):
        return [b + h * d for b, d in zip(base, k)]

    k1 = reference_rhs(y, sigma_p, g_KNa, I)
    k2 = reference_rhs(shifted(y, k1, dt / 2), sigma_p, g_KNa, I)
    k3 = reference_rhs(shifted(y, k2, dt / 2), sigma_p, g_KNa, I)
    k4 = reference_rhs(shifted(y, k3, dt), sigma_p, g_KNa, I)
    return [
        yi + dt / 6.0 * (a + 2 * b + 2 * c + d)
        for yi, a, b, c, d in zip(y, k1, k2, k3, k4)
    ]


def resting_state():
    return [-66.0, -64.0, 9.5] + [0.0] * 8


class CountingStream(NormalStream):
    """NormalStream that counts how many samples were drawn."""

    def __init__(self, seed=None):
        super().__init__(seed=seed)
        self.n_drawn = 0
        self.n_calls = 0

    def draw(self, n=1):
        self.n_drawn += n
        self.n_calls += 1
        return super().draw(n)


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    """Test column construction and resting state."""

    def test_resting_initial_values(self, quiet_column):
        """All variables start at their biophysical resting values."""
        assert quiet_column.Vp == E_L_P
        assert quiet_column.Vi == E_L_I
        assert quiet_column.Na == NA_EQ
        for name in STATE_VARIABLES[3:]:
            assert getattr(quiet_column, name) == 0.0

    def test_all_slots_consistent_at_start(self, quiet_column):
        """Scratch slots are zero before the first step."""
        assert quiet_column.state.shape == (11, 5)
        assert quiet_column.state.dtype == torch.float64
        assert torch.all(quiet_column.state[:, 1:] == 0.0)

    def test_from_params_triple(self):
        """The (sigma_p, g_KNa, dphi) triple maps onto the column parameters."""
        column = CorticalColumn.from_params((5.0, 0.8, 0.5), seed=3)
        assert column.sigma_p == 5.0
        assert column.g_KNa == 0.8
        assert column.dphi == 0.5
        assert column.config.seed == 3

    def test_default_config(self):
        """A column without config uses the default experiment parameters."""
        column = CorticalColumn()
        assert column.config.as_params() == (4.0, 1.33, 2.0)
        assert column.dt_ms == pytest.approx(0.1)

    def test_wrong_number_of_noise_streams(self):
        """Injected streams must match the noisy variables one-to-one."""
        with pytest.raises(ValueError, match="Expected 2 noise streams"):
            CorticalColumn(ColumnConfig(), noise_streams=[NormalStream(seed=1)])

    def test_non_finite_parameter_rejected(self):
        with pytest.raises(ConfigurationError):
            CorticalColumn.from_params((float("nan"), 1.33, 2.0))

    def test_snapshot_has_every_variable(self, quiet_column):
        snapshot = quiet_column.state_snapshot()
        assert tuple(snapshot) == STATE_VARIABLES
        assert snapshot["Vp"] == E_L_P


# =============================================================================
# Integration
# =============================================================================


class TestIntegration:
    """Test the SRK4 step."""

    def test_input_persists_between_steps(self, quiet_column):
        """set_input is not auto-reset by iterate_ODE."""
        quiet_column.set_input(3.0)
        quiet_column.iterate_ODE()
        quiet_column.iterate_ODE()
        assert quiet_column.input == 3.0

    def test_determinism_with_identical_seeds(self):
        """Identically seeded columns produce bit-identical trajectories."""
        a = CorticalColumn(ColumnConfig(seed=99))
        b = CorticalColumn(ColumnConfig(seed=99))
        for step in range(200):
            drive = 1.0 if 50 <= step < 80 else 0.0
            a.set_input(drive)
            b.set_input(drive)
            a.iterate_ODE()
            b.iterate_ODE()
            assert torch.equal(a.state[:, 0], b.state[:, 0])

    def test_different_seeds_diverge(self):
        a = CorticalColumn(ColumnConfig(seed=1))
        b = CorticalColumn(ColumnConfig(seed=2))
        for _ in range(20):
            a.iterate_ODE()
            b.iterate_ODE()
        assert a.Vp != b.Vp

    def test_noise_streams_are_independent_per_variable(self):
        """The two owned streams of a seeded column are seeded differently."""
        column = CorticalColumn(ColumnConfig(seed=5))
        assert column.noise_streams[0].seed != column.noise_streams[1].seed

    @pytest.mark.parametrize("drive", [0.0, 0.5])
    def test_zero_noise_reduces_to_rk4(self, dt_ms, drive):
        """Without noise the column matches an independent classical RK4."""
        column = CorticalColumn(ColumnConfig(dphi=0.0, dt_ms=dt_ms, seed=0))
        column.set_input(drive)
        y = resting_state()
        for _ in range(10):
            column.iterate_ODE()
            y = reference_rk4_step(y, dt_ms, 4.0, 1.33, drive)

        torch.testing.assert_close(
            column.state[:, 0], torch.tensor(y, dtype=torch.float64), rtol=0.0, atol=1e-9
        )

    @pytest.mark.parametrize(
        "xi, expected_gain",
        [((1.0, 0.0), 1.0), ((0.0, 1.0), 0.0), ((-2.0, 3.0), -2.0)],
    )
    def test_scripted_noise_increment(self, dt_ms, xi, expected_gain):
        """One step adds sqrt(dt) dphi xi1 to Vp and Vi; xi2 only shapes the stages."""
        dphi = 0.01
        streams = [SequenceStream(list(xi)), SequenceStream(list(xi))]
        noisy = CorticalColumn(ColumnConfig(dphi=dphi, dt_ms=dt_ms), noise_streams=streams)
        quiet = CorticalColumn(ColumnConfig(dphi=0.0, dt_ms=dt_ms, seed=0))
        noisy.iterate_ODE()
        quiet.iterate_ODE()

        unit = math.sqrt(dt_ms) * dphi
        assert (noisy.Vp - quiet.Vp) / unit == pytest.approx(expected_gain, abs=1e-2)
        assert (noisy.Vi - quiet.Vi) / unit == pytest.approx(expected_gain, abs=1e-2)

    def test_noise_variance_per_step(self, dt_ms):
        """Single steps from rest spread Vp and Vi with variance dphi^2 dt."""
        dphi = 2.0
        n_trials = 4000
        quiet = CorticalColumn(ColumnConfig(dphi=0.0, dt_ms=dt_ms, seed=0))
        quiet.iterate_ODE()
        noisy = CorticalColumn(ColumnConfig(dphi=dphi, dt_ms=dt_ms, seed=21))

        increments = np.empty((n_trials, 2))
        for trial in range(n_trials):
            noisy.reset_state()
            noisy.iterate_ODE()
            increments[trial] = (noisy.Vp - quiet.Vp, noisy.Vi - quiet.Vi)

        ratio = increments.var(axis=0) / (dphi ** 2 * dt_ms)
        np.testing.assert_allclose(ratio, [1.0, 1.0], atol=0.1)
        assert np.all(np.abs(increments.mean(axis=0)) < 4.0 * dphi * math.sqrt(dt_ms / n_trials))

    def test_noise_only_reaches_noisy_variables_directly(self, dt_ms):
        """Positive Vp noise raises Vp, negative Vi noise lowers Vi."""
        streams = [SequenceStream([2.0, 0.0]), SequenceStream([-2.0, 0.0])]
        noisy = CorticalColumn(ColumnConfig(dphi=1.0, dt_ms=dt_ms), noise_streams=streams)
        quiet = CorticalColumn(ColumnConfig(dphi=0.0, dt_ms=dt_ms, seed=0))
        noisy.iterate_ODE()
        quiet.iterate_ODE()

        assert noisy.Vp > quiet.Vp
        assert noisy.Vi < quiet.Vi

    @pytest.mark.parametrize("dphi", [0.0, 2.0])
    def test_two_draws_per_noisy_variable_per_step(self, dphi):
        """Every step draws exactly 2 samples from each stream, even without noise."""
        streams = [CountingStream(seed=1), CountingStream(seed=2)]
        column = CorticalColumn(ColumnConfig(dphi=dphi), noise_streams=streams)
        n_steps = 37
        for _ in range(n_steps):
            column.iterate_ODE()

        for stream in streams:
            assert stream.n_drawn == DRAWS_PER_STEP * n_steps
            assert stream.n_calls == n_steps

    def test_reset_state_restores_rest(self, noisy_column):
        for _ in range(50):
            noisy_column.set_input(2.0)
            noisy_column.iterate_ODE()
        noisy_column.reset_state()
        assert noisy_column.Vp == E_L_P
        assert noisy_column.Na == NA_EQ
        assert noisy_column.input == 0.0
        assert torch.all(noisy_column.state[:, 1:] == 0.0)

    def test_reset_state_is_logged(self, quiet_column, caplog):
        with caplog.at_level(logging.DEBUG, logger="neuralmass.components.column.cortical_column"):
            quiet_column.reset_state()
        assert any("reset to rest" in record.getMessage() for record in caplog.records)

    def test_forward_returns_slot_zero_copy(self, quiet_column):
        values = quiet_column(1.0)
        assert quiet_column.input == 1.0
        torch.testing.assert_close(values, quiet_column.state[:, 0])
        values[0] = 123.0
        assert quiet_column.Vp != 123.0


# =============================================================================
# Model properties
# =============================================================================


class TestModelProperties:
    """Test biophysical properties of the right-hand side."""

    @pytest.mark.parametrize("sigma_p", [3.0, 4.0, 6.0])
    def test_firing_rates_strictly_bounded(self, sigma_p):
        """Sigmoid rates stay strictly within (0, Q_max) over the physiological range."""
        column = CorticalColumn(ColumnConfig(sigma_p=sigma_p, seed=0))
        V = torch.linspace(-100.0, -20.0, 801, dtype=torch.float64)

        Qp = column.get_Qp(V)
        Qi = column.get_Qi(V)

        assert torch.all(Qp > 0.0) and torch.all(Qp < QP_MAX)
        assert torch.all(Qi > 0.0) and torch.all(Qi < QI_MAX)
        assert torch.all(torch.diff(Qp) > 0.0)

    def test_firing_rate_half_max_at_threshold(self, quiet_column):
        assert float(quiet_column.get_Qp(-58.5)) == pytest.approx(QP_MAX / 2)
        assert float(quiet_column.get_Qi(-58.5)) == pytest.approx(QI_MAX / 2)

    def test_pump_restoring_sign(self, quiet_column):
        """The pump removes sodium above equilibrium and vanishes at it."""
        assert float(quiet_column.Na_pump(torch.tensor(NA_EQ, dtype=torch.float64))) == pytest.approx(0.0, abs=1e-15)
        assert float(quiet_column.Na_pump(torch.tensor(NA_EQ + 3.0, dtype=torch.float64))) > 0.0
        assert float(quiet_column.Na_pump(torch.tensor(NA_EQ - 3.0, dtype=torch.float64))) < 0.0

    def test_rest_is_near_equilibrium(self, quiet_column):
        """Without input or noise, 10 steps from rest barely move the state."""
        start = quiet_column.state_snapshot()
        for _ in range(10):
            quiet_column.iterate_ODE()
        end = quiet_column.state_snapshot()

        assert abs(end["Vp"] - start["Vp"]) < 0.5
        assert abs(end["Vi"] - start["Vi"]) < 0.5
        assert abs(end["Na"] - start["Na"]) < 0.05
        for name in STATE_VARIABLES[3:]:
            assert abs(end[name] - start[name]) < 0.01

    def test_sodium_relaxes_monotonically(self, quiet_column):
        """An elevated Na concentration decays monotonically toward Na_eq."""
        access = ColumnAccess(quiet_column)
        offset = 5.0
        access.set_state("Na", NA_EQ + offset)

        na = np.empty(3000)
        for step in range(na.shape[0]):
            quiet_column.iterate_ODE()
            na[step] = quiet_column.Na

        assert np.all(np.diff(na) <= 1e-12)
        assert na[-1] > NA_EQ
        assert na[-1] - NA_EQ < 0.8 * offset

    def test_response_to_input_is_nonlinear(self, dt_ms):
        """Scaling the input 10x does not scale the Vp response 10x."""

        def final_vp(drive):
            column = CorticalColumn(ColumnConfig(dphi=0.0, dt_ms=dt_ms, seed=0))
            column.set_input(drive)
            for _ in range(500):
                column.iterate_ODE()
            assert all(math.isfinite(v) for v in column.state_snapshot().values())
            return column.Vp

        baseline = final_vp(0.0)
        small = final_vp(1.0) - baseline
        large = final_vp(10.0) - baseline

        assert small != 0.0
        assert abs(large / small - 10.0) > 0.5

    def test_check_finite_flags_non_finite_state(self):
        column = CorticalColumn(ColumnConfig(dphi=0.0, seed=0, check_finite=True))
        column.state[0, 0] = float("nan")
        with pytest.raises(NumericalInstabilityError, match="Vp"):
            column.iterate_ODE()

    def test_unchecked_column_does_not_raise(self, quiet_column):
        quiet_column.state[0, 0] = float("nan")
        quiet_column.iterate_ODE()
        assert math.isnan(quiet_column.Vp)
