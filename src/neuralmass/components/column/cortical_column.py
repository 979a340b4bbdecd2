"""Stochastic Neural-Mass Model of a Cortical Column.

This module implements the mean-field dynamics of one cortical column: an
excitatory (pyramidal) and an inhibitory population coupled through four
second-order synaptic pathways, with an activity-dependent sodium-potassium
pump providing spike-frequency adaptation.

**Membrane Dynamics**:
======================

    dVp/dt = -(I_L_p + I_ep + I_gp) / tau_p - I_KNa
    dVi/dt = -(I_L_i + I_ei + I_gi) / tau_i

with conductance-based synaptic currents I_ab = g s_ab (V_b - E_a).

**Synaptic Dynamics** (per pathway ab, rate R_ab):
===================================================

    ds_ab/dt = x_ab
    dx_ab/dt = gamma^2 (R_ab - s_ab) - 2 gamma x_ab

where R_ep = N_pp Qp + input, R_ei = N_ip Qp, R_gp = N_pi Qi, R_gi = N_ii Qi.

**Sodium Adaptation**:
======================

    dNa/dt = (alpha_Na Qp - Na_pump(Na)) / tau_Na

**Integration**:
================
A 4-stage stochastic Runge-Kutta scheme (SRK4) for additive noise. Each state
variable owns 5 slots [value, stage-1, ..., stage-4] held in one
pre-allocated buffer and overwritten in place every step. Noise enters Vp and
Vi in the first two stages and once more in the final combination. The two
draws of a step are coupled so that the net noise increment is exactly
``sqrt(dt) dphi xi1``; with ``dphi == 0`` the scheme is exactly classical RK4.

Reference: Weigenand et al. (2014), PLoS Comput Biol 10:e1003923
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Union

import torch
import torch.nn as nn

from neuralmass.components.column.column_constants import (
    COLUMN_PARAMETER_DEFAULTS,
    KNA_HILL,
    NA_KNA_HALF,
    NA_PUMP_HALF,
    SRK4_A,
    SRK4_B,
    SRK4_WEIGHTS,
    W_KNA_MAX,
)
from neuralmass.config.column_config import ColumnConfig
from neuralmass.errors import NumericalInstabilityError
from neuralmass.utils.rng import NormalStream, derive_seed

logger = logging.getLogger(__name__)


# =============================================================================
# State layout
# =============================================================================

STATE_VARIABLES = (
    "Vp",    # excitatory membrane voltage
    "Vi",    # inhibitory membrane voltage
    "Na",    # Na concentration
    "s_ep",  # PostSP from excitatory to excitatory population
    "s_ei",  # PostSP from excitatory to inhibitory population
    "s_gp",  # PostSP from inhibitory to excitatory population
    "s_gi",  # PostSP from inhibitory to inhibitory population
    "x_ep",  # derivative of s_ep
    "x_ei",  # derivative of s_ei
    "x_gp",  # derivative of s_gp
    "x_gi",  # derivative of s_gi
)
"""Names of the 11 state variables in storage order."""

STATE_INDEX = {name: i for i, name in enumerate(STATE_VARIABLES)}

NOISY_VARIABLES = ("Vp", "Vi")
"""State variables that receive additive noise, one stream each."""

N_SLOTS = 5
"""Slots per variable: [value, stage-1, stage-2, stage-3, stage-4]."""

DRAWS_PER_STEP = 2
"""Normal samples drawn per noisy variable per step."""

_VP, _VI, _NA = 0, 1, 2
_S = slice(3, 7)
_X = slice(7, 11)
_SQRT3 = math.sqrt(3.0)

Scalar = Union[float, torch.Tensor]


def _state_property(name: str, doc: str) -> property:
    index = STATE_INDEX[name]
    return property(lambda self: float(self.state[index, 0]), doc=doc)


# =============================================================================
# CORTICAL COLUMN
# =============================================================================


class CorticalColumn(nn.Module):
    """Neural-mass model of a single cortical column with SRK4 integration.

    Usage:
        >>> column = CorticalColumn(ColumnConfig(seed=7))
        >>> for t in range(n_steps):
        ...     column.set_input(stimulus.get_input(t, column.dt_ms))
        ...     column.iterate_ODE()
        >>> column.Vp  # current excitatory membrane potential (mV)

    Args:
        config: ColumnConfig with the experiment parameters
        noise_streams: Optional replacement for the owned noise streams, one
            per entry of NOISY_VARIABLES (e.g. SequenceStream in tests)
    """

    def __init__(
        self,
        config: Optional[ColumnConfig] = None,
        noise_streams: Optional[Sequence[NormalStream]] = None,
    ):
        super().__init__()
        self.config = config if config is not None else ColumnConfig()
        self.dt_ms = self.config.dt_ms

        # =====================================================================
        # Biophysical parameters (fixed, except through ColumnAccess)
        # =====================================================================
        for name, value in COLUMN_PARAMETER_DEFAULTS.items():
            setattr(self, name, float(value))
        self.sigma_p = float(self.config.sigma_p)
        self.g_KNa = float(self.config.g_KNa)
        self.dphi = float(self.config.dphi)

        # External drive, persists until the next set_input
        self.input = 0.0

        # =====================================================================
        # State buffer: one row of 5 slots per variable, overwritten in place
        # =====================================================================
        self.state: torch.Tensor
        self.register_buffer("state", torch.zeros(len(STATE_VARIABLES), N_SLOTS, dtype=torch.float64))

        self._weights: torch.Tensor
        self._gamma: torch.Tensor
        self._noisy_index: torch.Tensor
        self.register_buffer(
            "_weights", torch.tensor(SRK4_WEIGHTS, dtype=torch.float64) / 6.0, persistent=False
        )
        self.register_buffer(
            "_noisy_index",
            torch.tensor([STATE_INDEX[name] for name in NOISY_VARIABLES], dtype=torch.long),
            persistent=False,
        )
        self.register_buffer("_gamma", torch.zeros(4, dtype=torch.float64), persistent=False)
        self.refresh_synaptic_rates()

        # =====================================================================
        # Noise streams: one independent stream per noisy variable
        # =====================================================================
        self.noise_streams: List[NormalStream] = self._make_noise_streams(noise_streams)

        self.reset_state()
        logger.debug(
            "Created cortical column (sigma_p=%.3f, g_KNa=%.3f, dphi=%.3f, dt=%.3f ms)",
            self.sigma_p, self.g_KNa, self.dphi, self.dt_ms,
        )

    @classmethod
    def from_params(cls, params: Sequence[float], **kwargs) -> CorticalColumn:
        """Create a column from the ``(sigma_p, g_KNa, dphi)`` triple."""
        noise_streams = kwargs.pop("noise_streams", None)
        return cls(ColumnConfig.from_params(params, **kwargs), noise_streams=noise_streams)

    def _make_noise_streams(self, noise_streams: Optional[Sequence[NormalStream]]) -> List[NormalStream]:
        if noise_streams is not None:
            if len(noise_streams) != len(NOISY_VARIABLES):
                raise ValueError(
                    f"Expected {len(NOISY_VARIABLES)} noise streams "
                    f"({', '.join(NOISY_VARIABLES)}), got {len(noise_streams)}"
                )
            return list(noise_streams)

        seed = self.config.seed
        return [
            NormalStream(seed=None if seed is None else derive_seed(seed, name))
            for name in NOISY_VARIABLES
        ]

    def refresh_synaptic_rates(self) -> None:
        """Copy gamma_e / gamma_g into the per-pathway rate buffer (ep, ei, gp, gi)."""
        self._gamma[0:2] = self.gamma_e
        self._gamma[2:4] = self.gamma_g

    def reset_state(self) -> None:
        """Return every state variable to its resting value and clear the input.

        Noise streams are not reseeded.
        """
        self.state.zero_()
        self.state[_VP, 0] = self.E_L_p
        self.state[_VI, 0] = self.E_L_i
        self.state[_NA, 0] = self.Na_eq
        self.input = 0.0
        logger.debug("Column reset to rest (Vp=%.1f mV, Na=%.1f mM)", self.E_L_p, self.Na_eq)

    # =========================================================================
    # Public contract
    # =========================================================================

    def set_input(self, I: float) -> None:
        """Store the external drive for the next step(s)."""
        self.input = float(I)

    def iterate_ODE(self) -> None:
        """Advance all state variables by one timestep with SRK4."""
        dt = self.dt_ms
        sqrt_dt = math.sqrt(dt)

        # Two fresh samples per noisy variable. Stage and final contributions sum to
        # one Wiener increment: 0.75 (xi1 + xi2/sqrt3) + (xi1 - sqrt3 xi2) / 4 = xi1
        draws = torch.stack([stream.draw(DRAWS_PER_STEP) for stream in self.noise_streams])
        xi1 = draws[:, 0]
        xi2 = draws[:, 1]
        noise_scale = sqrt_dt * self.dphi
        stage_noise = noise_scale * (xi1 + xi2 / _SQRT3)
        final_noise = noise_scale * (xi1 - _SQRT3 * xi2) / 4.0

        state = self.state
        y0 = state[:, 0]
        for k in range(4):
            state[:, k + 1] = y0 + SRK4_A[k] * dt * self.derivatives(state[:, k])
            if SRK4_B[k] != 0.0:
                state[self._noisy_index, k + 1] += SRK4_B[k] * stage_noise

        state[:, 0] = state @ self._weights
        state[self._noisy_index, 0] += final_noise

        if self.config.check_finite and not torch.isfinite(state[:, 0]).all():
            bad = [name for name, ok in zip(STATE_VARIABLES, torch.isfinite(state[:, 0]).tolist()) if not ok]
            raise NumericalInstabilityError(f"Non-finite state after step: {', '.join(bad)}")

    def forward(self, external_input: Optional[float] = None) -> torch.Tensor:
        """Optionally set the input, advance one step and return a copy of the slot-0 values."""
        if external_input is not None:
            self.set_input(external_input)
        self.iterate_ODE()
        return self.state[:, 0].clone()

    # =========================================================================
    # Firing rates
    # =========================================================================

    def get_Qp(self, Vp: Scalar) -> torch.Tensor:
        """Pyramidal firing rate (1/ms); strictly within (0, Qp_max) for physiological Vp."""
        Vp = torch.as_tensor(Vp, dtype=torch.float64)
        return self.Qp_max / (1.0 + torch.exp(-self.C1 * (Vp - self.theta_p) / self.sigma_p))

    def get_Qi(self, Vi: Scalar) -> torch.Tensor:
        """Inhibitory firing rate (1/ms); strictly within (0, Qi_max) for physiological Vi."""
        Vi = torch.as_tensor(Vi, dtype=torch.float64)
        return self.Qi_max / (1.0 + torch.exp(-self.C1 * (Vi - self.theta_i) / self.sigma_i))

    # =========================================================================
    # Currents
    # =========================================================================

    def I_ep(self, s_ep: Scalar, Vp: Scalar) -> Scalar:
        return self.g_AMPA * s_ep * (Vp - self.E_AMPA)

    def I_ei(self, s_ei: Scalar, Vi: Scalar) -> Scalar:
        return self.g_AMPA * s_ei * (Vi - self.E_AMPA)

    def I_gp(self, s_gp: Scalar, Vp: Scalar) -> Scalar:
        return self.g_GABA * s_gp * (Vp - self.E_GABA)

    def I_gi(self, s_gi: Scalar, Vi: Scalar) -> Scalar:
        return self.g_GABA * s_gi * (Vi - self.E_GABA)

    def I_L_p(self, Vp: Scalar) -> Scalar:
        return self.g_L * (Vp - self.E_L_p)

    def I_L_i(self, Vi: Scalar) -> Scalar:
        return self.g_L * (Vi - self.E_L_i)

    def I_KNa(self, Vp: Scalar, Na: Scalar) -> Scalar:
        """Sodium-dependent potassium current onto the pyramidal population."""
        w_KNa = W_KNA_MAX / (1.0 + (NA_KNA_HALF / Na) ** KNA_HILL)
        return self.g_KNa * w_KNa * (Vp - self.E_K)

    def Na_pump(self, Na: Scalar) -> Scalar:
        """Na-K pump removal rate; zero at Na_eq, positive above it."""
        k3 = NA_PUMP_HALF ** 3
        return self.R_pump * (Na ** 3 / (Na ** 3 + k3) - self.Na_eq ** 3 / (self.Na_eq ** 3 + k3))

    # =========================================================================
    # Right-hand side
    # =========================================================================

    def derivatives(self, y: torch.Tensor) -> torch.Tensor:
        """Deterministic right-hand side for one stage.

        Args:
            y: Stage values of all 11 variables in STATE_VARIABLES order

        Returns:
            Time derivatives in the same order (per ms)
        """
        Vp, Vi, Na = y[_VP], y[_VI], y[_NA]
        s_ep, s_ei, s_gp, s_gi = y[_S]
        x = y[_X]

        Qp = self.get_Qp(Vp)
        Qi = self.get_Qi(Vi)

        dVp = -(self.I_L_p(Vp) + self.I_ep(s_ep, Vp) + self.I_gp(s_gp, Vp)) / self.tau_p - self.I_KNa(Vp, Na)
        dVi = -(self.I_L_i(Vi) + self.I_ei(s_ei, Vi) + self.I_gi(s_gi, Vi)) / self.tau_i
        dNa = (self.alpha_Na * Qp - self.Na_pump(Na)) / self.tau_Na

        rates = torch.stack((
            self.N_pp * Qp + self.input,
            self.N_ip * Qp,
            self.N_pi * Qi,
            self.N_ii * Qi,
        ))
        dx = self._gamma ** 2 * (rates - y[_S]) - 2.0 * self._gamma * x

        return torch.cat((torch.stack((dVp, dVi, dNa)), x, dx))

    # =========================================================================
    # Read access
    # =========================================================================

    Vp = _state_property("Vp", "Excitatory membrane potential (mV).")
    Vi = _state_property("Vi", "Inhibitory membrane potential (mV).")
    Na = _state_property("Na", "Intracellular sodium concentration (mM).")
    s_ep = _state_property("s_ep", "PSP from excitatory to excitatory population.")
    s_ei = _state_property("s_ei", "PSP from excitatory to inhibitory population.")
    s_gp = _state_property("s_gp", "PSP from inhibitory to excitatory population.")
    s_gi = _state_property("s_gi", "PSP from inhibitory to inhibitory population.")
    x_ep = _state_property("x_ep", "Derivative of s_ep.")
    x_ei = _state_property("x_ei", "Derivative of s_ei.")
    x_gp = _state_property("x_gp", "Derivative of s_gp.")
    x_gi = _state_property("x_gi", "Derivative of s_gi.")

    def state_snapshot(self) -> Dict[str, float]:
        """Slot-0 value of every state variable."""
        values = self.state[:, 0].tolist()
        return dict(zip(STATE_VARIABLES, values))
