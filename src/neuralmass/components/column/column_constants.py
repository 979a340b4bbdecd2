"""
Fixed biophysical constants of the cortical column model.

Values follow the cortical module of Weigenand et al. (2014), grouped by
physical category. Three of them (SIGMA_P, G_KNA, DPHI) are only defaults:
they are supplied per column through ``ColumnConfig`` and vary across
experiments.

Biological Basis:
=================

Firing rates:
-------------
Population firing rates are a sigmoid of the mean membrane potential,
    Q(V) = Q_max / (1 + exp(-C1 (V - theta) / sigma))
with C1 = pi / sqrt(3) so that sigma is the standard deviation of the
underlying threshold distribution.

Synapses:
---------
Each of the four pathways (e->p, e->i, g->p, g->i) is a second-order
low-pass filter of the presynaptic rate with rise constant gamma.

Sodium-dependent potassium current:
-----------------------------------
Intracellular Na accumulates with excitatory firing and is removed by the
Na-K pump; the resulting K(Na) current hyperpolarizes the pyramidal
population and provides spike-frequency adaptation.

References:
-----------
- Weigenand, Schellenberger Costa, Ngo, Claussen, Martinetz (2014):
  Characterization of K-Complexes and Slow Wave Activity in a Neural Mass
  Model. PLoS Comput Biol 10:e1003923
- Benda & Herz (2003): A universal model for spike-frequency adaptation
"""

import math

# =============================================================================
# MEMBRANE TIME CONSTANTS (ms)
# =============================================================================

TAU_P = 30.0
"""Pyramidal membrane time constant (ms)."""

TAU_I = 30.0
"""Inhibitory membrane time constant (ms)."""

# =============================================================================
# FIRING RATE SIGMOIDS
# =============================================================================

QP_MAX = 30.0e-3
"""Maximum pyramidal firing rate (1/ms)."""

QI_MAX = 60.0e-3
"""Maximum inhibitory firing rate (1/ms)."""

THETA_P = -58.5
"""Pyramidal sigmoid threshold (mV)."""

THETA_I = -58.5
"""Inhibitory sigmoid threshold (mV)."""

SIGMA_P = 4.0
"""Default pyramidal sigmoid gain (mV). Overridden per column."""

SIGMA_I = 6.0
"""Inhibitory sigmoid gain (mV)."""

C1 = math.pi / math.sqrt(3.0)
"""Scaling between logistic slope and threshold standard deviation (dimensionless)."""

# =============================================================================
# SODIUM ADAPTATION
# =============================================================================

ALPHA_NA = 2.0
"""Sodium influx per spike (mM ms)."""

TAU_NA = 1.0
"""Sodium time constant (ms)."""

R_PUMP = 0.09
"""Na-K pump strength (mM/ms)."""

NA_EQ = 9.5
"""Equilibrium intracellular sodium concentration (mM)."""

NA_PUMP_HALF = 15.0
"""Pump half-activation concentration (mM); enters the pump as NA_PUMP_HALF**3."""

W_KNA_MAX = 0.37
"""Maximal relative activation of the K(Na) conductance."""

NA_KNA_HALF = 38.7
"""Half-activation sodium concentration of the K(Na) conductance (mM)."""

KNA_HILL = 3.5
"""Hill exponent of the K(Na) activation."""

# =============================================================================
# SYNAPTIC KINETICS (1/ms)
# =============================================================================

GAMMA_E = 70.0e-3
"""Excitatory PSP rise constant (1/ms)."""

GAMMA_G = 58.6e-3
"""Inhibitory PSP rise constant (1/ms)."""

# =============================================================================
# CONDUCTANCES
# =============================================================================

G_L = 1.0
"""Leak conductance (a.u.)."""

G_AMPA = 1.0
"""AMPA synaptic conductance scaling."""

G_GABA = 1.0
"""GABA synaptic conductance scaling."""

G_KNA = 1.33
"""Default K(Na) conductance (mS/cm^2). Overridden per column."""

# =============================================================================
# REVERSAL POTENTIALS (mV)
# =============================================================================

E_AMPA = 0.0
"""AMPA reversal potential (mV)."""

E_GABA = -70.0
"""GABA_A reversal potential (mV)."""

E_L_P = -66.0
"""Pyramidal leak reversal potential (mV); resting value of Vp."""

E_L_I = -64.0
"""Inhibitory leak reversal potential (mV); resting value of Vi."""

E_K = -100.0
"""Potassium reversal potential (mV)."""

# =============================================================================
# NOISE (1/ms)
# =============================================================================

DPHI = 2.0
"""Default noise diffusion amplitude. Overridden per column."""

# =============================================================================
# CONNECTIVITY (dimensionless)
# =============================================================================

N_PP = 120.0
"""Pyramidal -> pyramidal connections."""

N_IP = 72.0
"""Pyramidal -> inhibitory connections."""

N_PI = 90.0
"""Inhibitory -> pyramidal connections."""

N_II = 90.0
"""Inhibitory -> inhibitory connections."""

# =============================================================================
# SRK4 COEFFICIENTS
# =============================================================================

SRK4_A = (0.5, 0.5, 1.0, 1.0)
"""Deterministic stage increments (fractions of dt)."""

SRK4_B = (0.75, 0.75, 0.0, 0.0)
"""Stochastic stage increments (fractions of sqrt(dt)); noise only in stages 1-2."""

SRK4_WEIGHTS = (-3.0, 2.0, 4.0, 2.0, 1.0)
"""Final combination weights over slots 0..4, divided by 6."""

# =============================================================================
# DEFAULT PARAMETER SET
# =============================================================================

COLUMN_PARAMETER_DEFAULTS = {
    "tau_p": TAU_P,
    "tau_i": TAU_I,
    "Qp_max": QP_MAX,
    "Qi_max": QI_MAX,
    "theta_p": THETA_P,
    "theta_i": THETA_I,
    "sigma_p": SIGMA_P,
    "sigma_i": SIGMA_I,
    "C1": C1,
    "alpha_Na": ALPHA_NA,
    "tau_Na": TAU_NA,
    "R_pump": R_PUMP,
    "Na_eq": NA_EQ,
    "gamma_e": GAMMA_E,
    "gamma_g": GAMMA_G,
    "g_L": G_L,
    "g_AMPA": G_AMPA,
    "g_GABA": G_GABA,
    "g_KNa": G_KNA,
    "E_AMPA": E_AMPA,
    "E_GABA": E_GABA,
    "E_L_p": E_L_P,
    "E_L_i": E_L_I,
    "E_K": E_K,
    "dphi": DPHI,
    "N_pp": N_PP,
    "N_ip": N_IP,
    "N_pi": N_PI,
    "N_ii": N_II,
}
"""Name -> value of every biophysical parameter a column carries."""
