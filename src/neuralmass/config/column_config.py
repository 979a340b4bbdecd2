"""
Column Configuration.

A ``ColumnConfig`` carries the three parameters that vary across experiments
(sigmoid gain, K(Na) conductance, noise amplitude) together with the shared
timestep and the noise seeding policy. Everything else about a column is a
fixed biophysical constant (see ``column_constants``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from neuralmass.components.column.column_constants import DPHI, G_KNA, SIGMA_P
from neuralmass.errors import ConfigurationError
from neuralmass.global_config import GlobalConfig
from neuralmass.utils.numerical_validation import validate_finite, validate_positive


@dataclass
class ColumnConfig:
    """Configuration for a single cortical column.

    Attributes:
        sigma_p: Pyramidal sigmoid gain in mV (default: 4.0)
            Smaller values make the firing-rate sigmoid steeper.

        g_KNa: Sodium-dependent potassium conductance (default: 1.33)
            Strength of spike-frequency adaptation. Larger values push the
            column toward slow-oscillation (N3-like) dynamics.

        dphi: Noise diffusion amplitude (default: 2.0)
            Scales the additive noise injected into Vp and Vi. Set to 0.0 for
            deterministic RK4 integration.

        dt_ms: Integration timestep in ms (default: GlobalConfig.DEFAULT_DT_MS)
            Shared by every column a driver advances.

        seed: Noise seed (default: None)
            None seeds each noise stream from OS entropy. An integer makes the
            column reproducible; each stream derives its own seed from it.

        check_finite: Raise NumericalInstabilityError after a step that left
            a non-finite state (default: False, matching the unchecked
            reference behaviour).
    """

    sigma_p: float = SIGMA_P
    g_KNa: float = G_KNA
    dphi: float = DPHI
    dt_ms: float = GlobalConfig.DEFAULT_DT_MS
    seed: Optional[int] = None
    check_finite: bool = False

    def __post_init__(self):
        """Validate column parameters."""
        validate_positive(self.sigma_p, "sigma_p")
        validate_finite(self.g_KNa, "g_KNa", valid_range=(0.0, float("inf")))
        validate_finite(self.dphi, "dphi", valid_range=(0.0, float("inf")))
        validate_positive(self.dt_ms, "dt_ms")

    @classmethod
    def from_params(cls, params: Sequence[float], **kwargs) -> ColumnConfig:
        """Build a config from the ``(sigma_p, g_KNa, dphi)`` triple used by experiment scripts."""
        if len(params) != 3:
            raise ConfigurationError(
                f"Expected 3 parameters (sigma_p, g_KNa, dphi), got {len(params)}"
            )
        sigma_p, g_KNa, dphi = (float(p) for p in params)
        return cls(sigma_p=sigma_p, g_KNa=g_KNa, dphi=dphi, **kwargs)

    def as_params(self) -> Tuple[float, float, float]:
        """Return the ``(sigma_p, g_KNa, dphi)`` triple."""
        return (self.sigma_p, self.g_KNa, self.dphi)
