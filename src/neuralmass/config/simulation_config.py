"""Simulation run configuration."""

from __future__ import annotations

from dataclasses import dataclass

from neuralmass.errors import ConfigurationError
from neuralmass.global_config import GlobalConfig
from neuralmass.utils.numerical_validation import validate_finite, validate_positive


@dataclass
class SimulationConfig:
    """Configuration for one simulation run of a column.

    Attributes:
        duration_s: Recorded simulation time in seconds
        onset_s: Transient discarded before recording starts (default: 0.0)
        sampling_hz: Recording resolution in Hz (default: 100)
        dt_ms: Integration timestep in ms; must match the column's dt
    """

    duration_s: float
    onset_s: float = 0.0
    sampling_hz: float = GlobalConfig.DEFAULT_SAMPLING_HZ
    dt_ms: float = GlobalConfig.DEFAULT_DT_MS

    def __post_init__(self):
        """Validate run parameters."""
        validate_finite(self.duration_s, "duration_s", valid_range=(0.0, float("inf")))
        validate_finite(self.onset_s, "onset_s", valid_range=(0.0, float("inf")))
        validate_positive(self.sampling_hz, "sampling_hz")
        validate_positive(self.dt_ms, "dt_ms")

        sample_period_ms = GlobalConfig.MS_PER_SECOND / self.sampling_hz
        ratio = sample_period_ms / self.dt_ms
        if ratio < 1.0 or abs(ratio - round(ratio)) > 1e-6:
            raise ConfigurationError(
                f"Sampling period {sample_period_ms} ms must be a whole multiple "
                f"of dt_ms={self.dt_ms}"
            )

    @property
    def steps_per_sample(self) -> int:
        """Integration steps between two recorded samples."""
        return int(round(GlobalConfig.MS_PER_SECOND / (self.sampling_hz * self.dt_ms)))

    @property
    def onset_steps(self) -> int:
        """Integration steps of the discarded transient."""
        return int(round(self.onset_s * GlobalConfig.MS_PER_SECOND / self.dt_ms))

    @property
    def duration_steps(self) -> int:
        """Integration steps of the recorded part."""
        return int(round(self.duration_s * GlobalConfig.MS_PER_SECOND / self.dt_ms))

    @property
    def n_samples(self) -> int:
        """Number of samples the recorded part produces (first sample at the end of onset)."""
        return -(-self.duration_steps // self.steps_per_sample)
