"""Semi-periodic pulse train with jittered inter-stimulus intervals."""

from __future__ import annotations

import logging
from typing import Optional

import torch

from neuralmass.errors import ConfigurationError
from neuralmass.global_config import GlobalConfig

from .base import StimulusProtocol, check_non_negative, infinite_steps, ms_to_steps

logger = logging.getLogger(__name__)


class SemiPeriodic(StimulusProtocol):
    """Open-loop pulse train.

    The first pulse starts one ISI after onset. Every following interval is
    ``isi_s`` plus a uniform jitter drawn from ``[-isi_range_s, isi_range_s]``,
    which keeps pulses from locking to the column's intrinsic rhythm.

    Must be queried for consecutive timesteps.

    Args:
        strength: Pulse amplitude
        duration_ms: Pulse width in ms
        isi_s: Mean inter-stimulus interval in seconds
        isi_range_s: Half-width of the uniform ISI jitter in seconds (default: 0)
        onset_ms: Start of the protocol (default: 0)
        seed: Seed of the jitter generator (None = OS entropy)
    """

    def __init__(
        self,
        strength: float,
        duration_ms: float,
        isi_s: float,
        isi_range_s: float = 0.0,
        onset_ms: float = 0.0,
        seed: Optional[int] = None,
    ):
        super().__init__()
        check_non_negative(duration_ms, "duration_ms")
        check_non_negative(isi_range_s, "isi_range_s")
        check_non_negative(onset_ms, "onset_ms")
        min_isi_ms = (isi_s - isi_range_s) * GlobalConfig.MS_PER_SECOND
        if min_isi_ms <= duration_ms:
            raise ConfigurationError(
                f"Shortest ISI ({min_isi_ms} ms) must exceed the pulse duration ({duration_ms} ms)"
            )

        self.strength = float(strength)
        self.duration_ms = duration_ms
        self.isi_s = isi_s
        self.isi_range_s = isi_range_s
        self.onset_ms = onset_ms

        self.generator = torch.Generator(device="cpu")
        if seed is None:
            self.generator.seed()
        else:
            self.generator.manual_seed(seed)

        self._next_start: Optional[int] = None
        self._pulse_end = -1

    def _next_interval_ms(self) -> float:
        jitter = (2.0 * torch.rand(1, generator=self.generator, dtype=torch.float64).item() - 1.0) * self.isi_range_s
        return (self.isi_s + jitter) * GlobalConfig.MS_PER_SECOND

    def get_input(self, timestep: int, dt_ms: float) -> float:
        if self._next_start is None:
            self._next_start = ms_to_steps(self.onset_ms + self.isi_s * GlobalConfig.MS_PER_SECOND, dt_ms)

        if timestep == self._next_start:
            self._mark(timestep)
            self._pulse_end = timestep + ms_to_steps(self.duration_ms, dt_ms)
            self._next_start = timestep + ms_to_steps(self._next_interval_ms(), dt_ms)
            logger.debug("Semi-periodic pulse at step %d, next at step %d", timestep, self._next_start)

        return self.strength if timestep < self._pulse_end else 0.0

    def duration_timesteps(self, dt_ms: float) -> int:
        return infinite_steps()

    def reset(self) -> None:
        super().reset()
        self._next_start = None
        self._pulse_end = -1
