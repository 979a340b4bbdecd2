"""Closed-loop, phase-dependent stimulation.

Mirrors closed-loop auditory stimulation during slow-wave sleep (Ngo et al.
2013): a slow-oscillation trough is detected online from the pyramidal
membrane potential, and a short train of pulses is delivered a fixed delay
after the trough, aiming at the following up-state.

State machine per detection cycle:

    DETECTING --Vp < threshold--> TRACKING --Vp rises--> STIMULATING
        ^                                                     |
        +------------- dead time elapsed ---- REFRACTORY <----+
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import List

from neuralmass.components.column.column_access import ColumnAccess
from neuralmass.errors import ConfigurationError
from neuralmass.global_config import GlobalConfig

from .base import StimulusProtocol, check_non_negative, infinite_steps, ms_to_steps

logger = logging.getLogger(__name__)


class StimulationPhase(Enum):
    DETECTING = auto()
    TRACKING = auto()
    STIMULATING = auto()
    REFRACTORY = auto()


class PhaseDependent(StimulusProtocol):
    """Pulses timed relative to detected troughs of Vp.

    Must be queried for consecutive timesteps; reads Vp through the trusted
    accessor at every query.

    Args:
        access: ColumnAccess of the stimulated column
        strength: Pulse amplitude
        duration_ms: Pulse width in ms
        threshold_mv: Vp below which a trough is being entered (mV)
        time_to_stim_ms: Delay between detected trough and first pulse (ms)
        number_of_stims: Pulses per detection (default: 2)
        isi_s: Interval between pulses of one train (s, default: 1.05)
        dead_time_s: Refractory time after a train before detection resumes (s)
        onset_ms: Start of the protocol (default: 0)
    """

    def __init__(
        self,
        access: ColumnAccess,
        strength: float,
        duration_ms: float,
        threshold_mv: float = -72.0,
        time_to_stim_ms: float = 450.0,
        number_of_stims: int = 2,
        isi_s: float = 1.05,
        dead_time_s: float = 2.5,
        onset_ms: float = 0.0,
    ):
        super().__init__()
        check_non_negative(duration_ms, "duration_ms")
        check_non_negative(time_to_stim_ms, "time_to_stim_ms")
        check_non_negative(dead_time_s, "dead_time_s")
        check_non_negative(onset_ms, "onset_ms")
        if number_of_stims < 1:
            raise ConfigurationError(f"number_of_stims must be >= 1, got {number_of_stims}")
        if number_of_stims > 1 and isi_s * GlobalConfig.MS_PER_SECOND <= duration_ms:
            raise ConfigurationError(
                f"isi_s ({isi_s} s) must exceed the pulse duration ({duration_ms} ms)"
            )

        self.access = access
        self.strength = float(strength)
        self.duration_ms = duration_ms
        self.threshold_mv = threshold_mv
        self.time_to_stim_ms = time_to_stim_ms
        self.number_of_stims = number_of_stims
        self.isi_s = isi_s
        self.dead_time_s = dead_time_s
        self.onset_ms = onset_ms
        self._clear()

    def _clear(self) -> None:
        self.phase = StimulationPhase.DETECTING
        self.trough_mv = float("inf")
        self._pending: List[int] = []
        self._pulse_end = -1
        self._refractory_end = -1

    def get_input(self, timestep: int, dt_ms: float) -> float:
        if timestep < ms_to_steps(self.onset_ms, dt_ms):
            return 0.0

        vp = self.access.value("Vp")

        if self.phase is StimulationPhase.DETECTING:
            if vp < self.threshold_mv:
                self.phase = StimulationPhase.TRACKING
                self.trough_mv = vp
        elif self.phase is StimulationPhase.TRACKING:
            if vp < self.trough_mv:
                self.trough_mv = vp
            else:
                first = timestep + ms_to_steps(self.time_to_stim_ms, dt_ms)
                spacing = ms_to_steps(self.isi_s * GlobalConfig.MS_PER_SECOND, dt_ms)
                self._pending = [first + i * spacing for i in range(self.number_of_stims)]
                self.phase = StimulationPhase.STIMULATING
                logger.debug("Trough %.2f mV detected at step %d", self.trough_mv, timestep)
        elif self.phase is StimulationPhase.REFRACTORY:
            if timestep >= self._refractory_end:
                self.phase = StimulationPhase.DETECTING
                self.trough_mv = float("inf")

        if self.phase is not StimulationPhase.STIMULATING:
            return 0.0

        if self._pending and timestep == self._pending[0]:
            self._pending.pop(0)
            self._mark(timestep)
            self._pulse_end = timestep + ms_to_steps(self.duration_ms, dt_ms)

        if timestep < self._pulse_end:
            return self.strength

        if not self._pending:
            self.phase = StimulationPhase.REFRACTORY
            self._refractory_end = timestep + ms_to_steps(self.dead_time_s * GlobalConfig.MS_PER_SECOND, dt_ms)
        return 0.0

    def duration_timesteps(self, dt_ms: float) -> int:
        return infinite_steps()

    def reset(self) -> None:
        super().reset()
        self._clear()
