"""Sustained (tonic) stimulation and the no-stimulation baseline."""

from __future__ import annotations

from .base import StimulusProtocol, check_non_negative, infinite_steps, ms_to_steps


class NoStimulation(StimulusProtocol):
    """Zero external input at every timestep (spontaneous activity)."""

    def get_input(self, timestep: int, dt_ms: float) -> float:
        return 0.0

    def duration_timesteps(self, dt_ms: float) -> int:
        return infinite_steps()


class Sustained(StimulusProtocol):
    """Constant input held over a window.

    Example:
        >>> # Depolarizing drive of 2.0 for 500 ms, starting at 1 s
        >>> stim = Sustained(strength=2.0, duration_ms=500, onset_ms=1000)
        >>> stim.get_input(10_000, dt_ms=0.1)   # 2.0
        >>> stim.get_input(15_000, dt_ms=0.1)   # 0.0
    """

    def __init__(
        self,
        strength: float,
        duration_ms: float,
        onset_ms: float = 0.0,
    ):
        """Initialize sustained stimulus.

        Args:
            strength: Input value while active
            duration_ms: How long to hold the input in milliseconds
            onset_ms: When to start (default: 0.0)
        """
        super().__init__()
        check_non_negative(duration_ms, "duration_ms")
        check_non_negative(onset_ms, "onset_ms")
        self.strength = float(strength)
        self.duration_ms = duration_ms
        self.onset_ms = onset_ms

    def get_input(self, timestep: int, dt_ms: float) -> float:
        """Strength if within the window, else 0.0."""
        start = ms_to_steps(self.onset_ms, dt_ms)
        stop = start + ms_to_steps(self.duration_ms, dt_ms)

        if start <= timestep < stop:
            if timestep == start:
                self._mark(timestep)
            return self.strength
        return 0.0

    def duration_timesteps(self, dt_ms: float) -> int:
        """Total duration in timesteps (onset + hold duration)."""
        return ms_to_steps(self.onset_ms + self.duration_ms, dt_ms)
