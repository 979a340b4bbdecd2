"""Base class for stimulation protocols."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import List

from neuralmass.errors import ConfigurationError


class StimulusProtocol(ABC):
    """Abstract base class for stimulation protocols driving a column.

    A protocol decides the scalar external input of a column at every
    timestep. The driver calls ``get_input`` exactly once per timestep, in
    increasing order, and forwards the result to ``CorticalColumn.set_input``
    before ``iterate_ODE``.

    Protocols keep ``markers``: the timesteps at which a stimulation pulse
    started, for aligning recorded traces to stimulation onsets.

    Subclasses:
        - NoStimulation: Zero input throughout
        - Sustained: Constant input held over a window
        - Transient: One brief pulse
        - SemiPeriodic: Pulse train with jittered inter-stimulus intervals
        - PhaseDependent: Closed-loop pulses timed to slow-oscillation troughs
    """

    def __init__(self) -> None:
        self.markers: List[int] = []

    @abstractmethod
    def get_input(self, timestep: int, dt_ms: float) -> float:
        """Get external input for given timestep.

        Args:
            timestep: Current timestep index (0-based)
            dt_ms: Timestep duration in milliseconds

        Returns:
            External input for this timestep (0.0 when not stimulating)
        """

    @abstractmethod
    def duration_timesteps(self, dt_ms: float) -> int:
        """Get total duration in timesteps.

        Args:
            dt_ms: Timestep duration in milliseconds

        Returns:
            Number of timesteps this protocol lasts
        """

    def reset(self) -> None:
        """Forget delivered pulses so the protocol can drive a new run."""
        self.markers = []

    def _mark(self, timestep: int) -> None:
        if not self.markers or self.markers[-1] != timestep:
            self.markers.append(timestep)


def ms_to_steps(time_ms: float, dt_ms: float) -> int:
    """Convert a duration in ms to a whole number of timesteps."""
    return int(round(time_ms / dt_ms))


def infinite_steps() -> int:
    """Duration reported by open-ended protocols."""
    return int(1e9)


def check_non_negative(value: float, name: str) -> None:
    """Raise ConfigurationError unless value is finite and >= 0."""
    if not math.isfinite(value) or value < 0.0:
        raise ConfigurationError(f"{name} must be a finite value >= 0, got {value}")
