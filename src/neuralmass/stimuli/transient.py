"""Transient (phasic) stimulus pulse."""

from __future__ import annotations

from .sustained import Sustained


class Transient(Sustained):
    """Single brief pulse, e.g. one auditory click evoking a K-complex.

    Example:
        >>> stim = Transient(strength=5.0, onset_ms=2000, duration_ms=30)
    """

    def __init__(
        self,
        strength: float,
        onset_ms: float = 0.0,
        duration_ms: float = 30.0,
    ):
        """Initialize transient stimulus.

        Args:
            strength: Pulse amplitude
            onset_ms: When to present (default: 0.0)
            duration_ms: Pulse width (default: 30 ms)
        """
        super().__init__(strength=strength, duration_ms=duration_ms, onset_ms=onset_ms)
