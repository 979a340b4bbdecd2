"""Stimulation protocols setting a column's external input over time.

- **NoStimulation**: Spontaneous activity, zero input
- **Sustained**: Constant input held over a window (tonic drive)
- **Transient**: One brief pulse (e.g. an evoked K-complex)
- **SemiPeriodic**: Open-loop pulse train with jittered ISIs
- **PhaseDependent**: Closed-loop pulses timed to slow-oscillation troughs

Example:
    >>> from neuralmass.stimuli import Transient
    >>>
    >>> stim = Transient(strength=5.0, onset_ms=1000, duration_ms=30)
    >>> for t in range(n_steps):
    ...     column.set_input(stim.get_input(t, dt_ms=0.1))
    ...     column.iterate_ODE()
"""

from __future__ import annotations

from .base import StimulusProtocol
from .phase_dependent import PhaseDependent, StimulationPhase
from .semi_periodic import SemiPeriodic
from .sustained import NoStimulation, Sustained
from .transient import Transient

__all__ = [
    "StimulusProtocol",
    "NoStimulation",
    "Sustained",
    "Transient",
    "SemiPeriodic",
    "PhaseDependent",
    "StimulationPhase",
]
