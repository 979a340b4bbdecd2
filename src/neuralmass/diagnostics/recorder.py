"""
ColumnRecorder: sampling of column state into pre-allocated arrays.

The recorder never drives its own loop; call ``record()`` from whatever loop
you own, at the resolution you want:

    recorder = ColumnRecorder(ColumnAccess(column), n_samples=1000)

    for t in range(n_steps):
        column.iterate_ODE()
        if t % steps_per_sample == 0:
            recorder.record()

    traces = recorder.as_dict()   # {"Vp": array, "Na": array}

It holds live references to the requested state rows, so a sample costs one
scalar read per variable and never copies the full state.
"""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np

from neuralmass.components.column.column_access import ColumnAccess

DEFAULT_RECORDED_VARIABLES = ("Vp", "Na")
"""Variables recorded when none are requested."""


class ColumnRecorder:
    """Samples slot-0 values of selected state variables.

    Args:
        access: ColumnAccess of the recorded column
        n_samples: Capacity of the pre-allocated arrays
        variables: Names of the state variables to record
    """

    def __init__(
        self,
        access: ColumnAccess,
        n_samples: int,
        variables: Sequence[str] = DEFAULT_RECORDED_VARIABLES,
    ):
        if n_samples < 0:
            raise ValueError(f"n_samples must be >= 0, got {n_samples}")
        self.n_samples = n_samples
        self.variables = tuple(variables)
        self._references = {name: access.reference(name) for name in self.variables}
        self.traces: Dict[str, np.ndarray] = {
            name: np.zeros(n_samples, dtype=np.float64) for name in self.variables
        }
        self.n_recorded = 0

    def record(self) -> None:
        """Append the current value of every recorded variable."""
        if self.n_recorded >= self.n_samples:
            raise IndexError(f"Recorder is full ({self.n_samples} samples)")
        for name, ref in self._references.items():
            self.traces[name][self.n_recorded] = float(ref[0])
        self.n_recorded += 1

    def as_dict(self) -> Dict[str, np.ndarray]:
        """Copies of the filled part of every trace."""
        return {name: trace[: self.n_recorded].copy() for name, trace in self.traces.items()}
