"""
Trusted access to a column's internal state and parameters.

Only two collaborators reach inside a ``CorticalColumn``: the data recorder
(which samples slot-0 values by reference) and the stimulation protocols
(which write the external input and, for lesion or perturbation experiments,
parameters and state). Both go through ``ColumnAccess``; everything else uses
the column's public contract (``set_input`` / ``iterate_ODE``).
"""

from __future__ import annotations

import logging
from typing import Tuple

import torch

from neuralmass.components.column.column_constants import COLUMN_PARAMETER_DEFAULTS
from neuralmass.components.column.cortical_column import STATE_INDEX, STATE_VARIABLES, CorticalColumn
from neuralmass.errors import ConfigurationError
from neuralmass.utils.numerical_validation import validate_finite

logger = logging.getLogger(__name__)


class ColumnAccess:
    """Privileged read/write interface onto one ``CorticalColumn``.

    Example:
        >>> access = ColumnAccess(column)
        >>> vp = access.reference("Vp")   # live 5-slot view, vp[0] is current
        >>> access.set_parameter("g_KNa", 0.0)   # lesion the K(Na) current
    """

    def __init__(self, column: CorticalColumn):
        self.column = column

    # =========================================================================
    # Read interface (data recording)
    # =========================================================================

    @staticmethod
    def variable_names() -> Tuple[str, ...]:
        """Names of the 11 state variables in storage order."""
        return STATE_VARIABLES

    def reference(self, name: str) -> torch.Tensor:
        """Live view of a variable's 5 slots; slot 0 tracks the current value."""
        return self.column.state[self._index(name)]

    def value(self, name: str) -> float:
        """Current (slot-0) value of a state variable."""
        return float(self.column.state[self._index(name), 0])

    @property
    def dt_ms(self) -> float:
        return self.column.dt_ms

    @property
    def input(self) -> float:
        return self.column.input

    # =========================================================================
    # Write interface (stimulation protocols)
    # =========================================================================

    def set_input(self, I: float) -> None:
        self.column.set_input(I)

    def set_state(self, name: str, value: float) -> None:
        """Overwrite the current value of a state variable (perturbation)."""
        validate_finite(float(value), name)
        self.column.state[self._index(name), 0] = float(value)

    def parameter(self, name: str) -> float:
        self._check_parameter(name)
        return getattr(self.column, name)

    def set_parameter(self, name: str, value: float) -> None:
        """Overwrite a biophysical parameter for the rest of the column's lifetime."""
        self._check_parameter(name)
        validate_finite(float(value), name)
        old = getattr(self.column, name)
        setattr(self.column, name, float(value))
        if name in ("gamma_e", "gamma_g"):
            self.column.refresh_synaptic_rates()
        logger.warning("Column parameter %s changed from %g to %g", name, old, float(value))

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _index(name: str) -> int:
        try:
            return STATE_INDEX[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown state variable '{name}'. Choose from: {list(STATE_VARIABLES)}"
            ) from None

    @staticmethod
    def _check_parameter(name: str) -> None:
        if name not in COLUMN_PARAMETER_DEFAULTS:
            raise ConfigurationError(
                f"Unknown column parameter '{name}'. "
                f"Choose from: {sorted(COLUMN_PARAMETER_DEFAULTS)}"
            )
