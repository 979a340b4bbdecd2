"""
Cortical column model: constants, SRK4 integrator and trusted accessor.
"""

from neuralmass.components.column.column_constants import (
    COLUMN_PARAMETER_DEFAULTS,
    # Experiment parameter defaults
    SIGMA_P,
    G_KNA,
    DPHI,
    # Equilibria
    E_L_P,
    E_L_I,
    NA_EQ,
    # Firing rate ceilings
    QP_MAX,
    QI_MAX,
)
from neuralmass.components.column.cortical_column import (
    CorticalColumn,
    DRAWS_PER_STEP,
    NOISY_VARIABLES,
    STATE_VARIABLES,
)
from neuralmass.components.column.column_access import ColumnAccess

__all__ = [
    "COLUMN_PARAMETER_DEFAULTS",
    "SIGMA_P",
    "G_KNA",
    "DPHI",
    "E_L_P",
    "E_L_I",
    "NA_EQ",
    "QP_MAX",
    "QI_MAX",
    "CorticalColumn",
    "DRAWS_PER_STEP",
    "NOISY_VARIABLES",
    "STATE_VARIABLES",
    "ColumnAccess",
]
