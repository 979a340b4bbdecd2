"""
neuralmass - Stochastic neural-mass model of a cortical column

Mean-field dynamics of one cortical column (pyramidal and inhibitory
populations, four second-order synaptic pathways, sodium-dependent potassium
adaptation) integrated with a stochastic Runge-Kutta scheme.

Quick Start:
============

    from neuralmass import CorticalColumn, ColumnConfig

    column = CorticalColumn(ColumnConfig(sigma_p=4.0, g_KNa=1.33, dphi=2.0, seed=1))
    for t in range(10_000):   # 1 s at dt = 0.1 ms
        column.set_input(0.0)
        column.iterate_ODE()
    print(column.Vp, column.Na)

Or with stimulation and recording:

    from neuralmass import run_simulation, SimulationConfig
    from neuralmass.stimuli import Transient

    result = run_simulation(
        SimulationConfig(duration_s=5.0, onset_s=1.0),
        ColumnConfig(seed=1),
        stimulus=Transient(strength=5.0, onset_ms=3000, duration_ms=30),
    )
"""

__version__ = "0.1.0"

# Components must be imported before config (ColumnConfig reads column constants)
from neuralmass.components.column import ColumnAccess, CorticalColumn, STATE_VARIABLES
from neuralmass.config import ColumnConfig, GlobalConfig, SimulationConfig
from neuralmass.diagnostics import ColumnRecorder
from neuralmass.errors import ConfigurationError, NeuralMassError, NumericalInstabilityError
from neuralmass.simulation import SimulationResult, run_simulation
from neuralmass.utils.rng import NormalStream, SequenceStream

__all__ = [
    "__version__",
    "CorticalColumn",
    "ColumnAccess",
    "STATE_VARIABLES",
    "ColumnConfig",
    "GlobalConfig",
    "SimulationConfig",
    "ColumnRecorder",
    "ConfigurationError",
    "NeuralMassError",
    "NumericalInstabilityError",
    "SimulationResult",
    "run_simulation",
    "NormalStream",
    "SequenceStream",
]
