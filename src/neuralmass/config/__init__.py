"""Configuration dataclasses for columns and simulation runs."""

from neuralmass.config.column_config import ColumnConfig
from neuralmass.config.simulation_config import SimulationConfig
from neuralmass.global_config import GlobalConfig

__all__ = [
    "ColumnConfig",
    "SimulationConfig",
    "GlobalConfig",
]
