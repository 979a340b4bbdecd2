"""Global configuration constants for neuralmass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GlobalConfig:
    """Global configuration constants for neuralmass.

    Centralizes constants shared by every column in a simulation, such as the
    integration timestep and the default recording resolution. Columns and
    drivers read their defaults from here so that all columns advanced by one
    driver share the same dt.
    """

    DEFAULT_DT_MS = 0.1
    """Default integration timestep in milliseconds (0.1 ms = 10 kHz)."""

    DEFAULT_SAMPLING_HZ = 100.0
    """Default recording resolution in Hz (one sample every 100 steps at 0.1 ms)."""

    MS_PER_SECOND = 1000.0
    """Time conversion factor."""
