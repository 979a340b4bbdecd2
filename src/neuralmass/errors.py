"""
Custom exception classes for neuralmass.

Exception Hierarchy:
====================
NeuralMassError (base) - Base exception for all neuralmass-specific errors
├── ConfigurationError - Invalid configuration parameters
└── NumericalInstabilityError - Non-finite state detected after an integration step

The integrator itself has no failure path: diverging trajectories are a
modeling outcome. NumericalInstabilityError is only raised when a column is
explicitly configured with ``check_finite=True``.
"""

from __future__ import annotations

# =============================================================================
# Exception Hierarchy
# =============================================================================


class NeuralMassError(Exception):
    """Base exception for all neuralmass-specific errors.

    All custom exceptions in neuralmass inherit from this class, enabling
    code to catch neuralmass errors specifically.
    """


class ConfigurationError(NeuralMassError):
    """Invalid configuration parameters.

    Raised when configuration values are non-finite, out of their physical
    range, or incompatible with each other.
    """


class NumericalInstabilityError(NeuralMassError):
    """Non-finite state variable after an integration step.

    Only raised by columns constructed with ``check_finite=True``.
    """
