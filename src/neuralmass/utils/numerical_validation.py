"""Finite and range checks for configuration values.

Used by the config dataclasses and the column accessor; every failure is a
``ConfigurationError``.
"""

from __future__ import annotations

import math
from typing import Optional

from neuralmass.errors import ConfigurationError

_enable_numerical_validation = True
"""Global flag to enable/disable numerical validation.

Set to False only for parameter sweeps that deliberately explore invalid regimes.
"""


def set_numerical_validation(enabled: bool) -> None:
    """Enable or disable numerical validation globally.

    Args:
        enabled: True to enable validation, False to disable
    """
    global _enable_numerical_validation
    _enable_numerical_validation = enabled


def is_numerical_validation_enabled() -> bool:
    """Return whether numerical validation is currently enabled."""
    return _enable_numerical_validation


def validate_finite(
    value: float,
    name: str,
    valid_range: Optional[tuple[float, float]] = None,
) -> None:
    """Validate that a numerical value is finite and optionally in range.

    Args:
        value: Value to validate
        name: Parameter name for error message
        valid_range: Optional (min, max) tuple for inclusive range checking

    Raises:
        ConfigurationError: If value is NaN, Inf, or out of range
    """
    if not _enable_numerical_validation:
        return

    if not math.isfinite(value):
        raise ConfigurationError(f"Invalid {name}: {value} is not a finite value.")

    if valid_range is not None:
        min_val, max_val = valid_range
        if value < min_val or value > max_val:
            raise ConfigurationError(
                f"Invalid {name}: {value:.4f} is outside valid range "
                f"[{min_val}, {max_val}]."
            )


def validate_positive(value: float, name: str) -> None:
    """Validate that a value is finite and strictly positive.

    Raises:
        ConfigurationError: If value is non-finite or <= 0
    """
    validate_finite(value, name)
    if _enable_numerical_validation and value <= 0.0:
        raise ConfigurationError(f"Invalid {name}: must be > 0, got {value}.")
