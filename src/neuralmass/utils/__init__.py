"""Utility helpers: noise streams and numerical validation."""

from neuralmass.utils.numerical_validation import (
    is_numerical_validation_enabled,
    set_numerical_validation,
    validate_finite,
    validate_positive,
)
from neuralmass.utils.rng import NormalStream, SequenceStream, derive_seed, string_hash_md5

__all__ = [
    "NormalStream",
    "SequenceStream",
    "derive_seed",
    "string_hash_md5",
    "is_numerical_validation_enabled",
    "set_numerical_validation",
    "validate_finite",
    "validate_positive",
]
