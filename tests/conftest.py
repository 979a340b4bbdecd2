"""Shared test fixtures and configuration."""

import numpy as np
import pytest
import torch

from neuralmass import ColumnAccess, ColumnConfig, CorticalColumn
from neuralmass.utils.numerical_validation import set_numerical_validation


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure reproducible tests by setting all random seeds.

    Columns own private generators, so this only pins code paths that fall
    back to torch's or numpy's global RNG.
    """
    torch.manual_seed(42)
    np.random.seed(42)


@pytest.fixture(autouse=True)
def numerical_validation_enabled():
    """Restore the global validation flag after tests that toggle it."""
    set_numerical_validation(True)
    yield
    set_numerical_validation(True)


@pytest.fixture
def dt_ms():
    """Standard integration timestep."""
    return 0.1


@pytest.fixture
def quiet_config(dt_ms):
    """Noise-free column configuration with default biophysics."""
    return ColumnConfig(dphi=0.0, dt_ms=dt_ms, seed=0)


@pytest.fixture
def quiet_column(quiet_config):
    """Noise-free column at rest."""
    return CorticalColumn(quiet_config)


@pytest.fixture
def noisy_column(dt_ms):
    """Seeded column with the default noise amplitude."""
    return CorticalColumn(ColumnConfig(dt_ms=dt_ms, seed=1234))


@pytest.fixture
def access(quiet_column):
    """Trusted accessor onto the noise-free column."""
    return ColumnAccess(quiet_column)
