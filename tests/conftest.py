"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from yee import FDTDSimulator


@pytest.fixture
def grid_size():
    """Small grid for fast unit tests."""
    return (5, 5, 5)


@pytest.fixture
def sim(grid_size):
    return FDTDSimulator(grid_size, 1.0)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_fields(rng, grid_size):
    """Random E/H initial conditions keyed by field name."""
    names = ["electric_x", "electric_y", "electric_z", "magnetic_x", "magnetic_y", "magnetic_z"]
    return {name: rng.standard_normal(grid_size) for name in names}
