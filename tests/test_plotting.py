"""Tests for snapshot slice rendering."""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import pytest

from yee import FDTDSimulator
from yee.plotting import plot_slice


@pytest.fixture
def state():
    sim = FDTDSimulator((4, 6, 8), 0.5)
    ez = np.zeros((4, 6, 8))
    ez[2, 3, 4] = 1.0
    sim.set_field("electric_z", ez)
    sim.step(0.1)
    return sim.snapshot()


@pytest.mark.parametrize("axis,expected", [("z", (6, 4)), ("y", (8, 4)), ("x", (8, 6))])
def test_plot_slice_shapes(state, axis, expected):
    fig = plot_slice(state, "electric_z", axis=axis, cell_size=0.5)
    image = fig.axes[0].images[0]
    # imshow gets the transposed plane: rows are the vertical axis
    assert image.get_array().shape == expected
    assert "Ez" in fig.axes[0].get_title()
    plt.close(fig)


def test_plot_slice_explicit_index(state):
    fig = plot_slice(state, "magnetic_x", axis="z", index=0)
    assert "z=0" in fig.axes[0].get_title()
    plt.close(fig)


def test_plot_slice_rejects_unknown(state):
    with pytest.raises(ValueError):
        plot_slice(state, "electric_w")
    with pytest.raises(ValueError):
        plot_slice(state, "electric_z", axis="t")
