"""Tests for configuration validation and construction errors."""

from __future__ import annotations

import numpy as np
import pytest
import torch
from pydantic import ValidationError

from yee import ConfigurationError, FDTDSimulator, SimulationConfig


class TestSimulationConfig:

    def test_defaults(self):
        cfg = SimulationConfig(grid_size=(4, 5, 6), cell_size=0.5)
        assert cfg.grid_size == (4, 5, 6)
        assert cfg.backend == "torch"
        assert cfg.device == "cpu"
        assert cfg.torch_dtype == torch.float64
        assert cfg.check_stability is False

    @pytest.mark.parametrize("grid_size", [(0, 2, 2), (2, -1, 2), (2, 2), (2, 2, 2, 2), (2.5, 2, 2), (True, 2, 2)])
    def test_rejects_bad_grid(self, grid_size):
        with pytest.raises(ValidationError):
            SimulationConfig(grid_size=grid_size, cell_size=1.0)

    @pytest.mark.parametrize("cell_size", [0.0, -1.0, float("inf"), float("nan"), True])
    def test_rejects_bad_cell_size(self, cell_size):
        with pytest.raises(ValidationError):
            SimulationConfig(grid_size=(2, 2, 2), cell_size=cell_size)

    def test_numpy_integers_accepted(self):
        cfg = SimulationConfig(grid_size=tuple(np.array([2, 3, 4])), cell_size=1.0)
        assert cfg.grid_size == (2, 3, 4)
        assert all(type(n) is int for n in cfg.grid_size)

    @pytest.mark.parametrize("kwargs", [
        {"backend": "opencl"},
        {"dtype": "float16"},
        {"device": "not-a-device"},
    ])
    def test_rejects_bad_choices(self, kwargs):
        with pytest.raises(ValidationError):
            SimulationConfig(grid_size=(2, 2, 2), cell_size=1.0, **kwargs)

    def test_json_round_trip(self, tmp_path):
        cfg = SimulationConfig(grid_size=(3, 4, 5), cell_size=0.25, backend="loop", dtype="float32")
        path = tmp_path / "sim.json"
        cfg.to_file(path)
        assert SimulationConfig.from_file(path) == cfg


class TestConstructionErrors:

    @pytest.mark.parametrize("grid_size,cell_size", [
        ((0, 1, 1), 1.0),
        ((1, 1, -3), 1.0),
        ((2, 2, 2), 0.0),
        ((2, 2, 2), -0.1),
    ])
    def test_configuration_error(self, grid_size, cell_size):
        with pytest.raises(ConfigurationError):
            FDTDSimulator(grid_size, cell_size)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            FDTDSimulator((1, 1, 0), 1.0)

    def test_from_config(self):
        cfg = SimulationConfig(grid_size=(2, 3, 4), cell_size=0.5, backend="loop")
        sim = FDTDSimulator.from_config(cfg)
        assert sim.shape == (2, 3, 4)
        assert sim.cell_size == 0.5
        assert sim.backend.name == "loop"
        assert sim.config == cfg


class TestDeviceAvailability:

    def test_cuda_unavailable(self, monkeypatch):
        monkeypatch.setattr(torch.cuda, "is_available", lambda: False)
        with pytest.raises(ConfigurationError, match="CUDA"):
            FDTDSimulator((2, 2, 2), 1.0, device="cuda")

    def test_mps_unavailable(self, monkeypatch):
        monkeypatch.setattr(torch.backends.mps, "is_available", lambda: False)
        with pytest.raises(ConfigurationError, match="MPS"):
            FDTDSimulator((2, 2, 2), 1.0, device="mps", dtype="float32")

    def test_mps_rejects_float64(self, monkeypatch):
        monkeypatch.setattr(torch.backends.mps, "is_available", lambda: True)
        with pytest.raises(ConfigurationError, match="float64"):
            FDTDSimulator((2, 2, 2), 1.0, device="mps")

    def test_allocation_failure_is_configuration_error(self, monkeypatch):
        from yee.grid import SimulationState

        def no_memory(shape, dtype, device):
            raise RuntimeError("device out of memory")

        monkeypatch.setattr(SimulationState, "zeros", staticmethod(no_memory))
        with pytest.raises(ConfigurationError, match="cannot allocate") as info:
            FDTDSimulator((2, 2, 2), 1.0)
        assert isinstance(info.value.__cause__, RuntimeError)
