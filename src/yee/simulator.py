from __future__ import annotations

import logging

import torch
from pydantic import ValidationError
from torch import Tensor

from .backend import KernelBackend, get_backend, select_device
from .config import SimulationConfig
from .diagnostics import check_courant, courant_limit
from .errors import ConfigurationError
from .grid import FIELD_NAMES, SimulationState
from .kernels import ELECTRIC_KERNELS, MAGNETIC_KERNELS
from .layout import to_engine_layout

logger = logging.getLogger(__name__)


class FDTDSimulator:
    """3D Yee-grid FDTD engine.

    Owns a :class:`SimulationState` and advances it with leapfrog half-steps:
    ``step_electric(dt)`` updates E from curl H, ``step_magnetic(dt)`` updates
    H from curl E, each adding ``dt / 2`` to the simulated time. Calling both
    with the same ``dt`` is one full cycle.

    ``dt`` is not checked against the Courant limit; a step that is too large
    makes the fields diverge. With ``check_stability=True`` a warning is logged
    instead, but the step still runs unchanged.
    """

    def __init__(self, grid_size, cell_size: float, *, backend: str = 'torch',
                 device: str = 'cpu', dtype: str = 'float64', check_stability: bool = False):
        try:
            config = SimulationConfig(grid_size=grid_size, cell_size=cell_size, backend=backend,
                                      device=device, dtype=dtype, check_stability=check_stability)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        self._config = config
        self._device = select_device(config.device, config.torch_dtype)
        self._backend: KernelBackend = get_backend(config.backend, self._device)
        try:
            self._state = SimulationState.zeros(config.grid_size, config.torch_dtype, self._device)
        except (RuntimeError, NotImplementedError, TypeError) as e:
            raise ConfigurationError(f"cannot allocate {config.dtype} fields on {self._device}: {e}") from e
        self._last_warned_dt: float | None = None
        logger.debug(f'FDTDSimulator grid={config.grid_size} cell_size={config.cell_size} '
                     f'backend={config.backend} device={self._device}')

    @classmethod
    def from_config(cls, config: SimulationConfig) -> 'FDTDSimulator':
        return cls(**config.model_dump())

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def shape(self) -> tuple[int, int, int]:
        return self._state.shape

    @property
    def cell_size(self) -> float:
        return self._config.cell_size

    @property
    def time(self) -> float:
        return self._state.time

    @property
    def backend(self) -> KernelBackend:
        return self._backend

    def snapshot(self) -> SimulationState:
        """Defensive copy of the full state; mutating it does not touch the engine."""
        return self._state.clone()

    def set_field(self, name: str, values) -> None:
        """Load an initial condition into one field (copied, never aliased)."""
        if name not in FIELD_NAMES:
            raise ConfigurationError(f"unknown field '{name}', expected one of {FIELD_NAMES}")
        tensor = torch.as_tensor(values).to(device=self._device, dtype=self._config.torch_dtype, copy=True)
        if tuple(tensor.shape) != self.shape:
            raise ConfigurationError(f"field '{name}' must have shape {self.shape}, got {tuple(tensor.shape)}")
        self._state = self._state.replace(**{name: tensor})

    @torch.no_grad()
    def step_electric(self, dt: float) -> None:
        # d/dt E = curl H
        self._half_step(ELECTRIC_KERNELS, dt)

    @torch.no_grad()
    def step_magnetic(self, dt: float) -> None:
        # d/dt H = -curl E
        self._half_step(MAGNETIC_KERNELS, dt)

    def step(self, dt: float) -> None:
        """One full leapfrog cycle."""
        self.step_electric(dt)
        self.step_magnetic(dt)

    def run(self, steps: int, dt: float) -> SimulationState:
        """Run ``steps`` full cycles and return the final snapshot."""
        for n in range(steps):
            self.step(dt)
            if logger.isEnabledFor(logging.DEBUG) and (n + 1) % 100 == 0:
                logger.debug(f'cycle {n + 1}/{steps}, t={self.time:.6g}')
        return self.snapshot()

    def _half_step(self, kernels, dt: float) -> None:
        dt = float(dt)
        if self._config.check_stability:
            self._warn_if_unstable(dt)

        state = self._state
        constants = {'cell_size': self._config.cell_size}
        staged: dict[str, Tensor] = {}
        # all three kernels read the pre-step state; nothing is committed until
        # every one of them has succeeded
        for name, (kernel, (a, b)) in kernels.items():
            args = [getattr(state, a), getattr(state, b), getattr(state, name), dt]
            native = self._backend.run(kernel, state.shape, args, constants)
            staged[name] = to_engine_layout(native)

        self._state = state.replace(time=state.time + dt / 2, **staged)

    def _warn_if_unstable(self, dt: float) -> None:
        if dt == self._last_warned_dt or check_courant(dt, self._config.cell_size):
            return
        self._last_warned_dt = dt
        logger.warning(f'dt={dt:.6g} exceeds the Courant limit {courant_limit(self._config.cell_size):.6g}; '
                       f'fields are expected to diverge')
