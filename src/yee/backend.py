"""Parallel execution backends for per-cell stencil kernels.

A kernel is a plain function ``kernel(ctx, *args)`` evaluated once per cell of
a 3D index space. Through ``ctx`` it sees the cell coordinates
(``ctx.thread``), the extent of the space (``ctx.output``), scalar constants
(``ctx.constants``) and a bounds-aware read (``ctx.fetch``) that yields 0 for
out-of-range neighbours.

Results come back in backend-native order: thread.z is the outermost axis and
thread.x the innermost, i.e. shape ``(nz, ny, nx)``. Use
:func:`yee.layout.to_engine_layout` to bring them back to ``(x, y, z)``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, NamedTuple, Sequence

import numpy as np
import torch
from torch import Tensor

from .errors import ConfigurationError, KernelExecutionError

logger = logging.getLogger(__name__)

Kernel = Callable[..., Any]


class Thread(NamedTuple):
    x: Any
    y: Any
    z: Any


class Extent(NamedTuple):
    x: int
    y: int
    z: int


class KernelContext(ABC):
    """Per-invocation view handed to a kernel."""

    def __init__(self, thread: Thread, output: Extent, constants: Mapping[str, float]):
        self.thread = thread
        self.output = output
        self.constants = dict(constants)

    @abstractmethod
    def fetch(self, field, x, y, z):
        """Read ``field[x, y, z]``, or 0 where the index is outside the space."""


class _TorchContext(KernelContext):
    # thread coordinates are index tensors covering the whole space at once

    def fetch(self, field: Tensor, x: Tensor, y: Tensor, z: Tensor) -> Tensor:
        nx, ny, nz = self.output
        inside = (x >= 0) & (x < nx) & (y >= 0) & (y < ny) & (z >= 0) & (z < nz)
        vals = field[x.clamp(0, nx - 1), y.clamp(0, ny - 1), z.clamp(0, nz - 1)]
        return torch.where(inside, vals, torch.zeros((), dtype=vals.dtype, device=vals.device))


class _LoopContext(KernelContext):
    # thread coordinates are plain ints, one cell at a time

    def fetch(self, field: np.ndarray, x: int, y: int, z: int):
        nx, ny, nz = self.output
        if 0 <= x < nx and 0 <= y < ny and 0 <= z < nz:
            return field[x, y, z]
        return 0.0


class KernelBackend(ABC):
    """Runs a per-cell kernel over a 3D index space and materializes the result."""

    name: str = "abstract"

    def __init__(self, device: torch.device | str = "cpu"):
        self.device = torch.device(device)

    def run(self, kernel: Kernel, output: Sequence[int], args: Sequence[Any],
            constants: Mapping[str, float] | None = None) -> Tensor:
        """Evaluate ``kernel`` at every cell of ``output = (nx, ny, nz)``.

        Returns a tensor of native shape ``(nz, ny, nx)``. Any failure inside
        the backend is raised as :class:`KernelExecutionError`.
        """
        extent = Extent(*(int(n) for n in output))
        kernel_name = getattr(kernel, "__name__", repr(kernel))
        try:
            result = self._execute(kernel, extent, args, constants or {})
        except KernelExecutionError:
            raise
        except Exception as e:
            raise KernelExecutionError(kernel_name, f"{type(e).__name__}: {e}") from e

        expected = (extent.z, extent.y, extent.x)
        if not isinstance(result, Tensor) or tuple(result.shape) != expected:
            got = tuple(result.shape) if isinstance(result, Tensor) else type(result).__name__
            raise KernelExecutionError(kernel_name, f"expected result of shape {expected}, got {got}")
        return result

    @abstractmethod
    def _execute(self, kernel: Kernel, extent: Extent, args: Sequence[Any],
                 constants: Mapping[str, float]) -> Tensor:
        ...


class TorchBackend(KernelBackend):
    """Data-parallel backend: the kernel runs once over index tensors for all cells."""

    name = "torch"

    def _execute(self, kernel, extent, args, constants):
        nx, ny, nz = extent
        zz, yy, xx = torch.meshgrid(
            torch.arange(nz, device=self.device),
            torch.arange(ny, device=self.device),
            torch.arange(nx, device=self.device),
            indexing="ij",
        )
        ctx = _TorchContext(Thread(xx, yy, zz), extent, constants)
        inputs = [a.to(self.device) if isinstance(a, Tensor) else a for a in args]
        return kernel(ctx, *inputs)


class LoopBackend(KernelBackend):
    """Single-threaded per-cell reference backend.

    Slow, but evaluates exactly the same kernel expressions as
    :class:`TorchBackend` one cell at a time, so results agree with it to
    floating-point rounding.
    """

    name = "loop"

    def _execute(self, kernel, extent, args, constants):
        nx, ny, nz = extent
        inputs = [a.detach().cpu().numpy() if isinstance(a, Tensor) else a for a in args]
        arrays = [a for a in inputs if isinstance(a, np.ndarray)]
        dtype = arrays[0].dtype if arrays else np.float64

        out = np.empty((nz, ny, nx), dtype=dtype)
        ctx = _LoopContext(Thread(0, 0, 0), extent, constants)
        for z in range(nz):
            for y in range(ny):
                for x in range(nx):
                    ctx.thread = Thread(x, y, z)
                    out[z, y, x] = kernel(ctx, *inputs)
        return torch.from_numpy(out).to(self.device)


_BACKENDS: dict[str, type[KernelBackend]] = {
    TorchBackend.name: TorchBackend,
    LoopBackend.name: LoopBackend,
}


def select_device(device: str = "auto", dtype: torch.dtype = torch.float64) -> torch.device:
    """Resolve a device string and check it can hold fields of ``dtype``.

    ``'auto'`` prefers CUDA, then MPS, then CPU; MPS is skipped for float64,
    which it cannot store. An explicit device that is not present on this
    host raises :class:`ConfigurationError`.
    """
    if device != "auto":
        chosen = torch.device(device)
        if chosen.type == "cuda" and not torch.cuda.is_available():
            raise ConfigurationError(f"device '{device}' requested but CUDA is not available")
        if chosen.type == "mps":
            if not torch.backends.mps.is_available():
                raise ConfigurationError(f"device '{device}' requested but MPS is not available")
            if dtype == torch.float64:
                raise ConfigurationError("MPS does not support float64 fields, use dtype='float32'")
        return chosen
    if torch.cuda.is_available():
        chosen = torch.device("cuda")
        logger.info(f"Using GPU: {torch.cuda.get_device_name(0)}")
    elif torch.backends.mps.is_available() and dtype != torch.float64:
        chosen = torch.device("mps")
        logger.info("Using MPS (Apple Silicon GPU)")
    else:
        chosen = torch.device("cpu")
        logger.info("No usable GPU found, using CPU")
    return chosen


def get_backend(name: str, device: torch.device | str = "cpu") -> KernelBackend:
    try:
        cls = _BACKENDS[name]
    except KeyError:
        raise ConfigurationError(f"unknown backend '{name}', expected one of {tuple(_BACKENDS)}") from None
    logger.debug(f"kernel backend: {name} on {device}")
    return cls(device)
