from __future__ import annotations


class FDTDError(Exception):
    """Base class for every error raised by the solver."""


class ConfigurationError(FDTDError, ValueError):
    """Invalid grid, cell size, backend or initial field."""


class KernelExecutionError(FDTDError, RuntimeError):
    """The execution backend could not run a stencil kernel.

    The half-step that issued the kernel is aborted and the simulation state
    is left as it was before that half-step.
    """

    def __init__(self, kernel: str, message: str):
        super().__init__(f"kernel {kernel!r} failed: {message}")
        self.kernel = kernel
