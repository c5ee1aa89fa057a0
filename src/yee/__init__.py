__all__ = [
    "FDTDSimulator",
    "SimulationState",
    "SimulationConfig",
    "KernelBackend",
    "TorchBackend",
    "LoopBackend",
    "FDTDError",
    "ConfigurationError",
    "KernelExecutionError",
]

from .grid import SimulationState
from .config import SimulationConfig
from .backend import KernelBackend, TorchBackend, LoopBackend
from .errors import FDTDError, ConfigurationError, KernelExecutionError
from .simulator import FDTDSimulator
