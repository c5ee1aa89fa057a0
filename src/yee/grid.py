from __future__ import annotations
import torch
from torch import Tensor
from dataclasses import dataclass, fields, replace

ELECTRIC_FIELDS = ("electric_x", "electric_y", "electric_z")
MAGNETIC_FIELDS = ("magnetic_x", "magnetic_y", "magnetic_z")
MATERIAL_FIELDS = ("permittivity", "permeability")
FIELD_NAMES = ELECTRIC_FIELDS + MAGNETIC_FIELDS + MATERIAL_FIELDS


def make_field(shape: tuple[int, int, int], dtype: torch.dtype = torch.float64,
               device: torch.device | str = "cpu") -> Tensor:
    # one scalar component sampled at every cell, indexed [x, y, z]
    return torch.zeros(shape, dtype=dtype, device=device)


@dataclass
class SimulationState:
    """
    Field store of a 3D Yee grid: elapsed time, the six E/H components and
    the two material maps, all of shape (nx, ny, nz).

    Updates never write into a stored tensor; a half-step swaps whole fields
    via :meth:`replace`, so whatever a kernel is reading stays frozen.
    permittivity / permeability are carried along but not read by the
    update equations.
    """
    time: float
    electric_x: Tensor
    electric_y: Tensor
    electric_z: Tensor
    magnetic_x: Tensor
    magnetic_y: Tensor
    magnetic_z: Tensor
    permittivity: Tensor
    permeability: Tensor

    @staticmethod
    def zeros(shape: tuple[int, int, int], dtype: torch.dtype = torch.float64,
              device: torch.device | str = "cpu") -> "SimulationState":
        # every field gets its own allocation so none alias each other
        arrays = {name: make_field(shape, dtype, device) for name in FIELD_NAMES}
        return SimulationState(time=0.0, **arrays)

    @property
    def shape(self) -> tuple[int, int, int]:
        return tuple(self.electric_x.shape)

    def fields(self) -> dict[str, Tensor]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "time"}

    def replace(self, **changes) -> "SimulationState":
        return replace(self, **changes)

    def clone(self) -> "SimulationState":
        return SimulationState(time=self.time,
                               **{name: t.clone() for name, t in self.fields().items()})
