"""Pydantic v2 configuration for a Yee-grid FDTD run.

Validates the grid and cell size up front so that a bad configuration fails
before any field is allocated. Supports JSON I/O.
"""

from __future__ import annotations

import json
import math
import numbers
from pathlib import Path

import torch
from pydantic import BaseModel, Field, StrictInt, field_validator, model_validator

BACKENDS = ("torch", "loop")
DTYPES = {"float32": torch.float32, "float64": torch.float64}


class SimulationConfig(BaseModel):
    """Grid geometry and execution settings."""

    grid_size: tuple[StrictInt, StrictInt, StrictInt] = Field(
        ..., description="Number of cells along x, y, z",
    )
    cell_size: float = Field(..., gt=0, description="Uniform cell edge length")
    backend: str = Field("torch", description="Kernel backend: 'torch' (vectorized) or 'loop' (per-cell reference)")
    device: str = Field("cpu", description="Torch device for field storage, or 'auto'")
    dtype: str = Field("float64", description="Field precision: 'float32' or 'float64'")
    check_stability: bool = Field(
        False,
        description="Warn (never clamp) when dt exceeds the vacuum Courant limit",
    )

    @field_validator("grid_size", mode="before")
    @classmethod
    def unwrap_integers(cls, v):
        # numpy integers are integral but not ``int``; bools and floats stay as-is and fail
        if isinstance(v, (list, tuple)):
            return tuple(
                int(n) if isinstance(n, numbers.Integral) and not isinstance(n, bool) else n
                for n in v
            )
        return v

    @field_validator("grid_size")
    @classmethod
    def check_grid_size(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        if any(n <= 0 for n in v):
            raise ValueError(f"grid dimensions must be positive, got {v}")
        return v

    @field_validator("cell_size", mode="before")
    @classmethod
    def reject_bool_cell_size(cls, v):
        if isinstance(v, bool):
            raise ValueError("cell_size must be a real number, got a bool")
        return v

    @field_validator("cell_size")
    @classmethod
    def check_cell_size(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"cell_size must be finite, got {v}")
        return v

    @model_validator(mode="after")
    def check_choices(self) -> SimulationConfig:
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got '{self.backend}'")
        if self.dtype not in DTYPES:
            raise ValueError(f"dtype must be one of {tuple(DTYPES)}, got '{self.dtype}'")
        if self.device != "auto":
            try:
                torch.device(self.device)
            except (RuntimeError, TypeError) as e:
                raise ValueError(f"invalid device '{self.device}': {e}") from e
        return self

    @property
    def torch_dtype(self) -> torch.dtype:
        return DTYPES[self.dtype]

    @classmethod
    def from_file(cls, path: str | Path) -> SimulationConfig:
        """Load a configuration from a JSON file."""
        data = json.loads(Path(path).read_text())
        return cls(**data)

    def to_file(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.model_dump(), indent=2))
