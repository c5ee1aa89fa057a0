"""Optional numerical diagnostics.

None of these are called by the update equations themselves; they exist so a
caller can check a run. The solver never clamps ``dt``.
"""

from __future__ import annotations

import math

import torch

from .grid import ELECTRIC_FIELDS, MAGNETIC_FIELDS, SimulationState


def courant_limit(cell_size: float, wave_speed: float = 1.0, ndim: int = 3) -> float:
    """Largest stable dt on a uniform grid: h / (c * sqrt(ndim))."""
    return cell_size / (wave_speed * math.sqrt(ndim))


def check_courant(dt: float, cell_size: float, wave_speed: float = 1.0) -> bool:
    """True when ``dt`` satisfies the vacuum Courant condition."""
    return abs(dt) <= courant_limit(cell_size, wave_speed)


def field_energy(state: SimulationState, cell_size: float) -> float:
    """Electromagnetic energy in vacuum units, 1/2 * sum(E^2 + H^2) * h^3."""
    total = 0.0
    for name in ELECTRIC_FIELDS + MAGNETIC_FIELDS:
        total += float(torch.sum(getattr(state, name).double() ** 2))
    return 0.5 * total * cell_size**3


def is_finite(state: SimulationState) -> bool:
    """False once any E or H value has become NaN or infinite."""
    return all(bool(torch.isfinite(getattr(state, name)).all())
               for name in ELECTRIC_FIELDS + MAGNETIC_FIELDS)
