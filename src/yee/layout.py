from __future__ import annotations
import torch
from torch import Tensor


def to_engine_layout(native: Tensor) -> Tensor:
    """Reindex a backend result from native (z, y, x) order to field order (x, y, z).

    ``engine[c, b, a] == native[a, b, c]``. Always returns a fresh contiguous
    tensor, never a view of ``native``.
    """
    if native.dim() != 3:
        raise ValueError(f'expected a 3-D array, got shape {tuple(native.shape)}')
    return native.permute(2, 1, 0).clone(memory_format=torch.contiguous_format)
