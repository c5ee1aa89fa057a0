from __future__ import annotations
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from .grid import FIELD_NAMES, SimulationState

_AXES = {'x': 0, 'y': 1, 'z': 2}
_LABELS = {
    'electric_x': 'Ex', 'electric_y': 'Ey', 'electric_z': 'Ez',
    'magnetic_x': 'Hx', 'magnetic_y': 'Hy', 'magnetic_z': 'Hz',
    'permittivity': 'eps', 'permeability': 'mu',
}


def plot_slice(state: SimulationState, component: str = 'electric_z', axis: str = 'z',
               index: int | None = None, cell_size: float = 1.0, cmap: str = 'RdBu') -> Figure:
    """Render one planar cut through a field of a snapshot.

    ``axis`` is the normal of the cut and ``index`` its position along that
    axis (the middle of the grid by default).
    """
    if component not in FIELD_NAMES:
        raise ValueError(f'unknown field {component!r}')
    if axis not in _AXES:
        raise ValueError(f"axis must be one of 'x', 'y', 'z', got {axis!r}")

    ax_idx = _AXES[axis]
    field = getattr(state, component).detach().cpu().numpy()
    if index is None:
        index = field.shape[ax_idx] // 2
    plane = field.take(index, axis=ax_idx)
    h_name, v_name = [a for a in _AXES if a != axis]
    nh, nv = plane.shape

    # symmetric colour scale so zero sits in the middle of the diverging map
    vmax = float(abs(plane).max()) or 1.0
    fig, ax = plt.subplots(figsize=(5, 4))
    im = ax.imshow(plane.T, origin='lower', cmap=cmap, vmin=-vmax, vmax=vmax,
                   extent=[0, nh * cell_size, 0, nv * cell_size])
    fig.colorbar(im, ax=ax, label=f'{_LABELS[component]} (a.u.)')
    ax.set_xlabel(h_name)
    ax.set_ylabel(v_name)
    ax.set_title(f'{_LABELS[component]} at {axis}={index}, t={state.time:.4g}')
    fig.tight_layout()
    return fig
