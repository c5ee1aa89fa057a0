from __future__ import annotations

# Per-cell curl updates on the Yee grid in vacuum units (eps = mu = 1).
#
# H update (Faraday), forward differences; a neighbour past the high face reads 0:
#   H^{n+1/2} = H^{n-1/2} - dt/h * curl(E^n)
# E update (Ampere), backward differences; a neighbour below index 0 reads 0:
#   E^{n+1}   = E^{n}     + dt/h * curl(H^{n+1/2})
#
# Each kernel reads only its inputs at the current cell and one neighbour, so
# every cell is independent of every other within one invocation.
# permittivity / permeability are not inputs.


def update_magnetic_x(ctx, field_y, field_z, mag_x, dt):
    x, y, z = ctx.thread
    v = ctx.fetch(field_z, x, y + 1, z)
    w = ctx.fetch(field_y, x, y, z + 1)

    return mag_x[x, y, z] - dt * ((v - field_z[x, y, z]) - (w - field_y[x, y, z])) / ctx.constants['cell_size']


def update_magnetic_y(ctx, field_x, field_z, mag_y, dt):
    x, y, z = ctx.thread
    u = ctx.fetch(field_z, x + 1, y, z)
    w = ctx.fetch(field_x, x, y, z + 1)

    return mag_y[x, y, z] - dt * ((w - field_x[x, y, z]) - (u - field_z[x, y, z])) / ctx.constants['cell_size']


def update_magnetic_z(ctx, field_x, field_y, mag_z, dt):
    x, y, z = ctx.thread
    u = ctx.fetch(field_y, x + 1, y, z)
    v = ctx.fetch(field_x, x, y + 1, z)

    return mag_z[x, y, z] - dt * ((u - field_y[x, y, z]) - (v - field_x[x, y, z])) / ctx.constants['cell_size']


def update_electric_x(ctx, field_y, field_z, el_x, dt):
    x, y, z = ctx.thread
    v = ctx.fetch(field_z, x, y - 1, z)
    w = ctx.fetch(field_y, x, y, z - 1)

    return el_x[x, y, z] + dt * ((field_z[x, y, z] - v) - (field_y[x, y, z] - w)) / ctx.constants['cell_size']


def update_electric_y(ctx, field_x, field_z, el_y, dt):
    x, y, z = ctx.thread
    u = ctx.fetch(field_z, x - 1, y, z)
    w = ctx.fetch(field_x, x, y, z - 1)

    return el_y[x, y, z] + dt * ((field_x[x, y, z] - w) - (field_z[x, y, z] - u)) / ctx.constants['cell_size']


def update_electric_z(ctx, field_x, field_y, el_z, dt):
    x, y, z = ctx.thread
    u = ctx.fetch(field_y, x - 1, y, z)
    v = ctx.fetch(field_x, x, y - 1, z)

    return el_z[x, y, z] + dt * ((field_y[x, y, z] - u) - (field_x[x, y, z] - v)) / ctx.constants['cell_size']


# component -> (kernel, the two orthogonal components of the other family it reads)
MAGNETIC_KERNELS = {
    'magnetic_x': (update_magnetic_x, ('electric_y', 'electric_z')),
    'magnetic_y': (update_magnetic_y, ('electric_x', 'electric_z')),
    'magnetic_z': (update_magnetic_z, ('electric_x', 'electric_y')),
}

ELECTRIC_KERNELS = {
    'electric_x': (update_electric_x, ('magnetic_y', 'magnetic_z')),
    'electric_y': (update_electric_y, ('magnetic_x', 'magnetic_z')),
    'electric_z': (update_electric_z, ('magnetic_x', 'magnetic_y')),
}
