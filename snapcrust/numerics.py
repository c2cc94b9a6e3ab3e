"""
snapcrust/numerics.py
---------------------
High-Performance Kernels using Numba JIT compilation.
Hot loops of the spatial index and the fused masked fill live here.
Kernels accept raw NumPy arrays only. No objects.
"""
import numpy as np
from numba import njit

# Cube faces, indexed by dominant axis and sign:
#   0: +x   1: -x   (u, v) = (y, z)
#   2: +y   3: -y   (u, v) = (z, x)
#   4: +z   5: -z   (u, v) = (x, y)
N_CUBE_FACES = 6


@njit(cache=True)
def cube_cell(x, y, z, side):
    """
    Maps a direction to its (face, iu, iv) cell on a cube-map of side x side
    cells per face. The zero vector maps to cell (0, 0, 0).
    """
    ax = abs(x)
    ay = abs(y)
    az = abs(z)

    if ax >= ay and ax >= az:
        m = ax
        face = 0 if x >= 0.0 else 1
        u = y
        v = z
    elif ay >= az:
        m = ay
        face = 2 if y >= 0.0 else 3
        u = z
        v = x
    else:
        m = az
        face = 4 if z >= 0.0 else 5
        u = x
        v = y

    if m == 0.0:
        return 0, 0, 0

    # [-1, 1] -> [0, side)
    iu = int((u / m + 1.0) * 0.5 * side)
    iv = int((v / m + 1.0) * 0.5 * side)
    if iu >= side: iu = side - 1
    if iv >= side: iv = side - 1
    if iu < 0: iu = 0
    if iv < 0: iv = 0
    return face, iu, iv


@njit(cache=True)
def partition_lookup_kernel(points, cell_ids):
    """
    O(1) per point: cube-map cell -> precomputed nearest vertex id.

    points:   [N, 3] float64
    cell_ids: [6, side, side] int64
    """
    side = cell_ids.shape[1]
    n = points.shape[0]
    out = np.empty(n, dtype=np.int64)
    for i in range(n):
        face, iu, iv = cube_cell(points[i, 0], points[i, 1], points[i, 2], side)
        out[i] = cell_ids[face, iu, iv]
    return out


@njit(cache=True)
def greedy_walk_kernel(points, seeds, pos, offsets, neighbor_ids):
    """
    Starting from each seed vertex, repeatedly steps to the strictly closest
    neighbor until no neighbor is closer than the current vertex.

    The neighbor graph is given in CSR form: the neighbors of vertex k are
    neighbor_ids[offsets[k]:offsets[k+1]].
    """
    n = points.shape[0]
    out = np.empty(n, dtype=np.int64)
    for i in range(n):
        px = points[i, 0]
        py = points[i, 1]
        pz = points[i, 2]

        current = seeds[i]
        dx = pos[current, 0] - px
        dy = pos[current, 1] - py
        dz = pos[current, 2] - pz
        best_d = dx*dx + dy*dy + dz*dz

        while True:
            best = current
            for k in range(offsets[current], offsets[current + 1]):
                j = neighbor_ids[k]
                dx = pos[j, 0] - px
                dy = pos[j, 1] - py
                dz = pos[j, 2] - pz
                d = dx*dx + dy*dy + dz*dz
                if d < best_d:
                    best_d = d
                    best = j
            if best == current:
                break
            current = best

        out[i] = current
    return out


@njit(cache=True)
def fill_into_selection_kernel(selection, sial, sima, age, col_sial, col_sima, col_age):
    """
    One pass over the mask, writing all three fields of every selected cell.
    Unselected cells are not touched.
    """
    for i in range(selection.shape[0]):
        if selection[i] == 1:
            sial[i] = col_sial
            sima[i] = col_sima
            age[i] = col_age
